"""
Secret provisioning — master password bootstrap and secret encryption.

Encryption is never done here.  The wrapped tool encrypts with its
own implementation; this service builds the command lines, runs them
through the adapter registry and captures the first line of output.

Security invariants:
- Plain secret values are never logged and never written to disk
- Actions carrying plain values are flagged ``sensitive`` so the
  process adapter redacts their arguments
- Only the encrypted result ends up in the rendered settings file
"""

from __future__ import annotations

import base64
import logging
import secrets
from abc import ABC, abstractmethod
from pathlib import Path

from toolconf.adapters.registry import AdapterRegistry
from toolconf.core.models.action import Action, Receipt
from toolconf.core.models.tool import ToolProfile

logger = logging.getLogger(__name__)

MASTER_PASSWORD_BYTES = 20

SECURITY_FILE_TEMPLATE = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    "<settingsSecurity>\n"
    "  <master>{master}</master>\n"
    "</settingsSecurity>"
)


class EncryptionFailure(Exception):
    """The external command returned no usable encrypted value."""


class InputSource(ABC):
    """Where plain secret values come from (usually the terminal)."""

    @abstractmethod
    def ask_for_input(self, prompt: str) -> str:
        """Ask the user for a value."""


class Encryptor(ABC):
    """Capability to encrypt values with the tool's own implementation."""

    @abstractmethod
    def encrypt_master_password(self, encoded_password: str) -> str:
        """Encrypt a new master password."""

    @abstractmethod
    def encrypt_password(self, plain_value: str, security_file: Path) -> str:
        """Encrypt a secret with the master password in ``security_file``."""


def security_file_argument(profile: ToolProfile, security_file: Path) -> str:
    """``-Dsettings.security=<path>`` with backslashes escaped."""
    escaped = str(security_file).replace("\\", "\\\\")
    return f"{profile.security_file_property}={escaped}"


def render_security_file(encrypted_master_password: str) -> str:
    """The security file document holding the encrypted master password."""
    return SECURITY_FILE_TEMPLATE.format(master=encrypted_master_password)


def first_line(receipt: Receipt, what: str) -> str:
    """The first stdout line of a successful receipt.

    Raises:
        EncryptionFailure: If the command failed or printed nothing.
    """
    if not receipt.ok:
        raise EncryptionFailure(f"{what} failed: {receipt.error or receipt.status}")
    lines = receipt.lines
    value = lines[0].strip() if lines else ""
    if not value:
        raise EncryptionFailure(f"{what} produced no output")
    return value


class ProcessEncryptor(Encryptor):
    """Encryptor running the tool's encrypt sub-commands as processes."""

    def __init__(
        self,
        profile: ToolProfile,
        registry: AdapterRegistry,
        workspace_root: Path | None = None,
        adapter: str = "process",
    ):
        self._profile = profile
        self._registry = registry
        self._workspace_root = workspace_root
        self._adapter = adapter

    def encrypt_master_password(self, encoded_password: str) -> str:
        return self._run(
            "encrypt-master-password",
            [self._profile.encrypt_master_password_arg, encoded_password],
        )

    def encrypt_password(self, plain_value: str, security_file: Path) -> str:
        return self._run(
            "encrypt-password",
            [
                self._profile.encrypt_password_arg,
                plain_value,
                security_file_argument(self._profile, security_file),
            ],
        )

    def _run(self, action_id: str, args: list[str]) -> str:
        action = Action(
            id=action_id,
            name=f"{self._profile.name} {action_id}",
            adapter=self._adapter,
            params={
                "executable": self._profile.command,
                "args": args,
                "sensitive": True,
            },
        )
        root = str(self._workspace_root) if self._workspace_root else "."
        receipt = self._registry.execute_action(action, workspace_root=root)
        return first_line(receipt, action.name)


class SecretProvisioner:
    """Produces the encrypted values written by the provisioner."""

    def __init__(self, encryptor: Encryptor, input_source: InputSource):
        self._encryptor = encryptor
        self._input = input_source

    def bootstrap_master_password(self) -> str:
        """Generate, encode and encrypt a fresh master password."""
        random_bytes = secrets.token_bytes(MASTER_PASSWORD_BYTES)
        encoded = base64.b64encode(random_bytes).decode("ascii")
        encrypted = self._encryptor.encrypt_master_password(encoded)
        logger.debug("Master password encrypted")
        return encrypted

    def encrypt_secret(self, variable: str, security_file: Path) -> str:
        """Prompt for the value of ``variable`` and encrypt it."""
        plain = self._input.ask_for_input(f"Please enter secret value for variable {variable}:")
        encrypted = self._encryptor.encrypt_password(plain, security_file)
        logger.info("Encrypted as %s", encrypted)
        return encrypted
