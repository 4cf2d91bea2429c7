"""
Tool provisioner — create a tool's security and settings files, once.

Flow per tool setup:
    locate templates → resolve conf folder (legacy in, legacy out)
    → security file (bootstrap master password)
    → settings file (render template with encrypted secrets)

Both files are guarded by existence checks only: a present file is
never touched again, so running the provisioner twice is safe.  Each
write runs inside a Step; a failing file is reported and the run
continues with the next one.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from toolconf.core.context import DOCUMENTATION_PAGE_CONF, FOLDER_CONF, ToolContext
from toolconf.core.engine.report import ProvisioningReport, SkipReason
from toolconf.core.models.tool import MAVEN, ToolProfile
from toolconf.core.services.file_access import FileAccess
from toolconf.core.services.folder_resolver import (
    ResolvedFolder,
    ensure_config_folder,
    find_template_folder,
    resolve_config_folder,
)
from toolconf.core.services.git_ops import retrieve_remote_url
from toolconf.core.services.secret_provisioning import (
    EncryptionFailure,
    Encryptor,
    InputSource,
    SecretProvisioner,
    render_security_file,
    security_file_argument,
)
from toolconf.core.services.variables import SYNTAXES, find_variables, render

logger = logging.getLogger(__name__)

SECURITY_FILE = "security-file"
SETTINGS_FILE = "settings-file"

ERROR_SETTINGS_FILE_MESSAGE = (
    "Failed to create settings file at: %s. For further details see:\n" + DOCUMENTATION_PAGE_CONF
)
ERROR_SETTINGS_SECURITY_FILE_MESSAGE = (
    "Failed to create settings security file at: %s. For further details see:\n"
    + DOCUMENTATION_PAGE_CONF
)
ERROR_CONF_FOLDER_MESSAGE = (
    "Failed to create configuration folder in: %s. For further details see:\n"
    + DOCUMENTATION_PAGE_CONF
)


class ToolProvisioner:
    """Idempotent provisioning of one tool's configuration files."""

    def __init__(
        self,
        context: ToolContext,
        profile: ToolProfile = MAVEN,
        *,
        encryptor: Encryptor,
        input_source: InputSource,
        file_access: FileAccess | None = None,
        remote_url_lookup: Callable[[Path], str | None] = retrieve_remote_url,
    ):
        self.context = context
        self.profile = profile
        self.secrets = SecretProvisioner(encryptor, input_source)
        self.files = file_access or FileAccess()
        self.syntax = SYNTAXES[profile.variable_syntax]
        self._remote_url_lookup = remote_url_lookup

    # ── Folders ─────────────────────────────────────────────────

    def templates_folder(self) -> ResolvedFolder | None:
        """The tool's template folder in the settings repository, or None."""
        template_root = self.context.settings_template_path
        if template_root is None:
            logger.warning("No settings templates found in %s", self.context.settings_path)
            return None
        return find_template_folder(
            template_root / FOLDER_CONF,
            self.profile.config_folder,
            self.profile.legacy_config_folder,
        )

    def conf_folder(self, legacy: bool = False, create: bool = True) -> ResolvedFolder | None:
        """The tool's configuration folder below the conf path."""
        return resolve_config_folder(
            self.context.conf_path,
            self.profile.config_folder,
            self.profile.legacy_config_folder,
            create_if_missing=create,
            legacy_mode=legacy,
        )

    # ── Provisioning ────────────────────────────────────────────

    def provision(self) -> ProvisioningReport:
        """Create the security and settings files where missing."""
        report = ProvisioningReport(tool=self.profile.name)

        templates = self.templates_folder()
        if templates is None:
            report.skip(SECURITY_FILE, SkipReason.TEMPLATE_MISSING)
            report.skip(SETTINGS_FILE, SkipReason.TEMPLATE_MISSING)
            return report

        try:
            conf = ensure_config_folder(
                self.context.conf_path,
                self.profile.config_folder,
                self.profile.legacy_config_folder,
                legacy_mode=templates.legacy,
            )
        except OSError as e:
            with report.new_step(f"Create {self.profile.name} configuration folder") as step:
                step.error(e, ERROR_CONF_FOLDER_MESSAGE, self.context.conf_path)
            return report

        security_file = conf.path / self.profile.security_file
        self.create_security_file(security_file, report)

        settings_file = conf.path / self.profile.settings_file
        self.create_settings_file(
            settings_file,
            security_file,
            templates.path / self.profile.settings_file,
            report,
        )
        return report

    def create_security_file(self, security_file: Path, report: ProvisioningReport) -> bool:
        """Bootstrap the master password into ``security_file`` if absent."""
        if self.files.exists(security_file):
            report.skip(SECURITY_FILE, SkipReason.ALREADY_PRESENT, str(security_file))
            return False

        name = f"Create {self.profile.name} settings security file at {security_file}"
        with report.new_step(name) as step:
            try:
                encrypted = self.secrets.bootstrap_master_password()
                self.files.write_text(security_file, render_security_file(encrypted))
            except (EncryptionFailure, OSError) as e:
                step.error(e, ERROR_SETTINGS_SECURITY_FILE_MESSAGE, security_file)
                return False
            report.created.append(str(security_file))
            step.success()
        return True

    def create_settings_file(
        self,
        settings_file: Path,
        security_file: Path,
        template_file: Path,
        report: ProvisioningReport,
    ) -> bool:
        """Render ``template_file`` into ``settings_file`` if absent."""
        if self.files.exists(settings_file):
            report.skip(SETTINGS_FILE, SkipReason.ALREADY_PRESENT, str(settings_file))
            return False
        if not self.files.exists(security_file):
            logger.warning("No settings security file at %s, not creating %s", security_file, settings_file)
            report.skip(SETTINGS_FILE, SkipReason.SECURITY_FILE_MISSING, str(security_file))
            return False
        if not self.files.exists(template_file):
            logger.warning("Missing %s settings template at %s. ", self.profile.name, template_file)
            report.skip(SETTINGS_FILE, SkipReason.TEMPLATE_MISSING, str(template_file))
            return False

        with report.new_step(f"Create {self.profile.name} settings file at {settings_file}") as step:
            try:
                self.files.mkdirs(settings_file.parent)
                if self.uses_default_settings():
                    self.files.copy_file(template_file, settings_file)
                else:
                    content = self.files.read_text(template_file)
                    content = self.render_settings(content, security_file)
                    self.files.write_text(settings_file, content)
            # ValueError: template is not valid UTF-8
            except (EncryptionFailure, OSError, ValueError) as e:
                step.error(e, ERROR_SETTINGS_FILE_MESSAGE, settings_file)
                return False
            report.created.append(str(settings_file))
            step.success()
        return True

    def uses_default_settings(self) -> bool:
        """Whether the settings repository is the default one.

        Its templates carry no secrets and are copied as they are.
        """
        url = self._remote_url_lookup(self.context.settings_path)
        if url is None:
            logger.warning("Failed to determine git remote URL for settings folder.")
            return False
        if url == self.context.default_settings_url:
            logger.info("Settings are the defaults from %s, copying template as is", url)
            return True
        return False

    def render_settings(self, content: str, security_file: Path) -> str:
        """Replace the template's placeholders with encrypted secrets."""
        values: dict[str, str] = {}
        for variable in find_variables(content, self.syntax):
            if variable in self.context.variables:
                values[variable] = self.context.variables[variable]
            else:
                values[variable] = self.secrets.encrypt_secret(variable, security_file)
        return render(content, values, self.syntax)

    # ── Tool arguments ──────────────────────────────────────────

    def build_args(self) -> str | None:
        """Command-line arguments pointing the tool at the provisioned files.

        Returns None when no settings file has been provisioned yet.
        """
        conf = self.conf_folder(create=False)
        if conf is None:
            return None
        settings_file = conf.path / self.profile.settings_file
        if not self.files.exists(settings_file):
            return None
        security = security_file_argument(self.profile, conf.path / self.profile.security_file)
        return f"{self.profile.settings_file_arg} {settings_file} {security}"
