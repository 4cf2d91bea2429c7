"""
Shared test fixtures and configuration.
"""

import errno
import os
from pathlib import Path

import pytest

from toolconf.adapters.mock import MockAdapter
from toolconf.adapters.registry import AdapterRegistry
from toolconf.core.context import ToolContext
from toolconf.core.models.tool import MAVEN
from toolconf.core.services import file_access
from toolconf.core.services.secret_provisioning import ProcessEncryptor


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """An empty workspace root."""
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def context(workspace: Path) -> ToolContext:
    """Context with default folders below the workspace."""
    return ToolContext(workspace_root=workspace)


@pytest.fixture
def process() -> MockAdapter:
    """Mock standing in for the process adapter."""
    mock = MockAdapter(adapter_name="process")
    mock.set_output("encrypt-master-password", "{masterCipher==}")
    mock.set_output("encrypt-password", "{secretCipher==}")
    return mock


@pytest.fixture
def registry(process: MockAdapter) -> AdapterRegistry:
    reg = AdapterRegistry()
    reg.register(process)
    return reg


@pytest.fixture
def encryptor(registry: AdapterRegistry, workspace: Path) -> ProcessEncryptor:
    return ProcessEncryptor(MAVEN, registry, workspace_root=workspace)


@pytest.fixture
def disk_full(monkeypatch: pytest.MonkeyPatch):
    """File writes get half of their bytes onto disk, then fail with ENOSPC."""
    real_fdopen = os.fdopen

    class HalfWritten:
        def __init__(self, f):
            self._f = f

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            self._f.close()

        def write(self, data: bytes) -> int:
            self._f.write(data[: len(data) // 2])
            raise OSError(errno.ENOSPC, "No space left on device")

    monkeypatch.setattr(file_access.os, "fdopen", lambda fd, mode: HalfWritten(real_fdopen(fd, mode)))
