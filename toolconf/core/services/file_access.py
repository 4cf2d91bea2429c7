"""
File access — the filesystem collaborator of the provisioner.

Existence checks, directory creation, text read/write and
download-to-path.  Text is UTF-8 and line endings pass through
untouched.  Every write goes to a temp file in the target folder and is
renamed into place, so an interrupted write never leaves a truncated
target behind.  Errors are ``OSError`` subclasses (``UnicodeDecodeError``
for undecodable text) and propagate to the caller, which decides
whether they end a step.
"""

from __future__ import annotations

import logging
import os
import tempfile
import urllib.request
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

_USER_AGENT = "toolconf/1.0"
_CHUNK = 8192


class FileAccess:
    """Filesystem operations used during provisioning."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def mkdirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def read_text(self, path: Path) -> str:
        return path.read_bytes().decode("utf-8")

    def write_text(self, path: Path, content: str) -> None:
        self.write_bytes(path, content.encode("utf-8"))

    def write_bytes(self, path: Path, data: bytes) -> None:
        self._write_atomic(path, iter([data]))
        logger.debug("Written %d bytes to %s", len(data), path)

    def copy_file(self, source: Path, target: Path) -> None:
        """Copy ``source`` to ``target`` byte for byte."""
        self.write_bytes(target, source.read_bytes())

    def download(self, url: str, target: Path, timeout: int = 60) -> int:
        """Download ``url`` to ``target``, creating parent folders.

        A failed download leaves ``target`` as it was before the call.

        Returns:
            Number of bytes written.

        Raises:
            OSError: On network or write failures (``URLError`` included).
        """
        self.mkdirs(target.parent)
        logger.info("Downloading %s to %s", url, target)
        req = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            downloaded = self._write_atomic(target, iter(lambda: resp.read(_CHUNK), b""))
        logger.debug("Downloaded %d bytes from %s", downloaded, url)
        return downloaded

    def _write_atomic(self, path: Path, chunks: Iterator[bytes]) -> int:
        """Stream ``chunks`` into a temp file next to ``path``, then rename."""
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        tmp = Path(tmp_name)
        written = 0
        try:
            with os.fdopen(fd, "wb") as f:
                for chunk in chunks:
                    f.write(chunk)
                    written += len(chunk)
            tmp.replace(path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise
        return written
