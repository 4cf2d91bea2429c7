"""
Git operations — remote lookup for the settings repository.

Uses the git CLI — never raw API calls.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


def run_git(
    *args: str,
    cwd: Path,
    timeout: int = 15,
    check: bool = False,
) -> subprocess.CompletedProcess[str]:
    """Run a git command and return the result."""
    return subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        timeout=timeout,
        check=check,
    )


def retrieve_remote_url(path: Path, remote: str = "origin") -> str | None:
    """Return the URL of ``remote`` for the repository at ``path``.

    Returns None when ``path`` is missing, is not a repository, has no
    such remote, or git is not installed.
    """
    if not path.is_dir():
        logger.debug("Cannot look up git remote, %s is not a directory", path)
        return None
    try:
        r = run_git("remote", "get-url", remote, cwd=path)
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("git remote lookup failed in %s: %s", path, e)
        return None
    if r.returncode != 0:
        logger.debug("git remote get-url %s failed in %s: %s", remote, path, r.stderr.strip())
        return None
    url = r.stdout.strip()
    return url or None
