from __future__ import annotations

import importlib.metadata
import subprocess
from pathlib import Path
from typing import Optional


def _git_commit(cwd: Path) -> Optional[str]:
    """Short commit hash of the checkout containing cwd, if any."""
    try:
        out = subprocess.check_output(
            ["git", "rev-parse", "--short=7", "HEAD"],
            cwd=str(cwd),
            stderr=subprocess.DEVNULL,
        )
    except (subprocess.CalledProcessError, FileNotFoundError, OSError):
        return None
    return out.decode().strip() or None


def get_version_string() -> str:
    """Installed package version, plus the git commit when run from a checkout."""
    try:
        version = importlib.metadata.version("iscroll")
    except importlib.metadata.PackageNotFoundError:
        version = "unknown"
    commit = _git_commit(Path(__file__).resolve().parent)
    return f"{version} ({commit})" if commit else version
