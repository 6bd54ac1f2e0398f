"""Build version detection, shared by main.py and the health router."""

from __future__ import annotations

from pathlib import Path

from advisor_match import __version__

_PROJECT_ROOT = Path(__file__).resolve().parents[3]


def get_build_version() -> str:
    """Return the package version with a build commit suffix when one is baked in."""
    commit_file = _PROJECT_ROOT / "BUILD_COMMIT"
    if commit_file.is_file():
        commit = commit_file.read_text().strip()
        if commit and commit != "dev":
            return f"{__version__}-{commit}"
    return f"{__version__}-dev"


#: Computed once at import time.
BUILD_VERSION = get_build_version()
