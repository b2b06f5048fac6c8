# version.py — package version: installed metadata first, then the checkout's VERSION file
from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as metadata_version
from pathlib import Path

from .logger import APP_LOGGER

DIST_NAME = "spacemichael"
DEFAULT_APP_VERSION = "0.0.0"
# spacemichael/core/version.py -> project root
VERSION_FILE = Path(__file__).resolve().parents[2] / "VERSION"


def installed_version(dist: str = DIST_NAME) -> str | None:
    try:
        return metadata_version(dist)
    except PackageNotFoundError:
        return None


def checkout_version(path: Path = VERSION_FILE) -> str | None:
    try:
        return path.read_text(encoding="utf-8").strip() or None
    except OSError as exc:
        APP_LOGGER.debug(f"No VERSION file at {path}: {exc}")
        return None


def get_app_version(default: str = DEFAULT_APP_VERSION) -> str:
    """Installed distribution version, else the VERSION file, else ``default``."""
    found = installed_version() or checkout_version()
    if found is None:
        APP_LOGGER.warning(f"Could not determine version, using {default}")
        return default
    return found


APP_VERSION = get_app_version()
