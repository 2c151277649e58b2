"""Version lookup for mapcrud."""

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path

DIST_NAME = "mapcrud"

_SOURCE_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def _source_version() -> str | None:
    """Version declared by the source checkout's pyproject, if this is one."""
    try:
        with _SOURCE_PYPROJECT.open("rb") as f:
            project = tomllib.load(f).get("project", {})
    except (OSError, tomllib.TOMLDecodeError):
        return None
    if project.get("name") != DIST_NAME:
        return None
    return project.get("version")


def get_version() -> str:
    """Source checkout version first, then installed metadata, else ``0.0.0``."""
    if version := _source_version():
        return version
    try:
        return _metadata_version(DIST_NAME)
    except PackageNotFoundError:
        return "0.0.0"
