"""Version lookup for calcscript."""

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path

_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def _source_tree_version() -> str | None:
    # Only trust a pyproject that belongs to this project (editable checkout)
    if not _PYPROJECT.is_file():
        return None
    try:
        project = tomllib.loads(_PYPROJECT.read_text(encoding="utf-8")).get("project", {})
    except tomllib.TOMLDecodeError:
        return None
    if project.get("name") != "calcscript":
        return None
    return project.get("version")


def get_version() -> str:
    """Version of the source checkout, else of the installed distribution."""
    if found := _source_tree_version():
        return found
    try:
        return _metadata_version("calcscript")
    except PackageNotFoundError:
        return "0.0.0"
