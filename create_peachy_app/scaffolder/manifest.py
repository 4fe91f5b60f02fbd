"""Reading, rewriting and summarising the project manifest (``package.json``)."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

from ..utils import load_json, save_json

INITIAL_VERSION = "0.0.0"
REMOVED_FIELDS = ("keywords", "author")

NO_SCRIPTS_MESSAGE = "No npm scripts available."
SCRIPTS_UNAVAILABLE_MESSAGE = "Unable to fetch npm scripts."


class ManifestError(Exception):
    """Raised when the manifest cannot be read, parsed or written."""


def rewrite_manifest(manifest: dict[str, Any], project_name: str) -> dict[str, Any]:
    """Return a copy of *manifest* customised for a new project.

    ``name``, ``version`` and ``description`` are overwritten in place (keys
    that did not exist are appended in that order), ``keywords`` and
    ``author`` are dropped, and every other key is passed through unchanged.
    """
    result = dict(manifest)
    result["name"] = project_name
    for key in REMOVED_FIELDS:
        result.pop(key, None)
    result["version"] = INITIAL_VERSION
    result["description"] = ""
    return result


def read_manifest(path: str | Path) -> dict[str, Any]:
    """Load the manifest at *path*.

    Raises:
        ManifestError: If the file is missing, not JSON, or not an object.
    """
    try:
        return load_json(path)
    except (OSError, ValueError) as exc:
        # json.JSONDecodeError is a ValueError subclass.
        raise ManifestError(f"Could not read manifest {path}: {exc}") from exc


def write_manifest(manifest: dict[str, Any], path: str | Path) -> None:
    try:
        save_json(manifest, path)
    except (OSError, TypeError) as exc:
        raise ManifestError(f"Could not write manifest {path}: {exc}") from exc


def customize_manifest(path: str | Path, project_name: str) -> dict[str, Any]:
    """Read, rewrite and write back the manifest at *path*.

    Returns:
        The manifest as written.
    """
    manifest = rewrite_manifest(read_manifest(path), project_name)
    write_manifest(manifest, path)
    return manifest


def format_scripts(scripts: Any, run_hint: Callable[[str], str] | None = None) -> str:
    """Format a ``scripts`` mapping as ``<invocation>  ->  <command>`` lines.

    *run_hint* turns a script name into the command a user types; it defaults
    to ``npm run <name>``.  Anything other than a non-empty mapping yields
    ``NO_SCRIPTS_MESSAGE``.
    """
    hint = run_hint or _npm_run
    if not isinstance(scripts, dict) or not scripts:
        return NO_SCRIPTS_MESSAGE
    return "\n".join(
        f"{hint(name)}  ->  {command}" for name, command in scripts.items()
    )


def describe_scripts(path: str | Path, run_hint: Callable[[str], str] | None = None) -> str:
    """Re-read the manifest at *path* and format its scripts for display.

    Raises:
        ManifestError: If the manifest can no longer be read.
    """
    return format_scripts(read_manifest(path).get("scripts"), run_hint)


def _npm_run(name: str) -> str:
    return f"npm run {name}"


__all__ = [
    "INITIAL_VERSION",
    "NO_SCRIPTS_MESSAGE",
    "REMOVED_FIELDS",
    "SCRIPTS_UNAVAILABLE_MESSAGE",
    "ManifestError",
    "customize_manifest",
    "describe_scripts",
    "format_scripts",
    "read_manifest",
    "rewrite_manifest",
    "write_manifest",
]
