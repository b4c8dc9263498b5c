"""Settings loading for open-session-files.

Settings come from the pi settings files (global, then project-local) with the
``PI_OPEN_FILE_*`` environment variables layered on top.
"""

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

logger = logging.getLogger(__name__)

OpenMode = Literal["foreground", "background"]

SETTINGS_KEY = "openSessionFiles"
DEFAULT_OPEN_MODE: OpenMode = "foreground"
DEFAULT_SHORTCUT = "alt+o"

ENV_COMMAND = "PI_OPEN_FILE_COMMAND"
ENV_MODE = "PI_OPEN_FILE_MODE"
ENV_SHORTCUT = "PI_OPEN_FILE_SHORTCUT"
ENV_AGENT_DIR = "PI_CODING_AGENT_DIR"


@dataclass(frozen=True)
class EffectiveSettings:
    """Resolved settings for a single picker invocation."""

    open_command: str | None = None
    open_mode: OpenMode = DEFAULT_OPEN_MODE
    shortcut: str = DEFAULT_SHORTCUT


def normalize_mode(value: object) -> OpenMode | None:
    """Return ``value`` if it is a recognized open mode, else None."""
    if value == "foreground":
        return "foreground"
    if value == "background":
        return "background"
    return None


def get_agent_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Get the pi agent directory.

    Respects PI_CODING_AGENT_DIR (used by sandboxed runs), otherwise
    falls back to ~/.pi/agent.
    """
    env = os.environ if environ is None else environ
    override = env.get(ENV_AGENT_DIR, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".pi" / "agent"


def get_settings_paths(
    cwd: str | Path, environ: Mapping[str, str] | None = None
) -> list[Path]:
    """Get the settings files to read, lowest precedence first."""
    return [
        get_agent_dir(environ) / "settings.json",
        Path(cwd) / ".pi" / "settings.json",
    ]


def _non_blank(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _read_settings_file(path: Path) -> dict[str, Any]:
    """Read the open-session-files section of a single settings file.

    Args:
        path: Path to a pi settings.json file.

    Returns:
        The valid fields found in the file, keyed by their settings name.
        Missing or malformed files yield an empty dict.
    """
    if not path.is_file():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.debug("Ignoring unreadable settings file %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        logger.debug("Ignoring settings file %s: top level is not an object", path)
        return {}

    section = data.get(SETTINGS_KEY)
    if not isinstance(section, dict):
        return {}

    fields: dict[str, Any] = {}
    command = _non_blank(section.get("openCommand"))
    if command is not None:
        fields["openCommand"] = command
    mode = normalize_mode(section.get("openMode"))
    if mode is not None:
        fields["openMode"] = mode
    shortcut = _non_blank(section.get("shortcut"))
    if shortcut is not None:
        fields["shortcut"] = shortcut
    return fields


def _read_environment(environ: Mapping[str, str]) -> dict[str, Any]:
    """Read the PI_OPEN_FILE_* overrides from the environment."""
    fields: dict[str, Any] = {}
    command = _non_blank(environ.get(ENV_COMMAND))
    if command is not None:
        fields["openCommand"] = command
    mode = normalize_mode(environ.get(ENV_MODE, "").strip())
    if mode is not None:
        fields["openMode"] = mode
    shortcut = _non_blank(environ.get(ENV_SHORTCUT))
    if shortcut is not None:
        fields["shortcut"] = shortcut
    return fields


def load_settings(
    cwd: str | Path, environ: Mapping[str, str] | None = None
) -> EffectiveSettings:
    """Load the effective settings for ``cwd``.

    The global settings file is read first, then the project settings file,
    and finally the environment. Each source only overrides the fields it
    actually sets. Defaults are applied after merging.

    Args:
        cwd: The project directory (its ``.pi/settings.json`` is consulted).
        environ: Environment mapping to use instead of ``os.environ``.

    Returns:
        The resolved settings.
    """
    env = os.environ if environ is None else environ

    merged: dict[str, Any] = {}
    for path in get_settings_paths(cwd, env):
        merged.update(_read_settings_file(path))
    merged.update(_read_environment(env))

    return EffectiveSettings(
        open_command=merged.get("openCommand"),
        open_mode=merged.get("openMode", DEFAULT_OPEN_MODE),
        shortcut=merged.get("shortcut", DEFAULT_SHORTCUT).lower(),
    )
