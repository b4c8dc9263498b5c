"""Building and running the command that opens a picked file."""

import logging
import os
import subprocess
from collections.abc import Mapping

from .settings import EffectiveSettings

logger = logging.getLogger(__name__)

FILE_PLACEHOLDER = "{file}"
CWD_PLACEHOLDER = "{cwd}"

# Clears the screen and moves the cursor home before handing over the terminal
CLEAR_SCREEN = "\x1b[2J\x1b[H"


def shell_escape(arg: str) -> str:
    """Quote ``arg`` for a POSIX shell using single quotes."""
    return "'" + arg.replace("'", "'\"'\"'") + "'"


def get_default_editor(environ: Mapping[str, str] | None = None) -> str:
    """Get the user's preferred editor ($VISUAL, then $EDITOR, then vi)."""
    env = os.environ if environ is None else environ
    return env.get("VISUAL") or env.get("EDITOR") or "vi"


def build_open_command(
    file_path: str,
    cwd: str,
    settings: EffectiveSettings,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Build the shell command used to open ``file_path``.

    The ``{file}`` and ``{cwd}`` placeholders in the configured template are
    replaced with shell-escaped values. A template that never mentions
    ``{file}`` gets the escaped path appended.

    Args:
        file_path: The file to open.
        cwd: The working directory of the session.
        settings: Effective settings (``open_command`` may be None).
        environ: Environment mapping to use instead of ``os.environ``.

    Returns:
        The command string to hand to the shell.
    """
    template = (settings.open_command or "").strip()
    if not template:
        template = f"{get_default_editor(environ)} {FILE_PLACEHOLDER}"

    command = template.replace(FILE_PLACEHOLDER, shell_escape(file_path)).replace(
        CWD_PLACEHOLDER, shell_escape(cwd)
    )
    if FILE_PLACEHOLDER not in template:
        command += f" {shell_escape(file_path)}"
    return command


def _get_shell() -> str:
    return os.environ.get("SHELL") or "/bin/sh"


def run_open_command(file_path: str, cwd: str, settings: EffectiveSettings) -> None:
    """Run the open command for ``file_path``.

    In foreground mode this blocks until the command exits; the caller is
    responsible for handing over the terminal first. In background mode the
    command is started in its own session with its standard streams
    discarded, and this returns immediately.
    """
    command = build_open_command(file_path, cwd, settings)
    args = [_get_shell(), "-lc", command]
    logger.debug("Running open command (%s): %s", settings.open_mode, command)

    if settings.open_mode == "background":
        subprocess.Popen(
            args,
            cwd=cwd,
            env=os.environ.copy(),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
        return

    result = subprocess.run(args, cwd=cwd, env=os.environ.copy(), check=False)
    if result.returncode != 0:
        logger.debug("Open command exited with status %d", result.returncode)
