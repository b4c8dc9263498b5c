"""open-session-files - Pick a file the agent edited this session and open it.

Reads the pi session log for the current directory (or the one given with
--session), collects the files touched by edit/write tool calls, and shows a
fuzzy-search picker. The picked file is opened with the configured command
(default: $VISUAL / $EDITOR / vi).
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from .launcher import build_open_command
from .rich_utils import print_edited_files, print_status
from .session import SessionFile, find_latest_session, get_session_edited_files
from .settings import get_agent_dir, load_settings

logger = logging.getLogger(__name__)


def _resolve_session_path(session_arg: str | None, cwd: str) -> Path | None:
    """Get the session file to read, or None if there isn't one."""
    if session_arg:
        path = Path(session_arg).expanduser()
        return path if path.is_file() else None
    return find_latest_session(cwd, get_agent_dir())


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the open-session-files command."""
    parser = argparse.ArgumentParser(
        prog="open-session-files",
        description="Pick a file edited by the agent in a pi session and open it",
    )
    parser.add_argument(
        "-s",
        "--session",
        help="Session JSONL file to read (default: latest session for --cwd)",
    )
    parser.add_argument(
        "-C",
        "--cwd",
        default=os.getcwd(),
        help="Working directory of the session (default: current directory)",
    )
    parser.add_argument(
        "-l",
        "--list",
        action="store_true",
        help="Print the edited files and exit",
    )
    parser.add_argument(
        "-p",
        "--print-command",
        metavar="PATH",
        help="Print the command that would open PATH and exit",
    )
    parser.add_argument(
        "--no-auto-open",
        action="store_true",
        help="Do not open the picker on startup (use the shortcut instead)",
    )
    parser.add_argument(
        "--log-file",
        help="Write debug logs to this file",
    )

    args = parser.parse_args(argv)

    if args.log_file:
        logging.basicConfig(
            filename=args.log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )

    cwd = os.path.abspath(args.cwd)
    settings = load_settings(cwd)

    if args.print_command:
        print(build_open_command(args.print_command, cwd, settings))
        return 0

    session_path = _resolve_session_path(args.session, cwd)
    if session_path is None:
        if args.session:
            print_status(f"Error: session file not found: {args.session}", "error")
        else:
            print_status(f"Error: no pi session found for {cwd}", "error")
        return 1

    logger.debug("Using session %s", session_path)
    session = SessionFile(session_path)

    if args.list:
        try:
            files = get_session_edited_files(session)
        except OSError as e:
            print_status(f"Error: could not read session: {e}", "error")
            return 1
        print_edited_files(files, cwd, title=session_path.name)
        return 0

    from .tui import OpenSessionFilesApp

    app = OpenSessionFilesApp(
        session=session,
        cwd=cwd,
        shortcut=settings.shortcut,
        auto_open=not args.no_auto_open,
    )
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
