"""Open-file actions for the open-session-files TUI app."""

import logging
import os
import sys

from textual.app import SuspendNotSupported

from ...launcher import CLEAR_SCREEN, run_open_command
from ...ranking import build_candidates
from ...session import SessionSource, get_session_edited_files
from ...settings import EffectiveSettings, load_settings
from ..modals import FilePickerModal

logger = logging.getLogger(__name__)


class OpenFileMixin:
    """Mixin providing the pick-and-open flow."""

    # Type hints for attributes provided by the app
    session: SessionSource
    cwd: str
    _picker_open: bool

    def action_open_file(self) -> None:
        """Pick a file edited in this session and open it."""
        if self._picker_open:
            return

        try:
            files = get_session_edited_files(self.session)
        except OSError as e:
            logger.debug("Could not read session: %s", e)
            self.notify(f"Could not read session: {e}", severity="error")  # type: ignore[attr-defined]
            return

        if not files:
            self.notify(  # type: ignore[attr-defined]
                "No files edited by the agent in this session", severity="warning"
            )
            return

        settings = load_settings(self.cwd)
        candidates = build_candidates(files, self.cwd)
        if not candidates:
            self.notify("No existing edited files to open", severity="warning")  # type: ignore[attr-defined]
            return

        def on_dismiss(selected: str | None) -> None:
            self._picker_open = False
            if selected is None:
                return
            self.call_later(self._open_selected_file, selected, settings)  # type: ignore[attr-defined]

        self._picker_open = True
        self.push_screen(FilePickerModal(candidates), on_dismiss)  # type: ignore[attr-defined]

    def _open_selected_file(self, selected: str, settings: EffectiveSettings) -> None:
        """Launch the open command for a picked file."""
        full_path = selected
        if not os.path.isabs(full_path):
            full_path = os.path.join(self.cwd, selected)
        if not os.path.exists(full_path):
            self.notify(f"File no longer exists: {selected}", severity="warning")  # type: ignore[attr-defined]
            return

        if settings.open_mode == "background":
            try:
                run_open_command(selected, self.cwd, settings)
            except OSError as e:
                self._notify_launch_failure(e)
                return
            self.notify("Launched open command in background")  # type: ignore[attr-defined]
            return

        launch_error: OSError | None = None
        try:
            with self.suspend():  # type: ignore[attr-defined]
                sys.stdout.write(CLEAR_SCREEN)
                sys.stdout.flush()
                try:
                    run_open_command(selected, self.cwd, settings)
                except OSError as e:
                    launch_error = e
        except SuspendNotSupported:
            self.notify(  # type: ignore[attr-defined]
                "Cannot hand the terminal over in this environment", severity="error"
            )
            return
        self.refresh(repaint=True, layout=True)  # type: ignore[attr-defined]
        self._refresh_edited_files()  # type: ignore[attr-defined]
        if launch_error is not None:
            self._notify_launch_failure(launch_error)

    def _notify_launch_failure(self, error: OSError) -> None:
        logger.debug("Open command failed to start: %s", error)
        self.notify(f"Could not run open command: {error}", severity="error")  # type: ignore[attr-defined]
