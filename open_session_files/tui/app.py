"""Main Textual App for open-session-files."""

import logging

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Footer, Header, Static

from ..session import SessionSource, get_session_edited_files
from ..settings import DEFAULT_SHORTCUT
from .actions import OpenFileMixin
from .commands import OpenFileCommands
from .widgets import EditedFilesPanel

logger = logging.getLogger(__name__)


class OpenSessionFilesApp(OpenFileMixin, App[None]):
    """TUI application for opening files edited in a pi session."""

    TITLE = "open-session-files"
    CSS_PATH = "styles.tcss"
    COMMANDS = App.COMMANDS | {OpenFileCommands}

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "reload", "Reload"),
    ]

    def __init__(
        self,
        session: SessionSource,
        cwd: str,
        shortcut: str = DEFAULT_SHORTCUT,
        auto_open: bool = True,
    ) -> None:
        """Initialize the app.

        Args:
            session: Source of the session's current branch of entries.
            cwd: Working directory of the session.
            shortcut: Key that opens the file picker (e.g. "alt+o").
            auto_open: Whether to open the picker as soon as the app starts.
        """
        super().__init__()
        self.session = session
        self.cwd = cwd
        self.shortcut = shortcut
        self.auto_open = auto_open
        self._picker_open = False

    def compose(self) -> ComposeResult:
        """Compose the main layout."""
        yield Header()
        with VerticalScroll(id="files-scroll"):
            yield EditedFilesPanel(id="edited-files")
        yield Static(
            f" {self.shortcut} or the open-file command: pick a file to open",
            id="shortcut-hint",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Show the session summary and, if requested, the picker."""
        self._refresh_edited_files()
        if self.auto_open:
            self.call_later(self.action_open_file)

    def on_key(self, event: events.Key) -> None:
        """Open the picker when the configured shortcut is pressed."""
        if event.key == self.shortcut:
            event.prevent_default()
            event.stop()
            self.action_open_file()

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Leave ctrl+p to the picker's navigation while it is open."""
        if action == "command_palette" and self._picker_open:
            return False
        return True

    def action_reload(self) -> None:
        """Re-read the session and refresh the summary."""
        self._refresh_edited_files()

    def _refresh_edited_files(self) -> None:
        """Reload the edited files list from the session."""
        panel = self.query_one("#edited-files", EditedFilesPanel)
        try:
            files = get_session_edited_files(self.session)
        except OSError as e:
            logger.debug("Could not read session: %s", e)
            files = []
        panel.update_files(files, self.cwd)
