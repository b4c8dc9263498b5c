"""Fuzzy file picker modal for session-edited files."""

from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Label, OptionList, Rule, Static
from textual.widgets.option_list import Option

from ...picker import PickerState
from ...ranking import Candidate

PICKER_TITLE = "open-session-files"

HELP_TEXT = (
    " ↑↓ navigate • type fuzzy filter • backspace delete • ctrl+u clear"
    " • enter open • esc cancel"
)


class _PickerList(OptionList, can_focus=False):
    """OptionList that never takes focus, so keystrokes reach the modal."""


class FilePickerModal(ModalScreen[str | None]):
    """Modal for picking one of the files edited in the session.

    Dismisses exactly once, with the chosen path or None when cancelled.
    """

    def __init__(self, candidates: list[Candidate]) -> None:
        """Initialize the file picker modal.

        Args:
            candidates: The files to choose from, in their default order.
        """
        super().__init__()
        self.state = PickerState(candidates)
        self._dismissed = False

    def compose(self) -> ComposeResult:
        """Compose the modal layout."""
        with Vertical(id="picker-container"):
            yield Rule(id="picker-top-border")
            yield Label(f" {PICKER_TITLE}", id="picker-title")
            yield Static("", id="picker-filter")
            yield _PickerList(id="picker-list")
            yield Static("", id="picker-scroll-info")
            yield Static(HELP_TEXT, id="picker-help")
            yield Rule(id="picker-bottom-border")

    def on_mount(self) -> None:
        """Populate the list on mount."""
        self._refresh_view()

    def on_resize(self, _event: events.Resize) -> None:
        """Redraw everything after a terminal resize."""
        self.invalidate()

    def invalidate(self) -> None:
        """Force a full redraw without handling any input."""
        self._refresh_view()
        for widget in self.query_one("#picker-container").children:
            widget.refresh()

    def filter_status(self) -> str:
        """The text shown on the filter line."""
        return f" filter: {self.state.filter or '(empty)'}"

    def _refresh_view(self) -> None:
        """Sync the filter line and option list with the picker state."""
        self.query_one("#picker-filter", Static).update(
            Text(self.filter_status(), style="dim")
        )

        option_list = self.query_one("#picker-list", _PickerList)
        option_list.clear_options()
        rows = self.state.visible_rows()
        option_list.add_options([Option(Text(c.path), id=c.path) for c in rows])
        if rows:
            option_list.highlighted = self.state.highlighted - self.state.scroll_offset

        scroll_info = self.query_one("#picker-scroll-info", Static)
        total = len(self.state.ranked)
        if total == 0:
            scroll_info.update(Text("  No matching files", style="yellow"))
        elif total > self.state.max_rows:
            scroll_info.update(
                Text(f"  ({self.state.highlighted + 1}/{total})", style="dim")
            )
        else:
            scroll_info.update("")
        scroll_info.display = total == 0 or total > self.state.max_rows

    def _finish(self) -> None:
        if self._dismissed:
            return
        self._dismissed = True
        self.dismiss(self.state.result)

    def on_key(self, event: events.Key) -> None:
        """Route keystrokes through the picker state."""
        if not self.state.handle_input(event.key, event.character):
            return
        event.prevent_default()
        event.stop()
        if self.state.done:
            self._finish()
        else:
            self._refresh_view()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        """Handle a click on a list row."""
        event.stop()
        if self.state.done:
            return
        self.state.highlighted = self.state.scroll_offset + event.option_index
        self.state.handle_input("enter")
        self._finish()
