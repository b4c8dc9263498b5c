"""Filter/selection state for the session file picker.

The state is kept separate from the Textual modal so the keystroke handling
can be driven directly.
"""

from typing import Literal

from .ranking import Candidate, rank_candidates

PickerStatus = Literal["filtering", "selected", "cancelled"]

# Maximum number of list rows shown at once
MAX_VISIBLE_ROWS = 12

BACKSPACE_KEYS = frozenset({"backspace", "ctrl+h"})
CLEAR_KEYS = frozenset({"ctrl+u"})
UP_KEYS = frozenset({"up", "ctrl+p"})
DOWN_KEYS = frozenset({"down", "ctrl+n"})
SELECT_KEYS = frozenset({"enter"})
CANCEL_KEYS = frozenset({"escape"})


class PickerState:
    """Filter query, ranked candidates and highlight for one picker session."""

    def __init__(
        self, candidates: list[Candidate], max_rows: int = MAX_VISIBLE_ROWS
    ) -> None:
        self.candidates = candidates
        self.max_rows = max_rows
        self.filter = ""
        self.ranked: list[Candidate] = list(candidates)
        self.highlighted = 0
        self.scroll_offset = 0
        self.status: PickerStatus = "filtering"
        self.result: str | None = None

    @property
    def done(self) -> bool:
        """Whether the picker reached a terminal state."""
        return self.status != "filtering"

    @property
    def highlighted_path(self) -> str | None:
        """The path of the highlighted candidate, if any."""
        if not self.ranked:
            return None
        return self.ranked[self.highlighted].path

    def visible_rows(self) -> list[Candidate]:
        """The slice of ranked candidates currently scrolled into view."""
        return self.ranked[self.scroll_offset : self.scroll_offset + self.max_rows]

    def set_filter(self, query: str) -> None:
        """Replace the filter query and re-rank from the top."""
        self.filter = query
        self.ranked = rank_candidates(self.candidates, query)
        self.highlighted = 0
        self.scroll_offset = 0

    def move(self, delta: int) -> None:
        """Move the highlight by ``delta`` rows, wrapping at either end."""
        if not self.ranked:
            return
        self.highlighted = (self.highlighted + delta) % len(self.ranked)
        if self.highlighted < self.scroll_offset:
            self.scroll_offset = self.highlighted
        elif self.highlighted >= self.scroll_offset + self.max_rows:
            self.scroll_offset = self.highlighted - self.max_rows + 1

    def handle_input(self, key: str, character: str | None = None) -> bool:
        """Apply one keystroke.

        Args:
            key: The key name (e.g. "backspace", "up", "a").
            character: The printable character produced by the key, if any.

        Returns:
            True if the keystroke was consumed.
        """
        if self.done:
            return False

        if key in BACKSPACE_KEYS:
            self.set_filter(self.filter[:-1])
        elif key in CLEAR_KEYS:
            self.set_filter("")
        elif key in UP_KEYS:
            self.move(-1)
        elif key in DOWN_KEYS:
            self.move(1)
        elif key in SELECT_KEYS:
            path = self.highlighted_path
            if path is None:
                return True
            self.status = "selected"
            self.result = path
        elif key in CANCEL_KEYS:
            self.status = "cancelled"
            self.result = None
        elif character is not None and len(character) == 1 and character.isprintable():
            self.set_filter(self.filter + character)
        else:
            return False
        return True
