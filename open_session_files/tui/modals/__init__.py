"""Modal screens for the open-session-files TUI."""

from .file_picker_modal import FilePickerModal

__all__ = ["FilePickerModal"]
