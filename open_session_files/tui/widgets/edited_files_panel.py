"""Panel listing the files edited in the current session."""

import os

from rich.text import Text
from textual.widgets import Static


class EditedFilesPanel(Static):
    """Summary of session-edited files, marking ones missing on disk."""

    def update_files(self, files: list[str], cwd: str) -> None:
        """Update the panel with the given files.

        Args:
            files: Edited file paths, in first-edited order.
            cwd: Directory relative paths are resolved against.
        """
        if not files:
            self.update(Text("No files edited by the agent in this session", style="dim"))
            return

        text = Text()
        text.append(f"Edited files ({len(files)})\n\n", style="bold")
        for path in files:
            full_path = path if os.path.isabs(path) else os.path.join(cwd, path)
            if os.path.exists(full_path):
                text.append("  ● ", style="green")
                text.append(f"{path}\n")
            else:
                text.append("  ○ ", style="red")
                text.append(f"{path} (missing)\n", style="dim")
        self.update(text)
