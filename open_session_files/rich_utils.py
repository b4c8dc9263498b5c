"""
Rich formatting utilities for open-session-files command-line output.
"""

import os

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

# Global console instances for consistent styling
console = Console()
err_console = Console(stderr=True)


def print_status(message: str, status_type: str = "info") -> None:
    """Print a status message with appropriate styling."""
    styles = {
        "info": "blue",
        "success": "green",
        "warning": "yellow",
        "error": "red",
    }
    style = styles.get(status_type, "white")
    target = err_console if status_type in ("warning", "error") else console
    target.print(f"[{style}]{escape(message)}[/{style}]", highlight=False)


def print_edited_files(files: list[str], cwd: str, title: str = "Edited Files") -> None:
    """Print session-edited files as a table, marking missing ones."""
    if not files:
        print_status("No files edited by the agent in this session", "warning")
        return

    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Path", style="white")
    table.add_column("Exists", width=8)

    for i, path in enumerate(files, start=1):
        full_path = path if os.path.isabs(path) else os.path.join(cwd, path)
        exists = "[green]yes[/green]" if os.path.exists(full_path) else "[red]no[/red]"
        table.add_row(str(i), Text(path), exists)

    console.print(table)
