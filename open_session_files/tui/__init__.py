"""Textual UI for picking and opening session-edited files."""

from .app import OpenSessionFilesApp

__all__ = ["OpenSessionFilesApp"]
