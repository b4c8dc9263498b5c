"""Pick a file the pi coding agent edited in this session and open it."""

__version__ = "0.1.0"
