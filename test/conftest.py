"""Pytest configuration for open-session-files tests."""

import json
from pathlib import Path
from typing import Any

import pytest


def tool_call(name: str, path: str | None = None, **extra: Any) -> dict[str, Any]:
    """Build a toolCall content block."""
    block: dict[str, Any] = {"type": "toolCall", "id": f"call_{name}", "name": name}
    if path is not None:
        block["arguments"] = {"path": path}
    block.update(extra)
    return block


def assistant_message(*blocks: dict[str, Any], role: str = "assistant") -> dict[str, Any]:
    """Build a message session entry carrying the given content blocks."""
    return {"type": "message", "message": {"role": role, "content": list(blocks)}}


@pytest.fixture
def write_session(tmp_path: Path) -> "type[_SessionWriter]":
    """Fixture that provides a helper for writing session JSONL files."""
    _SessionWriter.base_dir = tmp_path
    return _SessionWriter


class _SessionWriter:
    """Writes session entries to a JSONL file, one entry per line."""

    base_dir: Path

    @classmethod
    def write(
        cls, entries: list[dict[str, Any]], name: str = "session.jsonl"
    ) -> Path:
        path = cls.base_dir / name
        path.write_text("".join(json.dumps(entry) + "\n" for entry in entries))
        return path


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Isolate settings lookups from the real environment and home directory.

    Returns the agent directory used for the global settings file.
    """
    for var in (
        "PI_OPEN_FILE_COMMAND",
        "PI_OPEN_FILE_MODE",
        "PI_OPEN_FILE_SHORTCUT",
        "VISUAL",
        "EDITOR",
    ):
        monkeypatch.delenv(var, raising=False)
    agent_dir = tmp_path / "agent"
    agent_dir.mkdir()
    monkeypatch.setenv("PI_CODING_AGENT_DIR", str(agent_dir))
    return agent_dir
