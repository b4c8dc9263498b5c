"""Session log access and edited-file extraction.

pi records each session as a JSONL file of entries. Entries in newer files
form a tree via ``id``/``parentId``; the active branch is the chain leading to
the most recent entry. Assistant messages carry tool-call content blocks, and
the ``edit``/``write`` calls among them name the files the agent touched.
"""

import json
import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)

# Tag spellings used for tool calls across pi versions.
TOOL_CALL_TYPES = frozenset({"toolCall", "tool_use", "tool_call"})
EDIT_TOOL_NAMES = frozenset({"edit", "write"})


class SessionSource(Protocol):
    """Anything that can provide the current branch of session entries."""

    def get_branch(self) -> Sequence[Mapping[str, Any]]: ...


@dataclass(frozen=True)
class ToolCall:
    """A tool-call content block, normalized across tag spellings."""

    name: str
    path: str | None


def _coerce_arguments(value: object) -> Mapping[str, Any] | None:
    if isinstance(value, Mapping):
        return value
    if not isinstance(value, str):
        return None
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        logger.debug("Skipping malformed tool-call arguments: %r", value[:80])
        return None
    return parsed if isinstance(parsed, Mapping) else None


def _resolve_path(block: Mapping[str, Any]) -> str | None:
    """Resolve the ``path`` argument of a tool-call block.

    Looks at ``arguments.path``, then ``input.path``, then the path inside a
    ``function.arguments`` payload (usually a JSON-encoded string).
    """
    function = block.get("function")
    payloads = [block.get("arguments"), block.get("input")]
    if isinstance(function, Mapping):
        payloads.append(function.get("arguments"))

    for payload in payloads:
        arguments = _coerce_arguments(payload)
        if arguments is None:
            continue
        path = arguments.get("path")
        if isinstance(path, str) and path:
            return path
    return None


def parse_tool_call(block: object) -> ToolCall | None:
    """Normalize a content block into a ToolCall.

    Args:
        block: A content block from an assistant message.

    Returns:
        The ToolCall, or None if ``block`` is not a tool call.
    """
    if not isinstance(block, Mapping):
        return None
    if block.get("type") not in TOOL_CALL_TYPES:
        return None

    name = block.get("name")
    if not isinstance(name, str):
        function = block.get("function")
        name = function.get("name") if isinstance(function, Mapping) else None

    return ToolCall(
        name=name if isinstance(name, str) else "",
        path=_resolve_path(block),
    )


def _normalize_path(path: str) -> str:
    return path[1:] if path.startswith("@") else path


def _branch_entries(
    session: SessionSource | Sequence[Mapping[str, Any]],
) -> Sequence[Mapping[str, Any]]:
    if hasattr(session, "get_branch"):
        return session.get_branch()  # type: ignore[union-attr]
    return session  # type: ignore[return-value]


def get_session_edited_files(
    session: SessionSource | Sequence[Mapping[str, Any]],
) -> list[str]:
    """Get the files edited or written by the agent in a session.

    Args:
        session: A SessionSource, or the branch entries themselves.

    Returns:
        Unique file paths in order of first occurrence.
    """
    seen: set[str] = set()
    files: list[str] = []

    for entry in _branch_entries(session):
        if not isinstance(entry, Mapping) or entry.get("type") != "message":
            continue
        message = entry.get("message")
        if not isinstance(message, Mapping) or message.get("role") != "assistant":
            continue
        content = message.get("content")
        if not isinstance(content, list):
            continue

        for block in content:
            call = parse_tool_call(block)
            if call is None or call.name not in EDIT_TOOL_NAMES:
                continue
            if call.path is None:
                continue

            file_path = _normalize_path(call.path)
            if file_path and file_path not in seen:
                seen.add(file_path)
                files.append(file_path)

    return files


def load_session_entries(path: str | Path) -> list[dict[str, Any]]:
    """Load all entries from a pi session JSONL file.

    Blank lines and lines that are not JSON objects are skipped. Undecodable
    bytes are replaced, so a corrupt line is skipped rather than failing the
    whole load.

    Raises:
        OSError: If the file cannot be read.
    """
    entries: list[dict[str, Any]] = []
    with open(path, encoding="utf-8", errors="replace") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                logger.debug("Skipping malformed line %d in %s", lineno, path)
                continue
            if isinstance(entry, dict):
                entries.append(entry)
    return entries


def current_branch(entries: Sequence[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    """Get the active branch of a session, root first.

    The leaf is the most recent entry carrying an ``id``. Files written before
    entries had ids are linear, so they are returned unchanged.
    """
    by_id: dict[str, Mapping[str, Any]] = {}
    leaf: Mapping[str, Any] | None = None
    for entry in entries:
        entry_id = entry.get("id")
        if isinstance(entry_id, str) and entry.get("type") != "session":
            by_id[entry_id] = entry
            leaf = entry

    if leaf is None:
        return list(entries)

    branch: list[Mapping[str, Any]] = []
    visited: set[str] = set()
    node: Mapping[str, Any] | None = leaf
    while node is not None:
        node_id = node["id"]
        if node_id in visited:
            break
        visited.add(node_id)
        branch.append(node)
        parent_id = node.get("parentId")
        node = by_id.get(parent_id) if isinstance(parent_id, str) else None
    branch.reverse()
    return branch


def session_dir_for_cwd(cwd: str | Path, agent_dir: str | Path) -> Path:
    """Get the directory pi stores sessions for ``cwd`` in."""
    cwd_str = str(cwd)
    safe = re.sub(r"[/\\:]", "-", re.sub(r"^[/\\]", "", cwd_str))
    return Path(agent_dir) / "sessions" / f"--{safe}--"


def find_latest_session(cwd: str | Path, agent_dir: str | Path) -> Path | None:
    """Find the most recently modified session file for ``cwd``."""
    session_dir = session_dir_for_cwd(cwd, agent_dir)
    if not session_dir.is_dir():
        return None
    session_files = [p for p in session_dir.glob("*.jsonl") if p.is_file()]
    if not session_files:
        return None
    return max(session_files, key=lambda p: p.stat().st_mtime)


class SessionFile:
    """A SessionSource backed by a session JSONL file on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def get_branch(self) -> list[Mapping[str, Any]]:
        """Re-read the session file and return its active branch."""
        return current_branch(load_session_entries(self.path))
