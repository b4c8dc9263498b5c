"""Candidate building and fuzzy ranking for the file picker."""

import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from rapidfuzz import fuzz, utils

# Maximum number of ranked results returned for a non-empty query
MAX_RESULTS = 200


@dataclass(frozen=True)
class Candidate:
    """A file the user can pick, along with the text it is matched against."""

    path: str
    search: str


def _exists(path: str, cwd: str | Path | None) -> bool:
    if cwd is not None and not os.path.isabs(path):
        return (Path(cwd) / path).exists()
    return os.path.exists(path)


def build_candidates(
    paths: Iterable[str], cwd: str | Path | None = None
) -> list[Candidate]:
    """Build picker candidates from the paths that still exist on disk.

    Args:
        paths: File paths, in display order.
        cwd: Directory relative paths are resolved against.

    Returns:
        One Candidate per existing path, in the same order.
    """
    return [
        Candidate(path=path, search=f"{os.path.basename(path)} {path}")
        for path in paths
        if _exists(path, cwd)
    ]


def _is_subsequence(query: str, text: str) -> bool:
    """Check whether the non-space characters of ``query`` appear in order."""
    remaining = iter(text.lower())
    return all(ch in remaining for ch in query.lower() if not ch.isspace())


def rank_candidates(
    candidates: list[Candidate], query: str, limit: int = MAX_RESULTS
) -> list[Candidate]:
    """Rank candidates against a free-text query.

    An empty (or whitespace-only) query returns every candidate in its
    original order. Otherwise only candidates whose search text contains the
    query as a subsequence are kept, ordered best match first.
    """
    if not query.strip():
        return candidates

    scored = [
        (fuzz.WRatio(query, c.search, processor=utils.default_process), c)
        for c in candidates
        if _is_subsequence(query, c.search)
    ]
    # sorted() is stable, so equal scores keep their original order
    scored = sorted(scored, key=lambda pair: pair[0], reverse=True)
    return [c for _, c in scored[:limit]]
