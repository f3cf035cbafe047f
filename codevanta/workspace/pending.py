# -*- coding: utf-8 -*-
"""
Pending change set

Files authored before any repository exists are staged here, in the order
they were first staged, until a repository is created and every entry has
been written to it.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple


class PendingChangeSet:
    """Insertion-ordered mapping of path to full file content."""

    def __init__(self):
        self._entries: Dict[str, str] = {}

    def stage(self, path: str, content: str) -> None:
        """Add or overwrite path; an overwrite keeps the original position."""
        self._entries[path] = content

    def entries(self) -> List[Tuple[str, str]]:
        """Snapshot of (path, content) pairs in insertion order."""
        return list(self._entries.items())

    def paths(self) -> List[str]:
        return list(self._entries)

    def get(self, path: str) -> Optional[str]:
        return self._entries.get(path)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __contains__(self, path: str) -> bool:
        return path in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))
