# -*- coding: utf-8 -*-
"""
Folder listing cache

Lazy, per-directory cache of listing results. Every entry belongs to the
(repository, branch) scope it was fetched under; the controller drops the
whole cache when that scope changes. There is no TTL or eviction beyond
full invalidation.

Example:
    cache = FolderCache()
    cache.rescope(("octocat", "site", "main"))

    listing = cache.get("src")
    if listing is None:
        listing = tuple(await gateway.list_contents("octocat", "site", "src", "main"))
        cache.put("src", listing)
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from codevanta.github.types import FolderListing

# (owner, repository, branch)
CacheScope = Tuple[str, str, str]


class FolderCache:
    """In-memory directory listings for a single (repository, branch)."""

    def __init__(self):
        self._entries: Dict[str, FolderListing] = {}
        self._scope: Optional[CacheScope] = None
        self._stats = {"hits": 0, "misses": 0, "invalidations": 0}

    @staticmethod
    def _normalize(path: str) -> str:
        return (path or "").strip("/")

    @property
    def scope(self) -> Optional[CacheScope]:
        return self._scope

    def get(self, path: str) -> Optional[FolderListing]:
        """
        Retrieve a cached listing.

        Returns:
            The listing, or None when the path was never fetched in this scope
        """
        listing = self._entries.get(self._normalize(path))
        if listing is None:
            self._stats["misses"] += 1
            return None
        self._stats["hits"] += 1
        return listing

    def put(self, path: str, listing) -> None:
        """Store a listing for path in the current scope."""
        self._entries[self._normalize(path)] = tuple(listing)

    def invalidate_all(self) -> None:
        """Drop every entry (branch switch, repository switch, logout)."""
        self._entries.clear()
        self._stats["invalidations"] += 1

    def rescope(self, scope: Optional[CacheScope]) -> None:
        """Invalidate everything and bind the cache to a new scope."""
        self.invalidate_all()
        self._scope = scope

    def __contains__(self, path: str) -> bool:
        return self._normalize(path) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get_stats(self) -> Dict[str, int]:
        """Cache statistics (hits, misses, invalidations)."""
        return dict(self._stats)
