# -*- coding: utf-8 -*-
"""
Workspace store

The single owner of the file tree snapshot, the per-path editable files and
the current selection. Nested directory listings are read from the
FolderCache rather than copied, so the tree exists in exactly one place.

Only the SyncController calls the mutating methods.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from codevanta.github.types import FileNode, FolderListing, parent_path
from codevanta.workspace.folder_cache import FolderCache


class Origin(Enum):
    LOCAL_ONLY = "local"
    REMOTE_BACKED = "remote"


@dataclass
class WorkspaceFile:
    path: str
    buffer: str
    last_synced: str
    origin: Origin
    node: FileNode

    @property
    def dirty(self) -> bool:
        return self.buffer != self.last_synced

    @property
    def is_local(self) -> bool:
        return self.origin is Origin.LOCAL_ONLY

    @property
    def name(self) -> str:
        return self.node.name


class WorkspaceStore:
    """Tree snapshot plus open files for one session."""

    def __init__(self, folder_cache: FolderCache):
        self._cache = folder_cache
        self._root: FolderListing = ()
        # Remote nodes learned outside a listing (e.g. from a write response)
        self._discovered: Dict[str, FileNode] = {}
        # LocalOnly nodes (files and folders) in creation order
        self._local_nodes: Dict[str, FileNode] = {}
        self._files: Dict[str, WorkspaceFile] = {}
        self._selected: Optional[str] = None

    # ------------------------------------------------------------------
    # Tree snapshot
    # ------------------------------------------------------------------

    @property
    def root(self) -> FolderListing:
        """Remote root listing of the active branch."""
        return self._root

    def replace_root(self, listing) -> None:
        """Install a freshly fetched root listing; forgets discovered nodes."""
        self._root = tuple(listing)
        self._discovered.clear()

    def clear_remote_tree(self) -> None:
        self._root = ()
        self._discovered.clear()

    def insert_remote_node(self, node: FileNode) -> None:
        """Record (or refresh) a remote node, e.g. with the sha a write returned."""
        if node.parent == "":
            replaced = False
            root = []
            for existing in self._root:
                if existing.path == node.path:
                    root.append(node)
                    replaced = True
                else:
                    root.append(existing)
            if not replaced:
                root.append(node)
            self._root = tuple(root)
        else:
            self._discovered[node.path] = node
        file = self._files.get(node.path)
        if file is not None and not file.is_local and node.is_file:
            file.node = node

    def _remote_children(self, path: str) -> Optional[FolderListing]:
        if path == "":
            return self._root
        return self._cache.get(path)

    def children(self, path: str = "") -> Tuple[FileNode, ...]:
        """
        Children of a directory: its remote listing (if known) overlaid with
        discovered remote nodes and LocalOnly nodes. A LocalOnly node wins over
        a remote node at the same path.
        """
        path = path.strip("/")
        merged: Dict[str, FileNode] = {}
        for node in self._remote_children(path) or ():
            merged[node.path] = node
        for node in self._discovered.values():
            if node.parent == path:
                merged[node.path] = node
        for node in self._local_nodes.values():
            if node.parent == path:
                merged[node.path] = node
        return tuple(merged.values())

    def node_at(self, path: str) -> Optional[FileNode]:
        path = path.strip("/")
        if path in self._local_nodes:
            return self._local_nodes[path]
        for node in self.children(parent_path(path)):
            if node.path == path:
                return node
        return None

    def has_path(self, path: str) -> bool:
        return self.node_at(path) is not None

    def is_local_folder(self, path: str) -> bool:
        node = self._local_nodes.get(path.strip("/"))
        return node is not None and node.is_directory

    def walk(self, path: str = "", depth: int = 0) -> Iterator[Tuple[int, FileNode]]:
        """Depth-first walk over every node whose parent listing is known."""
        for node in self.children(path):
            yield depth, node
            if node.is_directory:
                yield from self.walk(node.path, depth + 1)

    def outline(self) -> str:
        """Indented text rendering of the known tree (assistant context)."""
        lines = []
        for depth, node in self.walk():
            suffix = "/" if node.is_directory else ""
            lines.append(f"{'  ' * depth}{node.name}{suffix}")
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def file(self, path: str) -> Optional[WorkspaceFile]:
        return self._files.get(path.strip("/"))

    def local_file(self, path: str) -> Optional[WorkspaceFile]:
        file = self.file(path)
        if file is not None and file.is_local:
            return file
        return None

    def local_files(self) -> List[WorkspaceFile]:
        """LocalOnly files in creation order."""
        return [
            self._files[path]
            for path, node in self._local_nodes.items()
            if node.is_file and path in self._files
        ]

    def insert_local(self, path: str, content: str, last_synced: str = "") -> WorkspaceFile:
        """Create a LocalOnly file."""
        if self.has_path(path):
            raise ValueError(f"path already exists: {path}")
        node = FileNode.file(path, size=len(content.encode("utf-8")))
        self._local_nodes[path] = node
        file = WorkspaceFile(
            path=path,
            buffer=content,
            last_synced=last_synced,
            origin=Origin.LOCAL_ONLY,
            node=node,
        )
        self._files[path] = file
        return file

    def insert_local_folder(self, path: str) -> FileNode:
        """Create a LocalOnly directory node."""
        if self.has_path(path):
            raise ValueError(f"path already exists: {path}")
        node = FileNode.directory(path)
        self._local_nodes[path] = node
        return node

    def open_remote(self, node: FileNode, content: str) -> WorkspaceFile:
        """Create (or replace) the clean RemoteBacked record for node."""
        file = WorkspaceFile(
            path=node.path,
            buffer=content,
            last_synced=content,
            origin=Origin.REMOTE_BACKED,
            node=node,
        )
        self._files[node.path] = file
        return file

    def promote_to_remote(
        self,
        path: str,
        node: Optional[FileNode] = None,
        last_synced: Optional[str] = None,
    ) -> None:
        """
        A LocalOnly file now exists remotely; it becomes RemoteBacked.

        last_synced is the content that was written. A buffer that differs
        from it stays dirty.
        """
        local = self._local_nodes.pop(path, None)
        file = self._files.get(path)
        if file is None:
            return
        file.origin = Origin.REMOTE_BACKED
        if last_synced is not None:
            file.last_synced = last_synced
        if node is not None:
            file.node = node
        elif local is not None:
            file.node = local

    def promote_local_folders(self) -> None:
        """Local folders become ordinary tree entries once their files are remote."""
        for path in [p for p, n in self._local_nodes.items() if n.is_directory]:
            del self._local_nodes[path]

    def discard_remote_files(self) -> None:
        """Forget files opened from the previous branch."""
        for path in [p for p, f in self._files.items() if not f.is_local]:
            del self._files[path]
        if self._selected is not None and self._selected not in self._files:
            self._selected = None

    # ------------------------------------------------------------------
    # Selection and buffer
    # ------------------------------------------------------------------

    @property
    def selected(self) -> Optional[WorkspaceFile]:
        if self._selected is None:
            return None
        return self._files.get(self._selected)

    def select(self, file: Optional[WorkspaceFile]) -> None:
        """Select a file already held by the store (None clears)."""
        if file is None:
            self._selected = None
            return
        if self._files.get(file.path) is not file:
            raise ValueError(f"file is not part of the workspace: {file.path}")
        self._selected = file.path

    def set_buffer_content(self, text: str) -> None:
        file = self.selected
        if file is None:
            raise ValueError("no file is selected")
        file.buffer = text

    def mark_synced(
        self,
        file: Optional[WorkspaceFile] = None,
        content: Optional[str] = None,
        node: Optional[FileNode] = None,
    ) -> None:
        """
        Record that a file's content is persisted, clearing its dirty state.

        Args:
            file: File to mark (defaults to the selection)
            content: Content that was persisted (defaults to the current
                buffer); edits made while a write was in flight stay dirty
            node: Node returned by the write, carrying the new sha
        """
        file = file or self.selected
        if file is None:
            raise ValueError("no file is selected")
        file.last_synced = file.buffer if content is None else content
        if node is not None:
            file.node = node
            if not file.is_local:
                self.insert_remote_node(node)

    def reset(self) -> None:
        """Drop everything (logout)."""
        self._root = ()
        self._discovered.clear()
        self._local_nodes.clear()
        self._files.clear()
        self._selected = None
