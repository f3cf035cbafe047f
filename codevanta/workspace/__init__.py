# -*- coding: utf-8 -*-
"""
Workspace synchronization: file tree, pending changes and the controller
that keeps them consistent with GitHub.
"""

from codevanta.workspace.controller import (
    ControllerBusyError,
    SaveOutcome,
    SyncController,
)
from codevanta.workspace.folder_cache import FolderCache
from codevanta.workspace.pending import PendingChangeSet
from codevanta.workspace.store import Origin, WorkspaceFile, WorkspaceStore

__all__ = [
    "ControllerBusyError",
    "FolderCache",
    "Origin",
    "PendingChangeSet",
    "SaveOutcome",
    "SyncController",
    "WorkspaceFile",
    "WorkspaceStore",
]
