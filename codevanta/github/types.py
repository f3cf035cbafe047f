# -*- coding: utf-8 -*-
"""
Value types exchanged with the remote repository.

FileNode is a tagged variant: the kind is explicit, never inferred from
whether a size or sha happens to be present.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


@dataclass(frozen=True)
class UserInfo:
    login: str
    user_id: Optional[int] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None


@dataclass(frozen=True)
class RepositoryRef:
    owner: str
    name: str
    default_branch: Optional[str] = None
    private: bool = False
    description: Optional[str] = None
    html_url: str = ""
    updated_at: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class BranchRef:
    name: str
    head_sha: str = ""

    @property
    def has_commits(self) -> bool:
        return bool(self.head_sha)


class NodeKind(Enum):
    FILE = "file"
    DIRECTORY = "dir"


@dataclass(frozen=True)
class FileNode:
    kind: NodeKind
    path: str
    name: str
    size: Optional[int] = None
    sha: Optional[str] = None

    @classmethod
    def file(
        cls,
        path: str,
        size: Optional[int] = None,
        sha: Optional[str] = None,
        name: Optional[str] = None,
    ) -> FileNode:
        return cls(NodeKind.FILE, path, name or basename(path), size, sha)

    @classmethod
    def directory(cls, path: str, name: Optional[str] = None) -> FileNode:
        return cls(NodeKind.DIRECTORY, path, name or basename(path))

    @property
    def is_file(self) -> bool:
        return self.kind is NodeKind.FILE

    @property
    def is_directory(self) -> bool:
        return self.kind is NodeKind.DIRECTORY

    @property
    def parent(self) -> str:
        return parent_path(self.path)


# Ordered children of one directory, valid for a single (repository, branch)
FolderListing = Tuple[FileNode, ...]


@dataclass(frozen=True)
class CommitRecord:
    sha: str
    message: str
    author: str
    timestamp: Optional[str] = None

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        return self.message.splitlines()[0] if self.message else ""


def basename(path: str) -> str:
    return path.rstrip("/").rsplit("/", 1)[-1]


def parent_path(path: str) -> str:
    """Parent directory of a repository path; the root is ""."""
    stripped = path.rstrip("/")
    if "/" not in stripped:
        return ""
    return stripped.rsplit("/", 1)[0]

