# -*- coding: utf-8 -*-
"""
RemoteGateway: the async contract the sync engine consumes.

One call is one request/response exchange with GitHub. Nothing retries
internally; a failure surfaces as a typed GitHubApiError subclass and the
caller decides whether to try again.

GitHubGateway adapts the blocking urllib client by running each call in a
worker thread, so the event loop never blocks on the network.
"""

from __future__ import annotations

import asyncio
from typing import List, Optional, Protocol, runtime_checkable

from codevanta.core import log
from codevanta.github import branches, commits, contents, identity, repos
from codevanta.github.api_client import GitHubApiClient
from codevanta.github.create_repo import CreateRepoRequest, create_user_repo
from codevanta.github.types import (
    BranchRef,
    CommitRecord,
    FileNode,
    RepositoryRef,
    UserInfo,
)


@runtime_checkable
class RemoteGateway(Protocol):
    async def get_user(self) -> UserInfo: ...

    async def list_repositories(self) -> List[RepositoryRef]: ...

    async def list_branches(self, owner: str, repo: str) -> List[BranchRef]: ...

    async def list_contents(
        self, owner: str, repo: str, path: str, ref: str
    ) -> List[FileNode]: ...

    async def get_file_content(
        self, owner: str, repo: str, path: str, ref: str
    ) -> str: ...

    async def update_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        known_hash: Optional[str],
        branch: str,
    ) -> FileNode: ...

    async def create_file(
        self, owner: str, repo: str, path: str, content: str, message: str
    ) -> FileNode: ...

    async def create_repository(
        self, name: str, description: str, is_private: bool
    ) -> RepositoryRef: ...

    async def repository_exists(self, name: str) -> bool: ...

    async def create_branch(
        self, owner: str, repo: str, name: str, base_commit: str
    ) -> BranchRef: ...

    async def list_commits(
        self, owner: str, repo: str, branch: str
    ) -> List[CommitRecord]: ...


class GitHubGateway:
    """RemoteGateway backed by the GitHub REST API."""

    def __init__(self, client: GitHubApiClient):
        self._client = client
        self._login: Optional[str] = None

    @property
    def login(self) -> Optional[str]:
        """Login of the authenticated user, once get_user() has run."""
        return self._login

    async def get_user(self) -> UserInfo:
        user = await asyncio.to_thread(identity.fetch_viewer_identity, self._client)
        self._login = user.login
        return user

    async def list_repositories(self) -> List[RepositoryRef]:
        return await asyncio.to_thread(repos.list_repos, self._client)

    async def list_branches(self, owner: str, repo: str) -> List[BranchRef]:
        return await asyncio.to_thread(branches.list_branches, self._client, owner, repo)

    async def list_contents(
        self, owner: str, repo: str, path: str, ref: str
    ) -> List[FileNode]:
        return await asyncio.to_thread(
            contents.list_contents, self._client, owner, repo, path, ref
        )

    async def get_file_content(self, owner: str, repo: str, path: str, ref: str) -> str:
        return await asyncio.to_thread(
            contents.get_file_content, self._client, owner, repo, path, ref
        )

    async def update_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        known_hash: Optional[str],
        branch: str,
    ) -> FileNode:
        return await asyncio.to_thread(
            contents.put_file,
            self._client,
            owner,
            repo,
            path,
            content,
            message,
            known_hash,
            branch,
        )

    async def create_file(
        self, owner: str, repo: str, path: str, content: str, message: str
    ) -> FileNode:
        return await asyncio.to_thread(
            contents.put_file, self._client, owner, repo, path, content, message
        )

    async def create_repository(
        self, name: str, description: str, is_private: bool
    ) -> RepositoryRef:
        req = CreateRepoRequest(name=name, private=is_private, description=description)
        repo = await asyncio.to_thread(create_user_repo, self._client, req)
        self._login = self._login or repo.owner
        return repo

    async def repository_exists(self, name: str) -> bool:
        if not self._login:
            # Availability is checked against the viewer's own namespace
            log.debug("Viewer login unknown; fetching identity first")
            await self.get_user()
        return await asyncio.to_thread(repos.repo_exists, self._client, self._login, name)

    async def create_branch(
        self, owner: str, repo: str, name: str, base_commit: str
    ) -> BranchRef:
        return await asyncio.to_thread(
            branches.create_branch, self._client, owner, repo, name, base_commit
        )

    async def list_commits(self, owner: str, repo: str, branch: str) -> List[CommitRecord]:
        return await asyncio.to_thread(
            commits.list_commits, self._client, owner, repo, branch
        )
