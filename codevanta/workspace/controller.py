# -*- coding: utf-8 -*-
"""
Sync controller

Orchestrates every workspace operation against the remote repository. It is
the only caller of the RemoteGateway and the only writer of the
WorkspaceStore, FolderCache and PendingChangeSet.

Concurrency model:
- One operation at a time. A second intent while an operation is in flight
  raises ControllerBusyError instead of interleaving.
- Every operation is tagged with a generation number. logout() bumps the
  generation, and results of a superseded operation are discarded rather
  than committed.
- Remote results are gathered first and committed to the stores in one
  step, so a failed call leaves the workspace as it was. The repository
  flush is the documented exception: writes already made stay made.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional, Sequence, Tuple

from codevanta.core import log
from codevanta.core.input_validator import (
    validate_branch_name,
    validate_file_name,
    validate_file_path,
    validate_full_repo_identifier,
    validate_repo_name,
)
from codevanta.github.errors import GitHubApiError
from codevanta.github.gateway import RemoteGateway
from codevanta.github.types import (
    BranchRef,
    CommitRecord,
    FileNode,
    RepositoryRef,
    UserInfo,
    basename,
)
from codevanta.workspace.folder_cache import FolderCache
from codevanta.workspace.pending import PendingChangeSet
from codevanta.workspace.store import WorkspaceFile, WorkspaceStore
from codevanta.workspace.templates import default_content

DEFAULT_BRANCH = "main"
INDEX_FILE = "index.html"


class SaveOutcome(Enum):
    NO_SELECTION = "no_selection"
    # Staged for a repository that does not exist yet; caller should start
    # the create-repository flow
    REPOSITORY_REQUIRED = "repository_required"
    SAVED_LOCALLY = "saved_locally"
    UNCHANGED = "unchanged"
    COMMITTED = "committed"


class ControllerBusyError(RuntimeError):
    """Raised when an intent arrives while another operation is in flight."""

    def __init__(self, requested: str, running: Optional[str]):
        self.requested = requested
        self.running = running
        super().__init__(f"Cannot {requested} while {running or 'another operation'} is running")


@dataclass
class FlushProgress:
    """Writes made by an interrupted flush, so a retry can skip them."""

    repository: RepositoryRef
    branch: BranchRef
    written: Dict[str, FileNode] = field(default_factory=dict)
    # Content each write actually sent, keyed like written
    contents: Dict[str, str] = field(default_factory=dict)


@dataclass
class _BranchSnapshot:
    root: Tuple[FileNode, ...]
    commits: Tuple[CommitRecord, ...]
    index_node: Optional[FileNode] = None
    index_content: Optional[str] = None


def pick_default_branch(
    branches: Sequence[BranchRef], default_name: Optional[str]
) -> Optional[BranchRef]:
    """Branch named default_name, else the first branch, else None."""
    for branch in branches:
        if branch.name == default_name:
            return branch
    return branches[0] if branches else None


def pick_created_branch(
    branches: Sequence[BranchRef], name: str, base_sha: str
) -> Optional[BranchRef]:
    """
    Entry for a just-created branch. Should the remote ever list a name twice,
    prefer the entry still pointing at the base commit, then the first.
    """
    matches = [b for b in branches if b.name == name]
    if not matches:
        return None
    for branch in matches:
        if branch.head_sha == base_sha:
            return branch
    return matches[0]


def _require(valid: Tuple[bool, str]) -> None:
    ok, reason = valid
    if not ok:
        raise GitHubApiError.invalid_input(reason)


class SyncController:
    """Single entry point for workspace intents."""

    def __init__(
        self,
        gateway: RemoteGateway,
        on_busy_changed: Optional[Callable[[bool], None]] = None,
    ):
        self._gateway = gateway
        self._on_busy_changed = on_busy_changed

        self._cache = FolderCache()
        self._store = WorkspaceStore(self._cache)
        self._pending = PendingChangeSet()

        self._busy = False
        self._running: Optional[str] = None
        self._generation = 0

        self._user: Optional[UserInfo] = None
        self._repositories: Tuple[RepositoryRef, ...] = ()
        self._repository: Optional[RepositoryRef] = None
        self._branches: Tuple[BranchRef, ...] = ()
        self._branch: Optional[BranchRef] = None
        self._commits: Tuple[CommitRecord, ...] = ()
        self._flush: Optional[FlushProgress] = None

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def store(self) -> WorkspaceStore:
        return self._store

    @property
    def folder_cache(self) -> FolderCache:
        return self._cache

    @property
    def pending(self) -> PendingChangeSet:
        return self._pending

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def user(self) -> Optional[UserInfo]:
        return self._user

    @property
    def repositories(self) -> Tuple[RepositoryRef, ...]:
        return self._repositories

    @property
    def repository(self) -> Optional[RepositoryRef]:
        return self._repository

    @property
    def branches(self) -> Tuple[BranchRef, ...]:
        return self._branches

    @property
    def branch(self) -> Optional[BranchRef]:
        return self._branch

    @property
    def commits(self) -> Tuple[CommitRecord, ...]:
        return self._commits

    @property
    def selected(self) -> Optional[WorkspaceFile]:
        return self._store.selected

    @property
    def interrupted_flush(self) -> Optional[FlushProgress]:
        return self._flush

    # ------------------------------------------------------------------
    # Operation bookkeeping
    # ------------------------------------------------------------------

    def _set_busy(self, busy: bool, name: Optional[str]) -> None:
        changed = self._busy != busy
        self._busy = busy
        self._running = name
        if changed and self._on_busy_changed is not None:
            self._on_busy_changed(busy)

    @contextmanager
    def _operation(self, name: str):
        if self._busy:
            raise ControllerBusyError(name, self._running)
        self._generation += 1
        generation = self._generation
        self._set_busy(True, name)
        try:
            yield generation
        except GitHubApiError as e:
            log.warning_safe(f"{name} failed", e)
            raise
        finally:
            # A superseding logout already reset the flag
            if generation == self._generation:
                self._set_busy(False, None)

    def _is_stale(self, generation: int, name: str) -> bool:
        if generation != self._generation:
            log.debug(f"Discarding result of superseded {name} (generation {generation})")
            return True
        return False

    def _require_repository(self) -> RepositoryRef:
        if self._repository is None:
            raise GitHubApiError.invalid_input("No repository is selected")
        return self._repository

    def _require_branch(self) -> Tuple[RepositoryRef, BranchRef]:
        repo = self._require_repository()
        if self._branch is None:
            raise GitHubApiError.invalid_input("No branch is selected")
        return repo, self._branch

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    async def connect(self) -> Optional[UserInfo]:
        """Load the signed-in user and the repositories they can access."""
        with self._operation("connect") as generation:
            user = await self._gateway.get_user()
            repositories = await self._gateway.list_repositories()
            if self._is_stale(generation, "connect"):
                return None
            self._user = user
            self._repositories = tuple(repositories)
            log.info(f"Connected as {user.login} ({len(repositories)} repositories)")
            return user

    def logout(self) -> None:
        """Drop all session state; in-flight operations become stale."""
        self._generation += 1
        self._store.reset()
        self._cache.rescope(None)
        self._pending.clear()
        self._user = None
        self._repositories = ()
        self._repository = None
        self._branches = ()
        self._branch = None
        self._commits = ()
        self._flush = None
        self._set_busy(False, None)
        log.info("Logged out; workspace cleared")

    # ------------------------------------------------------------------
    # Repository and branch selection
    # ------------------------------------------------------------------

    async def _fetch_branch_snapshot(
        self, repo: RepositoryRef, branch: BranchRef
    ) -> _BranchSnapshot:
        root = await self._gateway.list_contents(repo.owner, repo.name, "", branch.name)
        commits = await self._gateway.list_commits(repo.owner, repo.name, branch.name)
        snapshot = _BranchSnapshot(root=tuple(root), commits=tuple(commits))

        for node in snapshot.root:
            if node.is_file and node.name == INDEX_FILE:
                snapshot.index_node = node
                break
        if snapshot.index_node is not None and self._store.local_file(INDEX_FILE) is None:
            snapshot.index_content = await self._gateway.get_file_content(
                repo.owner, repo.name, snapshot.index_node.path, branch.name
            )
        return snapshot

    def _apply_branch(
        self, repo: RepositoryRef, branch: BranchRef, snapshot: _BranchSnapshot
    ) -> None:
        self._cache.rescope((repo.owner, repo.name, branch.name))
        self._branch = branch
        self._commits = snapshot.commits
        self._store.replace_root(snapshot.root)
        self._store.discard_remote_files()

        if snapshot.index_node is not None:
            local = self._store.local_file(snapshot.index_node.path)
            if local is not None:
                self._store.select(local)
            elif snapshot.index_content is not None:
                file = self._store.open_remote(snapshot.index_node, snapshot.index_content)
                self._store.select(file)

    async def select_repository(self, repo: RepositoryRef) -> Optional[BranchRef]:
        """
        Select a repository and its default branch (falling back to the first
        branch). Returns the selected branch, or None for an empty repository.
        """
        _require(validate_full_repo_identifier(repo.owner, repo.name))
        with self._operation("select repository") as generation:
            branches = await self._gateway.list_branches(repo.owner, repo.name)
            branch = pick_default_branch(branches, repo.default_branch)
            snapshot = None
            if branch is not None:
                snapshot = await self._fetch_branch_snapshot(repo, branch)
            if self._is_stale(generation, "select repository"):
                return None

            self._repository = repo
            self._branches = tuple(branches)
            self._flush = None
            if branch is None:
                log.info(f"Repository {repo.full_name} has no branches yet")
                self._cache.rescope(None)
                self._branch = None
                self._commits = ()
                self._store.clear_remote_tree()
                self._store.discard_remote_files()
                return None

            self._apply_branch(repo, branch, snapshot)
            log.info(f"Selected {repo.full_name}@{branch.name}")
            return branch

    async def select_branch(self, branch: BranchRef) -> BranchRef:
        """Switch the active branch; the folder cache is dropped."""
        repo = self._require_repository()
        with self._operation("select branch") as generation:
            snapshot = await self._fetch_branch_snapshot(repo, branch)
            if self._is_stale(generation, "select branch"):
                return branch
            self._apply_branch(repo, branch, snapshot)
            log.info(f"Switched to branch {branch.name}")
            return branch

    async def refresh_history(self) -> Tuple[CommitRecord, ...]:
        repo, branch = self._require_branch()
        with self._operation("refresh history") as generation:
            commits = await self._gateway.list_commits(repo.owner, repo.name, branch.name)
            if not self._is_stale(generation, "refresh history"):
                self._apply_commits(branch, commits)
            return tuple(commits)

    # ------------------------------------------------------------------
    # Files and folders
    # ------------------------------------------------------------------

    async def select_file(self, node: FileNode) -> Optional[WorkspaceFile]:
        """
        Select a file. A LocalOnly file at the same path always wins and needs
        no remote call; an unsaved remote file is re-selected as is.
        """
        if not node.is_file:
            raise GitHubApiError.invalid_input(f"'{node.path}' is a folder")

        with self._operation("select file") as generation:
            local = self._store.local_file(node.path)
            if local is not None:
                self._store.select(local)
                return local

            existing = self._store.file(node.path)
            if existing is not None and existing.dirty:
                self._store.select(existing)
                return existing

            repo, branch = self._require_branch()
            known = self._store.node_at(node.path)
            if known is not None and known.is_file:
                node = known
            content = await self._gateway.get_file_content(
                repo.owner, repo.name, node.path, branch.name
            )
            if self._is_stale(generation, "select file"):
                return None
            file = self._store.open_remote(node, content)
            self._store.select(file)
            return file

    async def load_folder(self, path: str) -> Tuple[FileNode, ...]:
        """
        Children of a folder, fetching its listing on first expansion only.
        """
        path = (path or "").strip("/")
        with self._operation("load folder") as generation:
            if (
                path == ""
                or self._store.is_local_folder(path)
                or self._repository is None
                or self._branch is None
                or self._cache.get(path) is not None
            ):
                return self._store.children(path)

            repo, branch = self._repository, self._branch
            listing = await self._gateway.list_contents(
                repo.owner, repo.name, path, branch.name
            )
            if self._is_stale(generation, "load folder"):
                return ()
            self._cache.put(path, listing)
            return self._store.children(path)

    def _new_path(self, name: str, path: Optional[str]) -> str:
        _require(validate_file_name(name))
        full = (path or name).strip()
        _require(validate_file_path(full))
        if basename(full) != name:
            raise GitHubApiError.invalid_input(f"Path '{full}' does not end with '{name}'")
        if self._store.has_path(full):
            raise GitHubApiError.invalid_input(f"'{full}' already exists")
        return full

    def create_local_file(self, name: str, path: Optional[str] = None) -> WorkspaceFile:
        """
        Create a LocalOnly file with starter content and select it. It starts
        dirty: nothing has been saved yet.
        """
        with self._operation("create file"):
            full = self._new_path(name, path)
            file = self._store.insert_local(full, default_content(name))
            self._store.select(file)
            log.debug(f"Created local file {full}")
            return file

    def create_local_folder(self, name: str, path: Optional[str] = None) -> FileNode:
        """Create a LocalOnly folder."""
        with self._operation("create folder"):
            full = self._new_path(name, path)
            node = self._store.insert_local_folder(full)
            log.debug(f"Created local folder {full}")
            return node

    def edit(self, text: str) -> WorkspaceFile:
        """Replace the selected buffer. Allowed while an operation is in flight."""
        file = self._store.selected
        if file is None:
            raise GitHubApiError.invalid_input("No file is selected")
        self._store.set_buffer_content(text)
        return file

    def apply_assistant_code(self, code: Optional[str]) -> bool:
        """
        Receive code extracted from an assistant reply; None means the reply
        held nothing to apply.
        """
        if code is None or self._store.selected is None:
            return False
        self.edit(code)
        return True

    def outline(self) -> str:
        return self._store.outline()

    # ------------------------------------------------------------------
    # Save and push
    # ------------------------------------------------------------------

    async def save(self) -> SaveOutcome:
        """Persist the selected file; see SaveOutcome for the possible paths."""
        with self._operation("save") as generation:
            return await self._save(generation)

    async def _save(self, generation: int) -> SaveOutcome:
        file = self._store.selected
        if file is None:
            return SaveOutcome.NO_SELECTION

        if file.is_local:
            if self._repository is None:
                self._pending.stage(file.path, file.buffer)
                self._store.mark_synced(file)
                log.info(f"Staged {file.path}; a repository is needed to push it")
                return SaveOutcome.REPOSITORY_REQUIRED
            # LocalOnly files only ever reach a repository through a flush
            if self._flush is not None and file.path in self._pending:
                self._pending.stage(file.path, file.buffer)
            self._store.mark_synced(file)
            return SaveOutcome.SAVED_LOCALLY

        if not file.dirty:
            return SaveOutcome.UNCHANGED

        repo, branch = self._require_branch()
        content = file.buffer
        node = await self._gateway.update_file(
            repo.owner,
            repo.name,
            file.path,
            content,
            f"Update {file.name}",
            file.node.sha,
            branch.name,
        )
        if self._is_stale(generation, "save"):
            return SaveOutcome.COMMITTED
        self._store.mark_synced(file, content=content, node=node)
        log.info(f"Committed {file.path} to {repo.full_name}@{branch.name}")

        commits = await self._gateway.list_commits(repo.owner, repo.name, branch.name)
        if not self._is_stale(generation, "save"):
            self._apply_commits(branch, commits)
        return SaveOutcome.COMMITTED

    async def push(self) -> SaveOutcome:
        """
        Without a repository, stage every LocalOnly file and ask for one;
        otherwise behave exactly like save(). A clean file therefore pushes
        nothing.
        """
        with self._operation("push") as generation:
            if self._repository is None:
                local_files = self._store.local_files()
                if local_files:
                    for file in local_files:
                        self._pending.stage(file.path, file.buffer)
                        self._store.mark_synced(file)
                    log.info(f"Staged {len(local_files)} local file(s) for a new repository")
                    return SaveOutcome.REPOSITORY_REQUIRED
            return await self._save(generation)

    # ------------------------------------------------------------------
    # Repository creation and flush
    # ------------------------------------------------------------------

    async def check_repository_name(self, name: str) -> bool:
        """True when name is valid and not yet used by the signed-in user."""
        _require(validate_repo_name(name))
        with self._operation("check repository name"):
            exists = await self._gateway.repository_exists(name)
            return not exists

    async def create_repository_and_flush(
        self, name: str, description: str = "", is_private: bool = False
    ) -> Optional[RepositoryRef]:
        """
        Create a repository, select its default branch, then write every
        pending file to it one at a time in staging order.

        If a write fails the loop stops, the PendingChangeSet keeps all of its
        entries and the error propagates; retry_flush() resumes from there.
        """
        _require(validate_repo_name(name))
        with self._operation("create repository") as generation:
            repo = await self._gateway.create_repository(name, description, is_private)
            if self._is_stale(generation, "create repository"):
                return None

            branch = BranchRef(name=repo.default_branch or DEFAULT_BRANCH)
            self._repository = repo
            self._repositories = (repo,) + tuple(
                r for r in self._repositories if r.full_name != repo.full_name
            )
            self._branches = (branch,)
            self._branch = branch
            self._commits = ()
            self._cache.rescope((repo.owner, repo.name, branch.name))
            self._store.clear_remote_tree()
            self._store.discard_remote_files()
            self._flush = FlushProgress(repository=repo, branch=branch)

            await self._flush_pending(generation)
            return repo

    async def retry_flush(self) -> Optional[RepositoryRef]:
        """Resume an interrupted flush, skipping files it already wrote."""
        progress = self._flush
        if progress is None:
            raise GitHubApiError.invalid_input("There is no interrupted upload to resume")
        with self._operation("retry flush") as generation:
            await self._flush_pending(generation)
            return progress.repository

    async def _flush_pending(self, generation: int) -> None:
        progress = self._flush
        repo = progress.repository

        # Strictly sequential: each write commits on top of the previous one
        for path, content in self._pending.entries():
            if path in progress.written:
                continue
            if self._is_stale(generation, "flush"):
                return
            node = await self._gateway.create_file(
                repo.owner, repo.name, path, content, f"Add {basename(path)}"
            )
            progress.written[path] = node
            progress.contents[path] = content
            log.debug(f"Flushed {path} to {repo.full_name}")

        if self._is_stale(generation, "flush"):
            return

        written = progress.written
        self._pending.clear()
        self._flush = None
        for path, node in written.items():
            if self._store.local_file(path) is not None:
                self._store.promote_to_remote(
                    path, node, last_synced=progress.contents.get(path)
                )
        self._store.promote_local_folders()
        log.info(f"Flushed {len(written)} file(s) to {repo.full_name}")

        branch = progress.branch
        root = await self._gateway.list_contents(repo.owner, repo.name, "", branch.name)
        commits = await self._gateway.list_commits(repo.owner, repo.name, branch.name)
        if self._is_stale(generation, "flush"):
            return
        self._store.replace_root(root)
        for node in written.values():
            if node.parent != "":
                self._store.insert_remote_node(node)
        self._apply_commits(branch, commits)

    def _apply_commits(self, branch: BranchRef, commits) -> None:
        """Install a fresh history; its newest commit becomes the branch head."""
        self._commits = tuple(commits)
        if not commits or commits[0].sha == branch.head_sha:
            return
        head = BranchRef(name=branch.name, head_sha=commits[0].sha)
        if self._branch is not None and self._branch.name == branch.name:
            self._branch = head
        self._branches = tuple(
            head if b.name == branch.name else b for b in self._branches
        )

    # ------------------------------------------------------------------
    # Branch creation
    # ------------------------------------------------------------------

    async def create_branch(self, name: str) -> Optional[BranchRef]:
        """
        Create a branch from the current head commit and switch to it. The new
        branch points at the same commit, so open files are kept.
        """
        _require(validate_branch_name(name))
        repo, current = self._require_branch()
        if not current.has_commits:
            raise GitHubApiError.invalid_input(
                f"Branch '{current.name}' has no commits to branch from"
            )

        with self._operation("create branch") as generation:
            await self._gateway.create_branch(repo.owner, repo.name, name, current.head_sha)
            branches = await self._gateway.list_branches(repo.owner, repo.name)
            if self._is_stale(generation, "create branch"):
                return None

            self._branches = tuple(branches)
            created = pick_created_branch(branches, name, current.head_sha)
            if created is None:
                log.warning(f"Branch {name} was created but is not listed yet")
                return None

            self._cache.rescope((repo.owner, repo.name, created.name))
            self._branch = created
            log.info(f"Created and switched to branch {created.name}")
            return created
