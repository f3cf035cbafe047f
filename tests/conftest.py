# -*- coding: utf-8 -*-
"""
Pytest configuration and fixtures for CodeVanta tests
"""

import pytest

from codevanta.github.errors import ConflictError, NotFoundError
from codevanta.github.types import (
    BranchRef,
    CommitRecord,
    FileNode,
    RepositoryRef,
    UserInfo,
)
from codevanta.workspace.controller import SyncController


class StubGateway:
    """
    In-memory RemoteGateway that records every call.

    Calls are recorded as (method, args) tuples in self.calls. Failures are
    injected with fail(method, exc, key=...) where key is the path (file
    calls), the branch name (branch calls) or None for any call.
    """

    def __init__(self, login="octocat"):
        self.calls = []
        self.user = UserInfo(login=login, user_id=1)
        self.repositories = []
        self.branches = {}
        self.listings = {}
        self.files = {}
        self.shas = {}
        self.commits = {}
        self._failures = {}
        self._counter = 0

    # --- seeding helpers ---

    def add_repo(self, name, default_branch="main", branches=None):
        repo = RepositoryRef(owner=self.user.login, name=name, default_branch=default_branch)
        self.repositories.append(repo)
        self.branches[(repo.owner, name)] = list(branches or [])
        return repo

    def add_listing(self, repo, ref, path, nodes):
        self.listings[(repo.owner, repo.name, ref, path)] = list(nodes)

    def add_file(self, repo, ref, path, content, sha):
        self.files[(repo.owner, repo.name, ref, path)] = content
        self.shas[(repo.owner, repo.name, ref, path)] = sha

    def fail(self, method, exc, key=None):
        self._failures[(method, key)] = exc

    def clear_failures(self):
        self._failures.clear()

    def method_calls(self, method):
        return [args for name, args in self.calls if name == method]

    def call_names(self):
        return [name for name, _ in self.calls]

    def _record(self, method, key, *args):
        self.calls.append((method, args))
        exc = self._failures.get((method, key)) or self._failures.get((method, None))
        if exc is not None:
            raise exc

    def _next_sha(self):
        self._counter += 1
        return f"sha{self._counter:03d}"

    # --- RemoteGateway ---

    async def get_user(self):
        self._record("get_user", None)
        return self.user

    async def list_repositories(self):
        self._record("list_repositories", None)
        return list(self.repositories)

    async def list_branches(self, owner, repo):
        self._record("list_branches", None, owner, repo)
        return list(self.branches.get((owner, repo), []))

    async def list_contents(self, owner, repo, path, ref):
        self._record("list_contents", path, owner, repo, path, ref)
        key = (owner, repo, ref, path)
        if key in self.listings:
            return list(self.listings[key])
        prefix = f"{path}/" if path else ""
        nodes = {}
        for (o, r, b, p), c in self.files.items():
            if (o, r, b) != (owner, repo, ref) or not p.startswith(prefix):
                continue
            rest = p[len(prefix):]
            if "/" in rest:
                folder = prefix + rest.split("/", 1)[0]
                nodes[folder] = FileNode.directory(folder)
            else:
                nodes[p] = FileNode.file(p, size=len(c), sha=self.shas.get((o, r, b, p)))
        if not nodes and path:
            raise NotFoundError(code="NOT_FOUND", message="Not Found", status=404)
        return list(nodes.values())

    async def get_file_content(self, owner, repo, path, ref):
        self._record("get_file_content", path, owner, repo, path, ref)
        try:
            return self.files[(owner, repo, ref, path)]
        except KeyError:
            raise NotFoundError(code="NOT_FOUND", message="Not Found", status=404)

    async def update_file(self, owner, repo, path, content, message, known_hash, branch):
        self._record("update_file", path, owner, repo, path, content, message, known_hash, branch)
        key = (owner, repo, branch, path)
        if self.shas.get(key) != known_hash:
            raise ConflictError(code="CONFLICT", message="Conflict", status=409)
        sha = self._next_sha()
        self.files[key] = content
        self.shas[key] = sha
        self._commit(owner, repo, branch, message)
        return FileNode.file(path, size=len(content), sha=sha)

    async def create_file(self, owner, repo, path, content, message):
        self._record("create_file", path, owner, repo, path, content, message)
        sha = self._next_sha()
        key = (owner, repo, "main", path)
        self.files[key] = content
        self.shas[key] = sha
        self._commit(owner, repo, "main", message)
        return FileNode.file(path, size=len(content), sha=sha)

    async def create_repository(self, name, description, is_private):
        self._record("create_repository", None, name, description, is_private)
        repo = RepositoryRef(
            owner=self.user.login, name=name, default_branch="main", private=is_private
        )
        self.repositories.insert(0, repo)
        self.branches[(repo.owner, name)] = []
        return repo

    async def repository_exists(self, name):
        self._record("repository_exists", None, name)
        return any(r.name == name for r in self.repositories)

    async def create_branch(self, owner, repo, name, base_commit):
        self._record("create_branch", name, owner, repo, name, base_commit)
        source = next(
            (b.name for b in self.branches.get((owner, repo), []) if b.head_sha == base_commit),
            None,
        )
        for (o, r, b, p), content in list(self.files.items()):
            if (o, r, b) == (owner, repo, source):
                self.files[(o, r, name, p)] = content
                self.shas[(o, r, name, p)] = self.shas.get((o, r, b, p))
        branch = BranchRef(name=name, head_sha=base_commit)
        self.branches.setdefault((owner, repo), []).append(branch)
        return branch

    async def list_commits(self, owner, repo, branch):
        self._record("list_commits", branch, owner, repo, branch)
        return list(self.commits.get((owner, repo, branch), []))

    def _commit(self, owner, repo, branch, message):
        sha = f"c{self._next_sha()}"
        history = self.commits.setdefault((owner, repo, branch), [])
        history.insert(0, CommitRecord(sha=sha, message=message, author=self.user.login))
        branches = self.branches.get((owner, repo), [])
        self.branches[(owner, repo)] = [
            BranchRef(b.name, sha) if b.name == branch else b for b in branches
        ]
        if not any(b.name == branch for b in branches):
            self.branches[(owner, repo)].append(BranchRef(branch, sha))


@pytest.fixture
def gateway():
    """Gateway seeded with octocat/site: main (abc123) and dev (def456)."""
    gw = StubGateway()
    repo = gw.add_repo(
        "site",
        default_branch="main",
        branches=[BranchRef("dev", "def456"), BranchRef("main", "abc123")],
    )
    for ref, head in (("main", "abc123"), ("dev", "def456")):
        gw.add_listing(
            repo,
            ref,
            "",
            [
                FileNode.file("index.html", size=20, sha=f"{ref}-index"),
                FileNode.directory("src"),
                FileNode.file("README.md", size=8, sha=f"{ref}-readme"),
            ],
        )
        gw.add_listing(repo, ref, "src", [FileNode.file("src/app.js", size=12, sha=f"{ref}-app")])
        gw.add_file(repo, ref, "index.html", f"<h1>{ref}</h1>", f"{ref}-index")
        gw.add_file(repo, ref, "README.md", f"# {ref}", f"{ref}-readme")
        gw.add_file(repo, ref, "src/app.js", f"// {ref}", f"{ref}-app")
        gw.commits[(repo.owner, repo.name, ref)] = [
            CommitRecord(sha=head, message=f"Initial {ref}", author="octocat")
        ]
    return gw


@pytest.fixture
def site(gateway):
    return gateway.repositories[0]


@pytest.fixture
def empty_gateway():
    """Gateway with no repositories at all."""
    return StubGateway()


@pytest.fixture
def controller(gateway):
    return SyncController(gateway)


@pytest.fixture
def fresh_controller(empty_gateway):
    return SyncController(empty_gateway)


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Point settings at a temporary config dir with no env credentials."""
    monkeypatch.setenv("CODEVANTA_CONFIG_DIR", str(tmp_path))
    monkeypatch.delenv("CODEVANTA_GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("CODEVANTA_ASSISTANT_KEY", raising=False)
    return tmp_path
