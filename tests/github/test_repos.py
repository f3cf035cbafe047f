"""
Tests for github.repos, github.create_repo and github.branches/commits
"""

import pytest

from codevanta.github.branches import create_branch, list_branches
from codevanta.github.commits import list_commits
from codevanta.github.create_repo import CreateRepoRequest, create_user_repo
from codevanta.github.errors import AuthError, NetworkError, ValidationError
from codevanta.github.repos import _extract_next_link, list_repos, repo_exists


def _repo_json(name, owner="octocat", default_branch="main"):
    return {
        "name": name,
        "full_name": f"{owner}/{name}",
        "owner": {"login": owner},
        "default_branch": default_branch,
        "private": False,
    }


class TestListRepos:
    """Test repository listing with Link pagination"""

    def test_follows_next_link(self, make_client):
        next_url = "https://api.github.com/user/repos?page=2"
        client = make_client(
            (200, [_repo_json("a")], {"Link": f'<{next_url}>; rel="next"'}),
            (200, [_repo_json("b"), "junk", {"name": ""}], {}),
        )

        repos = list_repos(client)

        assert [r.full_name for r in repos] == ["octocat/a", "octocat/b"]
        assert client.requests[1][1] == next_url

    def test_max_pages(self, make_client):
        link = {"Link": '<https://api.github.com/user/repos?page=2>; rel="next"'}
        client = make_client((200, [_repo_json("a")], link))

        assert len(list_repos(client, max_pages=1)) == 1
        assert len(client.requests) == 1

    def test_extract_next_link(self):
        header = '<https://x/2>; rel="next", <https://x/9>; rel="last"'
        assert _extract_next_link({"link": header}) == "https://x/2"
        assert _extract_next_link({}) is None


class TestRepoExists:
    """Test name availability checks"""

    def test_exists(self, make_client):
        client = make_client((200, _repo_json("site"), {}))
        assert repo_exists(client, "octocat", "site")
        assert client.requests[0][1] == "/repos/octocat/site"

    def test_missing(self, make_client):
        assert not repo_exists(make_client((404, None, {})), "octocat", "nope")

    def test_other_errors_propagate(self, make_client):
        with pytest.raises(AuthError):
            repo_exists(make_client((401, None, {})), "octocat", "site")


class TestCreateRepo:
    """Test repository creation"""

    def test_creates_repository(self, make_client):
        client = make_client((201, _repo_json("new-site"), {}))

        repo = create_user_repo(
            client, CreateRepoRequest(name="new-site", private=True, description="  demo  ")
        )

        assert repo.full_name == "octocat/new-site"
        method, url, body = client.requests[0]
        assert (method, url) == ("POST", "/user/repos")
        assert body == {"name": "new-site", "private": True, "auto_init": False, "description": "demo"}

    def test_taken_name(self, make_client):
        client = make_client((422, None, {}))

        with pytest.raises(ValidationError) as exc_info:
            create_user_repo(client, CreateRepoRequest(name="site", private=False))

        assert "already exists" in exc_info.value.message

    def test_invalid_name_makes_no_request(self, make_client):
        client = make_client()

        with pytest.raises(ValidationError):
            create_user_repo(client, CreateRepoRequest(name="bad name", private=False))

        assert client.requests == []


class TestBranchesAndCommits:
    """Test branch listing, branch creation and commit history"""

    def test_list_branches(self, make_client):
        client = make_client(
            (200, [{"name": "main", "commit": {"sha": "abc123"}}, {"name": ""}, {"name": "dev"}], {})
        )

        branches = list_branches(client, "octocat", "site")

        assert [(b.name, b.head_sha) for b in branches] == [("main", "abc123"), ("dev", "")]
        assert not branches[1].has_commits

    def test_list_branches_bad_payload(self, make_client):
        with pytest.raises(NetworkError):
            list_branches(make_client((200, {}, {})), "octocat", "site")

    def test_create_branch(self, make_client):
        client = make_client((201, {"ref": "refs/heads/feature-x", "object": {"sha": "abc123"}}, {}))

        branch = create_branch(client, "octocat", "site", "feature-x", "abc123")

        assert branch.name == "feature-x"
        assert branch.head_sha == "abc123"
        assert client.requests[0] == (
            "POST",
            "/repos/octocat/site/git/refs",
            {"ref": "refs/heads/feature-x", "sha": "abc123"},
        )

    def test_list_commits(self, make_client):
        client = make_client(
            (
                200,
                [
                    {
                        "sha": "c2",
                        "commit": {"message": "Update a\n\nbody", "author": {"name": "Mona", "date": "2024-01-02T00:00:00Z"}},
                        "author": {"login": "octocat"},
                    },
                    {"sha": "c1", "commit": {"message": "Initial", "author": {"name": "Mona"}}, "author": None},
                ],
                {},
            )
        )

        commits = list_commits(client, "octocat", "site", "main")

        assert [c.sha for c in commits] == ["c2", "c1"]
        assert commits[0].author == "octocat"
        assert commits[0].summary == "Update a"
        assert commits[1].author == "Mona"
        assert client.requests[0][1] == "/repos/octocat/site/commits?sha=main&per_page=30"
