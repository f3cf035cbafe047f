"""
Tests for github.gateway - async RemoteGateway over the REST functions
"""

import pytest

from codevanta.github.errors import ConflictError
from codevanta.github.gateway import GitHubGateway, RemoteGateway


class TestGitHubGateway:
    """Test that each gateway call is one request in a worker thread"""

    def test_satisfies_protocol(self, make_client):
        assert isinstance(GitHubGateway(make_client()), RemoteGateway)

    @pytest.mark.asyncio
    async def test_get_user_remembers_login(self, make_client):
        gateway = GitHubGateway(make_client((200, {"login": "octocat", "id": 7}, {})))

        user = await gateway.get_user()

        assert user.login == "octocat"
        assert gateway.login == "octocat"

    @pytest.mark.asyncio
    async def test_repository_exists_fetches_identity_once(self, make_client):
        client = make_client(
            (200, {"login": "octocat"}, {}),
            (404, None, {}),
            (200, {"name": "site"}, {}),
        )
        gateway = GitHubGateway(client)

        assert not await gateway.repository_exists("fresh")
        assert await gateway.repository_exists("site")

        assert [url for _, url, _ in client.requests] == [
            "/user",
            "/repos/octocat/fresh",
            "/repos/octocat/site",
        ]

    @pytest.mark.asyncio
    async def test_update_file_passes_hash_and_branch(self, make_client):
        client = make_client((200, {"content": {"path": "a.txt", "name": "a.txt", "sha": "s2"}}, {}))
        gateway = GitHubGateway(client)

        node = await gateway.update_file("octocat", "site", "a.txt", "x", "Update a.txt", "s1", "dev")

        body = client.requests[0][2]
        assert body["sha"] == "s1"
        assert body["branch"] == "dev"
        assert node.sha == "s2"

    @pytest.mark.asyncio
    async def test_create_file_targets_default_branch(self, make_client):
        client = make_client((201, {"content": {"path": "a.txt", "name": "a.txt", "sha": "s1"}}, {}))
        gateway = GitHubGateway(client)

        await gateway.create_file("octocat", "site", "a.txt", "x", "Add a.txt")

        body = client.requests[0][2]
        assert "branch" not in body
        assert "sha" not in body

    @pytest.mark.asyncio
    async def test_errors_propagate_unmodified(self, make_client):
        gateway = GitHubGateway(make_client((409, None, {})))

        with pytest.raises(ConflictError):
            await gateway.update_file("octocat", "site", "a.txt", "x", "m", "stale", "main")

    @pytest.mark.asyncio
    async def test_create_repository(self, make_client):
        payload = {"name": "new", "full_name": "octocat/new", "owner": {"login": "octocat"}, "default_branch": "main"}
        client = make_client((201, payload, {}))
        gateway = GitHubGateway(client)

        repo = await gateway.create_repository("new", "", True)

        assert repo.full_name == "octocat/new"
        assert client.requests[0][2]["private"] is True
        assert gateway.login == "octocat"
