# -*- coding: utf-8 -*-
"""
GitHub branch listing and creation.
"""

from __future__ import annotations

from typing import List
from urllib.parse import quote

from codevanta.core import log
from codevanta.github.api_client import GitHubApiClient
from codevanta.github.errors import GitHubApiError
from codevanta.github.repos import _extract_next_link
from codevanta.github.types import BranchRef


def _repo_url(owner: str, repo: str) -> str:
    return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"


def list_branches(
    client: GitHubApiClient, owner: str, repo: str, max_pages: int = 10
) -> List[BranchRef]:
    """
    List branches of owner/repo in the order GitHub returns them.

    An empty repository has no branches and yields an empty list.
    """
    results: List[BranchRef] = []
    url = f"{_repo_url(owner, repo)}/branches?per_page=100"

    page = 0
    while url and page < max_pages:
        page += 1
        status, js, headers = client.request_json(
            "GET", url, headers=None, body=None, timeout_s=15
        )
        if not isinstance(js, list):
            raise GitHubApiError.from_json_error("branch payload is not a list")

        for item in js:
            name = (item or {}).get("name")
            if not name:
                log.debug("Skipping branch entry without name")
                continue
            commit = item.get("commit") or {}
            results.append(BranchRef(name=name, head_sha=commit.get("sha") or ""))

        url = _extract_next_link(headers or {})

    return results


def create_branch(
    client: GitHubApiClient, owner: str, repo: str, name: str, base_sha: str
) -> BranchRef:
    """
    Create refs/heads/<name> pointing at base_sha (POST /git/refs).

    Raises:
        ValidationError: the ref already exists or the name is rejected
        NotFoundError: unknown repository or base commit
    """
    status, js, headers = client.request_json(
        "POST",
        f"{_repo_url(owner, repo)}/git/refs",
        headers=None,
        body={"ref": f"refs/heads/{name}", "sha": base_sha},
        timeout_s=15,
    )
    sha = base_sha
    if isinstance(js, dict):
        sha = (js.get("object") or {}).get("sha") or base_sha
    log.info(f"Branch created: {owner}/{repo}@{name}")
    return BranchRef(name=name, head_sha=sha)
