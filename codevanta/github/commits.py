# -*- coding: utf-8 -*-
"""
GitHub commit history (read-only).
"""

from __future__ import annotations

from typing import List
from urllib.parse import quote

from codevanta.github.api_client import GitHubApiClient
from codevanta.github.errors import GitHubApiError
from codevanta.github.types import CommitRecord


def _parse_commit(item: dict) -> CommitRecord:
    commit = item.get("commit") or {}
    author_obj = commit.get("author") or {}
    login = (item.get("author") or {}).get("login")
    return CommitRecord(
        sha=item.get("sha") or "",
        message=commit.get("message") or "",
        author=login or author_obj.get("name") or "",
        timestamp=author_obj.get("date"),
    )


def list_commits(
    client: GitHubApiClient, owner: str, repo: str, branch: str, per_page: int = 30
) -> List[CommitRecord]:
    """
    Most recent commits on branch, newest first.
    """
    url = (
        f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}/commits"
        f"?sha={quote(branch, safe='')}&per_page={per_page}"
    )
    status, js, headers = client.request_json(
        "GET", url, headers=None, body=None, timeout_s=15
    )
    if not isinstance(js, list):
        raise GitHubApiError.from_json_error("commit payload is not a list")
    return [_parse_commit(item) for item in js if isinstance(item, dict)]
