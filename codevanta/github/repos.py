# -*- coding: utf-8 -*-
"""
GitHub repositories listing utilities.
List repos with pagination and check repository name availability.
"""

from __future__ import annotations

from typing import List, Optional
from urllib.parse import quote

from codevanta.core import log
from codevanta.github.api_client import GitHubApiClient
from codevanta.github.errors import NotFoundError
from codevanta.github.types import RepositoryRef


def _extract_next_link(headers: dict) -> Optional[str]:
    """Parse the HTTP Link header and return the rel="next" URL if present."""
    if not headers:
        return None

    link_header = None
    for k, v in headers.items():
        if k.lower() == "link":
            link_header = v
            break
    if not link_header:
        return None

    for part in link_header.split(","):
        section = part.split(";")
        if len(section) < 2:
            continue
        url_part = section[0].strip()
        rel_part = ";".join(section[1:]).strip().lower()
        if 'rel="next"' in rel_part:
            if url_part.startswith("<") and url_part.endswith(">"):
                return url_part[1:-1]
            return url_part
    return None


def parse_repo(item: dict) -> RepositoryRef:
    """Build a RepositoryRef from a GitHub repository payload."""
    full_name = item.get("full_name") or ""
    owner_obj = item.get("owner") or {}
    owner = owner_obj.get("login") or ""
    if not owner and "/" in full_name:
        owner = full_name.split("/", 1)[0]
    name = item.get("name") or full_name.split("/")[-1]
    return RepositoryRef(
        owner=owner,
        name=name,
        default_branch=item.get("default_branch"),
        private=bool(item.get("private", False)),
        description=item.get("description"),
        html_url=item.get("html_url") or "",
        updated_at=item.get("updated_at"),
    )


def list_repos(
    client: GitHubApiClient,
    per_page: int = 100,
    max_pages: int = 10,
) -> List[RepositoryRef]:
    """
    List repositories the viewer can access via GitHub REST API.

    - Uses GET /user/repos sorted by most recently updated.
    - Paginates using the Link header.

    Args:
        client: GitHubApiClient instance
        per_page: Items per page (default 100, max 100)
        max_pages: Maximum pages to fetch

    Returns:
        List[RepositoryRef]: repositories, most recently updated first

    Raises:
        GitHubApiError subclass on failure
    """
    results: List[RepositoryRef] = []

    if per_page <= 0 or per_page > 100:
        per_page = 100
    if max_pages <= 0:
        max_pages = 1

    url: Optional[str] = (
        f"/user/repos?per_page={per_page}"
        "&sort=updated&direction=desc"
        "&affiliation=owner,collaborator,organization_member"
        "&visibility=all"
    )

    page = 0
    while url and page < max_pages:
        page += 1
        status, js, headers = client.request_json(
            "GET", url, headers=None, body=None, timeout_s=15
        )

        if not isinstance(js, list):
            log.warning("Unexpected GitHub response payload; expected list")
            js = []

        for item in js:
            if not isinstance(item, dict):
                log.debug("Skipping non-object repo entry")
                continue
            repo = parse_repo(item)
            if not repo.owner or not repo.name:
                log.debug("Skipping repo entry without owner/name")
                continue
            results.append(repo)

        url = _extract_next_link(headers or {})

    return results


def repo_exists(client: GitHubApiClient, owner: str, name: str) -> bool:
    """
    Check whether owner/name already exists (GET /repos/{owner}/{name}).

    Returns:
        True if the repository exists, False on 404

    Raises:
        GitHubApiError subclass for any other failure
    """
    try:
        client.request_json(
            "GET",
            f"/repos/{quote(owner, safe='')}/{quote(name, safe='')}",
            headers=None,
            body=None,
            timeout_s=10,
        )
    except NotFoundError:
        return False
    return True
