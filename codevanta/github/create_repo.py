# -*- coding: utf-8 -*-
"""
GitHub Repository Creation

Implements POST /user/repos via GitHub REST API with error handling.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from codevanta.core import log
from codevanta.core.input_validator import validate_repo_name
from codevanta.github.api_client import GitHubApiClient
from codevanta.github.errors import GitHubApiError, ValidationError
from codevanta.github.repos import parse_repo
from codevanta.github.types import RepositoryRef


@dataclass
class CreateRepoRequest:
    """Request to create a new repository."""

    name: str
    private: bool
    description: Optional[str] = None
    auto_init: bool = False  # files are written by the flush, not by GitHub


def create_user_repo(
    client: GitHubApiClient,
    req: CreateRepoRequest,
) -> RepositoryRef:
    """
    Create a new repository on GitHub for the authenticated user.

    Calls POST https://api.github.com/user/repos with:
      {
        "name": <name>,
        "private": <private>,
        "description": <description> (optional),
        "auto_init": false
      }

    Args:
        client: GitHubApiClient instance
        req: CreateRepoRequest with name, private, etc.

    Returns:
        RepositoryRef on success

    Raises:
        ValidationError: invalid name, or the name already exists
        GitHubApiError subclass: auth, rate limit or network failures
    """
    ok, reason = validate_repo_name(req.name)
    if not ok:
        raise GitHubApiError.invalid_input(reason)

    body = {
        "name": req.name,
        "private": bool(req.private),
        "auto_init": bool(req.auto_init),
    }

    if req.description and req.description.strip():
        body["description"] = req.description.strip()

    try:
        status, response_json, headers = client.request_json(
            method="POST",
            url="/user/repos",
            headers=None,
            body=body,
            timeout_s=30,
        )
    except ValidationError as e:
        # 422 here almost always means the name is taken
        log.warning(f"Repository creation rejected: {req.name}")
        raise ValidationError(
            code=e.code,
            status=e.status,
            message=f"Repository '{req.name}' already exists or is invalid. Try a different name.",
            details=e.details,
        ) from e

    if not isinstance(response_json, dict):
        raise GitHubApiError.from_json_error("repository payload is not an object")

    repo = parse_repo(response_json)
    if not repo.owner or not repo.name:
        raise GitHubApiError.from_json_error("incomplete repository payload")

    log.info(f"Repository created: {repo.full_name}")
    return repo
