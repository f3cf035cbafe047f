# -*- coding: utf-8 -*-
"""
GitHub Identity Fetcher
Verify the current viewer identity via REST API.
"""

from __future__ import annotations

from codevanta.github.api_client import GitHubApiClient
from codevanta.github.errors import GitHubApiError
from codevanta.github.types import UserInfo


def fetch_viewer_identity(client: GitHubApiClient) -> UserInfo:
    """
    Fetch the authenticated user's identity using GET /user.

    Raises:
        AuthError: token rejected or lacking scope
        NetworkError: transport failure or malformed payload
    """
    status, js, headers = client.request_json(
        "GET", "/user", headers=None, body=None, timeout_s=10
    )

    if not isinstance(js, dict) or not js.get("login"):
        raise GitHubApiError.from_json_error("user payload has no login")

    uid = js.get("id")
    return UserInfo(
        login=js["login"],
        user_id=uid if isinstance(uid, int) else None,
        name=js.get("name"),
        avatar_url=js.get("avatar_url"),
    )
