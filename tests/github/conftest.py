# -*- coding: utf-8 -*-
"""
Scripted stand-in for GitHubApiClient.request_json.
"""

import pytest

from codevanta.github.errors import GitHubApiError


class StubClient:
    """
    Replays queued responses in order and records each request.

    A queued item is either a (status, json, headers) tuple or an exception
    instance, which is raised instead.
    """

    def __init__(self, *responses):
        self._responses = list(responses)
        self.requests = []

    def request_json(self, method, url, headers, body, timeout_s):
        self.requests.append((method, url, body))
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        status, js, hdrs = item
        if status >= 300:
            raise GitHubApiError.from_http_error(status, hdrs, "")
        return status, js, hdrs or {}


@pytest.fixture
def make_client():
    """Factory: make_client(*responses) -> StubClient"""
    return StubClient
