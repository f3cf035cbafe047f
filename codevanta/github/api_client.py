# -*- coding: utf-8 -*-
"""
GitHub REST API Client (stdlib-only)

Implements a minimal JSON client using urllib.request with:
- Structured error classification (via errors.py)
- Exactly one request per call: retries are always initiated by the caller
- No token/credential exposure in logs

Security: never logs Authorization headers or tokens.
"""

from __future__ import annotations

import json
import socket
import ssl
from typing import Any, Dict, Optional, Tuple
from urllib import error, request

from codevanta.core import log
from codevanta.github.errors import GitHubApiError

DEFAULT_HOST = "api.github.com"
API_VERSION = "2022-11-28"


class GitHubApiClient:
    """
    Minimal GitHub JSON client.

    - Base URL: https://<host> (api.github.com unless GitHub Enterprise)
    - Headers include User-Agent, Accept and the pinned API version
    - Authorization bearer token added when provided
    - Non-2xx responses raise the typed error from GitHubApiError.from_http_error
    - Never exposes tokens or Authorization headers in logs
    """

    def __init__(self, host: str, token: str, user_agent: str):
        self._base_url = f"https://{host or DEFAULT_HOST}"
        self._token = token or ""
        self._user_agent = user_agent or "CodeVanta/1.0"

    @property
    def base_url(self) -> str:
        return self._base_url

    def _absolute_url(self, url: str) -> str:
        if url.startswith("http://") or url.startswith("https://"):
            return url
        return f"{self._base_url}/{url.lstrip('/')}"

    def _headers(self, extra: Optional[Dict[str, str]]) -> Dict[str, str]:
        # Authorization is only ever set from the token; never logged
        merged = {
            "Accept": "application/vnd.github+json",
            "User-Agent": self._user_agent,
            "X-GitHub-Api-Version": API_VERSION,
        }
        if self._token:
            merged["Authorization"] = f"Bearer {self._token}"
        for k, v in (extra or {}).items():
            if k.lower() != "authorization":
                merged[k] = v
        return merged

    @staticmethod
    def _send(req: request.Request, timeout_s: int) -> Tuple[int, Dict[str, str], bytes]:
        """Exchange one request; HTTP error statuses are returned, not raised."""
        try:
            ctx = ssl.create_default_context()
            with request.urlopen(req, timeout=float(timeout_s), context=ctx) as resp:
                return (
                    getattr(resp, "status", 0),
                    dict(resp.headers.items()),
                    resp.read(),
                )
        except error.HTTPError as e:
            return e.code, dict(e.headers.items()) if e.headers else {}, e.read() or b""
        except (error.URLError, ssl.SSLError, socket.timeout, OSError) as e:
            raise GitHubApiError.from_network_error(str(e)) from e

    def request_json(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]],
        body: Optional[Dict[str, Any]],
        timeout_s: int,
    ) -> Tuple[int, Any, Dict[str, str]]:
        """
        Perform a single HTTP request.

        Returns:
            (status, parsed_json, headers) tuple; parsed_json may be a dict,
            a list or None for empty bodies

        Raises:
            GitHubApiError subclass: For HTTP errors (classified by status)
            NetworkError: For network-level errors and unparseable bodies
        """
        req_headers = self._headers(headers)

        data: Optional[bytes] = None
        if body is not None:
            try:
                data = json.dumps(body).encode("utf-8")
            except (TypeError, ValueError) as e:
                raise GitHubApiError.invalid_input(
                    "Failed to prepare request.", details=str(e)
                ) from e
            req_headers["Content-Type"] = "application/json"

        req = request.Request(
            self._absolute_url(url),
            data=data,
            headers=req_headers,
            method=(method or "GET").upper(),
        )
        status, resp_headers, raw = self._send(req, timeout_s)
        log.debug(f"GitHub API {method} {url} -> {status}")

        if not 200 <= status < 300:
            raise GitHubApiError.from_http_error(
                status, resp_headers, raw.decode("utf-8", errors="replace")
            )
        if not raw:
            return status, None, resp_headers
        try:
            return status, json.loads(raw.decode("utf-8")), resp_headers
        except (UnicodeDecodeError, ValueError) as e:
            raise GitHubApiError.from_json_error(str(e)) from e
