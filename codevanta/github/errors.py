# -*- coding: utf-8 -*-
"""
GitHub API Error Handling

Every failure of a gateway call surfaces as one of the typed subclasses of
GitHubApiError so callers can branch on the exception type:

- AuthError: credential invalid, expired or lacking scope (401/403)
- NotFoundError: missing path, branch or repository (404)
- ConflictError: stale content hash on update (409)
- NetworkError: transport failures, 5xx, malformed responses
- ValidationError: invalid names or inputs (400/422, local checks)

No tokens are exposed in error details.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

_SESSION_EXPIRED = "Your GitHub session has expired. Sign in again to continue."
_FORBIDDEN = "Access denied. Check your GitHub permissions and token scopes."
_NOT_FOUND = "The requested repository, branch or file was not found."
_STALE_FILE = "The file changed on GitHub since it was loaded. Reload it and try again."


@dataclass
class GitHubApiError(Exception):
    """
    Structured GitHub API error.

    Attributes:
        code: Error classification (UNAUTHORIZED, FORBIDDEN, NOT_FOUND, CONFLICT,
              RATE_LIMITED, NETWORK, TIMEOUT, BAD_RESPONSE, VALIDATION, UNKNOWN)
        message: User-facing message (no tokens, no headers)
        status: HTTP status code, None for network or local errors
        retry_after_s: Suggested wait before the caller tries again
        rate_limit_reset_utc: ISO 8601 time the rate limit resets
        details: Redacted technical details safe for copy-to-clipboard
    """

    code: str
    message: str
    status: Optional[int] = None
    retry_after_s: Optional[int] = None
    rate_limit_reset_utc: Optional[str] = None
    details: str = ""

    def __str__(self) -> str:
        return self.message

    @staticmethod
    def from_http_error(
        status: int,
        headers: Optional[dict] = None,
        body: Optional[str] = None,
    ) -> GitHubApiError:
        """
        Classify a non-2xx response.

        Args:
            status: HTTP status code
            headers: Response headers (never includes Authorization)
            body: Response body text, used to spot sha mismatches on 422

        Returns:
            The matching GitHubApiError subclass
        """
        lowered = {k.lower(): v for k, v in (headers or {}).items()}
        retry_after_s, reset_utc = _retry_hints(lowered)

        if status == 429 or (
            status == 403 and str(lowered.get("x-ratelimit-remaining")) == "0"
        ):
            suffix = f" (resets at {reset_utc})" if reset_utc else ""
            return RateLimitError(
                code="RATE_LIMITED",
                status=status,
                message=f"GitHub rate limit reached. Please try again in a few minutes.{suffix}",
                retry_after_s=retry_after_s,
                rate_limit_reset_utc=reset_utc,
                details=f"HTTP {status}: Rate limit exhausted.",
            )

        if status == 422 and "does not match" in (body or "").lower():
            # GitHub reports some sha mismatches as 422 rather than 409
            return ConflictError(
                code="CONFLICT",
                status=status,
                message=_STALE_FILE,
                details="HTTP 422: Content hash does not match the current file.",
            )

        known = _BY_STATUS.get(status)
        if known is not None:
            cls, code, message, details = known
            return cls(code=code, status=status, message=message, details=details)

        if status >= 500:
            transient = status in (502, 503, 504)
            return NetworkError(
                code="NETWORK",
                status=status,
                message=(
                    "GitHub is temporarily unavailable. Retrying may help."
                    if transient
                    else "GitHub is experiencing issues. Please try again."
                ),
                retry_after_s=retry_after_s or (5 if transient else 10),
                details=f"HTTP {status}: GitHub server error.",
            )

        return GitHubApiError(
            code="UNKNOWN",
            status=status,
            message=f"GitHub API error (status {status}). Please try again.",
            details=f"HTTP {status}: Unexpected response.",
        )

    @staticmethod
    def from_network_error(error_msg: str) -> NetworkError:
        """Classify a transport failure (timeout, DNS, SSL, refused connection)."""
        lowered = error_msg.lower()
        if "timeout" in lowered or "timed out" in lowered:
            return NetworkError(
                code="TIMEOUT",
                message="Request timed out. Check your network connection and try again.",
                retry_after_s=2,
                details=f"Network timeout: {error_msg}",
            )
        if any(word in lowered for word in ("connection", "ssl", "dns")):
            return NetworkError(
                code="NETWORK",
                message="Network error. Check your internet connection and try again.",
                retry_after_s=3,
                details=f"Connection error: {error_msg}",
            )
        return NetworkError(
            code="NETWORK",
            message="Network error. Please check your connection and try again.",
            retry_after_s=2,
            details=f"Network error: {error_msg}",
        )

    @staticmethod
    def from_json_error(error_msg: str) -> NetworkError:
        """A response arrived but its body is not what the API documents."""
        return NetworkError(
            code="BAD_RESPONSE",
            message="GitHub returned unexpected data. Try again.",
            details=f"JSON parse error: {error_msg}",
        )

    @staticmethod
    def invalid_input(message: str, details: str = "") -> ValidationError:
        """Create a ValidationError for a locally rejected input."""
        return ValidationError(code="VALIDATION", message=message, details=details)


class AuthError(GitHubApiError):
    """Credential invalid, expired or missing required scopes."""


class NotFoundError(GitHubApiError):
    """Missing path, branch or repository."""


class ConflictError(GitHubApiError):
    """Stale content hash on update."""


class NetworkError(GitHubApiError):
    """Transport-level failure or server-side error."""


class RateLimitError(NetworkError):
    """Rate limit exhausted; retry_after_s says when to come back."""


class ValidationError(GitHubApiError):
    """Invalid name or input, e.g. a duplicate repository name."""


_BY_STATUS: Dict[int, Tuple[type, str, str, str]] = {
    401: (
        AuthError,
        "UNAUTHORIZED",
        _SESSION_EXPIRED,
        "HTTP 401: Authentication failed. Token may be revoked or expired.",
    ),
    403: (
        AuthError,
        "FORBIDDEN",
        _FORBIDDEN,
        "HTTP 403: Forbidden. Missing required scopes or insufficient permissions.",
    ),
    404: (NotFoundError, "NOT_FOUND", _NOT_FOUND, "HTTP 404: Not Found."),
    409: (
        ConflictError,
        "CONFLICT",
        _STALE_FILE,
        "HTTP 409: Conflict. Content hash does not match the current file.",
    ),
    400: (
        ValidationError,
        "VALIDATION",
        "Bad request. Check your input and try again.",
        "HTTP 400: Bad Request.",
    ),
    422: (
        ValidationError,
        "VALIDATION",
        "Invalid data sent to GitHub. Check your input and try again.",
        "HTTP 422: Unprocessable Entity. Request validation failed.",
    ),
}


def _retry_hints(headers: Dict[str, str]) -> Tuple[Optional[int], Optional[str]]:
    """
    Seconds to wait and the ISO reset time, from lower-cased headers.

    Retry-After wins over the X-RateLimit-Reset timestamp.
    """
    retry_after_s: Optional[int] = None
    reset_utc: Optional[str] = None

    reset = headers.get("x-ratelimit-reset")
    if reset:
        try:
            reset_ts = int(reset)
            retry_after_s = max(0, reset_ts - int(time.time()))
            reset_utc = datetime.fromtimestamp(reset_ts, tz=timezone.utc).isoformat()
        except (ValueError, OverflowError, OSError):
            pass

    retry_after = headers.get("retry-after")
    if retry_after:
        try:
            retry_after_s = int(retry_after)
        except ValueError:
            pass

    return retry_after_s, reset_utc
