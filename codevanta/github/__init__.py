# -*- coding: utf-8 -*-
"""
GitHub REST access for the workspace sync engine.
"""

from codevanta.github.errors import (
    AuthError,
    ConflictError,
    GitHubApiError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)

__all__ = [
    "AuthError",
    "ConflictError",
    "GitHubApiError",
    "NetworkError",
    "NotFoundError",
    "RateLimitError",
    "ValidationError",
]
