# -*- coding: utf-8 -*-
"""
Input Validation and Sanitization

Checks the user-controlled names and paths that end up in GitHub API URLs
and request bodies: repositories, owners, branches, workspace files, and
commit messages.

Every validator returns an (is_valid, error_message) tuple; callers decide
whether to raise.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Pattern, Tuple

REPO_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_.-]+$")
OWNER_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")
BRANCH_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9/_.-]+$")

# Control characters other than tab, newline and carriage return
UNSAFE_COMMIT_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

MAX_REPO_NAME_LENGTH = 100
MAX_OWNER_NAME_LENGTH = 39
MAX_BRANCH_NAME_LENGTH = 255
MAX_COMMIT_MESSAGE_LENGTH = 50000
MAX_PATH_COMPONENT_LENGTH = 255

Result = Tuple[bool, str]
_OK: Result = (True, "")


def _check_identifier(
    value: str, label: str, pattern: Pattern[str], max_length: int, allowed: str
) -> Result:
    if not value or not value.strip():
        return False, f"{label} cannot be empty"
    if len(value) > max_length:
        return False, f"{label} too long (max {max_length} chars)"
    if not pattern.match(value):
        return False, f"{label} contains invalid characters (use only {allowed})"
    return _OK


def validate_repo_name(name: str) -> Result:
    """Repository names: letters, digits, dots, hyphens, underscores."""
    result = _check_identifier(
        name,
        "Repository name",
        REPO_NAME_PATTERN,
        MAX_REPO_NAME_LENGTH,
        "letters, numbers, dots, hyphens, underscores",
    )
    if not result[0]:
        return result
    if name in (".", "..", ".git"):
        return False, "Repository name is reserved"
    if name.startswith(".") or name.endswith("."):
        return False, "Repository name cannot start or end with a dot"
    return _OK


def validate_owner_name(owner: str) -> Result:
    result = _check_identifier(
        owner,
        "Owner name",
        OWNER_NAME_PATTERN,
        MAX_OWNER_NAME_LENGTH,
        "letters, numbers, hyphens, underscores",
    )
    if result[0] and (owner.startswith("-") or owner.endswith("-")):
        return False, "Owner name cannot start or end with a hyphen"
    return result


def validate_branch_name(branch: str) -> Result:
    """
    Validate a Git branch name.

    Only a safe subset of what git accepts is allowed, plus the ref-format
    rules GitHub enforces: no leading or trailing slash, no "..", no "@{",
    and no ".lock" suffix.
    """
    result = _check_identifier(
        branch,
        "Branch name",
        BRANCH_NAME_PATTERN,
        MAX_BRANCH_NAME_LENGTH,
        "letters, numbers, slashes, dots, hyphens, underscores",
    )
    if not result[0]:
        return result
    if branch.startswith("/") or branch.endswith("/"):
        return False, "Branch name cannot start or end with slash"
    if branch.endswith(".lock"):
        return False, "Branch name cannot end with .lock"
    if ".." in branch or "@{" in branch:
        return False, "Branch name contains invalid sequences"
    return _OK


def validate_full_repo_identifier(owner: str, name: str) -> Result:
    """Validate owner/name as a pair; the message names the failing half."""
    ok, reason = validate_owner_name(owner)
    if not ok:
        return False, f"Invalid owner: {reason}"
    ok, reason = validate_repo_name(name)
    if not ok:
        return False, f"Invalid repository name: {reason}"
    return _OK


def validate_file_name(name: str) -> Result:
    """A single file or folder name, without separators."""
    if not name or not name.strip():
        return False, "Name cannot be empty"
    if "/" in name or "\\" in name:
        return False, "Name cannot contain path separators"
    if name in (".", ".."):
        return False, "Name is reserved"
    if "\0" in name:
        return False, "Name contains null bytes"
    if len(name) > MAX_PATH_COMPONENT_LENGTH:
        return False, f"Name too long (max {MAX_PATH_COMPONENT_LENGTH} chars)"
    return _OK


def validate_file_path(file_path: str) -> Result:
    """
    Validate a repository-relative workspace path.

    Paths use forward slashes, are relative to the repository root and may
    not escape it.
    """
    if not file_path:
        return False, "File path cannot be empty"
    if "\0" in file_path:
        return False, "File path contains null bytes"
    if "\\" in file_path:
        return False, "File path must use forward slashes"

    path = PurePosixPath(file_path)
    if path.is_absolute():
        return False, "File path must be relative to the repository root"
    if ".." in path.parts:
        return False, "File path contains parent directory references (..)"
    if any(len(part) > MAX_PATH_COMPONENT_LENGTH for part in path.parts):
        return False, f"Path component too long (max {MAX_PATH_COMPONENT_LENGTH} chars)"
    if file_path.endswith("/") or "//" in file_path:
        return False, "File path contains empty components"
    return _OK


def sanitize_commit_message(message: str) -> str:
    """
    Strip control characters and normalize line endings.

    Args:
        message: Raw commit message

    Returns:
        Message safe to send as the commit message of a contents write
    """
    if not message:
        return ""
    message = message[:MAX_COMMIT_MESSAGE_LENGTH]
    sanitized = UNSAFE_COMMIT_CHARS.sub("", message)
    sanitized = sanitized.replace("\r\n", "\n").replace("\r", "\n")
    return sanitized.strip()
