# -*- coding: utf-8 -*-
"""
GitHub repository contents: directory listings, file reads and writes.

File content always travels as complete text, base64-encoded on the wire.
Writes return the resulting FileNode so its new sha can serve as the next
concurrency token.
"""

from __future__ import annotations

import base64
import binascii
from typing import List, Optional
from urllib.parse import quote

from codevanta.core import log
from codevanta.core.input_validator import sanitize_commit_message
from codevanta.github.api_client import GitHubApiClient
from codevanta.github.errors import GitHubApiError
from codevanta.github.types import FileNode


def _contents_url(owner: str, repo: str, path: str) -> str:
    base = f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}/contents"
    path = path.strip("/")
    if path:
        return f"{base}/{quote(path, safe='/')}"
    return base


def parse_node(item: dict) -> FileNode:
    """Build a FileNode from a contents API entry."""
    path = item.get("path") or item.get("name") or ""
    if item.get("type") == "dir":
        return FileNode.directory(path, name=item.get("name"))
    size = item.get("size")
    return FileNode.file(
        path,
        size=size if isinstance(size, int) else None,
        sha=item.get("sha"),
        name=item.get("name"),
    )


def list_contents(
    client: GitHubApiClient, owner: str, repo: str, path: str, ref: str
) -> List[FileNode]:
    """
    List one directory level (GET /repos/{owner}/{repo}/contents/{path}?ref=).

    Raises:
        NotFoundError: path or ref does not exist
        ValidationError: path names a file rather than a directory
    """
    url = f"{_contents_url(owner, repo, path)}?ref={quote(ref, safe='')}"
    status, js, headers = client.request_json(
        "GET", url, headers=None, body=None, timeout_s=15
    )
    if isinstance(js, dict):
        raise GitHubApiError.invalid_input(f"'{path}' is not a directory")
    if not isinstance(js, list):
        raise GitHubApiError.from_json_error("contents payload is not a list")
    return [parse_node(item) for item in js if isinstance(item, dict)]


def _decode_content(js: dict, path: str) -> str:
    encoding = js.get("encoding")
    if encoding != "base64":
        raise GitHubApiError.invalid_input(
            f"'{path}' is too large to open in the editor",
            details=f"Unsupported content encoding: {encoding}",
        )
    try:
        raw = base64.b64decode(js.get("content") or "")
    except (binascii.Error, ValueError) as e:
        raise GitHubApiError.from_json_error(f"invalid base64 content: {e}") from e
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise GitHubApiError.invalid_input(
            f"'{path}' is not a UTF-8 text file and cannot be opened in the editor",
            details=f"UTF-8 decode error: {e}",
        ) from e


def get_file_content(
    client: GitHubApiClient, owner: str, repo: str, path: str, ref: str
) -> str:
    """Fetch the complete text of a file at ref."""
    url = f"{_contents_url(owner, repo, path)}?ref={quote(ref, safe='')}"
    status, js, headers = client.request_json(
        "GET", url, headers=None, body=None, timeout_s=15
    )
    if isinstance(js, list):
        raise GitHubApiError.invalid_input(f"'{path}' is a directory")
    if not isinstance(js, dict):
        raise GitHubApiError.from_json_error("file payload is not an object")
    return _decode_content(js, path)


def _encode(content: str) -> str:
    return base64.b64encode(content.encode("utf-8")).decode("ascii")


def _written_node(js, path: str) -> FileNode:
    content = js.get("content") if isinstance(js, dict) else None
    if not isinstance(content, dict):
        raise GitHubApiError.from_json_error("write response has no content entry")
    return parse_node(content)


def put_file(
    client: GitHubApiClient,
    owner: str,
    repo: str,
    path: str,
    content: str,
    message: str,
    sha: Optional[str] = None,
    branch: Optional[str] = None,
) -> FileNode:
    """
    Create or update a file (PUT /repos/{owner}/{repo}/contents/{path}).

    With sha set GitHub rejects the write when the file changed since that
    sha was read (ConflictError). Without a branch the default branch is used.
    """
    body = {"message": sanitize_commit_message(message), "content": _encode(content)}
    if sha:
        body["sha"] = sha
    if branch:
        body["branch"] = branch

    status, js, headers = client.request_json(
        "PUT", _contents_url(owner, repo, path), headers=None, body=body, timeout_s=30
    )
    node = _written_node(js, path)
    log.debug(f"Wrote {owner}/{repo}:{path} ({'update' if sha else 'create'})")
    return node
