"""
Rewrites source-hosting page URLs into direct-content equivalents.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Iterable
from urllib.parse import unquote, urlparse

REPOSITORY_API_HOST = "api.github.com"

_BLOB_PATTERN = re.compile(r"(?:^|//|www\.)github\.com/([^/]+)/([^/]+)/blob/([^/]+)/(.*)")
_TREE_PATTERN = re.compile(r"(?:^|//|www\.)github\.com/([^/]+)/([^/]+)/tree/([^/]+)/(.*)")


def normalize_url(url: str) -> str:
    """Return the direct-content URL for ``url``, or ``url`` unchanged.

    Blob links become raw file URLs, tree links become contents-API URLs
    for the same path and branch.
    """
    match = _BLOB_PATTERN.search(url)
    if match:
        owner, repo, branch, path = match.groups()
        return f"https://raw.githubusercontent.com/{owner}/{repo}/{branch}/{path}"

    match = _TREE_PATTERN.search(url)
    if match:
        owner, repo, branch, path = match.groups()
        return f"https://api.github.com/repos/{owner}/{repo}/contents/{path}?ref={branch}"

    return url


def is_repository_api_url(url: str) -> bool:
    """True when ``url`` targets the repository contents API host."""
    return urlparse(url).netloc.lower() == REPOSITORY_API_HOST


def is_document_url(url: str, extensions: Iterable[str]) -> bool:
    """True when the URL path ends in one of the document ``extensions``."""
    suffix = PurePosixPath(unquote(urlparse(url).path)).suffix.lower()
    return bool(suffix) and suffix in {ext.lower() for ext in extensions}


def document_format(url: str) -> str:
    """File extension of the URL path without the dot, lower-cased."""
    return PurePosixPath(unquote(urlparse(url).path)).suffix.lower().lstrip(".")
