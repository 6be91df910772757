"""
webfetcher - Multi-strategy web content extraction.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config
from .extractor import (
    AllExtractorsFailedError,
    ExtractionResult,
    ExtractionTimeoutError,
    ExtractorManager,
    FetchError,
    FetchOptions,
    InvalidURLError,
    fetch_content,
)

__all__ = [
    "__version__",
    "AllExtractorsFailedError",
    "Config",
    "ExtractionResult",
    "ExtractionTimeoutError",
    "ExtractorManager",
    "FetchError",
    "FetchOptions",
    "InvalidURLError",
    "fetch_content",
]
