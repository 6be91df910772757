"""
Data models for extraction results, fetch options and the error taxonomy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional


class ExtractionMethod(Enum):
    """Strategy that produced an extraction result."""

    HTTP = "http"
    HTTP_API = "http-api"
    BROWSER = "browser"
    OCR = "ocr"
    DOCUMENT = "document"


class ErrorKind(Enum):
    """Failure category, fixed where the error is raised."""

    INVALID_INPUT = "invalid_input"
    EXTRACTOR_FAILED = "extractor_failed"
    DOCUMENT_PARSE = "document_parse"
    ALL_FAILED = "all_failed"
    TIMEOUT = "timeout"


@dataclass(frozen=True, kw_only=True)
class ExtractionResult:
    """Outcome of one extraction attempt."""

    content: str
    method: ExtractionMethod
    score: float
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.score < 0:
            raise ValueError("Score cannot be negative")

    @property
    def raw_payload(self) -> str:
        """Unnormalized payload, or the normalized content when none was kept."""
        raw = self.metadata.get("raw_payload")
        return raw if raw is not None else self.content


@dataclass(frozen=True, kw_only=True)
class HttpResult(ExtractionResult):
    method: ExtractionMethod = ExtractionMethod.HTTP


@dataclass(frozen=True, kw_only=True)
class ApiResult(ExtractionResult):
    method: ExtractionMethod = ExtractionMethod.HTTP_API


@dataclass(frozen=True, kw_only=True)
class BrowserResult(ExtractionResult):
    method: ExtractionMethod = ExtractionMethod.BROWSER


@dataclass(frozen=True, kw_only=True)
class DocumentResult(ExtractionResult):
    method: ExtractionMethod = ExtractionMethod.DOCUMENT


@dataclass(frozen=True, kw_only=True)
class OcrResult(ExtractionResult):
    method: ExtractionMethod = ExtractionMethod.OCR


@dataclass(frozen=True)
class FetchOptions:
    """Per-call fetch configuration."""

    raw: bool = False
    timeout_ms: Optional[int] = None
    user_agent: Optional[str] = None

    def __post_init__(self) -> None:
        if self.timeout_ms is not None and self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")


class FetchError(Exception):
    """Base exception for content fetching errors."""

    kind: ErrorKind = ErrorKind.EXTRACTOR_FAILED

    def __init__(self, message: str, *, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class InvalidURLError(FetchError, ValueError):
    """Raised when the requested URL is missing or malformed."""

    kind = ErrorKind.INVALID_INPUT


class ExtractorError(FetchError):
    """Raised by a single extractor when it cannot produce a result."""

    kind = ErrorKind.EXTRACTOR_FAILED

    def __init__(self, message: str, *, method: ExtractionMethod, url: Optional[str] = None) -> None:
        super().__init__(message, url=url)
        self.method = method


class DocumentParseError(ExtractorError):
    """Raised when a downloaded document cannot be parsed."""

    kind = ErrorKind.DOCUMENT_PARSE

    def __init__(self, message: str, *, url: Optional[str] = None) -> None:
        super().__init__(message, method=ExtractionMethod.DOCUMENT, url=url)


class AllExtractorsFailedError(FetchError):
    """Raised when no extractor produced a result."""

    kind = ErrorKind.ALL_FAILED

    def __init__(self, message: str = "All extraction methods failed", *, url: Optional[str] = None) -> None:
        super().__init__(message, url=url)


class ExtractionTimeoutError(FetchError):
    """Raised when the overall fetch budget expires."""

    kind = ErrorKind.TIMEOUT
