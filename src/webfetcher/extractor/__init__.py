"""
webfetcher Content Extraction Module - Multi-Strategy Racing Extractor

Turns a URL into text by trying several independent strategies:
1. Fast path: unrendered HTTP fetch converted to markdown
2. Browser: headless Chromium render converted to markdown
3. Document: PDF / Word / PowerPoint parsing
4. OCR: Tesseract over a full-page screenshot

Every candidate is scored by a heuristic and the best one wins.
"""

from .browser_extractor import BrowserExtractor
from .confidence_scorer import ContentScorer, score_content
from .converters import html_to_markdown, strip_non_content
from .document_extractor import DocumentExtractor
from .http_extractor import HttpExtractor
from .manager import ExtractorManager, fetch_content, validate_url
from .models import (
    AllExtractorsFailedError,
    ApiResult,
    BrowserResult,
    DocumentParseError,
    DocumentResult,
    ErrorKind,
    ExtractionMethod,
    ExtractionResult,
    ExtractionTimeoutError,
    ExtractorError,
    FetchError,
    FetchOptions,
    HttpResult,
    InvalidURLError,
    OcrResult,
)
from .ocr_extractor import OcrExtractor, configure_tesseract, preprocess_screenshot
from .protocols import Extractor
from .url_normalizer import is_document_url, is_repository_api_url, normalize_url

__all__ = [
    "AllExtractorsFailedError",
    "ApiResult",
    "BrowserExtractor",
    "BrowserResult",
    "ContentScorer",
    "DocumentExtractor",
    "DocumentParseError",
    "DocumentResult",
    "ErrorKind",
    "ExtractionMethod",
    "ExtractionResult",
    "ExtractionTimeoutError",
    "Extractor",
    "ExtractorError",
    "ExtractorManager",
    "FetchError",
    "FetchOptions",
    "HttpExtractor",
    "HttpResult",
    "InvalidURLError",
    "OcrExtractor",
    "OcrResult",
    "configure_tesseract",
    "fetch_content",
    "html_to_markdown",
    "is_document_url",
    "is_repository_api_url",
    "normalize_url",
    "preprocess_screenshot",
    "score_content",
    "strip_non_content",
    "validate_url",
]
