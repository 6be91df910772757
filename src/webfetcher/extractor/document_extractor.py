"""
Structured document extractor for PDF, Word and PowerPoint files.
"""

from __future__ import annotations

import asyncio
import io
from typing import Callable, Dict, List, Optional

import httpx
import structlog
from docx import Document as load_docx
from docx.table import Table
from pptx import Presentation
from pypdf import PdfReader

from ..config.config import DocumentConfig, ScoringConfig
from .confidence_scorer import ContentScorer
from .models import DocumentParseError, DocumentResult, ExtractionMethod, ExtractionResult
from .url_normalizer import document_format

logger = structlog.get_logger(__name__)


def parse_pdf(data: bytes) -> str:
    """Text of every page, one page per block."""
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except Exception as e:
        raise DocumentParseError(f"PDF parse failed: {e}") from e
    return "\n\n".join(text for text in pages if text.strip())


def parse_docx(data: bytes) -> str:
    try:
        document = load_docx(io.BytesIO(data))
    except Exception as e:
        raise DocumentParseError(f"DOCX parse failed: {e}") from e
    blocks = []
    for block in document.iter_inner_content():
        text = _table_text(block) if isinstance(block, Table) else block.text
        if text.strip():
            blocks.append(text)
    return "\n\n".join(blocks)


def _table_text(table: Table) -> str:
    """One line per row, cells joined by " | "; repeated adjacent cells (merged spans) appear once."""
    rows = []
    for row in table.rows:
        cells: List[str] = []
        for cell in row.cells:
            text = cell.text.strip()
            if not cells or text != cells[-1]:
                cells.append(text)
        if any(cells):
            rows.append(" | ".join(cells))
    return "\n".join(rows)


def parse_pptx(data: bytes) -> str:
    try:
        presentation = Presentation(io.BytesIO(data))
    except Exception as e:
        raise DocumentParseError(f"PPTX parse failed: {e}") from e

    slides = []
    for slide in presentation.slides:
        lines = [
            shape.text_frame.text
            for shape in slide.shapes
            if shape.has_text_frame and shape.text_frame.text.strip()
        ]
        if lines:
            slides.append("\n".join(lines))
    return "\n\n".join(slides)


def decode_legacy(data: bytes) -> str:
    # Legacy binary formats are not parsed; readable runs survive the decode.
    return data.decode("utf-8", errors="replace")


PARSERS: Dict[str, Callable[[bytes], str]] = {
    "pdf": parse_pdf,
    "docx": parse_docx,
    "pptx": parse_pptx,
    "doc": decode_legacy,
    "ppt": decode_legacy,
}


class DocumentExtractor:
    """Downloads a document and extracts its raw text."""

    method = ExtractionMethod.DOCUMENT

    def __init__(
        self,
        config: Optional[DocumentConfig] = None,
        scoring: Optional[ScoringConfig] = None,
        scorer: Optional[ContentScorer] = None,
    ) -> None:
        self.config = config or DocumentConfig()
        self.scorer = scorer or ContentScorer(scoring)

    async def extract(
        self,
        url: str,
        *,
        timeout_ms: Optional[int] = None,
        user_agent: Optional[str] = None,
    ) -> Optional[ExtractionResult]:
        """Download and parse the document at ``url``.

        Raises:
            httpx.HTTPError: if the download fails
            DocumentParseError: if the payload cannot be parsed
        """
        fmt = document_format(url)
        parser = PARSERS.get(fmt)
        if parser is None:
            logger.debug("No document parser for URL", url=url, format=fmt)
            return None

        async with httpx.AsyncClient(timeout=self.config.timeout, follow_redirects=True) as client:
            response = await client.get(url)
            response.raise_for_status()
            data = response.content

        # Parsing is CPU-bound; keep it off the event loop.
        loop = asyncio.get_running_loop()
        try:
            content = await loop.run_in_executor(None, parser, data)
        except DocumentParseError as e:
            e.url = url
            raise

        score = self.scorer.score(content, ExtractionMethod.DOCUMENT)
        logger.debug("Document extraction finished", url=url, format=fmt, size=len(data), score=score)
        return DocumentResult(
            content=content,
            score=score,
            metadata={"file_size": len(data), "format": fmt},
        )
