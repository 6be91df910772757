"""
Fast-path extractor: a single unrendered HTTP GET.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Dict, Optional

import httpx
import structlog

from ..config.config import HttpConfig, ScoringConfig
from .confidence_scorer import ContentScorer
from .converters import html_to_markdown
from .models import ApiResult, ExtractionMethod, ExtractionResult, HttpResult
from .url_normalizer import is_repository_api_url

logger = structlog.get_logger(__name__)

_TEXTUAL_TYPES = {"application/xml", "application/json", "application/javascript"}


def is_textual(content_type: str) -> bool:
    """True for text-like or unspecified content types."""
    media_type = content_type.split(";", 1)[0].strip().lower()
    if not media_type:
        return True
    return (
        media_type.startswith("text/")
        or media_type in _TEXTUAL_TYPES
        or media_type.endswith(("+xml", "+json"))
    )


class HttpExtractor:
    """Fetches a URL without rendering and converts the body to markdown.

    Repository contents-API URLs are answered from the JSON payload
    instead: directory listings become a bullet list, single files are
    base64-decoded.
    """

    method = ExtractionMethod.HTTP

    def __init__(
        self,
        config: Optional[HttpConfig] = None,
        scoring: Optional[ScoringConfig] = None,
        scorer: Optional[ContentScorer] = None,
    ) -> None:
        self.config = config or HttpConfig()
        self.scoring = scoring or ScoringConfig()
        self.scorer = scorer or ContentScorer(self.scoring)

    def _build_headers(self, url: str, user_agent: Optional[str]) -> Dict[str, str]:
        headers = {
            "User-Agent": user_agent or self.config.user_agent,
            "Accept": self.config.accept,
            "Accept-Language": self.config.accept_language,
            "Accept-Encoding": "gzip, deflate",
        }
        if is_repository_api_url(url) and self.config.github_token:
            headers["Authorization"] = f"Bearer {self.config.github_token}"
        return headers

    async def extract(
        self,
        url: str,
        *,
        timeout_ms: Optional[int] = None,
        user_agent: Optional[str] = None,
    ) -> Optional[ExtractionResult]:
        """Fetch ``url`` and build a scored result.

        Raises:
            httpx.HTTPError: on network failure, too many redirects or a
                non-2xx response
        """
        async with httpx.AsyncClient(
            headers=self._build_headers(url, user_agent),
            timeout=self.config.timeout,
            follow_redirects=True,
            max_redirects=self.config.max_redirects,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()

        if is_repository_api_url(url):
            api_result = self._from_api_payload(response)
            if api_result is not None:
                return api_result

        content_type = response.headers.get("Content-Type", "")
        if not is_textual(content_type):
            logger.debug("Skipping non-text response", url=url, content_type=content_type)
            return None

        body = response.text
        markdown = html_to_markdown(body)
        score = self.scorer.score(markdown, ExtractionMethod.HTTP)

        logger.debug("HTTP extraction finished", url=url, status=response.status_code, score=score)
        return HttpResult(content=markdown, score=score, metadata={"raw_payload": body})

    def _from_api_payload(self, response: httpx.Response) -> Optional[ExtractionResult]:
        try:
            data: Any = response.json()
        except ValueError:
            return None

        if isinstance(data, list):
            items = "\n".join(
                f"- [{item.get('name', '')}]({item.get('html_url', '')}) ({item.get('type', '')})"
                for item in data
                if isinstance(item, dict)
            )
            return ApiResult(
                content=f"# Directory Contents\n\n{items}",
                score=self.scoring.directory_listing_score,
                metadata={"raw_payload": json.dumps(data)},
            )

        if isinstance(data, dict) and data.get("content"):
            try:
                text = base64.b64decode(data["content"]).decode("utf-8", errors="replace")
            except (binascii.Error, TypeError) as e:
                logger.warning("Undecodable repository file payload", error=str(e))
                return None
            return ApiResult(
                content=text,
                score=self.scoring.file_content_score,
                metadata={"raw_payload": text},
            )

        return None
