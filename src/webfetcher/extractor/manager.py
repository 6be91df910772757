"""
Production-grade ExtractorManager for webfetcher.

Runs the fast HTTP path, then races the expensive extractors under a
timeout budget and returns the best-scoring result.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, List, Optional, Sequence, Tuple, cast
from urllib.parse import urlparse

import structlog
from structlog.contextvars import bound_contextvars

from ..config.config import Config, settings
from .browser_extractor import BrowserExtractor
from .confidence_scorer import ContentScorer
from .document_extractor import DocumentExtractor
from .http_extractor import HttpExtractor
from .models import (
    AllExtractorsFailedError,
    ExtractionMethod,
    ExtractionResult,
    ExtractionTimeoutError,
    FetchOptions,
    InvalidURLError,
)
from .ocr_extractor import OcrExtractor
from .protocols import Extractor
from .url_normalizer import is_document_url, normalize_url

logger = structlog.get_logger(__name__)

_ALLOWED_SCHEMES = ("http", "https")

RaceEntry = Tuple[ExtractionMethod, Awaitable[Optional[ExtractionResult]]]


def validate_url(url: object) -> str:
    """Return ``url`` stripped, or raise InvalidURLError."""
    if not isinstance(url, str) or not url.strip():
        raise InvalidURLError("URL is required and must be a string")

    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme.lower() not in _ALLOWED_SCHEMES or not parsed.netloc:
        raise InvalidURLError(f"Unsupported URL: {url}", url=url)
    return url


class ExtractorManager:
    """
    Coordinates the extraction strategies for one URL at a time.

    Features:
    - Fast HTTP path that short-circuits on a good enough score
    - Concurrent browser/document/OCR race bounded by an overall timeout
    - Per-extractor failures converted to "no result"
    - In-flight extractors cancelled and torn down when the budget expires

    The manager keeps no per-call state, so one instance can serve
    concurrent fetches.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        *,
        http_extractor: Optional[Extractor] = None,
        browser_extractor: Optional[Extractor] = None,
        document_extractor: Optional[Extractor] = None,
        ocr_extractor: Optional[Extractor] = None,
    ) -> None:
        self.config = config or cast(Config, settings)
        self.logger = logger.bind(component="ExtractorManager")

        scorer = ContentScorer(self.config.scoring)
        self.http_extractor = http_extractor or HttpExtractor(self.config.http, self.config.scoring, scorer)
        self.browser_extractor = browser_extractor or BrowserExtractor(self.config.browser, scorer=scorer)
        self.document_extractor = document_extractor or DocumentExtractor(self.config.document, scorer=scorer)
        self.ocr_extractor = ocr_extractor or OcrExtractor(self.config.ocr, scorer=scorer)

    async def fetch(self, url: str, options: Optional[FetchOptions] = None) -> str:
        """
        Fetch ``url`` and return markdown, or the raw payload when
        ``options.raw`` is set.

        Raises:
            InvalidURLError: if ``url`` is missing or malformed
            ExtractionTimeoutError: if the race outlives the budget
            AllExtractorsFailedError: if no extractor produced a result
        """
        options = options or FetchOptions()
        result = await self.fetch_result(url, options)
        return result.raw_payload if options.raw else result.content

    async def fetch_result(self, url: str, options: Optional[FetchOptions] = None) -> ExtractionResult:
        """Same as :meth:`fetch` but returns the winning result itself."""
        options = options or FetchOptions()
        url = validate_url(url)
        target = normalize_url(url)

        with bound_contextvars(url=target):
            if target != url:
                self.logger.info("URL normalized", original_url=url, url=target)

            fast = await self._fast_path(target, options)
            if fast is not None:
                return fast

            results = await self._race(target, options)
            if not results:
                self.logger.warning("All extractors failed", url=target)
                raise AllExtractorsFailedError(url=target)

            return self.select_best(results)

    async def _fast_path(self, url: str, options: FetchOptions) -> Optional[ExtractionResult]:
        start_time = time.time()
        result = await self._guard(
            self.http_extractor.extract(url, user_agent=options.user_agent),
            ExtractionMethod.HTTP,
            url,
        )
        if result is None:
            return None

        threshold = self.config.scoring.fast_path_threshold
        accepted = result.score > threshold
        self.logger.info(
            "Fast HTTP extraction completed",
            url=url,
            method=result.method.value,
            score=result.score,
            threshold=threshold,
            accepted=accepted,
            extraction_time=time.time() - start_time,
        )
        return result if accepted else None

    def _plan_race(self, url: str, options: FetchOptions) -> List[RaceEntry]:
        timeout_ms = options.timeout_ms or self.config.default_timeout_ms
        plan: List[RaceEntry] = []

        if self.config.browser.enabled:
            plan.append(
                (
                    ExtractionMethod.BROWSER,
                    self.browser_extractor.extract(
                        url,
                        timeout_ms=min(timeout_ms, self.config.browser.max_timeout_ms),
                        user_agent=options.user_agent,
                    ),
                )
            )

        if self.config.document.enabled and is_document_url(url, self.config.document.extensions):
            plan.append((ExtractionMethod.DOCUMENT, self.document_extractor.extract(url)))

        # Nothing has been collected when the race is planned, so the OCR
        # decision depends only on what else was planned.
        ocr = self.config.ocr
        if ocr.enabled and (ocr.trigger == "always" or not plan):
            plan.append(
                (
                    ExtractionMethod.OCR,
                    self.ocr_extractor.extract(url, timeout_ms=min(timeout_ms, ocr.max_timeout_ms)),
                )
            )

        return plan

    async def _race(self, url: str, options: FetchOptions) -> List[ExtractionResult]:
        timeout_ms = options.timeout_ms or self.config.default_timeout_ms
        plan = self._plan_race(url, options)
        if not plan:
            return []

        self.logger.info(
            "Starting extraction race",
            url=url,
            methods=[method.value for method, _ in plan],
            timeout_ms=timeout_ms,
        )

        tasks = [
            asyncio.create_task(self._guard(coro, method, url), name=f"extract-{method.value}")
            for method, coro in plan
        ]
        try:
            done, pending = await asyncio.wait(tasks, timeout=timeout_ms / 1000)
        finally:
            await self._cancel(tasks)

        if pending:
            self.logger.warning(
                "Extraction timed out",
                url=url,
                timeout_ms=timeout_ms,
                pending=[task.get_name() for task in pending],
            )
            raise ExtractionTimeoutError(f"Extraction timeout after {timeout_ms}ms", url=url)

        # Launch order, not completion order, so ties resolve deterministically.
        return [result for result in (task.result() for task in tasks) if result is not None]

    async def _guard(
        self,
        coro: Awaitable[Optional[ExtractionResult]],
        method: ExtractionMethod,
        url: str,
    ) -> Optional[ExtractionResult]:
        """Await one extractor, turning any failure into ``None``."""
        start_time = time.time()
        try:
            return await coro
        except Exception as e:
            self.logger.warning(
                "Extractor failed",
                event_type="extractor_failed",
                extractor=method.value,
                url=url,
                error=str(e),
                error_type=type(e).__name__,
                error_kind=getattr(getattr(e, "kind", None), "value", None),
                extraction_time=time.time() - start_time,
            )
            return None

    @staticmethod
    async def _cancel(tasks: Sequence[asyncio.Task]) -> None:
        """Cancel unfinished tasks and wait for their cleanup to run."""
        unfinished = [task for task in tasks if not task.done()]
        for task in unfinished:
            task.cancel()
        if unfinished:
            await asyncio.gather(*unfinished, return_exceptions=True)

    def select_best(self, results: Sequence[ExtractionResult]) -> ExtractionResult:
        """Highest score wins; the earliest result wins a tie."""
        best = max(results, key=lambda result: result.score)
        self.logger.info(
            "Selected extraction result",
            method=best.method.value,
            score=best.score,
            candidates=[
                {"method": r.method.value, "score": r.score, "length": len(r.content)} for r in results
            ],
        )
        return best


async def fetch_content(
    url: str,
    *,
    raw: bool = False,
    timeout_ms: Optional[int] = None,
    user_agent: Optional[str] = None,
    config: Optional[Config] = None,
) -> str:
    """Fetch ``url`` with every available strategy and return the best text."""
    manager = ExtractorManager(config)
    return await manager.fetch(url, FetchOptions(raw=raw, timeout_ms=timeout_ms, user_agent=user_agent))
