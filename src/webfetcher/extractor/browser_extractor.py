"""
Rendered-page extractor driving a headless Chromium through Playwright.

Each call launches its own browser and closes it before returning or
raising, cancellation included. Nothing is pooled between calls.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

import structlog
from playwright.async_api import async_playwright

from ..config.config import BrowserConfig, ScoringConfig
from .confidence_scorer import ContentScorer
from .converters import html_to_markdown
from .models import BrowserResult, ExtractionMethod, ExtractionResult

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def launch_page(
    *,
    launch_args: List[str],
    headless: bool = True,
    executable_path: Optional[str] = None,
    context_options: Optional[Dict[str, Any]] = None,
) -> AsyncIterator[Any]:
    """Yield a fresh page in a browser owned by this context.

    The browser process is closed on every exit path.
    """
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(
            headless=headless,
            args=launch_args,
            executable_path=executable_path,
        )
        try:
            context = await browser.new_context(**(context_options or {}))
            page = await context.new_page()
            yield page
        finally:
            await browser.close()
            logger.debug("Browser closed")


async def load_page(page: Any, url: str, timeout_ms: int, settle_delay: float) -> None:
    """Navigate, wait for the body element, then let deferred rendering finish."""
    await page.goto(url, timeout=timeout_ms)
    await page.wait_for_selector("body", state="attached", timeout=timeout_ms)
    await asyncio.sleep(settle_delay)


class BrowserExtractor:
    """Extracts markdown from the fully rendered DOM of a page."""

    method = ExtractionMethod.BROWSER

    def __init__(
        self,
        config: Optional[BrowserConfig] = None,
        scoring: Optional[ScoringConfig] = None,
        scorer: Optional[ContentScorer] = None,
    ) -> None:
        self.config = config or BrowserConfig()
        self.scorer = scorer or ContentScorer(scoring)

    async def extract(
        self,
        url: str,
        *,
        timeout_ms: Optional[int] = None,
        user_agent: Optional[str] = None,
    ) -> Optional[ExtractionResult]:
        timeout_ms = timeout_ms or self.config.max_timeout_ms

        async with launch_page(
            launch_args=self.config.launch_args,
            headless=self.config.headless,
            executable_path=self.config.executable_path,
            context_options={"user_agent": user_agent or self.config.user_agent},
        ) as page:
            await load_page(page, url, timeout_ms, self.config.settle_delay)
            html = await page.content()

        markdown = html_to_markdown(html)
        score = self.scorer.score(markdown, ExtractionMethod.BROWSER)
        logger.debug("Browser extraction finished", url=url, score=score, html_length=len(html))
        return BrowserResult(content=markdown, score=score, metadata={"raw_payload": html})
