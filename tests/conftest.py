"""
Test configuration for webfetcher.

Provides configuration, HTML samples and a fake Playwright so browser and
OCR extractors run without launching Chromium.
"""

# Standard library imports
import asyncio
import io
from types import SimpleNamespace
from typing import AsyncGenerator, Callable
from unittest.mock import AsyncMock, MagicMock, patch

# Third-party imports
import pytest
import pytest_asyncio
from PIL import Image

# Local imports
from webfetcher.config import BrowserConfig, Config, HttpConfig, OcrConfig

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


@pytest_asyncio.fixture(autouse=True)
async def cleanup_tasks() -> AsyncGenerator[None, None]:
    """Cancel any task a test leaves behind."""
    tasks_before = asyncio.all_tasks()
    yield
    new_tasks = asyncio.all_tasks() - tasks_before

    for task in new_tasks:
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def test_config() -> Config:
    """Configuration with no settle delays and no repository credential."""
    return Config(
        http=HttpConfig(github_token=None),
        browser=BrowserConfig(settle_delay=0),
        ocr=OcrConfig(settle_delay=0),
    )


# ============================================================================
# Content Fixtures
# ============================================================================


@pytest.fixture
def sample_html() -> str:
    """Article page with page chrome that should be stripped."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>Battery Chemistry</title>
        <style>body { color: red; }</style>
        <script>var tracking = "pixel";</script>
    </head>
    <body>
        <header><p>Site Header Banner</p></header>
        <nav><a href="/home">Home navigation</a></nav>
        <article>
            <h1>Solid State Batteries</h1>
            <p>Solid state batteries replace the liquid electrolyte with a solid one, which
            allows denser anodes and reduces the fire risk of conventional lithium cells.</p>
            <p>Manufacturing remains the main obstacle: thin ceramic separators crack easily
            and the interfaces between layers degrade over repeated charge cycles.</p>
            <ul><li>Higher energy density</li><li>Improved safety</li></ul>
            <pre><code>capacity = voltage * charge</code></pre>
            <p>See the <a href="https://example.com/review">full review</a> for details.</p>
        </article>
        <div class="ad">Buy now, limited offer</div>
        <aside>Related sidebar links</aside>
        <footer>Copyright footer text</footer>
    </body>
    </html>
    """


@pytest.fixture
def make_png() -> Callable[..., bytes]:
    """Factory for in-memory PNG screenshots."""

    def _make_png(width: int = 800, height: int = 600, color: str = "white") -> bytes:
        buffer = io.BytesIO()
        Image.new("RGB", (width, height), color).save(buffer, format="PNG")
        return buffer.getvalue()

    return _make_png


# ============================================================================
# Fake Playwright
# ============================================================================


class FakePlaywright:
    """Stands in for the object yielded by ``async_playwright()``."""

    def __init__(self, browser: MagicMock) -> None:
        self.chromium = MagicMock()
        self.chromium.launch = AsyncMock(return_value=browser)

    async def __aenter__(self) -> "FakePlaywright":
        return self

    async def __aexit__(self, *exc_info) -> bool:
        return False


@pytest.fixture
def fake_browser(make_png):
    """Patch Playwright and expose the mocked browser, context and page."""
    page = MagicMock()
    page.goto = AsyncMock()
    page.wait_for_selector = AsyncMock()
    page.content = AsyncMock(return_value="<html><body><h1>Rendered</h1></body></html>")
    page.screenshot = AsyncMock(return_value=make_png())

    context = MagicMock()
    context.new_page = AsyncMock(return_value=page)

    browser = MagicMock()
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()

    playwright = FakePlaywright(browser)

    with patch("webfetcher.extractor.browser_extractor.async_playwright", lambda: playwright):
        yield SimpleNamespace(playwright=playwright, browser=browser, context=context, page=page)
