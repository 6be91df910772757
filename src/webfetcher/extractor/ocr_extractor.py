"""
Screenshot OCR extractor, the lowest-trust strategy.

Renders the page in its own headless browser, captures a full-page
screenshot, normalizes the image and runs Tesseract over it.
"""

from __future__ import annotations

import asyncio
import base64
import io
from typing import Optional

import pytesseract
import structlog
from PIL import Image, ImageOps

from ..config.config import OcrConfig, ScoringConfig
from .browser_extractor import launch_page, load_page
from .confidence_scorer import ContentScorer
from .models import ExtractionMethod, ExtractionResult, OcrResult

logger = structlog.get_logger(__name__)


def preprocess_screenshot(data: bytes, max_width: int = 1920) -> Image.Image:
    """Downscale to ``max_width`` (never upscale), greyscale and stretch contrast."""
    image = Image.open(io.BytesIO(data))
    image.load()

    if image.width > max_width:
        height = max(1, round(image.height * max_width / image.width))
        image = image.resize((max_width, height), Image.Resampling.LANCZOS)

    image = image.convert("L")
    return ImageOps.autocontrast(image)


def configure_tesseract(config: OcrConfig) -> None:
    """Point pytesseract at the configured binary.

    Process-wide; call once at startup, alongside ``configure_logging``.
    """
    if config.tesseract_cmd:
        pytesseract.pytesseract.tesseract_cmd = config.tesseract_cmd
        logger.info("Tesseract binary configured", tesseract_cmd=config.tesseract_cmd)


class OcrExtractor:
    """Extracts plain text from a rendered page image."""

    method = ExtractionMethod.OCR

    def __init__(
        self,
        config: Optional[OcrConfig] = None,
        scoring: Optional[ScoringConfig] = None,
        scorer: Optional[ContentScorer] = None,
    ) -> None:
        self.config = config or OcrConfig()
        self.scorer = scorer or ContentScorer(scoring)

    async def capture(self, url: str, timeout_ms: int) -> bytes:
        """Full-page PNG screenshot of ``url``."""
        async with launch_page(
            launch_args=self.config.launch_args,
            headless=self.config.headless,
            executable_path=self.config.executable_path,
            context_options={
                "viewport": {"width": self.config.viewport_width, "height": self.config.viewport_height},
            },
        ) as page:
            await load_page(page, url, timeout_ms, self.config.settle_delay)
            return await page.screenshot(full_page=True, type="png")

    def recognize(self, screenshot: bytes) -> str:
        image = preprocess_screenshot(screenshot, self.config.max_image_width)
        return pytesseract.image_to_string(
            image,
            lang=self.config.language,
            config=f"--oem {self.config.oem} --psm {self.config.psm}",
        )

    async def extract(
        self,
        url: str,
        *,
        timeout_ms: Optional[int] = None,
        user_agent: Optional[str] = None,
    ) -> Optional[ExtractionResult]:
        screenshot = await self.capture(url, timeout_ms or self.config.max_timeout_ms)

        loop = asyncio.get_running_loop()
        text = await loop.run_in_executor(None, self.recognize, screenshot)

        score = self.scorer.score(text, ExtractionMethod.OCR)
        logger.debug("OCR extraction finished", url=url, score=score, screenshot_bytes=len(screenshot))
        return OcrResult(
            content=text,
            score=score,
            metadata={
                "screenshot": screenshot,
                "raw_payload": base64.b64encode(screenshot).decode("ascii"),
            },
        )
