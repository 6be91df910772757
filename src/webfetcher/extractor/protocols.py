"""
Protocols for pluggable URL extraction strategies.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from .models import ExtractionMethod, ExtractionResult


@runtime_checkable
class Extractor(Protocol):
    """Pluggable URL-to-ExtractionResult strategy."""

    method: ExtractionMethod

    async def extract(
        self,
        url: str,
        *,
        timeout_ms: Optional[int] = None,
        user_agent: Optional[str] = None,
    ) -> Optional[ExtractionResult]:
        """Extract content from a URL.

        Args:
            url: Already normalized URL to fetch
            timeout_ms: Per-extractor budget where the strategy honours one
            user_agent: Browser identity override where the strategy sends one

        Returns:
            ExtractionResult, or None when nothing could be extracted

        Raises:
            Exception: any failure; the manager converts it to "no result"
        """
        ...
