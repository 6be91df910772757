"""
Extraction Content Scorer

Heuristic quality estimate used to rank competing extraction results.
The score is additive over independent signals and floored at zero:

- Content length (flat penalty for near-empty output)
- Paragraph structure
- Failure-page wording (error, captcha, access denied, ...)
- Extraction method preference
- Heading and link markup

The failure-wording check is a plain pattern match and also fires on
legitimate text that mentions those words.
"""

from __future__ import annotations

import re
from typing import List, Optional, Pattern, Union

from ..config.config import ScoringConfig
from .models import ExtractionMethod


_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")
_HEADING_PATTERNS = [re.compile(r"#{1,6}\s"), re.compile(r"<h[1-6]")]
_LINK_PATTERNS = [re.compile(r"\[.*\]\(.*\)"), re.compile(r"<a\s+href")]


class ContentScorer:
    """Scores extracted content; pure and deterministic for a given config."""

    def __init__(self, config: Optional[ScoringConfig] = None) -> None:
        self.config = config or ScoringConfig()
        self._error_patterns: List[Pattern[str]] = [
            re.compile(pattern, re.IGNORECASE) for pattern in self.config.error_patterns
        ]

    def score(self, content: str, method: Union[ExtractionMethod, str]) -> float:
        """
        Calculate the quality score of ``content`` extracted by ``method``.

        Returns:
            Score >= 0.0, roughly 0-100 with no upper clamp
        """
        method_name = method.value if isinstance(method, ExtractionMethod) else method

        score = (
            self._length_score(content)
            + self._structure_score(content)
            + self._error_penalty(content)
            + self.config.method_bonuses.get(method_name, 0.0)
            + self._markup_score(content)
        )
        return max(0.0, score)

    def _length_score(self, content: str) -> float:
        length = len(content)
        if length < self.config.min_length:
            return -self.config.short_content_penalty
        return min(length / self.config.chars_per_point, self.config.max_length_points)

    def _structure_score(self, content: str) -> float:
        paragraphs = [
            p for p in _PARAGRAPH_SPLIT.split(content) if len(p.strip()) > self.config.paragraph_min_length
        ]
        return min(len(paragraphs) * self.config.points_per_paragraph, self.config.max_paragraph_points)

    def _error_penalty(self, content: str) -> float:
        if any(pattern.search(content) for pattern in self._error_patterns):
            return -self.config.error_penalty
        return 0.0

    def _markup_score(self, content: str) -> float:
        bonus = 0.0
        if any(pattern.search(content) for pattern in _HEADING_PATTERNS):
            bonus += self.config.heading_bonus
        if any(pattern.search(content) for pattern in _LINK_PATTERNS):
            bonus += self.config.link_bonus
        return bonus


_default_scorer = ContentScorer()


def score_content(content: str, method: Union[ExtractionMethod, str]) -> float:
    """Score ``content`` with the default scoring constants."""
    return _default_scorer.score(content, method)
