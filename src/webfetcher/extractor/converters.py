"""
HTML cleaning and markdown conversion shared by the HTTP and browser extractors.
"""

from __future__ import annotations

import re
from typing import Any, Dict

from bs4 import BeautifulSoup
from markdownify import ATX, MarkdownConverter

CLEANING_CONFIG: Dict[str, Any] = {
    "parser": "html.parser",
    "remove_tags": ["script", "style", "noscript", "nav", "header", "footer", "aside"],
    "remove_classes": ["ad", "advertisement"],
}

_EXCESS_BLANK_LINES = re.compile(r"\n{3,}")


def _clean_soup(html: str) -> BeautifulSoup:
    soup = BeautifulSoup(html, CLEANING_CONFIG["parser"])

    for tag in soup.find_all(CLEANING_CONFIG["remove_tags"]):
        tag.decompose()

    for class_name in CLEANING_CONFIG["remove_classes"]:
        for element in soup.find_all(class_=class_name):
            element.decompose()

    return soup


def strip_non_content(html: str) -> str:
    """Remove scripts, page chrome and ad containers from ``html``."""
    return str(_clean_soup(html))


def html_to_markdown(html: str) -> str:
    """Convert ``html`` to markdown after stripping non-content elements.

    Headings use ATX ``#`` markers, bullet lists use ``-`` and code blocks
    are fenced.
    """
    if not html.strip():
        return ""

    converter = MarkdownConverter(heading_style=ATX, bullets="-", code_language="")
    markdown = converter.convert_soup(_clean_soup(html))
    return _EXCESS_BLANK_LINES.sub("\n\n", markdown).strip()
