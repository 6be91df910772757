"""
Unit tests for HTML cleaning and markdown conversion.
"""

from __future__ import annotations

import pytest
from webfetcher.extractor.converters import html_to_markdown, strip_non_content


class TestStripNonContent:
    def test_removes_scripts_and_page_chrome(self, sample_html):
        cleaned = strip_non_content(sample_html)

        assert "tracking" not in cleaned
        assert "color: red" not in cleaned
        assert "Site Header Banner" not in cleaned
        assert "Home navigation" not in cleaned
        assert "Related sidebar links" not in cleaned
        assert "Copyright footer text" not in cleaned
        assert "Solid State Batteries" in cleaned

    @pytest.mark.parametrize("class_name", ["ad", "advertisement"])
    def test_removes_ad_containers(self, class_name):
        html = f'<div><p>Keep me</p><div class="{class_name} wide">Sponsored</div></div>'
        cleaned = strip_non_content(html)
        assert "Keep me" in cleaned
        assert "Sponsored" not in cleaned

    def test_similar_class_names_survive(self):
        html = '<div class="adventure">Trail guide</div>'
        assert "Trail guide" in strip_non_content(html)


class TestHtmlToMarkdown:
    def test_article_conversion(self, sample_html):
        markdown = html_to_markdown(sample_html)

        assert "# Solid State Batteries" in markdown
        assert "- Higher energy density" in markdown
        assert "- Improved safety" in markdown
        assert "[full review](https://example.com/review)" in markdown
        assert "```" in markdown
        assert "capacity = voltage * charge" in markdown

    def test_chrome_is_not_converted(self, sample_html):
        markdown = html_to_markdown(sample_html)

        for text in ("tracking", "Site Header Banner", "Buy now", "Copyright footer text"):
            assert text not in markdown

    def test_no_runs_of_blank_lines(self, sample_html):
        assert "\n\n\n" not in html_to_markdown(sample_html)

    def test_subheadings_use_hash_markers(self):
        markdown = html_to_markdown("<h2>Results</h2><h3>Cycle life</h3>")
        assert "## Results" in markdown
        assert "### Cycle life" in markdown

    @pytest.mark.parametrize("html", ["", "   \n  ", "<script>only()</script>"])
    def test_empty_input_gives_empty_output(self, html):
        assert html_to_markdown(html) == ""

    def test_plain_text_passes_through(self):
        assert html_to_markdown("just some text") == "just some text"
