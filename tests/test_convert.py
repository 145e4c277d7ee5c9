"""Tests for HTML to Markdown conversion."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from termread import convert
from termread.convert import html_to_markdown
from termread.errors import ConversionError


class TestHtmlToMarkdown:

    def test_atx_headings(self):
        md = html_to_markdown("<h2>Section</h2><p>Body text.</p>")
        assert "## Section" in md
        assert "Body text." in md

    def test_images_become_markdown_images(self):
        md = html_to_markdown('<p><img src="http://x/a.png" alt="A"></p>')
        assert "![A](http://x/a.png)" in md

    def test_linked_image(self):
        md = html_to_markdown('<a href="http://x/page"><img src="http://x/a.png" alt="A"></a>')
        assert "[![A](http://x/a.png)](http://x/page)" in md

    def test_bullets(self):
        md = html_to_markdown("<ul><li>one</li><li>two</li></ul>")
        assert "- one" in md
        assert "- two" in md

    def test_scripts_dropped(self):
        md = html_to_markdown("<p>Keep</p><script>var x = 1;</script>")
        assert "Keep" in md
        assert "var x" not in md

    def test_blank_lines_collapsed(self):
        md = html_to_markdown("<p>a</p><br><br><br><p>b</p><div></div><div></div><p>c</p>")
        assert "\n\n\n" not in md

    def test_failure_wrapped(self):
        with patch.object(convert, "markdownify", side_effect=RuntimeError("bad html")):
            with pytest.raises(ConversionError, match="bad html"):
                html_to_markdown("<p>x</p>")
