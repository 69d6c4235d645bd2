"""Tests for HTML serialization."""

import html

import pytest

from ascii_engine.charsets import CHARSET_MAP
from ascii_engine.colorize_html import build_html_output, escape_html, html_cell, wrap_html
from ascii_engine.models import CellColor


class TestEscapeHtml:
    def test_special_characters(self):
        assert escape_html("&<>\"'`") == "&amp;&lt;&gt;&quot;&#x27;&#96;"

    def test_plain_glyph_unchanged(self):
        assert escape_html("@") == "@"

    @pytest.mark.parametrize("charset", list(CHARSET_MAP.values()) + ["&#@"])
    def test_round_trip_through_entity_decoder(self, charset):
        for ch in charset:
            escaped = escape_html(ch)
            assert "<" not in escaped and ">" not in escaped
            assert html.unescape(escaped) == ch


class TestHtmlCell:
    def test_uncoloured_cell_is_escaped_glyph(self):
        assert html_cell("<") == "&lt;"

    def test_coloured_cell_is_span(self):
        cell = html_cell("&", CellColor(1, 2, 3, 255))
        assert cell == '<span style="color:rgba(1,2,3,1.00)">&amp;</span>'


class TestBuildHtmlOutput:
    def test_plain_pre(self):
        out = build_html_output(["ab", "cd"])
        assert out == '<pre style="font-family:monospace;line-height:1;white-space:pre">ab\ncd</pre>'

    def test_coloured_pre_has_black_background(self):
        out = build_html_output(["ab"], colored=True)
        assert out.startswith('<pre style="font-family:monospace;line-height:1;white-space:pre;background:#000">')
        assert out.endswith("ab</pre>")


class TestWrapHtml:
    def test_document_contains_body(self):
        doc = wrap_html("<pre>x</pre>", title="a<b")
        assert doc.startswith("<!doctype html>")
        assert "<pre>x</pre>" in doc
        assert "<title>a&lt;b</title>" in doc
