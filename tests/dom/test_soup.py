"""Tests for the BeautifulSoup document provider."""

from __future__ import annotations

import pytest

from pagescan.dom import SoupDocument, closest
from pagescan.dom.soup import parse_inline_style

HTML = """
<html lang="he" dir="rtl">
<head><title> Shop </title><script>var x = "search";</script></head>
<body>
  <div id="outer" style="visibility: hidden">
    <p id="inner">Inner</p>
  </div>
  <section dir="ltr"><span id="ltr-span">x</span></section>
  <input id="hidden-input" type="hidden">
  <div id="hidden-attr" hidden>gone</div>
  <div id="hidden-shown" hidden style="display: flex">shown</div>
  <script id="script-shown" style="display: block"></script>
  <div id="sized" style="width: 0px; height: 0px; opacity: 0.5 !important">box</div>
  Name: <input id="name">
  <!-- comment --><input id="after-comment">
  <a id="a1" href="/x" class="nav primary">One</a>
</body>
</html>
"""


@pytest.fixture
def document() -> SoupDocument:
    return SoupDocument(HTML, url="https://shop.example/")


class TestSoupDocument:
    def test_title_and_url(self, document: SoupDocument) -> None:
        """Title text is stripped and the URL is kept."""
        assert document.title == "Shop"
        assert document.url == "https://shop.example/"

    def test_nodes_are_identity_stable(self, document: SoupDocument) -> None:
        """The same element always maps to the same node object."""
        inner = document.get_element_by_id("inner")

        assert inner is not None
        assert closest(inner, "div") is document.get_element_by_id("outer")
        assert document.query_all(["p"])[0] is inner

    def test_query_all_with_attributes(self, document: SoupDocument) -> None:
        """Attribute filters check presence or a case-insensitive value."""
        assert [n.get_attribute("id") for n in document.query_all(["a"], {"href": None})] == ["a1"]
        assert document.query_all(["input"], {"type": "HIDDEN"})[0].get_attribute("id") == (
            "hidden-input"
        )
        assert document.query_all(["a"], {"target": None}) == []

    def test_class_attribute_is_a_plain_string(self, document: SoupDocument) -> None:
        """class is returned as written, not as a list."""
        link = document.get_element_by_id("a1")

        assert link is not None
        assert link.get_attribute("class") == "nav primary"

    def test_text_content_skips_scripts(self, document: SoupDocument) -> None:
        """Script text is not part of the page text."""
        assert "var x" not in document.text_content()
        assert "Inner" in document.text_content()

    def test_previous_text(self, document: SoupDocument) -> None:
        """Only a text node directly before the element counts."""
        name = document.get_element_by_id("name")
        after_comment = document.get_element_by_id("after-comment")

        assert name is not None and after_comment is not None
        assert name.previous_text().strip() == "Name:"
        assert after_comment.previous_text() is None

    def test_direction(self, document: SoupDocument) -> None:
        """dir attributes set direction and it inherits."""
        inner = document.get_element_by_id("inner")
        span = document.get_element_by_id("ltr-span")

        assert inner is not None and span is not None
        assert inner.computed_style("direction") == "rtl"
        assert span.computed_style("direction") == "ltr"


class TestComputedStyle:
    def test_display(self, document: SoupDocument) -> None:
        """Hidden inputs, the hidden attribute and tag defaults set display."""
        assert document.get_element_by_id("hidden-input").computed_style("display") == "none"
        assert document.get_element_by_id("hidden-attr").computed_style("display") == "none"
        assert document.get_element_by_id("outer").computed_style("display") == "block"
        assert document.get_element_by_id("a1").computed_style("display") == "inline"

    def test_inline_display_overrides_hidden_attribute(self, document: SoupDocument) -> None:
        """An inline display beats the hidden attribute but not a non-rendered tag."""
        assert document.get_element_by_id("hidden-shown").computed_style("display") == "flex"
        assert document.get_element_by_id("script-shown").computed_style("display") == "none"

    def test_visibility_inherits(self, document: SoupDocument) -> None:
        """visibility: hidden inherits to descendants."""
        assert document.get_element_by_id("inner").computed_style("visibility") == "hidden"
        assert document.get_element_by_id("a1").computed_style("visibility") == "visible"

    def test_opacity(self, document: SoupDocument) -> None:
        """Inline opacity is read and defaults to 1."""
        assert document.get_element_by_id("sized").computed_style("opacity") == "0.5"
        assert document.get_element_by_id("a1").computed_style("opacity") == "1"

    def test_bounding_box_from_inline_size(self, document: SoupDocument) -> None:
        """Geometry is known only from inline px size."""
        box = document.get_element_by_id("sized").bounding_box()

        assert box is not None
        assert (box.width, box.height) == (0.0, 0.0)
        assert document.get_element_by_id("a1").bounding_box() is None


def test_document_direction_from_root_style() -> None:
    """Document direction comes from the root's inline style."""
    document = SoupDocument('<html style="direction: rtl"><body></body></html>')

    assert document.document_direction() == "rtl"
    assert SoupDocument("<p>x</p>").document_direction() is None


def test_parse_inline_style() -> None:
    """Declarations are lower-cased and malformed ones are skipped."""
    assert parse_inline_style("Display: NONE; color:red;;bad") == {
        "display": "none",
        "color": "red",
    }
    assert parse_inline_style(None) == {}
