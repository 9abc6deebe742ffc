"""Tests for the label resolution cascade."""

from __future__ import annotations

from fakes import FakeDocument, el, page

from pagescan.analysis.labels import LabelResolver, clean_label, is_label_like


def _resolve(document, element_id: str) -> str | None:
    node = document.get_element_by_id(element_id)
    assert node is not None
    return LabelResolver(document).resolve(node)


class TestCleanLabel:
    """Test label normalisation."""

    def test_trims_and_strips_trailing_colon(self) -> None:
        """Whitespace collapses and a trailing colon is dropped."""
        assert clean_label("  Email:  ") == "Email"
        assert clean_label("First\n   name :") == "First name"

    def test_empty_is_none(self) -> None:
        """Blank text yields None."""
        assert clean_label("   ") is None
        assert clean_label(":") is None
        assert clean_label(None) is None


class TestLabelResolver:
    """Test each cascade step and their ordering."""

    def test_label_for_attribute(self, make_document) -> None:
        """An explicit for= label wins."""
        document = make_document('<label for="e1">Email</label><input id="e1">')

        assert _resolve(document, "e1") == "Email"

    def test_for_label_beats_aria_label(self, make_document) -> None:
        """label[for] is tried before aria-label."""
        document = make_document(
            '<label for="e1">Work email:</label><input id="e1" aria-label="Email address">'
        )

        assert _resolve(document, "e1") == "Work email"

    def test_wrapping_label_strips_control_text(self, make_document) -> None:
        """Nested control text (select options) is not part of the label."""
        document = make_document(
            '<label>Country <select id="c"><option>France</option>'
            "<option>Spain</option></select></label>"
        )

        assert _resolve(document, "c") == "Country"

    def test_aria_label(self, make_document) -> None:
        """aria-label is used when no label element applies."""
        document = make_document('<input id="q" aria-label="Search the site">')

        assert _resolve(document, "q") == "Search the site"

    def test_aria_labelledby_joins_references(self, make_document) -> None:
        """aria-labelledby joins the texts of the referenced nodes."""
        document = make_document(
            '<span id="l1">First</span><span id="l2">name</span>'
            '<input id="f" aria-labelledby="l1 l2 missing">'
        )

        assert _resolve(document, "f") == "First name"

    def test_previous_label_like_sibling(self, make_document) -> None:
        """A label-like previous sibling names the control."""
        document = make_document(
            '<div><span class="form-label">Phone</span><input id="p"></div>'
        )

        assert _resolve(document, "p") == "Phone"

    def test_label_for_other_control_is_ignored(self, make_document) -> None:
        """A sibling label pointing at another element does not label this one."""
        document = make_document(
            '<div><label for="x">Other</label><input id="me" title="Mine"></div>'
        )

        assert _resolve(document, "me") == "Mine"

    def test_label_like_sibling_anywhere(self, make_document) -> None:
        """A label-like sibling after the control is also used."""
        document = make_document(
            '<div><input id="z"><span class="field-label">Zip code</span></div>'
        )

        assert _resolve(document, "z") == "Zip code"

    def test_preceding_text_node(self, make_document) -> None:
        """A short preceding text node is used."""
        document = make_document("<div>Nickname: <input id=\"n\"></div>")

        assert _resolve(document, "n") == "Nickname"

    def test_long_preceding_text_is_ignored(self, make_document) -> None:
        """Preceding text over the length limit is skipped."""
        long_text = "This sentence is far too long to be a label for a single field."
        document = make_document(f'<div>{long_text}<input id="n" title="Alias"></div>')

        assert _resolve(document, "n") == "Alias"

    def test_title_fallback(self, make_document) -> None:
        """The title tooltip is the last resort."""
        document = make_document('<input id="t" title="Tooltip label">')

        assert _resolve(document, "t") == "Tooltip label"

    def test_no_label(self, make_document) -> None:
        """A control with no label source resolves to None."""
        document = make_document('<div><input id="bare"></div>')

        assert _resolve(document, "bare") is None

    def test_failing_step_is_skipped(self) -> None:
        """A fault in one lookup moves on to the next step."""
        field = el("input", id="e", aria_label="Email")
        document = FakeDocument(
            page(el("label", "Wrong", for_="e"), field), fail_on={"query_all"}
        )

        assert LabelResolver(document).resolve(field) == "Email"


class TestIsLabelLike:
    def test_label_tag_and_classes(self) -> None:
        """Label tags and label-like class names are recognised."""
        assert is_label_like(el("label")) is True
        assert is_label_like(el("span", class_="control-label")) is True
        assert is_label_like(el("div", class_="checkout__label")) is True
        assert is_label_like(el("span", class_="hint")) is False
