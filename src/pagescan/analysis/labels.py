"""
Label resolution for form controls.

Finds the best human-readable label for a control by walking an ordered
cascade; the first non-empty candidate wins:

1. ``<label for="...">`` referencing the control's id
2. an ancestor ``<label>`` wrapping the control (nested control text removed)
3. ``aria-label``
4. ``aria-labelledby`` (texts of the referenced nodes)
5. the immediately preceding sibling element, when it is label-like
6. any label-like sibling (the wrapping label from step 2 excluded)
7. the immediately preceding text node, when short
8. the ``title`` tooltip

Candidates are whitespace-normalised and lose a trailing colon. A fault in
one step is logged and the cascade moves on.
"""

from __future__ import annotations

import re
from typing import Callable

import structlog

from pagescan.dom.base import DocumentTree, DomNode, class_list, closest, siblings

logger = structlog.get_logger(__name__)

CONTROL_TAGS: tuple[str, ...] = ("input", "textarea", "select", "button")

LABEL_CLASS_TOKENS: frozenset[str] = frozenset({
    "label", "form-label", "control-label", "field-label", "input-label",
})

_WHITESPACE_RE = re.compile(r"\s+")


def clean_label(text: str | None) -> str | None:
    """Collapse whitespace, trim and strip a trailing colon."""
    if not text:
        return None
    cleaned = _WHITESPACE_RE.sub(" ", text).strip()
    cleaned = re.sub(r"\s*:\s*$", "", cleaned)
    return cleaned or None


def is_label_like(node: DomNode) -> bool:
    """True for ``<label>`` elements and elements styled as labels."""
    if node.tag_name == "label":
        return True
    for token in class_list(node):
        token = token.lower()
        if token in LABEL_CLASS_TOKENS or token.endswith(("-label", "__label", "_label")):
            return True
    return False


class LabelResolver:
    """Resolves the human label of a control within one document."""

    def __init__(
        self,
        document: DocumentTree,
        preceding_text_min: int = 2,
        preceding_text_max: int = 50,
    ) -> None:
        self._document = document
        self._text_min = preceding_text_min
        self._text_max = preceding_text_max
        self._log = logger.bind(component="label_resolver")

    def resolve(self, node: DomNode) -> str | None:
        wrapping = self._wrapping_label(node)
        steps: list[tuple[str, Callable[[], str | None]]] = [
            ("for_attribute", lambda: self._from_for_attribute(node)),
            ("wrapping_label", lambda: self._from_wrapping_label(wrapping)),
            ("aria_label", lambda: node.get_attribute("aria-label")),
            ("aria_labelledby", lambda: self._from_labelledby(node)),
            ("previous_sibling", lambda: self._from_previous_sibling(node)),
            ("sibling_label", lambda: self._from_sibling_label(node, wrapping)),
            ("preceding_text", lambda: self._from_preceding_text(node)),
            ("title", lambda: node.get_attribute("title")),
        ]
        for step, lookup in steps:
            try:
                label = clean_label(lookup())
            except Exception as e:
                self._log.debug("Label lookup step failed", step=step, error=str(e))
                continue
            if label:
                return label
        return None

    def _wrapping_label(self, node: DomNode) -> DomNode | None:
        try:
            return closest(node, "label")
        except Exception as e:
            self._log.debug("Ancestor label lookup failed", error=str(e))
            return None

    def _from_for_attribute(self, node: DomNode) -> str | None:
        element_id = node.get_attribute("id")
        if not element_id:
            return None
        for label in self._document.query_all(["label"], {"for": None}):
            if label.get_attribute("for") == element_id:
                return label.text_content()
        return None

    def _from_wrapping_label(self, wrapping: DomNode | None) -> str | None:
        if wrapping is None:
            return None
        return wrapping.text_content(exclude_tags=CONTROL_TAGS)

    def _from_labelledby(self, node: DomNode) -> str | None:
        reference = node.get_attribute("aria-labelledby")
        if not reference:
            return None
        texts = []
        for ref_id in reference.split():
            referenced = self._document.get_element_by_id(ref_id)
            if referenced is not None:
                texts.append(referenced.text_content())
        return " ".join(texts)

    def _from_previous_sibling(self, node: DomNode) -> str | None:
        previous = node.previous_sibling()
        if previous is not None and is_label_like(previous) and self._labels_node(previous, node):
            return previous.text_content(exclude_tags=CONTROL_TAGS)
        return None

    def _from_sibling_label(self, node: DomNode, wrapping: DomNode | None) -> str | None:
        for sibling in siblings(node):
            if sibling is wrapping or not is_label_like(sibling):
                continue
            if self._labels_node(sibling, node):
                return sibling.text_content(exclude_tags=CONTROL_TAGS)
        return None

    def _from_preceding_text(self, node: DomNode) -> str | None:
        text = node.previous_text()
        if text is None:
            return None
        text = text.strip()
        if self._text_min <= len(text) <= self._text_max:
            return text
        return None

    @staticmethod
    def _labels_node(label: DomNode, node: DomNode) -> bool:
        """A ``for`` pointing at a different element disqualifies the label."""
        target = label.get_attribute("for")
        return not target or target == node.get_attribute("id")
