"""
Visibility classification for candidate elements.

An element counts as visible unless one of these holds:

- its bounding box is known and has zero width and zero height
- its own computed style is ``display: none``, ``visibility: hidden`` or
  ``opacity: 0``
- any ancestor computes to ``display: none`` or ``visibility: hidden``

Elements scrolled outside the viewport stay visible; they can be reached by
scrolling. Evaluation faults fail open (the element is kept).
"""

from __future__ import annotations

import structlog

from pagescan.dom.base import DomNode, ancestors

logger = structlog.get_logger(__name__)


def _is_zero_opacity(value: str | None) -> bool:
    if value is None:
        return False
    try:
        return float(value) <= 0.0
    except ValueError:
        return False


class VisibilityClassifier:
    """Decides whether a node is meaningfully visible to a user."""

    def __init__(self) -> None:
        self._log = logger.bind(component="visibility_classifier")

    def is_visible(self, node: DomNode) -> bool:
        try:
            return self._evaluate(node)
        except Exception as e:
            self._log.debug(
                "Visibility check failed, keeping element",
                tag=getattr(node, "tag_name", None),
                error=str(e),
            )
            return True

    def _evaluate(self, node: DomNode) -> bool:
        box = node.bounding_box()
        if box is not None and box.width == 0 and box.height == 0:
            return False

        if node.computed_style("display") == "none":
            return False
        if node.computed_style("visibility") == "hidden":
            return False
        if _is_zero_opacity(node.computed_style("opacity")):
            return False

        for ancestor in ancestors(node):
            if ancestor.computed_style("display") == "none":
                return False
            if ancestor.computed_style("visibility") == "hidden":
                return False

        return True


def is_visible(node: DomNode) -> bool:
    """Convenience wrapper around ``VisibilityClassifier``."""
    return VisibilityClassifier().is_visible(node)
