"""
Read-only capability surface the analyzer needs from a document tree.

Any provider (a static HTML parse, a live browser bridge, an in-memory fake)
can be analyzed as long as it implements ``DocumentTree`` and hands out
nodes implementing ``DomNode``. The analyzer never mutates the tree.

Providers must return the same node object for the same element so that
identity comparisons (``is``) hold across queries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, Iterator, Mapping, Protocol, Sequence


@dataclass(frozen=True)
class BoundingBox:
    """Element geometry in CSS pixels."""

    x: float
    y: float
    width: float
    height: float


class DomNode(Protocol):
    """An element node."""

    @property
    def tag_name(self) -> str:
        """Lower-case tag name."""
        ...

    @property
    def parent(self) -> DomNode | None:
        """Parent element, or None for the document element."""
        ...

    def get_attribute(self, name: str) -> str | None: ...

    def children(self) -> list[DomNode]:
        """Element children in document order."""
        ...

    def previous_sibling(self) -> DomNode | None:
        """Closest preceding element sibling."""
        ...

    def previous_text(self) -> str | None:
        """The immediately preceding sibling node, if it is a text node."""
        ...

    def text_content(self, exclude_tags: Collection[str] = ()) -> str:
        """Concatenated descendant text, skipping subtrees of ``exclude_tags``."""
        ...

    def computed_style(self, prop: str) -> str | None: ...

    def bounding_box(self) -> BoundingBox | None:
        """Element geometry, or None when the provider cannot tell."""
        ...

    def query_all(
        self, tags: Sequence[str], attrs: Mapping[str, str | None] | None = None
    ) -> list[DomNode]:
        """Descendants matching any of ``tags`` ("*" for all) and every attr.

        An attr mapped to None only has to be present.
        """
        ...


class DocumentTree(Protocol):
    """A whole document."""

    @property
    def url(self) -> str: ...

    @property
    def title(self) -> str: ...

    def root(self) -> DomNode | None:
        """The document element (``<html>``)."""
        ...

    def body(self) -> DomNode | None: ...

    def query_all(
        self, tags: Sequence[str], attrs: Mapping[str, str | None] | None = None
    ) -> list[DomNode]: ...

    def get_element_by_id(self, element_id: str) -> DomNode | None: ...

    def document_direction(self) -> str | None:
        """Direction reported for the document as a whole, if any."""
        ...

    def text_content(self) -> str:
        """Visible text of the document body."""
        ...


def ancestors(node: DomNode) -> Iterator[DomNode]:
    """Yield parents from the nearest outwards."""
    current = node.parent
    while current is not None:
        yield current
        current = current.parent


def closest(node: DomNode, tag: str) -> DomNode | None:
    """Nearest ancestor with the given tag (the node itself excluded)."""
    for ancestor in ancestors(node):
        if ancestor.tag_name == tag:
            return ancestor
    return None


def has_ancestor(node: DomNode, tag: str) -> bool:
    return closest(node, tag) is not None


def class_list(node: DomNode) -> list[str]:
    return (node.get_attribute("class") or "").split()


def siblings(node: DomNode) -> list[DomNode]:
    """Element siblings of ``node``, excluding the node itself."""
    parent = node.parent
    if parent is None:
        return []
    return [child for child in parent.children() if child is not node]
