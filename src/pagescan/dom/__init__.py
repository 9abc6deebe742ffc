"""Document tree capability surface and providers."""

from pagescan.dom.base import (
    BoundingBox,
    DocumentTree,
    DomNode,
    ancestors,
    class_list,
    closest,
    has_ancestor,
    siblings,
)
from pagescan.dom.soup import SoupDocument, SoupNode

__all__ = [
    "BoundingBox",
    "DocumentTree",
    "DomNode",
    "SoupDocument",
    "SoupNode",
    "ancestors",
    "class_list",
    "closest",
    "has_ancestor",
    "siblings",
]
