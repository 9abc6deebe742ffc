"""
Static HTML document provider backed by BeautifulSoup.

There is no layout engine behind a static parse, so styles are approximated
from the markup itself:

- ``<input type="hidden">`` and non-rendered tags (head, script, style,
  template, ...) always compute to ``display: none``
- otherwise inline ``style`` declarations win, so an inline ``display``
  overrides the ``hidden`` attribute
- ``visibility`` and ``direction`` inherit from ancestors; ``dir`` sets
  ``direction``
- geometry is only known when inline style gives both width and height in px
"""

from __future__ import annotations

import re
from typing import Collection, Mapping, Sequence

import structlog
from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from pagescan.dom.base import BoundingBox

logger = structlog.get_logger(__name__)

NON_RENDERED_TAGS: frozenset[str] = frozenset({
    "head", "script", "style", "template", "noscript", "meta", "link", "title",
})

BLOCK_TAGS: frozenset[str] = frozenset({
    "html", "body", "div", "form", "p", "section", "article", "header", "footer",
    "nav", "main", "aside", "ul", "ol", "li", "table", "fieldset", "h1", "h2",
    "h3", "h4", "h5", "h6", "dialog", "details",
})

INHERITED_PROPERTIES: frozenset[str] = frozenset({"visibility", "direction"})

_PX_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)(?:px)?\s*$")


def parse_inline_style(style: str | None) -> dict[str, str]:
    """Parse a ``style`` attribute into lower-cased property/value pairs."""
    if not style:
        return {}
    declarations: dict[str, str] = {}
    for chunk in style.split(";"):
        if ":" not in chunk:
            continue
        prop, _, value = chunk.partition(":")
        prop = prop.strip().lower()
        value = value.replace("!important", "").strip().lower()
        if prop and value:
            declarations[prop] = value
    return declarations


def _to_px(value: str | None) -> float | None:
    if value is None:
        return None
    match = _PX_RE.match(value)
    return float(match.group(1)) if match else None


def _matches(tag: Tag, tags: Sequence[str], attrs: Mapping[str, str | None] | None) -> bool:
    if "*" not in tags and tag.name not in tags:
        return False
    for attr, expected in (attrs or {}).items():
        actual = tag.get(attr)
        if actual is None:
            return False
        if expected is not None and str(actual).strip().lower() != expected.lower():
            return False
    return True


class SoupNode:
    """``DomNode`` over a BeautifulSoup ``Tag``."""

    def __init__(self, tag: Tag, document: SoupDocument) -> None:
        self._tag = tag
        self._document = document

    def __repr__(self) -> str:
        ident = self._tag.get("id")
        return f"<SoupNode {self._tag.name}{'#' + ident if ident else ''}>"

    @property
    def tag_name(self) -> str:
        return self._tag.name.lower()

    @property
    def parent(self) -> SoupNode | None:
        parent = self._tag.parent
        if not isinstance(parent, Tag) or isinstance(parent, BeautifulSoup):
            return None
        return self._document.wrap(parent)

    def get_attribute(self, name: str) -> str | None:
        value = self._tag.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def children(self) -> list[SoupNode]:
        return [self._document.wrap(c) for c in self._tag.children if isinstance(c, Tag)]

    def previous_sibling(self) -> SoupNode | None:
        for sibling in self._tag.previous_siblings:
            if isinstance(sibling, Tag):
                return self._document.wrap(sibling)
        return None

    def previous_text(self) -> str | None:
        sibling = self._tag.previous_sibling
        if isinstance(sibling, NavigableString) and not isinstance(sibling, Comment):
            return str(sibling)
        return None

    def text_content(self, exclude_tags: Collection[str] = ()) -> str:
        return _collect_text(self._tag, frozenset(exclude_tags))

    def computed_style(self, prop: str) -> str | None:
        return self._document.computed_style(self._tag, prop.lower())

    def bounding_box(self) -> BoundingBox | None:
        style = parse_inline_style(self.get_attribute("style"))
        width = _to_px(style.get("width"))
        height = _to_px(style.get("height"))
        if width is None or height is None:
            return None
        return BoundingBox(x=0.0, y=0.0, width=width, height=height)

    def query_all(
        self, tags: Sequence[str], attrs: Mapping[str, str | None] | None = None
    ) -> list[SoupNode]:
        found = self._tag.find_all(lambda t: _matches(t, tags, attrs))
        return [self._document.wrap(t) for t in found]


def _collect_text(tag: Tag, exclude: frozenset[str]) -> str:
    parts: list[str] = []
    for child in tag.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            parts.append(str(child))
        elif isinstance(child, Tag):
            if child.name in exclude or child.name in ("script", "style", "template"):
                continue
            parts.append(_collect_text(child, exclude))
    return "".join(parts)


class SoupDocument:
    """``DocumentTree`` over a static HTML string."""

    def __init__(self, html: str, url: str = "") -> None:
        self._soup = BeautifulSoup(html, "html.parser", multi_valued_attributes=None)
        self._url = url
        self._nodes: dict[int, SoupNode] = {}
        self._log = logger.bind(component="soup_document")
        self._log.debug("Parsed document", url=url, size=len(html))

    def wrap(self, tag: Tag) -> SoupNode:
        """Return the single ``SoupNode`` for ``tag``."""
        node = self._nodes.get(id(tag))
        if node is None:
            node = SoupNode(tag, self)
            self._nodes[id(tag)] = node
        return node

    @property
    def url(self) -> str:
        return self._url

    @property
    def title(self) -> str:
        title = self._soup.title
        return title.get_text(strip=True) if title else ""

    def root(self) -> SoupNode | None:
        html = self._soup.find("html")
        return self.wrap(html) if isinstance(html, Tag) else None

    def body(self) -> SoupNode | None:
        body = self._soup.find("body")
        return self.wrap(body) if isinstance(body, Tag) else None

    def query_all(
        self, tags: Sequence[str], attrs: Mapping[str, str | None] | None = None
    ) -> list[SoupNode]:
        found = self._soup.find_all(lambda t: _matches(t, tags, attrs))
        return [self.wrap(t) for t in found]

    def get_element_by_id(self, element_id: str) -> SoupNode | None:
        tag = self._soup.find(attrs={"id": element_id})
        return self.wrap(tag) if isinstance(tag, Tag) else None

    def document_direction(self) -> str | None:
        root = self.root()
        if root is None:
            return None
        return parse_inline_style(root.get_attribute("style")).get("direction")

    def text_content(self) -> str:
        body = self._soup.find("body")
        return _collect_text(body if isinstance(body, Tag) else self._soup, frozenset())

    def computed_style(self, tag: Tag, prop: str) -> str | None:
        """Approximate the computed value of ``prop`` for ``tag``."""
        inline = parse_inline_style(tag.get("style"))

        if prop == "display":
            if tag.name in NON_RENDERED_TAGS or (
                tag.name == "input" and str(tag.get("type", "")).lower() == "hidden"
            ):
                return "none"
            if "display" in inline:
                return inline["display"]
            if tag.has_attr("hidden"):
                return "none"
            return "block" if tag.name in BLOCK_TAGS else "inline"

        if prop == "direction":
            if "direction" in inline:
                return inline["direction"]
            dir_attr = str(tag.get("dir", "")).strip().lower()
            if dir_attr in ("ltr", "rtl"):
                return dir_attr

        if prop in inline:
            return inline[prop]

        if prop in INHERITED_PROPERTIES:
            parent = tag.parent
            if isinstance(parent, Tag) and not isinstance(parent, BeautifulSoup):
                return self.computed_style(parent, prop)
            return "visible" if prop == "visibility" else "ltr"

        if prop == "opacity":
            return "1"
        return None
