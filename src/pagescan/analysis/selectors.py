"""
Selector synthesis.

Produces exactly one locator per element by walking a fixed waterfall; the
first applicable tier wins:

====  ===========================================  ==========
Tier  Locator                                      Confidence
====  ===========================================  ==========
1     ``[data-testid="..."]``                      0.95
2     ``[data-cy="..."]``                          0.95
3     ``#id`` (stable ids only)                    0.90
4     ``tag[name="..."]``                          0.85
5     ``tag[aria-label="..."]``                    0.80
6     ``input[type="..."][placeholder="..."]``     0.75
7     ``tag[role="..."]`` (+ ``:has-text()``)      0.60/0.65
8     ``tag.class`` (first semantic class)         0.55
9     ``tag:nth-of-type(n)``                       0.40
====  ===========================================  ==========

Confidence values are fixed. If a tier faults, synthesis drops straight to
the positional tier; if that faults too, the bare tag name is returned at
0.20.
"""

from __future__ import annotations

import re
from typing import Callable, Sequence

import structlog

from pagescan.analysis.id_stability import IdStabilityClassifier
from pagescan.dom.base import DomNode, class_list
from pagescan.models import SelectorStrategy, SelectorTier

logger = structlog.get_logger(__name__)

CONFIDENCE: dict[SelectorTier, float] = {
    SelectorTier.TEST_ID: 0.95,
    SelectorTier.ALT_TEST_ID: 0.95,
    SelectorTier.ID: 0.90,
    SelectorTier.NAME: 0.85,
    SelectorTier.ARIA_LABEL: 0.80,
    SelectorTier.TYPE_PLACEHOLDER: 0.75,
    SelectorTier.ROLE: 0.60,
    SelectorTier.CLASS: 0.55,
    SelectorTier.POSITION: 0.40,
    SelectorTier.EMERGENCY: 0.20,
}
ROLE_WITH_TEXT_CONFIDENCE = 0.65

DEFAULT_TEST_ID_ATTRIBUTES: tuple[str, ...] = ("data-testid", "data-test-id", "data-test", "data-qa")
DEFAULT_ALT_TEST_ID_ATTRIBUTES: tuple[str, ...] = ("data-cy", "data-cypress")

INPUT_LIKE_TAGS: frozenset[str] = frozenset({"input", "textarea"})

INTERACTIVE_ROLES: frozenset[str] = frozenset({
    "button", "link", "tab", "menuitem", "checkbox", "radio", "switch", "option",
    "treeitem", "menuitemcheckbox", "menuitemradio",
})

# Classes excluded from tier 8: utility, CSS-in-JS and module-scoped names
NON_SEMANTIC_CLASS_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p)
    for p in (
        r"^[a-z]{1,2}-\d+$",  # p-4, m-2
        r"^-?[a-z]{1,3}(-[a-z0-9]{1,3})*-\d+(\.\d+)?$",  # px-2, gap-x-4, mt-0.5
        r"^[a-z]+:",  # hover:bg-..., md:flex
        r"^[0-9a-f]{6,}$",  # hash
        r"^css-[a-z0-9]+$",  # emotion
        r"^sc-[a-zA-Z0-9]+$",  # styled-components
        r"^emotion-\d+$",
        r"^jsx-\d+$",  # styled-jsx
        r"^_",  # CSS modules
        r"^[a-z0-9]+_[a-z0-9]+__[a-z0-9]{5}$",  # css-modules hashed name
    )
)
GENERIC_CLASSES: frozenset[str] = frozenset({
    "active", "disabled", "hidden", "visible", "show", "hide", "flex", "grid",
    "block", "inline", "row", "col", "container", "clearfix", "d-flex", "d-block",
    "d-none", "w-100", "h-100",
})

_ROLE_TEXT_WHITESPACE = re.compile(r"\s+")


def escape_attribute_value(value: str) -> str:
    """Escape a value for use inside a double-quoted attribute selector."""
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\a ")
        .replace("\r", "")
    )


def escape_identifier(value: str) -> str:
    """Escape a CSS identifier (ids, class names), like ``CSS.escape``."""
    out: list[str] = []
    for index, char in enumerate(value):
        code = ord(char)
        if code == 0:
            out.append("�")
        elif 0x1 <= code <= 0x1F or code == 0x7F:
            out.append(f"\\{code:x} ")
        elif char.isdigit() and (index == 0 or (index == 1 and value[0] == "-")):
            out.append(f"\\{code:x} ")
        elif index == 0 and char == "-" and len(value) == 1:
            out.append("\\-")
        elif char.isalnum() or char in "-_" or code >= 0x80:
            out.append(char)
        else:
            out.append("\\" + char)
    return "".join(out)


_CSS_ESCAPE_RE = re.compile(r"\\([0-9a-fA-F]{1,6})[ \t\n]?|\\(.)", re.DOTALL)


def unescape_identifier(value: str) -> str:
    """Reverse ``escape_identifier``: ``"\\31 st"`` -> ``"1st"``."""

    def _replace(match: re.Match[str]) -> str:
        if match.group(1):
            code = int(match.group(1), 16)
            return chr(code) if 0 < code <= 0x10FFFF else "\ufffd"
        return match.group(2)

    return _CSS_ESCAPE_RE.sub(_replace, value)


def is_semantic_class(class_name: str) -> bool:
    """True when a class name is a usable hand-authored hook."""
    if len(class_name) <= 2 or class_name.lower() in GENERIC_CLASSES:
        return False
    return not any(p.search(class_name) for p in NON_SEMANTIC_CLASS_PATTERNS)


def nth_of_type(node: DomNode) -> int:
    """1-based position of ``node`` among same-tag element siblings."""
    parent = node.parent
    if parent is None:
        return 1
    index = 0
    for child in parent.children():
        if child.tag_name == node.tag_name:
            index += 1
            if child is node:
                return index
    return 1


def describe_selector(strategy: SelectorStrategy) -> str:
    """Short human description of a locator, for step names."""
    value = strategy.value
    if strategy.tier in (SelectorTier.TEST_ID, SelectorTier.ALT_TEST_ID, SelectorTier.ARIA_LABEL):
        match = re.search(r'="((?:[^"\\]|\\.)*)"\]', value)
        if match:
            return match.group(1).replace('\\"', '"').replace("\\\\", "\\")
    if strategy.tier == SelectorTier.ROLE:
        match = re.search(r':has-text\("((?:[^"\\]|\\.)*)"\)', value)
        if match:
            return f'"{match.group(1)}"'
    if strategy.tier == SelectorTier.ID:
        return unescape_identifier(value[1:])
    return value.split(" > ")[-1]


class SelectorSynthesizer:
    """
    Generates a single resilient locator per element.

    ``candidates()`` exposes every applicable tier in waterfall order, which
    is useful for fallback lists; ``synthesize()`` returns the winner.
    """

    def __init__(
        self,
        id_classifier: IdStabilityClassifier | None = None,
        test_id_attributes: Sequence[str] = DEFAULT_TEST_ID_ATTRIBUTES,
        alt_test_id_attributes: Sequence[str] = DEFAULT_ALT_TEST_ID_ATTRIBUTES,
        role_text_max: int = 30,
    ) -> None:
        self._ids = id_classifier or IdStabilityClassifier()
        self._test_id_attributes = tuple(test_id_attributes)
        self._alt_test_id_attributes = tuple(alt_test_id_attributes)
        self._role_text_max = role_text_max
        self._log = logger.bind(component="selector_synthesizer")

    def _tiers(self) -> list[tuple[SelectorTier, Callable[[DomNode], SelectorStrategy | None]]]:
        return [
            (SelectorTier.TEST_ID, self._by_test_id),
            (SelectorTier.ALT_TEST_ID, self._by_alt_test_id),
            (SelectorTier.ID, self._by_id),
            (SelectorTier.NAME, self._by_name),
            (SelectorTier.ARIA_LABEL, self._by_aria_label),
            (SelectorTier.TYPE_PLACEHOLDER, self._by_type_placeholder),
            (SelectorTier.ROLE, self._by_role),
            (SelectorTier.CLASS, self._by_class),
            (SelectorTier.POSITION, self._by_position),
        ]

    def synthesize(self, node: DomNode) -> SelectorStrategy:
        """Return the highest-priority applicable locator for ``node``."""
        for tier, build in self._tiers():
            try:
                strategy = build(node)
            except Exception as e:
                self._log.warning(
                    "Selector tier failed, using positional fallback",
                    tier=str(tier),
                    tag=_safe_tag(node),
                    error=str(e),
                )
                return self._positional_or_emergency(node)
            if strategy is not None:
                return strategy
        return self._emergency(node)

    def candidates(self, node: DomNode) -> list[SelectorStrategy]:
        """Every applicable tier's locator, in waterfall order."""
        found: list[SelectorStrategy] = []
        for tier, build in self._tiers():
            try:
                strategy = build(node)
            except Exception as e:
                self._log.debug("Selector tier failed", tier=str(tier), error=str(e))
                continue
            if strategy is not None:
                found.append(strategy)
        return found or [self._emergency(node)]

    def _positional_or_emergency(self, node: DomNode) -> SelectorStrategy:
        try:
            return self._by_position(node)
        except Exception as e:
            self._log.warning("Positional selector failed", error=str(e))
            return self._emergency(node)

    def _emergency(self, node: DomNode) -> SelectorStrategy:
        return SelectorStrategy(
            value=_safe_tag(node) or "*",
            confidence=CONFIDENCE[SelectorTier.EMERGENCY],
            tier=SelectorTier.EMERGENCY,
        )

    @staticmethod
    def _strategy(tier: SelectorTier, value: str, confidence: float | None = None) -> SelectorStrategy:
        return SelectorStrategy(
            value=value,
            confidence=CONFIDENCE[tier] if confidence is None else confidence,
            tier=tier,
        )

    def _attribute_tier(
        self, node: DomNode, attributes: Sequence[str], tier: SelectorTier
    ) -> SelectorStrategy | None:
        for attr in attributes:
            value = node.get_attribute(attr)
            if value:
                return self._strategy(tier, f'[{attr}="{escape_attribute_value(value)}"]')
        return None

    def _by_test_id(self, node: DomNode) -> SelectorStrategy | None:
        return self._attribute_tier(node, self._test_id_attributes, SelectorTier.TEST_ID)

    def _by_alt_test_id(self, node: DomNode) -> SelectorStrategy | None:
        return self._attribute_tier(node, self._alt_test_id_attributes, SelectorTier.ALT_TEST_ID)

    def _by_id(self, node: DomNode) -> SelectorStrategy | None:
        element_id = node.get_attribute("id")
        if element_id and self._ids.is_stable(element_id):
            return self._strategy(SelectorTier.ID, f"#{escape_identifier(element_id)}")
        return None

    def _by_name(self, node: DomNode) -> SelectorStrategy | None:
        name = node.get_attribute("name")
        if name:
            return self._strategy(
                SelectorTier.NAME, f'{node.tag_name}[name="{escape_attribute_value(name)}"]'
            )
        return None

    def _by_aria_label(self, node: DomNode) -> SelectorStrategy | None:
        label = node.get_attribute("aria-label")
        if label and label.strip():
            return self._strategy(
                SelectorTier.ARIA_LABEL,
                f'{node.tag_name}[aria-label="{escape_attribute_value(label)}"]',
            )
        return None

    def _by_type_placeholder(self, node: DomNode) -> SelectorStrategy | None:
        if node.tag_name not in INPUT_LIKE_TAGS:
            return None
        placeholder = node.get_attribute("placeholder")
        if not placeholder:
            return None
        escaped = escape_attribute_value(placeholder)
        if node.tag_name == "textarea":
            return self._strategy(SelectorTier.TYPE_PLACEHOLDER, f'textarea[placeholder="{escaped}"]')
        input_type = (node.get_attribute("type") or "text").lower()
        return self._strategy(
            SelectorTier.TYPE_PLACEHOLDER,
            f'input[type="{escape_attribute_value(input_type)}"][placeholder="{escaped}"]',
        )

    def _by_role(self, node: DomNode) -> SelectorStrategy | None:
        role = (node.get_attribute("role") or "").strip()
        if not role:
            return None
        base = f'{node.tag_name}[role="{escape_attribute_value(role)}"]'
        if role.lower() in INTERACTIVE_ROLES:
            text = _ROLE_TEXT_WHITESPACE.sub(" ", node.text_content()).strip()
            if text and len(text) <= self._role_text_max:
                return self._strategy(
                    SelectorTier.ROLE,
                    f'{base}:has-text("{escape_attribute_value(text)}")',
                    ROLE_WITH_TEXT_CONFIDENCE,
                )
        return self._strategy(SelectorTier.ROLE, base)

    def _by_class(self, node: DomNode) -> SelectorStrategy | None:
        for class_name in class_list(node):
            if is_semantic_class(class_name):
                return self._strategy(
                    SelectorTier.CLASS, f"{node.tag_name}.{escape_identifier(class_name)}"
                )
        return None

    def _by_position(self, node: DomNode) -> SelectorStrategy:
        return self._strategy(
            SelectorTier.POSITION, f"{node.tag_name}:nth-of-type({nth_of_type(node)})"
        )


def _safe_tag(node: DomNode) -> str:
    try:
        return node.tag_name
    except Exception:
        return ""
