"""
Value objects produced by a page analysis pass.

Every object here is created fresh inside a single ``PageAnalyzer.analyze``
call and handed to the caller; the analyzer keeps no reference afterwards.

Element records form a tagged union discriminated by ``kind``:

- ``InputRecord``  (``ElementKind.INPUT``)
- ``ButtonRecord`` (``ElementKind.BUTTON``)
- ``LinkRecord``   (``ElementKind.LINK``)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Iterator


class ElementKind(StrEnum):
    """Discriminator for element records."""

    INPUT = "input"
    BUTTON = "button"
    LINK = "link"


class Direction(StrEnum):
    """Dominant text direction of a page."""

    LTR = "ltr"
    RTL = "rtl"


class SelectorTier(StrEnum):
    """Waterfall tier that produced a selector, highest priority first."""

    TEST_ID = "test_id"
    ALT_TEST_ID = "alt_test_id"
    ID = "id"
    NAME = "name"
    ARIA_LABEL = "aria_label"
    TYPE_PLACEHOLDER = "type_placeholder"
    ROLE = "role"
    CLASS = "class"
    POSITION = "position"
    EMERGENCY = "emergency"


@dataclass(frozen=True)
class SelectorStrategy:
    """A single locator with its resilience estimate."""

    value: str
    """Locator string (CSS, with ``:has-text()`` for role+text locators)."""

    confidence: float
    """Resilience estimate in [0.0, 1.0]."""

    tier: SelectorTier
    """Waterfall tier that produced this locator."""

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1], got {self.confidence}")

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "confidence": self.confidence, "tier": str(self.tier)}


@dataclass
class InputRecord:
    """A form control (input, textarea, select)."""

    type: str
    selector: SelectorStrategy
    name: str | None = None
    id: str | None = None
    placeholder: str | None = None
    label: str | None = None
    required: bool = False
    variable_name: str | None = None  # Unique within one analysis pass
    kind: ElementKind = field(default=ElementKind.INPUT, init=False)

    @property
    def display_label(self) -> str:
        """Best text to show for this field."""
        return self.label or self.placeholder or self.name or "field"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": str(self.kind),
            "type": self.type,
            "name": self.name,
            "id": self.id,
            "placeholder": self.placeholder,
            "label": self.label,
            "required": self.required,
            "variableName": self.variable_name,
            "selector": self.selector.to_dict(),
        }


@dataclass
class ButtonRecord:
    """A clickable button, submit input or ``role="button"`` element."""

    text: str
    selector: SelectorStrategy
    button_type: str | None = None
    id: str | None = None
    class_name: str | None = None
    kind: ElementKind = field(default=ElementKind.BUTTON, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": str(self.kind),
            "text": self.text,
            "type": self.button_type,
            "id": self.id,
            "class": self.class_name,
            "selector": self.selector.to_dict(),
        }


@dataclass
class LinkRecord:
    """An anchor with a navigable href."""

    text: str
    href: str
    selector: SelectorStrategy
    kind: ElementKind = field(default=ElementKind.LINK, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": str(self.kind),
            "text": self.text,
            "href": self.href,
            "selector": self.selector.to_dict(),
        }


ElementRecord = InputRecord | ButtonRecord | LinkRecord


@dataclass
class FormRecord:
    """A form and the visible fields it owns."""

    id: str | None = None
    name: str | None = None
    action: str | None = None
    method: str | None = None
    fields: list[InputRecord] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "action": self.action,
            "method": self.method,
            "fields": [f.to_dict() for f in self.fields],
        }


@dataclass
class PageMetadata:
    """Page intent flags and text directionality."""

    has_login: bool = False
    has_signup: bool = False
    has_search: bool = False
    has_checkout: bool = False
    direction: Direction = Direction.LTR
    language: str | None = None

    @property
    def is_rtl(self) -> bool:
        return self.direction == Direction.RTL

    def to_dict(self) -> dict[str, Any]:
        return {
            "hasLogin": self.has_login,
            "hasSignup": self.has_signup,
            "hasSearch": self.has_search,
            "hasCheckout": self.has_checkout,
            "direction": str(self.direction),
            "language": self.language,
        }


@dataclass
class PageAnalysisResult:
    """Complete structural analysis of one page."""

    url: str
    title: str
    forms: list[FormRecord] = field(default_factory=list)
    buttons: list[ButtonRecord] = field(default_factory=list)
    links: list[LinkRecord] = field(default_factory=list)
    inputs: list[InputRecord] = field(default_factory=list)
    """Standalone fields that are not inside any form."""

    metadata: PageMetadata = field(default_factory=PageMetadata)

    def all_fields(self) -> Iterator[InputRecord]:
        """Form fields followed by standalone inputs."""
        for form in self.forms:
            yield from form.fields
        yield from self.inputs

    def elements(self) -> Iterator[ElementRecord]:
        """Every element record in the result."""
        yield from self.all_fields()
        yield from self.buttons
        yield from self.links

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "forms": [f.to_dict() for f in self.forms],
            "buttons": [b.to_dict() for b in self.buttons],
            "links": [link.to_dict() for link in self.links],
            "inputs": [i.to_dict() for i in self.inputs],
            "metadata": self.metadata.to_dict(),
        }
