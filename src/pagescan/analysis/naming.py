"""
Variable naming for recorded artifacts.

Turns label text into a unique, identifier-safe name such as ``email`` or
``first_name_1``. Uniqueness is tracked by a ``VariableNameRegistry`` that
belongs to one analysis pass; nothing is shared between passes.
"""

from __future__ import annotations

import re
from typing import Iterable

import structlog

logger = structlog.get_logger(__name__)

PLACEHOLDER_NAME = "field"
DIGIT_PREFIX = "field_"

_NON_ALNUM_RE = re.compile(r"[^0-9a-zA-Z]+")
_UNDERSCORES_RE = re.compile(r"_+")


def sanitize_name(text: str | None) -> str:
    """Reduce text to a lower-case identifier, without uniqueness."""
    name = _NON_ALNUM_RE.sub("_", text or "")
    name = _UNDERSCORES_RE.sub("_", name).strip("_").lower()
    if not name:
        return PLACEHOLDER_NAME
    if name[0].isdigit():
        name = DIGIT_PREFIX + name
    return name


class VariableNameRegistry:
    """Names issued during a single analysis pass."""

    def __init__(self, issued: Iterable[str] = ()) -> None:
        self._issued: set[str] = set(issued)

    def __contains__(self, name: object) -> bool:
        return name in self._issued

    def __len__(self) -> int:
        return len(self._issued)

    @property
    def issued(self) -> frozenset[str]:
        return frozenset(self._issued)

    def register(self, name: str) -> None:
        self._issued.add(name)

    def reset(self) -> None:
        self._issued.clear()


class VariableNamer:
    """Issues unique variable names against a registry."""

    def __init__(self, registry: VariableNameRegistry | None = None) -> None:
        self.registry = registry if registry is not None else VariableNameRegistry()

    def name_for(self, text: str | None) -> str:
        base = sanitize_name(text)
        name = base
        suffix = 0
        while name in self.registry:
            suffix += 1
            name = f"{base}_{suffix}"
        self.registry.register(name)
        if suffix:
            logger.debug("Variable name collision resolved", base=base, name=name)
        return name
