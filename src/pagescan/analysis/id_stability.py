"""
Identifier stability classification.

Hand-authored ids (``submit-button``, ``login-form``) survive re-renders;
framework-generated ids (``:r3:``, ``ember412``, ``mui-17``, UUIDs) do not.
The classifier checks an id against a table of pattern families. The table
is plain data: callers can pass their own, extend the defaults, or load
extra patterns from configuration as new frameworks appear.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Iterable, Mapping

import structlog

from pagescan.exceptions import InvalidPatternError

logger = structlog.get_logger(__name__)


class PatternFamily(StrEnum):
    """Broad families of generated identifiers."""

    UUID = "uuid"
    HASH = "hash"
    FRAMEWORK = "framework"
    SEQUENTIAL = "sequential"
    RANDOM_SUFFIX = "random_suffix"
    GENERIC = "generic"
    CUSTOM = "custom"


@dataclass(frozen=True)
class IdPattern:
    """A named regular expression that marks an identifier as generated."""

    name: str
    regex: re.Pattern[str]
    family: PatternFamily = PatternFamily.CUSTOM

    @classmethod
    def compile(
        cls, name: str, pattern: str, family: PatternFamily | str = PatternFamily.CUSTOM
    ) -> IdPattern:
        try:
            regex = re.compile(pattern, re.IGNORECASE)
        except re.error as e:
            raise InvalidPatternError(f"Invalid id pattern {name!r}: {e}") from e
        try:
            family = PatternFamily(family)
        except ValueError as e:
            raise InvalidPatternError(f"Unknown pattern family {family!r} for {name!r}") from e
        return cls(name=name, regex=regex, family=family)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> IdPattern:
        """Build from a config entry ``{name, pattern, family}``."""
        if "pattern" not in data:
            raise InvalidPatternError(f"Id pattern entry is missing 'pattern': {dict(data)!r}")
        pattern = str(data["pattern"])
        return cls.compile(
            str(data.get("name", pattern)), pattern, data.get("family", PatternFamily.CUSTOM)
        )

    def matches(self, identifier: str) -> bool:
        return self.regex.search(identifier) is not None


_DEFAULT_PATTERN_SPECS: tuple[tuple[str, str, PatternFamily], ...] = (
    # UUIDs (full or leading segment)
    ("uuid", r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", PatternFamily.UUID),
    ("uuid_prefix", r"^[0-9a-f]{8}-[0-9a-f]{4}", PatternFamily.UUID),
    # Content hashes: hex blobs of 6+ chars containing at least one digit
    ("hex_blob", r"^(?=[a-f]*\d)[0-9a-f]{6,}$", PatternFamily.HASH),
    # UI framework conventions
    ("react_use_id", r"^:[a-z]{1,2}[0-9a-z]*:$", PatternFamily.FRAMEWORK),
    ("ember", r"^ember\d+$", PatternFamily.FRAMEWORK),
    ("angular", r"^(ng|cdk|mat)-[a-z-]*\d+$", PatternFamily.FRAMEWORK),
    ("mui", r"^mui-\d+", PatternFamily.FRAMEWORK),
    ("headlessui", r"^headlessui-", PatternFamily.FRAMEWORK),
    ("radix", r"^radix-", PatternFamily.FRAMEWORK),
    ("react_select", r"^react-select-\d+", PatternFamily.FRAMEWORK),
    ("extjs", r"^ext-(gen|comp|element)?-?\d+$", PatternFamily.FRAMEWORK),
    ("yui", r"^yui_", PatternFamily.FRAMEWORK),
    ("gwt", r"^gwt-uid-\d+$", PatternFamily.FRAMEWORK),
    ("jsf", r"^j_id\d*", PatternFamily.FRAMEWORK),
    # Sequential numeric ids and suffixes
    ("numeric", r"^\d+$", PatternFamily.SEQUENTIAL),
    ("numeric_suffix", r"^[a-z]+_?\d{3,}$", PatternFamily.SEQUENTIAL),
    # Short random alphanumeric suffix mixing letters and digits
    (
        "random_suffix",
        r"^[a-z][a-z0-9]*[-_](?=[a-z0-9]*\d)(?=[a-z0-9]*[a-z])[a-z0-9]{5,10}$",
        PatternFamily.RANDOM_SUFFIX,
    ),
    # Generic shapes
    ("word_dash_digits", r"^[a-z]+(?:-[a-z]+)*-\d+$", PatternFamily.GENERIC),
    ("prefix_hex", r"^[a-z]+[-_](?=[a-f]*\d)[0-9a-f]{6,}$", PatternFamily.GENERIC),
)

DEFAULT_ID_PATTERNS: tuple[IdPattern, ...] = tuple(
    IdPattern.compile(name, pattern, family) for name, pattern, family in _DEFAULT_PATTERN_SPECS
)


class IdStabilityClassifier:
    """Classifies element ids as stable (hand-authored) or generated."""

    def __init__(self, patterns: Iterable[IdPattern] | None = None) -> None:
        self._patterns: list[IdPattern] = list(
            DEFAULT_ID_PATTERNS if patterns is None else patterns
        )
        self._log = logger.bind(component="id_stability")

    @property
    def patterns(self) -> tuple[IdPattern, ...]:
        return tuple(self._patterns)

    def extend(self, patterns: Iterable[IdPattern]) -> None:
        """Append patterns to the table."""
        self._patterns.extend(patterns)

    def matching_pattern(self, identifier: str) -> IdPattern | None:
        """First pattern that flags ``identifier`` as generated, if any."""
        candidate = identifier.strip()
        for pattern in self._patterns:
            if pattern.matches(candidate):
                return pattern
        return None

    def is_unstable(self, identifier: str) -> bool:
        if not identifier or not identifier.strip():
            return True
        pattern = self.matching_pattern(identifier)
        if pattern is not None:
            self._log.debug("Generated id detected", id=identifier, pattern=pattern.name)
            return True
        return False

    def is_stable(self, identifier: str) -> bool:
        return not self.is_unstable(identifier)
