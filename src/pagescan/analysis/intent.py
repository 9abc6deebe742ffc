"""
Page intent and directionality detection.

Runs once per analysis over the collected fields plus the lower-cased page
text and URL, and sets four independent flags:

- login:    a password field and (an email-like field or login wording)
- signup:   a password field and (a confirmation field or signup wording)
- search:   a search-hinted field or the word "search" in the page text
- checkout: checkout/cart/payment wording or a payment-card field

Direction is decided by the first decisive signal: ``dir`` on the root
element, an RTL ``lang`` on the root element, the body's computed
``direction``, the document-level direction, then ``ltr``.
"""

from __future__ import annotations

import re
from typing import Iterable

import structlog

from pagescan.dom.base import DocumentTree
from pagescan.models import Direction, InputRecord, PageMetadata

logger = structlog.get_logger(__name__)

RTL_LANGUAGES: frozenset[str] = frozenset({
    "ar", "arc", "ckb", "dv", "fa", "he", "iw", "ks", "ku", "ps", "sd", "syr",
    "ug", "ur", "yi",
})

LOGIN_PHRASES: tuple[str, ...] = ("login", "log in", "sign in", "signin")
SIGNUP_PHRASES: tuple[str, ...] = ("sign up", "signup", "register", "create account")
CHECKOUT_URL_PHRASES: tuple[str, ...] = ("checkout", "cart", "payment")
CHECKOUT_TEXT_PHRASES: tuple[str, ...] = ("checkout", "payment")
CARD_HINTS: tuple[str, ...] = ("card", "ccnum", "cc-num")


def _lower(value: str | None) -> str:
    return (value or "").lower()


def _contains_any(haystack: str, needles: Iterable[str]) -> bool:
    return any(needle in haystack for needle in needles)


def _phrase_pattern(phrases: Iterable[str]) -> re.Pattern[str]:
    # Phrases must start a word: "signin" does not match "designing"
    return re.compile(r"\b(?:" + "|".join(re.escape(p) for p in phrases) + ")")


_LOGIN_RE = _phrase_pattern(LOGIN_PHRASES)
_SIGNUP_RE = _phrase_pattern(SIGNUP_PHRASES)


def primary_language(code: str | None) -> str | None:
    """Primary subtag of a BCP 47 code: ``"ar-SA"`` -> ``"ar"``."""
    if not code or not code.strip():
        return None
    return code.strip().replace("_", "-").split("-")[0].lower()


def _as_direction(value: str | None) -> Direction | None:
    value = _lower(value).strip()
    if value == "rtl":
        return Direction.RTL
    if value == "ltr":
        return Direction.LTR
    return None


class PageIntentDetector:
    """Infers page purpose flags and text direction."""

    def __init__(self, rtl_languages: Iterable[str] = RTL_LANGUAGES) -> None:
        self._rtl_languages = frozenset(lang.lower() for lang in rtl_languages)
        self._log = logger.bind(component="page_intent_detector")

    def detect(
        self,
        document: DocumentTree,
        fields: Iterable[InputRecord],
        page_text: str | None = None,
        url: str | None = None,
    ) -> PageMetadata:
        """Build ``PageMetadata``; any fault degrades to all-false/ltr."""
        try:
            fields = list(fields)
            text = _lower(page_text if page_text is not None else document.text_content())
            url_lower = _lower(url if url is not None else document.url)
            direction, language = self.detect_direction(document)
            return PageMetadata(
                has_login=self._has_login(fields, text, url_lower),
                has_signup=self._has_signup(fields, text, url_lower),
                has_search=self._has_search(fields, text),
                has_checkout=self._has_checkout(fields, text, url_lower),
                direction=direction,
                language=language,
            )
        except Exception as e:
            self._log.warning("Intent detection failed, using defaults", error=str(e))
            return PageMetadata()

    def _has_login(self, fields: list[InputRecord], text: str, url: str) -> bool:
        if not any(_lower(f.type) == "password" for f in fields):
            return False
        has_email = any(
            _lower(f.type) == "email" or "email" in _lower(f.name) or "email" in _lower(f.id)
            for f in fields
        )
        return has_email or bool(_LOGIN_RE.search(text) or _LOGIN_RE.search(url))

    def _has_signup(self, fields: list[InputRecord], text: str, url: str) -> bool:
        if not any(_lower(f.type) == "password" for f in fields):
            return False
        has_confirm = any("confirm" in _lower(f.name) or "confirm" in _lower(f.id) for f in fields)
        return (
            has_confirm
            or _SIGNUP_RE.search(text) is not None
            or _SIGNUP_RE.search(url) is not None
        )

    def _has_search(self, fields: list[InputRecord], text: str) -> bool:
        has_search_field = any(
            _lower(f.type) == "search"
            or "search" in _lower(f.name)
            or "search" in _lower(f.placeholder)
            for f in fields
        )
        return has_search_field or "search" in text

    def _has_checkout(self, fields: list[InputRecord], text: str, url: str) -> bool:
        if _contains_any(url, CHECKOUT_URL_PHRASES) or _contains_any(text, CHECKOUT_TEXT_PHRASES):
            return True
        return any(
            _contains_any(_lower(f.name), CARD_HINTS)
            or _contains_any(_lower(f.placeholder), CARD_HINTS)
            for f in fields
        )

    def detect_direction(self, document: DocumentTree) -> tuple[Direction, str | None]:
        """Return (direction, language) for the document."""
        root = document.root()
        lang_attr = root.get_attribute("lang") if root is not None else None
        language = lang_attr.strip() if lang_attr and lang_attr.strip() else None

        if root is not None:
            explicit = _as_direction(root.get_attribute("dir"))
            if explicit is not None:
                return explicit, language

        if primary_language(language) in self._rtl_languages:
            return Direction.RTL, language

        body = document.body()
        if body is not None and _as_direction(body.computed_style("direction")) == Direction.RTL:
            return Direction.RTL, language

        if _as_direction(document.document_direction()) == Direction.RTL:
            return Direction.RTL, language

        return Direction.LTR, language
