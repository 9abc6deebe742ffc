"""
Page analysis orchestration.

Walks a document once, in this order:

1. forms, then the visible fields inside each form
2. visible fields outside any form
3. buttons (``<button>``, button-type inputs, ``role="button"``)
4. the first ``link_limit`` visible links

Each node is processed in isolation: a fault is logged and only that node
is dropped. Intent detection runs once over the collected fields. The entry
point never raises; a catastrophic fault yields a result carrying only the
URL and title.
"""

from __future__ import annotations

from typing import Callable, TypeVar
from urllib.parse import urljoin

import structlog

from pagescan.analysis.id_stability import IdStabilityClassifier
from pagescan.analysis.intent import PageIntentDetector
from pagescan.analysis.labels import LabelResolver
from pagescan.analysis.naming import VariableNameRegistry, VariableNamer
from pagescan.analysis.selectors import SelectorSynthesizer
from pagescan.analysis.visibility import VisibilityClassifier
from pagescan.config import AnalyzerConfig
from pagescan.dom.base import DocumentTree, DomNode, closest, has_ancestor
from pagescan.models import (
    ButtonRecord,
    FormRecord,
    InputRecord,
    LinkRecord,
    PageAnalysisResult,
)

logger = structlog.get_logger(__name__)

FIELD_TAGS: tuple[str, ...] = ("input", "textarea", "select")
# Form and standalone fields alike; submit inputs are reported as buttons
SKIPPED_FIELD_TYPES: frozenset[str] = frozenset({"hidden", "submit"})
BUTTON_INPUT_TYPES: tuple[str, ...] = ("submit", "button", "reset")

T = TypeVar("T")


def _field_type(node: DomNode) -> str:
    if node.tag_name == "input":
        return (node.get_attribute("type") or "text").strip().lower() or "text"
    if node.tag_name == "select":
        return "select-multiple" if node.get_attribute("multiple") is not None else "select-one"
    return node.tag_name


def _clean_text(text: str | None) -> str:
    return " ".join((text or "").split())


class PageAnalyzer:
    """
    Inventories a document into forms, fields, buttons and links with a
    resilient locator for each.

    Example:
        >>> analyzer = PageAnalyzer()
        >>> result = analyzer.analyze(SoupDocument(html, url="https://example.com/login"))
        >>> result.metadata.has_login
        True
    """

    def __init__(self, config: AnalyzerConfig | None = None) -> None:
        self.config = config or AnalyzerConfig()
        self._visibility = VisibilityClassifier()
        self._selectors = SelectorSynthesizer(
            id_classifier=IdStabilityClassifier(self.config.id_patterns),
            test_id_attributes=self.config.test_id_attributes,
            alt_test_id_attributes=self.config.alt_test_id_attributes,
            role_text_max=self.config.role_text_max,
        )
        self._intent = PageIntentDetector(self.config.rtl_languages)
        self._log = logger.bind(component="page_analyzer")

    def analyze(self, document: DocumentTree) -> PageAnalysisResult:
        """Analyze ``document``; never raises."""
        try:
            return self._analyze(document)
        except Exception as e:
            self._log.error("Page analysis failed, returning minimal result", error=str(e))
            return PageAnalysisResult(
                url=_safe_read(lambda: document.url),
                title=_safe_read(lambda: document.title),
            )

    def _analyze(self, document: DocumentTree) -> PageAnalysisResult:
        result = PageAnalysisResult(url=document.url, title=document.title)
        labels = LabelResolver(
            document,
            preceding_text_min=self.config.preceding_text_min,
            preceding_text_max=self.config.preceding_text_max,
        )
        namer = VariableNamer(VariableNameRegistry())

        for form in document.query_all(["form"]):
            record = self._isolated(form, lambda f=form: self._form_record(f, labels, namer))
            if record is not None:
                result.forms.append(record)

        for node in document.query_all(FIELD_TAGS):
            record = self._isolated(node, lambda n=node: self._standalone_record(n, labels, namer))
            if record is not None:
                result.inputs.append(record)

        for node in self._button_nodes(document):
            record = self._isolated(node, lambda n=node: self._button_record(n))
            if record is not None:
                result.buttons.append(record)

        for node in document.query_all(["a"], {"href": None}):
            if len(result.links) >= self.config.link_limit:
                break
            record = self._isolated(node, lambda n=node: self._link_record(n, document.url))
            if record is not None:
                result.links.append(record)

        result.metadata = self._intent.detect(document, list(result.all_fields()))

        self._log.info(
            "Page analyzed",
            url=result.url,
            forms=len(result.forms),
            inputs=len(result.inputs),
            buttons=len(result.buttons),
            links=len(result.links),
        )
        return result

    def _isolated(self, node: DomNode, build: Callable[[], T | None]) -> T | None:
        try:
            return build()
        except Exception as e:
            self._log.warning(
                "Skipping element after extraction fault",
                tag=_safe_read(lambda: node.tag_name),
                id=_safe_read(lambda: node.get_attribute("id") or ""),
                error=str(e),
            )
            return None

    def _is_candidate_field(self, node: DomNode) -> bool:
        return _field_type(node) not in SKIPPED_FIELD_TYPES and self._visibility.is_visible(node)

    def _form_record(
        self, form: DomNode, labels: LabelResolver, namer: VariableNamer
    ) -> FormRecord:
        record = FormRecord(
            id=form.get_attribute("id") or None,
            name=form.get_attribute("name") or None,
            action=form.get_attribute("action") or None,
            method=(form.get_attribute("method") or "").lower() or None,
        )
        for node in form.query_all(FIELD_TAGS):
            field = self._isolated(
                node, lambda n=node: self._form_field_record(form, n, labels, namer)
            )
            if field is not None:
                record.fields.append(field)
        return record

    def _form_field_record(
        self, form: DomNode, node: DomNode, labels: LabelResolver, namer: VariableNamer
    ) -> InputRecord | None:
        # Nested forms: a field belongs to its nearest form only
        if closest(node, "form") is not form or not self._is_candidate_field(node):
            return None
        return self._input_record(node, labels, namer)

    def _standalone_record(
        self, node: DomNode, labels: LabelResolver, namer: VariableNamer
    ) -> InputRecord | None:
        if has_ancestor(node, "form") or not self._is_candidate_field(node):
            return None
        return self._input_record(node, labels, namer)

    def _input_record(
        self, node: DomNode, labels: LabelResolver, namer: VariableNamer
    ) -> InputRecord:
        field_type = _field_type(node)
        record = InputRecord(
            type=field_type,
            selector=self._selectors.synthesize(node),
            name=node.get_attribute("name") or None,
            id=node.get_attribute("id") or None,
            placeholder=node.get_attribute("placeholder") or None,
            label=labels.resolve(node),
            required=node.get_attribute("required") is not None
            or (node.get_attribute("aria-required") or "").lower() == "true",
        )
        record.variable_name = namer.name_for(
            record.label or record.placeholder or record.name or record.id or field_type
        )
        return record

    @staticmethod
    def _is_button(node: DomNode) -> bool:
        if node.tag_name == "button":
            return True
        if node.tag_name == "input":
            return (node.get_attribute("type") or "").strip().lower() in BUTTON_INPUT_TYPES
        return (node.get_attribute("role") or "").strip().lower() == "button"

    def _button_nodes(self, document: DocumentTree) -> list[DomNode]:
        """Buttons in document order, each once."""
        nodes: list[DomNode] = []
        for node in document.query_all(["*"]):
            try:
                if self._is_button(node):
                    nodes.append(node)
            except Exception as e:
                self._log.warning("Skipping unreadable button candidate", error=str(e))
        return nodes

    def _button_record(self, node: DomNode) -> ButtonRecord:
        text = (
            _clean_text(node.text_content())
            or _clean_text(node.get_attribute("value"))
            or _clean_text(node.get_attribute("aria-label"))
            or "Button"
        )
        button_type = node.get_attribute("type")
        if button_type is None and node.tag_name == "button":
            button_type = "submit"
        return ButtonRecord(
            text=text,
            selector=self._selectors.synthesize(node),
            button_type=button_type.lower() if button_type else None,
            id=node.get_attribute("id") or None,
            class_name=node.get_attribute("class") or None,
        )

    def _link_record(self, node: DomNode, base_url: str) -> LinkRecord | None:
        href = (node.get_attribute("href") or "").strip()
        if not href or href.lower().startswith("javascript:"):
            return None
        if not self._visibility.is_visible(node):
            return None
        return LinkRecord(
            text=_clean_text(node.text_content()) or "Link",
            href=urljoin(base_url, href) if base_url else href,
            selector=self._selectors.synthesize(node),
        )


def _safe_read(read: Callable[[], str]) -> str:
    try:
        return read() or ""
    except Exception:
        return ""


def analyze_page(document: DocumentTree, config: AnalyzerConfig | None = None) -> PageAnalysisResult:
    """Analyze ``document`` with a fresh ``PageAnalyzer``."""
    return PageAnalyzer(config).analyze(document)
