"""
Structural page analysis.

Provides:
- Visibility classification
- Identifier stability classification
- Label resolution
- Selector synthesis with confidence scores
- Page intent and direction detection
- Variable naming for recorded fields
- Orchestration and condensed text rendering
"""

from pagescan.analysis.context import render_page_context
from pagescan.analysis.id_stability import (
    DEFAULT_ID_PATTERNS,
    IdPattern,
    IdStabilityClassifier,
    PatternFamily,
)
from pagescan.analysis.intent import RTL_LANGUAGES, PageIntentDetector
from pagescan.analysis.labels import LabelResolver, clean_label, is_label_like
from pagescan.analysis.naming import VariableNameRegistry, VariableNamer, sanitize_name
from pagescan.analysis.page_analyzer import PageAnalyzer, analyze_page
from pagescan.analysis.selectors import (
    CONFIDENCE,
    SelectorSynthesizer,
    describe_selector,
    escape_attribute_value,
    escape_identifier,
)
from pagescan.analysis.visibility import VisibilityClassifier, is_visible

__all__ = [
    # Visibility
    "VisibilityClassifier",
    "is_visible",
    # Identifier stability
    "DEFAULT_ID_PATTERNS",
    "IdPattern",
    "IdStabilityClassifier",
    "PatternFamily",
    # Labels
    "LabelResolver",
    "clean_label",
    "is_label_like",
    # Selectors
    "CONFIDENCE",
    "SelectorSynthesizer",
    "describe_selector",
    "escape_attribute_value",
    "escape_identifier",
    # Intent
    "PageIntentDetector",
    "RTL_LANGUAGES",
    # Naming
    "VariableNameRegistry",
    "VariableNamer",
    "sanitize_name",
    # Orchestration
    "PageAnalyzer",
    "analyze_page",
    "render_page_context",
]
