"""
pagescan: structural page analysis and resilient selector synthesis.

Inventories a rendered document into forms, fields, buttons and links, each
with one locator and a confidence score, plus page intent flags and text
direction, for recorders that build and replay automated tests.
"""

__version__ = "1.0.0"
__author__ = "Olib AI"

from pagescan.analysis import (
    PageAnalyzer,
    SelectorSynthesizer,
    VariableNameRegistry,
    VariableNamer,
    analyze_page,
    render_page_context,
)
from pagescan.config import AnalyzerConfig, load_config
from pagescan.dom import DocumentTree, DomNode, SoupDocument
from pagescan.exceptions import ConfigError, InvalidPatternError, PageScanError
from pagescan.models import (
    ButtonRecord,
    Direction,
    ElementKind,
    ElementRecord,
    FormRecord,
    InputRecord,
    LinkRecord,
    PageAnalysisResult,
    PageMetadata,
    SelectorStrategy,
    SelectorTier,
)

__all__ = [
    "AnalyzerConfig",
    "ButtonRecord",
    "ConfigError",
    "Direction",
    "DocumentTree",
    "DomNode",
    "ElementKind",
    "ElementRecord",
    "FormRecord",
    "InputRecord",
    "InvalidPatternError",
    "LinkRecord",
    "PageAnalysisResult",
    "PageAnalyzer",
    "PageMetadata",
    "PageScanError",
    "SelectorStrategy",
    "SelectorSynthesizer",
    "SelectorTier",
    "SoupDocument",
    "VariableNameRegistry",
    "VariableNamer",
    "__version__",
    "analyze_page",
    "load_config",
    "render_page_context",
]
