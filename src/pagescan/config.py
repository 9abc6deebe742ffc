"""Configuration for the page analyzer."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import structlog
import yaml

from pagescan.analysis.id_stability import DEFAULT_ID_PATTERNS, IdPattern
from pagescan.analysis.intent import RTL_LANGUAGES
from pagescan.analysis.selectors import (
    DEFAULT_ALT_TEST_ID_ATTRIBUTES,
    DEFAULT_TEST_ID_ATTRIBUTES,
)
from pagescan.exceptions import ConfigError

logger = structlog.get_logger(__name__)

CONFIG_ENV_VAR = "PAGESCAN_CONFIG"

# Links kept per analysis, after visibility filtering
LINK_LIMIT = 20


@dataclass
class AnalyzerConfig:
    """Tunable limits and tables for one ``PageAnalyzer``."""

    link_limit: int = LINK_LIMIT
    context_button_limit: int = 10
    context_link_limit: int = 10
    preceding_text_min: int = 2
    preceding_text_max: int = 50
    role_text_max: int = 30
    test_id_attributes: list[str] = field(default_factory=lambda: list(DEFAULT_TEST_ID_ATTRIBUTES))
    alt_test_id_attributes: list[str] = field(
        default_factory=lambda: list(DEFAULT_ALT_TEST_ID_ATTRIBUTES)
    )
    extra_id_patterns: list[IdPattern] = field(default_factory=list)
    rtl_languages: frozenset[str] = RTL_LANGUAGES

    def __post_init__(self) -> None:
        for name in (
            "link_limit",
            "context_button_limit",
            "context_link_limit",
            "preceding_text_min",
            "preceding_text_max",
            "role_text_max",
        ):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ConfigError(f"{name} must be a non-negative integer, got {value!r}")
        if self.preceding_text_min > self.preceding_text_max:
            raise ConfigError("preceding_text_min must not exceed preceding_text_max")

    @property
    def id_patterns(self) -> list[IdPattern]:
        """Default identifier table plus configured extras."""
        return [*DEFAULT_ID_PATTERNS, *self.extra_id_patterns]

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> AnalyzerConfig:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        kwargs: dict[str, Any] = dict(data)
        if "extra_id_patterns" in kwargs:
            entries = kwargs["extra_id_patterns"] or []
            if not isinstance(entries, list):
                raise ConfigError("extra_id_patterns must be a list")
            kwargs["extra_id_patterns"] = [
                e if isinstance(e, IdPattern) else IdPattern.from_mapping(e) for e in entries
            ]
        for key in ("test_id_attributes", "alt_test_id_attributes"):
            if key in kwargs and not isinstance(kwargs[key], list):
                raise ConfigError(f"{key} must be a list of attribute names")
        if "rtl_languages" in kwargs:
            kwargs["rtl_languages"] = frozenset(str(lang).lower() for lang in kwargs["rtl_languages"])
        return cls(**kwargs)


def load_config(path: str | Path | None = None) -> AnalyzerConfig:
    """
    Load analyzer configuration from YAML.

    Args:
        path: YAML file path. Falls back to ``$PAGESCAN_CONFIG``; with
            neither, defaults are returned.

    Raises:
        ConfigError: If the file is unreadable or malformed.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or None
    if path is None:
        return AnalyzerConfig()

    config_path = Path(path)
    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    logger.debug("Loaded analyzer config", path=str(config_path), keys=sorted(raw))
    return AnalyzerConfig.from_mapping(raw)
