"""Tests for analyzer configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from pagescan.analysis.id_stability import DEFAULT_ID_PATTERNS, PatternFamily
from pagescan.config import CONFIG_ENV_VAR, LINK_LIMIT, AnalyzerConfig, load_config
from pagescan.exceptions import ConfigError, InvalidPatternError


def write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "pagescan.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestAnalyzerConfig:
    def test_defaults(self) -> None:
        """Defaults match the documented limits and tables."""
        config = AnalyzerConfig()

        assert config.link_limit == LINK_LIMIT == 20
        assert config.test_id_attributes[0] == "data-testid"
        assert "data-cy" in config.alt_test_id_attributes
        assert "ar" in config.rtl_languages
        assert config.id_patterns == list(DEFAULT_ID_PATTERNS)

    @pytest.mark.parametrize("value", [-1, "20", True])
    def test_rejects_bad_limits(self, value: object) -> None:
        """Negative, string and bool limits are rejected."""
        with pytest.raises(ConfigError, match="link_limit"):
            AnalyzerConfig(link_limit=value)  # type: ignore[arg-type]

    def test_rejects_inverted_text_bounds(self) -> None:
        """preceding_text_min may not exceed preceding_text_max."""
        with pytest.raises(ConfigError):
            AnalyzerConfig(preceding_text_min=10, preceding_text_max=5)

    def test_from_mapping_rejects_unknown_keys(self) -> None:
        """Misspelled keys are reported by name."""
        with pytest.raises(ConfigError, match="link_limt"):
            AnalyzerConfig.from_mapping({"link_limt": 5})

    def test_from_mapping_builds_patterns(self) -> None:
        """Pattern mappings become IdPatterns and languages are lower-cased."""
        config = AnalyzerConfig.from_mapping(
            {
                "extra_id_patterns": [
                    {"name": "acme", "pattern": "^acme-[0-9]+$", "family": "framework"}
                ],
                "rtl_languages": ["AR", "he"],
            }
        )

        extra = config.id_patterns[-1]
        assert extra.name == "acme"
        assert extra.family == PatternFamily.FRAMEWORK
        assert extra.matches("ACME-12")
        assert config.rtl_languages == frozenset({"ar", "he"})

    def test_from_mapping_rejects_bad_pattern(self) -> None:
        """An uncompilable pattern raises InvalidPatternError."""
        with pytest.raises(InvalidPatternError):
            AnalyzerConfig.from_mapping({"extra_id_patterns": [{"pattern": "([unclosed"}]})


class TestLoadConfig:
    def test_no_path_returns_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """No path and no env var gives the defaults."""
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)

        assert load_config() == AnalyzerConfig()

    def test_loads_yaml(self, tmp_path: Path) -> None:
        """Values in a YAML file override the defaults."""
        path = write(tmp_path, "link_limit: 5\ntest_id_attributes: [data-automation]\n")

        config = load_config(path)

        assert config.link_limit == 5
        assert config.test_id_attributes == ["data-automation"]

    def test_env_var_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """PAGESCAN_CONFIG names the file when no path is given."""
        monkeypatch.setenv(CONFIG_ENV_VAR, str(write(tmp_path, "role_text_max: 12\n")))

        assert load_config().role_text_max == 12

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        """An empty file is treated as an empty mapping."""
        assert load_config(write(tmp_path, "")) == AnalyzerConfig()

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file raises ConfigError."""
        with pytest.raises(ConfigError, match="Cannot read"):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Malformed YAML raises ConfigError."""
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(write(tmp_path, "link_limit: [1, 2\n"))

    def test_non_mapping(self, tmp_path: Path) -> None:
        """A top-level list is rejected."""
        with pytest.raises(ConfigError, match="mapping"):
            load_config(write(tmp_path, "- a\n- b\n"))
