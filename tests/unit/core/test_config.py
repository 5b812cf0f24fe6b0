"""
Tests for configuration loading.

Tests defaults, section overrides from mappings and YAML files, and the
errors raised for unknown or mistyped settings.
"""
import pytest

from folio.configs import (
    DEFAULT_CONFIG,
    FORM,
    READING,
    TIMELINE,
    config_from_mapping,
    load_config,
)
from folio.core.exceptions import ConfigError


class TestDefaults:
    """Tests for the module-level defaults."""

    def test_reading_defaults(self):
        assert READING.speeds == {"slow": 150, "average": 200, "fast": 250}
        assert READING.code_reading_factor == 0.5

    def test_form_defaults(self):
        assert FORM.min_dwell_seconds == 3.0
        assert FORM.max_staleness_seconds == 1800
        assert FORM.spam_threshold == 3
        assert "mailinator.com" in FORM.disposable_domains

    def test_timeline_defaults(self):
        assert TIMELINE.overlap_types == ("employment",)

    def test_sections_share_defaults(self):
        assert DEFAULT_CONFIG.form == FORM


class TestConfigFromMapping:
    """Tests for config_from_mapping."""

    def test_empty_is_default(self):
        assert config_from_mapping(None) is DEFAULT_CONFIG
        assert config_from_mapping({}) is DEFAULT_CONFIG

    def test_override_scalar(self):
        """Overridden keys change; the rest keep their defaults."""
        config = config_from_mapping({"form": {"spam_threshold": 5}})
        assert config.form.spam_threshold == 5
        assert config.form.min_dwell_seconds == FORM.min_dwell_seconds
        assert config.reading == READING

    def test_lists_become_tuples(self):
        config = config_from_mapping({"timeline": {"overlap_types": ["employment", "contract"]}})
        assert config.timeline.overlap_types == ("employment", "contract")

    def test_dicts_merge(self):
        """Mapping settings merge key by key."""
        config = config_from_mapping({"reading": {"speeds": {"fast": 300}}})
        assert config.reading.speeds == {"slow": 150, "average": 200, "fast": 300}

    def test_null_section_ignored(self):
        assert config_from_mapping({"form": None}).form == FORM

    @pytest.mark.parametrize(
        "data,message",
        [
            ({"readnig": {}}, "Unknown config section(s): readnig"),
            ({"form": {"threshold": 1}}, "Unknown key(s) in 'form' section: threshold"),
            ({"form": {"spam_threshold": "high"}}, "'form.spam_threshold' must be a number"),
            ({"form": {"spam_threshold": True}}, "'form.spam_threshold' must be a number"),
            ({"timeline": {"overlap_types": "employment"}}, "'timeline.overlap_types' must be a list"),
            ({"reading": {"speeds": [1, 2]}}, "'reading.speeds' must be a mapping"),
            ({"rate_limit": {"salt_env_var": 3}}, "'rate_limit.salt_env_var' must be a string"),
            ({"form": [1, 2]}, "Config section 'form' must be a mapping"),
        ],
    )
    def test_invalid(self, data, message):
        with pytest.raises(ConfigError) as excinfo:
            config_from_mapping(data)
        assert str(excinfo.value) == message


class TestLoadConfig:
    """Tests for load_config."""

    def test_none_or_missing_file(self, tmp_path):
        """No config file means the defaults."""
        assert load_config(None) is DEFAULT_CONFIG
        assert load_config(tmp_path / "folio.yaml") is DEFAULT_CONFIG

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "folio.yaml"
        path.write_text(
            "timeline:\n  gap_threshold_months: 3\nrate_limit:\n  max_attempts: 10\n",
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.timeline.gap_threshold_months == 3
        assert config.rate_limit.max_attempts == 10

    def test_empty_file(self, tmp_path):
        path = tmp_path / "folio.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) is DEFAULT_CONFIG

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "folio.yaml"
        path.write_text("form: [broken\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_top_level_not_mapping(self, tmp_path):
        path = tmp_path / "folio.yaml"
        path.write_text("- form\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="mapping of sections"):
            load_config(path)

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "folio.yaml"
        path.write_bytes(b"\xff\xfe\x00bad")
        with pytest.raises(ConfigError, match="not valid UTF-8 text"):
            load_config(path)
