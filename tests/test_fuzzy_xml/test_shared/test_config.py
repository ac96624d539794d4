"""Tests for ParserConfig loading and validation."""

import dataclasses
import json
import tempfile
from pathlib import Path

import pytest

from fuzzy_xml.shared import ConfigError, ConfigValidationError, ParserConfig


class TestParserConfigDefaults:
    """Test default values and presets."""

    def test_defaults(self):
        """Test default configuration values."""
        config = ParserConfig()

        assert config.enable_diagnostics is True
        assert config.log_recoveries is False
        assert config.logging_level == "WARNING"
        assert config.output_format == "json"
        assert config.json_indent == 2
        assert config.encoding == "utf-8"
        assert config.root_tag == "document"
        assert config.correlation_id is None

    def test_quiet_preset(self):
        """Test the quiet preset disables diagnostics."""
        config = ParserConfig.quiet()

        assert config.enable_diagnostics is False
        assert config.logging_level == "ERROR"

    def test_verbose_preset(self):
        """Test the verbose preset logs recoveries."""
        config = ParserConfig.verbose()

        assert config.log_recoveries is True
        assert config.logging_level == "DEBUG"

    def test_config_is_frozen(self):
        """Test configuration cannot be mutated."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            ParserConfig().json_indent = 4


class TestParserConfigValidation:
    """Test validation of individual fields."""

    @pytest.mark.parametrize("overrides, field_name", [
        ({"logging_level": "LOUD"}, "logging_level"),
        ({"output_format": "yaml"}, "output_format"),
        ({"json_indent": -1}, "json_indent"),
        ({"preview_length": 0}, "preview_length"),
        ({"encoding": "not-a-codec"}, "encoding"),
        ({"root_tag": ""}, "root_tag"),
        ({"root_tag": "1root"}, "root_tag"),
    ])
    def test_invalid_values(self, overrides, field_name):
        """Test invalid values raise with the offending field name."""
        with pytest.raises(ConfigValidationError) as exc_info:
            ParserConfig(**overrides)

        assert exc_info.value.field_name == field_name

    def test_unknown_encoding_suggests_alternatives(self):
        """Test encoding errors carry suggestions."""
        with pytest.raises(ConfigValidationError) as exc_info:
            ParserConfig(encoding="utf-99")

        assert "utf-8" in exc_info.value.suggestions

    def test_validation_error_is_config_error(self):
        """Test the exception hierarchy."""
        assert issubclass(ConfigValidationError, ConfigError)


class TestParserConfigOverride:
    """Test override."""

    def test_override_returns_new_config(self):
        """Test override leaves the original untouched."""
        config = ParserConfig()

        updated = config.override(json_indent=4, root_tag="response")

        assert updated.json_indent == 4
        assert updated.root_tag == "response"
        assert config.json_indent == 2

    def test_override_validates(self):
        """Test overridden values are validated."""
        with pytest.raises(ConfigValidationError):
            ParserConfig().override(output_format="csv")

    def test_override_rejects_unknown_fields(self):
        """Test unknown fields list the known ones as suggestions."""
        with pytest.raises(ConfigValidationError) as exc_info:
            ParserConfig().override(indent=4)

        assert exc_info.value.field_name == "indent"
        assert "json_indent" in exc_info.value.suggestions


class TestParserConfigSerialization:
    """Test dictionary, JSON and file loading."""

    def test_dict_round_trip(self):
        """Test to_dict and from_dict are inverses."""
        config = ParserConfig(json_indent=0, correlation_id="req-1")

        assert ParserConfig.from_dict(config.to_dict()) == config

    def test_json_round_trip(self):
        """Test to_json and from_json are inverses."""
        config = ParserConfig.verbose()

        assert ParserConfig.from_json(config.to_json()) == config

    def test_partial_dict_uses_defaults(self):
        """Test missing keys fall back to defaults."""
        config = ParserConfig.from_dict({"output_format": "text"})

        assert config.output_format == "text"
        assert config.json_indent == 2

    def test_from_dict_unknown_key(self):
        """Test unknown keys are rejected."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration fields"):
            ParserConfig.from_dict({"strict_mode": True})

    def test_from_dict_wrong_type(self):
        """Test values of the wrong type raise a validation error."""
        with pytest.raises(ConfigValidationError):
            ParserConfig.from_dict({"json_indent": "2"})

    def test_from_dict_requires_mapping(self):
        """Test non-object data is rejected."""
        with pytest.raises(ConfigValidationError, match="must be an object"):
            ParserConfig.from_dict(["json"])

    def test_from_json_invalid(self):
        """Test malformed JSON raises a validation error."""
        with pytest.raises(ConfigValidationError, match="Invalid configuration JSON"):
            ParserConfig.from_json("{not json")

    def test_from_file(self):
        """Test loading configuration from a JSON file."""
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "config.json"
            path.write_text(json.dumps({"root_tag": "reply", "json_indent": 4}))

            config = ParserConfig.from_file(path)

        assert config.root_tag == "reply"
        assert config.json_indent == 4

    def test_from_missing_file(self):
        """Test a missing file raises ConfigError."""
        with pytest.raises(ConfigError, match="Could not read config file"):
            ParserConfig.from_file("/nonexistent/config.json")
