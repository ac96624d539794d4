"""Configuration for fuzzy XML parsing.

The parsing algorithm itself has no knobs: it always produces the same tree for
the same text. Configuration covers what surrounds it, namely diagnostics,
logging, input decoding and output rendering.
"""

import codecs
import json
import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_OUTPUT_FORMATS = ["json", "text", "xml"]

_ROOT_TAG_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Immutable configuration shared by the API, adapters and CLI.

    Attributes:
        enable_diagnostics: Turn recovery events into result diagnostics
        log_recoveries: Log every recovery event at DEBUG level
        logging_level: Level used when the CLI configures logging
        output_format: Default rendering for the CLI (json, text, xml)
        json_indent: Indentation for JSON output
        preview_length: Max characters of input echoed into log records
        encoding: Codec used to decode bytes and files
        root_tag: Element name wrapping top-level nodes in XML output
        correlation_id: Default correlation ID for request tracking
    """

    enable_diagnostics: bool = True
    log_recoveries: bool = False
    logging_level: str = "WARNING"
    output_format: str = "json"
    json_indent: int = 2
    preview_length: int = 100
    encoding: str = "utf-8"
    root_tag: str = "document"
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {VALID_LOGGING_LEVELS}",
                field_name="logging_level",
            )
        if self.output_format not in VALID_OUTPUT_FORMATS:
            raise ConfigValidationError(
                f"output_format must be one of {VALID_OUTPUT_FORMATS}",
                field_name="output_format",
            )
        if self.json_indent < 0:
            raise ConfigValidationError(
                "json_indent must be >= 0", field_name="json_indent"
            )
        if self.preview_length <= 0:
            raise ConfigValidationError(
                "preview_length must be > 0", field_name="preview_length"
            )
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ConfigValidationError(
                f"Unknown encoding: {self.encoding}",
                field_name="encoding",
                suggestions=["utf-8", "latin-1"],
            ) from e
        if not _ROOT_TAG_PATTERN.match(self.root_tag):
            raise ConfigValidationError(
                "root_tag must be a non-empty XML name made of letters, digits "
                "and underscores",
                field_name="root_tag",
            )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ParserConfig().override(json_indent=4)
            >>> config.json_indent
            4
        """
        self._check_field_names(kwargs)
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Raises:
            ConfigValidationError: If the dictionary contains unknown keys or
                invalid values
        """
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration data must be an object")
        cls._check_field_names(data)
        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigValidationError(f"Invalid configuration value: {e}") from e

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "ParserConfig":
        """Load configuration from a JSON file."""
        path = Path(config_path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read config file {path}: {e}") from e
        return cls.from_json(content)

    @classmethod
    def _check_field_names(cls, data: Dict[str, Any]) -> None:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=sorted(known),
            )

    # Preset factory methods
    @classmethod
    def quiet(cls) -> "ParserConfig":
        """Preset that drops diagnostics and only logs errors."""
        return cls(enable_diagnostics=False, logging_level="ERROR")

    @classmethod
    def verbose(cls) -> "ParserConfig":
        """Preset that logs every recovery decision."""
        return cls(log_recoveries=True, logging_level="DEBUG")
