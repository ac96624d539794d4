"""Core parser API for fuzzy XML parsing.

Two levels are offered. ``FuzzyXMLParser`` binds one input text and returns the
bare node list. The module-level ``parse``, ``parse_string`` and ``parse_file``
functions accept strings, bytes, paths and file-like objects and wrap the nodes
in a ``ParseResult`` with diagnostics and timing; they never raise.
"""

import time
from pathlib import Path
from typing import BinaryIO, List, Optional, TextIO, Union

from fuzzy_xml.scanning import Scanner, TagReader
from fuzzy_xml.shared import (
    DiagnosticSeverity,
    ParserConfig,
    get_logger,
)
from fuzzy_xml.tree import NodeBuilder, ParsedNode, ParseResult, RecoveryEvent

# Type definitions for input data
InputType = Union[str, bytes, BinaryIO, TextIO, Path]

MS_PER_SECOND = 1000  # Milliseconds per second conversion


class FuzzyXMLParser:
    """Lenient parser bound to a single input text.

    Examples:
        >>> parser = FuzzyXMLParser("<a>hello<b>world</b></a>")
        >>> [node.tag_name for node in parser.parse()]
        ['a']

        Truncated input is closed implicitly:
        >>> FuzzyXMLParser("<a>partial").parse()[0].content
        'partial'
    """

    def __init__(
        self,
        text: str,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the parser.

        Args:
            text: Input text to parse
            config: Parser configuration (defaults to ParserConfig())
            correlation_id: Optional correlation ID for request tracking
        """
        self.text = text
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id

        self._scanner = Scanner(text)
        self._builder = NodeBuilder(
            self._scanner,
            TagReader(self._scanner),
            correlation_id=self.correlation_id,
            log_recoveries=self.config.log_recoveries,
        )
        self._nodes: Optional[List[ParsedNode]] = None

    def parse(self) -> List[ParsedNode]:
        """Parse the bound text into top-level nodes.

        Repeated calls return the nodes of the first parse.
        """
        if self._nodes is None:
            self._nodes = self._builder.parse()
        return list(self._nodes)

    @property
    def recoveries(self) -> List[RecoveryEvent]:
        """Recovery events recorded by the last parse."""
        return list(self._builder.recoveries)


def parse(
    input_data: InputType,
    correlation_id: Optional[str] = None,
    config: Optional[ParserConfig] = None
) -> ParseResult:
    """Parse text from various input sources with automatic type detection.

    Args:
        input_data: Text as string, bytes, file-like object, or Path
        correlation_id: Optional correlation ID for request tracking
        config: Parser configuration (defaults to ParserConfig())

    Returns:
        ParseResult containing the parsed nodes and metadata

    Examples:
        >>> result = parse("Intro <findings>All good</findings>")
        >>> [node.tag_name for node in result.nodes]
        [None, 'findings']
    """
    config = config or ParserConfig()
    correlation_id = correlation_id or config.correlation_id
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse")

    logger.info(
        "Starting universal parse operation",
        extra={"input_type": type(input_data).__name__}
    )

    try:
        if isinstance(input_data, str):
            return _parse_text(input_data, correlation_id, config)
        if isinstance(input_data, bytes):
            return _parse_text(
                input_data.decode(config.encoding, errors="replace"),
                correlation_id,
                config,
            )
        if isinstance(input_data, Path):
            return parse_file(input_data, correlation_id=correlation_id, config=config)
        if hasattr(input_data, "read"):
            return _parse_file_like_object(input_data, correlation_id, config)

        logger.warning(
            "Unknown input type converted to string",
            extra={"original_type": type(input_data).__name__}
        )
        return _parse_text(str(input_data), correlation_id, config)

    except Exception as e:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        logger.exception(
            "Parse operation failed",
            extra={"processing_time_ms": processing_time}
        )
        return _create_error_result(
            f"Parse operation failed: {e}", correlation_id, processing_time
        )


def parse_string(
    text: str,
    correlation_id: Optional[str] = None,
    config: Optional[ParserConfig] = None
) -> ParseResult:
    """Parse text from a string.

    Args:
        text: Input text
        correlation_id: Optional correlation ID for request tracking
        config: Parser configuration (defaults to ParserConfig())

    Returns:
        ParseResult containing the parsed nodes and metadata
    """
    config = config or ParserConfig()
    correlation_id = correlation_id or config.correlation_id
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse_string")

    try:
        return _parse_text(text, correlation_id, config)

    except Exception as e:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        logger.exception(
            "String parse operation failed",
            extra={"processing_time_ms": processing_time}
        )
        return _create_error_result(
            f"String parse failed: {e}", correlation_id, processing_time
        )


def parse_file(
    file_path: Union[str, Path],
    encoding: Optional[str] = None,
    correlation_id: Optional[str] = None,
    config: Optional[ParserConfig] = None
) -> ParseResult:
    """Parse text from a file.

    Args:
        file_path: Path to the file (string or Path object)
        encoding: Encoding override (defaults to config.encoding)
        correlation_id: Optional correlation ID for request tracking
        config: Parser configuration (defaults to ParserConfig())

    Returns:
        ParseResult containing the parsed nodes and metadata; a missing or
        unreadable file gives ``success=False`` with a CRITICAL diagnostic

    Examples:
        >>> result = parse_file("missing.txt")
        >>> result.success
        False
    """
    config = config or ParserConfig()
    correlation_id = correlation_id or config.correlation_id
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse_file")

    path_obj = Path(file_path)
    encoding = encoding or config.encoding

    logger.info(
        "Starting file parse operation",
        extra={"file_path": str(path_obj), "encoding": encoding}
    )

    try:
        error_message = None
        if not path_obj.exists():
            error_message = f"File not found: {path_obj}"
        elif not path_obj.is_file():
            error_message = f"Path is not a file: {path_obj}"

        if error_message:
            processing_time = (time.time() - start_time) * MS_PER_SECOND
            return _create_error_result(error_message, correlation_id, processing_time)

        with path_obj.open(encoding=encoding, errors="replace") as file:
            content = file.read()

    except PermissionError:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        return _create_error_result(
            f"Permission denied accessing file: {path_obj}",
            correlation_id,
            processing_time
        )
    except Exception as e:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        logger.exception("File read failed", extra={"file_path": str(path_obj)})
        return _create_error_result(
            f"File read failed: {e}", correlation_id, processing_time
        )

    result = parse_string(content, correlation_id, config)
    result.add_diagnostic(
        DiagnosticSeverity.INFO,
        f"File parsed with encoding: {encoding}",
        "file_parser",
        details={"file_path": str(path_obj), "encoding": encoding}
    )
    return result


def _parse_text(
    text: str, correlation_id: Optional[str], config: ParserConfig
) -> ParseResult:
    """Parse text and assemble a ParseResult.

    Args:
        text: Input text
        correlation_id: Optional correlation ID for request tracking
        config: Parser configuration

    Returns:
        ParseResult with nodes, recoveries, diagnostics and metrics
    """
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse_text")

    preview = text[:config.preview_length]
    logger.info(
        "Starting text parse operation",
        extra={
            "content_length": len(text),
            "preview": preview + "..." if len(text) > len(preview) else preview,
        }
    )

    parser = FuzzyXMLParser(text, config=config, correlation_id=correlation_id)
    nodes = parser.parse()
    recoveries = parser.recoveries

    result = ParseResult(
        nodes=nodes,
        recoveries=recoveries,
        correlation_id=correlation_id,
    )

    if config.enable_diagnostics:
        for event in recoveries:
            result.add_diagnostic(
                DiagnosticSeverity.WARNING,
                event.message,
                "node_builder",
                position=event.position,
                details={"recovery": event.kind.name, "tag_name": event.tag_name}
            )

    processing_time = (time.time() - start_time) * MS_PER_SECOND
    result.performance.processing_time_ms = processing_time
    result.performance.characters_processed = len(text)
    result.performance.nodes_produced = result.node_count
    result.performance.recovery_operations = len(recoveries)

    logger.info(
        "Text parsing completed",
        extra={
            "node_count": result.performance.nodes_produced,
            "recovery_count": len(recoveries),
            "processing_time_ms": processing_time,
        }
    )

    return result


def _parse_file_like_object(
    file_obj: Union[BinaryIO, TextIO],
    correlation_id: Optional[str],
    config: ParserConfig
) -> ParseResult:
    """Read a file-like object and parse its content."""
    content = file_obj.read()
    if isinstance(content, bytes):
        content = content.decode(config.encoding, errors="replace")
    return _parse_text(content, correlation_id, config)


def _create_error_result(
    error_message: str,
    correlation_id: Optional[str],
    processing_time: float
) -> ParseResult:
    """Create error result following never-fail philosophy.

    Args:
        error_message: Error description
        correlation_id: Optional correlation ID
        processing_time: Processing time in milliseconds

    Returns:
        ParseResult with no nodes and a CRITICAL diagnostic
    """
    result = ParseResult(success=False, correlation_id=correlation_id)
    result.performance.processing_time_ms = processing_time
    result.add_diagnostic(
        DiagnosticSeverity.CRITICAL,
        error_message,
        "api_parser"
    )
    return result
