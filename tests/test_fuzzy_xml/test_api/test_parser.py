"""Tests for the parser class and the never-fail parse functions."""

import io
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from fuzzy_xml import FuzzyXMLParser, ParsedNode, ParserConfig, parse, parse_file, parse_string
from fuzzy_xml.shared import DiagnosticSeverity
from fuzzy_xml.tree import RecoveryKind


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as directory:
        yield Path(directory)


class TestFuzzyXMLParser:
    """Test the parser class bound to one input."""

    def test_parse_returns_nodes(self):
        """Test the example from the class docstring."""
        parser = FuzzyXMLParser("<a>hello<b>world</b></a>")

        nodes = parser.parse()

        assert nodes == [
            ParsedNode(
                tag_name="a",
                content="hello",
                children=(ParsedNode(tag_name="b", content="world"),),
            )
        ]

    def test_repeated_parse_returns_same_nodes(self):
        """Test parsing twice does not rescan or lose nodes."""
        parser = FuzzyXMLParser("a < b")

        first = parser.parse()
        first.clear()
        second = parser.parse()

        assert [node.content for node in second] == ["a", "b"]
        assert len(parser.recoveries) == 1

    def test_recoveries(self):
        """Test recovery events are exposed after parsing."""
        parser = FuzzyXMLParser("<a>partial")
        parser.parse()

        assert [event.kind for event in parser.recoveries] == [RecoveryKind.IMPLICIT_CLOSE]

    def test_correlation_id_from_config(self):
        """Test the config's correlation ID is used when none is given."""
        parser = FuzzyXMLParser("x", config=ParserConfig(correlation_id="cfg-1"))

        assert parser.correlation_id == "cfg-1"
        assert FuzzyXMLParser("x", correlation_id="arg-1").correlation_id == "arg-1"


class TestParseFunction:
    """Test input type detection in parse()."""

    def test_parse_string_input(self):
        """Test parsing a well-formed string."""
        result = parse("<a>x</a>")

        assert result.success
        assert result.is_well_formed
        assert result.nodes == [ParsedNode(tag_name="a", content="x")]
        assert result.diagnostics == []
        assert result.performance.characters_processed == 8
        assert result.performance.nodes_produced == 1
        assert result.performance.processing_time_ms >= 0

    def test_parse_bytes_input(self):
        """Test bytes are decoded with the configured encoding."""
        result = parse("<a>café</a>".encode("utf-8"))

        assert result.nodes[0].content == "café"

    def test_parse_bytes_with_invalid_sequence(self):
        """Test undecodable bytes are replaced rather than failing."""
        result = parse(b"<a>\xff</a>")

        assert result.success
        assert result.nodes[0].content == "�"

    def test_parse_text_stream(self):
        """Test text file-like objects are read."""
        result = parse(io.StringIO("Intro <a>x</a>"))

        assert [node.tag_name for node in result.nodes] == [None, "a"]

    def test_parse_binary_stream(self):
        """Test binary file-like objects are read and decoded."""
        result = parse(io.BytesIO(b"<a>x</a>"))

        assert result.nodes == [ParsedNode(tag_name="a", content="x")]

    def test_parse_path(self, temp_dir):
        """Test Path objects are parsed as files."""
        path = temp_dir / "response.txt"
        path.write_text("<answer>42</answer>", encoding="utf-8")

        result = parse(path)

        assert result.find("answer").content == "42"

    def test_parse_unknown_type_is_converted_to_string(self):
        """Test other objects are parsed through str()."""
        result = parse(12345)

        assert result.nodes == [ParsedNode.text("12345")]

    def test_recoveries_become_warning_diagnostics(self):
        """Test each recovery event is reported as a WARNING diagnostic."""
        result = parse("<a>x < y")

        warnings = result.get_diagnostics_by_severity(DiagnosticSeverity.WARNING)
        assert len(warnings) == result.recovery_count == 2
        assert warnings[0].component == "node_builder"
        assert warnings[0].position == 5
        assert warnings[0].details == {"recovery": "UNTERMINATED_TAG", "tag_name": None}
        assert warnings[1].message == "Element closed at end of input: <a>"
        assert not result.has_errors()

    def test_quiet_config_keeps_recoveries_without_diagnostics(self):
        """Test disabling diagnostics leaves recoveries on the result."""
        result = parse("<a>x", config=ParserConfig.quiet())

        assert result.recovery_count == 1
        assert result.diagnostics == []

    def test_correlation_id_propagates(self):
        """Test the correlation ID reaches the result and its diagnostics."""
        result = parse("<a>x", correlation_id="req-9")

        assert result.correlation_id == "req-9"
        assert result.diagnostics[0].correlation_id == "req-9"

    def test_unexpected_error_returns_failed_result(self):
        """Test internal errors are converted into a failed result."""
        with patch("fuzzy_xml.api.parser.FuzzyXMLParser", side_effect=RuntimeError("boom")):
            result = parse("<a>x</a>")

        assert not result.success
        assert result.nodes == []
        assert result.diagnostics[0].severity == DiagnosticSeverity.CRITICAL
        assert result.diagnostics[0].message == "Parse operation failed: boom"


class TestParseString:
    """Test parse_string()."""

    def test_parse_string(self):
        """Test basic string parsing."""
        result = parse_string("Intro <a>x</a> outro")

        assert [node.content for node in result.nodes] == ["Intro", "x", "outro"]

    def test_empty_string(self):
        """Test empty input gives an empty successful result."""
        result = parse_string("")

        assert result.success
        assert result.nodes == []

    def test_unexpected_error_returns_failed_result(self):
        """Test parse_string never raises."""
        with patch("fuzzy_xml.api.parser.FuzzyXMLParser", side_effect=RuntimeError("boom")):
            result = parse_string("<a>x</a>")

        assert not result.success
        assert result.diagnostics[0].message == "String parse failed: boom"


class TestParseFile:
    """Test parse_file()."""

    def test_parse_file(self, temp_dir):
        """Test parsing a file adds an encoding diagnostic."""
        path = temp_dir / "response.txt"
        path.write_text("<a>x</a>", encoding="utf-8")

        result = parse_file(str(path))

        assert result.success
        assert result.nodes == [ParsedNode(tag_name="a", content="x")]
        info = result.get_diagnostics_by_severity(DiagnosticSeverity.INFO)
        assert info[0].message == "File parsed with encoding: utf-8"
        assert info[0].component == "file_parser"

    def test_encoding_override(self, temp_dir):
        """Test the encoding argument overrides the config."""
        path = temp_dir / "latin.txt"
        path.write_bytes(b"<a>caf\xe9</a>")

        result = parse_file(path, encoding="latin-1")

        assert result.nodes[0].content == "café"

    def test_config_encoding(self, temp_dir):
        """Test the config encoding is used by default."""
        path = temp_dir / "latin.txt"
        path.write_bytes(b"<a>caf\xe9</a>")

        result = parse_file(path, config=ParserConfig(encoding="latin-1"))

        assert result.nodes[0].content == "café"

    def test_missing_file(self, temp_dir):
        """Test a missing file gives a failed result."""
        result = parse_file(temp_dir / "missing.txt")

        assert not result.success
        assert result.has_errors()
        assert result.diagnostics[0].severity == DiagnosticSeverity.CRITICAL
        assert result.diagnostics[0].message.startswith("File not found")

    def test_directory_is_not_a_file(self, temp_dir):
        """Test a directory path gives a failed result."""
        result = parse_file(temp_dir)

        assert not result.success
        assert result.diagnostics[0].message.startswith("Path is not a file")

    def test_read_error(self, temp_dir):
        """Test unexpected read errors are reported, not raised."""
        path = temp_dir / "response.txt"
        path.write_text("<a>x</a>", encoding="utf-8")

        with patch.object(Path, "open", side_effect=OSError("disk gone")):
            result = parse_file(path)

        assert not result.success
        assert result.diagnostics[0].message == "File read failed: disk gone"
