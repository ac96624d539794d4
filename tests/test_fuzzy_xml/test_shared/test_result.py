"""Tests for diagnostic and performance result types."""

import pytest

from fuzzy_xml.shared import DiagnosticEntry, DiagnosticSeverity, PerformanceMetrics


class TestDiagnosticEntry:
    """Test DiagnosticEntry functionality."""

    def test_creation(self):
        """Test basic diagnostic entry creation."""
        entry = DiagnosticEntry(
            severity=DiagnosticSeverity.WARNING,
            message="Unterminated tag skipped",
            component="node_builder",
            position=4,
        )

        assert entry.severity == DiagnosticSeverity.WARNING
        assert entry.position == 4
        assert entry.timestamp > 0

    def test_empty_message_rejected(self):
        """Test validation of the message field."""
        with pytest.raises(ValueError, match="message cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "", "api_parser")

    def test_empty_component_rejected(self):
        """Test validation of the component field."""
        with pytest.raises(ValueError, match="component cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "message", "")

    def test_to_dict_omits_missing_fields(self):
        """Test optional fields are only serialized when set."""
        entry = DiagnosticEntry(DiagnosticSeverity.CRITICAL, "File not found", "api_parser")

        assert entry.to_dict() == {
            "severity": "CRITICAL",
            "message": "File not found",
            "component": "api_parser",
        }

    def test_to_dict_includes_position_and_details(self):
        """Test position and details appear when present."""
        entry = DiagnosticEntry(
            DiagnosticSeverity.WARNING,
            "Element closed at end of input: <a>",
            "node_builder",
            position=0,
            details={"recovery": "IMPLICIT_CLOSE"},
        )

        data = entry.to_dict()

        assert data["position"] == 0
        assert data["details"] == {"recovery": "IMPLICIT_CLOSE"}


class TestPerformanceMetrics:
    """Test PerformanceMetrics functionality."""

    def test_characters_per_second(self):
        """Test throughput calculation."""
        metrics = PerformanceMetrics(processing_time_ms=500.0, characters_processed=1000)

        assert metrics.characters_per_second == 2000.0

    def test_characters_per_second_with_zero_time(self):
        """Test throughput is zero when no time was measured."""
        assert PerformanceMetrics(characters_processed=10).characters_per_second == 0.0

    def test_to_dict(self):
        """Test metrics serialization."""
        metrics = PerformanceMetrics(nodes_produced=3, recovery_operations=1)

        assert metrics.to_dict() == {
            "processing_time_ms": 0.0,
            "characters_processed": 0,
            "nodes_produced": 3,
            "recovery_operations": 1,
        }
