"""Test module for fuzzy_xml package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import fuzzy_xml

    # Assert
    assert fuzzy_xml is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import fuzzy_xml

    # Assert
    assert isinstance(fuzzy_xml.__version__, str)
    assert fuzzy_xml.__version__ == "0.1.0"


def test_package_has_author() -> None:
    """Test that the package has an author attribute."""
    # Arrange & Act
    import fuzzy_xml

    # Assert
    assert fuzzy_xml.__author__ == "Fuzzy XML Parser Team"


def test_package_exports_public_api() -> None:
    """Test that __all__ names resolve to package attributes."""
    # Arrange & Act
    import fuzzy_xml

    # Assert
    for name in ["parse", "parse_string", "parse_file", "FuzzyXMLParser",
                 "ParsedNode", "ParseResult", "ParserConfig"]:
        assert name in fuzzy_xml.__all__
    for name in fuzzy_xml.__all__:
        assert hasattr(fuzzy_xml, name)
