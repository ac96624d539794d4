"""Public API for fuzzy XML parsing.

Provides the ``FuzzyXMLParser`` class, the never-fail module-level parse
functions, and adapters rendering parsed nodes to JSON, text and XML trees.
"""

from .adapters import (
    ElementTreeAdapter,
    LxmlAdapter,
    from_json,
    to_json,
    to_text,
    to_xml,
)
from .parser import FuzzyXMLParser, parse, parse_file, parse_string

__all__ = [
    "FuzzyXMLParser",
    "parse",
    "parse_file",
    "parse_string",
    "ElementTreeAdapter",
    "LxmlAdapter",
    "from_json",
    "to_json",
    "to_text",
    "to_xml",
]
