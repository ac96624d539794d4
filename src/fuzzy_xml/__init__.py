"""Fuzzy XML Parser.

A never-fail parser that extracts a tree of tagged and untagged text segments
from XML-like free-form text such as large-language-model output, recovering
from unescaped characters, unmatched tags, stray angle brackets and truncated
input.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file()
- Level 2: Bound parser - FuzzyXMLParser(text).parse()
"""

__version__ = "0.1.0"
__author__ = "Fuzzy XML Parser Team"

# Progressive API disclosure - Level 1: Simple functions
# Progressive API disclosure - Level 2: Bound parser
from .api import FuzzyXMLParser, parse, parse_file, parse_string

# Configuration for advanced usage
from .shared.config import ParserConfig

# Core result objects for all API levels
from .tree import ParsedNode, ParseResult, RecoveryEvent, RecoveryKind

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_string",
    "parse_file",

    # Level 2: Bound parser class
    "FuzzyXMLParser",

    # Result objects and data structures
    "ParsedNode",
    "ParseResult",
    "RecoveryEvent",
    "RecoveryKind",

    # Configuration
    "ParserConfig",
]
