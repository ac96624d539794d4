"""Scanning layer for fuzzy XML parsing.

Key Components:
    Scanner: Read cursor with peek, read-until, whitespace skipping and
        checkpoint/restore primitives
    TagReader: Speculative tag reading with full rollback on failure
"""

from .scanner import END_OF_INPUT, Scanner
from .tags import TagRead, TagReader, is_name_char

__all__ = [
    "END_OF_INPUT",
    "Scanner",
    "TagRead",
    "TagReader",
    "is_name_char",
]
