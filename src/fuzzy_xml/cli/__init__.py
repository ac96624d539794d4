"""Command-line interface module for the fuzzy XML parser.

This module provides the ``fuzzy-xml`` tool for printing parsed trees and
reporting recovery decisions on XML-like text files.
"""

from .main import main

__all__ = ["main"]
