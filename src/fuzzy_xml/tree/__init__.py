"""Tree building engine for fuzzy XML parsing.

Key Components:
    ParsedNode: Immutable tagged or text node with nested children
    NodeBuilder: Single-pass builder turning a scanner into nodes
    NodeOutcome: Tagged result of one build step (a node or SKIP)
    RecoveryEvent: Record of one recovery decision on malformed input
    ParseResult: Nodes plus recoveries, diagnostics and metrics
"""

from .builder import (
    NodeBuilder,
    NodeOutcome,
    ParseResult,
    RecoveryEvent,
    RecoveryKind,
)
from .node import ParsedNode

__all__ = [
    "NodeBuilder",
    "NodeOutcome",
    "ParseResult",
    "ParsedNode",
    "RecoveryEvent",
    "RecoveryKind",
]
