"""Core tree building for fuzzy XML parsing.

This module turns a scanner over raw text into a list of ``ParsedNode`` values
in a single pass. Malformed markup is never an error: unterminated tags are
skipped, stray end tags become nested elements, and elements left open at end
of input are closed implicitly. Each such decision is recorded as a
``RecoveryEvent`` without affecting the tree that is built.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, ClassVar, Dict, Iterator, List, Optional

from fuzzy_xml.scanning import Scanner, TagRead, TagReader
from fuzzy_xml.scanning.tags import TAG_OPEN
from fuzzy_xml.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
    get_logger,
)

from .node import ParsedNode


class RecoveryKind(Enum):
    """Recovery policies applied to malformed input."""

    UNTERMINATED_TAG = auto()      # '<' with no '>' before end of input, skipped
    END_TAG_AS_ELEMENT = auto()    # End tag that closes nothing, read as an element
    IMPLICIT_CLOSE = auto()        # Element closed by end of input
    UNTERMINATED_END_TAG = auto()  # Matching end tag missing its '>'
    EMPTY_TAG_NAME = auto()        # '<>' or '</>' accepted with an empty name


_RECOVERY_MESSAGES = {
    RecoveryKind.UNTERMINATED_TAG: "Unterminated tag skipped",
    RecoveryKind.END_TAG_AS_ELEMENT: "Unmatched end tag read as element",
    RecoveryKind.IMPLICIT_CLOSE: "Element closed at end of input",
    RecoveryKind.UNTERMINATED_END_TAG: "End tag missing '>' closed its element",
    RecoveryKind.EMPTY_TAG_NAME: "Tag with empty name accepted",
}


@dataclass(frozen=True)
class RecoveryEvent:
    """A single recovery decision made while building the tree."""

    kind: RecoveryKind
    position: int
    tag_name: Optional[str] = None

    @property
    def message(self) -> str:
        """Human-readable description of the event."""
        base = _RECOVERY_MESSAGES[self.kind]
        if self.tag_name:
            return f"{base}: <{self.tag_name}>"
        return base


@dataclass(frozen=True)
class NodeOutcome:
    """Result of one ``parse_node`` step: a node, or SKIP.

    SKIP tells the caller that nothing could be formed at the cursor and that
    it must advance one character to make progress.
    """

    node: Optional[ParsedNode] = None

    SKIP: ClassVar["NodeOutcome"]

    @classmethod
    def of(cls, node: ParsedNode) -> "NodeOutcome":
        """Wrap a built node."""
        return cls(node=node)

    @property
    def is_skip(self) -> bool:
        """Check whether this outcome carries no node."""
        return self.node is None


NodeOutcome.SKIP = NodeOutcome()


class _OpenElement:
    """Mutable frame for an element whose body is still being scanned."""

    __slots__ = ("tag", "content", "children")

    def __init__(self, tag: TagRead) -> None:
        self.tag = tag
        self.content: List[str] = []
        self.children: List[ParsedNode] = []

    def close(self) -> ParsedNode:
        return ParsedNode(
            tag_name=self.tag.name,
            content="".join(self.content).strip(),
            children=tuple(self.children),
        )


class NodeBuilder:
    """Builds ``ParsedNode`` trees from a scanner.

    Nested element bodies are tracked on an explicit stack of open elements,
    so nesting depth is limited by memory rather than the interpreter's
    recursion limit.

    Attributes:
        scanner: Shared read cursor
        tags: Tag reader over the same scanner
        recoveries: Recovery events recorded so far, in input order
    """

    def __init__(
        self,
        scanner: Scanner,
        tag_reader: Optional[TagReader] = None,
        correlation_id: Optional[str] = None,
        log_recoveries: bool = False
    ) -> None:
        """Initialize the node builder.

        Args:
            scanner: Scanner positioned where parsing should start
            tag_reader: Tag reader sharing ``scanner`` (created if omitted)
            correlation_id: Optional correlation ID for request tracking
            log_recoveries: Log each recovery event at DEBUG level
        """
        self.scanner = scanner
        self.tags = tag_reader or TagReader(scanner)
        self.recoveries: List[RecoveryEvent] = []
        self.log_recoveries = log_recoveries
        self.logger = get_logger(__name__, correlation_id, "node_builder")

    def parse(self) -> List[ParsedNode]:
        """Parse from the cursor to end of input into top-level nodes."""
        nodes: List[ParsedNode] = []
        while not self.scanner.at_end:
            outcome = self.parse_node()
            if outcome.is_skip:
                self.scanner.advance()
            else:
                nodes.append(outcome.node)
        return nodes

    def parse_node(self) -> NodeOutcome:
        """Parse one top-level node: a text run or a complete element."""
        scanner = self.scanner
        scanner.skip_whitespace()

        if scanner.peek() == TAG_OPEN:
            tag = self._open_tag()
            if tag is not None:
                return NodeOutcome.of(self._build_element(tag))

        # Plain text, or a '<' that could not start a tag. After a failed tag
        # read the cursor is back on that '<', so this text is empty.
        text = scanner.read_until(TAG_OPEN).strip()
        if text:
            return NodeOutcome.of(ParsedNode.text(text))
        return NodeOutcome.SKIP

    def _build_element(self, tag: TagRead) -> ParsedNode:
        scanner = self.scanner
        stack = [_OpenElement(tag)]

        while not scanner.at_end:
            current = stack[-1]

            if self.tags.match_tag_name(current.tag.name):
                end_position = scanner.position
                if self.tags.read_tag() is None:
                    self._record(
                        RecoveryKind.UNTERMINATED_END_TAG,
                        end_position,
                        current.tag.name,
                    )
                closed = stack.pop().close()
                if not stack:
                    return closed
                stack[-1].children.append(closed)

            elif scanner.peek() == TAG_OPEN:
                child_tag = self._open_tag()
                if child_tag is None:
                    scanner.advance()
                else:
                    stack.append(_OpenElement(child_tag))

            else:
                current.content.append(scanner.read_until(TAG_OPEN))

        # End of input: close the innermost elements first
        while True:
            frame = stack.pop()
            self._record(RecoveryKind.IMPLICIT_CLOSE, frame.tag.start, frame.tag.name)
            closed = frame.close()
            if not stack:
                return closed
            stack[-1].children.append(closed)

    def _open_tag(self) -> Optional[TagRead]:
        position = self.scanner.position
        tag = self.tags.read_tag()
        if tag is None:
            self._record(RecoveryKind.UNTERMINATED_TAG, position)
            return None
        if tag.closing:
            self._record(RecoveryKind.END_TAG_AS_ELEMENT, tag.start, tag.name)
        if not tag.name:
            self._record(RecoveryKind.EMPTY_TAG_NAME, tag.start)
        return tag

    def _record(
        self, kind: RecoveryKind, position: int, tag_name: Optional[str] = None
    ) -> None:
        event = RecoveryEvent(kind=kind, position=position, tag_name=tag_name)
        self.recoveries.append(event)
        if self.log_recoveries:
            self.logger.debug(
                event.message,
                extra={"recovery": kind.name, "position": position},
            )


@dataclass
class ParseResult:
    """Result object for a parse operation.

    Contains the parsed nodes, recovery events, diagnostics and performance
    information. ``success`` is False only when the input could not be
    obtained at all; malformed markup still yields a successful result.
    """

    nodes: List[ParsedNode] = field(default_factory=list)
    success: bool = True

    # Metadata and diagnostics
    recoveries: List[RecoveryEvent] = field(default_factory=list)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    correlation_id: Optional[str] = None

    def iter_nodes(self) -> Iterator[ParsedNode]:
        """Iterate over every node in document order."""
        for node in self.nodes:
            yield from node.iter_nodes()

    @property
    def node_count(self) -> int:
        """Get total number of nodes, nested ones included."""
        return sum(1 for _ in self.iter_nodes())

    @property
    def tagged_count(self) -> int:
        """Get number of tagged nodes."""
        return sum(1 for node in self.iter_nodes() if not node.is_text)

    @property
    def text_count(self) -> int:
        """Get number of plain text nodes."""
        return sum(1 for node in self.iter_nodes() if node.is_text)

    @property
    def max_depth(self) -> int:
        """Get nesting depth of the tree (top-level nodes are depth 1)."""
        deepest = 0
        stack = [(node, 1) for node in self.nodes]
        while stack:
            node, depth = stack.pop()
            deepest = max(deepest, depth)
            stack.extend((child, depth + 1) for child in node.children)
        return deepest

    @property
    def recovery_count(self) -> int:
        """Get number of recovery decisions made."""
        return len(self.recoveries)

    @property
    def has_recoveries(self) -> bool:
        """Check if any malformed markup was recovered."""
        return bool(self.recoveries)

    @property
    def is_well_formed(self) -> bool:
        """Check if every element was closed by its own end tag with no recovery."""
        return self.success and not self.recoveries

    def find(self, tag_name: str) -> Optional[ParsedNode]:
        """Find first node with matching tag name anywhere in the result."""
        return next(
            (node for node in self.iter_nodes() if node.tag_name == tag_name),
            None,
        )

    def find_all(self, tag_name: str) -> List[ParsedNode]:
        """Find all nodes with matching tag name anywhere in the result."""
        return [node for node in self.iter_nodes() if node.tag_name == tag_name]

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        entry = DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            position=position,
            details=details,
            correlation_id=self.correlation_id
        )
        self.diagnostics.append(entry)

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def to_dict(self) -> List[Dict[str, Any]]:
        """Convert the parsed nodes to their dictionary form."""
        return [node.to_dict() for node in self.nodes]

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the parse result."""
        recoveries_by_kind: Dict[str, int] = {}
        for event in self.recoveries:
            recoveries_by_kind[event.kind.name] = (
                recoveries_by_kind.get(event.kind.name, 0) + 1
            )

        return {
            "success": self.success,
            "well_formed": self.is_well_formed,
            "node_count": self.node_count,
            "tagged_count": self.tagged_count,
            "text_count": self.text_count,
            "max_depth": self.max_depth,
            "recovery_count": self.recovery_count,
            "recoveries_by_kind": recoveries_by_kind,
            "diagnostic_count": len(self.diagnostics),
            "has_errors": self.has_errors(),
            "performance": self.performance.to_dict(),
        }
