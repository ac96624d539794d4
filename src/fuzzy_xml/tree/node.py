"""The node type produced by fuzzy XML parsing.

Trees can be nested arbitrarily deep, so every operation that walks a tree
(comparison, hashing, repr, traversal, dictionary conversion) uses an explicit
stack instead of recursion.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

# Field names used by the dictionary/JSON form
TAG_NAME_KEY = "tagName"
CONTENT_KEY = "content"
CHILDREN_KEY = "children"

_EXHAUSTED = object()


@dataclass(frozen=True, eq=False, repr=False)
class ParsedNode:
    """One element of the parsed tree.

    A node is either tagged (``tag_name`` is a string, possibly empty) or a
    plain text leaf (``tag_name`` is None). ``content`` holds the node's own
    trimmed text; ``children`` holds nested tagged nodes in document order.
    Nodes compare and hash by structure.
    """

    tag_name: Optional[str] = None
    content: str = ""
    children: Tuple["ParsedNode", ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate node invariants."""
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))
        if self.tag_name is None and self.children:
            raise ValueError("Text nodes cannot have children")
        if "<" in self.content:
            raise ValueError("Node content cannot contain '<'")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParsedNode):
            return NotImplemented
        pairs = [(self, other)]
        while pairs:
            left, right = pairs.pop()
            if left is right:
                continue
            if (left.tag_name != right.tag_name
                    or left.content != right.content
                    or len(left.children) != len(right.children)):
                return False
            pairs.extend(zip(left.children, right.children))
        return True

    def __hash__(self) -> int:
        # Pre-order (name, content, child count) triples identify the tree
        return hash(tuple(
            (node.tag_name, node.content, len(node.children))
            for node in self.iter_nodes()
        ))

    def __repr__(self) -> str:
        parts: List[str] = []
        pending: List[Union[str, ParsedNode]] = [self]
        while pending:
            item = pending.pop()
            if isinstance(item, str):
                parts.append(item)
                continue
            parts.append(
                f"ParsedNode(tag_name={item.tag_name!r}, "
                f"content={item.content!r}, children=("
            )
            pending.append(",))" if len(item.children) == 1 else "))")
            for index in range(len(item.children) - 1, -1, -1):
                pending.append(item.children[index])
                if index:
                    pending.append(", ")
        return "".join(parts)

    @classmethod
    def text(cls, content: str) -> "ParsedNode":
        """Create a plain text node."""
        return cls(tag_name=None, content=content)

    @property
    def is_text(self) -> bool:
        """Check if this is a plain text node."""
        return self.tag_name is None

    @property
    def full_text(self) -> str:
        """Get this node's content followed by all descendant content."""
        parts = [node.content for node in self.iter_nodes() if node.content]
        return " ".join(parts)

    def iter_nodes(self) -> Iterator["ParsedNode"]:
        """Iterate over this node and its descendants in document order."""
        stack: List[ParsedNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find(self, tag_name: str) -> Optional["ParsedNode"]:
        """Find the first descendant with a matching tag name."""
        return next(
            (node for node in self.iter_nodes()
             if node is not self and node.tag_name == tag_name),
            None,
        )

    def find_all(self, tag_name: str) -> List["ParsedNode"]:
        """Find all descendants with a matching tag name."""
        return [
            node for node in self.iter_nodes()
            if node is not self and node.tag_name == tag_name
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Convert the node to a dictionary; ``tagName`` is omitted for text nodes."""
        root = self._fields_dict()
        stack = [(self, root)]
        while stack:
            node, data = stack.pop()
            for child in node.children:
                child_data = child._fields_dict()
                data[CHILDREN_KEY].append(child_data)
                stack.append((child, child_data))
        return root

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParsedNode":
        """Rebuild a node from the output of ``to_dict``.

        Raises:
            ValueError: If the data is not a node mapping or breaks node
                invariants
        """
        # Frames of (mapping, built children, iterator over child mappings)
        stack = [(data, [], iter(_child_mappings(data)))]
        while True:
            mapping, children, pending = stack[-1]
            child = next(pending, _EXHAUSTED)
            if child is not _EXHAUSTED:
                stack.append((child, [], iter(_child_mappings(child))))
                continue

            stack.pop()
            node = cls._from_fields(mapping, children)
            if not stack:
                return node
            stack[-1][1].append(node)

    def _fields_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.tag_name is not None:
            result[TAG_NAME_KEY] = self.tag_name
        result[CONTENT_KEY] = self.content
        result[CHILDREN_KEY] = []
        return result

    @classmethod
    def _from_fields(
        cls, data: Dict[str, Any], children: List["ParsedNode"]
    ) -> "ParsedNode":
        tag_name = data.get(TAG_NAME_KEY)
        content = data.get(CONTENT_KEY, "")
        if tag_name is not None and not isinstance(tag_name, str):
            raise ValueError(f"{TAG_NAME_KEY} must be a string")
        if not isinstance(content, str):
            raise ValueError(f"{CONTENT_KEY} must be a string")
        return cls(tag_name=tag_name, content=content, children=tuple(children))


def _child_mappings(data: Any) -> List[Any]:
    if not isinstance(data, dict):
        raise ValueError(f"Expected a node mapping, got {type(data).__name__}")
    children = data.get(CHILDREN_KEY, [])
    if not isinstance(children, list):
        raise ValueError(f"{CHILDREN_KEY} must be a list")
    return children
