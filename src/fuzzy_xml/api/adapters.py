"""Conversion of parsed nodes into display and XML library formats.

Parsed trees can be rendered as JSON (lossless), as an indented text outline,
or as element trees for ``xml.etree.ElementTree`` and, when installed, ``lxml``.
Top-level text nodes become the text and tails of a synthetic root element.
"""

import json
import re
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional

from fuzzy_xml.shared import dump_json, get_logger, load_json
from fuzzy_xml.tree import ParsedNode

# Placeholder prefix for tag names that are not valid XML names
INVALID_NAME_PREFIX = "_"
DEFAULT_ROOT_TAG = "document"

_XML_NAME_START = re.compile(r"^[A-Za-z_]")

# Characters outside the XML 1.0 Char production, e.g. C0 controls
_INVALID_XML_CHARS = re.compile(
    "[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)
INVALID_CHAR_REPLACEMENT = "\ufffd"


def to_json(nodes: Iterable[ParsedNode], indent: Optional[int] = 2) -> str:
    """Serialize nodes to a JSON array using ``tagName``/``content``/``children``."""
    return dump_json([node.to_dict() for node in nodes], indent=indent)


def from_json(json_str: str) -> List[ParsedNode]:
    """Rebuild nodes from the output of ``to_json``.

    Raises:
        ValueError: If the JSON is malformed or does not describe nodes
    """
    data = load_json(json_str)
    if not isinstance(data, list):
        raise ValueError("Expected a JSON array of nodes")
    return [ParsedNode.from_dict(item) for item in data]


def to_text(nodes: Iterable[ParsedNode], indent: str = "  ") -> str:
    """Render nodes as an indented outline, one node per line.

    Tagged nodes are shown as ``<tag> content`` and text nodes as quoted
    strings.
    """
    lines: List[str] = []
    stack = [(node, 0) for node in reversed(list(nodes))]
    while stack:
        node, depth = stack.pop()
        prefix = indent * depth
        if node.is_text:
            lines.append(f"{prefix}{json.dumps(node.content)}")
        else:
            line = f"{prefix}<{node.tag_name}>"
            if node.content:
                line += f" {node.content}"
            lines.append(line)
        stack.extend((child, depth + 1) for child in reversed(node.children))
    return "\n".join(lines)


def xml_name(tag_name: str) -> str:
    """Map a parsed tag name onto a valid XML element name.

    Parsed names are alphanumeric, so only empty names and names starting with
    a digit need the placeholder prefix.
    """
    if _XML_NAME_START.match(tag_name):
        return tag_name
    return INVALID_NAME_PREFIX + tag_name


def xml_text(text: str) -> str:
    """Replace characters XML 1.0 cannot represent, such as C0 controls."""
    return _INVALID_XML_CHARS.sub(INVALID_CHAR_REPLACEMENT, text)


class TreeAdapter(ABC):
    """Base class for adapters that build an element tree from parsed nodes."""

    name = "abstract"

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        """Initialize the adapter.

        Args:
            correlation_id: Optional correlation ID for request tracking
        """
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def _element_factory(self) -> Any:
        """Return the module providing ``Element`` and ``SubElement``."""

    def to_target(
        self, nodes: Iterable[ParsedNode], root_tag: str = DEFAULT_ROOT_TAG
    ) -> Any:
        """Build an element tree rooted at ``root_tag`` from parsed nodes."""
        etree = self._element_factory()
        root = etree.Element(root_tag)

        pending = [(root, list(nodes))]
        while pending:
            element, children = pending.pop()
            last_element = None
            for child in children:
                if child.is_text:
                    self._append_text(element, last_element, child.content)
                    continue
                last_element = etree.SubElement(element, xml_name(child.tag_name))
                if child.content:
                    last_element.text = xml_text(child.content)
                pending.append((last_element, list(child.children)))

        self._logger.debug(
            "Element tree built",
            extra={"adapter": self.name, "root_tag": root_tag}
        )
        return root

    @staticmethod
    def _append_text(parent: Any, last_element: Any, text: str) -> None:
        if last_element is None:
            parent.text = _join(parent.text, xml_text(text))
        else:
            last_element.tail = _join(last_element.tail, xml_text(text))


def _join(existing: Optional[str], text: str) -> str:
    return f"{existing} {text}" if existing else text


class ElementTreeAdapter(TreeAdapter):
    """Adapter producing ``xml.etree.ElementTree`` elements."""

    name = "elementtree"

    def is_available(self) -> bool:
        """The standard library adapter is always available."""
        return True

    def _element_factory(self) -> Any:
        import xml.etree.ElementTree as ET
        return ET


class LxmlAdapter(TreeAdapter):
    """Adapter producing ``lxml.etree`` elements (requires the ``lxml`` extra)."""

    name = "lxml"

    def is_available(self) -> bool:
        """Check if lxml is available."""
        try:
            import lxml.etree  # noqa: F401
            return True
        except ImportError:
            return False

    def _element_factory(self) -> Any:
        import lxml.etree
        return lxml.etree


def to_xml(
    nodes: Iterable[ParsedNode],
    root_tag: str = DEFAULT_ROOT_TAG,
    correlation_id: Optional[str] = None
) -> str:
    """Serialize nodes to an XML string using the standard library.

    Raises:
        ValueError: If the tree is nested too deeply for the ElementTree
            serializer, which recurses once per level
    """
    import xml.etree.ElementTree as ET

    root = ElementTreeAdapter(correlation_id).to_target(nodes, root_tag)
    try:
        return ET.tostring(root, encoding="unicode")
    except RecursionError as e:
        raise ValueError("Tree is nested too deeply to serialize as XML") from e
