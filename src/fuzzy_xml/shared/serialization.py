"""JSON encoding and decoding for documents of any nesting depth.

The standard ``json`` module recurses once per nesting level, so it cannot
handle trees deeper than the interpreter recursion limit. Parsed trees have no
depth limit, so containers are written and read here with explicit stacks.
Scalars are still encoded and decoded by ``json`` itself, and the output is
identical to ``json.dumps`` with its default separators.
"""

import json
import re
from json.decoder import scanstring
from typing import Any, List, Optional, Tuple, Union

_WHITESPACE = re.compile(r"[ \t\n\r]*")
_NUMBER = re.compile(r"-?(?:0|[1-9][0-9]*)(\.[0-9]+)?([eE][-+]?[0-9]+)?")
_LITERALS = (("true", True), ("false", False), ("null", None))


def dump_json(value: Any, indent: Optional[int] = None) -> str:
    """Serialize nested dicts, lists and scalars to JSON text.

    Args:
        value: JSON-compatible value of any nesting depth
        indent: Spaces per nesting level as for ``json.dumps``; None keeps the
            output on one line

    Returns:
        JSON text
    """
    item_separator = ", " if indent is None else ","
    parts: List[str] = []

    # Entries are either literal text or a (value, level) still to encode
    pending: List[Union[str, Tuple[Any, int]]] = [(value, 0)]
    while pending:
        entry = pending.pop()
        if isinstance(entry, str):
            parts.append(entry)
            continue

        item, level = entry
        if isinstance(item, dict):
            members = [(json.dumps(str(key)) + ": ", child) for key, child in item.items()]
            opener, closer = "{", "}"
        elif isinstance(item, (list, tuple)):
            members = [("", child) for child in item]
            opener, closer = "[", "]"
        else:
            parts.append(json.dumps(item))
            continue

        if not members:
            parts.append(opener + closer)
            continue

        parts.append(opener)
        pending.append(_newline(indent, level) + closer)
        for index in range(len(members) - 1, -1, -1):
            prefix, child = members[index]
            pending.append((child, level + 1))
            separator = item_separator if index else ""
            pending.append(separator + _newline(indent, level + 1) + prefix)

    return "".join(parts)


def load_json(text: str) -> Any:
    """Parse JSON text of any nesting depth.

    Raises:
        json.JSONDecodeError: If the text is not valid JSON (a ValueError)
    """
    # Open containers, each with the key awaiting its value
    stack: List[List[Any]] = []
    position = 0

    while True:
        position = _skip_whitespace(text, position)
        char = text[position:position + 1]

        if char in ("{", "["):
            container: Any = {} if char == "{" else []
            position = _skip_whitespace(text, position + 1)
            if text[position:position + 1] == _closer(container):
                value = container
                position += 1
            else:
                frame = [container, None]
                stack.append(frame)
                if char == "{":
                    frame[1], position = _read_key(text, position)
                continue
        else:
            value, position = _read_scalar(text, position)

        # Store the finished value, closing every container it completes
        while stack:
            frame = stack[-1]
            container = frame[0]
            if isinstance(container, dict):
                container[frame[1]] = value
            else:
                container.append(value)

            position = _skip_whitespace(text, position)
            char = text[position:position + 1]
            if char == ",":
                position = _skip_whitespace(text, position + 1)
                if isinstance(container, dict):
                    frame[1], position = _read_key(text, position)
                break
            if char == _closer(container):
                stack.pop()
                value = container
                position += 1
                continue
            raise json.JSONDecodeError("Expecting ',' delimiter", text, position)
        else:
            position = _skip_whitespace(text, position)
            if position != len(text):
                raise json.JSONDecodeError("Extra data", text, position)
            return value


def _newline(indent: Optional[int], level: int) -> str:
    if indent is None:
        return ""
    return "\n" + " " * (indent * level)


def _closer(container: Any) -> str:
    return "}" if isinstance(container, dict) else "]"


def _skip_whitespace(text: str, position: int) -> int:
    return _WHITESPACE.match(text, position).end()


def _read_key(text: str, position: int) -> Tuple[str, int]:
    if text[position:position + 1] != '"':
        raise json.JSONDecodeError(
            "Expecting property name enclosed in double quotes", text, position
        )
    key, position = scanstring(text, position + 1)
    position = _skip_whitespace(text, position)
    if text[position:position + 1] != ":":
        raise json.JSONDecodeError("Expecting ':' delimiter", text, position)
    return key, position + 1


def _read_scalar(text: str, position: int) -> Tuple[Any, int]:
    if text[position:position + 1] == '"':
        return scanstring(text, position + 1)

    for literal, value in _LITERALS:
        if text.startswith(literal, position):
            return value, position + len(literal)

    match = _NUMBER.match(text, position)
    if match:
        number = match.group(0)
        if match.group(1) or match.group(2):
            return float(number), match.end()
        return int(number), match.end()

    raise json.JSONDecodeError("Expecting value", text, position)
