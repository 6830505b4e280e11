"""
Tagged JSON document tree.

Metadata documents are untrusted. Parsing wraps every node in a
``JSONValue`` whose ``kind`` says what it is, so extraction code asks
"is this a string?" instead of catching type errors.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple


class JSONKind(str, Enum):
    """Shapes recognized in a metadata document."""

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    INTEGER = "integer"
    OTHER = "other"
    ABSENT = "absent"


@dataclass(frozen=True)
class JSONValue:
    kind: JSONKind
    value: Any = None

    @classmethod
    def wrap(cls, raw: Any) -> "JSONValue":
        """Convert a decoded JSON value into a tagged tree."""
        if isinstance(raw, dict):
            return cls(JSONKind.OBJECT, {key: cls.wrap(item) for key, item in raw.items()})
        if isinstance(raw, list):
            return cls(JSONKind.ARRAY, [cls.wrap(item) for item in raw])
        if isinstance(raw, str):
            return cls(JSONKind.STRING, raw)
        # bool is a subclass of int
        if isinstance(raw, int) and not isinstance(raw, bool):
            return cls(JSONKind.INTEGER, raw)
        return cls(JSONKind.OTHER, raw)

    @property
    def is_present(self) -> bool:
        return self.kind is not JSONKind.ABSENT

    def get(self, key: str) -> "JSONValue":
        """Member of an object; ABSENT for missing keys or non-objects."""
        if self.kind is not JSONKind.OBJECT:
            return ABSENT
        return self.value.get(key, ABSENT)

    def lookup(self, path: Tuple[str, ...]) -> "JSONValue":
        node = self
        for key in path:
            node = node.get(key)
        return node

    @property
    def items(self) -> List["JSONValue"]:
        return list(self.value) if self.kind is JSONKind.ARRAY else []


ABSENT = JSONValue(JSONKind.ABSENT)

# Metadata documents are a handful of levels deep; anything past this is
# rejected before json.loads and JSONValue.wrap recurse into it.
MAX_DOCUMENT_DEPTH = 64


def _exceeds_depth(text: str, limit: int = MAX_DOCUMENT_DEPTH) -> bool:
    """True when arrays/objects nest deeper than ``limit``.

    Brackets inside string literals are not counted.
    """
    depth = 0
    in_string = False
    escaped = False
    for char in text:
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char in "[{":
            depth += 1
            if depth > limit:
                return True
        elif char in "]}":
            depth -= 1
    return False


def parse_document(raw: bytes) -> Optional[JSONValue]:
    """Parse UTF-8 JSON bytes.

    Returns None when the bytes are not valid UTF-8 JSON or nest deeper
    than ``MAX_DOCUMENT_DEPTH``.
    """
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        return None
    if _exceeds_depth(text):
        return None

    try:
        return JSONValue.wrap(json.loads(text))
    except (ValueError, RecursionError):
        return None
