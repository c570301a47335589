"""Recursive document model for serialized resource state.

A :data:`Document` is any JSON-shaped value: ``None``, ``bool``, a number,
a string, a list of documents or a string-keyed dict of documents.  The
native Python types are the tags of the union; every consumer dispatches
on them with ``match`` so that each branch covers the whole shape.

Bool and Number are distinct tags even though ``True == 1`` in Python,
so :func:`documents_equal` compares tags before values.
"""

from __future__ import annotations

import copy
import math
from enum import StrEnum
from typing import TypeAlias

Document: TypeAlias = "dict[str, Document] | list[Document] | str | int | float | bool | None"


class DocumentKind(StrEnum):
    """Tag of a :data:`Document` value."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    LIST = "list"
    MAP = "map"


def kind_of(value: object) -> DocumentKind:
    """Return the tag of *value*.

    Raises TypeError for values outside the document union.
    """
    match value:
        case None:
            return DocumentKind.NULL
        case bool():
            return DocumentKind.BOOL
        case int() | float():
            return DocumentKind.NUMBER
        case str():
            return DocumentKind.STRING
        case list() | tuple():
            return DocumentKind.LIST
        case dict():
            return DocumentKind.MAP
        case _:
            raise TypeError(f"Unsupported document value of type {type(value).__name__}")


def is_container(value: object) -> bool:
    """Return True for map and list documents."""
    return isinstance(value, (dict, list, tuple))


def documents_equal(left: object, right: object) -> bool:
    """Structural equality over the document union.

    Maps are equal iff they have the same key set and recursively equal
    values (key order is irrelevant).  Lists are equal iff they have the
    same length and are element-wise equal.  Scalars are equal by tag and
    value; NaN equals NaN so a document always equals itself.
    """
    match left, right:
        case dict(), dict():
            if left.keys() != right.keys():
                return False
            return all(documents_equal(left[key], right[key]) for key in left)
        case (list() | tuple(), list() | tuple()):
            if len(left) != len(right):
                return False
            return all(documents_equal(a, b) for a, b in zip(left, right))
        case bool(), bool():
            return left is right
        case bool(), _:
            return False
        case _, bool():
            return False
        case float(), float() if math.isnan(left) and math.isnan(right):
            return True
        case (int() | float(), int() | float()):
            return left == right
        case str(), str():
            return left == right
        case None, None:
            return True
        case _:
            return False


def clone(document: Document) -> Document:
    """Return a deep copy of *document* that shares no mutable state."""
    return copy.deepcopy(document)
