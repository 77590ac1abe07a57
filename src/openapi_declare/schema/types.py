"""Type normalization for declared schema nodes.

Declarations may spell a type as a tag string (``"number"``), a
:class:`TypeTag`, a Python builtin (``int``), or a list of any of these for
a union. Everything collapses to the canonical string tags the compilers
understand. Strings, tags or not, pass through verbatim, so a component
named ``Object`` is never mistaken for the ``object`` tag.
"""

from enum import Enum
from typing import Any


class TypeTag(str, Enum):
    """Canonical type tags."""

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"


_BUILTIN_TAGS = {
    bool: TypeTag.BOOLEAN.value,
    int: TypeTag.NUMBER.value,
    float: TypeTag.NUMBER.value,
    str: TypeTag.STRING.value,
    dict: TypeTag.OBJECT.value,
    list: TypeTag.ARRAY.value,
}


def normalize_type(value: Any) -> Any:
    """Return the canonical form of a type token.

    Lists are returned unchanged (they denote an ``anyOf`` union and their
    members are normalized at compile time). ``None`` stays ``None``.
    """
    if value is None or isinstance(value, list):
        return value
    if isinstance(value, TypeTag):
        return value.value
    if isinstance(value, type) and value in _BUILTIN_TAGS:
        return _BUILTIN_TAGS[value]
    return str(value)
