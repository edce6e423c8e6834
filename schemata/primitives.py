# schemata/primitives.py
"""Map well-known types to ``(schema type, format)`` pairs.

Public API
----------
- :func:`map_type`: deterministic table lookup for one descriptor.
- :func:`leaf_schema`: build the inline leaf :class:`SchemaNode` for a
  primitive, enum, byte array or nullable primitive, or return ``None``
  when the type needs structural compilation.

Nothing here has side effects or a failure path: an unmapped primitive
name simply falls through to object compilation in the registry.
"""

from __future__ import annotations

import re
from typing import Any, NamedTuple, Optional

from .descriptors import TypeDescriptor, TypeKind
from .nodes import SchemaNode

__all__ = [
    "PRIMITIVE_TYPES",
    "PrimitiveMapping",
    "map_type",
    "is_string_valued",
    "leaf_schema",
    "enum_literals",
]


class PrimitiveMapping(NamedTuple):
    schema_type: Optional[str]
    format: Optional[str]
    is_leaf: bool
    nullable: bool = False


_NOT_PRIMITIVE = PrimitiveMapping(None, None, False)

PRIMITIVE_TYPES: dict[str, tuple[str, Optional[str]]] = {
    "boolean": ("boolean", None),
    "bool": ("boolean", None),
    "byte": ("integer", "int32"),
    "sbyte": ("integer", "int32"),
    "int16": ("integer", "int32"),
    "uint16": ("integer", "int32"),
    "int32": ("integer", "int32"),
    "uint32": ("integer", "int32"),
    "int64": ("integer", "int64"),
    "uint64": ("integer", "int64"),
    "single": ("number", "float"),
    "float": ("number", "float"),
    "double": ("number", "double"),
    "decimal": ("number", "double"),
    "datetime": ("string", "date-time"),
    "datetimeoffset": ("string", "date-time"),
    "date": ("string", "date"),
    "timespan": ("string", None),
    "guid": ("string", "uuid"),
    "uuid": ("string", "uuid"),
    "char": ("string", None),
    "string": ("string", None),
    "bytes": ("string", "byte"),
    "object": ("object", None),
}


def _is_byte_array(descriptor: TypeDescriptor) -> bool:
    element = descriptor.element
    return (
        descriptor.kind is TypeKind.ARRAY
        and element is not None
        and element.kind is TypeKind.PRIMITIVE
        and element.name.lower() == "byte"
    )


def is_string_valued(descriptor: TypeDescriptor) -> bool:
    """True for enums whose members carry string values (``StrEnum``)."""
    members = descriptor.enum_members
    return bool(members) and all(isinstance(m.value, str) for m in members)


def map_type(descriptor: TypeDescriptor, *, enums_as_strings: bool = False) -> PrimitiveMapping:
    """Map a descriptor to ``(schema_type, format, is_leaf, nullable)``."""
    nullable = descriptor.kind is TypeKind.NULLABLE
    target = descriptor.unwrap_nullable()

    if target.kind is TypeKind.PRIMITIVE:
        mapped = PRIMITIVE_TYPES.get(target.name.lower())
        if mapped is None:
            return _NOT_PRIMITIVE
        return PrimitiveMapping(mapped[0], mapped[1], True, nullable)

    if target.kind is TypeKind.ENUM:
        if enums_as_strings or is_string_valued(target):
            return PrimitiveMapping("string", None, True, nullable)
        return PrimitiveMapping("integer", "int32", True, nullable)

    if _is_byte_array(target):
        return PrimitiveMapping("string", "byte", True, nullable)

    return _NOT_PRIMITIVE


def _camel_case(name: str) -> str:
    if not name:
        return name
    if name.isupper():
        return name.lower()
    return re.sub(r"^[A-Z]+(?=[A-Z][a-z]|$)|^[A-Z]", lambda m: m.group(0).lower(), name)


def enum_literals(
    descriptor: TypeDescriptor,
    *,
    as_strings: bool,
    camel_case: bool = False,
) -> list[Any]:
    """Literal set for an enum: member names in string mode, else values.

    String-valued enums list their values unless string mode asks for names.
    """
    if as_strings:
        names = [member.name for member in descriptor.enum_members]
        return [_camel_case(n) for n in names] if camel_case else names
    return [member.value for member in descriptor.enum_members]


def leaf_schema(
    descriptor: TypeDescriptor,
    *,
    enums_as_strings: bool = False,
    camel_case_enums: bool = False,
) -> Optional[SchemaNode]:
    """Return the inline leaf schema for ``descriptor`` or ``None``."""
    mapping = map_type(descriptor, enums_as_strings=enums_as_strings)
    if not mapping.is_leaf:
        return None

    node = SchemaNode(type=mapping.schema_type, format=mapping.format)
    target = descriptor.unwrap_nullable()
    if target.kind is TypeKind.ENUM:
        node.enum = enum_literals(target, as_strings=enums_as_strings, camel_case=camel_case_enums)
    if mapping.nullable:
        node.nullable = True
    return node
