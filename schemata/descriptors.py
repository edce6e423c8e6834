# schemata/descriptors.py
"""Language-neutral type descriptors consumed by the schema compiler.

A :class:`TypeDescriptor` is a normalised, read-only view of one data type:
its kind, own properties, generic arguments, base type link and enum
members.  Descriptors are produced by an adapter (see
:mod:`schemata.adapter`) or authored by hand; the compiler never inspects
language-native metadata itself.

Descriptor graphs may be cyclic.  Build the node first, then append
properties that point back at it::

    node = TypeDescriptor("Component", namespace="shop")
    node.properties.append(PropertyDescriptor("Children", array_of(node)))

Descriptors compare and hash by :attr:`TypeDescriptor.identity`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Optional


class TypeKind(str, Enum):
    """Structural kind of a described type."""

    PRIMITIVE = "primitive"
    ENUM = "enum"
    ARRAY = "array"
    DICTIONARY = "dictionary"
    OBJECT = "object"
    NULLABLE = "nullable"
    # Shapes the compiler rejects.
    UNION = "union"
    TYPE_PARAMETER = "type_parameter"


@dataclass(frozen=True)
class EnumMember:
    """One named member of an enumeration."""

    name: str
    value: Any


@dataclass
class Constraints:
    """Validation constraints attached to a property.

    ``None`` means "not set"; ``required`` is a plain flag.
    """

    required: bool = False
    pattern: Optional[str] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_minimum: Optional[bool] = None
    exclusive_maximum: Optional[bool] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    default: Any = None
    example: Any = None
    enum: Optional[list[Any]] = None

    def is_empty(self) -> bool:
        return not self.required and all(
            getattr(self, f.name) is None for f in fields(self) if f.name != "required"
        )


@dataclass(eq=False, repr=False)
class PropertyDescriptor:
    """A declared member of an object type."""

    name: str
    type: "TypeDescriptor"
    serialized_name: Optional[str] = None
    nullable: bool = False
    constraints: Constraints = field(default_factory=Constraints)
    description: Optional[str] = None
    read_only: bool = False
    ignored: bool = False
    obsolete: bool = False
    enum_as_string: bool = False

    @property
    def json_name(self) -> str:
        """Name the property is serialised under."""
        return self.serialized_name or self.name

    def __repr__(self) -> str:
        return f"PropertyDescriptor({self.name!r}: {self.type.identity})"


@dataclass(eq=False, repr=False)
class TypeDescriptor:
    """Normalised description of a single data type."""

    name: str
    namespace: Optional[str] = None
    kind: TypeKind = TypeKind.OBJECT
    key: Optional[str] = None
    element: Optional["TypeDescriptor"] = None
    key_type: Optional["TypeDescriptor"] = None
    value_type: Optional["TypeDescriptor"] = None
    generic_arguments: list["TypeDescriptor"] = field(default_factory=list)
    properties: list[PropertyDescriptor] = field(default_factory=list)
    base: Optional["TypeDescriptor"] = None
    enum_members: list[EnumMember] = field(default_factory=list)
    unique_items: bool = False
    description: Optional[str] = None
    xml_name: Optional[str] = None
    declaring_type: Optional["TypeDescriptor"] = None

    # -- identity ----------------------------------------------------------

    @property
    def full_name(self) -> str:
        """Dotted name including declaring type or namespace."""
        if self.declaring_type is not None:
            prefix = self.declaring_type.full_name
        else:
            prefix = self.namespace
        return f"{prefix}.{self.name}" if prefix else self.name

    @property
    def identity(self) -> str:
        """Stable key, unique per distinct type."""
        if self.key:
            return self.key
        if self.kind is TypeKind.ARRAY and self.element is not None:
            suffix = "{}" if self.unique_items else "[]"
            return f"{self.element.identity}{suffix}"
        if self.kind is TypeKind.NULLABLE and self.element is not None:
            return f"{self.element.identity}?"
        if self.kind is TypeKind.DICTIONARY and self.key_type and self.value_type:
            return f"{self.full_name}<{self.key_type.identity},{self.value_type.identity}>"
        if self.generic_arguments:
            args = ",".join(arg.identity for arg in self.generic_arguments)
            return f"{self.full_name}[{args}]"
        return self.full_name

    @property
    def is_generic(self) -> bool:
        return bool(self.generic_arguments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeDescriptor):
            return NotImplemented
        return self.identity == other.identity

    def __hash__(self) -> int:
        return hash(self.identity)

    def __repr__(self) -> str:
        return f"TypeDescriptor({self.identity!r}, kind={self.kind.value})"

    # -- navigation --------------------------------------------------------

    def unwrap_nullable(self) -> "TypeDescriptor":
        """Return the wrapped type of a nullable wrapper, else ``self``."""
        current = self
        while current.kind is TypeKind.NULLABLE and current.element is not None:
            current = current.element
        return current

    def base_chain(self) -> list["TypeDescriptor"]:
        """Ancestors from nearest to farthest, stopping at a repeated identity."""
        chain: list[TypeDescriptor] = []
        seen = {self.identity}
        current = self.base
        while current is not None and current.identity not in seen:
            chain.append(current)
            seen.add(current.identity)
            current = current.base
        return chain


# ---------------------------------------------------------------------------
# Convenience constructors
# ---------------------------------------------------------------------------


def primitive(name: str) -> TypeDescriptor:
    """Describe a well-known primitive such as ``"int32"`` or ``"string"``."""
    return TypeDescriptor(name=name, kind=TypeKind.PRIMITIVE, key=name)


def array_of(element: TypeDescriptor, *, unique: bool = False) -> TypeDescriptor:
    return TypeDescriptor(
        name=f"{element.name}[]",
        kind=TypeKind.ARRAY,
        element=element,
        unique_items=unique,
    )


def nullable(element: TypeDescriptor) -> TypeDescriptor:
    return TypeDescriptor(name=f"{element.name}?", kind=TypeKind.NULLABLE, element=element)


def dictionary_of(key_type: TypeDescriptor, value_type: TypeDescriptor) -> TypeDescriptor:
    return TypeDescriptor(
        name="Dictionary",
        kind=TypeKind.DICTIONARY,
        key_type=key_type,
        value_type=value_type,
    )


def enum_type(
    name: str,
    members: dict[str, Any],
    *,
    namespace: Optional[str] = None,
) -> TypeDescriptor:
    """Describe an enumeration from a ``{name: value}`` mapping."""
    return TypeDescriptor(
        name=name,
        namespace=namespace,
        kind=TypeKind.ENUM,
        enum_members=[EnumMember(n, v) for n, v in members.items()],
    )
