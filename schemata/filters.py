# schemata/filters.py
"""Model, schema and document filters.

Three independent ordered chains:

- **Model filters** run once per compiled type, right after its structural
  body is built and before it replaces the registry placeholder.
- **Schema filters** run on every schema the registry emits: registered
  bodies (after the model filters) and inline leaves, mapped types and
  inline arrays or dictionaries.  The descriptor passed is the one asked
  for, so a nullable wrapper is still visible.
- **Document filters** run once after every operation has been compiled,
  and may register further types.

Filters run in registration order and observe earlier filters' mutations.
A filter may declare ``requires``: names of filters that must be
registered before it (checked when options are assembled).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from .descriptors import TypeDescriptor
from .nodes import SchemaNode

if TYPE_CHECKING:
    from .document import ApiExplorer
    from .registry import SchemaRegistry

__all__ = [
    "ModelFilter",
    "SchemaFilter",
    "DocumentFilter",
    "filter_name",
    "TypeNameFilter",
    "RegisterTypesFilter",
]


@runtime_checkable
class ModelFilter(Protocol):
    """Mutates one type's compiled schema."""

    def apply(
        self,
        schema: SchemaNode,
        descriptor: TypeDescriptor,
        registry: "SchemaRegistry",
    ) -> None:
        ...


@runtime_checkable
class SchemaFilter(Protocol):
    """Mutates any emitted schema, inline or registered."""

    def apply(
        self,
        schema: SchemaNode,
        descriptor: TypeDescriptor,
        registry: "SchemaRegistry",
    ) -> None:
        ...


@runtime_checkable
class DocumentFilter(Protocol):
    """Mutates the assembled document; may re-enter the registry."""

    def apply(
        self,
        document: dict[str, Any],
        registry: "SchemaRegistry",
        explorer: "ApiExplorer",
    ) -> None:
        ...


def filter_name(filter_obj: object) -> str:
    return type(filter_obj).__name__


class TypeNameFilter:
    """Stamp every compiled type with its fully qualified name."""

    def __init__(self, key: str = "x-type"):
        self.key = key

    def apply(self, schema: SchemaNode, descriptor: TypeDescriptor, registry: "SchemaRegistry") -> None:
        schema.extensions[self.key] = descriptor.unwrap_nullable().full_name


class RegisterTypesFilter:
    """Register types that no operation reaches (e.g. polymorphic subtypes)."""

    def __init__(self, *descriptors: TypeDescriptor):
        self.descriptors = list(descriptors)

    def apply(
        self,
        document: dict[str, Any],
        registry: "SchemaRegistry",
        explorer: "ApiExplorer",
    ) -> None:
        for descriptor in self.descriptors:
            registry.get_or_register(descriptor)
