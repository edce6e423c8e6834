# schemata/documentation.py
"""Type and property descriptions loaded from YAML.

Human-readable text lives outside the type descriptors, in a YAML file
keyed by fully qualified type name::

    shop.Account:
      summary: Account details
      properties:
        Username:
          summary: Uniquely identifies the account
          example: TestUser

:class:`DocumentationFilter` is a model filter that copies this text onto
already-compiled schemas by property name.  It never adds or removes
properties.  Entries on a derived type win over entries on its bases.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, NamedTuple, Optional, Protocol, runtime_checkable

import yaml
from pydantic import BaseModel, Field, ValidationError

from .descriptors import TypeDescriptor
from .errors import DocumentationSourceError
from .nodes import SchemaNode

if TYPE_CHECKING:
    from .registry import SchemaRegistry

__all__ = [
    "PropertyDoc",
    "DocumentationSource",
    "YamlDocumentationSource",
    "DocumentationFilter",
]


class PropertyDoc(NamedTuple):
    summary: Optional[str] = None
    example: Any = None


@runtime_checkable
class DocumentationSource(Protocol):
    """Supplies summaries for types and their properties."""

    def type_summary(self, descriptor: TypeDescriptor) -> Optional[str]:
        ...

    def property_doc(self, descriptor: TypeDescriptor, name: str) -> Optional[PropertyDoc]:
        ...


# ---------------------------------------------------------------------------
# YAML-backed source
# ---------------------------------------------------------------------------


class _PropertyEntry(BaseModel):
    summary: Optional[str] = None
    example: Any = None


class _TypeEntry(BaseModel):
    summary: Optional[str] = None
    properties: Dict[str, _PropertyEntry] = Field(default_factory=dict)


class YamlDocumentationSource:
    """Documentation keyed by type full name, loaded from YAML."""

    def __init__(self, entries: dict[str, Any]):
        try:
            self._entries = {
                str(name): _TypeEntry.model_validate(entry or {})
                for name, entry in entries.items()
            }
        except ValidationError as exc:
            raise DocumentationSourceError(f"Malformed documentation entry: {exc}") from exc

    @classmethod
    def from_yaml(cls, content: str) -> "YamlDocumentationSource":
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise DocumentationSourceError(f"Documentation YAML could not be parsed: {exc}") from exc
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise DocumentationSourceError(
                "Documentation YAML must map type names to entries, "
                f"got {type(data).__name__}"
            )
        return cls(data)

    @classmethod
    def from_file(cls, path: str | Path) -> "YamlDocumentationSource":
        try:
            content = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise DocumentationSourceError(f"Cannot read documentation file {path}: {exc}") from exc
        return cls.from_yaml(content)

    def _entry(self, descriptor: TypeDescriptor) -> Optional[_TypeEntry]:
        return self._entries.get(descriptor.full_name) or self._entries.get(descriptor.name)

    def type_summary(self, descriptor: TypeDescriptor) -> Optional[str]:
        entry = self._entry(descriptor)
        return entry.summary if entry else None

    def property_doc(self, descriptor: TypeDescriptor, name: str) -> Optional[PropertyDoc]:
        entry = self._entry(descriptor)
        if entry is None:
            return None
        prop = entry.properties.get(name)
        if prop is None:
            return None
        return PropertyDoc(prop.summary, prop.example)


# ---------------------------------------------------------------------------
# Model filter
# ---------------------------------------------------------------------------


class DocumentationFilter:
    """Attach summaries and examples from a :class:`DocumentationSource`."""

    def __init__(self, source: DocumentationSource):
        self.source = source

    def apply(
        self,
        schema: SchemaNode,
        descriptor: TypeDescriptor,
        registry: "SchemaRegistry",
    ) -> None:
        summary = self.source.type_summary(descriptor)
        if summary:
            schema.description = summary

        for json_name, prop_schema in (schema.properties or {}).items():
            doc = self._lookup(descriptor, json_name)
            if doc is None:
                continue
            if doc.summary:
                prop_schema.description = doc.summary
            if doc.example is not None:
                prop_schema.example = doc.example

    def _lookup(self, descriptor: TypeDescriptor, json_name: str) -> Optional[PropertyDoc]:
        for owner in (descriptor, *descriptor.base_chain()):
            names = {json_name}
            names.update(p.name for p in owner.properties if p.json_name == json_name)
            for name in sorted(names):
                doc = self.source.property_doc(owner, name)
                if doc is not None:
                    return doc
        return None
