# schemata/nodes.py
"""Compiled schema nodes.

A :class:`SchemaNode` is the output for one type: an object shape, an
array, an enum or a primitive leaf.  A node whose :attr:`SchemaNode.ref` is
set is a *named reference* to an entry in the registry's definitions table
rather than an inline shape.

:meth:`SchemaNode.to_dict` renders the Swagger 2.0 JSON shape (``$ref``,
``additionalProperties``, ``x-*`` vendor extensions, ...) with unset
fields omitted.  Serialising that dict to JSON or YAML is left to callers.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["XmlInfo", "SchemaNode", "definitions_to_dict"]


class XmlInfo(BaseModel):
    """Serialisation framing: element name and array wrapping."""

    name: Optional[str] = None
    wrapped: Optional[bool] = None


class SchemaNode(BaseModel):
    """One compiled schema (or a reference to one)."""

    model_config = ConfigDict(populate_by_name=True)

    ref: Optional[str] = Field(None, serialization_alias="$ref")
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    format: Optional[str] = None
    items: Optional["SchemaNode"] = None
    properties: Optional[Dict[str, "SchemaNode"]] = None
    additional_properties: Optional["SchemaNode"] = Field(
        None, serialization_alias="additionalProperties"
    )
    required: Optional[List[str]] = None
    enum: Optional[List[Any]] = None
    default: Any = None
    example: Any = None
    pattern: Optional[str] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_minimum: Optional[bool] = Field(None, serialization_alias="exclusiveMinimum")
    exclusive_maximum: Optional[bool] = Field(None, serialization_alias="exclusiveMaximum")
    min_length: Optional[int] = Field(None, serialization_alias="minLength")
    max_length: Optional[int] = Field(None, serialization_alias="maxLength")
    min_items: Optional[int] = Field(None, serialization_alias="minItems")
    max_items: Optional[int] = Field(None, serialization_alias="maxItems")
    unique_items: Optional[bool] = Field(None, serialization_alias="uniqueItems")
    read_only: Optional[bool] = Field(None, serialization_alias="readOnly")
    nullable: Optional[bool] = Field(None, serialization_alias="x-nullable")
    xml: Optional[XmlInfo] = None
    extensions: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def reference(cls, schema_id: str) -> "SchemaNode":
        """Build a named reference to ``schema_id``."""
        return cls(ref=schema_id)

    @property
    def is_reference(self) -> bool:
        return self.ref is not None

    @property
    def is_placeholder(self) -> bool:
        """True for the empty node inserted before a type is compiled."""
        return not self.model_fields_set and not self.extensions

    def to_dict(self, ref_prefix: str = "#/definitions/") -> dict[str, Any]:
        """Render as a JSON-compatible dict in Swagger 2.0 shape."""
        out: dict[str, Any] = {}
        for name, info in type(self).model_fields.items():
            if name == "extensions":
                continue
            value = getattr(self, name)
            if value is None:
                continue
            if name == "ref":
                value = f"{ref_prefix}{value}"
            elif name in ("items", "additional_properties"):
                value = value.to_dict(ref_prefix)
            elif name == "properties":
                value = {key: prop.to_dict(ref_prefix) for key, prop in value.items()}
            elif name == "xml":
                value = value.model_dump(exclude_none=True)
            elif isinstance(value, list):
                value = list(value)
            out[info.serialization_alias or name] = value
        out.update(self.extensions)
        return out


SchemaNode.model_rebuild()


def definitions_to_dict(
    definitions: dict[str, SchemaNode],
    ref_prefix: str = "#/definitions/",
) -> dict[str, Any]:
    """Render a definitions table, preserving its order."""
    return {schema_id: node.to_dict(ref_prefix) for schema_id, node in definitions.items()}
