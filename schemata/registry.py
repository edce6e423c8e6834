# schemata/registry.py
"""Cycle-safe compilation of type graphs into a definitions table.

The registry maps type identities to schema ids and schema ids to compiled
:class:`~schemata.nodes.SchemaNode` bodies.  :meth:`SchemaRegistry.get_or_register`
returns either an inline leaf (primitives, enums, byte arrays, inline
arrays and dictionaries) or a named reference to a registered body.

Cycles terminate because a placeholder is stored under the new schema id
*before* a type's properties are compiled: any recursive request for the
same identity, from a property or from a filter, gets a reference back
instead of recursing.  Tracking is per identity, so filters may register
unrelated types while another type is still being built.

One registry serves one build.  It has no locking; concurrent builds must
each use their own instance.  After :meth:`SchemaRegistry.complete` it is
read-only.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from .descriptors import PropertyDescriptor, TypeDescriptor, TypeKind
from .errors import (
    BuildError,
    DuplicateSchemaIdError,
    FilterError,
    RegistryFrozenError,
    UnsupportedTypeError,
)
from .nodes import SchemaNode, XmlInfo
from .options import SchemaOptions
from .primitives import leaf_schema
from .utils.logging import log_registration

logger = logging.getLogger(__name__)

__all__ = ["SchemaRegistry"]

_CONSTRAINT_FIELDS = (
    "pattern",
    "minimum",
    "maximum",
    "exclusive_minimum",
    "exclusive_maximum",
    "min_length",
    "max_length",
    "default",
    "example",
)

# Fields a "merge" precedence fills from the base declaration.
_MERGEABLE_FIELDS = _CONSTRAINT_FIELDS + (
    "description",
    "enum",
    "read_only",
    "nullable",
    "min_items",
    "max_items",
)


class SchemaRegistry:
    """Type identity → schema id → schema node, populated lazily."""

    def __init__(self, options: Optional[SchemaOptions] = None):
        self.options = options if options is not None else SchemaOptions.from_config()
        self._resolver = self.options.resolver()
        self._id_by_type: dict[str, str] = {}
        self._node_by_id: dict[str, SchemaNode] = {}
        self._id_collisions: dict[str, set[str]] = {}
        self._inline_in_progress: set[str] = set()
        self._completed = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_or_register(self, descriptor: TypeDescriptor) -> SchemaNode:
        """Return an inline schema or a reference for ``descriptor``.

        Every call returns a fresh node, so callers may decorate it.
        """
        target = descriptor.unwrap_nullable()

        mapped = self.options.mapped_schema(target)
        if mapped is not None:
            if target is not descriptor:
                mapped.nullable = True
            self._apply_schema_filters(mapped, descriptor)
            return mapped

        leaf = leaf_schema(
            descriptor,
            enums_as_strings=self.options.describe_all_enums_as_strings,
            camel_case_enums=self.options.camel_case_enum_strings,
        )
        if leaf is not None:
            self._apply_schema_filters(leaf, descriptor)
            return leaf

        schema_id = self._id_by_type.get(target.identity)
        if schema_id is not None:
            return SchemaNode.reference(schema_id)

        if target.kind in (TypeKind.ARRAY, TypeKind.DICTIONARY):
            return self._compile_inline(target)
        if target.kind in (TypeKind.OBJECT, TypeKind.PRIMITIVE):
            return self._register(target)
        raise UnsupportedTypeError(target, f"kind '{target.kind.value}' cannot be compiled to a schema")

    def schema_id_for(self, descriptor: TypeDescriptor) -> Optional[str]:
        return self._id_by_type.get(descriptor.unwrap_nullable().identity)

    def get(self, schema_id: str) -> Optional[SchemaNode]:
        return self._node_by_id.get(schema_id)

    def definitions(self) -> dict[str, SchemaNode]:
        """Snapshot of the definitions table in registration order."""
        return dict(self._node_by_id)

    @property
    def table(self) -> dict[str, SchemaNode]:
        """The live definitions table.

        Document filters read and edit nodes through it; types registered
        later appear in it as they are reserved.
        """
        return self._node_by_id

    def complete(self) -> dict[str, SchemaNode]:
        """Finish the build: check id collisions, freeze, return definitions."""
        if not self._completed:
            self._check_collisions()
            pending = [sid for sid, node in self._node_by_id.items() if node.is_placeholder]
            if pending:
                raise BuildError(
                    f"Schemas never finished compiling: {', '.join(pending)}"
                )
            self._completed = True
            logger.debug("Registry completed with %d definitions", len(self._node_by_id))
        return self.definitions()

    @property
    def is_completed(self) -> bool:
        return self._completed

    def __contains__(self, descriptor: object) -> bool:
        if not isinstance(descriptor, TypeDescriptor):
            return False
        return self.schema_id_for(descriptor) is not None

    def __len__(self) -> int:
        return len(self._node_by_id)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._node_by_id))

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def _reserve(self, target: TypeDescriptor) -> tuple[str, bool]:
        """Mint an id for ``target`` and store a placeholder under it.

        Returns ``(schema_id, is_new)``; ``is_new`` is False when the id
        already belongs to a different identity (a collision).  With full
        type names a collision is settled here by suffixing the id.
        """
        identity = target.identity
        if self._completed:
            raise RegistryFrozenError(
                f"Cannot register '{identity}': the registry was completed and is read-only"
            )

        schema_id = self._resolver.resolve(target)
        if schema_id in self._node_by_id and self._resolver.tolerates_collisions:
            unique_id = self._unique_id(schema_id)
            logger.warning(
                "Schema id '%s' already used by %s; registering '%s' as '%s'",
                schema_id,
                ", ".join(sorted(self._id_collisions.get(schema_id, ()))),
                identity,
                unique_id,
            )
            schema_id = unique_id

        claimants = self._id_collisions.setdefault(schema_id, set())
        claimants.add(identity)
        self._id_by_type[identity] = schema_id

        if schema_id in self._node_by_id:
            logger.warning(
                "Schema id '%s' already used by %s; '%s' shares it",
                schema_id,
                ", ".join(sorted(claimants - {identity})),
                identity,
            )
            return schema_id, False

        self._node_by_id[schema_id] = SchemaNode()
        log_registration(logger, identity, schema_id)
        return schema_id, True

    def _unique_id(self, schema_id: str) -> str:
        suffix = 2
        while f"{schema_id}_{suffix}" in self._node_by_id:
            suffix += 1
        return f"{schema_id}_{suffix}"

    def _register(self, target: TypeDescriptor) -> SchemaNode:
        schema_id, is_new = self._reserve(target)
        if is_new:
            node = self._compile_object(target)
            self._apply_model_filters(node, target)
            self._apply_schema_filters(node, target)
            self._node_by_id[schema_id] = node
        return SchemaNode.reference(schema_id)

    def _compile_inline(self, target: TypeDescriptor) -> SchemaNode:
        identity = target.identity
        if identity in self._inline_in_progress:
            # The container reached itself: give it an id so the cycle
            # closes over a reference.
            schema_id, _ = self._reserve(target)
            return SchemaNode.reference(schema_id)

        self._inline_in_progress.add(identity)
        try:
            if target.kind is TypeKind.ARRAY:
                node = self._compile_array(target)
            else:
                node = self._compile_dictionary(target)
        finally:
            self._inline_in_progress.discard(identity)

        schema_id = self._id_by_type.get(identity)
        if schema_id is None:
            self._apply_schema_filters(node, target)
            return node
        existing = self._node_by_id.get(schema_id)
        if existing is not None and existing.is_placeholder:
            self._apply_model_filters(node, target)
            self._apply_schema_filters(node, target)
            self._node_by_id[schema_id] = node
        return SchemaNode.reference(schema_id)

    def _apply_model_filters(self, node: SchemaNode, descriptor: TypeDescriptor) -> None:
        self._run_filters(self.options.model_filters, node, descriptor)

    def _apply_schema_filters(self, node: SchemaNode, descriptor: TypeDescriptor) -> None:
        self._run_filters(self.options.schema_filters, node, descriptor)

    def _run_filters(self, chain: list, node: SchemaNode, descriptor: TypeDescriptor) -> None:
        for filter_obj in chain:
            try:
                filter_obj.apply(node, descriptor, self)
            except BuildError:
                raise
            except Exception as exc:
                raise FilterError(filter_obj, exc, descriptor) from exc

    def _check_collisions(self) -> None:
        for schema_id, identities in self._id_collisions.items():
            if len(identities) > 1:
                raise DuplicateSchemaIdError(schema_id, identities)

    # ------------------------------------------------------------------
    # Structural compilation
    # ------------------------------------------------------------------

    def _compile_object(self, target: TypeDescriptor) -> SchemaNode:
        properties: dict[str, SchemaNode] = {}
        required: list[str] = []

        self._add_properties(target, properties, required, inherited=False)
        for ancestor in target.base_chain():
            if ancestor.unwrap_nullable().kind is TypeKind.OBJECT:
                self.get_or_register(ancestor)
            self._add_properties(ancestor, properties, required, inherited=True)

        node = SchemaNode(type="object", properties=properties)
        if required:
            node.required = required
        if target.description:
            node.description = target.description
        node.xml = XmlInfo(name=target.xml_name or target.name)
        return node

    def _add_properties(
        self,
        owner: TypeDescriptor,
        properties: dict[str, SchemaNode],
        required: list[str],
        *,
        inherited: bool,
    ) -> None:
        merge = inherited and self.options.property_precedence == "merge"
        for prop in owner.properties:
            if prop.ignored:
                continue
            if prop.obsolete and self.options.ignore_obsolete_properties:
                continue

            name = prop.json_name
            if name in properties:
                if merge:
                    _merge_unset(properties[name], self._compile_property(prop))
                    if prop.constraints.required and name not in required:
                        required.append(name)
                continue

            properties[name] = self._compile_property(prop)
            if prop.constraints.required:
                required.append(name)

    def _compile_property(self, prop: PropertyDescriptor) -> SchemaNode:
        target = prop.type.unwrap_nullable()
        if (
            prop.enum_as_string
            and target.kind is TypeKind.ENUM
            and self.options.mapped_schema(target) is None
        ):
            schema = leaf_schema(
                prop.type,
                enums_as_strings=True,
                camel_case_enums=self.options.camel_case_enum_strings,
            )
            if schema is None:
                raise UnsupportedTypeError(target, f"property '{prop.name}' cannot be written as a string enum")
            self._apply_schema_filters(schema, prop.type)
        else:
            schema = self.get_or_register(prop.type)

        constraints = prop.constraints
        is_array = schema.type == "array"
        for field_name in _CONSTRAINT_FIELDS:
            value = getattr(constraints, field_name)
            if value is None:
                continue
            if is_array and field_name == "min_length":
                schema.min_items = value
            elif is_array and field_name == "max_length":
                schema.max_items = value
            else:
                setattr(schema, field_name, value)
        if constraints.enum is not None:
            schema.enum = list(constraints.enum)
        if prop.description:
            schema.description = prop.description
        if prop.read_only:
            schema.read_only = True
        if prop.nullable and not schema.is_reference:
            schema.nullable = True
        return schema

    def _compile_array(self, target: TypeDescriptor) -> SchemaNode:
        if target.element is None:
            raise UnsupportedTypeError(target, "array declares no element type")

        items = self.get_or_register(target.element)
        node = SchemaNode(type="array", items=items)
        if target.unique_items:
            node.unique_items = True

        element = target.element.unwrap_nullable()
        if items.is_reference or element.kind is TypeKind.ENUM:
            node.xml = XmlInfo(name=element.xml_name or element.name, wrapped=True)
        return node

    def _compile_dictionary(self, target: TypeDescriptor) -> SchemaNode:
        if target.value_type is None:
            raise UnsupportedTypeError(target, "dictionary declares no value type")

        key_type = target.key_type.unwrap_nullable() if target.key_type is not None else None
        if key_type is not None and key_type.kind is TypeKind.ENUM:
            properties = {
                member.name: self.get_or_register(target.value_type)
                for member in key_type.enum_members
            }
            return SchemaNode(type="object", properties=properties)

        return SchemaNode(
            type="object",
            additional_properties=self.get_or_register(target.value_type),
        )


def _merge_unset(derived: SchemaNode, base: SchemaNode) -> None:
    """Copy fields set on ``base`` but unset on ``derived``."""
    for field_name in _MERGEABLE_FIELDS:
        if getattr(derived, field_name) is None:
            value = getattr(base, field_name)
            if value is not None:
                setattr(derived, field_name, value)
