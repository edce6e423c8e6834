# schemata/naming.py
"""Stable schema ids for complex types.

The default strategy uses the short type name; generic types append their
argument names in brackets (``Container[String]``).  With
``full_name=True`` the namespace or declaring type is kept, which is how
two same-named types in different namespaces stay apart.

A caller-supplied naming function replaces the default strategy entirely.
It may build on :func:`friendly_id`::

    options.schema_id(lambda t: friendly_id(t, full_name=True).replace("shop.", ""))
"""

from __future__ import annotations

from typing import Callable, Optional

from .descriptors import TypeDescriptor, TypeKind
from .errors import BuildError

__all__ = ["NamingFunction", "friendly_id", "SchemaIdResolver"]

NamingFunction = Callable[[TypeDescriptor], str]


def friendly_id(descriptor: TypeDescriptor, *, full_name: bool = False) -> str:
    """Default schema id for ``descriptor``."""
    if descriptor.kind is TypeKind.NULLABLE and descriptor.element is not None:
        return friendly_id(descriptor.element, full_name=full_name)

    name = descriptor.full_name if full_name else descriptor.name
    if not descriptor.generic_arguments:
        return name

    args = ",".join(friendly_id(arg, full_name=full_name) for arg in descriptor.generic_arguments)
    return f"{name}[{args}]"


class SchemaIdResolver:
    """Computes the schema id for a type under the configured strategy."""

    def __init__(
        self,
        *,
        use_full_type_names: bool = False,
        naming_function: Optional[NamingFunction] = None,
    ):
        self.use_full_type_names = use_full_type_names
        self.naming_function = naming_function

    @property
    def tolerates_collisions(self) -> bool:
        """Collisions are only accepted when fully qualified names were chosen."""
        return self.use_full_type_names

    def resolve(self, descriptor: TypeDescriptor) -> str:
        if self.naming_function is None:
            return friendly_id(descriptor, full_name=self.use_full_type_names)

        schema_id = self.naming_function(descriptor)
        if not isinstance(schema_id, str) or not schema_id.strip():
            raise BuildError(
                f"Naming function returned {schema_id!r} for type '{descriptor.identity}'; "
                "expected a non-empty string."
            )
        return schema_id
