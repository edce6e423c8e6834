# schemata/errors.py
"""Exception hierarchy for schema compilation.

Configuration problems are raised while options are assembled; everything
else is a :class:`BuildError` that aborts the build in progress.  Each
build error names the type or filter that caused it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable

if TYPE_CHECKING:
    from .descriptors import TypeDescriptor


class SchemataError(Exception):
    """Base class for all schemata errors."""


class ConfigurationError(SchemataError):
    """Invalid options: bad naming function, filter, or type mapping."""


class BuildError(SchemataError):
    """A document build failed; no partial definitions are valid."""


class DuplicateSchemaIdError(BuildError):
    """Two distinct type identities resolved to the same schema id."""

    def __init__(self, schema_id: str, identities: Iterable[str]):
        self.schema_id = schema_id
        self.identities = sorted(identities)
        super().__init__(
            f"Conflicting schema id '{schema_id}' for types "
            f"{', '.join(self.identities)}. Enable full type names in schema ids "
            "or supply a naming function that tells them apart."
        )


class UnsupportedTypeError(BuildError):
    """A descriptor declares a shape the compiler cannot turn into a schema."""

    def __init__(self, descriptor: "TypeDescriptor", reason: str):
        self.descriptor = descriptor
        self.reason = reason
        super().__init__(f"Unsupported type '{descriptor.identity}': {reason}")


class FilterError(BuildError):
    """A model or document filter raised while the build was running."""

    def __init__(
        self,
        filter_obj: Any,
        cause: BaseException,
        descriptor: "TypeDescriptor | None" = None,
    ):
        self.filter = filter_obj
        self.descriptor = descriptor
        self.cause = cause
        name = type(filter_obj).__name__
        target = f" while processing '{descriptor.identity}'" if descriptor is not None else ""
        super().__init__(f"Filter {name} failed{target}: {cause}")


class RegistryFrozenError(BuildError):
    """A completed registry was asked to register a type it has not seen."""


class DocumentationSourceError(BuildError):
    """The documentation annotation source could not be read."""


class DescriptionError(SchemataError, TypeError):
    """A Python annotation could not be described as a type descriptor."""
