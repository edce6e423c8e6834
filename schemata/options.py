# schemata/options.py
"""Build-wide options for the schema compiler.

Flags are seeded from :class:`schemata.config.SchemataConfig`; callables
(naming function, explicit type mappings, filters) are attached here and
validated as they are added, so misconfiguration fails before any build
starts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

from .config import SchemataConfig, get_config
from .descriptors import TypeDescriptor
from .errors import ConfigurationError
from .filters import filter_name
from .naming import NamingFunction, SchemaIdResolver
from .nodes import SchemaNode

SchemaFactory = Callable[[], Union[SchemaNode, dict[str, Any]]]

_PRECEDENCE = ("derived", "merge")


@dataclass
class SchemaOptions:
    """Options shared by every registration in one build."""

    describe_all_enums_as_strings: bool = False
    camel_case_enum_strings: bool = False
    use_full_type_names: bool = False
    ignore_obsolete_properties: bool = False
    property_precedence: str = "derived"
    ref_prefix: str = "#/definitions/"
    naming_function: Optional[NamingFunction] = None
    type_mappings: dict[str, SchemaFactory] = field(default_factory=dict)
    model_filters: list[Any] = field(default_factory=list)
    schema_filters: list[Any] = field(default_factory=list)
    document_filters: list[Any] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.property_precedence not in _PRECEDENCE:
            raise ConfigurationError(
                f"property_precedence must be one of {_PRECEDENCE}, "
                f"got {self.property_precedence!r}"
            )

    @classmethod
    def from_config(cls, config: Optional[SchemataConfig] = None) -> "SchemaOptions":
        cfg = config or get_config()
        return cls(
            describe_all_enums_as_strings=cfg.describe_all_enums_as_strings,
            camel_case_enum_strings=cfg.camel_case_enum_strings,
            use_full_type_names=cfg.use_full_type_names,
            ignore_obsolete_properties=cfg.ignore_obsolete_properties,
            property_precedence=cfg.property_precedence,
            ref_prefix=cfg.ref_prefix,
        )

    # -- naming ------------------------------------------------------------

    def schema_id(self, naming_function: NamingFunction) -> "SchemaOptions":
        """Replace the default naming strategy."""
        if not callable(naming_function):
            raise ConfigurationError(
                f"Naming function must be callable, got {type(naming_function).__name__}"
            )
        self.naming_function = naming_function
        return self

    def resolver(self) -> SchemaIdResolver:
        return SchemaIdResolver(
            use_full_type_names=self.use_full_type_names,
            naming_function=self.naming_function,
        )

    # -- explicit mappings -------------------------------------------------

    def map_type(
        self,
        target: Union[TypeDescriptor, str],
        factory: SchemaFactory,
    ) -> "SchemaOptions":
        """Emit ``factory()`` inline wherever ``target`` appears."""
        if not callable(factory):
            raise ConfigurationError("Type mapping factory must be callable")
        key = target.identity if isinstance(target, TypeDescriptor) else target
        if not key:
            raise ConfigurationError("Type mapping needs a type identity")
        self.type_mappings[key] = factory
        return self

    def mapped_schema(self, descriptor: TypeDescriptor) -> Optional[SchemaNode]:
        factory = self.type_mappings.get(descriptor.identity)
        if factory is None:
            return None
        produced = factory()
        if isinstance(produced, SchemaNode):
            return produced.model_copy(deep=True)
        return SchemaNode.model_validate(produced)

    # -- filters -----------------------------------------------------------

    def add_model_filter(self, filter_obj: Any) -> "SchemaOptions":
        self._check_filter(filter_obj, self.model_filters, "model")
        self.model_filters.append(filter_obj)
        return self

    def add_schema_filter(self, filter_obj: Any) -> "SchemaOptions":
        """Run ``filter_obj`` on every schema the registry emits, inline ones included."""
        self._check_filter(filter_obj, self.schema_filters, "schema")
        self.schema_filters.append(filter_obj)
        return self

    def add_document_filter(self, filter_obj: Any) -> "SchemaOptions":
        self._check_filter(filter_obj, self.document_filters, "document")
        self.document_filters.append(filter_obj)
        return self

    @staticmethod
    def _check_filter(filter_obj: Any, chain: list[Any], kind: str) -> None:
        if isinstance(filter_obj, type):
            raise ConfigurationError(
                f"Register an instance of {filter_obj.__name__}, not the class"
            )
        if not callable(getattr(filter_obj, "apply", None)):
            raise ConfigurationError(
                f"{kind.capitalize()} filter {filter_name(filter_obj)} has no apply() method"
            )
        registered = {filter_name(f) for f in chain}
        missing = [name for name in getattr(filter_obj, "requires", ()) if name not in registered]
        if missing:
            raise ConfigurationError(
                f"{kind.capitalize()} filter {filter_name(filter_obj)} must be registered after "
                f"{', '.join(missing)}"
            )
