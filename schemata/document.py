# schemata/document.py
"""Swagger document assembly on top of the schema registry.

The assembler walks the operations supplied by an :class:`ApiExplorer`,
asks a fresh :class:`~schemata.registry.SchemaRegistry` for every parameter
and response schema, and runs the document filters.  While they run,
``document["definitions"]`` is the registry's live table of
:class:`~schemata.nodes.SchemaNode` objects; it is rendered to plain dicts
only after the registry completes.  Discovery of operations is the
explorer's business; :class:`StaticApiExplorer` simply holds a list.
"""

from __future__ import annotations

import copy
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Protocol, runtime_checkable

from .descriptors import TypeDescriptor
from .errors import BuildError, FilterError
from .nodes import SchemaNode, definitions_to_dict
from .options import SchemaOptions
from .registry import SchemaRegistry
from .utils.logging import log_build_complete, log_build_failure, log_build_start

logger = logging.getLogger(__name__)

__all__ = [
    "Parameter",
    "Operation",
    "ApiExplorer",
    "StaticApiExplorer",
    "DocumentBuilder",
]


@dataclass
class Parameter:
    """One operation parameter and its declared type."""

    name: str
    type: TypeDescriptor
    location: str = "query"  # query | path | header | body | formData
    required: bool = True
    description: Optional[str] = None
    default: Any = None


@dataclass
class Operation:
    """One HTTP operation as reported by the API surface explorer."""

    path: str
    method: str
    parameters: list[Parameter] = field(default_factory=list)
    response: Optional[TypeDescriptor] = None
    operation_id: Optional[str] = None
    summary: Optional[str] = None


@runtime_checkable
class ApiExplorer(Protocol):
    """Supplies operations with their parameter and response types."""

    def operations(self) -> Iterable[Operation]:
        ...


class StaticApiExplorer:
    """Explorer over a fixed list of operations."""

    def __init__(self, operations: Iterable[Operation] = ()):
        self._operations = list(operations)

    def add(self, operation: Operation) -> "StaticApiExplorer":
        self._operations.append(operation)
        return self

    def operations(self) -> list[Operation]:
        return list(self._operations)


class DocumentBuilder:
    """Builds Swagger 2.0 documents, one registry per build.

    With ``cache=True`` the first completed document is kept and handed
    out (as a copy) by later calls; its registry stays frozen.
    """

    def __init__(self, options: Optional[SchemaOptions] = None, *, cache: bool = False):
        self.options = options if options is not None else SchemaOptions.from_config()
        self.cache = cache
        self._cached: Optional[dict[str, Any]] = None
        self.registry: Optional[SchemaRegistry] = None

    def build(
        self,
        explorer: ApiExplorer,
        *,
        title: str = "API",
        version: str = "v1",
    ) -> dict[str, Any]:
        if self._cached is not None:
            return copy.deepcopy(self._cached)

        started = time.perf_counter()
        log_build_start(logger, title, version)
        registry = SchemaRegistry(self.options)
        try:
            document = self._assemble(explorer, registry, title, version)
        except BuildError as exc:
            log_build_failure(logger, title, exc)
            raise

        self.registry = registry
        if self.cache:
            self._cached = copy.deepcopy(document)
        log_build_complete(
            logger,
            title,
            paths=len(document["paths"]),
            definitions=len(document["definitions"]),
            duration_seconds=time.perf_counter() - started,
        )
        return document

    def _assemble(
        self,
        explorer: ApiExplorer,
        registry: SchemaRegistry,
        title: str,
        version: str,
    ) -> dict[str, Any]:
        paths: dict[str, dict[str, Any]] = {}
        for operation in explorer.operations():
            path_item = paths.setdefault(operation.path, {})
            path_item[operation.method.lower()] = self._operation(operation, registry)

        document: dict[str, Any] = {
            "swagger": "2.0",
            "info": {"title": title, "version": version},
            "paths": paths,
            # Live SchemaNode table until the filters have run.
            "definitions": registry.table,
        }

        for filter_obj in self.options.document_filters:
            try:
                filter_obj.apply(document, registry, explorer)
            except BuildError:
                raise
            except Exception as exc:
                raise FilterError(filter_obj, exc) from exc

        definitions = registry.complete()
        document["definitions"] = definitions_to_dict(definitions, self.options.ref_prefix)
        return document

    def _operation(self, operation: Operation, registry: SchemaRegistry) -> dict[str, Any]:
        entry: dict[str, Any] = {}
        if operation.operation_id:
            entry["operationId"] = operation.operation_id
        if operation.summary:
            entry["summary"] = operation.summary

        parameters = [self._parameter(p, registry) for p in operation.parameters]
        if parameters:
            entry["parameters"] = parameters

        if operation.response is None:
            entry["responses"] = {"204": {"description": "No Content"}}
        else:
            schema = registry.get_or_register(operation.response)
            entry["responses"] = {
                "200": {"description": "OK", "schema": self._render(schema)}
            }
        return entry

    def _parameter(self, parameter: Parameter, registry: SchemaRegistry) -> dict[str, Any]:
        schema = registry.get_or_register(parameter.type)
        location = parameter.location
        if location != "body" and (schema.is_reference or schema.type == "object"):
            location = "body"

        rendered: dict[str, Any] = {
            "name": parameter.name,
            "in": location,
            "required": parameter.required or location == "path",
        }
        if parameter.description:
            rendered["description"] = parameter.description
        if parameter.default is not None:
            rendered["default"] = parameter.default

        if location == "body":
            rendered["schema"] = self._render(schema)
        else:
            rendered.update(self._render(schema))
            if schema.type == "array":
                rendered["collectionFormat"] = "multi"
        return rendered

    def _render(self, schema: SchemaNode) -> dict[str, Any]:
        return schema.to_dict(self.options.ref_prefix)
