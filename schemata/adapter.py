# schemata/adapter.py
"""Describe Python annotations as :class:`TypeDescriptor` graphs.

This is the descriptor boundary for Python code: pydantic models,
dataclasses, enums, plain annotated classes and ``typing`` constructs are
turned into normalised descriptors the compiler understands.

Public API
----------
- :func:`describe`: describe one annotation with a fresh adapter.
- :class:`DescriptorAdapter`: a reusable adapter with a memo table, so one
  class always yields one descriptor and recursive classes terminate.

Field metadata is read from pydantic ``FieldInfo`` (``ge``/``le``/``gt``/
``lt``, ``min_length``/``max_length``, ``pattern``, ``description``,
``examples``, ``alias``, ``deprecated``, ``exclude``) or, for dataclasses,
from ``field(metadata={...})`` using the same key names.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import datetime as dt
import inspect
import types
import typing
import uuid
from decimal import Decimal
from enum import Enum
from typing import Any, Literal, Optional, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic_core import PydanticUndefined

from .descriptors import (
    Constraints,
    EnumMember,
    PropertyDescriptor,
    TypeDescriptor,
    TypeKind,
    array_of,
    dictionary_of,
    nullable,
    primitive,
)
from .errors import DescriptionError

__all__ = ["DescriptorAdapter", "describe"]

_PRIMITIVES: dict[Any, str] = {
    bool: "boolean",
    int: "int64",
    float: "double",
    str: "string",
    bytes: "bytes",
    bytearray: "bytes",
    Decimal: "decimal",
    dt.datetime: "datetime",
    dt.date: "date",
    dt.time: "string",
    dt.timedelta: "timespan",
    uuid.UUID: "uuid",
    object: "object",
}

_SEQUENCE_ORIGINS = (
    list,
    tuple,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Iterable,
    collections.abc.Collection,
)
_SET_ORIGINS = (set, frozenset, collections.abc.Set, collections.abc.MutableSet)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)

_METADATA_BOUNDS = (
    # (attribute on annotated-types / pydantic metadata, constraint, exclusive)
    ("ge", "minimum", False),
    ("gt", "minimum", True),
    ("le", "maximum", False),
    ("lt", "maximum", True),
    ("min_length", "min_length", None),
    ("max_length", "max_length", None),
    ("pattern", "pattern", None),
)


def _qualified(cls: type) -> tuple[str, str]:
    """Return ``(namespace, name)``; nested classes keep their outer names."""
    parts = cls.__qualname__.replace(".<locals>", "").split(".")
    namespace = ".".join([cls.__module__, *parts[:-1]])
    return namespace, parts[-1]


def _class_doc(cls: type) -> Optional[str]:
    doc = cls.__dict__.get("__doc__")
    if not doc:
        return None
    # dataclasses synthesise "Name(field: type, ...)" when no docstring exists
    if dataclasses.is_dataclass(cls) and doc.startswith(f"{cls.__name__}("):
        return None
    return inspect.cleandoc(doc)


def _is_model(cls: Any) -> bool:
    return isinstance(cls, type) and issubclass(cls, BaseModel) and cls is not BaseModel


def _plain_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class DescriptorAdapter:
    """Describes Python types, memoising one descriptor per class."""

    def __init__(self) -> None:
        self._cache: dict[Any, TypeDescriptor] = {}

    def describe(self, tp: Any) -> TypeDescriptor:
        if isinstance(tp, str):
            raise DescriptionError(f"Unresolved forward reference {tp!r}; pass the type itself")

        origin = get_origin(tp)
        args = get_args(tp)

        if tp is Any:
            return primitive("object")
        if isinstance(tp, TypeVar):
            return TypeDescriptor(name=tp.__name__, kind=TypeKind.TYPE_PARAMETER, key=f"~{tp.__name__}")
        if origin is typing.Annotated:
            return self.describe(args[0])
        if origin is Union or origin is types.UnionType:
            return self._describe_union(args)
        if origin is Literal:
            return self._describe_literal(args)
        if tp in _PRIMITIVES:
            return primitive(_PRIMITIVES[tp])

        if origin in _SET_ORIGINS or tp in (set, frozenset):
            return array_of(self._element(args), unique=True)
        if origin in _MAPPING_ORIGINS or tp is dict:
            key = self.describe(args[0]) if args else primitive("string")
            value = self.describe(args[1]) if len(args) > 1 else primitive("object")
            return dictionary_of(key, value)
        if origin in _SEQUENCE_ORIGINS or tp in (list, tuple):
            return array_of(self._tuple_element(args) if origin is tuple else self._element(args))

        if isinstance(tp, type):
            if tp in self._cache:
                return self._cache[tp]
            if issubclass(tp, Enum):
                return self._describe_enum(tp)
            if issubclass(tp, (list, dict)) and not _is_model(tp):
                return self._describe_named_container(tp)
            return self._describe_class(tp)

        raise DescriptionError(f"Cannot describe {tp!r}")

    # -- typing constructs -------------------------------------------------

    def _element(self, args: tuple[Any, ...]) -> TypeDescriptor:
        return self.describe(args[0]) if args else primitive("object")

    def _tuple_element(self, args: tuple[Any, ...]) -> TypeDescriptor:
        if len(args) == 2 and args[1] is Ellipsis:
            return self.describe(args[0])
        distinct = list(dict.fromkeys(args))
        if len(distinct) == 1:
            return self.describe(distinct[0])
        if not distinct:
            return primitive("object")
        return self._describe_union(tuple(distinct))

    def _describe_union(self, args: tuple[Any, ...]) -> TypeDescriptor:
        members = [a for a in args if a is not type(None)]
        if len(members) == 1:
            inner = self.describe(members[0])
            return nullable(inner) if len(members) < len(args) else inner
        return TypeDescriptor(
            name="Union",
            kind=TypeKind.UNION,
            generic_arguments=[self.describe(a) for a in members],
        )

    def _describe_literal(self, values: tuple[Any, ...]) -> TypeDescriptor:
        return TypeDescriptor(
            name="Literal",
            kind=TypeKind.ENUM,
            key=f"Literal[{','.join(repr(v) for v in values)}]",
            enum_members=[EnumMember(str(v), v) for v in values],
        )

    # -- classes -----------------------------------------------------------

    def _describe_enum(self, cls: type[Enum]) -> TypeDescriptor:
        namespace, name = _qualified(cls)
        descriptor = TypeDescriptor(
            name=name,
            namespace=namespace,
            kind=TypeKind.ENUM,
            key=f"{namespace}.{name}",
            enum_members=[EnumMember(m.name, m.value) for m in cls],
            description=_class_doc(cls),
        )
        self._cache[cls] = descriptor
        return descriptor

    def _describe_named_container(self, cls: type) -> TypeDescriptor:
        """``class Tree(dict[str, "Tree"])`` and friends: named, possibly recursive."""
        namespace, name = _qualified(cls)
        is_dict = issubclass(cls, dict)
        descriptor = TypeDescriptor(
            name=name,
            namespace=namespace,
            kind=TypeKind.DICTIONARY if is_dict else TypeKind.ARRAY,
            key=f"{namespace}.{name}",
        )
        self._cache[cls] = descriptor

        hints = {}
        for base in getattr(cls, "__orig_bases__", ()):
            if get_origin(base) in (dict, list):
                hints = self._resolve_args(base, cls)
                break
        if is_dict:
            descriptor.key_type = hints[0] if hints else primitive("string")
            descriptor.value_type = hints[1] if len(hints) > 1 else primitive("object")
        else:
            descriptor.element = hints[0] if hints else primitive("object")
        return descriptor

    def _resolve_args(self, base: Any, owner: type) -> list[TypeDescriptor]:
        """Describe the arguments of ``base``, resolving forward references in ``owner``'s module."""
        args = get_args(base)
        module = inspect.getmodule(owner)
        holder = type("_ForwardArgs", (), {"__annotations__": {f"arg{i}": a for i, a in enumerate(args)}})
        try:
            hints = typing.get_type_hints(
                holder,
                globalns=vars(module) if module else {},
                localns={owner.__name__: owner},
            )
        except NameError as exc:
            raise DescriptionError(f"Cannot resolve type arguments of {owner.__qualname__}: {exc}") from exc
        return [self.describe(hints[f"arg{i}"]) for i in range(len(args))]

    def _describe_class(self, cls: type) -> TypeDescriptor:
        meta = getattr(cls, "__pydantic_generic_metadata__", None) or {}
        generic_origin = meta.get("origin")
        decl = generic_origin or cls
        namespace, name = _qualified(decl)

        descriptor = TypeDescriptor(
            name=name,
            namespace=namespace,
            kind=TypeKind.OBJECT,
            description=_class_doc(decl),
        )
        self._cache[cls] = descriptor

        if generic_origin is not None:
            descriptor.generic_arguments = [self.describe(a) for a in meta.get("args", ())]
        else:
            descriptor.key = f"{namespace}.{name}"

        descriptor.base = self._describe_base(decl)
        own = set(inspect.get_annotations(decl))

        if _is_model(cls):
            descriptor.properties = self._model_properties(cls, own)
        elif dataclasses.is_dataclass(cls):
            descriptor.properties = self._dataclass_properties(cls, own)
        else:
            descriptor.properties = self._plain_properties(cls, own)
        return descriptor

    def _describe_base(self, cls: type) -> Optional[TypeDescriptor]:
        for base in cls.__mro__[1:]:
            if base in (object, BaseModel, typing.Generic):
                continue
            if _is_model(base) or dataclasses.is_dataclass(base) or inspect.get_annotations(base):
                return self.describe(base)
        return None

    # -- properties --------------------------------------------------------

    def _model_properties(self, cls: type[BaseModel], own: set[str]) -> list[PropertyDescriptor]:
        properties = []
        for name, info in cls.model_fields.items():
            if name not in own:
                continue
            constraints = Constraints(required=info.is_required())
            for item in info.metadata:
                _apply_bounds(constraints, lambda attr, item=item: getattr(item, attr, None))
            if info.default is not PydanticUndefined and info.default is not None:
                constraints.default = _plain_value(info.default)
            if info.examples:
                constraints.example = info.examples[0]

            extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
            type_descriptor = self.describe(info.annotation)
            properties.append(
                PropertyDescriptor(
                    name=name,
                    type=type_descriptor,
                    serialized_name=info.serialization_alias or info.alias,
                    nullable=type_descriptor.kind is TypeKind.NULLABLE,
                    constraints=constraints,
                    description=info.description,
                    read_only=bool(extra.get("readOnly")),
                    ignored=info.exclude is True,
                    obsolete=bool(getattr(info, "deprecated", None)),
                )
            )
        return properties

    def _dataclass_properties(self, cls: type, own: set[str]) -> list[PropertyDescriptor]:
        hints = typing.get_type_hints(cls, include_extras=True)
        properties = []
        for f in dataclasses.fields(cls):
            if f.name not in own:
                continue
            meta = f.metadata
            has_default = (
                f.default is not dataclasses.MISSING
                or f.default_factory is not dataclasses.MISSING
            )
            constraints = Constraints(required=not has_default)
            _apply_bounds(constraints, lambda attr: meta.get(attr))
            for key in ("minimum", "maximum", "example", "enum"):
                if meta.get(key) is not None:
                    setattr(constraints, key, meta[key])
            if f.default is not dataclasses.MISSING and f.default is not None:
                constraints.default = _plain_value(f.default)

            type_descriptor = self.describe(hints[f.name])
            properties.append(
                PropertyDescriptor(
                    name=f.name,
                    type=type_descriptor,
                    serialized_name=meta.get("alias"),
                    nullable=type_descriptor.kind is TypeKind.NULLABLE,
                    constraints=constraints,
                    description=meta.get("description"),
                    read_only=bool(meta.get("read_only")),
                    ignored=bool(meta.get("ignore")),
                    obsolete=bool(meta.get("deprecated")),
                )
            )
        return properties

    def _plain_properties(self, cls: type, own: set[str]) -> list[PropertyDescriptor]:
        hints = typing.get_type_hints(cls, include_extras=True)
        properties = []
        for name in inspect.get_annotations(cls):
            if name.startswith("_") or typing.get_origin(hints.get(name)) is typing.ClassVar:
                continue
            type_descriptor = self.describe(hints[name])
            properties.append(
                PropertyDescriptor(
                    name=name,
                    type=type_descriptor,
                    nullable=type_descriptor.kind is TypeKind.NULLABLE,
                )
            )
        return properties


def _apply_bounds(constraints: Constraints, lookup: Any) -> None:
    for attr, target, exclusive in _METADATA_BOUNDS:
        value = lookup(attr)
        if value is None:
            continue
        setattr(constraints, target, value)
        if exclusive:
            setattr(constraints, f"exclusive_{target}", True)


def describe(tp: Any) -> TypeDescriptor:
    """Describe ``tp`` with a fresh :class:`DescriptorAdapter`."""
    return DescriptorAdapter().describe(tp)
