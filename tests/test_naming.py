# tests/test_naming.py
"""Tests for schema id resolution."""

import pytest


def _system_string():
    from schemata.descriptors import TypeDescriptor, TypeKind

    return TypeDescriptor("String", namespace="System", kind=TypeKind.PRIMITIVE)


class TestFriendlyId:

    def test_short_name_by_default(self):
        from schemata.descriptors import TypeDescriptor
        from schemata.naming import friendly_id

        assert friendly_id(TypeDescriptor("Order", namespace="shop.sales")) == "Order"

    def test_full_name_mode(self):
        from schemata.descriptors import TypeDescriptor
        from schemata.naming import friendly_id

        order = TypeDescriptor("Order", namespace="shop.sales")
        assert friendly_id(order, full_name=True) == "shop.sales.Order"

    def test_generic_arguments_in_brackets(self):
        from schemata.naming import friendly_id
        from sample_types import container_of

        assert friendly_id(container_of(_system_string())) == "Container[String]"

    def test_nested_generic_arguments(self):
        from schemata.descriptors import TypeDescriptor, primitive
        from schemata.naming import friendly_id

        pair = TypeDescriptor(
            "Pair",
            namespace="shop",
            generic_arguments=[primitive("int32"), _system_string()],
        )
        outer = TypeDescriptor("Envelope", namespace="shop", generic_arguments=[pair])
        assert friendly_id(outer) == "Envelope[Pair[int32,String]]"
        assert friendly_id(outer, full_name=True) == "shop.Envelope[shop.Pair[int32,System.String]]"

    def test_nested_type_keeps_declaring_type(self):
        from schemata.descriptors import TypeDescriptor
        from schemata.naming import friendly_id

        outer = TypeDescriptor("Requests", namespace="shop")
        inner = TypeDescriptor("Blog", declaring_type=outer)
        assert friendly_id(inner) == "Blog"
        assert friendly_id(inner, full_name=True) == "shop.Requests.Blog"

    def test_nullable_wrapper_uses_wrapped_name(self):
        from schemata.descriptors import TypeDescriptor, nullable
        from schemata.naming import friendly_id

        assert friendly_id(nullable(TypeDescriptor("Point", namespace="geo"))) == "Point"


class TestSchemaIdResolver:

    def test_default_strategy(self):
        from schemata.descriptors import TypeDescriptor
        from schemata.naming import SchemaIdResolver

        resolver = SchemaIdResolver()
        assert resolver.resolve(TypeDescriptor("Order", namespace="shop")) == "Order"
        assert resolver.tolerates_collisions is False

    def test_full_names_tolerate_collisions(self):
        from schemata.naming import SchemaIdResolver

        assert SchemaIdResolver(use_full_type_names=True).tolerates_collisions is True

    def test_naming_function_takes_precedence(self):
        from schemata.descriptors import TypeDescriptor
        from schemata.naming import SchemaIdResolver

        resolver = SchemaIdResolver(
            use_full_type_names=True,
            naming_function=lambda t: f"Custom{t.name}",
        )
        assert resolver.resolve(TypeDescriptor("Order", namespace="shop")) == "CustomOrder"

    def test_naming_function_must_return_text(self):
        from schemata.descriptors import TypeDescriptor
        from schemata.errors import BuildError
        from schemata.naming import SchemaIdResolver

        resolver = SchemaIdResolver(naming_function=lambda t: "  ")
        with pytest.raises(BuildError, match="shop.Order"):
            resolver.resolve(TypeDescriptor("Order", namespace="shop"))

        resolver = SchemaIdResolver(naming_function=lambda t: None)
        with pytest.raises(BuildError, match="non-empty string"):
            resolver.resolve(TypeDescriptor("Order", namespace="shop"))
