# tests/test_options.py
"""Tests for SchemaOptions validation and seeding from config."""

import pytest


class NeedsTypeName:
    requires = ("TypeNameFilter",)

    def apply(self, schema, descriptor, registry):
        pass


class TestSchemaOptions:

    def test_defaults(self):
        from schemata.options import SchemaOptions

        options = SchemaOptions()
        assert options.describe_all_enums_as_strings is False
        assert options.use_full_type_names is False
        assert options.property_precedence == "derived"
        assert options.ref_prefix == "#/definitions/"
        assert options.model_filters == []
        assert options.document_filters == []

    def test_from_config(self):
        from schemata.config import SchemataConfig
        from schemata.options import SchemaOptions

        cfg = SchemataConfig(
            describe_all_enums_as_strings=True,
            use_full_type_names=True,
            property_precedence="merge",
        )
        options = SchemaOptions.from_config(cfg)
        assert options.describe_all_enums_as_strings is True
        assert options.use_full_type_names is True
        assert options.property_precedence == "merge"

    def test_invalid_precedence(self):
        from schemata.errors import ConfigurationError
        from schemata.options import SchemaOptions

        with pytest.raises(ConfigurationError, match="property_precedence"):
            SchemaOptions(property_precedence="base")

    def test_naming_function_must_be_callable(self):
        from schemata.errors import ConfigurationError
        from schemata.options import SchemaOptions

        with pytest.raises(ConfigurationError, match="callable"):
            SchemaOptions().schema_id("Order")

    def test_resolver_uses_naming_function(self):
        from schemata.descriptors import TypeDescriptor
        from schemata.options import SchemaOptions

        options = SchemaOptions().schema_id(lambda t: t.name.upper())
        assert options.resolver().resolve(TypeDescriptor("Order")) == "ORDER"


class TestTypeMappings:

    def test_factory_must_be_callable(self):
        from schemata.errors import ConfigurationError
        from schemata.options import SchemaOptions

        with pytest.raises(ConfigurationError):
            SchemaOptions().map_type("guid", {"type": "string"})

    def test_identity_is_required(self):
        from schemata.errors import ConfigurationError
        from schemata.options import SchemaOptions

        with pytest.raises(ConfigurationError, match="identity"):
            SchemaOptions().map_type("", lambda: {"type": "string"})

    def test_each_lookup_gets_a_fresh_copy(self):
        from schemata.descriptors import primitive
        from schemata.nodes import SchemaNode
        from schemata.options import SchemaOptions

        shared = SchemaNode(type="string", format="guid")
        options = SchemaOptions().map_type("guid", lambda: shared)

        first = options.mapped_schema(primitive("guid"))
        first.description = "mutated"

        assert options.mapped_schema(primitive("guid")).description is None
        assert shared.description is None

    def test_unmapped_type(self):
        from schemata.descriptors import primitive
        from schemata.options import SchemaOptions

        assert SchemaOptions().mapped_schema(primitive("guid")) is None


class TestFilterRegistration:

    def test_class_instead_of_instance_is_rejected(self):
        from schemata.errors import ConfigurationError
        from schemata.filters import TypeNameFilter
        from schemata.options import SchemaOptions

        with pytest.raises(ConfigurationError, match="instance"):
            SchemaOptions().add_model_filter(TypeNameFilter)

    def test_filter_without_apply_is_rejected(self):
        from schemata.errors import ConfigurationError
        from schemata.options import SchemaOptions

        with pytest.raises(ConfigurationError, match="apply"):
            SchemaOptions().add_document_filter(object())

    def test_ordering_dependency_enforced(self):
        from schemata.errors import ConfigurationError
        from schemata.filters import TypeNameFilter
        from schemata.options import SchemaOptions

        with pytest.raises(ConfigurationError, match="TypeNameFilter"):
            SchemaOptions().add_model_filter(NeedsTypeName())

        options = SchemaOptions().add_model_filter(TypeNameFilter()).add_model_filter(NeedsTypeName())
        assert [type(f).__name__ for f in options.model_filters] == ["TypeNameFilter", "NeedsTypeName"]

    def test_chains_are_independent(self):
        from schemata.errors import ConfigurationError
        from schemata.filters import TypeNameFilter
        from schemata.options import SchemaOptions

        options = SchemaOptions().add_model_filter(TypeNameFilter())
        with pytest.raises(ConfigurationError):
            options.add_document_filter(NeedsTypeName())
