# tests/test_primitives.py
"""Tests for the primitive mapper."""


class TestMapType:

    def test_integer_family_maps_to_int32(self):
        from schemata.descriptors import primitive
        from schemata.primitives import map_type

        for name in ("byte", "sbyte", "int16", "uint16", "int32", "uint32"):
            mapping = map_type(primitive(name))
            assert (mapping.schema_type, mapping.format) == ("integer", "int32"), name
            assert mapping.is_leaf

    def test_wide_integers_map_to_int64(self):
        from schemata.descriptors import primitive
        from schemata.primitives import map_type

        assert map_type(primitive("int64"))[:2] == ("integer", "int64")
        assert map_type(primitive("uint64"))[:2] == ("integer", "int64")

    def test_floating_point(self):
        from schemata.descriptors import primitive
        from schemata.primitives import map_type

        assert map_type(primitive("single"))[:2] == ("number", "float")
        assert map_type(primitive("double"))[:2] == ("number", "double")
        assert map_type(primitive("decimal"))[:2] == ("number", "double")

    def test_strings_dates_and_ids(self):
        from schemata.descriptors import primitive
        from schemata.primitives import map_type

        assert map_type(primitive("string"))[:2] == ("string", None)
        assert map_type(primitive("char"))[:2] == ("string", None)
        assert map_type(primitive("datetime"))[:2] == ("string", "date-time")
        assert map_type(primitive("datetimeoffset"))[:2] == ("string", "date-time")
        assert map_type(primitive("guid"))[:2] == ("string", "uuid")
        assert map_type(primitive("timespan"))[:2] == ("string", None)

    def test_lookup_ignores_case(self):
        from schemata.descriptors import TypeDescriptor, TypeKind
        from schemata.primitives import map_type

        system_string = TypeDescriptor("String", namespace="System", kind=TypeKind.PRIMITIVE)
        assert map_type(system_string)[:2] == ("string", None)

    def test_boolean(self):
        from schemata.descriptors import primitive
        from schemata.primitives import map_type

        assert map_type(primitive("boolean"))[:2] == ("boolean", None)

    def test_unknown_primitive_is_not_a_leaf(self):
        from schemata.descriptors import primitive
        from schemata.primitives import map_type

        mapping = map_type(primitive("Widget"))
        assert mapping.is_leaf is False
        assert mapping.schema_type is None

    def test_object_types_are_not_leaves(self):
        from schemata.descriptors import TypeDescriptor
        from schemata.primitives import map_type

        assert map_type(TypeDescriptor("Order", namespace="shop")).is_leaf is False

    def test_nullable_primitive_is_flagged(self):
        from schemata.descriptors import nullable, primitive
        from schemata.primitives import map_type

        mapping = map_type(nullable(primitive("int32")))
        assert mapping == ("integer", "int32", True, True)

    def test_byte_array_is_base64_string(self):
        from schemata.descriptors import array_of, primitive
        from schemata.primitives import map_type

        assert map_type(array_of(primitive("byte")))[:3] == ("string", "byte", True)

    def test_other_arrays_are_not_leaves(self):
        from schemata.descriptors import array_of, primitive
        from schemata.primitives import map_type

        assert map_type(array_of(primitive("int32"))).is_leaf is False


class TestEnumMapping:

    def test_integer_enum_default(self):
        from schemata.descriptors import enum_type
        from schemata.primitives import map_type

        colour = enum_type("Colour", {"Red": 2, "Green": 4})
        assert map_type(colour)[:2] == ("integer", "int32")

    def test_enum_string_mode(self):
        from schemata.descriptors import enum_type
        from schemata.primitives import map_type

        colour = enum_type("Colour", {"Red": 2, "Green": 4})
        assert map_type(colour, enums_as_strings=True)[:2] == ("string", None)

    def test_string_valued_enum_is_always_string(self):
        from schemata.descriptors import enum_type
        from schemata.primitives import is_string_valued, map_type

        status = enum_type("Status", {"Active": "active", "Retired": "retired"})
        assert is_string_valued(status)
        assert map_type(status)[:2] == ("string", None)

    def test_literals_follow_mode(self):
        from schemata.descriptors import enum_type
        from schemata.primitives import enum_literals

        kind = enum_type("ProductType", {"Publication": 2, "Album": 4})
        assert enum_literals(kind, as_strings=False) == [2, 4]
        assert enum_literals(kind, as_strings=True) == ["Publication", "Album"]
        assert enum_literals(kind, as_strings=True, camel_case=True) == ["publication", "album"]

    def test_camel_case_keeps_inner_capitals(self):
        from schemata.descriptors import enum_type
        from schemata.primitives import enum_literals

        kind = enum_type("Format", {"HTMLPage": 0, "PlainText": 1, "ID": 2})
        assert enum_literals(kind, as_strings=True, camel_case=True) == ["htmlPage", "plainText", "id"]


class TestLeafSchema:

    def test_enum_leaf_carries_literals(self):
        from schemata.descriptors import enum_type
        from schemata.primitives import leaf_schema

        node = leaf_schema(enum_type("Colour", {"Red": 2, "Green": 4}))
        assert node.to_dict() == {"type": "integer", "format": "int32", "enum": [2, 4]}

    def test_nullable_leaf(self):
        from schemata.descriptors import nullable, primitive
        from schemata.primitives import leaf_schema

        node = leaf_schema(nullable(primitive("double")))
        assert node.to_dict() == {"type": "number", "format": "double", "x-nullable": True}

    def test_complex_type_has_no_leaf(self):
        from schemata.descriptors import TypeDescriptor
        from schemata.primitives import leaf_schema

        assert leaf_schema(TypeDescriptor("Order")) is None
