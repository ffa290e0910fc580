"""Tests for the timestamps schema generator."""

import pytest

from docschema.core import (
    DocSchemaError,
    DuplicateTimestampNameError,
    MapperType,
    compile_schema,
    gen_timestamps_schema,
    v,
)

CREATED_OPTIONS = {"required": True, "index": True, "immutable": True}
UPDATED_OPTIONS = {"required": True, "index": True}


class TestGenTimestampsSchema:
    """Test cases for gen_timestamps_schema."""

    def test_default_fields_and_options(self):
        """Test the default createdAt/updatedAt schema."""
        definition = compile_schema(gen_timestamps_schema())

        assert list(definition.fields) == ["createdAt", "updatedAt"]
        assert dict(definition["createdAt"].options) == CREATED_OPTIONS
        assert dict(definition["updatedAt"].options) == UPDATED_OPTIONS
        assert definition["updatedAt"].options.get("immutable") is not True
        assert definition.options["timestamps"] == {
            "createdAt": "createdAt",
            "updatedAt": "updatedAt",
        }

    def test_fields_are_dates(self):
        """Test that both fields are compiled as dates."""
        definition = compile_schema(gen_timestamps_schema())

        assert definition["createdAt"].type is MapperType.DATE
        assert definition["updatedAt"].type is MapperType.DATE

    def test_only_created_at(self):
        """Test excluding updatedAt."""
        definition = compile_schema(gen_timestamps_schema("createdAt", None))

        assert dict(definition["createdAt"].options) == CREATED_OPTIONS
        assert "updatedAt" not in definition
        assert definition.options["timestamps"] == {
            "createdAt": "createdAt",
            "updatedAt": False,
        }

    def test_only_updated_at(self):
        """Test excluding createdAt."""
        definition = compile_schema(gen_timestamps_schema(None, "updatedAt"))

        assert "createdAt" not in definition
        assert dict(definition["updatedAt"].options) == UPDATED_OPTIONS
        assert definition.options["timestamps"] == {
            "createdAt": False,
            "updatedAt": "updatedAt",
        }

    def test_no_fields(self):
        """Test excluding both fields."""
        definition = compile_schema(gen_timestamps_schema(None, None))

        assert len(definition) == 0
        assert definition.options["timestamps"] == {
            "createdAt": False,
            "updatedAt": False,
        }

    def test_custom_names(self):
        """Test custom field names."""
        definition = compile_schema(gen_timestamps_schema("cd", "ud"))

        assert "createdAt" not in definition
        assert "updatedAt" not in definition
        assert dict(definition["cd"].options) == CREATED_OPTIONS
        assert dict(definition["ud"].options) == UPDATED_OPTIONS
        assert definition.options["timestamps"] == {
            "createdAt": "cd",
            "updatedAt": "ud",
        }

    def test_override_generated_schema_options(self):
        """Test overriding the helper's schema options with .mapper_options()."""
        our_options = {"collection": "test", "timestamps": False}

        definition = compile_schema(
            gen_timestamps_schema().mapper_options(schema_options={**our_options})
        )

        assert dict(definition.options).items() >= our_options.items()

    def test_same_name_raises_eagerly(self):
        """Test that duplicate names fail at generation time."""
        with pytest.raises(DuplicateTimestampNameError) as exc_info:
            gen_timestamps_schema("createdAt", "createdAt")

        assert isinstance(exc_info.value, DocSchemaError)
        assert str(exc_info.value) == "`createdAt` and `updatedAt` fields must be different"
        assert exc_info.value.name == "createdAt"

    def test_swapped_default_names_are_allowed(self):
        """Test that swapping the names is not a duplicate."""
        definition = compile_schema(gen_timestamps_schema("updatedAt", "createdAt"))

        assert dict(definition["updatedAt"].options) == CREATED_OPTIONS
        assert definition.options["timestamps"] == {
            "createdAt": "updatedAt",
            "updatedAt": "createdAt",
        }

    def test_extend_with_unknown_keys_throw(self):
        """Test composing the generated schema with user fields."""
        schema = gen_timestamps_schema().extend({"username": v.string()})

        definition = compile_schema(schema, {"unknownKeys": "throw"})

        assert list(definition.fields) == ["createdAt", "updatedAt", "username"]
        assert dict(definition["createdAt"].options) == CREATED_OPTIONS
        assert definition["username"].required is True
        assert definition.options["strict"] == "throw"
        assert definition.options["timestamps"] == {
            "createdAt": "createdAt",
            "updatedAt": "updatedAt",
        }

    def test_generated_schemas_are_independent(self):
        """Test that two generated schemas do not share nodes."""
        first = gen_timestamps_schema()
        second = gen_timestamps_schema()

        first.shape["createdAt"].type_options(alias="c")

        assert "alias" not in compile_schema(second)["createdAt"].options
        assert compile_schema(first)["createdAt"].options["alias"] == "c"
