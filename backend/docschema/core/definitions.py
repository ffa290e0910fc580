"""Compiled schema definitions handed to the document mapper.

These structures are the output of the schema compiler. They are immutable
once returned and can be rendered to the plain mappings a mongoose-style
mapper expects with ``SchemaDefinition.to_mapper()``. A sub-schema field
renders its type as ``{"definition": ..., "options": ...}`` so the mapper
can build a real nested schema from it.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class _Unset:
    """Sentinel marking a default that is explicitly left unset."""

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Unset":
        return self

    def __deepcopy__(self, _memo: dict[int, Any]) -> "_Unset":
        return self


UNSET: Any = _Unset()


class MapperType(Enum):
    """Primitive field types of the document mapper."""

    STRING = "String"
    NUMBER = "Number"
    BOOLEAN = "Boolean"
    DATE = "Date"
    MIXED = "Mixed"


@dataclass(frozen=True)
class ArrayType:
    """Array field type with its compiled element definition."""

    items: "FieldDefinition"


FieldType = Union[MapperType, ArrayType, "SchemaDefinition"]


@dataclass(frozen=True)
class FieldDefinition:
    """Compiled definition of a single field.

    ``options`` always contains ``required``. It contains ``default`` when a
    default was resolved (possibly ``UNSET``), followed by every passthrough
    option in the order it was attached.
    """

    path: str
    type: FieldType
    options: Mapping[str, Any]

    @property
    def required(self) -> Any:
        """Resolved ``required`` flag, or the caller-supplied predicate."""
        return self.options["required"]

    @property
    def has_default(self) -> bool:
        """Whether a ``default`` option was emitted."""
        return "default" in self.options

    @property
    def default(self) -> Any:
        """Resolved default value or producer, ``UNSET`` if none."""
        return self.options.get("default", UNSET)

    def to_mapper(self) -> dict[str, Any]:
        """Render the field as a mapper path definition."""
        return {"type": _render_type(self.type), **self.options}


@dataclass(frozen=True)
class SchemaDefinition:
    """Compiled definition of an object schema.

    ``fields`` preserves the declared field order.
    """

    path: str
    fields: Mapping[str, FieldDefinition]
    options: Mapping[str, Any]
    unknown_keys: str | None = None

    def __getitem__(self, name: str) -> FieldDefinition:
        return self.fields[name]

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __len__(self) -> int:
        return len(self.fields)

    def definition(self) -> dict[str, Any]:
        """Render the field mapping passed as the mapper's schema definition."""
        return {name: field.to_mapper() for name, field in self.fields.items()}

    def to_mapper(self) -> tuple[dict[str, Any], dict[str, Any]]:
        """Render the ``(definition, options)`` pair for a schema constructor."""
        return self.definition(), dict(self.options)


def _render_type(field_type: FieldType) -> Any:
    if isinstance(field_type, MapperType):
        return field_type.value
    if isinstance(field_type, ArrayType):
        return [field_type.items.to_mapper()]
    # Sub-schemas keep their own options (``_id``, ``strict``, ...)
    definition, options = field_type.to_mapper()
    return {"definition": definition, "options": options}
