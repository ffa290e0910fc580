"""Identity-keyed metadata attached to validator nodes.

Validator nodes never carry mapper options themselves. Instead the
``MetadataStore`` keeps two side tables keyed by node identity:

* field options (``index``, ``unique``, ``default``, ...) for any node
* schema-level annotations (mapper schema options, per-field overrides and
  the unknown-keys mode) for object nodes

Entries are held weakly and disappear together with their node. Every merge
produces a new value; stored bags are never mutated in place.

The store is not thread-safe. Annotate shared nodes from one thread at a
time.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Literal
import weakref

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import SchemaOptionsError

UnknownKeys = Literal["ignore", "strip", "throw"]

EMPTY_OPTIONS: Mapping[str, Any] = MappingProxyType({})


class SchemaAnnotation(BaseModel):
    """Schema-level options attached to an object node.

    Accepts both the snake_case field names and the camelCase aliases
    (``schemaOptions``, ``typeOptions``, ``unknownKeys``).
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
    )

    schema_options: dict[str, Any] = Field(
        default_factory=dict,
        alias="schemaOptions",
        description="Options passed to the mapper's schema constructor",
    )
    type_options: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        alias="typeOptions",
        description="Field option overrides keyed by field name",
    )
    unknown_keys: UnknownKeys | None = Field(
        default=None,
        alias="unknownKeys",
        description="How the mapper treats keys missing from the declared shape",
    )

    @classmethod
    def coerce(
        cls, options: "SchemaAnnotation | Mapping[str, Any] | None"
    ) -> "SchemaAnnotation":
        """Build an annotation from a mapping, passing instances through.

        Raises:
            SchemaOptionsError: If the mapping has an invalid shape
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options

        try:
            return cls.model_validate(options)
        except PydanticValidationError as e:
            errors = [
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            ]
            raise SchemaOptionsError(
                "Invalid schema options", errors=errors, cause=e
            ) from e


def merge_field_options(
    base: Mapping[str, Any], update: Mapping[str, Any]
) -> Mapping[str, Any]:
    """Shallow-merge two field option bags, keys from ``update`` win."""
    return MappingProxyType({**base, **update})


def merge_schema_annotations(
    base: SchemaAnnotation, update: SchemaAnnotation
) -> SchemaAnnotation:
    """Merge two schema annotations, ``update`` taking precedence.

    ``schema_options`` merge shallowly, ``type_options`` merge per field
    and ``unknown_keys`` is replaced when ``update`` sets it.
    """
    type_options = {name: dict(opts) for name, opts in base.type_options.items()}
    for name, opts in update.type_options.items():
        type_options[name] = {**type_options.get(name, {}), **opts}

    return SchemaAnnotation(
        schema_options={**base.schema_options, **update.schema_options},
        type_options=type_options,
        unknown_keys=update.unknown_keys or base.unknown_keys,
    )


class MetadataStore:
    """Side tables mapping validator nodes to their attached options."""

    def __init__(self) -> None:
        self._field_options: weakref.WeakKeyDictionary[Any, Mapping[str, Any]] = (
            weakref.WeakKeyDictionary()
        )
        self._schema_annotations: weakref.WeakKeyDictionary[
            Any, SchemaAnnotation
        ] = weakref.WeakKeyDictionary()

    def attach(self, node: Any, options: Mapping[str, Any]) -> None:
        """Merge ``options`` into the field option bag of ``node``."""
        current = self._field_options.get(node, EMPTY_OPTIONS)
        self._field_options[node] = merge_field_options(current, options)

    def read(self, node: Any) -> Mapping[str, Any]:
        """Return the field option bag of ``node`` (empty if none attached)."""
        return self._field_options.get(node, EMPTY_OPTIONS)

    def attach_schema(self, node: Any, annotation: SchemaAnnotation) -> None:
        """Merge ``annotation`` into the schema-level options of ``node``."""
        current = self._schema_annotations.get(node)
        if current is None:
            self._schema_annotations[node] = annotation
        else:
            self._schema_annotations[node] = merge_schema_annotations(
                current, annotation
            )

    def read_schema(self, node: Any) -> SchemaAnnotation:
        """Return the schema-level options of ``node`` (empty if none attached)."""
        annotation = self._schema_annotations.get(node)
        if annotation is None:
            return SchemaAnnotation()
        return annotation

    def copy_schema(self, source: Any, target: Any) -> None:
        """Carry the schema-level options of ``source`` over to ``target``."""
        annotation = self._schema_annotations.get(source)
        if annotation is not None:
            self.attach_schema(target, annotation)

    def clear(self) -> None:
        """Drop every attached option. Useful for testing."""
        self._field_options.clear()
        self._schema_annotations.clear()


# Process-wide store used by the builder API and the default compiler
metadata_store = MetadataStore()
