"""Compiler from validator node trees to document mapper schema definitions.

The compiler walks an object node's shape and turns every field into a
``FieldDefinition``. Field options come from three layers, merged in this
order (later wins):

1. options attached to the field node and to any wrapper around it,
   innermost first
2. ``type_options`` entries of the enclosing object's schema annotation
3. nothing else: nested objects compile with their own annotation

``required`` is derived from the optional/nullable modifiers unless given
explicitly, in which case it is checked against them. An explicit
``default`` option always wins over a ``.default()`` wrapper.
"""

from collections.abc import Mapping
import copy
import functools
from types import MappingProxyType
from typing import Any

from .config import CompilerConfig
from .config import config as default_config
from .definitions import (
    UNSET,
    ArrayType,
    FieldDefinition,
    FieldType,
    MapperType,
    SchemaDefinition,
)
from .exceptions import RequiredConflictError, UnsupportedNodeKindError
from .introspect import NodeSummary, unwrap
from .logging import (
    CompilationLogger,
    bind_context,
    get_logger,
    reset_context,
    setup_logging,
)
from .metadata import (
    MetadataStore,
    SchemaAnnotation,
    merge_schema_annotations,
    metadata_store,
)
from .nodes import Node, NodeKind, ObjectNode

logger = get_logger(__name__)

# Translation of the unknown-keys mode to the mapper's ``strict`` option
_STRICT_MODES: dict[str, Any] = {
    "ignore": False,
    "strip": True,
    "throw": "throw",
}

_TIMESTAMP_FIELDS = ("createdAt", "updatedAt")

_PRIMITIVE_TYPES: dict[NodeKind, MapperType] = {
    NodeKind.STRING: MapperType.STRING,
    NodeKind.NUMBER: MapperType.NUMBER,
    NodeKind.BOOLEAN: MapperType.BOOLEAN,
    NodeKind.DATE: MapperType.DATE,
    NodeKind.ANY: MapperType.MIXED,
    NodeKind.UNION: MapperType.MIXED,
}


class SchemaCompiler:
    """Compile validator node trees into mapper schema definitions.

    A compiler reads options from a ``MetadataStore`` (the process-wide store
    by default) and never modifies the nodes it compiles.
    """

    def __init__(
        self,
        config: CompilerConfig | None = None,
        store: MetadataStore | None = None,
    ) -> None:
        """Initialize the compiler.

        Args:
            config: Compiler configuration, defaults to the global config
            store: Metadata store to read options from
        """
        self.config = config or default_config
        self.store = store or metadata_store
        setup_logging(self.config)

    def compile(
        self,
        node: Node,
        options: SchemaAnnotation | Mapping[str, Any] | None = None,
    ) -> SchemaDefinition:
        """Compile a root object node into a schema definition.

        Args:
            node: Object node (optionally wrapped) describing the document
            options: Extra schema-level options, winning over attached ones

        Returns:
            The complete, immutable schema definition

        Raises:
            RequiredConflictError: If a field's ``required`` option is inconsistent
            UnsupportedNodeKindError: If a node kind cannot be compiled
            SchemaOptionsError: If ``options`` has an invalid shape
        """
        annotation = SchemaAnnotation.coerce(options)
        with CompilationLogger(logger, "compile_schema") as op:
            definition = self.compile_schema(node, annotation)
            op.log_progress("Schema compiled", field_count=len(definition.fields))
        return definition

    def compile_schema(
        self,
        node: Node,
        options: SchemaAnnotation | None = None,
        path: tuple[str, ...] = (),
    ) -> SchemaDefinition:
        """Compile an object node, recursing into nested objects and arrays."""
        summary = unwrap(node)
        base = summary.base
        if not isinstance(base, ObjectNode):
            raise UnsupportedNodeKindError(
                base.kind.value, _format_path(path), expected="object"
            )

        annotation = self.store.read_schema(base)
        if options is not None:
            annotation = merge_schema_annotations(annotation, options)

        tokens = bind_context(schema_path=_format_path(path) or "<root>")
        try:
            fields: dict[str, FieldDefinition] = {}
            for name, child in base.shape.items():
                fields[name] = self.compile_field(
                    child, annotation, name=name, path=(*path, name)
                )

            logger.debug("Compiled schema", fields=list(fields))
        finally:
            reset_context(tokens)

        return SchemaDefinition(
            path=_format_path(path),
            fields=MappingProxyType(fields),
            options=MappingProxyType(self._build_schema_options(annotation)),
            unknown_keys=annotation.unknown_keys,
        )

    def compile_field(
        self,
        node: Node,
        annotation: SchemaAnnotation | None = None,
        name: str | None = None,
        path: tuple[str, ...] = (),
    ) -> FieldDefinition:
        """Compile one field of an object schema.

        Args:
            node: Validator node of the field
            annotation: Schema annotation of the enclosing object
            name: Field name used to look up ``type_options`` overrides
            path: Path of the field from the root schema

        Returns:
            The compiled field definition
        """
        summary = unwrap(node)
        field_path = _format_path(path)
        field_type = self._compile_type(summary.base, path)

        options = self._merge_options(summary, annotation, name)
        required = self._resolve_required(options, summary, field_path)

        compiled: dict[str, Any] = {"required": required}
        if "default" in options:
            compiled["default"] = options.pop("default")
        elif summary.has_default:
            compiled["default"] = _default_producer(summary.default_value)
        elif not isinstance(field_type, MapperType):
            # Arrays and sub-documents must not get the mapper's implicit default
            compiled["default"] = UNSET
        compiled.update(options)

        logger.debug("Compiled field", path=field_path, options=list(compiled))

        return FieldDefinition(
            path=field_path,
            type=field_type,
            options=MappingProxyType(compiled),
        )

    def _compile_type(self, base: Node, path: tuple[str, ...]) -> FieldType:
        """Map a base node to the mapper type of its field."""
        match base.kind:
            case NodeKind.OBJECT:
                return self.compile_schema(base, path=path)
            case NodeKind.ARRAY:
                items = self.compile_field(base.element, path=(*path, "$"))  # type: ignore[attr-defined]
                return ArrayType(items=items)
            case NodeKind.LITERAL:
                return _literal_type(base.value)  # type: ignore[attr-defined]
            case kind if kind in _PRIMITIVE_TYPES:
                return _PRIMITIVE_TYPES[kind]
            case _:
                raise UnsupportedNodeKindError(base.kind.value, _format_path(path))

    def _merge_options(
        self,
        summary: NodeSummary,
        annotation: SchemaAnnotation | None,
        name: str | None,
    ) -> dict[str, Any]:
        """Merge field options from every wrapper layer and the schema overrides."""
        options: dict[str, Any] = {}
        for layer in reversed(summary.layers):
            options.update(self.store.read(layer))

        if annotation is not None and name is not None:
            options.update(annotation.type_options.get(name, {}))

        return options

    def _resolve_required(
        self, options: dict[str, Any], summary: NodeSummary, path: str
    ) -> Any:
        """Resolve the ``required`` option, popping it from ``options``."""
        may_be_absent = summary.optional or summary.nullable

        if "required" not in options:
            return not may_be_absent

        required = options.pop("required")
        if required is True:
            if summary.optional or (summary.nullable and not summary.is_null_literal):
                raise RequiredConflictError(
                    path, required, summary.optional, summary.nullable
                )
        elif required is False:
            if not may_be_absent:
                raise RequiredConflictError(
                    path, required, summary.optional, summary.nullable
                )
        elif self.config.strict_required and not may_be_absent:
            raise RequiredConflictError(
                path, required, summary.optional, summary.nullable
            )

        return required

    @staticmethod
    def _build_schema_options(annotation: SchemaAnnotation) -> dict[str, Any]:
        """Translate schema-level options to the mapper's option shape."""
        options = dict(annotation.schema_options)

        timestamps = options.get("timestamps")
        if isinstance(timestamps, Mapping):
            options["timestamps"] = {
                key: _timestamp_name(timestamps.get(key, True), key)
                for key in _TIMESTAMP_FIELDS
            }

        if annotation.unknown_keys is not None and "strict" not in options:
            options["strict"] = _STRICT_MODES[annotation.unknown_keys]

        return options


def _format_path(path: tuple[str, ...]) -> str:
    return ".".join(path)


def _literal_type(value: Any) -> MapperType:
    if isinstance(value, bool):
        return MapperType.BOOLEAN
    if isinstance(value, (int, float)):
        return MapperType.NUMBER
    if isinstance(value, str):
        return MapperType.STRING
    return MapperType.MIXED


def _timestamp_name(value: Any, default_name: str) -> str | bool:
    if value is None or value is False:
        return False
    if value is True:
        return default_name
    return value


def _default_producer(value: Any) -> Any:
    """Wrap mutable defaults so each document gets its own copy."""
    if isinstance(value, (list, dict, set)):
        return functools.partial(copy.deepcopy, value)
    return value


@functools.cache
def _default_compiler() -> SchemaCompiler:
    """Default compiler reading the process-wide metadata store."""
    return SchemaCompiler()


def compile_schema(
    node: Node,
    options: SchemaAnnotation | Mapping[str, Any] | None = None,
) -> SchemaDefinition:
    """Compile ``node`` with the default compiler.

    See ``SchemaCompiler.compile`` for details.
    """
    return _default_compiler().compile(node, options)
