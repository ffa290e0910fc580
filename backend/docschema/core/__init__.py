"""Core functionality for the document schema compiler."""

from .compiler import SchemaCompiler, compile_schema
from .config import CompilerConfig
from .definitions import (
    UNSET,
    ArrayType,
    FieldDefinition,
    MapperType,
    SchemaDefinition,
)
from .exceptions import (
    DocSchemaError,
    DuplicateTimestampNameError,
    RequiredConflictError,
    SchemaOptionsError,
    UnsupportedNodeKindError,
)
from .introspect import NodeSummary, unwrap
from .logging import (
    CompilationLogger,
    bind_context,
    configure_logging,
    get_logger,
    reset_context,
    setup_logging,
)
from .metadata import (
    MetadataStore,
    SchemaAnnotation,
    merge_field_options,
    merge_schema_annotations,
    metadata_store,
)
from .nodes import (
    Node,
    NodeKind,
    ObjectNode,
    ValidatorBuilder,
    attach_field_options,
    attach_schema_options,
    v,
)
from .timestamps import gen_timestamps_schema

# Export all components
__all__ = [
    # Validator nodes
    "Node",
    "NodeKind",
    "ObjectNode",
    "ValidatorBuilder",
    "v",
    # Metadata
    "MetadataStore",
    "SchemaAnnotation",
    "attach_field_options",
    "attach_schema_options",
    "merge_field_options",
    "merge_schema_annotations",
    "metadata_store",
    # Compilation
    "ArrayType",
    "CompilerConfig",
    "FieldDefinition",
    "MapperType",
    "NodeSummary",
    "SchemaCompiler",
    "SchemaDefinition",
    "UNSET",
    "compile_schema",
    "gen_timestamps_schema",
    "unwrap",
    # Errors
    "DocSchemaError",
    "DuplicateTimestampNameError",
    "RequiredConflictError",
    "SchemaOptionsError",
    "UnsupportedNodeKindError",
    # Logging
    "CompilationLogger",
    "bind_context",
    "configure_logging",
    "get_logger",
    "reset_context",
    "setup_logging",
]
