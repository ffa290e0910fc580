"""docschema - compile validation schemas into document mapper schemas."""

__version__ = "0.1.0"

# Re-export the public API for easy access
from .core import (
    UNSET,
    DocSchemaError,
    DuplicateTimestampNameError,
    RequiredConflictError,
    SchemaCompiler,
    SchemaDefinition,
    SchemaOptionsError,
    UnsupportedNodeKindError,
    attach_field_options,
    attach_schema_options,
    compile_schema,
    gen_timestamps_schema,
    v,
)

__all__ = [
    "UNSET",
    "DocSchemaError",
    "DuplicateTimestampNameError",
    "RequiredConflictError",
    "SchemaCompiler",
    "SchemaDefinition",
    "SchemaOptionsError",
    "UnsupportedNodeKindError",
    "__version__",
    "attach_field_options",
    "attach_schema_options",
    "compile_schema",
    "gen_timestamps_schema",
    "v",
]
