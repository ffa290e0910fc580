"""Compilation-specific exceptions for the document schema compiler."""

from typing import Any


class DocSchemaError(Exception):
    """Base exception for all schema compilation errors.

    This is the parent class for all compiler errors, allowing callers
    to catch every schema authoring problem with a single except clause.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        """Initialize compiler error.

        Args:
            message: Human-readable error description
            cause: Optional underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.cause = cause


class RequiredConflictError(DocSchemaError):
    """An explicit ``required`` option contradicts the field's modifiers.

    Raised when:
    - ``required=True`` is set on an optional or nullable field
    - ``required=False`` is set on a field that is neither optional nor nullable
    - a predicate is set on a non-optional field while strict mode is enabled
    """

    def __init__(
        self,
        path: str,
        required: Any,
        optional: bool,
        nullable: bool,
    ):
        if required is True:
            reason = "is optional or nullable but `required` is set to true"
        elif required is False:
            reason = "is neither optional nor nullable but `required` is set to false"
        else:
            reason = "is neither optional nor nullable but `required` is a function"
        super().__init__(
            f"Field `{path}` {reason} (optional={optional}, nullable={nullable})"
        )
        self.path = path
        self.required = required
        self.optional = optional
        self.nullable = nullable


class DuplicateTimestampNameError(DocSchemaError):
    """Both timestamp fields resolve to the same name."""

    def __init__(self, name: str):
        super().__init__("`createdAt` and `updatedAt` fields must be different")
        self.name = name


class UnsupportedNodeKindError(DocSchemaError):
    """A validator node kind has no compilation rule.

    Also raised when the root passed to the schema compiler is not an
    object node.
    """

    def __init__(self, kind: str, path: str, expected: str | None = None):
        location = path or "<root>"
        if expected:
            message = f"Expected {expected} node at `{location}`, got `{kind}`"
        else:
            message = f"Unsupported validator node kind `{kind}` at `{location}`"
        super().__init__(message)
        self.kind = kind
        self.path = path


class SchemaOptionsError(DocSchemaError):
    """Raised when schema-level options have an invalid shape."""

    def __init__(
        self,
        message: str,
        errors: list[str] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause)
        self.errors = errors or []
