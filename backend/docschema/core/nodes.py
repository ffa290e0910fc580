"""Validator node tree and the fluent builder used to author schemas.

Nodes are immutable: every wrapper method (``optional``, ``default``, ...)
returns a new node that owns the node it wraps. Nodes compare and hash by
identity so that mapper options attached through ``type_options`` and
``mapper_options`` stay bound to the exact node they were attached to.

Example:
    >>> from docschema import v
    >>> User = v.object(
    ...     {
    ...         "username": v.string().type_options(unique=True),
    ...         "registered": v.boolean().optional(),
    ...     }
    ... ).mapper_options(schema_options={"collection": "users"})
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, TypeVar

from .exceptions import UnsupportedNodeKindError
from .metadata import SchemaAnnotation, merge_schema_annotations, metadata_store


class NodeKind(Enum):
    """Kinds of validator nodes understood by the compiler."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ANY = "any"
    NEVER = "never"
    LITERAL = "literal"
    OBJECT = "object"
    ARRAY = "array"
    UNION = "union"

    # Wrapper kinds
    OPTIONAL = "optional"
    NULLABLE = "nullable"
    DEFAULT = "default"
    EFFECTS = "effects"

    @property
    def is_wrapper(self) -> bool:
        """Whether nodes of this kind only modify an inner node."""
        return self in WRAPPER_KINDS


WRAPPER_KINDS = frozenset(
    {NodeKind.OPTIONAL, NodeKind.NULLABLE, NodeKind.DEFAULT, NodeKind.EFFECTS}
)

NodeT = TypeVar("NodeT", bound="Node")


@dataclass(frozen=True, eq=False)
class Node:
    """Base class for all validator nodes."""

    kind: ClassVar[NodeKind]

    def optional(self) -> "OptionalNode":
        """Allow the value to be missing."""
        return OptionalNode(self)

    def nullable(self) -> "NullableNode":
        """Allow the value to be ``None``."""
        return NullableNode(self)

    def nullish(self) -> "OptionalNode":
        """Allow the value to be missing or ``None``."""
        return NullableNode(self).optional()

    def default(self, value: Any) -> "DefaultNode":
        """Use ``value`` when the field is missing.

        ``value`` may be a zero-argument callable producing the default.
        """
        return DefaultNode(self, value)

    def refine(self, check: Callable[[Any], bool]) -> "EffectsNode":
        """Attach an extra validation check."""
        return EffectsNode(self, "refinement", check)

    def transform(self, fn: Callable[[Any], Any]) -> "EffectsNode":
        """Attach a transformation applied after validation."""
        return EffectsNode(self, "transform", fn)

    def type_options(
        self: NodeT, options: Mapping[str, Any] | None = None, **kwargs: Any
    ) -> NodeT:
        """Attach mapper field options to this node and return it."""
        return attach_field_options(self, options, **kwargs)


@dataclass(frozen=True, eq=False)
class StringNode(Node):
    kind: ClassVar[NodeKind] = NodeKind.STRING


@dataclass(frozen=True, eq=False)
class NumberNode(Node):
    kind: ClassVar[NodeKind] = NodeKind.NUMBER


@dataclass(frozen=True, eq=False)
class BooleanNode(Node):
    kind: ClassVar[NodeKind] = NodeKind.BOOLEAN


@dataclass(frozen=True, eq=False)
class DateNode(Node):
    kind: ClassVar[NodeKind] = NodeKind.DATE


@dataclass(frozen=True, eq=False)
class AnyNode(Node):
    kind: ClassVar[NodeKind] = NodeKind.ANY


@dataclass(frozen=True, eq=False)
class NeverNode(Node):
    kind: ClassVar[NodeKind] = NodeKind.NEVER


@dataclass(frozen=True, eq=False)
class LiteralNode(Node):
    kind: ClassVar[NodeKind] = NodeKind.LITERAL

    value: Any


@dataclass(frozen=True, eq=False)
class ObjectNode(Node):
    kind: ClassVar[NodeKind] = NodeKind.OBJECT

    shape: Mapping[str, Node] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "shape", MappingProxyType(dict(self.shape)))

    def extend(self, shape: Mapping[str, Node]) -> "ObjectNode":
        """Return a new object node with ``shape`` added to this one.

        Schema-level options already attached to this node carry over.
        """
        extended = ObjectNode({**self.shape, **shape})
        metadata_store.copy_schema(self, extended)
        return extended

    def mapper_options(
        self,
        options: SchemaAnnotation | Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> "ObjectNode":
        """Attach schema-level mapper options to this node and return it."""
        return attach_schema_options(self, options, **kwargs)


@dataclass(frozen=True, eq=False)
class ArrayNode(Node):
    kind: ClassVar[NodeKind] = NodeKind.ARRAY

    element: Node


@dataclass(frozen=True, eq=False)
class UnionNode(Node):
    kind: ClassVar[NodeKind] = NodeKind.UNION

    options: tuple[Node, ...]


@dataclass(frozen=True, eq=False)
class OptionalNode(Node):
    kind: ClassVar[NodeKind] = NodeKind.OPTIONAL

    inner: Node


@dataclass(frozen=True, eq=False)
class NullableNode(Node):
    kind: ClassVar[NodeKind] = NodeKind.NULLABLE

    inner: Node


@dataclass(frozen=True, eq=False)
class DefaultNode(Node):
    kind: ClassVar[NodeKind] = NodeKind.DEFAULT

    inner: Node
    default_value: Any


@dataclass(frozen=True, eq=False)
class EffectsNode(Node):
    kind: ClassVar[NodeKind] = NodeKind.EFFECTS

    inner: Node
    effect: str
    fn: Callable[[Any], Any]


def attach_field_options(
    node: NodeT, options: Mapping[str, Any] | None = None, /, **kwargs: Any
) -> NodeT:
    """Merge mapper field options into the bag attached to ``node``.

    Later calls win on conflicting keys. Returns ``node`` unchanged so the
    call can be chained.
    """
    metadata_store.attach(node, {**(options or {}), **kwargs})
    return node


def attach_schema_options(
    node: ObjectNode,
    options: SchemaAnnotation | Mapping[str, Any] | None = None,
    /,
    **kwargs: Any,
) -> ObjectNode:
    """Merge schema-level options into the annotation attached to ``node``.

    Args:
        node: Object node to annotate
        options: ``SchemaAnnotation`` or a mapping with ``schema_options``,
            ``type_options`` and ``unknown_keys`` (camelCase aliases accepted)
        **kwargs: Same keys as ``options``, merged on top of it

    Returns:
        ``node`` itself, for chaining

    Raises:
        UnsupportedNodeKindError: If ``node`` is not an object node
        SchemaOptionsError: If the options have an invalid shape
    """
    if node.kind is not NodeKind.OBJECT:
        raise UnsupportedNodeKindError(node.kind.value, "", expected="object")

    annotation = SchemaAnnotation.coerce(options)
    if kwargs:
        annotation = merge_schema_annotations(
            annotation, SchemaAnnotation.coerce(kwargs)
        )

    metadata_store.attach_schema(node, annotation)
    return node


class ValidatorBuilder:
    """Namespace of node constructors, exposed as ``v``."""

    @staticmethod
    def string() -> StringNode:
        return StringNode()

    @staticmethod
    def number() -> NumberNode:
        return NumberNode()

    @staticmethod
    def boolean() -> BooleanNode:
        return BooleanNode()

    @staticmethod
    def date() -> DateNode:
        return DateNode()

    @staticmethod
    def any() -> AnyNode:
        return AnyNode()

    @staticmethod
    def never() -> NeverNode:
        return NeverNode()

    @staticmethod
    def literal(value: Any) -> LiteralNode:
        return LiteralNode(value)

    @staticmethod
    def object(shape: Mapping[str, Node] | None = None) -> ObjectNode:
        return ObjectNode(shape or {})

    @staticmethod
    def array(element: Node) -> ArrayNode:
        return ArrayNode(element)

    @staticmethod
    def union(options: Iterable[Node]) -> UnionNode:
        return UnionNode(tuple(options))


v = ValidatorBuilder()
