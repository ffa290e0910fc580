"""Unwrapping of modifier layers around a validator node."""

from dataclasses import dataclass
from typing import Any

from .nodes import DefaultNode, Node, NodeKind


@dataclass(frozen=True)
class NodeSummary:
    """Normalized view of a node with its wrapper layers removed."""

    base: Node
    optional: bool
    nullable: bool
    has_default: bool
    default_value: Any
    # Every node crossed, outermost first, ending with ``base``
    layers: tuple[Node, ...]

    @property
    def is_null_literal(self) -> bool:
        """Whether the base node is ``literal(None)``."""
        return self.base.kind is NodeKind.LITERAL and self.base.value is None  # type: ignore[attr-defined]


def unwrap(node: Node) -> NodeSummary:
    """Walk wrapper nodes inward down to the first non-wrapper node.

    Optional and nullable flags accumulate regardless of wrapper order. Only
    the outermost ``default`` wrapper is kept.
    """
    optional = False
    nullable = False
    default: DefaultNode | None = None
    layers: list[Node] = []

    current = node
    while True:
        layers.append(current)
        match current.kind:
            case NodeKind.OPTIONAL:
                optional = True
            case NodeKind.NULLABLE:
                nullable = True
            case NodeKind.DEFAULT:
                if default is None:
                    default = current  # type: ignore[assignment]
            case NodeKind.EFFECTS:
                pass
            case _:
                break
        current = current.inner  # type: ignore[attr-defined]

    # literal(None) only ever accepts null
    if current.kind is NodeKind.LITERAL and current.value is None:  # type: ignore[attr-defined]
        nullable = True

    return NodeSummary(
        base=current,
        optional=optional,
        nullable=nullable,
        has_default=default is not None,
        default_value=default.default_value if default is not None else None,
        layers=tuple(layers),
    )
