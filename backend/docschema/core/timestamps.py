"""Ready-made schema holding the mapper's creation and update timestamps."""

from .exceptions import DuplicateTimestampNameError
from .logging import get_logger
from .nodes import Node, ObjectNode, v

logger = get_logger(__name__)


def gen_timestamps_schema(
    created_at: str | None = "createdAt",
    updated_at: str | None = "updatedAt",
) -> ObjectNode:
    """Generate an object schema with ``createdAt``/``updatedAt`` date fields.

    The fields are required and indexed, and the creation timestamp is also
    immutable. The schema carries the mapper's ``timestamps`` option so the
    mapper fills both fields itself. The result can be extended and
    annotated like any other object node.

    Args:
        created_at: Name of the creation timestamp field, ``None`` to omit it
        updated_at: Name of the update timestamp field, ``None`` to omit it

    Returns:
        Object node with zero, one or two date fields

    Raises:
        DuplicateTimestampNameError: If both names are the same
    """
    if created_at is not None and created_at == updated_at:
        raise DuplicateTimestampNameError(created_at)

    shape: dict[str, Node] = {}
    if created_at is not None:
        shape[created_at] = v.date().type_options(
            required=True, index=True, immutable=True
        )
    if updated_at is not None:
        shape[updated_at] = v.date().type_options(required=True, index=True)

    logger.debug(
        "Generated timestamps schema",
        created_at=created_at,
        updated_at=updated_at,
    )

    return v.object(shape).mapper_options(
        schema_options={
            "timestamps": {
                "createdAt": created_at if created_at is not None else False,
                "updatedAt": updated_at if updated_at is not None else False,
            }
        }
    )
