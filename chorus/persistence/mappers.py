"""Mappers for converting between database rows and domain models.

Domain models are frozen pydantic models, so rows are mapped by hand
instead of through SQLAlchemy's ORM.
"""

from typing import Any, Dict
from uuid import UUID

from chorus.domain.model import Comment
from chorus.domain.value import CommentId


def _to_uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_comment(row: Dict[str, Any]) -> Comment:
    """Convert database row to Comment domain model.

    Args:
        row: Database row as dict

    Returns:
        Comment domain model
    """
    return Comment(
        id=CommentId(_to_uuid(row["id"])),
        nickname=row["nickname"],
        text=row["text"],
        parent_id=CommentId(_to_uuid(row["parent_id"]))
        if row.get("parent_id")
        else None,
        edited=row["edited"],
        likes=row["likes"],
        created_at=row["created_at"],
    )
