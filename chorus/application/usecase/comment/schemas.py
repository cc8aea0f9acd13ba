"""Comment payloads shared by the comment use cases."""

from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, Field

from chorus.application.usecase.base import WireModel
from chorus.domain.model import Comment


class CommentResponse(WireModel):
    """Full comment record as seen by clients."""

    id: str
    nickname: str
    text: str
    parent_id: str | None
    edited: bool
    likes: int
    created_at: datetime

    @classmethod
    def from_comment(cls, comment: Comment) -> "CommentResponse":
        return cls(
            id=str(comment.id),
            nickname=comment.nickname,
            text=comment.text,
            parent_id=str(comment.parent_id) if comment.parent_id else None,
            edited=comment.edited,
            likes=comment.likes,
            created_at=comment.created_at,
        )


class CommentTarget(WireModel):
    """Request that addresses one existing comment.

    Older clients send the identifier as ``commentId``.
    """

    id: UUID = Field(validation_alias=AliasChoices("id", "commentId"))
