"""Comment entity.

Comments form a forest: each comment optionally points at a parent
comment, and deleting a comment removes its whole subtree.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from chorus.domain.model.common import DomainModel
from chorus.domain.value import CommentId

NICKNAME_MAX_LENGTH = 255
TEXT_MAX_LENGTH = 10000


class Comment(DomainModel):
    """Comment entity.

    Threading is managed through ``parent_id`` only. The reference is weak:
    the store does not check that the parent exists.
    """

    id: CommentId
    nickname: str = Field(min_length=1, max_length=NICKNAME_MAX_LENGTH)
    text: str = Field(min_length=1, max_length=TEXT_MAX_LENGTH)
    parent_id: Optional[CommentId] = None
    edited: bool = False
    likes: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
