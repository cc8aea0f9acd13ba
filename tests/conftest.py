"""Test configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import logfire

from chorus.domain.model import Comment
from chorus.domain.value import CommentId

# Keep telemetry local and quiet during tests
logfire.configure(send_to_logfire=False, console=False)


def make_comment(
    nickname: str = "alice",
    text: str = "hi",
    parent_id: CommentId | None = None,
    likes: int = 0,
    edited: bool = False,
    age: timedelta = timedelta(0),
) -> Comment:
    """Build a comment without going through a repository.

    Args:
        nickname: Display name
        text: Body
        parent_id: Parent comment ID (None for top-level)
        likes: Initial like count
        edited: Initial edited flag
        age: How long ago the comment was created

    Returns:
        Comment with a fresh ID
    """
    return Comment(
        id=CommentId(uuid4()),
        nickname=nickname,
        text=text,
        parent_id=parent_id,
        edited=edited,
        likes=likes,
        created_at=datetime.now(timezone.utc) - age,
    )
