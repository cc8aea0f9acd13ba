"""In-memory comment repository for testing and local development."""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from chorus.domain.model.comment import Comment
from chorus.domain.repository.comment import CommentRepository
from chorus.domain.value import CommentId


class InMemoryCommentRepository(CommentRepository):
    """In-memory implementation of CommentRepository.

    No method suspends between reading and writing, so every call is
    atomic with respect to other coroutines on the event loop.
    """

    def __init__(self) -> None:
        self._comments: dict[CommentId, Comment] = {}

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        return self._comments.get(comment_id)

    async def find_children(self, parent_id: CommentId) -> list[Comment]:
        """Find direct children of a comment."""
        children = [c for c in self._comments.values() if c.parent_id == parent_id]
        children.sort(key=lambda c: c.created_at)
        return children

    async def find_page(self, offset: int = 0, limit: int = 10) -> list[Comment]:
        """Find a page of comments, newest first."""
        # Reverse insertion order first so equal timestamps still list newest first
        comments = sorted(
            reversed(list(self._comments.values())),
            key=lambda c: c.created_at,
            reverse=True,
        )
        return comments[offset : offset + limit]

    async def count(self) -> int:
        """Count all comments."""
        return len(self._comments)

    async def insert(
        self,
        nickname: str,
        text: str,
        parent_id: Optional[CommentId] = None,
    ) -> Comment:
        """Store a new comment with a fresh ID."""
        comment = Comment(
            id=CommentId(uuid4()),
            nickname=nickname,
            text=text,
            parent_id=parent_id,
            edited=False,
            likes=0,
            created_at=datetime.now(timezone.utc),
        )
        self._comments[comment.id] = comment
        return comment

    async def save(self, comment: Comment) -> Comment:
        """Store a fully built comment as-is (fixtures and local seeding)."""
        self._comments[comment.id] = comment
        return comment

    async def update(
        self,
        comment_id: CommentId,
        nickname: str,
        text: str,
        edited: bool = True,
    ) -> Optional[Comment]:
        """Overwrite nickname and text."""
        comment = self._comments.get(comment_id)
        if comment is None:
            return None
        updated = comment.model_copy(
            update={"nickname": nickname, "text": text, "edited": edited}
        )
        self._comments[comment_id] = updated
        return updated

    async def toggle_likes(self, comment_id: CommentId) -> Optional[Comment]:
        """Toggle the like counter."""
        comment = self._comments.get(comment_id)
        if comment is None:
            return None
        likes = comment.likes - 1 if comment.likes > 0 else comment.likes + 1
        updated = comment.model_copy(update={"likes": likes})
        self._comments[comment_id] = updated
        return updated

    async def delete(self, comment_id: CommentId) -> int:
        """Delete a comment."""
        return 1 if self._comments.pop(comment_id, None) is not None else 0
