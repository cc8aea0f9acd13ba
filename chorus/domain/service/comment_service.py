"""Comment domain service."""

import logfire

from chorus.domain.error import NotFoundError, ValidationError
from chorus.domain.model.comment import (
    NICKNAME_MAX_LENGTH,
    TEXT_MAX_LENGTH,
    Comment,
)
from chorus.domain.repository import CommentRepository
from chorus.domain.value import CommentId

from .base import Service


def validate_content(nickname: str | None, text: str | None) -> None:
    """Check the user-supplied fields of a comment.

    Raises:
        ValidationError: If a field is missing, blank or too long
    """
    for field, value, max_length in (
        ("nickname", nickname, NICKNAME_MAX_LENGTH),
        ("text", text, TEXT_MAX_LENGTH),
    ):
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"{field} is required")
        if len(value) > max_length:
            raise ValidationError(f"{field} must be at most {max_length} characters")


class CommentService(Service):
    """Domain service for comment operations."""

    def __init__(self, comment_repository: CommentRepository) -> None:
        """Initialize comment service.

        Args:
            comment_repository: Comment repository
        """
        self.comment_repository = comment_repository

    async def create_comment(
        self,
        nickname: str,
        text: str,
        parent_id: CommentId | None = None,
    ) -> Comment:
        """Create a top-level comment or a reply.

        The parent is not required to exist.

        Args:
            nickname: Display name
            text: Comment text
            parent_id: Parent comment ID for replies (None for top-level)

        Returns:
            Created comment, with id and created_at assigned by the store

        Raises:
            ValidationError: If nickname or text is empty
            StorageError: If the store write fails
        """
        with logfire.span(
            "comment_service.create_comment",
            nickname=nickname,
            parent_id=str(parent_id) if parent_id else None,
        ):
            validate_content(nickname, text)

            saved = await self.comment_repository.insert(
                nickname=nickname,
                text=text,
                parent_id=parent_id,
            )
            logfire.info(
                "Comment created",
                comment_id=str(saved.id),
                parent_id=str(parent_id) if parent_id else None,
            )
            return saved

    async def get_comment_by_id(self, comment_id: CommentId) -> Comment | None:
        """Get a comment by ID.

        Args:
            comment_id: Comment ID

        Returns:
            Comment if found, None otherwise
        """
        with logfire.span(
            "comment_service.get_comment_by_id", comment_id=str(comment_id)
        ):
            comment = await self.comment_repository.find_by_id(comment_id)
            if not comment:
                logfire.warn("Comment not found", comment_id=str(comment_id))
            return comment

    async def list_comments(
        self, offset: int = 0, limit: int = 10
    ) -> tuple[list[Comment], int]:
        """Get one page of comments, newest first, and the total count.

        Args:
            offset: Number of comments to skip
            limit: Page size

        Returns:
            Tuple of (comments on the page, total number of comments)
        """
        with logfire.span(
            "comment_service.list_comments", offset=offset, limit=limit
        ):
            total = await self.comment_repository.count()
            comments = await self.comment_repository.find_page(
                offset=offset, limit=limit
            )
            logfire.info("Comments listed", count=len(comments), total=total)
            return comments, total

    async def edit_comment(
        self, comment_id: CommentId, nickname: str, text: str
    ) -> Comment:
        """Overwrite nickname and text and mark the comment as edited.

        Args:
            comment_id: Comment ID
            nickname: New display name
            text: New text

        Returns:
            Updated comment

        Raises:
            ValidationError: If nickname or text is empty
            NotFoundError: If the comment does not exist (nothing is written)
        """
        with logfire.span("comment_service.edit_comment", comment_id=str(comment_id)):
            validate_content(nickname, text)

            updated = await self.comment_repository.update(
                comment_id, nickname=nickname, text=text, edited=True
            )
            if updated is None:
                logfire.warn("Edit of unknown comment", comment_id=str(comment_id))
                raise NotFoundError("Comment", str(comment_id))

            logfire.info("Comment edited", comment_id=str(comment_id))
            return updated

    async def toggle_like(self, comment_id: CommentId) -> Comment:
        """Like or unlike a comment.

        A comment with likes is unliked (decrement), a comment without likes
        is liked (increment). The store applies the change atomically, so
        concurrent toggles never lose an update or go below zero.

        Args:
            comment_id: Comment ID

        Returns:
            Updated comment

        Raises:
            NotFoundError: If the comment does not exist
        """
        with logfire.span("comment_service.toggle_like", comment_id=str(comment_id)):
            updated = await self.comment_repository.toggle_likes(comment_id)
            if updated is None:
                logfire.warn("Like on unknown comment", comment_id=str(comment_id))
                raise NotFoundError("Comment", str(comment_id))

            logfire.info(
                "Comment likes toggled",
                comment_id=str(comment_id),
                likes=updated.likes,
            )
            return updated

    async def delete_comment(self, comment_id: CommentId) -> int:
        """Delete a comment and every descendant, children before parents.

        Walks the subtree with an explicit stack, so arbitrarily deep
        threads do not hit the interpreter recursion limit. Each node is
        pushed twice: once to expand its children, once to delete it after
        all of them are gone.

        Deleting an unknown ID is a no-op.

        Args:
            comment_id: Root of the subtree to delete

        Returns:
            Number of deleted comments (0 if the root did not exist)

        Raises:
            StorageError: If a store call fails. The remaining cascade is
                abandoned; comments already deleted are not restored here.
        """
        with logfire.span(
            "comment_service.delete_comment", comment_id=str(comment_id)
        ):
            root = await self.comment_repository.find_by_id(comment_id)
            if root is None:
                logfire.info(
                    "Delete of unknown comment ignored", comment_id=str(comment_id)
                )
                return 0

            deleted = 0
            seen: set[CommentId] = {root.id}
            stack: list[tuple[CommentId, bool]] = [(root.id, False)]

            while stack:
                current, expanded = stack.pop()
                if expanded:
                    deleted += await self.comment_repository.delete(current)
                    continue

                stack.append((current, True))
                for child in await self.comment_repository.find_children(current):
                    if child.id in seen:
                        # Corrupted data: a cycle in the parent links
                        logfire.error(
                            "Comment reachable twice during delete",
                            comment_id=str(child.id),
                            root_id=str(comment_id),
                        )
                        continue
                    seen.add(child.id)
                    stack.append((child.id, False))

            logfire.info(
                "Comment thread deleted", comment_id=str(comment_id), deleted=deleted
            )
            return deleted
