"""Comment repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from chorus.domain.model.comment import Comment
from chorus.domain.value import CommentId


class CommentRepository(ABC):
    """Repository for Comment entity.

    Defines the contract for comment persistence operations.
    Implementations live in the persistence layer. Every method may raise
    ``StorageError``; no method spans more than one record atomically
    except where noted.
    """

    @abstractmethod
    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID.

        Args:
            comment_id: The comment's unique identifier

        Returns:
            The comment if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_children(self, parent_id: CommentId) -> List[Comment]:
        """Find direct child comments of a parent comment.

        Args:
            parent_id: The parent comment ID

        Returns:
            List of comments whose parent_id equals ``parent_id``
        """
        pass

    @abstractmethod
    async def find_page(self, offset: int = 0, limit: int = 10) -> List[Comment]:
        """Find a page of comments, newest first.

        Args:
            offset: Number of comments to skip
            limit: Maximum number of comments to return

        Returns:
            Comments ordered by created_at descending
        """
        pass

    @abstractmethod
    async def count(self) -> int:
        """Count all stored comments.

        Returns:
            Number of comments
        """
        pass

    @abstractmethod
    async def insert(
        self,
        nickname: str,
        text: str,
        parent_id: Optional[CommentId] = None,
    ) -> Comment:
        """Insert a new comment.

        The store assigns ``id`` and ``created_at``; ``likes`` starts at 0
        and ``edited`` at False.

        Args:
            nickname: Display name of the author
            text: Comment body
            parent_id: Parent comment ID for replies (None for top-level)

        Returns:
            The stored comment
        """
        pass

    @abstractmethod
    async def update(
        self,
        comment_id: CommentId,
        nickname: str,
        text: str,
        edited: bool = True,
    ) -> Optional[Comment]:
        """Overwrite the editable fields of a comment.

        Args:
            comment_id: The comment ID
            nickname: New display name
            text: New body
            edited: Value for the edited flag

        Returns:
            The updated comment, or None if no record was affected
        """
        pass

    @abstractmethod
    async def toggle_likes(self, comment_id: CommentId) -> Optional[Comment]:
        """Atomically toggle the like counter of a comment.

        A positive counter is decremented, a zero counter is incremented.

        Args:
            comment_id: The comment ID

        Returns:
            The updated comment, or None if no record was affected
        """
        pass

    @abstractmethod
    async def delete(self, comment_id: CommentId) -> int:
        """Delete a single comment (hard delete, no cascade).

        Args:
            comment_id: The comment ID to delete

        Returns:
            Number of deleted records (0 or 1)
        """
        pass
