"""PostgreSQL implementation of Comment repository."""

from typing import Any, List, Optional

from sqlalchemy import case, desc, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Executable

from chorus.domain.error import StorageError
from chorus.domain.model import Comment
from chorus.domain.repository import CommentRepository
from chorus.domain.value import CommentId
from chorus.persistence.mappers import row_to_comment
from chorus.persistence.tables import comments_table


class PostgresCommentRepository(CommentRepository):
    """PostgreSQL implementation of CommentRepository.

    Database failures roll back the session and surface as StorageError,
    so a failed cascade delete leaves the whole operation undone.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _execute(self, operation: str, stmt: Executable) -> Any:
        """Execute a statement, translating driver errors."""
        try:
            return await self.session.execute(stmt)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StorageError(operation, str(e)) from e

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        stmt = select(comments_table).where(comments_table.c.id == comment_id)
        result = await self._execute("find_by_id", stmt)
        row = result.fetchone()
        return row_to_comment(row._asdict()) if row else None

    async def find_children(self, parent_id: CommentId) -> List[Comment]:
        """Find direct child comments of a parent comment."""
        stmt = (
            select(comments_table)
            .where(comments_table.c.parent_id == parent_id)
            .order_by(comments_table.c.created_at)
        )
        result = await self._execute("find_children", stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def find_page(self, offset: int = 0, limit: int = 10) -> List[Comment]:
        """Find a page of comments, newest first."""
        stmt = (
            select(comments_table)
            .order_by(desc(comments_table.c.created_at), desc(comments_table.c.id))
            .limit(limit)
            .offset(offset)
        )
        result = await self._execute("find_page", stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def count(self) -> int:
        """Count all comments."""
        stmt = select(func.count()).select_from(comments_table)
        result = await self._execute("count", stmt)
        return result.scalar() or 0

    async def insert(
        self,
        nickname: str,
        text: str,
        parent_id: Optional[CommentId] = None,
    ) -> Comment:
        """Insert a comment; id, created_at and counters come from the database."""
        stmt = (
            comments_table.insert()
            .values(nickname=nickname, text=text, parent_id=parent_id)
            .returning(comments_table)
        )
        result = await self._execute("insert", stmt)
        row = result.fetchone()
        await self.session.flush()
        return row_to_comment(row._asdict())

    async def update(
        self,
        comment_id: CommentId,
        nickname: str,
        text: str,
        edited: bool = True,
    ) -> Optional[Comment]:
        """Overwrite nickname and text of a comment."""
        stmt = (
            update(comments_table)
            .where(comments_table.c.id == comment_id)
            .values(nickname=nickname, text=text, edited=edited)
            .returning(comments_table)
        )
        result = await self._execute("update", stmt)
        row = result.fetchone()

        if row is None:
            return None

        await self.session.flush()
        return row_to_comment(row._asdict())

    async def toggle_likes(self, comment_id: CommentId) -> Optional[Comment]:
        """Toggle likes in a single statement so concurrent toggles cannot race."""
        likes = comments_table.c.likes
        stmt = (
            update(comments_table)
            .where(comments_table.c.id == comment_id)
            .values(likes=case((likes > 0, likes - 1), else_=likes + 1))
            .returning(comments_table)
        )
        result = await self._execute("toggle_likes", stmt)
        row = result.fetchone()

        if row is None:
            return None

        await self.session.flush()
        return row_to_comment(row._asdict())

    async def delete(self, comment_id: CommentId) -> int:
        """Delete a comment (hard delete)."""
        stmt = comments_table.delete().where(comments_table.c.id == comment_id)
        result = await self._execute("delete", stmt)
        await self.session.flush()
        return result.rowcount or 0
