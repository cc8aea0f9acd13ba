"""PostgreSQL repository implementations."""

from chorus.persistence.repository.comment import PostgresCommentRepository

__all__ = [
    "PostgresCommentRepository",
]
