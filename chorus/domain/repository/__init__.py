"""Repository interfaces for Chorus domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from chorus.domain.repository.comment import CommentRepository

__all__ = [
    "CommentRepository",
]
