"""Domain value objects for Chorus."""

from chorus.domain.value.identifiers import CommentId
from chorus.domain.value.types import EventType, OperationType

__all__ = [
    "CommentId",
    "EventType",
    "OperationType",
]
