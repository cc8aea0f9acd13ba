"""Domain models."""

from chorus.domain.model.comment import Comment
from chorus.domain.model.common import DomainModel
from chorus.domain.model.event import Event

__all__ = [
    "Comment",
    "DomainModel",
    "Event",
]
