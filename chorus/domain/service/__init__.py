"""Domain services."""

from .base import Service
from .comment_service import CommentService, validate_content
from .publisher import EventPublisher

__all__ = [
    "CommentService",
    "EventPublisher",
    "Service",
    "validate_content",
]
