"""Enumerated domain values shared by the engine and the gateway."""

from enum import Enum


class EventType(str, Enum):
    """Type of event broadcast to connected observers."""

    COMMENT_CREATED = "comment-created"
    COMMENT_UPDATED = "comment-updated"
    LIKE_CHANGED = "like-changed"
    COMMENT_DELETED = "comment-deleted"
    ERROR = "error"


class OperationType(str, Enum):
    """Mutation requested by a connected session."""

    CREATE = "create"
    EDIT = "edit"
    TOGGLE_LIKE = "toggle-like"
    DELETE = "delete"
