"""Strongly typed identifiers for Chorus domain entities."""

from typing import NewType
from uuid import UUID

CommentId = NewType("CommentId", UUID)
