"""Create comment use case."""

from uuid import UUID

import logfire

from chorus.application.usecase.base import BaseUseCase, WireModel
from chorus.domain.model import Event
from chorus.domain.service import CommentService, EventPublisher
from chorus.domain.value import CommentId, EventType

from .schemas import CommentResponse


class CreateCommentRequest(WireModel):
    """Create comment request."""

    nickname: str | None = None
    text: str | None = None
    parent_id: UUID | None = None  # Parent comment ID for replies


class CreateCommentUseCase(BaseUseCase):
    """Use case for posting a comment or a reply and announcing it."""

    def __init__(
        self, comment_service: CommentService, publisher: EventPublisher
    ) -> None:
        """Initialize create comment use case.

        Args:
            comment_service: Comment domain service
            publisher: Broadcast of result events
        """
        self.comment_service = comment_service
        self.publisher = publisher

    async def execute(self, request: CreateCommentRequest) -> CommentResponse:
        """Execute create comment flow.

        Steps:
        1. Create the comment via comment service (validates fields)
        2. Publish ``comment-created`` with the full record; it reaches
           observers once the store commits

        Args:
            request: Create comment request

        Returns:
            The created comment

        Raises:
            ValidationError: If nickname or text is empty
            StorageError: If the store write fails (nothing is broadcast)
        """
        comment = await self.comment_service.create_comment(
            nickname=request.nickname,
            text=request.text,
            parent_id=CommentId(request.parent_id) if request.parent_id else None,
        )

        response = CommentResponse.from_comment(comment)
        self.publisher.publish(
            Event(type=EventType.COMMENT_CREATED, data=response.to_wire())
        )
        logfire.info("Comment creation published", comment_id=response.id)
        return response
