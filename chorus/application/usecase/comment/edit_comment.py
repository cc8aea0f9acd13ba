"""Edit comment use case."""

from chorus.application.usecase.base import BaseUseCase
from chorus.domain.model import Event
from chorus.domain.service import CommentService, EventPublisher
from chorus.domain.value import CommentId, EventType

from .schemas import CommentResponse, CommentTarget


class EditCommentRequest(CommentTarget):
    """Edit comment request.

    Clients may also send ``edited: true``; the flag is always set
    server-side, so it is ignored here.
    """

    nickname: str | None = None
    text: str | None = None


class EditCommentUseCase(BaseUseCase):
    """Use case for rewriting a comment's nickname and text."""

    def __init__(
        self, comment_service: CommentService, publisher: EventPublisher
    ) -> None:
        self.comment_service = comment_service
        self.publisher = publisher

    async def execute(self, request: EditCommentRequest) -> CommentResponse:
        """Execute edit comment flow.

        Args:
            request: Edit request with comment ID and new content

        Returns:
            The updated comment, also broadcast as ``comment-updated``

        Raises:
            ValidationError: If nickname or text is empty
            NotFoundError: If the comment does not exist (nothing is broadcast)
        """
        comment = await self.comment_service.edit_comment(
            CommentId(request.id), nickname=request.nickname, text=request.text
        )

        response = CommentResponse.from_comment(comment)
        self.publisher.publish(
            Event(type=EventType.COMMENT_UPDATED, data=response.to_wire())
        )
        return response
