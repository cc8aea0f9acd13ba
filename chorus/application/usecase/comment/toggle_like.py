"""Toggle like use case."""

from chorus.application.usecase.base import BaseUseCase, WireModel
from chorus.domain.model import Event
from chorus.domain.service import CommentService, EventPublisher
from chorus.domain.value import CommentId, EventType

from .schemas import CommentTarget


class ToggleLikeRequest(CommentTarget):
    """Toggle like request."""

    pass


class ToggleLikeResponse(WireModel):
    """New like count of a comment."""

    id: str
    likes: int


class ToggleLikeUseCase(BaseUseCase):
    """Use case for liking or unliking a comment through one operation."""

    def __init__(
        self, comment_service: CommentService, publisher: EventPublisher
    ) -> None:
        self.comment_service = comment_service
        self.publisher = publisher

    async def execute(self, request: ToggleLikeRequest) -> ToggleLikeResponse:
        """Execute toggle like flow.

        Args:
            request: Toggle like request

        Returns:
            Comment ID and new like count, also broadcast as ``like-changed``

        Raises:
            NotFoundError: If the comment does not exist (nothing is broadcast)
        """
        comment = await self.comment_service.toggle_like(CommentId(request.id))

        response = ToggleLikeResponse(id=str(comment.id), likes=comment.likes)
        self.publisher.publish(
            Event(type=EventType.LIKE_CHANGED, data=response.to_wire())
        )
        return response
