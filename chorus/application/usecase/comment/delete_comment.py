"""Delete comment use case."""

import logfire

from chorus.application.usecase.base import BaseUseCase, WireModel
from chorus.domain.error import StorageError
from chorus.domain.model import Event
from chorus.domain.service import CommentService, EventPublisher
from chorus.domain.value import CommentId, EventType

from .schemas import CommentTarget

DELETE_FAILED_MESSAGE = "Error deleting comment"


class DeleteCommentRequest(CommentTarget):
    """Delete comment request."""

    pass


class DeleteCommentResponse(WireModel):
    """Outcome of a cascade delete."""

    id: str
    deleted: int  # Comments removed, root included; 0 if the root was absent


class DeleteCommentUseCase(BaseUseCase):
    """Use case for deleting a comment thread."""

    def __init__(
        self, comment_service: CommentService, publisher: EventPublisher
    ) -> None:
        self.comment_service = comment_service
        self.publisher = publisher

    async def execute(self, request: DeleteCommentRequest) -> DeleteCommentResponse:
        """Execute delete comment flow.

        Only the requested root is announced (``comment-deleted`` with
        ``{id}``); clients drop the whole subtree locally. Deleting an
        unknown ID succeeds without any broadcast.

        Args:
            request: Delete request with the root comment ID

        Returns:
            Root ID and number of deleted comments

        Raises:
            StorageError: If the cascade fails part way. A generic ``error``
                event is broadcast to all observers before re-raising.
        """
        comment_id = CommentId(request.id)

        try:
            deleted = await self.comment_service.delete_comment(comment_id)
        except StorageError as e:
            logfire.error(
                "Comment delete failed", comment_id=str(comment_id), error=str(e)
            )
            # Not tied to the rolled back transaction
            self.publisher.publish_now(
                Event(type=EventType.ERROR, data={"message": DELETE_FAILED_MESSAGE})
            )
            raise

        response = DeleteCommentResponse(id=str(comment_id), deleted=deleted)
        if deleted:
            self.publisher.publish(
                Event(type=EventType.COMMENT_DELETED, data={"id": response.id})
            )
        return response
