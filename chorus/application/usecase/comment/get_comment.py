"""Get comment use case."""

from chorus.application.usecase.base import BaseUseCase
from chorus.domain.error import NotFoundError
from chorus.domain.service import CommentService
from chorus.domain.value import CommentId

from .schemas import CommentResponse, CommentTarget


class GetCommentRequest(CommentTarget):
    """Get comment request."""

    pass


class GetCommentUseCase(BaseUseCase):
    """Use case for reading a single comment."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: GetCommentRequest) -> CommentResponse:
        comment = await self.comment_service.get_comment_by_id(CommentId(request.id))
        if comment is None:
            raise NotFoundError("Comment", str(request.id))
        return CommentResponse.from_comment(comment)
