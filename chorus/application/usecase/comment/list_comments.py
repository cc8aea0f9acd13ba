"""List comments use case."""

import math

from pydantic import Field

from chorus.application.usecase.base import BaseUseCase, WireModel
from chorus.domain.service import CommentService

from .schemas import CommentResponse


class ListCommentsRequest(WireModel):
    """List comments request (1-based page number)."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)


class ListCommentsResponse(WireModel):
    """One page of comments, newest first."""

    comments: list[CommentResponse]
    total_comments: int
    total_pages: int
    current_page: int


class ListCommentsUseCase(BaseUseCase):
    """Use case for paging through all comments.

    This is how clients catch up on events they missed while disconnected.
    """

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize list comments use case.

        Args:
            comment_service: Comment domain service
        """
        self.comment_service = comment_service

    async def execute(self, request: ListCommentsRequest) -> ListCommentsResponse:
        """Execute list comments flow.

        Args:
            request: Page number and page size

        Returns:
            Comments on the page plus totals. A page past the end is empty.
        """
        comments, total = await self.comment_service.list_comments(
            offset=(request.page - 1) * request.limit,
            limit=request.limit,
        )

        return ListCommentsResponse(
            comments=[CommentResponse.from_comment(c) for c in comments],
            total_comments=total,
            total_pages=math.ceil(total / request.limit),
            current_page=request.page,
        )
