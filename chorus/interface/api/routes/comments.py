"""Comment routes.

Request/response access to the comment operations. Mutations made here
are broadcast to realtime sessions exactly like mutations sent over the
WebSocket. Errors are rendered by the handlers in ``chorus.interface.error``.
"""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query, status

from chorus.application.usecase.base import WireModel
from chorus.application.usecase.comment import (
    CommentResponse,
    CreateCommentRequest,
    CreateCommentUseCase,
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteCommentUseCase,
    EditCommentRequest,
    EditCommentUseCase,
    GetCommentRequest,
    GetCommentUseCase,
    ListCommentsRequest,
    ListCommentsResponse,
    ListCommentsUseCase,
    ToggleLikeRequest,
    ToggleLikeResponse,
    ToggleLikeUseCase,
)
from chorus.config import Settings
from chorus.domain.error import ValidationError

router = APIRouter(prefix="/comments", tags=["comments"], route_class=DishkaRoute)


class EditCommentAPIRequest(WireModel):
    """API request for editing a comment."""

    nickname: str | None = None
    text: str | None = None


@router.get("", response_model=ListCommentsResponse)
async def list_comments(
    list_comments_use_case: FromDishka[ListCommentsUseCase],
    settings: FromDishka[Settings],
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
) -> ListCommentsResponse:
    """List comments, newest first.

    Args:
        list_comments_use_case: List comments use case from DI
        settings: Application settings (page size defaults and bounds)
        page: 1-based page number
        limit: Page size, ``pagination.default_limit`` when omitted

    Returns:
        Page of comments with totals

    Raises:
        ValidationError: If limit exceeds ``pagination.max_limit``
    """
    if limit is None:
        limit = settings.pagination.default_limit
    if limit > settings.pagination.max_limit:
        raise ValidationError(
            f"limit must be at most {settings.pagination.max_limit}"
        )

    return await list_comments_use_case.execute(
        ListCommentsRequest(page=page, limit=limit)
    )


@router.get("/{comment_id}", response_model=CommentResponse)
async def get_comment(
    comment_id: UUID,
    get_comment_use_case: FromDishka[GetCommentUseCase],
) -> CommentResponse:
    """Get a single comment."""
    return await get_comment_use_case.execute(GetCommentRequest(id=comment_id))


@router.post(
    "",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    request: CreateCommentRequest,
    create_comment_use_case: FromDishka[CreateCommentUseCase],
) -> CommentResponse:
    """Create a comment or a reply (``parentId``).

    Args:
        request: Comment creation data
        create_comment_use_case: Create comment use case from DI

    Returns:
        Created comment
    """
    return await create_comment_use_case.execute(request)


@router.put("/{comment_id}", response_model=CommentResponse)
async def edit_comment(
    comment_id: UUID,
    request: EditCommentAPIRequest,
    edit_comment_use_case: FromDishka[EditCommentUseCase],
) -> CommentResponse:
    """Replace nickname and text of a comment and mark it edited."""
    return await edit_comment_use_case.execute(
        EditCommentRequest(id=comment_id, nickname=request.nickname, text=request.text)
    )


@router.post("/{comment_id}/like", response_model=ToggleLikeResponse)
async def toggle_like(
    comment_id: UUID,
    toggle_like_use_case: FromDishka[ToggleLikeUseCase],
) -> ToggleLikeResponse:
    """Like a comment without likes, unlike a comment with likes."""
    return await toggle_like_use_case.execute(ToggleLikeRequest(id=comment_id))


@router.delete("/{comment_id}", response_model=DeleteCommentResponse)
async def delete_comment(
    comment_id: UUID,
    delete_comment_use_case: FromDishka[DeleteCommentUseCase],
) -> DeleteCommentResponse:
    """Delete a comment together with all of its replies.

    Deleting an unknown comment succeeds with ``deleted == 0``.
    """
    return await delete_comment_use_case.execute(DeleteCommentRequest(id=comment_id))
