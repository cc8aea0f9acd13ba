"""WebSocket gateway for realtime comments.

Provides:
- WS /socket - comment operations in, broadcast events out

Messages you can send:
- {"type": "create", "data": {"nickname": ..., "text": ..., "parentId": ...}}
- {"type": "edit", "data": {"id": ..., "nickname": ..., "text": ...}}
- {"type": "toggle-like", "data": {"id": ...}}
- {"type": "delete", "data": {"id": ...}}
- {"type": "ping"}

Messages received:
- {"type": "connected", "data": {"sessionId": ...}} - once, after connecting
- {"type": "comment-created" | "comment-updated" | "like-changed" |
   "comment-deleted" | "error", "data": {...}} - broadcast events
- {"type": "operation-failed", "data": {"operation", "error", "status"}} -
  only to the session whose operation failed
- {"type": "pong"}
"""

import asyncio
import contextlib
from typing import Any

import logfire
from dishka import AsyncContainer
from dishka.exceptions import ExitError
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from chorus.adapter.realtime import BroadcastHub, Subscription
from chorus.application.usecase.base import BaseUseCase, WireModel
from chorus.application.usecase.comment import (
    CreateCommentRequest,
    CreateCommentUseCase,
    DeleteCommentRequest,
    DeleteCommentUseCase,
    EditCommentRequest,
    EditCommentUseCase,
    ToggleLikeRequest,
    ToggleLikeUseCase,
)
from chorus.domain.error import DomainError, ValidationError
from chorus.domain.value import OperationType
from chorus.interface.error import message_for, status_for

router = APIRouter(tags=["realtime"])

OPERATIONS: dict[OperationType, tuple[type[BaseUseCase], type[WireModel]]] = {
    OperationType.CREATE: (CreateCommentUseCase, CreateCommentRequest),
    OperationType.EDIT: (EditCommentUseCase, EditCommentRequest),
    OperationType.TOGGLE_LIKE: (ToggleLikeUseCase, ToggleLikeRequest),
    OperationType.DELETE: (DeleteCommentUseCase, DeleteCommentRequest),
}


class InboundMessage(BaseModel):
    """Envelope of a message sent by a client."""

    type: str
    data: dict[str, Any] = {}


async def forward_events(subscription: Subscription, websocket: WebSocket) -> None:
    """Drain a hub subscription into the socket until cancelled."""
    try:
        while True:
            event = await subscription.next_event()
            await websocket.send_json(event.to_message())
    except WebSocketDisconnect:
        pass
    except RuntimeError as e:
        # Starlette raises RuntimeError when sending on a closed socket
        logfire.warn(
            "Event forwarding stopped",
            subscription_id=str(subscription.id),
            error=str(e),
        )


async def stop_forwarder(forwarder: asyncio.Task, subscription: Subscription) -> None:
    """Cancel a running forwarder, or collect the error of one that crashed."""
    if not forwarder.done():
        forwarder.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await forwarder
        return

    if forwarder.cancelled():
        return

    error = forwarder.exception()
    if error is not None:
        logfire.error(
            "Event forwarding failed",
            subscription_id=str(subscription.id),
            error=str(error),
            error_type=type(error).__name__,
            _exc_info=error,
        )


async def run_operation(
    container: AsyncContainer, operation: OperationType, data: dict[str, Any]
) -> None:
    """Run one operation in its own request scope.

    The scope owns the store session, so each message commits or rolls
    back on its own.
    """
    use_case_type, request_type = OPERATIONS[operation]
    request = request_type.model_validate(data)

    try:
        async with container() as request_container:
            use_case = await request_container.get(use_case_type)
            await use_case.execute(request)
    except ExitError as e:
        # A failed commit surfaces from scope cleanup; report it as itself
        domain_error = next(
            (err for err in e.exceptions if isinstance(err, DomainError)), None
        )
        if domain_error is None:
            raise
        raise domain_error from e


async def reply_failure(
    websocket: WebSocket, operation: str | None, error: Exception
) -> None:
    """Tell the requesting session that its operation failed."""
    await websocket.send_json(
        {
            "type": "operation-failed",
            "data": {
                "operation": operation,
                "error": message_for(error),
                "status": status_for(error),
            },
        }
    )


async def handle_message(
    websocket: WebSocket, container: AsyncContainer, raw: str
) -> None:
    """Dispatch one inbound message.

    Failures are logged and reported to the requester only; they never
    close the session.
    """
    try:
        message = InboundMessage.model_validate_json(raw)
    except PydanticValidationError as e:
        logfire.warn("Malformed realtime message", error=str(e))
        await reply_failure(websocket, None, e)
        return

    if message.type == "ping":
        await websocket.send_json({"type": "pong"})
        return
    if message.type == "pong":
        return

    try:
        operation = OperationType(message.type)
    except ValueError:
        await reply_failure(
            websocket,
            message.type,
            ValidationError(f"Unknown operation: {message.type}"),
        )
        return

    with logfire.span("realtime.operation", operation=operation.value):
        try:
            await run_operation(container, operation, message.data)
        except (DomainError, PydanticValidationError) as e:
            logfire.warn(
                "Realtime operation failed",
                operation=operation.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            await reply_failure(websocket, operation.value, e)
        except Exception as e:
            logfire.error(
                "Unexpected realtime operation failure",
                operation=operation.value,
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=True,
            )
            await reply_failure(websocket, operation.value, e)


@router.websocket("/socket")
async def comments_websocket(websocket: WebSocket) -> None:
    """WebSocket endpoint for realtime comments.

    Connect with: ws://host/socket

    Every session is an observer: it receives every broadcast event,
    including the ones caused by its own operations.
    """
    container: AsyncContainer = websocket.app.state.dishka_container
    hub = await container.get(BroadcastHub)

    await websocket.accept()
    subscription = hub.subscribe()
    forwarder: asyncio.Task | None = None

    try:
        await websocket.send_json(
            {"type": "connected", "data": {"sessionId": str(subscription.id)}}
        )
        forwarder = asyncio.create_task(forward_events(subscription, websocket))

        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(frame.get("code", 1000))

            if frame.get("text") is not None:
                await handle_message(websocket, container, frame["text"])
            else:
                await reply_failure(
                    websocket,
                    None,
                    ValidationError("Binary frames are not supported, send JSON text"),
                )

    except WebSocketDisconnect:
        pass
    finally:
        if forwarder is not None:
            await stop_forwarder(forwarder, subscription)

        hub.unsubscribe(subscription)
