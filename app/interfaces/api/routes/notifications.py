"""Endpoints and websocket handler for realtime notifications."""

from __future__ import annotations

import logging

from anyio import to_thread
from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import (
    create_notification,
    delete_notification,
    get_unread_count,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from app.application.use_cases.notifications.list_notifications import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
)
from app.config import get_settings
from app.domain.entities import NotificationType, SystemUpdateData, User
from app.infrastructure.database import get_db
from app.infrastructure.notifications import (
    AuthenticationError,
    NotificationPublisher,
    RealtimeGateway,
)
from app.interfaces.api.dependencies import (
    get_current_user,
    get_notification_publisher,
    get_realtime_gateway,
)
from app.interfaces.api.schemas import (
    MessageResponse,
    NotificationListResponse,
    NotificationRead,
    TestNotificationRequest,
    TestNotificationResponse,
    UnreadCountResponse,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


@router.get("/", response_model=NotificationListResponse)
def get_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationListResponse:
    """Return the notifications of the authenticated user, newest first."""

    result = list_notifications(db, current_user.id, page=page, limit=limit)
    return NotificationListResponse.model_validate(result)


@router.get("/unread-count", response_model=UnreadCountResponse)
def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UnreadCountResponse:
    return UnreadCountResponse(count=get_unread_count(db, current_user.id))


@router.put("/read-all", response_model=MessageResponse)
def read_all(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    mark_all_notifications_read(db, current_user.id)
    return MessageResponse(message="All notifications marked as read")


@router.put("/{notification_id}/read", response_model=MessageResponse)
def read_one(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    """Mark a notification as read.

    The response is the same whether or not the notification belongs to the
    caller; foreign ids are simply left untouched.
    """

    mark_notification_read(db, notification_id, current_user.id)
    return MessageResponse(message="Notification marked as read")


@router.delete("/{notification_id}", response_model=MessageResponse)
def remove_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    delete_notification(db, notification_id, current_user.id)
    return MessageResponse(message="Notification deleted")


@router.post(
    "/test",
    response_model=TestNotificationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_test_notification(
    payload: TestNotificationRequest | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    publisher: NotificationPublisher = Depends(get_notification_publisher),
) -> TestNotificationResponse:
    """Send a notification to the caller. Disabled in production."""

    if get_settings().is_production:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Test notifications are not allowed in production",
        )

    payload = payload or TestNotificationRequest()
    notification_type = payload.type or NotificationType.SYSTEM_UPDATE
    data = (
        SystemUpdateData(is_test=True)
        if notification_type is NotificationType.SYSTEM_UPDATE
        else {"is_test": True}
    )
    try:
        notification = create_notification(
            db,
            user_id=current_user.id,
            title=payload.title or "Test Notification",
            message=payload.message or "This is a test notification from DevFlow!",
            type=notification_type,
            data=data,
            publisher=publisher,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return TestNotificationResponse(
        message="Test notification created",
        notification=NotificationRead.model_validate(notification),
    )


@router.websocket("/ws")
async def notifications_websocket(
    websocket: WebSocket,
    gateway: RealtimeGateway = Depends(get_realtime_gateway),
) -> None:
    """Websocket endpoint that streams notifications to the authenticated user."""

    token = websocket.query_params.get("token")
    try:
        user = await to_thread.run_sync(gateway.authenticate, token)
    except AuthenticationError:
        logger.info("Rejected realtime connection: authentication error")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    except Exception:
        logger.exception("Unexpected error while authenticating realtime connection")
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        return

    try:
        await gateway.connect(user.id, websocket)
        while True:
            try:
                message = await websocket.receive_json()
            except (ValueError, KeyError):
                continue
            await gateway.handle_message(user.id, websocket, message)
    except WebSocketDisconnect:
        pass
    finally:
        await gateway.disconnect(user.id, websocket)
