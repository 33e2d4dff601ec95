"""
API Routes for the notification dashboard.

Endpoints
---------
- `GET  /notifications`: List notifications, most recent first.
- `GET  /notifications/{id}`: Fetch one notification.
- `POST /notifications/{id}/dismiss`: Mark one notification dismissed.
- `POST /notifications/dismiss-all`: Dismiss everything.
- `POST /notifications/{id}/replay`: Speak a notification again.
- `POST /notifications/{id}/activate`: Run its click action / handler.

Design Decisions
----------------
- **Sync handlers**: the store does blocking file I/O, so routes are plain
  ``def`` and FastAPI runs them in its thread pool.
- **Not found is 404**: the façade returns ``None`` for unknown ids and the
  route translates that into an HTTP error.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from utts.notifications import Notification, Notifications

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def get_service(request: Request) -> Notifications:
    """Dependency: the façade attached to the running app."""
    service: Notifications = request.app.state.notifications
    return service


Service = Annotated[Notifications, Depends(get_service)]


def _or_404(notification: Notification | None, notification_id: str) -> Notification:
    if notification is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Notification {notification_id} not found",
        )
    return notification


@router.get("", response_model=list[Notification], summary="List notifications")
def list_notifications(
    service: Service,
    limit: Annotated[int | None, Query(ge=0)] = 50,
    include_dismissed: bool = False,
    since: datetime | None = None,
) -> list[Notification]:
    return service.list(limit=limit, since=since, include_dismissed=include_dismissed)


@router.post(
    "/dismiss-all",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Dismiss every notification",
)
def dismiss_all(service: Service) -> None:
    service.dismiss_all()


@router.get("/{notification_id}", response_model=Notification, summary="Get one notification")
def get_notification(notification_id: str, service: Service) -> Notification:
    return _or_404(service.find(notification_id), notification_id)


@router.post("/{notification_id}/dismiss", response_model=Notification)
def dismiss(notification_id: str, service: Service) -> Notification:
    return _or_404(service.dismiss(notification_id), notification_id)


@router.post(
    "/{notification_id}/replay",
    response_model=Notification,
    status_code=status.HTTP_202_ACCEPTED,
)
def replay(notification_id: str, service: Service) -> Notification:
    """Start the replay and return immediately; the child is not awaited."""
    return _or_404(service.replay(notification_id), notification_id)


@router.post("/{notification_id}/activate", response_model=Notification)
def activate(notification_id: str, service: Service) -> Notification:
    return _or_404(service.activate(notification_id), notification_id)


__all__ = ["router", "get_service"]
