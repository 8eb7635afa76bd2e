# marketplace/routers/notifications.py
from fastapi import APIRouter, Depends

from marketplace.core.notifications import Notification, Notifier
from marketplace.dependencies import get_notifier

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=list[Notification])
async def drain_notifications(notifier: Notifier = Depends(get_notifier)):
    """
    Return pending notifications (oldest first) and mark them delivered.
    """
    return notifier.drain()
