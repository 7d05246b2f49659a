"""
Defines the API endpoint for snoozing a time block's pill notification.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from health_tracker import crud, models, schemas
from health_tracker.database import get_db
from health_tracker.scheduler import get_notification_tracker
from health_tracker.services.dose_generator import effective_time_block
from health_tracker.services.notifications import NotificationTracker
from health_tracker.utils.user_utils import get_user_id_from_header

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.post("/snooze", response_model=schemas.SnoozeResponse)
def snooze_pill_notification(
    request: schemas.SnoozeRequest,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
    tracker: NotificationTracker = Depends(get_notification_tracker),
):
    """
    Re-arms the pill notification of a time block so it fires again after the
    snooze interval. Snoozing the same block again replaces the earlier snooze.
    """
    pills = (
        crud.list_active(db, models.Medication, current_user_id)
        + crud.list_active(db, models.Supplement, current_user_id)
    )
    names = [p.name for p in pills if effective_time_block(p) == request.time_block]
    if not names:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active pills in this time block")

    due_at, notification = tracker.snooze(current_user_id, request.time_block, ", ".join(names), datetime.now())
    logger.info(f"User {current_user_id} snoozed {request.time_block} pills until {due_at:%H:%M}.")
    return schemas.SnoozeResponse(
        time_block=request.time_block,
        due_at=due_at,
        title=notification.title,
        body=notification.body,
    )
