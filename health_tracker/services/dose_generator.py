"""
Daily dose generation for the pill planner.

A dose is identified by its natural key (pill type, pill id, date, time
block). Generating doses for a date fills in the keys that are missing for
the currently active medications and supplements and never touches doses
that already exist.
"""

import datetime as dt
import logging
from typing import List, Set

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from health_tracker import crud, models

logger = logging.getLogger(__name__)

DEFAULT_TIME_BLOCK = "morning"


def effective_time_block(pill) -> str:
    """The pill's time block, falling back to morning when unset."""
    return pill.time_block or DEFAULT_TIME_BLOCK


def dose_key(pill_type: str, pill_id: int, time_block: str) -> str:
    return f"{pill_type}-{pill_id}-{time_block}"


def _missing_doses(db: Session, user_id: int, scheduled_date: dt.date) -> List[models.PillDose]:
    existing_keys: Set[str] = {
        dose_key(d.pill_type, d.pill_id, d.scheduled_time_block)
        for d in crud.list_doses(db, user_id, scheduled_date)
    }

    new_doses = []
    for pill_type, model in (("medication", models.Medication), ("supplement", models.Supplement)):
        for pill in crud.list_active(db, model, user_id):
            time_block = effective_time_block(pill)
            key = dose_key(pill_type, pill.id, time_block)
            if key in existing_keys:
                continue
            existing_keys.add(key)
            new_doses.append(models.PillDose(
                user_id=user_id,
                pill_type=pill_type,
                pill_id=pill.id,
                scheduled_date=scheduled_date,
                scheduled_time_block=time_block,
                status="pending",
                taken_at=None,
                snoozed_until=None,
            ))
    return new_doses


def generate_doses(db: Session, user_id: int, scheduled_date: dt.date) -> List[models.PillDose]:
    """
    Creates the missing pending doses for a date and returns all doses of that date.

    Calling it again with the same active pills inserts nothing. Because the
    time block is part of the key, moving a pill to another block after its
    doses exist adds a dose for the new block and keeps the old one.

    Args:
        db (Session): The database session.
        user_id (int): Owner of the pills and doses.
        scheduled_date (date): The calendar date to generate for.

    Returns:
        List[PillDose]: Pre-existing plus newly inserted doses for the date.
    """
    for attempt in range(2):
        new_doses = _missing_doses(db, user_id, scheduled_date)
        if not new_doses:
            break
        db.add_all(new_doses)
        try:
            db.commit()
            logger.info(f"Generated {len(new_doses)} doses for user {user_id} on {scheduled_date}.")
            break
        except IntegrityError:
            # A concurrent generator inserted some of the same keys first
            db.rollback()
            if attempt == 1:
                raise
            logger.warning(f"Dose generation for user {user_id} on {scheduled_date} raced; retrying.")

    return crud.list_doses(db, user_id, scheduled_date)
