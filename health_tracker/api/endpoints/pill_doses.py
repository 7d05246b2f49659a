"""
Defines the API endpoints for daily pill doses: listing, manual creation,
status changes and generating a day's pending doses.
"""

import datetime as dt
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from health_tracker import crud, models, schemas
from health_tracker.api.deps import get_owned_or_404
from health_tracker.database import get_db
from health_tracker.services.dose_generator import generate_doses
from health_tracker.utils.user_utils import get_user_id_from_header

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pill-doses", tags=["Pill Doses"])


@router.get("", response_model=List[schemas.PillDose])
def list_pill_doses(
    scheduled_date: Optional[dt.date] = Query(None, alias="date"),
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    """Lists the user's doses, optionally only those scheduled on ``?date=YYYY-MM-DD``."""
    return crud.list_doses(db, current_user_id, scheduled_date)


@router.post("", response_model=schemas.PillDose, status_code=status.HTTP_201_CREATED)
def create_pill_dose(
    dose: schemas.PillDoseCreate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    try:
        return crud.create_owned(db, models.PillDose, current_user_id, dose.model_dump())
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A dose for this pill, date and time block already exists",
        )


@router.post("/generate", response_model=List[schemas.PillDose])
def generate_pill_doses(
    request: schemas.GenerateDosesRequest,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    """
    Creates the missing pending doses for the requested date from the
    user's active medications and supplements, then returns all doses of
    that date. Safe to call repeatedly.
    """
    if request.scheduled_date is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Date is required")
    return generate_doses(db, current_user_id, request.scheduled_date)


@router.patch("/{dose_id}", response_model=schemas.PillDose)
def update_pill_dose(
    dose_id: int,
    dose_update: schemas.PillDoseUpdate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    """Marks a dose taken, skipped or snoozed. ``takenAt`` and ``snoozedUntil`` may be cleared with null."""
    dose = get_owned_or_404(db, models.PillDose, current_user_id, dose_id, "Pill dose")
    return crud.update_entity(db, dose, dose_update.model_dump(exclude_unset=True))


@router.delete("/{dose_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_pill_dose(
    dose_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    dose = get_owned_or_404(db, models.PillDose, current_user_id, dose_id, "Pill dose")
    crud.delete_entity(db, dose)
    return
