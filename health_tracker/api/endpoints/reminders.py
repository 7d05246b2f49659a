"""
Defines all API endpoints related to user reminders.
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from health_tracker import crud, models, schemas
from health_tracker.api.deps import get_owned_or_404
from health_tracker.database import get_db
from health_tracker.utils.user_utils import get_user_id_from_header

# Create a new router for reminders
router = APIRouter(prefix="/reminders", tags=["Reminders"])


@router.post("", response_model=schemas.Reminder, status_code=status.HTTP_201_CREATED)
def create_reminder(
    reminder: schemas.ReminderCreate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    """
    Creates a new reminder for the current user.
    """
    return crud.create_owned(db, models.Reminder, current_user_id, reminder.model_dump())


@router.get("", response_model=List[schemas.Reminder])
def get_user_reminders(
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    """
    Retrieves all reminders for the current user.
    """
    return crud.list_owned(db, models.Reminder, current_user_id)


@router.get("/{reminder_id}", response_model=schemas.Reminder)
def get_reminder(
    reminder_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    return get_owned_or_404(db, models.Reminder, current_user_id, reminder_id, "Reminder")


@router.patch("/{reminder_id}", response_model=schemas.Reminder)
def update_reminder(
    reminder_id: int,
    reminder_update: schemas.ReminderUpdate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    db_reminder = get_owned_or_404(db, models.Reminder, current_user_id, reminder_id, "Reminder")
    return crud.update_entity(db, db_reminder, reminder_update.model_dump(exclude_unset=True))


@router.delete("/{reminder_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_reminder(
    reminder_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    """
    Deletes a specific reminder for the current user.
    """
    db_reminder = get_owned_or_404(db, models.Reminder, current_user_id, reminder_id, "Reminder")
    crud.delete_entity(db, db_reminder)
    # For a 204 response, you shouldn't return a body
    return
