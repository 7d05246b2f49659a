"""
Defines all API endpoints for managing the user's medications.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from health_tracker import crud, models, schemas
from health_tracker.api.deps import get_owned_or_404
from health_tracker.database import get_db
from health_tracker.utils.user_utils import get_user_id_from_header

router = APIRouter(prefix="/medications", tags=["Medications"])


@router.get("", response_model=List[schemas.Medication])
def list_medications(
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    return crud.list_owned(db, models.Medication, current_user_id)


@router.get("/{medication_id}", response_model=schemas.Medication)
def get_medication(
    medication_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    return get_owned_or_404(db, models.Medication, current_user_id, medication_id, "Medication")


@router.post("", response_model=schemas.Medication, status_code=status.HTTP_201_CREATED)
def create_medication(
    medication: schemas.MedicationCreate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    """Creates a new medication for the current user."""
    return crud.create_owned(db, models.Medication, current_user_id, medication.model_dump())


@router.patch("/{medication_id}", response_model=schemas.Medication)
def update_medication(
    medication_id: int,
    medication_update: schemas.MedicationUpdate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    """
    Updates only the fields present in the request body. Setting ``active``
    to false takes the medication out of dose generation and interaction checks.
    """
    medication = get_owned_or_404(db, models.Medication, current_user_id, medication_id, "Medication")
    return crud.update_entity(db, medication, medication_update.model_dump(exclude_unset=True))


@router.delete("/{medication_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_medication(
    medication_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    """Deletes a medication and every interaction that refers to it."""
    medication = get_owned_or_404(db, models.Medication, current_user_id, medication_id, "Medication")
    crud.delete_entity(db, medication)
    return
