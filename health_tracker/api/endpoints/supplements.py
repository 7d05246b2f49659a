"""
Defines all API endpoints for managing the user's supplements.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from health_tracker import crud, models, schemas
from health_tracker.api.deps import get_owned_or_404
from health_tracker.database import get_db
from health_tracker.utils.user_utils import get_user_id_from_header

router = APIRouter(prefix="/supplements", tags=["Supplements"])


@router.get("", response_model=List[schemas.Supplement])
def list_supplements(
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    return crud.list_owned(db, models.Supplement, current_user_id)


@router.get("/{supplement_id}", response_model=schemas.Supplement)
def get_supplement(
    supplement_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    return get_owned_or_404(db, models.Supplement, current_user_id, supplement_id, "Supplement")


@router.post("", response_model=schemas.Supplement, status_code=status.HTTP_201_CREATED)
def create_supplement(
    supplement: schemas.SupplementCreate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    return crud.create_owned(db, models.Supplement, current_user_id, supplement.model_dump())


@router.patch("/{supplement_id}", response_model=schemas.Supplement)
def update_supplement(
    supplement_id: int,
    supplement_update: schemas.SupplementUpdate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    supplement = get_owned_or_404(db, models.Supplement, current_user_id, supplement_id, "Supplement")
    return crud.update_entity(db, supplement, supplement_update.model_dump(exclude_unset=True))


@router.delete("/{supplement_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_supplement(
    supplement_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    """Deletes a supplement and every interaction that refers to it."""
    supplement = get_owned_or_404(db, models.Supplement, current_user_id, supplement_id, "Supplement")
    crud.delete_entity(db, supplement)
    return
