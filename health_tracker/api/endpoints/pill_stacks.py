"""
Defines the API endpoints for pill stacks: named groups of pills taken
together in one time block.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from health_tracker import crud, models, schemas
from health_tracker.api.deps import get_owned_or_404
from health_tracker.database import get_db
from health_tracker.utils.user_utils import get_user_id_from_header

router = APIRouter(prefix="/pill-stacks", tags=["Pill Stacks"])


@router.get("", response_model=List[schemas.PillStack])
def list_pill_stacks(
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    return crud.list_owned(db, models.PillStack, current_user_id)


@router.get("/{stack_id}", response_model=schemas.PillStack)
def get_pill_stack(
    stack_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    return get_owned_or_404(db, models.PillStack, current_user_id, stack_id, "Pill stack")


@router.post("", response_model=schemas.PillStack, status_code=status.HTTP_201_CREATED)
def create_pill_stack(
    stack: schemas.PillStackCreate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    return crud.create_owned(db, models.PillStack, current_user_id, stack.model_dump())


@router.patch("/{stack_id}", response_model=schemas.PillStack)
def update_pill_stack(
    stack_id: int,
    stack_update: schemas.PillStackUpdate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    stack = get_owned_or_404(db, models.PillStack, current_user_id, stack_id, "Pill stack")
    return crud.update_entity(db, stack, stack_update.model_dump(exclude_unset=True))


@router.delete("/{stack_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_pill_stack(
    stack_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    """Deletes the stack label; pills that pointed at it keep their stack_id."""
    stack = get_owned_or_404(db, models.PillStack, current_user_id, stack_id, "Pill stack")
    crud.delete_entity(db, stack)
    return
