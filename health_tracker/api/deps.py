"""
Shared helpers for the endpoint modules.
"""

from typing import Type

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from health_tracker import crud, models


def get_owned_or_404(db: Session, model: Type[models.Base], user_id: int, entity_id: int, label: str):
    """Loads a user-owned entity or raises a 404 naming it (e.g. "Medication not found")."""
    entity = crud.get_owned(db, model, user_id, entity_id)
    if entity is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return entity
