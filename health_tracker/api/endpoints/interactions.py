"""
Defines the API endpoints for medication/supplement interactions.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from health_tracker import crud, models, schemas
from health_tracker.database import get_db
from health_tracker.services.ai_client import HealthAIClient, get_ai_client
from health_tracker.services.interaction_check import run_interaction_check
from health_tracker.utils.user_utils import get_user_id_from_header

router = APIRouter(prefix="/interactions", tags=["Interactions"])


@router.get("", response_model=List[schemas.Interaction])
def list_interactions(
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    return crud.list_owned(db, models.Interaction, current_user_id)


@router.post("/check", response_model=List[schemas.Interaction])
def check_interactions(
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
    ai_client: HealthAIClient = Depends(get_ai_client),
):
    """
    Re-runs the interaction analysis over the user's active medications and
    supplements and returns the resulting list, which replaces the old one.
    """
    return run_interaction_check(db, current_user_id, ai_client)
