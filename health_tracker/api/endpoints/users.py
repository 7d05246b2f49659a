"""
Defines the API endpoints for users and their health profile.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from health_tracker import crud, schemas
from health_tracker.database import get_db
from health_tracker.services.health_profile import apply_profile_patch, should_show_onboarding, skip_profile
from health_tracker.utils.user_utils import get_user_id_from_header

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])


def _to_user_response(user) -> schemas.UserResponse:
    status_data = user.health_profile_status or {}
    return schemas.UserResponse(
        id=user.id,
        username=user.username,
        health_profile=schemas.HealthProfile.model_validate(user.health_profile or {}),
        health_profile_status=schemas.HealthProfileStatus.model_validate(status_data),
        show_onboarding=should_show_onboarding(status_data),
    )


@router.post("/users", response_model=schemas.UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(user: schemas.UserCreate, db: Session = Depends(get_db)):
    """
    Registers a new user. The returned id is what clients send in the
    ``X-User-ID`` header.
    """
    if crud.get_user_by_username(db, user.username):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already registered")
    db_user = crud.create_user(db, user.username, user.password)
    logger.info(f"Registered user '{db_user.username}' with id {db_user.id}.")
    return _to_user_response(db_user)


@router.get("/me", response_model=schemas.UserResponse)
def read_current_user(
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    return _to_user_response(crud.get_user(db, current_user_id))


@router.patch("/me/health-profile", response_model=schemas.HealthProfileResponse)
def update_health_profile(
    profile_update: schemas.HealthProfile,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    """
    Merges the sent fields into the stored profile and recomputes whether it
    is complete. Fields left out (or sent as null) keep their stored value.
    """
    user = crud.get_user(db, current_user_id)
    apply_profile_patch(user, profile_update.model_dump(exclude_unset=True, exclude_none=True))
    db.commit()
    db.refresh(user)
    return schemas.HealthProfileResponse(
        health_profile=schemas.HealthProfile.model_validate(user.health_profile),
        health_profile_status=schemas.HealthProfileStatus.model_validate(user.health_profile_status),
    )


@router.post("/me/health-profile/skip", response_model=schemas.HealthProfileStatusResponse)
def skip_health_profile(
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    user = crud.get_user(db, current_user_id)
    skip_profile(user)
    db.commit()
    db.refresh(user)
    return schemas.HealthProfileStatusResponse(
        health_profile_status=schemas.HealthProfileStatus.model_validate(user.health_profile_status),
    )
