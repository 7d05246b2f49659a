"""
Entity access layer: typed create/read/update/delete helpers over a
SQLAlchemy session. No business rules live here.
"""

import datetime as dt
import logging
from typing import Any, Dict, List, Optional, Type

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import models
from .auth import get_password_hash
from .core.config import settings

logger = logging.getLogger(__name__)


# --- Generic helpers for user-owned tables ---

def get_owned(db: Session, model: Type[models.Base], user_id: int, entity_id: int):
    """Returns the entity with this id if it belongs to the user, else None."""
    return (
        db.query(model)
        .filter(model.id == entity_id, model.user_id == user_id)
        .first()
    )


def list_owned(db: Session, model: Type[models.Base], user_id: int) -> list:
    return db.query(model).filter(model.user_id == user_id).order_by(model.id.asc()).all()


def create_owned(db: Session, model: Type[models.Base], user_id: int, data: Dict[str, Any]):
    entity = model(**data, user_id=user_id)
    db.add(entity)
    db.commit()
    db.refresh(entity)
    return entity


def update_entity(db: Session, entity, data: Dict[str, Any]):
    """Sets the keys of ``data`` on the entity and saves it. Nulls for NOT NULL columns are ignored."""
    columns = entity.__table__.columns
    for key, value in data.items():
        if value is None and key in columns and not columns[key].nullable:
            continue
        setattr(entity, key, value)
    db.commit()
    db.refresh(entity)
    return entity


def delete_entity(db: Session, entity) -> None:
    # ORM-level delete so relationship cascades (markers, interactions) run
    db.delete(entity)
    db.commit()


# --- Users ---

def get_user(db: Session, user_id: int) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_username(db: Session, username: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.username == username).first()


def create_user(db: Session, username: str, password: str) -> models.User:
    user = models.User(
        username=username,
        hashed_password=get_password_hash(password),
        health_profile={},
        health_profile_status={"is_complete": False},
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def ensure_demo_user(db: Session) -> models.User:
    """Returns the demo user, creating it on first access."""
    user = get_user_by_username(db, settings.DEMO_USERNAME)
    if user:
        return user
    try:
        user = create_user(db, settings.DEMO_USERNAME, settings.DEMO_PASSWORD)
        logger.info(f"Created demo user '{settings.DEMO_USERNAME}' with id {user.id}.")
        return user
    except IntegrityError:
        # Another request created it first
        db.rollback()
        return get_user_by_username(db, settings.DEMO_USERNAME)


def list_users(db: Session) -> List[models.User]:
    return db.query(models.User).all()


# --- Lab results, markers and recommendations ---

def list_lab_results(db: Session, user_id: int) -> List[models.LabResult]:
    return (
        db.query(models.LabResult)
        .filter(models.LabResult.user_id == user_id)
        .order_by(models.LabResult.upload_date.desc(), models.LabResult.id.desc())
        .all()
    )


def list_health_markers(db: Session, user_id: int, lab_result_id: Optional[int] = None) -> List[models.HealthMarker]:
    query = (
        db.query(models.HealthMarker)
        .join(models.LabResult)
        .filter(models.LabResult.user_id == user_id)
    )
    if lab_result_id is not None:
        query = query.filter(models.HealthMarker.lab_result_id == lab_result_id)
    return query.order_by(models.HealthMarker.id.asc()).all()


def list_recommendations(db: Session, user_id: int, lab_result_id: Optional[int] = None) -> List[models.Recommendation]:
    query = (
        db.query(models.Recommendation)
        .join(models.LabResult)
        .filter(models.LabResult.user_id == user_id)
    )
    if lab_result_id is not None:
        query = query.filter(models.Recommendation.lab_result_id == lab_result_id)
    return query.order_by(models.Recommendation.id.asc()).all()


# --- Medications and supplements ---

def list_active(db: Session, model: Type[models.Base], user_id: int) -> list:
    """Active medications or supplements of a user (``model`` is either class)."""
    return (
        db.query(model)
        .filter(model.user_id == user_id, model.active.is_(True))
        .order_by(model.id.asc())
        .all()
    )


# --- Pill doses ---

def list_doses(db: Session, user_id: int, scheduled_date: Optional[dt.date] = None) -> List[models.PillDose]:
    query = db.query(models.PillDose).filter(models.PillDose.user_id == user_id)
    if scheduled_date is not None:
        query = query.filter(models.PillDose.scheduled_date == scheduled_date)
    return query.order_by(models.PillDose.id.asc()).all()


# --- Interactions ---

def delete_all_interactions(db: Session, user_id: int) -> int:
    """Deletes every interaction of the user without committing. Returns the row count."""
    return (
        db.query(models.Interaction)
        .filter(models.Interaction.user_id == user_id)
        .delete(synchronize_session=False)
    )
