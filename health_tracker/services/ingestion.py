"""
Lab-result ingestion pipeline.

The upload endpoint only creates a ``processing`` record. The actual work,
AI extraction followed by storage of markers and recommendations, runs
later as a background job which opens its own database session and updates
the same record by id. Clients poll the lab result to see it finish.
"""

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from health_tracker import models
from health_tracker.services.ai_client import HealthAIClient

logger = logging.getLogger(__name__)

STATUS_PROCESSING = "processing"
STATUS_COMPLETED = "completed"
STATUS_ERROR = "error"


def decode_upload(content: bytes) -> str:
    """Decodes uploaded bytes as UTF-8 text, replacing invalid sequences."""
    return content.decode("utf-8", errors="replace")


def to_decimal(value) -> Optional[Decimal]:
    """Converts a numeric value to Decimal via its string form (fits Numeric(10, 3))."""
    if value is None:
        return None
    return Decimal(str(value))


def create_pending_lab_result(db: Session, user_id: int, file_name: str) -> models.LabResult:
    """The synchronous part of an upload: store the record as processing."""
    lab_result = models.LabResult(
        user_id=user_id,
        file_name=file_name,
        status=STATUS_PROCESSING,
        raw_text=None,
    )
    db.add(lab_result)
    db.commit()
    db.refresh(lab_result)
    return lab_result


def _set_status(db: Session, lab_result_id: int, status: str, raw_text: Optional[str] = None) -> None:
    lab_result = db.query(models.LabResult).filter(models.LabResult.id == lab_result_id).first()
    if lab_result is None:
        logger.warning(f"Lab result {lab_result_id} disappeared before it could be marked '{status}'.")
        return
    lab_result.status = status
    if raw_text is not None:
        lab_result.raw_text = raw_text
    db.commit()


def process_lab_result(lab_result_id: int, raw_text: str, ai_client: HealthAIClient, session_factory) -> None:
    """
    Extracts and stores the contents of one lab report.

    Markers and recommendations are committed one at a time, so a failure
    part way through leaves the rows written so far in place and only flips
    the status to ``error``. There is no retry; a fresh upload is needed.

    Args:
        lab_result_id (int): The record created by the upload.
        raw_text (str): The decoded report text.
        ai_client (HealthAIClient): The extraction collaborator.
        session_factory: Callable returning a new SQLAlchemy session.
    """
    db = session_factory()
    try:
        if db.query(models.LabResult.id).filter(models.LabResult.id == lab_result_id).first() is None:
            logger.warning(f"Lab result {lab_result_id} was deleted before processing started.")
            return

        extracted = ai_client.extract_lab_data(raw_text)
        if extracted.error:
            logger.error(f"Extraction failed for lab result {lab_result_id}: {extracted.error}")
            _set_status(db, lab_result_id, STATUS_ERROR)
            return

        for marker in extracted.markers:
            db.add(models.HealthMarker(
                lab_result_id=lab_result_id,
                name=marker.name,
                value=to_decimal(marker.value),
                unit=marker.unit,
                normal_min=to_decimal(marker.normal_min),
                normal_max=to_decimal(marker.normal_max),
                status=marker.status,
                category=marker.category,
            ))
            db.commit()

        for rec in extracted.recommendations:
            db.add(models.Recommendation(
                lab_result_id=lab_result_id,
                type=rec.type,
                title=rec.title,
                description=rec.description,
                priority=rec.priority,
                related_marker=rec.related_marker,
                action_items=rec.action_items,
            ))
            db.commit()

        _set_status(db, lab_result_id, STATUS_COMPLETED, raw_text=raw_text)
        logger.info(
            f"Lab result {lab_result_id} completed with {len(extracted.markers)} markers "
            f"and {len(extracted.recommendations)} recommendations."
        )
    except Exception as e:
        logger.exception(f"Error processing lab result {lab_result_id}: {e}")
        db.rollback()
        try:
            _set_status(db, lab_result_id, STATUS_ERROR)
        except Exception as status_error:
            logger.error(f"Could not mark lab result {lab_result_id} as failed: {status_error}")
            db.rollback()
    finally:
        db.close()
