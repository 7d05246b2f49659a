"""
Defines the API endpoints for lab results and the health markers and
recommendations extracted from them.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from health_tracker import crud, models, schemas
from health_tracker.api.deps import get_owned_or_404
from health_tracker.database import get_db, get_session_factory
from health_tracker.scheduler import get_task_dispatcher
from health_tracker.services import ingestion
from health_tracker.services.ai_client import HealthAIClient, get_ai_client
from health_tracker.utils.user_utils import get_user_id_from_header

router = APIRouter(tags=["Lab Results"])


@router.get("/lab-results", response_model=List[schemas.LabResult])
def list_lab_results(
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    """Lists the user's lab results, newest upload first."""
    return crud.list_lab_results(db, current_user_id)


@router.get("/lab-results/{lab_result_id}", response_model=schemas.LabResultDetail)
def get_lab_result(
    lab_result_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    """
    Returns one lab result with its markers and recommendations. Clients poll
    this endpoint to see a result move from 'processing' to 'completed' or 'error'.
    """
    return get_owned_or_404(db, models.LabResult, current_user_id, lab_result_id, "Lab result")


@router.post("/lab-results/upload", response_model=schemas.LabResult, status_code=status.HTTP_201_CREATED)
async def upload_lab_result(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
    ai_client: HealthAIClient = Depends(get_ai_client),
    session_factory=Depends(get_session_factory),
    dispatch=Depends(get_task_dispatcher),
):
    """
    Accepts a lab report file and starts its extraction in the background.

    The response is the new lab result in 'processing' state; extraction
    results are attached to it later.
    """
    content = await file.read()
    raw_text = ingestion.decode_upload(content)
    lab_result = ingestion.create_pending_lab_result(db, current_user_id, file.filename or "upload")
    dispatch(ingestion.process_lab_result, lab_result.id, raw_text, ai_client, session_factory)
    return lab_result


@router.post("/lab-results", response_model=schemas.LabResult, status_code=status.HTTP_201_CREATED)
def create_lab_result(
    payload: schemas.LabResultCreate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
    ai_client: HealthAIClient = Depends(get_ai_client),
    session_factory=Depends(get_session_factory),
    dispatch=Depends(get_task_dispatcher),
):
    """Same pipeline as the upload, for report text sent as JSON."""
    lab_result = ingestion.create_pending_lab_result(db, current_user_id, payload.file_name)
    dispatch(ingestion.process_lab_result, lab_result.id, payload.raw_text, ai_client, session_factory)
    return lab_result


@router.patch("/lab-results/{lab_result_id}", response_model=schemas.LabResult)
def update_lab_result(
    lab_result_id: int,
    payload: schemas.LabResultUpdate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    lab_result = get_owned_or_404(db, models.LabResult, current_user_id, lab_result_id, "Lab result")
    return crud.update_entity(db, lab_result, payload.model_dump(exclude_unset=True, exclude_none=True))


@router.delete("/lab-results/{lab_result_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_lab_result(
    lab_result_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    """Deletes a lab result together with its markers and recommendations."""
    lab_result = get_owned_or_404(db, models.LabResult, current_user_id, lab_result_id, "Lab result")
    crud.delete_entity(db, lab_result)
    return


@router.get("/health-markers", response_model=List[schemas.HealthMarker], tags=["Health Markers"])
def list_health_markers(
    lab_result_id: Optional[int] = Query(None, alias="labResultId"),
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    return crud.list_health_markers(db, current_user_id, lab_result_id)


@router.get("/recommendations", response_model=List[schemas.Recommendation], tags=["Recommendations"])
def list_recommendations(
    lab_result_id: Optional[int] = Query(None, alias="labResultId"),
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_user_id_from_header),
):
    return crud.list_recommendations(db, current_user_id, lab_result_id)
