"""
Recomputes the medication/supplement interaction list of a user.

Each check replaces the whole list: whatever the model returns becomes the
new set of interactions, and anything it no longer reports disappears.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from health_tracker import crud, models
from health_tracker.llm_schemas import PillRef
from health_tracker.services.ai_client import HealthAIClient

logger = logging.getLogger(__name__)


def run_interaction_check(db: Session, user_id: int, ai_client: HealthAIClient) -> List[models.Interaction]:
    """
    Sends the user's active medications and supplements to the AI client and
    stores the interactions it reports in place of the previous ones.

    A failed AI call counts as an empty answer, so it clears the stored
    interactions like a check that found nothing.
    The ``user_override`` flag of pills is not consulted.
    """
    medications = crud.list_active(db, models.Medication, user_id)
    supplements = crud.list_active(db, models.Supplement, user_id)

    result = ai_client.check_interactions(
        [PillRef(id=m.id, name=m.name) for m in medications],
        [PillRef(id=s.id, name=s.name) for s in supplements],
    )
    if result.error:
        logger.error(f"Interaction check for user {user_id} failed, treating it as no interactions: {result.error}")

    medication_ids = {m.id for m in medications}
    supplement_ids = {s.id for s in supplements}

    deleted = crud.delete_all_interactions(db, user_id)
    stored = 0
    for finding in result.interactions:
        if finding.medication_id not in medication_ids or finding.supplement_id not in supplement_ids:
            logger.warning(
                f"Dropping interaction for unknown pair medication={finding.medication_id} "
                f"supplement={finding.supplement_id}."
            )
            continue
        db.add(models.Interaction(
            user_id=user_id,
            medication_id=finding.medication_id,
            supplement_id=finding.supplement_id,
            severity=finding.severity,
            description=finding.description,
            recommendation=finding.recommendation,
            separation_minutes=finding.separation_minutes,
        ))
        stored += 1
    db.commit()

    logger.info(f"Interaction check for user {user_id}: replaced {deleted} with {stored} interactions.")
    return crud.list_owned(db, models.Interaction, user_id)
