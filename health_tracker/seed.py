# health_tracker/seed.py
"""
Seeds a user's account with a small sample pill plan. Runs only when the
user has no medications yet, so calling it repeatedly is harmless.
"""

import logging

from sqlalchemy.orm import Session

from . import models

logger = logging.getLogger(__name__)


def seed_demo_data(db: Session, user_id: int) -> bool:
    """Inserts sample stacks, medications, supplements and a reminder. Returns True if it seeded."""
    if db.query(models.Medication).filter(models.Medication.user_id == user_id).first() is not None:
        logger.info("Database already seeded, skipping...")
        return False

    logger.info(f"Seeding sample data for user {user_id}...")

    morning_stack = models.PillStack(
        user_id=user_id, name="Morning Stack", time_block="morning", scheduled_time="08:00",
        description="Daily morning vitamins and medications with breakfast",
    )
    evening_stack = models.PillStack(
        user_id=user_id, name="Evening Stack", time_block="evening", scheduled_time="21:00",
        description="Evening medications and supplements before bed",
    )
    db.add_all([morning_stack, evening_stack])
    db.flush()

    db.add_all([
        models.Medication(
            user_id=user_id, name="Lisinopril", dosage="10mg", frequency="Once daily",
            time_of_day="morning", time_block="morning", scheduled_time="08:00", food_rule="either",
            stack_id=morning_stack.id, why_taking="Controls blood pressure",
            notes="Take consistently at the same time each day",
        ),
        models.Medication(
            user_id=user_id, name="Metformin", dosage="500mg", frequency="Twice daily",
            time_of_day="morning", time_block="morning", scheduled_time="08:00", food_rule="with_food",
            with_food=True, stack_id=morning_stack.id, why_taking="Blood sugar management",
            notes="Take with meals to reduce stomach upset",
        ),
        models.Supplement(
            user_id=user_id, name="Vitamin D3", dosage="2000 IU", frequency="Once daily",
            time_block="morning", food_rule="with_food", with_food=True, stack_id=morning_stack.id,
            reason="Low vitamin D on last lab report", why_taking="Bone and immune health",
        ),
        models.Supplement(
            user_id=user_id, name="Magnesium Glycinate", dosage="200mg", frequency="Once daily",
            time_block="evening", food_rule="either", stack_id=evening_stack.id,
            reason="Sleep support", why_taking="Muscle relaxation and sleep quality",
        ),
        models.Reminder(
            user_id=user_id, title="Evening walk", time="18:30",
            days=["monday", "wednesday", "friday"], type="activity", enabled=True,
        ),
    ])
    db.commit()
    return True
