# health_tracker/api/api.py
from fastapi import APIRouter

from health_tracker.api.endpoints import (
    interactions,
    lab_results,
    medications,
    notifications,
    pill_doses,
    pill_stacks,
    reminders,
    supplements,
    users,
)

api_router = APIRouter()
api_router.include_router(users.router)
api_router.include_router(lab_results.router)
api_router.include_router(medications.router)
api_router.include_router(supplements.router)
api_router.include_router(pill_stacks.router)
api_router.include_router(pill_doses.router)
api_router.include_router(interactions.router)
api_router.include_router(reminders.router)
api_router.include_router(notifications.router)
