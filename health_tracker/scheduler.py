# health_tracker/scheduler.py

import logging
from datetime import datetime

from apscheduler.schedulers.background import BackgroundScheduler

from . import crud, models
from .database import SessionLocal
from .services.notifications import NotificationTracker

logger = logging.getLogger(__name__)

# Runs both the one-off ingestion jobs and the periodic notification check
scheduler = BackgroundScheduler()

# In-memory only; a restart forgets what already fired today
tracker = NotificationTracker()


def dispatch(func, *args):
    """Hands a function to the background scheduler to run as soon as possible."""
    scheduler.add_job(func, args=args, misfire_grace_time=None)


def get_task_dispatcher():
    """FastAPI dependency returning the callable used to start background work."""
    return dispatch


def get_notification_tracker() -> NotificationTracker:
    """FastAPI dependency returning the process-wide notification tracker."""
    return tracker


def check_notifications(session_factory=SessionLocal, now=None):
    """
    Logs every reminder and pill notification due at the current minute.
    """
    now = now or datetime.now()
    db = session_factory()
    notifications = []
    try:
        for user in crud.list_users(db):
            reminders = crud.list_owned(db, models.Reminder, user.id)
            medications = crud.list_active(db, models.Medication, user.id)
            supplements = crud.list_active(db, models.Supplement, user.id)
            notifications += tracker.due_reminders(user.id, reminders, now)
            notifications += tracker.due_pill_blocks(user.id, medications, supplements, now)
        notifications += tracker.due_snoozed(now)

        for notification in notifications:
            logger.info(f"Notification [{notification.key}] {notification.title}: {notification.body}")
    except Exception as e:
        logger.error(f"Error during scheduled notification check: {e}")
    finally:
        db.close()
    return notifications
