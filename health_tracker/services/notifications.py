"""
Decides which reminder and pill notifications are due at a given minute.

The tracker remembers what already fired today in memory only, so each
notification fires at most once per entity and day for the lifetime of the
process; a restart forgets it and may fire again.
"""

import datetime as dt
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence, Set, Tuple

from pydantic import BaseModel

from health_tracker.core.config import settings
from health_tracker.services.dose_generator import effective_time_block

# Wall-clock minute at which each time block's pills are announced
TIME_BLOCK_TRIGGERS = {
    "morning": "06:00",
    "midday": "11:00",
    "evening": "15:00",
    "bedtime": "20:00",
}


class Notification(BaseModel):
    key: str
    title: str
    body: str


def _hhmm(now: dt.datetime) -> str:
    return now.strftime("%H:%M")


def _weekday(now: dt.datetime) -> str:
    return now.strftime("%A").lower()


class NotificationTracker:
    """Keeps the "already fired today" set and pending snoozes."""

    def __init__(self, snooze_minutes: Optional[int] = None):
        minutes = settings.SNOOZE_MINUTES if snooze_minutes is None else snooze_minutes
        self.snooze_duration = dt.timedelta(minutes=minutes)
        self.fired_today: Set[str] = set()
        self.snoozed: Dict[str, Tuple[dt.datetime, Notification]] = {}
        self._day: Optional[dt.date] = None

    def _roll_day(self, now: dt.datetime) -> None:
        # Keys embed the date, so yesterday's entries can never match again
        if self._day != now.date():
            self._day = now.date()
            self.fired_today.clear()

    def due_reminders(self, user_id: int, reminders: Sequence, now: dt.datetime) -> List[Notification]:
        """Enabled reminders set for this minute and weekday that have not fired today."""
        self._roll_day(now)
        current_time, current_day = _hhmm(now), _weekday(now)
        due = []
        for reminder in reminders:
            if not reminder.enabled:
                continue
            key = f"reminder-{user_id}-{reminder.id}-{now.date().isoformat()}"
            if reminder.time == current_time and current_day in (reminder.days or []) and key not in self.fired_today:
                self.fired_today.add(key)
                due.append(Notification(
                    key=key,
                    title=reminder.title,
                    body=f"It's time for your {reminder.type} reminder.",
                ))
        return due

    def due_pill_blocks(
            self,
            user_id: int,
            medications: Sequence,
            supplements: Sequence,
            now: dt.datetime,
    ) -> List[Notification]:
        """One notification per time block whose trigger minute is now, listing its active pills."""
        self._roll_day(now)
        grouped: "OrderedDict[str, List[str]]" = OrderedDict()
        for pill in list(medications) + list(supplements):
            if not pill.active:
                continue
            grouped.setdefault(effective_time_block(pill), []).append(pill.name)

        current_time = _hhmm(now)
        due = []
        for time_block, names in grouped.items():
            trigger = TIME_BLOCK_TRIGGERS.get(time_block)
            if trigger is None:
                continue
            key = f"pills-{user_id}-{time_block}-{now.date().isoformat()}"
            if current_time == trigger and key not in self.fired_today:
                self.fired_today.add(key)
                due.append(Notification(
                    key=key,
                    title=f"Time for your {time_block} pills",
                    body=", ".join(names),
                ))
        return due

    def snooze(
            self,
            user_id: int,
            time_block: str,
            pill_names: str,
            now: dt.datetime,
    ) -> Tuple[dt.datetime, Notification]:
        """
        Re-arms a time block's notification for later and lets the block fire again today.

        Snoozing the same block twice replaces the earlier snooze. Returns the
        time at which the snoozed notification becomes due, and the notification.
        """
        self._roll_day(now)
        key = f"pills-{user_id}-{time_block}-{now.date().isoformat()}"
        self.fired_today.discard(key)
        due_at = now + self.snooze_duration
        notification = Notification(
            key=key,
            title=f"Time for your {time_block} pills (snoozed)",
            body=pill_names,
        )
        self.snoozed[key] = (due_at, notification)
        return due_at, notification

    def due_snoozed(self, now: dt.datetime) -> List[Notification]:
        """Pops and returns every snoozed notification whose time has come."""
        ready = [key for key, (due_at, _) in self.snoozed.items() if due_at <= now]
        return [self.snoozed.pop(key)[1] for key in ready]
