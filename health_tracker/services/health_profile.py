"""
Health profile completion and onboarding logic.

``is_complete`` is never set directly: it is derived from the profile
every time the profile changes. Skipping is a separate flag that only
hides the onboarding prompt.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from health_tracker import models

REQUIRED_NUMERIC_FIELDS = ("age", "height_cm", "weight_kg")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_profile_complete(profile: Dict[str, Any]) -> bool:
    """True when age, height and weight are all present and numeric."""
    return all(_is_number(profile.get(field)) for field in REQUIRED_NUMERIC_FIELDS)


def should_show_onboarding(status: Dict[str, Any]) -> bool:
    """Onboarding is shown until the profile is complete or the user skipped it."""
    return not status.get("is_complete", False) and not status.get("skipped_at")


def apply_profile_patch(user: models.User, patch: Dict[str, Any]) -> None:
    """
    Shallow-merges ``patch`` into the user's profile and recomputes its status.

    Keys absent from the patch keep their previous value. The skip flag is
    cleared on every update, even an empty one.
    """
    profile = dict(user.health_profile or {})
    profile.update(patch)

    user.health_profile = profile
    user.health_profile_status = {
        "is_complete": is_profile_complete(profile),
        "last_updated": _now_iso(),
        "skipped_at": None,
    }


def skip_profile(user: models.User) -> None:
    """Records that the user skipped onboarding; the profile itself is untouched."""
    status = dict(user.health_profile_status or {"is_complete": False})
    status["skipped_at"] = _now_iso()
    user.health_profile_status = status
