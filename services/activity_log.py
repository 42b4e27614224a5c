"""Per-dietitian activity feed.

Routers call `record_activity` after a successful change; entries are never
edited, only listed and deleted.
"""

from typing import Optional
from sqlalchemy.orm import Session

from core.exceptions import ValidationError
from core.logger import get_logger
from database import models

logger = get_logger("services.activity_log")

ACTIVITY_TYPES = ("diet_plan", "measurement", "appointment", "telegram", "client")


def record_activity(db: Session, user_id: int, type: str, description: str,
                    commit: bool = True) -> models.Activity:
    """Append an activity for `user_id`.

    Args:
        db: SQLAlchemy session.
        user_id: Owner of the feed.
        type: One of `ACTIVITY_TYPES`.
        description: Human readable text shown in the feed.
        commit: Commit immediately; pass False to join the caller's transaction.

    Raises:
        ValidationError: If `type` is not a known activity type.
    """
    if type not in ACTIVITY_TYPES:
        raise ValidationError(f"Unknown activity type: {type}", field="type")
    activity = models.Activity(user_id=user_id, type=type, description=description)
    db.add(activity)
    if commit:
        db.commit()
        db.refresh(activity)
    logger.info("Activity recorded for user %s: [%s] %s", user_id, type, description)
    return activity


def activity_query(db: Session, user_id: int, type: Optional[str] = None,
                   search: Optional[str] = None):
    """Query over one user's activities, optionally narrowed by type and text."""
    query = db.query(models.Activity).filter(models.Activity.user_id == user_id)
    if type and type != "all":
        query = query.filter(models.Activity.type == type)
    if search:
        query = query.filter(models.Activity.description.ilike(f"%{search}%"))
    return query
