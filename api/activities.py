"""Activities API router: paginated feed and bulk deletion."""

import math
from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from core.exceptions import ValidationError
from core.logger import get_logger
from core.security import get_current_user
from database import models
from database.deps import get_db_read, get_db_write
from schemas import ActivityDeleteRequest, ActivityDeleteResponse, ActivityListResponse, ActivityResponse
from services.activity_log import activity_query
from services.date_formatter import get_time_since

logger = get_logger("api.activities")
router = APIRouter(prefix="/api", tags=["activities"])


def activity_to_response(a: models.Activity) -> ActivityResponse:
    return ActivityResponse(
        id=a.id,
        type=a.type,
        description=a.description,
        created_at=a.created_at.isoformat(),
        time_since=get_time_since(a.created_at),
    )


@router.get("/activities", response_model=ActivityListResponse)
def list_activities(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = Query("", description="Case-insensitive match on the description"),
    type: str = Query("all", description="Activity type or 'all'"),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_read),
):
    """Return one page of the caller's feed, newest first."""
    query = activity_query(db, current_user.id, type=type, search=search.strip())
    total_count = query.count()
    rows = (
        query.order_by(models.Activity.created_at.desc(), models.Activity.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return ActivityListResponse(
        activities=[activity_to_response(a) for a in rows],
        total_count=total_count,
        total_pages=math.ceil(total_count / limit),
        current_page=page,
    )


@router.delete("/activities", response_model=ActivityDeleteResponse)
def delete_activities(
    payload: ActivityDeleteRequest = Body(...),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
):
    """Delete the listed ids, or everything matching the filters with `delete_all`.

    Raises:
        ValidationError: If neither `ids` nor `delete_all` is given.
    """
    if payload.ids:
        query = db.query(models.Activity).filter(
            models.Activity.user_id == current_user.id,
            models.Activity.id.in_(payload.ids),
        )
    elif payload.delete_all:
        query = activity_query(db, current_user.id, type=payload.type, search=payload.search)
    else:
        raise ValidationError("Provide activity ids or set delete_all")

    deleted = query.delete(synchronize_session=False)
    db.commit()
    logger.info("User %s deleted %s activities", current_user.id, deleted)
    return ActivityDeleteResponse(success=True, deleted_count=deleted, message=f"{deleted} aktivite silindi")
