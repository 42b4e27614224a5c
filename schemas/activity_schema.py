"""Schemas for the activity feed."""

from pydantic import BaseModel, Field
from typing import List, Optional


class ActivityResponse(BaseModel):
    id: int
    type: str
    description: str
    created_at: str
    time_since: str = Field("", examples=["5 dakika önce"])


class ActivityListResponse(BaseModel):
    activities: List[ActivityResponse]
    total_count: int
    total_pages: int
    current_page: int


class ActivityDeleteRequest(BaseModel):
    """Delete selected ids, or everything matching the filters when `delete_all` is set."""

    ids: Optional[List[int]] = Field(None, examples=[[3, 4, 5]])
    delete_all: bool = False
    type: Optional[str] = Field(None, examples=["telegram"])
    search: Optional[str] = None


class ActivityDeleteResponse(BaseModel):
    success: bool
    deleted_count: int
    message: str
