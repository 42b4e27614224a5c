"""Schemas for public blog articles."""

from pydantic import BaseModel
from typing import Optional


class BlogArticleResponse(BaseModel):
    id: int
    title: str
    slug: str
    summary: str
    content: Optional[str] = None
    author: str
    category: Optional[str] = None
    published_at: str
    published_display: str
    read_time: int
    image_url: Optional[str] = None
