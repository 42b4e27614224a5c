"""Blog API router.

Public, read-only article listing. No authentication required.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import List, Optional

from core.logger import get_logger
from core.repository import BaseRepository
from database import models
from database.deps import get_db_read
from schemas import BlogArticleResponse
from services.date_formatter import format_date_for_display
from services.form_helpers import slugify

logger = get_logger("api.blog")
router = APIRouter(prefix="/api/blog", tags=["blog"])


def article_to_response(a: models.BlogArticle) -> BlogArticleResponse:
    return BlogArticleResponse(
        id=a.id,
        title=a.title,
        slug=slugify(a.title),
        summary=a.summary,
        content=a.content,
        author=a.author,
        category=a.category,
        published_at=a.published_at.isoformat(),
        published_display=format_date_for_display(a.published_at),
        read_time=a.read_time,
        image_url=a.image_url,
    )


@router.get("", response_model=List[BlogArticleResponse])
def list_articles(
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db_read),
):
    """Return articles newest first, optionally filtered by text and category."""
    query = db.query(models.BlogArticle)
    if category:
        query = query.filter(models.BlogArticle.category == category)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(
            models.BlogArticle.title.ilike(pattern),
            models.BlogArticle.summary.ilike(pattern),
            models.BlogArticle.content.ilike(pattern),
        ))
    articles = query.order_by(models.BlogArticle.published_at.desc()).limit(limit).all()
    logger.info("Returning %s blog articles", len(articles))
    return [article_to_response(a) for a in articles]


@router.get("/{article_id}", response_model=BlogArticleResponse)
def get_article(article_id: int, db: Session = Depends(get_db_read)):
    return article_to_response(BaseRepository(models.BlogArticle, db, "Blog article").get_or_404(article_id))
