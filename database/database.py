"""Database helpers: engines, session factories and DB initialization.

Provides read/write session factories and an `init_db` helper that creates
tables and seeds the blog articles when the table is empty.
"""

import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from .models import Base, BlogArticle
from data.blog_articles import BLOG_ARTICLES

# Read/Write partitioning pattern.
# Set WRITE_DATABASE_URL and READ_DATABASE_URL to different instances to route
# reads to a replica; by default both point at the same SQLite file.
WRITE_DATABASE_URL = os.getenv("WRITE_DATABASE_URL", "sqlite:///diyetim.db")
READ_DATABASE_URL = os.getenv("READ_DATABASE_URL", WRITE_DATABASE_URL)


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


# Engines
write_engine = create_engine(WRITE_DATABASE_URL, **_engine_kwargs(WRITE_DATABASE_URL))
read_engine = create_engine(READ_DATABASE_URL, **_engine_kwargs(READ_DATABASE_URL))

# Session factories
WriteSessionLocal = sessionmaker(bind=write_engine)
ReadSessionLocal = sessionmaker(bind=read_engine)


def seed_blog_articles(session) -> int:
    """Insert the built-in blog articles if the table is empty.

    Returns:
        Number of articles inserted.
    """
    if session.query(BlogArticle).count():
        return 0
    for item in BLOG_ARTICLES:
        session.add(BlogArticle(**item))
    session.commit()
    return len(BLOG_ARTICLES)


def init_db(engine=None, session_factory=None):
    """Create all tables and seed the blog.

    Args:
        engine: Engine to create tables on (defaults to the write engine).
        session_factory: Session factory used for seeding.
    """
    engine = engine or write_engine
    session_factory = session_factory or WriteSessionLocal
    Base.metadata.create_all(bind=engine)
    session = session_factory()
    try:
        seed_blog_articles(session)
    finally:
        session.close()


# Convenience generators for dependency injection
def get_write_session():
    """Yield a write-enabled SQLAlchemy session for the request scope."""
    db = WriteSessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_read_session():
    """Yield a read-only SQLAlchemy session for the request scope."""
    db = ReadSessionLocal()
    try:
        yield db
    finally:
        db.close()
