"""Database package: ORM models, engines, sessions and seeding."""

from .database import (
    write_engine,
    read_engine,
    WriteSessionLocal,
    ReadSessionLocal,
    init_db,
    seed_blog_articles,
    get_write_session,
    get_read_session,
)
from . import models

__all__ = [
    "write_engine",
    "read_engine",
    "WriteSessionLocal",
    "ReadSessionLocal",
    "init_db",
    "seed_blog_articles",
    "get_write_session",
    "get_read_session",
    "models",
]
