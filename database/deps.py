"""Dependency helpers that expose read/write DB session generators.

Endpoints inject `get_db_write` when they mutate and `get_db_read` for pure
listings so reads can be routed to a replica.
"""

from .database import get_read_session, get_write_session


def get_db_write():
    """Yield a write-capable DB session for FastAPI dependency injection."""
    yield from get_write_session()


def get_db_read():
    """Yield a read-only DB session for FastAPI dependency injection."""
    yield from get_read_session()
