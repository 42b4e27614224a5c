"""Small persistence helpers shared by the routers.

`BaseRepository` wraps the lookups that must turn into a 404 and the
update/delete commits; `save` persists a freshly built object.
"""

from typing import Any, Dict, Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from core.exceptions import NotFoundError
from database.models import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Per-model access bound to one session.

    Attributes:
        model: Mapped class the repository works on.
        session: Request-scoped session.
        resource: Label used in not-found messages (``"Diet plan"``).
    """

    def __init__(self, model: Type[T], session: Session, resource: Optional[str] = None):
        self.model = model
        self.session = session
        self.resource = resource or model.__name__

    def get_or_404(self, id: Any) -> T:
        """Raises NotFoundError when no row has primary key `id`."""
        obj = self.session.get(self.model, id)
        if obj is None:
            raise NotFoundError(self.resource, id)
        return obj

    def update(self, obj: T, changes: Dict[str, Any]) -> T:
        """Set mapped attributes from `changes`, commit and refresh.

        Keys that are not columns of the model are skipped.
        """
        for key, value in changes.items():
            if hasattr(self.model, key):
                setattr(obj, key, value)
        self.session.commit()
        self.session.refresh(obj)
        return obj

    def delete(self, obj: T) -> None:
        self.session.delete(obj)
        self.session.commit()


def save(session: Session, obj: T) -> T:
    """Add, commit and refresh a single object."""
    session.add(obj)
    session.commit()
    session.refresh(obj)
    return obj
