"""Repository classes encapsulating database operations.

Each repository is small and focused on a single entity (classes,
students). Repositories return SQLModel objects and perform
commits/refreshes where appropriate; they hold no business rules.
"""

from typing import List, Optional, Type
from sqlmodel import Session, SQLModel, select, col
from sqlalchemy import func
from . import models

# ids are stored as signed 64-bit integers
MAX_ID = 2**63 - 1


def _storable_id(entity_id) -> bool:
    return isinstance(entity_id, int) and 0 < entity_id <= MAX_ID


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class _EntityRepository:
    """find-all / find-by-id / upsert / delete-by-id for one table."""
    model: Type[SQLModel]

    def __init__(self, session: Session):
        self.session = session

    def find_all(self) -> List[SQLModel]:
        """Return every row ordered by primary key."""
        stmt = select(self.model).order_by(self.model.id)
        return self.session.exec(stmt).all()

    def find_by_id(self, entity_id: int) -> Optional[SQLModel]:
        """Fetch a row by primary key or return `None`.

        Ids that cannot be stored in the table are treated as absent.
        """
        if not _storable_id(entity_id):
            return None
        return self.session.get(self.model, entity_id)

    def save(self, entity: SQLModel) -> SQLModel:
        """Insert or update `entity` and return the managed instance.

        Entities carrying an id are merged into the session, so a detached
        object built from a DTO overwrites the stored row.
        """
        if entity.id is not None:
            entity = self.session.merge(entity)
        self.session.add(entity)
        self.session.commit()
        self.session.refresh(entity)
        return entity

    def delete_by_id(self, entity_id: int) -> bool:
        """Delete the row with `entity_id`; return False if it did not exist."""
        entity = self.find_by_id(entity_id)
        if entity is None:
            return False
        self.session.delete(entity)
        self.session.commit()
        return True

    def find_all_by_name(self, fragment: str) -> List[SQLModel]:
        """Case-insensitive substring match on `name`; `%` and `_` match literally."""
        pattern = f"%{_escape_like(fragment.strip().lower())}%"
        stmt = (
            select(self.model)
            .where(func.lower(col(self.model.name)).like(pattern, escape="\\"))
            .order_by(self.model.id)
        )
        return self.session.exec(stmt).all()


class ClassRepository(_EntityRepository):
    """CRUD operations for `SchoolClass` rows."""
    model = models.SchoolClass


class StudentRepository(_EntityRepository):
    """CRUD operations for `Student` rows."""
    model = models.Student

    def count_by_class(self, class_id: int) -> int:
        """Return how many students reference `class_id`."""
        if not _storable_id(class_id):
            return 0
        stmt = select(func.count()).select_from(models.Student).where(models.Student.class_id == class_id)
        return self.session.exec(stmt).one()
