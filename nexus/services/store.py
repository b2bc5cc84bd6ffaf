"""
Entity store: the one place services touch the SQLAlchemy session.

Every call is guarded so a driver or constraint failure leaves the session
rolled back and surfaces as StorageError. Callers that own a uniqueness rule
(enrollment, mastery) pass `conflict=` to `save` and get their own domain
error instead when the unique constraint fires.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from nexus.errors import NexusError, StorageError
from nexus.utils.logger import configure_logging

logger = configure_logging()

T = TypeVar("T")


class EntityStore:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def guard(self, action: str, conflict: Optional[NexusError] = None) -> Iterator[None]:
        try:
            yield
        except IntegrityError as e:
            self.db.rollback()
            if conflict is not None:
                raise conflict from e
            logger.error("store constraint violation action=%s error=%s", action, e.orig)
            raise StorageError(f"Constraint violation during {action}") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("store failure action=%s error=%s", action, e)
            raise StorageError(f"Storage failure during {action}") from e

    def get(self, model: Type[T], entity_id: Optional[str]) -> Optional[T]:
        if not entity_id:
            return None
        with self.guard(f"get {model.__name__}"):
            return self.db.get(model, entity_id)

    def find(self, model: Type[T], *criteria: Any, order_by: Iterable[Any] = ()) -> list[T]:
        with self.guard(f"find {model.__name__}"):
            q = self.db.query(model).filter(*criteria)
            order = list(order_by)
            if order:
                q = q.order_by(*order)
            return q.all()

    def first(self, model: Type[T], *criteria: Any) -> Optional[T]:
        with self.guard(f"first {model.__name__}"):
            return self.db.query(model).filter(*criteria).first()

    def count(self, model: Type[T], *criteria: Any) -> int:
        with self.guard(f"count {model.__name__}"):
            return self.db.query(model).filter(*criteria).count()

    def save(self, *entities: Any, conflict: Optional[NexusError] = None) -> None:
        """Add and commit, then refresh each entity so column defaults are loaded."""
        with self.guard("save", conflict=conflict):
            for entity in entities:
                self.db.add(entity)
            self.db.commit()
            for entity in entities:
                self.db.refresh(entity)

    def delete(self, entity: Any) -> None:
        with self.guard(f"delete {type(entity).__name__}"):
            self.db.delete(entity)
            self.db.commit()
