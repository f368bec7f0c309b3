import uuid
from typing import Any, Generic, Mapping, TypeVar

from sqlalchemy import func, select

from app.comunidad.db.models import TrackedMixin

ModelT = TypeVar("ModelT", bound=TrackedMixin)


class EntityRepository(Generic[ModelT]):
    """Data access for one soft-deletable model."""

    def __init__(self, db, model: type[ModelT]):
        self.db = db
        self.model = model

    def _column(self, name: str):
        column = self.model.__table__.columns.get(name)
        if column is None:
            raise KeyError(name)
        return getattr(self.model, name)

    def get_by_id(self, entity_id: uuid.UUID) -> ModelT | None:
        return self.db.get(self.model, entity_id)

    def list(
        self,
        *,
        filters: Mapping[str, Any] | None = None,
        include_deleted: bool = False,
        order_by: str | None = None,
    ) -> list[ModelT]:
        stmt = select(self.model)
        if not include_deleted:
            stmt = stmt.where(self.model.is_deleted.is_(False))
        for name, value in (filters or {}).items():
            stmt = stmt.where(self._column(name) == value)
        if order_by:
            descending = order_by.startswith("-")
            column = self._column(order_by.lstrip("-"))
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        else:
            stmt = stmt.order_by(self.model.created_at.desc())
        return list(self.db.execute(stmt).scalars().all())

    def count(self, *, include_deleted: bool = False, deleted_only: bool = False) -> int:
        stmt = select(func.count()).select_from(self.model)
        if deleted_only:
            stmt = stmt.where(self.model.is_deleted.is_(True))
        elif not include_deleted:
            stmt = stmt.where(self.model.is_deleted.is_(False))
        return self.db.execute(stmt).scalar_one()

    def create(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def update(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity
