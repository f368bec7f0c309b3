from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from app.comunidad.core.metrics import metrics
from app.comunidad.db.models import Noticia, Organizacion, Persona, Proyecto, Tema, TrackedMixin
from app.comunidad.repos.entities import EntityRepository
from app.comunidad.schemas.entities import (
    NoticiaCreate,
    NoticiaUpdate,
    OrganizacionCreate,
    OrganizacionUpdate,
    PersonaCreate,
    PersonaUpdate,
    ProyectoCreate,
    ProyectoUpdate,
    TemaCreate,
    TemaUpdate,
)
from app.comunidad.services.audit import AuditEventPayload, AuditService
from app.comunidad.services.results import ServiceResult, conflict, from_exception, invalid_field, not_found

logger = logging.getLogger(__name__)

# managed by the service, never taken from client values
PROTECTED_FIELDS = frozenset(
    {
        "id",
        "created_at",
        "updated_at",
        "created_by_uid",
        "updated_by_uid",
        "is_deleted",
        "deleted_at",
        "deleted_by_uid",
    }
)


@dataclass(frozen=True)
class EntityDefinition:
    name: str
    model: type[TrackedMixin]
    create_schema: type[BaseModel]
    update_schema: type[BaseModel]


ENTITY_DEFINITIONS: dict[str, EntityDefinition] = {
    definition.name: definition
    for definition in (
        EntityDefinition("personas", Persona, PersonaCreate, PersonaUpdate),
        EntityDefinition("organizaciones", Organizacion, OrganizacionCreate, OrganizacionUpdate),
        EntityDefinition("proyectos", Proyecto, ProyectoCreate, ProyectoUpdate),
        EntityDefinition("temas", Tema, TemaCreate, TemaUpdate),
        EntityDefinition("noticias", Noticia, NoticiaCreate, NoticiaUpdate),
    )
}


def get_definition(name: str) -> EntityDefinition | None:
    return ENTITY_DEFINITIONS.get(name)


@dataclass(frozen=True)
class Transition:
    field: str
    target: str
    allowed_from: frozenset


# None stands for a persona row created before estado_verificacion had a default
WORKFLOWS: dict[str, dict[str, Transition]] = {
    "personas": {
        "approve": Transition(
            "estado_verificacion", "pendiente_aprobacion", frozenset({None, "sin_invitacion", "rechazada"})
        ),
        "promote": Transition("categoria_principal", "comunidad_activa", frozenset({"comunidad_general"})),
    },
    "organizaciones": {
        "verify": Transition("estado_verificacion", "verificada", frozenset({"pendiente_aprobacion"})),
        "reject": Transition(
            "estado_verificacion", "rechazada", frozenset({"sin_invitacion", "pendiente_aprobacion"})
        ),
    },
}


def get_transition(entity: str, action: str) -> Transition | None:
    return WORKFLOWS.get(entity, {}).get(action)


def _json_value(value: Any) -> Any:
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def to_dict(entity: TrackedMixin) -> dict[str, Any]:
    return {column.key: _json_value(getattr(entity, column.key)) for column in entity.__table__.columns}


def _parse_id(entity_id: Any) -> uuid.UUID | None:
    if isinstance(entity_id, uuid.UUID):
        return entity_id
    try:
        return uuid.UUID(str(entity_id))
    except (TypeError, ValueError):
        return None


class EntityService:
    """CRUD with soft delete over one registered entity.

    Every operation returns a :class:`ServiceResult`; database failures are
    rolled back and reported as ``SERVICE_ERROR`` instead of raised.
    """

    def __init__(self, db, definition: EntityDefinition, *, trace_id: str | None = None):
        self.db = db
        self.definition = definition
        self.repo = EntityRepository(db, definition.model)
        self.audit = AuditService(db)
        self.trace_id = trace_id

    @property
    def model(self):
        return self.definition.model

    def _failed(self, exc: SQLAlchemyError, operation: str) -> ServiceResult:
        self.db.rollback()
        logger.exception(
            "Entity operation failed",
            extra={"entity": self.definition.name, "operation": operation, "trace_id": self.trace_id},
        )
        return ServiceResult.fail(from_exception(exc, f"{self.definition.name}.{operation}"))

    def _record(self, action: str, entity, actor_id: str | None, before: dict | None) -> None:
        metrics.record_entity_mutation(self.definition.name, action)
        self.audit.record_event(
            AuditEventPayload(
                actor_id=_parse_id(actor_id),
                trace_id=self.trace_id,
                action=f"{self.definition.name}.{action}",
                entity_type=self.definition.name,
                entity_id=str(entity.id),
                before=before,
                after=to_dict(entity),
            )
        )

    def _writable(self, values: Mapping[str, Any], *, skip_null_required: bool = False) -> dict[str, Any]:
        columns = self.model.__table__.columns
        writable = {}
        for key, value in values.items():
            column = columns.get(key)
            if column is None or key in PROTECTED_FIELDS:
                continue
            if skip_null_required and value is None and not column.nullable:
                continue
            writable[key] = value
        return writable

    def _load(self, entity_id: Any):
        parsed = _parse_id(entity_id)
        if parsed is None:
            return None
        return self.repo.get_by_id(parsed)

    def get_all(
        self,
        filters: Mapping[str, Any] | None = None,
        include_deleted: bool = False,
        order_by: str | None = None,
    ) -> ServiceResult[list]:
        try:
            rows = self.repo.list(filters=filters, include_deleted=include_deleted, order_by=order_by)
        except KeyError as exc:
            return ServiceResult.fail(invalid_field(self.definition.name, exc.args[0]))
        except SQLAlchemyError as exc:
            return self._failed(exc, "get_all")
        return ServiceResult.ok(rows)

    def get_by_id(self, entity_id: Any) -> ServiceResult:
        try:
            entity = self._load(entity_id)
        except SQLAlchemyError as exc:
            return self._failed(exc, "get_by_id")
        if entity is None:
            return ServiceResult.fail(not_found(self.definition.name, entity_id))
        return ServiceResult.ok(entity)

    def create(self, values: Mapping[str, Any] | BaseModel, actor_id: str | None) -> ServiceResult:
        if isinstance(values, BaseModel):
            values = values.model_dump(exclude_none=True)
        entity = self.model(**self._writable(values))
        entity.created_by_uid = _parse_id(actor_id)
        entity.created_at = datetime.utcnow()
        try:
            entity = self.repo.create(entity)
        except SQLAlchemyError as exc:
            return self._failed(exc, "create")
        self._record("create", entity, actor_id, None)
        return ServiceResult.ok(entity)

    def update(self, entity_id: Any, values: Mapping[str, Any] | BaseModel, actor_id: str | None) -> ServiceResult:
        if isinstance(values, BaseModel):
            values = values.model_dump(exclude_unset=True)
        try:
            entity = self._load(entity_id)
            if entity is None:
                return ServiceResult.fail(not_found(self.definition.name, entity_id))
            before = to_dict(entity)
            for key, value in self._writable(values, skip_null_required=True).items():
                setattr(entity, key, value)
            entity.updated_by_uid = _parse_id(actor_id)
            entity.updated_at = datetime.utcnow()
            entity = self.repo.update(entity)
        except SQLAlchemyError as exc:
            return self._failed(exc, "update")
        self._record("update", entity, actor_id, before)
        return ServiceResult.ok(entity)

    def soft_delete(self, entity_id: Any, actor_id: str | None) -> ServiceResult:
        try:
            entity = self._load(entity_id)
            if entity is None:
                return ServiceResult.fail(not_found(self.definition.name, entity_id))
            if entity.is_deleted:
                return ServiceResult.fail(
                    conflict("ALREADY_DELETED", "Resource is already deleted", self.definition.name, entity_id)
                )
            before = to_dict(entity)
            entity.is_deleted = True
            entity.deleted_at = datetime.utcnow()
            entity.deleted_by_uid = _parse_id(actor_id)
            entity = self.repo.update(entity)
        except SQLAlchemyError as exc:
            return self._failed(exc, "soft_delete")
        self._record("soft_delete", entity, actor_id, before)
        return ServiceResult.ok(entity)

    def restore(self, entity_id: Any, actor_id: str | None = None) -> ServiceResult:
        try:
            entity = self._load(entity_id)
            if entity is None:
                return ServiceResult.fail(not_found(self.definition.name, entity_id))
            if not entity.is_deleted:
                return ServiceResult.fail(
                    conflict("NOT_DELETED", "Resource is not deleted", self.definition.name, entity_id)
                )
            before = to_dict(entity)
            entity.is_deleted = False
            entity.deleted_at = None
            entity.deleted_by_uid = None
            entity = self.repo.update(entity)
        except SQLAlchemyError as exc:
            return self._failed(exc, "restore")
        self._record("restore", entity, actor_id, before)
        return ServiceResult.ok(entity)

    def transition(self, entity_id: Any, action: str, actor_id: str | None) -> ServiceResult:
        """Apply the ``action`` step of this entity's workflow to one live row.

        Deleted rows read as not found; a row outside the step's source states
        fails with ``INVALID_STATE``.
        """
        step = WORKFLOWS[self.definition.name][action]
        try:
            entity = self._load(entity_id)
            if entity is None or entity.is_deleted:
                return ServiceResult.fail(not_found(self.definition.name, entity_id))
            current = getattr(entity, step.field)
            if current not in step.allowed_from:
                return ServiceResult.fail(
                    conflict(
                        "INVALID_STATE",
                        f"Cannot {action} with {step.field}={current}",
                        self.definition.name,
                        entity_id,
                    )
                )
            before = to_dict(entity)
            setattr(entity, step.field, step.target)
            entity.updated_by_uid = _parse_id(actor_id)
            entity.updated_at = datetime.utcnow()
            entity = self.repo.update(entity)
        except SQLAlchemyError as exc:
            return self._failed(exc, action)
        self._record(action, entity, actor_id, before)
        return ServiceResult.ok(entity)

    def history(self, entity_id: Any) -> ServiceResult[list]:
        """Audit events recorded for one row, oldest first."""
        result = self.get_by_id(entity_id)
        if not result.success:
            return result
        try:
            events = self.audit.repo.list_for_entity(self.definition.name, str(result.data.id))
        except SQLAlchemyError as exc:
            return self._failed(exc, "history")
        return ServiceResult.ok(events)

    def count(self, include_deleted: bool = False, *, deleted_only: bool = False) -> ServiceResult[int]:
        try:
            total = self.repo.count(include_deleted=include_deleted, deleted_only=deleted_only)
        except SQLAlchemyError as exc:
            return self._failed(exc, "count")
        return ServiceResult.ok(total)
