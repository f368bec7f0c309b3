from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class EntityCounts(BaseModel):
    active: int
    deleted: int


class AdminStatsResponse(BaseModel):
    entities: dict[str, EntityCounts]
    trace_id: str


class AuditEventView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    actor_id: UUID | None = None
    trace_id: str | None = None
    action: str
    entity_type: str
    entity_id: str | None = None
    before_payload: dict | None = None
    after_payload: dict | None = None
    result: str
    created_at: datetime


class AuditHistoryResponse(BaseModel):
    entity: str
    entity_id: str
    events: list[AuditEventView]
