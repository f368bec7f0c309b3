import logging
import uuid
from dataclasses import dataclass
from datetime import datetime

from app.comunidad.db.models import AuditEvent
from app.comunidad.repos.audit import AuditRepository

logger = logging.getLogger(__name__)


@dataclass
class AuditEventPayload:
    actor_id: uuid.UUID | None
    trace_id: str | None
    action: str
    entity_type: str
    entity_id: str | None
    before: dict | None = None
    after: dict | None = None
    result: str = "success"


class AuditService:
    """Best-effort audit trail for entity mutations.

    Write failures are logged and swallowed so the mutation that triggered
    them still succeeds.
    """

    def __init__(self, db):
        self.db = db
        self.repo = AuditRepository(db)

    def record_event(self, payload: AuditEventPayload) -> None:
        try:
            event = AuditEvent(
                actor_id=payload.actor_id,
                trace_id=payload.trace_id,
                action=payload.action,
                entity_type=payload.entity_type,
                entity_id=payload.entity_id,
                before_payload=payload.before,
                after_payload=payload.after,
                result=payload.result,
                created_at=datetime.utcnow(),
            )
            self.repo.create(event)
        except Exception:
            self.db.rollback()
            logger.exception(
                "Failed to write audit event",
                extra={
                    "action": payload.action,
                    "trace_id": payload.trace_id,
                    "entity_id": payload.entity_id,
                },
            )
