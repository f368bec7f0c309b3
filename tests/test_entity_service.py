import logging
import uuid

import pytest
from sqlalchemy.exc import OperationalError

from app.comunidad.core.error_catalog import AppError
from app.comunidad.repos.audit import AuditRepository
from app.comunidad.repos.entities import EntityRepository
from app.comunidad.schemas.entities import PersonaCreate, PersonaUpdate
from app.comunidad.services.entities import EntityService, get_definition
from app.comunidad.services.results import unwrap
from tests.helpers import create_persona


@pytest.fixture()
def personas(db_session):
    return EntityService(db_session, get_definition("personas"), trace_id="trace-service")


def test_get_all_excludes_deleted_by_default(personas, db_session):
    create_persona(db_session, "Ana")
    create_persona(db_session, "Borrada", is_deleted=True)

    result = personas.get_all()
    assert result.success is True
    assert [row.nombre for row in result.data] == ["Ana"]
    assert len(personas.get_all(include_deleted=True).data) == 2


def test_get_all_with_filters_and_order(personas, db_session):
    create_persona(db_session, "Beto", activo=True)
    create_persona(db_session, "Ana", activo=True)
    create_persona(db_session, "Caro", activo=False)

    result = personas.get_all(filters={"activo": True}, order_by="nombre")
    assert [row.nombre for row in result.data] == ["Ana", "Beto"]

    descending = personas.get_all(order_by="-nombre")
    assert [row.nombre for row in descending.data] == ["Caro", "Beto", "Ana"]


def test_get_all_unknown_field_fails(personas):
    result = personas.get_all(filters={"no_existe": 1})
    assert result.success is False
    assert result.error.code == "INVALID_FIELD"
    with pytest.raises(AppError) as exc_info:
        unwrap(result)
    assert exc_info.value.error.code == "VALIDATION_ERROR"


def test_get_by_id_not_found(personas):
    result = personas.get_by_id(uuid.uuid4())
    assert result.success is False
    assert result.data is None
    assert result.error.code == "NOT_FOUND"
    assert result.error.name == "NotFoundError"


def test_create_update_and_history(personas, db_session):
    actor = str(uuid.uuid4())
    created = personas.create(PersonaCreate(nombre="Lucía", email="lucia@example.com"), actor_id=actor)
    assert created.success is True
    persona = created.data
    assert persona.created_by_uid == uuid.UUID(actor)
    assert persona.visibilidad_perfil == "publico"

    updated = personas.update(persona.id, PersonaUpdate(titulo_profesional="Técnica agrónoma"), actor_id=actor)
    assert updated.data.titulo_profesional == "Técnica agrónoma"
    assert updated.data.email == "lucia@example.com"

    events = personas.history(persona.id).data
    assert [event.action for event in events] == ["personas.create", "personas.update"]
    assert events[1].before_payload["titulo_profesional"] is None
    assert events[1].after_payload["titulo_profesional"] == "Técnica agrónoma"
    assert all(event.trace_id == "trace-service" for event in events)


def test_soft_delete_and_restore_conflicts(personas, db_session):
    persona = create_persona(db_session, "Ana")

    assert personas.restore(persona.id).error.code == "NOT_DELETED"
    assert personas.soft_delete(persona.id, actor_id=None).data.is_deleted is True
    assert personas.soft_delete(persona.id, actor_id=None).error.code == "ALREADY_DELETED"
    assert personas.restore(persona.id).data.is_deleted is False


def test_count(personas, db_session):
    create_persona(db_session, "Ana")
    create_persona(db_session, "Borrada", is_deleted=True)

    assert personas.count().data == 1
    assert personas.count(include_deleted=True).data == 2
    assert personas.count(deleted_only=True).data == 1


def test_database_failure_becomes_service_error(personas, monkeypatch, caplog):
    def broken_list(self, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(EntityRepository, "list", broken_list)

    with caplog.at_level(logging.ERROR, logger="app.comunidad.services.entities"):
        result = personas.get_all()

    assert result.success is False
    assert result.error.code == "SERVICE_ERROR"
    assert result.error.name == "OperationalError"
    assert result.error.details == {"operation": "personas.get_all"}
    assert any(record.getMessage() == "Entity operation failed" for record in caplog.records)


def test_audit_failure_does_not_fail_mutation(personas, db_session, monkeypatch, caplog):
    def broken_create(self, event):
        raise OperationalError("INSERT", {}, Exception("disk full"))

    monkeypatch.setattr(AuditRepository, "create", broken_create)

    with caplog.at_level(logging.ERROR, logger="app.comunidad.services.audit"):
        result = personas.create({"nombre": "Ana"}, actor_id=None)

    assert result.success is True
    assert result.data.nombre == "Ana"
    assert any(record.getMessage() == "Failed to write audit event" for record in caplog.records)


def test_admin_history_endpoint(client, db_session, admin_headers):
    created = client.post("/admin/api/temas", headers=admin_headers, json={"nombre": "Suelos"}).json()
    client.delete(f"/admin/api/temas/{created['id']}", headers=admin_headers)

    response = client.get(f"/admin/api/temas/{created['id']}/audit", headers=admin_headers)
    assert response.status_code == 200
    payload = response.json()
    assert payload["entity"] == "temas"
    assert [event["action"] for event in payload["events"]] == ["temas.create", "temas.soft_delete"]

    missing = client.get(f"/admin/api/temas/{uuid.uuid4()}/audit", headers=admin_headers)
    assert missing.status_code == 404
