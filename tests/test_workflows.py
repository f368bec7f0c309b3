import pytest
from sqlalchemy import select

from app.comunidad.db.models import AuditEvent, Organizacion
from app.comunidad.services.entities import EntityService, get_definition
from tests.helpers import create_organizacion, create_persona


@pytest.fixture()
def personas(db_session):
    return EntityService(db_session, get_definition("personas"), trace_id="trace-workflow")


@pytest.fixture()
def admin_cookie(client, admin_token):
    client.cookies.set("access_token", admin_token)
    yield
    client.cookies.clear()


def test_approve_moves_persona_to_pending_and_audits(personas, db_session, admin_id):
    persona = create_persona(db_session, "Ana", estado_verificacion="sin_invitacion")

    result = personas.transition(persona.id, "approve", actor_id=admin_id)
    assert result.success is True
    assert result.data.estado_verificacion == "pendiente_aprobacion"
    assert str(result.data.updated_by_uid) == admin_id

    events = personas.history(persona.id).data
    assert [event.action for event in events] == ["personas.approve"]
    assert events[0].before_payload["estado_verificacion"] == "sin_invitacion"


def test_approve_rejects_verified_persona(personas, db_session):
    persona = create_persona(db_session, "Ana", estado_verificacion="verificada")

    result = personas.transition(persona.id, "approve", actor_id=None)
    assert result.success is False
    assert result.error.code == "INVALID_STATE"


def test_promote_only_from_comunidad_general(personas, db_session):
    general = create_persona(db_session, "Ana", categoria_principal="comunidad_general")
    docente = create_persona(db_session, "Beto", categoria_principal="docente_cet")

    assert personas.transition(general.id, "promote", actor_id=None).data.categoria_principal == "comunidad_activa"
    assert personas.transition(docente.id, "promote", actor_id=None).error.code == "INVALID_STATE"


def test_transition_on_missing_or_deleted_row_is_not_found(personas, db_session):
    deleted = create_persona(db_session, "Borrada", categoria_principal="comunidad_general", is_deleted=True)

    assert personas.transition(deleted.id, "promote", actor_id=None).error.code == "NOT_FOUND"
    assert personas.transition("not-a-uuid", "promote", actor_id=None).error.code == "NOT_FOUND"


def test_admin_approve_and_promote_endpoints(client, db_session, admin_headers):
    persona = create_persona(db_session, "Ana", categoria_principal="comunidad_general")

    approved = client.post(f"/admin/api/personas/{persona.id}/approve", headers=admin_headers)
    assert approved.status_code == 200
    assert approved.json()["estado_verificacion"] == "pendiente_aprobacion"

    promoted = client.post(f"/admin/api/personas/{persona.id}/promote", headers=admin_headers)
    assert promoted.status_code == 200
    assert promoted.json()["categoria_principal"] == "comunidad_activa"

    again = client.post(f"/admin/api/personas/{persona.id}/promote", headers=admin_headers)
    assert again.status_code == 409
    assert again.json()["code"] == "INVALID_STATE"

    actions = db_session.execute(
        select(AuditEvent.action).where(AuditEvent.entity_id == str(persona.id)).order_by(AuditEvent.created_at)
    ).scalars().all()
    assert actions == ["personas.approve", "personas.promote"]


def test_admin_transition_unknown_action(client, db_session, admin_headers):
    tema_response = client.post("/admin/api/temas", headers=admin_headers, json={"nombre": "Suelos"})
    tema_id = tema_response.json()["id"]

    response = client.post(f"/admin/api/temas/{tema_id}/approve", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["code"] == "UNKNOWN_ACTION"


def test_admin_transition_requires_admin(client, db_session, user_headers):
    persona = create_persona(db_session, "Ana")

    response = client.post(f"/admin/api/personas/{persona.id}/approve", headers=user_headers)
    assert response.status_code == 403


def test_admin_verify_and_reject_organizaciones(client, db_session, admin_headers):
    pendiente = create_organizacion(db_session, "Cooperativa Norte", estado_verificacion="pendiente_aprobacion")
    nueva = create_organizacion(db_session, "Tambo Sur")

    verified = client.post(f"/admin/api/organizaciones/{pendiente.id}/verify", headers=admin_headers)
    assert verified.json()["estado_verificacion"] == "verificada"

    rejected = client.post(f"/admin/api/organizaciones/{nueva.id}/reject", headers=admin_headers)
    assert rejected.json()["estado_verificacion"] == "rechazada"

    not_pending = client.post(f"/admin/api/organizaciones/{nueva.id}/verify", headers=admin_headers)
    assert not_pending.status_code == 409


def test_pending_personas_listing_defaults_to_pending_approval(client, db_session, admin_headers):
    create_persona(db_session, "Ana", estado_verificacion="pendiente_aprobacion", categoria_principal="comunidad_general")
    create_persona(db_session, "Beto", estado_verificacion="verificada")
    create_persona(db_session, "Caro", estado_verificacion="sin_invitacion")
    create_persona(db_session, "Borrada", estado_verificacion="pendiente_aprobacion", is_deleted=True)

    view = client.get("/admin/api/personas/pendientes", headers=admin_headers).json()
    assert view["title"] == "Personas pendientes"
    assert [row["cells"][0]["text"].split(" (")[0] for row in view["rows"]] == ["Ana"]
    filters = {control["key"]: control for control in view["filters"]}
    assert filters["estado_verificacion"]["value"] == "pendiente_aprobacion"
    actions = view["rows"][0]["cells"][-1]["actions"]
    assert [action["label"] for action in actions] == ["Ver", "Promover"]

    others = client.get(
        "/admin/api/personas/pendientes",
        headers=admin_headers,
        params={"f_estado_verificacion": "sin_invitacion"},
    ).json()
    assert [row["cells"][0]["text"].split(" (")[0] for row in others["rows"]] == ["Caro"]
    assert [action["label"] for action in others["rows"][0]["cells"][-1]["actions"]] == ["Ver", "Aprobar"]


def test_pending_listing_only_for_workflow_entities(client, admin_headers):
    response = client.get("/admin/api/temas/pendientes", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["code"] == "UNKNOWN_ENTITY"


def test_pending_organizaciones_page_and_verify_action(client, db_session, admin_cookie):
    organizacion = create_organizacion(
        db_session, "Cooperativa Norte", tipo="cooperativa", estado_verificacion="pendiente_aprobacion"
    )
    create_organizacion(db_session, "Verificada SA", estado_verificacion="verificada")

    body = client.get("/admin/organizaciones/pendientes").text
    assert "<h1>Organizaciones pendientes</h1>" in body
    assert "Cooperativa Norte" in body
    assert "Verificada SA" not in body
    assert "Verificar" in body
    assert "Rechazar" in body

    response = client.post(f"/admin/organizaciones/{organizacion.id}/verify", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/admin/organizaciones/pendientes"
    db_session.expire_all()
    stored = db_session.execute(select(Organizacion).where(Organizacion.id == organizacion.id)).scalars().one()
    assert stored.estado_verificacion == "verificada"
