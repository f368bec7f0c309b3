from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from app.comunidad.admin.listings import ADMIN_LISTINGS, PENDING_LISTINGS, Listing
from app.comunidad.core.config import settings
from app.comunidad.core.context import RequestContext
from app.comunidad.core.deps import require_admin, require_admin_page
from app.comunidad.core.error_catalog import AppError, ErrorCatalog
from app.comunidad.datatable.html import render_page, render_table_html
from app.comunidad.datatable.query import state_from_query
from app.comunidad.datatable.renderer import DataTable
from app.comunidad.db.session import get_db
from app.comunidad.schemas.admin import AdminStatsResponse, AuditEventView, AuditHistoryResponse
from app.comunidad.schemas.datatable import TableView
from app.comunidad.services.entities import EntityDefinition, EntityService, get_definition, get_transition, to_dict
from app.comunidad.services.results import unwrap
from app.comunidad.services.stats import StatsService

router = APIRouter()


def _definition(entity: str) -> EntityDefinition:
    definition = get_definition(entity)
    if definition is None:
        raise AppError(ErrorCatalog.UNKNOWN_ENTITY, details={"entity": entity})
    return definition


def _service(entity: str, db, context: RequestContext) -> EntityService:
    return EntityService(db, _definition(entity), trace_id=context.trace_id)


def _mount_table(
    entity: str,
    request: Request,
    db,
    context: RequestContext,
    base_path: str,
    listing: Listing | None = None,
) -> DataTable:
    service = _service(entity, db, context)
    # review queues only show live rows
    rows = unwrap(service.get_all(include_deleted=listing is None))
    listing = listing or ADMIN_LISTINGS[entity]
    state = state_from_query(listing.config(rows, settings.DATATABLE_DEFAULT_PAGE_SIZE), request.query_params)
    return DataTable(
        title=listing.title,
        columns=listing.columns,
        state=state,
        empty_state=listing.empty_state,
        page_sizes=settings.DATATABLE_PAGE_SIZES,
        base_path=base_path,
        search_placeholder=listing.search_placeholder,
    )


def _pending_listing(entity: str) -> Listing:
    _definition(entity)
    listing = PENDING_LISTINGS.get(entity)
    if listing is None:
        raise AppError(ErrorCatalog.UNKNOWN_ENTITY, details={"entity": entity, "listing": "pendientes"})
    return listing


def _run_transition(entity: str, entity_id: str, action: str, db, context: RequestContext):
    _definition(entity)
    if get_transition(entity, action) is None:
        raise AppError(ErrorCatalog.UNKNOWN_ACTION, details={"entity": entity, "action": action})
    return unwrap(_service(entity, db, context).transition(entity_id, action, actor_id=context.user_id))


def _validated(schema, payload: dict):
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        raise AppError(
            ErrorCatalog.VALIDATION_ERROR,
            details={"errors": exc.errors(include_url=False)},
        ) from exc


# JSON API


@router.get("/api/stats", response_model=AdminStatsResponse)
async def admin_stats(
    context: RequestContext = Depends(require_admin),
    db=Depends(get_db),
):
    counts = unwrap(StatsService(db).entity_counts())
    return AdminStatsResponse(entities=counts, trace_id=context.trace_id)


@router.get("/api/{entity}", response_model=TableView)
async def admin_list_entities(
    entity: str,
    request: Request,
    context: RequestContext = Depends(require_admin),
    db=Depends(get_db),
):
    table = _mount_table(entity, request, db, context, base_path=f"/admin/api/{entity}")
    return table.render()


@router.post("/api/{entity}", status_code=201)
async def admin_create_entity(
    entity: str,
    payload: dict = Body(...),
    context: RequestContext = Depends(require_admin),
    db=Depends(get_db),
):
    service = _service(entity, db, context)
    values = _validated(service.definition.create_schema, payload)
    created = unwrap(service.create(values, actor_id=context.user_id))
    return to_dict(created)


@router.get("/api/{entity}/pendientes", response_model=TableView)
async def admin_list_pending(
    entity: str,
    request: Request,
    context: RequestContext = Depends(require_admin),
    db=Depends(get_db),
):
    listing = _pending_listing(entity)
    table = _mount_table(entity, request, db, context, f"/admin/api/{entity}/pendientes", listing=listing)
    return table.render()


@router.get("/api/{entity}/{entity_id}")
async def admin_get_entity(
    entity: str,
    entity_id: str,
    context: RequestContext = Depends(require_admin),
    db=Depends(get_db),
):
    service = _service(entity, db, context)
    return to_dict(unwrap(service.get_by_id(entity_id)))


@router.get("/api/{entity}/{entity_id}/audit", response_model=AuditHistoryResponse)
async def admin_entity_history(
    entity: str,
    entity_id: str,
    context: RequestContext = Depends(require_admin),
    db=Depends(get_db),
):
    service = _service(entity, db, context)
    events = unwrap(service.history(entity_id))
    return AuditHistoryResponse(
        entity=entity,
        entity_id=entity_id,
        events=[AuditEventView.model_validate(event) for event in events],
    )


@router.patch("/api/{entity}/{entity_id}")
async def admin_update_entity(
    entity: str,
    entity_id: str,
    payload: dict = Body(...),
    context: RequestContext = Depends(require_admin),
    db=Depends(get_db),
):
    service = _service(entity, db, context)
    values = _validated(service.definition.update_schema, payload)
    updated = unwrap(service.update(entity_id, values, actor_id=context.user_id))
    return to_dict(updated)


@router.delete("/api/{entity}/{entity_id}")
async def admin_delete_entity(
    entity: str,
    entity_id: str,
    context: RequestContext = Depends(require_admin),
    db=Depends(get_db),
):
    service = _service(entity, db, context)
    deleted = unwrap(service.soft_delete(entity_id, actor_id=context.user_id))
    return to_dict(deleted)


@router.post("/api/{entity}/{entity_id}/restore")
async def admin_restore_entity(
    entity: str,
    entity_id: str,
    context: RequestContext = Depends(require_admin),
    db=Depends(get_db),
):
    service = _service(entity, db, context)
    restored = unwrap(service.restore(entity_id, actor_id=context.user_id))
    return to_dict(restored)


@router.post("/api/{entity}/{entity_id}/{action}")
async def admin_transition_entity(
    entity: str,
    entity_id: str,
    action: str,
    context: RequestContext = Depends(require_admin),
    db=Depends(get_db),
):
    return to_dict(_run_transition(entity, entity_id, action, db, context))


# HTML pages


@router.get("/{entity}", response_class=HTMLResponse)
async def admin_list_page(
    entity: str,
    request: Request,
    context: RequestContext = Depends(require_admin_page),
    db=Depends(get_db),
):
    table = _mount_table(entity, request, db, context, base_path=f"/admin/{entity}")
    view = table.render()
    return HTMLResponse(render_page(view.title, render_table_html(view)))


@router.get("/{entity}/pendientes", response_class=HTMLResponse)
async def admin_pending_page(
    entity: str,
    request: Request,
    context: RequestContext = Depends(require_admin_page),
    db=Depends(get_db),
):
    listing = _pending_listing(entity)
    table = _mount_table(entity, request, db, context, f"/admin/{entity}/pendientes", listing=listing)
    view = table.render()
    return HTMLResponse(render_page(view.title, render_table_html(view)))


@router.post("/{entity}/{entity_id}/delete")
async def admin_delete_action(
    entity: str,
    entity_id: str,
    context: RequestContext = Depends(require_admin_page),
    db=Depends(get_db),
):
    unwrap(_service(entity, db, context).soft_delete(entity_id, actor_id=context.user_id))
    return RedirectResponse(url=f"/admin/{entity}", status_code=303)


@router.post("/{entity}/{entity_id}/restore")
async def admin_restore_action(
    entity: str,
    entity_id: str,
    context: RequestContext = Depends(require_admin_page),
    db=Depends(get_db),
):
    unwrap(_service(entity, db, context).restore(entity_id, actor_id=context.user_id))
    return RedirectResponse(url=f"/admin/{entity}?f_is_deleted=true", status_code=303)


@router.post("/{entity}/{entity_id}/{action}")
async def admin_transition_action(
    entity: str,
    entity_id: str,
    action: str,
    context: RequestContext = Depends(require_admin_page),
    db=Depends(get_db),
):
    _run_transition(entity, entity_id, action, db, context)
    return RedirectResponse(url=f"/admin/{entity}/pendientes", status_code=303)
