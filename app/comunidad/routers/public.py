from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from app.comunidad.admin.listings import PUBLIC_LISTINGS, Listing
from app.comunidad.core.config import settings
from app.comunidad.core.context import RequestContext
from app.comunidad.core.deps import get_optional_context
from app.comunidad.core.error_catalog import AppError, ErrorCatalog
from app.comunidad.datatable.query import state_from_query
from app.comunidad.db.session import get_db
from app.comunidad.schemas.public import (
    NoticiaPublic,
    OrganizacionPublic,
    PersonaPublic,
    PlatformStats,
    ProyectoPublic,
    PublicPage,
)
from app.comunidad.services.entities import EntityService, get_definition
from app.comunidad.services.results import unwrap
from app.comunidad.services.stats import StatsService

router = APIRouter()

PUBLIC_PERSONA_FILTERS = {"activo": True, "visibilidad_perfil": "publico"}
DISPONIBLES_FILTERS = {**PUBLIC_PERSONA_FILTERS, "disponible_para_proyectos": True}
# rejected organizations stay admin-only
HIDDEN_ORGANIZACION_STATES = frozenset({"rechazada"})


def _service(entity: str, db, context: RequestContext) -> EntityService:
    return EntityService(db, get_definition(entity), trace_id=context.trace_id)


def _page(listing: Listing, rows: list, request: Request, schema: type[BaseModel]) -> PublicPage:
    state = state_from_query(listing.config(rows, settings.PUBLIC_PAGE_SIZE), request.query_params)
    filters: dict[str, Any] = {item.key: state.filters.get(item.key) for item in listing.filter_fields}
    return PublicPage(
        items=[schema.model_validate(row) for row in state.paginated_data],
        page=state.current_page,
        page_size=state.page_size,
        total_items=state.total_items,
        total_pages=state.total_pages,
        search=state.search,
        filters=filters,
    )


def _not_found(entity: str, entity_id: str) -> AppError:
    return AppError(ErrorCatalog.ENTITY_NOT_FOUND, details={"entity": entity, "id": entity_id})


@router.get("/comunidad", response_model=PublicPage[PersonaPublic])
async def list_comunidad(
    request: Request,
    context: RequestContext = Depends(get_optional_context),
    db=Depends(get_db),
):
    rows = unwrap(_service("personas", db, context).get_all(filters=PUBLIC_PERSONA_FILTERS))
    return _page(PUBLIC_LISTINGS["comunidad"], rows, request, PersonaPublic)


@router.get("/comunidad/disponibles", response_model=list[PersonaPublic])
async def list_disponibles(
    context: RequestContext = Depends(get_optional_context),
    db=Depends(get_db),
):
    """Active public members open to joining projects, by name."""
    rows = unwrap(_service("personas", db, context).get_all(filters=DISPONIBLES_FILTERS, order_by="nombre"))
    return [PersonaPublic.model_validate(row) for row in rows]


@router.get("/comunidad/{persona_id}", response_model=PersonaPublic)
async def get_comunidad_persona(
    persona_id: str,
    context: RequestContext = Depends(get_optional_context),
    db=Depends(get_db),
):
    result = _service("personas", db, context).get_by_id(persona_id)
    if result.error is not None and result.error.code != "NOT_FOUND":
        unwrap(result)
    persona = result.data
    if (
        persona is None
        or persona.is_deleted
        or not persona.activo
        or persona.visibilidad_perfil != "publico"
    ):
        raise _not_found("personas", persona_id)
    return PersonaPublic.model_validate(persona)


@router.get("/noticias", response_model=PublicPage[NoticiaPublic])
async def list_noticias(
    request: Request,
    context: RequestContext = Depends(get_optional_context),
    db=Depends(get_db),
):
    rows = unwrap(
        _service("noticias", db, context).get_all(
            filters={"esta_publicada": True},
            order_by="-fecha_publicacion",
        )
    )
    return _page(PUBLIC_LISTINGS["noticias"], rows, request, NoticiaPublic)


@router.get("/noticias/{noticia_id}", response_model=NoticiaPublic)
async def get_noticia(
    noticia_id: str,
    context: RequestContext = Depends(get_optional_context),
    db=Depends(get_db),
):
    result = _service("noticias", db, context).get_by_id(noticia_id)
    if result.error is not None and result.error.code != "NOT_FOUND":
        unwrap(result)
    noticia = result.data
    if noticia is None or noticia.is_deleted or not noticia.esta_publicada:
        raise _not_found("noticias", noticia_id)
    return NoticiaPublic.model_validate(noticia)


@router.get("/proyectos", response_model=PublicPage[ProyectoPublic])
async def list_proyectos(
    request: Request,
    context: RequestContext = Depends(get_optional_context),
    db=Depends(get_db),
):
    rows = unwrap(_service("proyectos", db, context).get_all(order_by="-created_at"))
    return _page(PUBLIC_LISTINGS["proyectos"], rows, request, ProyectoPublic)


@router.get("/proyectos/{proyecto_id}", response_model=ProyectoPublic)
async def get_proyecto(
    proyecto_id: str,
    context: RequestContext = Depends(get_optional_context),
    db=Depends(get_db),
):
    result = _service("proyectos", db, context).get_by_id(proyecto_id)
    if result.error is not None and result.error.code != "NOT_FOUND":
        unwrap(result)
    proyecto = result.data
    if proyecto is None or proyecto.is_deleted:
        raise _not_found("proyectos", proyecto_id)
    return ProyectoPublic.model_validate(proyecto)


@router.get("/estadisticas", response_model=PlatformStats)
async def platform_stats(db=Depends(get_db)):
    return unwrap(StatsService(db).platform_stats())


@router.get("/organizaciones", response_model=PublicPage[OrganizacionPublic])
async def list_organizaciones(
    request: Request,
    context: RequestContext = Depends(get_optional_context),
    db=Depends(get_db),
):
    rows = unwrap(_service("organizaciones", db, context).get_all(order_by="nombre_oficial"))
    rows = [row for row in rows if row.estado_verificacion not in HIDDEN_ORGANIZACION_STATES]
    return _page(PUBLIC_LISTINGS["organizaciones"], rows, request, OrganizacionPublic)


@router.get("/organizaciones/{organizacion_id}", response_model=OrganizacionPublic)
async def get_organizacion(
    organizacion_id: str,
    context: RequestContext = Depends(get_optional_context),
    db=Depends(get_db),
):
    result = _service("organizaciones", db, context).get_by_id(organizacion_id)
    if result.error is not None and result.error.code != "NOT_FOUND":
        unwrap(result)
    organizacion = result.data
    if (
        organizacion is None
        or organizacion.is_deleted
        or organizacion.estado_verificacion in HIDDEN_ORGANIZACION_STATES
    ):
        raise _not_found("organizaciones", organizacion_id)
    return OrganizacionPublic.model_validate(organizacion)
