"""List page definitions: which fields search, filter and sort for each entity."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Sequence

from app.comunidad.datatable.columns import ActionColumn, Column, DataColumn, RowAction
from app.comunidad.datatable.pipeline import field_value
from app.comunidad.datatable.renderer import EmptyState
from app.comunidad.datatable.types import DataTableConfig, FilterOption, SelectFilterField, SortState, SwitchFilterField
from app.comunidad.services.entities import WORKFLOWS

CATEGORIA_LABELS = {
    "docente_cet": "Docente CET",
    "estudiante_cet": "Estudiante CET",
    "ex_alumno_cet": "Ex alumno CET",
    "comunidad_activa": "Comunidad activa",
    "comunidad_general": "Comunidad general",
}
ESTADO_VERIFICACION_LABELS = {
    "sin_invitacion": "Sin invitación",
    "pendiente_aprobacion": "Pendiente de aprobación",
    "invitacion_enviada": "Invitación enviada",
    "verificada": "Verificada",
    "rechazada": "Rechazada",
}
TIPO_ORGANIZACION_LABELS = {
    "empresa": "Empresa",
    "institucion_educativa": "Institución educativa",
    "ONG": "ONG",
    "establecimiento_ganadero": "Establecimiento ganadero",
    "organismo_gubernamental": "Organismo gubernamental",
    "cooperativa": "Cooperativa",
    "otro": "Otro",
}
ESTADO_PROYECTO_LABELS = {
    "idea": "Idea",
    "en_desarrollo": "En desarrollo",
    "finalizado": "Finalizado",
    "presentado": "Presentado",
    "archivado": "Archivado",
    "cancelado": "Cancelado",
}
TEMA_CATEGORIA_LABELS = {
    "agropecuario": "Agropecuario",
    "tecnologico": "Tecnológico",
    "social": "Social",
    "ambiental": "Ambiental",
    "educativo": "Educativo",
    "produccion_animal": "Producción animal",
    "sanidad": "Sanidad",
    "energia": "Energía",
    "recursos_naturales": "Recursos naturales",
    "manejo_suelo": "Manejo de suelo",
    "gastronomia": "Gastronomía",
    "otro": "Otro",
}
TIPO_NOTICIA_LABELS = {
    "articulo_propio": "Artículo propio",
    "enlace_externo": "Enlace externo",
}


def _options(labels: dict[str, str]) -> tuple[FilterOption, ...]:
    return tuple(FilterOption(value=value, label=label) for value, label in labels.items())


def _label(labels: dict[str, str]) -> Callable[[Any, Any], str]:
    def render(value, row) -> str:
        if not value:
            return "-"
        return labels.get(value, str(value))

    return render


def format_date(value, row=None) -> str:
    if isinstance(value, datetime):
        return value.strftime("%d/%m/%Y")
    if isinstance(value, date):
        return value.strftime("%d/%m/%Y")
    return "-"


def _yes_no(value, row) -> str:
    return "Sí" if value is True else "No"


def _persona_name(value, row) -> str:
    full_name = " ".join(part for part in (field_value(row, "nombre"), field_value(row, "apellido")) if part)
    email = field_value(row, "email") or "Sin email"
    return f"{full_name} ({email})"


def row_actions(entity: str) -> Callable[[Any], list[RowAction]]:
    def render(row) -> list[RowAction]:
        row_id = field_value(row, "id")
        actions = [RowAction(label="Ver", href=f"/admin/api/{entity}/{row_id}", variant="ghost")]
        if field_value(row, "is_deleted") is True:
            actions.append(RowAction(label="Restaurar", href=f"/admin/{entity}/{row_id}/restore", method="post"))
        else:
            actions.append(
                RowAction(label="Eliminar", href=f"/admin/{entity}/{row_id}/delete", method="post", variant="destructive")
            )
        return actions

    return render


DELETED_SWITCH = SwitchFilterField(key="is_deleted", label="Mostrar eliminados")


@dataclass(frozen=True)
class Listing:
    entity: str
    title: str
    search_fields: Sequence[str]
    sortable_columns: Sequence[str]
    columns: Sequence[Column]
    filter_fields: Sequence[SelectFilterField | SwitchFilterField] = ()
    initial_filters: dict[str, Any] = field(default_factory=dict)
    default_sort: SortState | None = None
    empty_state: EmptyState = field(default_factory=EmptyState)
    search_placeholder: str = "Buscar..."

    def config(self, rows: Sequence[Any], page_size: int) -> DataTableConfig:
        return DataTableConfig(
            data=rows,
            search_fields=self.search_fields,
            filter_fields=self.filter_fields,
            sortable_columns=self.sortable_columns,
            initial_filters=self.initial_filters,
            initial_sort=self.default_sort or SortState(),
            initial_page_size=page_size,
            default_sort=self.default_sort,
        )


ADMIN_LISTINGS: dict[str, Listing] = {
    "personas": Listing(
        entity="personas",
        title="Gestión de Comunidad",
        search_fields=("nombre", "apellido", "email", "descripcion_personal_o_profesional"),
        filter_fields=(
            DELETED_SWITCH,
            SelectFilterField(key="categoria_principal", label="Categoría", options=_options(CATEGORIA_LABELS)),
            SelectFilterField(
                key="estado_verificacion",
                label="Estado de verificación",
                options=_options(ESTADO_VERIFICACION_LABELS),
            ),
            SwitchFilterField(key="activo", label="Solo activos"),
            SwitchFilterField(key="disponible_para_proyectos", label="Disponibles para proyectos"),
        ),
        sortable_columns=("nombre", "apellido", "categoria_principal", "estado_verificacion", "created_at"),
        initial_filters={"is_deleted": False},
        columns=(
            DataColumn(key="nombre", label="Miembro", sortable=True, render=_persona_name),
            DataColumn(key="categoria_principal", label="Categoría", sortable=True, render=_label(CATEGORIA_LABELS)),
            DataColumn(
                key="estado_verificacion", label="Estado", sortable=True, render=_label(ESTADO_VERIFICACION_LABELS)
            ),
            DataColumn(key="created_at", label="Creado", sortable=True, render=format_date),
            ActionColumn(key="actions", label="Acciones", render=row_actions("personas")),
        ),
        empty_state=EmptyState(
            title="No hay miembros",
            description="Comienza agregando el primer miembro de la comunidad.",
            action=RowAction(label="Ver eliminados", href="/admin/personas?f_is_deleted=true", variant="default"),
        ),
        search_placeholder="Buscar por nombre, apellido o email...",
    ),
    "organizaciones": Listing(
        entity="organizaciones",
        title="Gestión de Organizaciones",
        search_fields=("nombre_oficial", "nombre_fantasia", "descripcion", "email_contacto"),
        filter_fields=(
            DELETED_SWITCH,
            SelectFilterField(key="tipo", label="Tipo", options=_options(TIPO_ORGANIZACION_LABELS)),
            SelectFilterField(
                key="estado_verificacion",
                label="Estado de verificación",
                options=_options(ESTADO_VERIFICACION_LABELS),
            ),
            SwitchFilterField(key="abierta_a_colaboraciones", label="Abiertas a colaboraciones"),
        ),
        sortable_columns=("nombre_oficial", "tipo", "estado_verificacion", "created_at"),
        initial_filters={"is_deleted": False},
        columns=(
            DataColumn(key="nombre_oficial", label="Organización", sortable=True),
            DataColumn(key="tipo", label="Tipo", sortable=True, render=_label(TIPO_ORGANIZACION_LABELS)),
            DataColumn(
                key="estado_verificacion", label="Estado", sortable=True, render=_label(ESTADO_VERIFICACION_LABELS)
            ),
            DataColumn(key="abierta_a_colaboraciones", label="Colabora", render=_yes_no),
            DataColumn(key="created_at", label="Creado", sortable=True, render=format_date),
            ActionColumn(key="actions", label="Acciones", render=row_actions("organizaciones")),
        ),
    ),
    "proyectos": Listing(
        entity="proyectos",
        title="Gestión de Proyectos",
        search_fields=("titulo", "descripcion_general"),
        filter_fields=(DELETED_SWITCH,),
        sortable_columns=("titulo", "ano_proyecto", "estado_actual"),
        initial_filters={"is_deleted": False},
        columns=(
            DataColumn(key="titulo", label="Título", sortable=True),
            DataColumn(key="ano_proyecto", label="Año", sortable=True),
            DataColumn(key="estado_actual", label="Estado", sortable=True, render=_label(ESTADO_PROYECTO_LABELS)),
            ActionColumn(key="actions", label="Acciones", render=row_actions("proyectos")),
        ),
    ),
    "temas": Listing(
        entity="temas",
        title="Gestión de Temas",
        search_fields=("nombre", "descripcion"),
        filter_fields=(DELETED_SWITCH,),
        sortable_columns=("nombre", "categoria_tema"),
        initial_filters={"is_deleted": False},
        default_sort=SortState(column="nombre", direction="asc"),
        columns=(
            DataColumn(key="nombre", label="Nombre", sortable=True),
            DataColumn(key="categoria_tema", label="Categoría", sortable=True, render=_label(TEMA_CATEGORIA_LABELS)),
            DataColumn(key="descripcion", label="Descripción", class_name="truncate"),
            ActionColumn(key="actions", label="Acciones", render=row_actions("temas")),
        ),
    ),
    "noticias": Listing(
        entity="noticias",
        title="Gestión de Noticias",
        search_fields=("titulo", "subtitulo", "autor_noticia", "fuente_externa"),
        filter_fields=(
            DELETED_SWITCH,
            SelectFilterField(key="tipo", label="Tipo", options=_options(TIPO_NOTICIA_LABELS)),
            SwitchFilterField(key="esta_publicada", label="Publicadas"),
            SwitchFilterField(key="es_destacada", label="Destacadas"),
        ),
        sortable_columns=("titulo", "fecha_publicacion", "tipo"),
        initial_filters={"is_deleted": False},
        columns=(
            DataColumn(key="titulo", label="Título", sortable=True),
            DataColumn(key="tipo", label="Tipo", sortable=True, render=_label(TIPO_NOTICIA_LABELS)),
            DataColumn(key="fecha_publicacion", label="Publicación", sortable=True, render=format_date),
            DataColumn(key="esta_publicada", label="Publicada", render=_yes_no),
            ActionColumn(key="actions", label="Acciones", render=row_actions("noticias")),
        ),
    ),
}

PUBLIC_LISTINGS: dict[str, Listing] = {
    "organizaciones": Listing(
        entity="organizaciones",
        title="Organizaciones Colaboradoras",
        search_fields=("nombre_oficial", "nombre_fantasia", "descripcion"),
        filter_fields=(
            SelectFilterField(key="tipo", label="Tipo", options=_options(TIPO_ORGANIZACION_LABELS)),
            SwitchFilterField(key="abierta_a_colaboraciones", label="Abiertas a colaboraciones"),
        ),
        sortable_columns=("nombre_oficial", "tipo"),
        default_sort=SortState(column="nombre_oficial", direction="asc"),
        columns=(),
    ),
    "comunidad": Listing(
        entity="personas",
        title="Comunidad",
        search_fields=("nombre", "apellido", "titulo_profesional", "descripcion_personal_o_profesional"),
        filter_fields=(
            SelectFilterField(key="categoria_principal", label="Categoría", options=_options(CATEGORIA_LABELS)),
        ),
        sortable_columns=("nombre", "apellido"),
        default_sort=SortState(column="nombre", direction="asc"),
        columns=(),
    ),
    "proyectos": Listing(
        entity="proyectos",
        title="Proyectos",
        search_fields=("titulo", "descripcion_general"),
        filter_fields=(
            SelectFilterField(key="estado_actual", label="Estado", options=_options(ESTADO_PROYECTO_LABELS)),
        ),
        sortable_columns=("titulo", "ano_proyecto"),
        columns=(),
    ),
    "noticias": Listing(
        entity="noticias",
        title="Noticias",
        search_fields=("titulo", "subtitulo", "autor_noticia"),
        sortable_columns=("titulo", "fecha_publicacion"),
        columns=(),
    ),
}

WORKFLOW_ACTION_LABELS = {
    "approve": "Aprobar",
    "promote": "Promover",
    "verify": "Verificar",
    "reject": "Rechazar",
}


def workflow_actions(entity: str) -> Callable[[Any], list[RowAction]]:
    """Buttons for the workflow steps the row can take from its current state."""

    def render(row) -> list[RowAction]:
        row_id = field_value(row, "id")
        actions = [RowAction(label="Ver", href=f"/admin/api/{entity}/{row_id}", variant="ghost")]
        for action, step in WORKFLOWS[entity].items():
            if field_value(row, step.field) in step.allowed_from:
                actions.append(
                    RowAction(
                        label=WORKFLOW_ACTION_LABELS[action],
                        href=f"/admin/{entity}/{row_id}/{action}",
                        method="post",
                        variant="destructive" if action == "reject" else "default",
                    )
                )
        return actions

    return render


ESTADO_VERIFICACION_SELECT = SelectFilterField(
    key="estado_verificacion",
    label="Estado de verificación",
    options=_options(ESTADO_VERIFICACION_LABELS),
)

PENDING_LISTINGS: dict[str, Listing] = {
    "personas": Listing(
        entity="personas",
        title="Personas pendientes",
        search_fields=("nombre", "apellido", "email"),
        filter_fields=(
            ESTADO_VERIFICACION_SELECT,
            SelectFilterField(key="categoria_principal", label="Categoría", options=_options(CATEGORIA_LABELS)),
        ),
        sortable_columns=("nombre", "created_at"),
        initial_filters={"estado_verificacion": "pendiente_aprobacion"},
        default_sort=SortState(column="created_at", direction="asc"),
        columns=(
            DataColumn(key="nombre", label="Miembro", sortable=True, render=_persona_name),
            DataColumn(key="categoria_principal", label="Categoría", render=_label(CATEGORIA_LABELS)),
            DataColumn(key="estado_verificacion", label="Estado", render=_label(ESTADO_VERIFICACION_LABELS)),
            DataColumn(key="created_at", label="Creado", sortable=True, render=format_date),
            ActionColumn(key="actions", label="Acciones", render=workflow_actions("personas")),
        ),
        empty_state=EmptyState(
            title="No hay solicitudes pendientes",
            description="Todas las solicitudes fueron procesadas.",
        ),
        search_placeholder="Buscar por nombre, apellido o email...",
    ),
    "organizaciones": Listing(
        entity="organizaciones",
        title="Organizaciones pendientes",
        search_fields=("nombre_oficial", "nombre_fantasia", "email_contacto"),
        filter_fields=(
            ESTADO_VERIFICACION_SELECT,
            SelectFilterField(key="tipo", label="Tipo", options=_options(TIPO_ORGANIZACION_LABELS)),
        ),
        sortable_columns=("nombre_oficial", "created_at"),
        initial_filters={"estado_verificacion": "pendiente_aprobacion"},
        default_sort=SortState(column="created_at", direction="asc"),
        columns=(
            DataColumn(key="nombre_oficial", label="Organización", sortable=True),
            DataColumn(key="tipo", label="Tipo", render=_label(TIPO_ORGANIZACION_LABELS)),
            DataColumn(key="estado_verificacion", label="Estado", render=_label(ESTADO_VERIFICACION_LABELS)),
            DataColumn(key="created_at", label="Creado", sortable=True, render=format_date),
            ActionColumn(key="actions", label="Acciones", render=workflow_actions("organizaciones")),
        ),
        empty_state=EmptyState(
            title="No hay organizaciones pendientes",
            description="Todas las organizaciones fueron revisadas.",
        ),
    ),
}
