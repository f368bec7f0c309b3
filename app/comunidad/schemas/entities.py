from datetime import date, datetime
from typing import Annotated, Literal

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    EmailStr,
    Field,
    HttpUrl,
    StringConstraints,
    TypeAdapter,
    ValidationError,
    model_validator,
)

CategoriaPrincipal = Literal[
    "docente_cet",
    "estudiante_cet",
    "ex_alumno_cet",
    "comunidad_activa",
    "comunidad_general",
]
EstadoProyecto = Literal["idea", "en_desarrollo", "finalizado", "presentado", "archivado", "cancelado"]
EstadoVerificacion = Literal[
    "sin_invitacion",
    "pendiente_aprobacion",
    "invitacion_enviada",
    "verificada",
    "rechazada",
]
TemaCategoria = Literal[
    "agropecuario",
    "tecnologico",
    "social",
    "ambiental",
    "educativo",
    "produccion_animal",
    "sanidad",
    "energia",
    "recursos_naturales",
    "manejo_suelo",
    "gastronomia",
    "otro",
]
TipoNoticia = Literal["articulo_propio", "enlace_externo"]
TipoOrganizacion = Literal[
    "empresa",
    "institucion_educativa",
    "ONG",
    "establecimiento_ganadero",
    "organismo_gubernamental",
    "otro",
    "cooperativa",
]
VisibilidadPerfil = Literal["publico", "solo_registrados_plataforma", "privado", "solo_admins_y_propio"]

_http_url = TypeAdapter(HttpUrl)


def _blank_to_none(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _check_url(value: str) -> str:
    try:
        _http_url.validate_python(value)
    except ValidationError as exc:
        raise ValueError("invalid URL") from exc
    return value


OptionalText = Annotated[str | None, BeforeValidator(_blank_to_none)]
OptionalEmail = Annotated[EmailStr | None, BeforeValidator(_blank_to_none)]
OptionalUrl = Annotated[str | None, BeforeValidator(_blank_to_none), AfterValidator(lambda v: v if v is None else _check_url(v))]


def _min_text(length: int, max_length: int = 255):
    return Annotated[str, StringConstraints(min_length=length, max_length=max_length), BeforeValidator(_blank_to_none)]


def _optional_min_text(length: int, max_length: int = 255):
    # length applies to the str branch only; blank input is stored as null
    text = Annotated[str, StringConstraints(min_length=length, max_length=max_length)]
    return Annotated[text | None, BeforeValidator(_blank_to_none)]


ShortName = _min_text(2, 150)
OptionalShortName = _optional_min_text(2, 150)
Name = _min_text(2)
OptionalName = _optional_min_text(2)
Title = _min_text(3)
OptionalTitle = _optional_min_text(3)
Headline = _min_text(5)
OptionalHeadline = _optional_min_text(5)


class PersonaCreate(BaseModel):
    nombre: ShortName
    apellido: OptionalShortName = None
    email: OptionalEmail = None
    categoria_principal: CategoriaPrincipal | None = None
    estado_verificacion: EstadoVerificacion | None = None
    visibilidad_perfil: VisibilidadPerfil = "publico"
    activo: bool = True
    disponible_para_proyectos: bool = True
    es_ex_alumno_cet: bool = False
    buscando_oportunidades: bool = False
    titulo_profesional: OptionalText = None
    descripcion_personal_o_profesional: OptionalText = None
    foto_url: OptionalUrl = None
    ano_egreso_cet: int | None = Field(default=None, ge=1900, le=2100)


class PersonaUpdate(BaseModel):
    nombre: OptionalShortName = None
    apellido: OptionalShortName = None
    email: OptionalEmail = None
    categoria_principal: CategoriaPrincipal | None = None
    estado_verificacion: EstadoVerificacion | None = None
    visibilidad_perfil: VisibilidadPerfil | None = None
    activo: bool | None = None
    disponible_para_proyectos: bool | None = None
    es_ex_alumno_cet: bool | None = None
    buscando_oportunidades: bool | None = None
    titulo_profesional: OptionalText = None
    descripcion_personal_o_profesional: OptionalText = None
    foto_url: OptionalUrl = None
    ano_egreso_cet: int | None = Field(default=None, ge=1900, le=2100)


class OrganizacionCreate(BaseModel):
    nombre_oficial: Name
    nombre_fantasia: OptionalText = None
    tipo: TipoOrganizacion
    descripcion: OptionalText = None
    email_contacto: OptionalEmail = None
    sitio_web: OptionalUrl = None
    telefono_contacto: OptionalText = None
    estado_verificacion: EstadoVerificacion = "sin_invitacion"
    abierta_a_colaboraciones: bool = False


class OrganizacionUpdate(BaseModel):
    nombre_oficial: OptionalName = None
    nombre_fantasia: OptionalText = None
    tipo: TipoOrganizacion | None = None
    descripcion: OptionalText = None
    email_contacto: OptionalEmail = None
    sitio_web: OptionalUrl = None
    telefono_contacto: OptionalText = None
    estado_verificacion: EstadoVerificacion | None = None
    abierta_a_colaboraciones: bool | None = None


class ProyectoCreate(BaseModel):
    titulo: Title
    descripcion_general: OptionalText = None
    resumen_ejecutivo: OptionalText = None
    estado_actual: EstadoProyecto | None = None
    ano_proyecto: int | None = Field(default=None, ge=1900, le=2100)
    fecha_presentacion: date | None = None


class ProyectoUpdate(BaseModel):
    titulo: OptionalTitle = None
    descripcion_general: OptionalText = None
    resumen_ejecutivo: OptionalText = None
    estado_actual: EstadoProyecto | None = None
    ano_proyecto: int | None = Field(default=None, ge=1900, le=2100)
    fecha_presentacion: date | None = None


class TemaCreate(BaseModel):
    nombre: ShortName
    descripcion: OptionalText = None
    categoria_tema: TemaCategoria | None = None


class TemaUpdate(BaseModel):
    nombre: OptionalShortName = None
    descripcion: OptionalText = None
    categoria_tema: TemaCategoria | None = None


def _check_noticia_kind(tipo, contenido, url_externa, resumen):
    if tipo == "articulo_propio":
        if not contenido or len(contenido) < 10:
            raise ValueError("contenido must have at least 10 characters for articulo_propio")
    elif tipo == "enlace_externo":
        if not url_externa:
            raise ValueError("url_externa is required for enlace_externo")
        if not resumen or len(resumen) < 10:
            raise ValueError("resumen_o_contexto_interno must have at least 10 characters for enlace_externo")


class NoticiaCreate(BaseModel):
    titulo: Headline
    subtitulo: OptionalText = None
    tipo: TipoNoticia
    contenido: OptionalText = None
    url_externa: OptionalUrl = None
    fuente_externa: OptionalText = None
    resumen_o_contexto_interno: OptionalText = None
    autor_noticia: OptionalText = None
    imagen_url: OptionalUrl = None
    fecha_publicacion: datetime | None = None
    esta_publicada: bool = False
    es_destacada: bool = False

    @model_validator(mode="after")
    def check_kind(self):
        _check_noticia_kind(self.tipo, self.contenido, self.url_externa, self.resumen_o_contexto_interno)
        return self


class NoticiaUpdate(BaseModel):
    titulo: OptionalHeadline = None
    subtitulo: OptionalText = None
    tipo: TipoNoticia | None = None
    contenido: OptionalText = None
    url_externa: OptionalUrl = None
    fuente_externa: OptionalText = None
    resumen_o_contexto_interno: OptionalText = None
    autor_noticia: OptionalText = None
    imagen_url: OptionalUrl = None
    fecha_publicacion: datetime | None = None
    esta_publicada: bool | None = None
    es_destacada: bool | None = None

    @model_validator(mode="after")
    def check_kind(self):
        # only enforced when the payload switches the kind
        if self.tipo is not None:
            _check_noticia_kind(self.tipo, self.contenido, self.url_externa, self.resumen_o_contexto_interno)
        return self
