from datetime import date, datetime
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict

ItemT = TypeVar("ItemT")


class PersonaPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    nombre: str
    apellido: str | None = None
    categoria_principal: str | None = None
    titulo_profesional: str | None = None
    descripcion_personal_o_profesional: str | None = None
    foto_url: str | None = None
    es_ex_alumno_cet: bool = False
    disponible_para_proyectos: bool = True
    buscando_oportunidades: bool = False


class OrganizacionPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    nombre_oficial: str
    nombre_fantasia: str | None = None
    tipo: str
    descripcion: str | None = None
    sitio_web: str | None = None
    abierta_a_colaboraciones: bool = False


class ProyectoPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    titulo: str
    descripcion_general: str | None = None
    resumen_ejecutivo: str | None = None
    estado_actual: str | None = None
    ano_proyecto: int | None = None
    fecha_presentacion: date | None = None


class NoticiaPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    titulo: str
    subtitulo: str | None = None
    tipo: str
    contenido: str | None = None
    url_externa: str | None = None
    fuente_externa: str | None = None
    autor_noticia: str | None = None
    imagen_url: str | None = None
    fecha_publicacion: datetime | None = None
    es_destacada: bool = False


class PublicPage(BaseModel, Generic[ItemT]):
    items: list[ItemT]
    page: int
    page_size: int
    total_items: int
    total_pages: int
    search: str = ""
    filters: dict[str, str | bool | None] = {}


class PlatformStats(BaseModel):
    total_proyectos: int
    proyectos_finalizados: int
    total_noticias: int
    noticias_publicadas: int
    total_personas: int
    personas_activas: int
    total_temas: int
