import uuid
from datetime import date, datetime

from sqlalchemy import JSON, Boolean, Date, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import CHAR, TypeDecorator


class GUID(TypeDecorator):
    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID

            return dialect.type_descriptor(UUID(as_uuid=True))
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, uuid.UUID):
            value = uuid.UUID(str(value))
        if dialect.name == "postgresql":
            return value
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)


class Base(DeclarativeBase):
    pass


class TrackedMixin:
    """Authorship and soft-delete columns shared by every managed entity."""

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_by_uid: Mapped[uuid.UUID | None] = mapped_column(GUID(), nullable=True)
    updated_by_uid: Mapped[uuid.UUID | None] = mapped_column(GUID(), nullable=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    deleted_by_uid: Mapped[uuid.UUID | None] = mapped_column(GUID(), nullable=True)


class Persona(TrackedMixin, Base):
    __tablename__ = "personas"

    nombre: Mapped[str] = mapped_column(String(150), nullable=False)
    apellido: Mapped[str | None] = mapped_column(String(150), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    categoria_principal: Mapped[str | None] = mapped_column(String(50), nullable=True)
    estado_verificacion: Mapped[str | None] = mapped_column(String(40), default="sin_invitacion", nullable=True)
    visibilidad_perfil: Mapped[str] = mapped_column(String(40), default="publico", nullable=False)
    activo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    disponible_para_proyectos: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    es_ex_alumno_cet: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    buscando_oportunidades: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    titulo_profesional: Mapped[str | None] = mapped_column(String(255), nullable=True)
    descripcion_personal_o_profesional: Mapped[str | None] = mapped_column(Text, nullable=True)
    foto_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    ano_egreso_cet: Mapped[int | None] = mapped_column(Integer, nullable=True)


class Organizacion(TrackedMixin, Base):
    __tablename__ = "organizaciones"

    nombre_oficial: Mapped[str] = mapped_column(String(255), nullable=False)
    nombre_fantasia: Mapped[str | None] = mapped_column(String(255), nullable=True)
    tipo: Mapped[str] = mapped_column(String(50), nullable=False)
    descripcion: Mapped[str | None] = mapped_column(Text, nullable=True)
    email_contacto: Mapped[str | None] = mapped_column(String(255), nullable=True)
    sitio_web: Mapped[str | None] = mapped_column(String(500), nullable=True)
    telefono_contacto: Mapped[str | None] = mapped_column(String(50), nullable=True)
    estado_verificacion: Mapped[str] = mapped_column(String(40), default="sin_invitacion", nullable=False)
    abierta_a_colaboraciones: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class Proyecto(TrackedMixin, Base):
    __tablename__ = "proyectos"

    titulo: Mapped[str] = mapped_column(String(255), nullable=False)
    descripcion_general: Mapped[str | None] = mapped_column(Text, nullable=True)
    resumen_ejecutivo: Mapped[str | None] = mapped_column(Text, nullable=True)
    estado_actual: Mapped[str | None] = mapped_column(String(40), nullable=True)
    ano_proyecto: Mapped[int | None] = mapped_column(Integer, nullable=True)
    fecha_presentacion: Mapped[date | None] = mapped_column(Date, nullable=True)


class Tema(TrackedMixin, Base):
    __tablename__ = "temas"

    nombre: Mapped[str] = mapped_column(String(150), nullable=False)
    descripcion: Mapped[str | None] = mapped_column(Text, nullable=True)
    categoria_tema: Mapped[str | None] = mapped_column(String(50), nullable=True)


class Noticia(TrackedMixin, Base):
    __tablename__ = "noticias"

    titulo: Mapped[str] = mapped_column(String(255), nullable=False)
    subtitulo: Mapped[str | None] = mapped_column(String(255), nullable=True)
    tipo: Mapped[str] = mapped_column(String(40), nullable=False)
    contenido: Mapped[str | None] = mapped_column(Text, nullable=True)
    url_externa: Mapped[str | None] = mapped_column(String(500), nullable=True)
    fuente_externa: Mapped[str | None] = mapped_column(String(255), nullable=True)
    resumen_o_contexto_interno: Mapped[str | None] = mapped_column(Text, nullable=True)
    autor_noticia: Mapped[str | None] = mapped_column(String(255), nullable=True)
    imagen_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    fecha_publicacion: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    esta_publicada: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    es_destacada: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class AuditEvent(Base):
    __tablename__ = "audit_events"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    actor_id: Mapped[uuid.UUID | None] = mapped_column(GUID(), index=True, nullable=True)
    trace_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    action: Mapped[str] = mapped_column(String(255), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False)
    entity_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    before_payload: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    after_payload: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    result: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)


Index("ix_personas_is_deleted", Persona.is_deleted)
Index("ix_noticias_publicadas", Noticia.esta_publicada, Noticia.is_deleted)
