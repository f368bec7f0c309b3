"""initial

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


class GUID(sa.TypeDecorator):
    impl = sa.CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID

            return dialect.type_descriptor(UUID(as_uuid=True))
        return dialect.type_descriptor(sa.CHAR(36))


def _tracked_columns() -> list[sa.Column]:
    return [
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.Column("created_by_uid", GUID(), nullable=True),
        sa.Column("updated_by_uid", GUID(), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.Column("deleted_by_uid", GUID(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "personas",
        *_tracked_columns(),
        sa.Column("nombre", sa.String(length=150), nullable=False),
        sa.Column("apellido", sa.String(length=150), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("categoria_principal", sa.String(length=50), nullable=True),
        sa.Column("estado_verificacion", sa.String(length=40), nullable=True),
        sa.Column("visibilidad_perfil", sa.String(length=40), nullable=False, server_default="publico"),
        sa.Column("activo", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("disponible_para_proyectos", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("es_ex_alumno_cet", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("buscando_oportunidades", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("titulo_profesional", sa.String(length=255), nullable=True),
        sa.Column("descripcion_personal_o_profesional", sa.Text(), nullable=True),
        sa.Column("foto_url", sa.String(length=500), nullable=True),
        sa.Column("ano_egreso_cet", sa.Integer(), nullable=True),
    )
    op.create_index("ix_personas_email", "personas", ["email"])
    op.create_index("ix_personas_is_deleted", "personas", ["is_deleted"])

    op.create_table(
        "organizaciones",
        *_tracked_columns(),
        sa.Column("nombre_oficial", sa.String(length=255), nullable=False),
        sa.Column("nombre_fantasia", sa.String(length=255), nullable=True),
        sa.Column("tipo", sa.String(length=50), nullable=False),
        sa.Column("descripcion", sa.Text(), nullable=True),
        sa.Column("email_contacto", sa.String(length=255), nullable=True),
        sa.Column("sitio_web", sa.String(length=500), nullable=True),
        sa.Column("telefono_contacto", sa.String(length=50), nullable=True),
        sa.Column("estado_verificacion", sa.String(length=40), nullable=False, server_default="sin_invitacion"),
        sa.Column("abierta_a_colaboraciones", sa.Boolean(), nullable=False, server_default=sa.false()),
    )

    op.create_table(
        "proyectos",
        *_tracked_columns(),
        sa.Column("titulo", sa.String(length=255), nullable=False),
        sa.Column("descripcion_general", sa.Text(), nullable=True),
        sa.Column("resumen_ejecutivo", sa.Text(), nullable=True),
        sa.Column("estado_actual", sa.String(length=40), nullable=True),
        sa.Column("ano_proyecto", sa.Integer(), nullable=True),
        sa.Column("fecha_presentacion", sa.Date(), nullable=True),
    )

    op.create_table(
        "temas",
        *_tracked_columns(),
        sa.Column("nombre", sa.String(length=150), nullable=False),
        sa.Column("descripcion", sa.Text(), nullable=True),
        sa.Column("categoria_tema", sa.String(length=50), nullable=True),
    )

    op.create_table(
        "noticias",
        *_tracked_columns(),
        sa.Column("titulo", sa.String(length=255), nullable=False),
        sa.Column("subtitulo", sa.String(length=255), nullable=True),
        sa.Column("tipo", sa.String(length=40), nullable=False),
        sa.Column("contenido", sa.Text(), nullable=True),
        sa.Column("url_externa", sa.String(length=500), nullable=True),
        sa.Column("fuente_externa", sa.String(length=255), nullable=True),
        sa.Column("resumen_o_contexto_interno", sa.Text(), nullable=True),
        sa.Column("autor_noticia", sa.String(length=255), nullable=True),
        sa.Column("imagen_url", sa.String(length=500), nullable=True),
        sa.Column("fecha_publicacion", sa.DateTime(), nullable=True),
        sa.Column("esta_publicada", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("es_destacada", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_noticias_publicadas", "noticias", ["esta_publicada", "is_deleted"])

    op.create_table(
        "audit_events",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("actor_id", GUID(), nullable=True),
        sa.Column("trace_id", sa.String(length=64), nullable=True),
        sa.Column("action", sa.String(length=255), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.String(length=64), nullable=True),
        sa.Column("before_payload", sa.JSON(), nullable=True),
        sa.Column("after_payload", sa.JSON(), nullable=True),
        sa.Column("result", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_audit_events_actor_id", "audit_events", ["actor_id"])


def downgrade() -> None:
    op.drop_index("ix_audit_events_actor_id", table_name="audit_events")
    op.drop_table("audit_events")
    op.drop_index("ix_noticias_publicadas", table_name="noticias")
    op.drop_table("noticias")
    op.drop_table("temas")
    op.drop_table("proyectos")
    op.drop_table("organizaciones")
    op.drop_index("ix_personas_is_deleted", table_name="personas")
    op.drop_index("ix_personas_email", table_name="personas")
    op.drop_table("personas")
