import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from app.comunidad.db.models import Noticia, Persona, Proyecto, Tema
from app.comunidad.repos.entities import EntityRepository
from app.comunidad.services.entities import ENTITY_DEFINITIONS
from app.comunidad.services.results import ServiceResult, from_exception

logger = logging.getLogger(__name__)


class StatsService:
    def __init__(self, db):
        self.db = db

    def _count(self, model, *conditions) -> int:
        stmt = select(func.count()).select_from(model).where(model.is_deleted.is_(False), *conditions)
        return self.db.execute(stmt).scalar_one()

    def entity_counts(self) -> ServiceResult[dict]:
        try:
            counts = {}
            for name, definition in ENTITY_DEFINITIONS.items():
                repo = EntityRepository(self.db, definition.model)
                counts[name] = {
                    "active": repo.count(),
                    "deleted": repo.count(deleted_only=True),
                }
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to count entities")
            return ServiceResult.fail(from_exception(exc, "stats.entity_counts"))
        return ServiceResult.ok(counts)

    def platform_stats(self) -> ServiceResult[dict]:
        try:
            stats = {
                "total_proyectos": self._count(Proyecto),
                "proyectos_finalizados": self._count(
                    Proyecto, Proyecto.estado_actual.in_(("finalizado", "presentado"))
                ),
                "total_noticias": self._count(Noticia),
                "noticias_publicadas": self._count(Noticia, Noticia.esta_publicada.is_(True)),
                "total_personas": self._count(Persona),
                "personas_activas": self._count(Persona, Persona.activo.is_(True)),
                "total_temas": self._count(Tema),
            }
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to compute platform stats")
            return ServiceResult.fail(from_exception(exc, "stats.platform_stats"))
        return ServiceResult.ok(stats)
