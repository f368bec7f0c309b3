from datetime import datetime

from app.comunidad.db.models import Noticia, Organizacion, Persona, Proyecto, Tema


def _save(db, entity):
    db.add(entity)
    db.commit()
    db.refresh(entity)
    return entity


def create_persona(db, nombre: str, **values) -> Persona:
    values.setdefault("created_at", datetime.utcnow())
    return _save(db, Persona(nombre=nombre, **values))


def create_organizacion(db, nombre_oficial: str, tipo: str = "empresa", **values) -> Organizacion:
    values.setdefault("created_at", datetime.utcnow())
    return _save(db, Organizacion(nombre_oficial=nombre_oficial, tipo=tipo, **values))


def create_proyecto(db, titulo: str, **values) -> Proyecto:
    values.setdefault("created_at", datetime.utcnow())
    return _save(db, Proyecto(titulo=titulo, **values))


def create_tema(db, nombre: str, **values) -> Tema:
    values.setdefault("created_at", datetime.utcnow())
    return _save(db, Tema(nombre=nombre, **values))


def create_noticia(db, titulo: str, tipo: str = "articulo_propio", **values) -> Noticia:
    values.setdefault("created_at", datetime.utcnow())
    if tipo == "articulo_propio":
        values.setdefault("contenido", "Contenido de la noticia publicada.")
    return _save(db, Noticia(titulo=titulo, tipo=tipo, **values))
