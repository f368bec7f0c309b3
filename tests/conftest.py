import importlib
import os
import uuid
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from alembic import command
from alembic.config import Config

TEST_SECRET = "test-secret"


def _setup_app(database_url: str):
    os.environ["DATABASE_URL"] = database_url
    os.environ["AUTH_JWT_SECRET"] = TEST_SECRET

    import app.comunidad.core.config as config
    import app.comunidad.db.session as session
    import app.main as main

    importlib.reload(config)
    importlib.reload(session)
    importlib.reload(main)

    return main.create_app(), session


def _run_migrations(database_url: str):
    os.environ["DATABASE_URL"] = database_url
    config = Config("alembic.ini")
    config.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(config, "head")


@pytest.fixture()
def client(tmp_path: Path):
    database_url = f"sqlite+pysqlite:///{tmp_path / 'test.db'}"
    _run_migrations(database_url)
    app, session = _setup_app(database_url)

    with TestClient(app) as client:
        yield client

    session.engine.dispose()


@pytest.fixture()
def db_session(client):
    from app.comunidad.db.session import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def admin_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture()
def admin_token(client, admin_id) -> str:
    from app.comunidad.core.security import create_session_token

    return create_session_token(admin_id, email="admin@cet.edu.ar", app_role="admin")


@pytest.fixture()
def user_token(client) -> str:
    from app.comunidad.core.security import create_session_token

    return create_session_token(str(uuid.uuid4()), email="vecino@example.com")


@pytest.fixture()
def admin_headers(admin_token) -> dict:
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture()
def user_headers(user_token) -> dict:
    return {"Authorization": f"Bearer {user_token}"}
