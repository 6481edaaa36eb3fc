from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from movie_service.core.config import Settings
from movie_service.core.database import (
    create_db_engine,
    create_session_factory,
    ensure_core_schema,
)
from movie_service.main import create_app


ADMIN = ("rwinch", "password")
USER = ("jlong", "password")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite:///:memory:",
        ADMIN_USERNAME=ADMIN[0],
        ADMIN_PASSWORD=ADMIN[1],
        USER_USERNAME=USER[0],
        USER_PASSWORD=USER[1],
        MOVIE_EVENT_INTERVAL_SECONDS=0.05,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(settings):
    engine = create_db_engine(settings)
    # Models register on Base when the module is imported
    import movie_service.modules.movies.models  # noqa: F401

    ensure_core_schema(engine)
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
