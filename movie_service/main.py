from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from movie_service.core.access import (
    AccessControlMiddleware,
    AuthenticationRequired,
    authentication_required_handler,
)
from movie_service.core.config import Settings
from movie_service.core.database import (
    create_db_engine,
    create_session_factory,
    ensure_core_schema,
)
from movie_service.core.module_loader import collect_routers
from movie_service.core.security import PrincipalDirectory
from movie_service.modules.movies.bootstrap import seed_movies


logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    app = FastAPI(title="Movie Service", version="0.1.0")

    engine = create_db_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.directory = PrincipalDirectory.from_settings(settings)

    app.add_middleware(AccessControlMiddleware, directory=app.state.directory)
    app.add_exception_handler(AuthenticationRequired, authentication_required_handler)

    # CORS is outermost so preflights, which carry no credentials, are answered
    # before the access check
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Importing the routers also registers every module's models on Base
    routers = collect_routers()
    for router in routers:
        app.include_router(router)

    @app.exception_handler(SQLAlchemyError)
    async def _store_unavailable(request: Request, exc: SQLAlchemyError):
        logger.exception("Catalog store failure on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Catalog store unavailable"})

    @app.on_event("startup")
    def _startup():
        ensure_core_schema(engine)
        if not settings.SEED_ON_STARTUP:
            return
        db = app.state.session_factory()
        try:
            seed_movies(db)
        finally:
            db.close()

    @app.on_event("shutdown")
    def _shutdown():
        engine.dispose()

    return app


app = create_app()
