from __future__ import annotations

from typing import Annotated, Iterator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from movie_service.core.access import AuthenticationRequired
from movie_service.core.config import Settings
from movie_service.core.security import Principal, PrincipalDirectory


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_directory(request: Request) -> PrincipalDirectory:
    return request.app.state.directory


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_current_principal(request: Request) -> Principal:
    # Set by AccessControlMiddleware once the request is authenticated
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise AuthenticationRequired()
    return principal


SettingsDep = Annotated[Settings, Depends(get_settings)]
DirectoryDep = Annotated[PrincipalDirectory, Depends(get_directory)]
DbDep = Annotated[Session, Depends(get_db)]
PrincipalDep = Annotated[Principal, Depends(get_current_principal)]
