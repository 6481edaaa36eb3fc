from __future__ import annotations

import logging

from fastapi import APIRouter, Response, status

from movie_service.api.deps import DirectoryDep, PrincipalDep
from .schemas import UserRead
from .service import UsersService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserRead)
def read_me(current: PrincipalDep):
    return UsersService.to_user_read(current)


@router.get(
    "/{username}",
    response_model=UserRead,
    responses={status.HTTP_404_NOT_FOUND: {"description": "Unknown user"}},
)
def read_user(username: str, directory: DirectoryDep, current: PrincipalDep):
    svc = UsersService(directory)
    user = svc.get_user(username)
    if user is None:
        logger.info("User %s looked up unknown user %s", current.username, username)
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return user
