from __future__ import annotations

from movie_service.core.security import Principal, PrincipalDirectory
from .schemas import UserRead


class UsersService:
    def __init__(self, directory: PrincipalDirectory):
        self.directory = directory

    def get_user(self, username: str) -> UserRead | None:
        principal = self.directory.get(username)
        if principal is None:
            return None
        return self.to_user_read(principal)

    @staticmethod
    def to_user_read(principal: Principal) -> UserRead:
        return UserRead(username=principal.username, roles=sorted(principal.roles))
