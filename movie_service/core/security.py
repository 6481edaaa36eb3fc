from __future__ import annotations

import base64
import binascii
import secrets
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from fastapi.security.utils import get_authorization_scheme_param
from passlib.context import CryptContext

from .config import Settings


ROLE_ADMIN = "ADMIN"
ROLE_USER = "USER"


pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


@dataclass(frozen=True)
class Principal:
    username: str
    hashed_password: str
    roles: frozenset[str]

    def has_role(self, role: str) -> bool:
        return role in self.roles


class PrincipalDirectory:
    """Fixed set of principals known to the service.

    Built once by the application factory and never mutated afterwards.
    """

    def __init__(self, principals: Iterable[Principal]):
        self._by_username: dict[str, Principal] = {}
        for principal in principals:
            if principal.username in self._by_username:
                raise ValueError(f"Duplicate principal '{principal.username}'")
            self._by_username[principal.username] = principal

    @classmethod
    def from_settings(cls, settings: Settings) -> "PrincipalDirectory":
        return cls(
            [
                Principal(
                    username=settings.ADMIN_USERNAME,
                    hashed_password=get_password_hash(settings.ADMIN_PASSWORD),
                    roles=frozenset({ROLE_ADMIN, ROLE_USER}),
                ),
                Principal(
                    username=settings.USER_USERNAME,
                    hashed_password=get_password_hash(settings.USER_PASSWORD),
                    roles=frozenset({ROLE_USER}),
                ),
            ]
        )

    def __iter__(self) -> Iterator[Principal]:
        return iter(self._by_username.values())

    def __len__(self) -> int:
        return len(self._by_username)

    def get(self, username: str) -> Optional[Principal]:
        return self._by_username.get(username)

    def authenticate(self, username: str, password: str) -> Optional[Principal]:
        principal = None
        for candidate in self._by_username.values():
            if secrets.compare_digest(candidate.username.encode(), username.encode()):
                principal = candidate
        if principal is None:
            return None
        if not verify_password(password, principal.hashed_password):
            return None
        return principal


def parse_basic_credentials(authorization: str | None) -> tuple[str, str] | None:
    """Split an ``Authorization: Basic ...`` header into username and password.

    Returns ``None`` for a missing header, another scheme, or a payload that
    does not decode to ``username:password``.
    """
    scheme, param = get_authorization_scheme_param(authorization)
    if not authorization or scheme.lower() != "basic":
        return None
    try:
        decoded = base64.b64decode(param, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, separator, password = decoded.partition(":")
    if not separator:
        return None
    return username, password
