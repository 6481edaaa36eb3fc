"""
Route-level access control.

Every HTTP request walks the same chain before reaching a router:

1. authenticate: HTTP Basic credentials are checked against the
   :class:`PrincipalDirectory`; anything missing or wrong is a 401.
2. authorize: the first :class:`AccessRule` matching the method and path
   names the role the principal must hold; otherwise 403.
3. dispatch: the principal is stored on ``request.state.principal`` and the
   request continues down the ASGI stack.

Both refusals carry an empty body.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Sequence

from starlette.datastructures import Headers
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Receive, Scope, Send

from .security import ROLE_ADMIN, PrincipalDirectory, parse_basic_credentials


logger = logging.getLogger(__name__)


ANY_METHOD = "*"
REALM = "movies"


@dataclass(frozen=True)
class AccessRule:
    method: str
    pattern: re.Pattern[str]
    role: str

    def matches(self, method: str, path: str) -> bool:
        if self.method != ANY_METHOD and self.method != method.upper():
            return False
        return self.pattern.match(path) is not None


def rule(method: str, pattern: str, role: str) -> AccessRule:
    return AccessRule(method=method.upper(), pattern=re.compile(pattern), role=role)


DEFAULT_ACCESS_RULES: tuple[AccessRule, ...] = (
    rule("GET", r"^/movies/?$", ROLE_ADMIN),
    rule("GET", r"^/movies/[^/]+/?$", ROLE_ADMIN),
    rule("GET", r"^/movies/[^/]+/events/?$", ROLE_ADMIN),
    rule("GET", r"^/users/me/?$", ROLE_ADMIN),
    rule("GET", r"^/users/[^/]+/?$", ROLE_ADMIN),
    # Anything not listed above falls under the blanket rule
    rule(ANY_METHOD, r"^/", ROLE_ADMIN),
)


def challenge_response() -> Response:
    return Response(
        status_code=401,
        headers={"WWW-Authenticate": f'Basic realm="{REALM}"'},
    )


class AuthenticationRequired(Exception):
    """Raised by handlers that need a principal the middleware did not attach."""


async def authentication_required_handler(request: Request, exc: AuthenticationRequired) -> Response:
    return challenge_response()


def find_rule(rules: Sequence[AccessRule], method: str, path: str) -> AccessRule | None:
    for candidate in rules:
        if candidate.matches(method, path):
            return candidate
    return None


class AccessControlMiddleware:
    """Authenticate, authorize, then dispatch.

    Implemented as a plain ASGI middleware so long-lived streaming responses
    pass through untouched and still observe client disconnects.
    """

    def __init__(
        self,
        app: ASGIApp,
        directory: PrincipalDirectory,
        rules: Sequence[AccessRule] = DEFAULT_ACCESS_RULES,
    ) -> None:
        self.app = app
        self.directory = directory
        self.rules = tuple(rules)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = scope["method"]
        path = scope["path"]

        credentials = parse_basic_credentials(Headers(scope=scope).get("authorization"))
        principal = self.directory.authenticate(*credentials) if credentials else None
        if principal is None:
            logger.info("Unauthenticated %s %s", method, path)
            await challenge_response()(scope, receive, send)
            return

        matched = find_rule(self.rules, method, path)
        if matched is None or not principal.has_role(matched.role):
            logger.info("Denied %s %s for %s", method, path, principal.username)
            await Response(status_code=403)(scope, receive, send)
            return

        scope.setdefault("state", {})["principal"] = principal
        await self.app(scope, receive, send)
