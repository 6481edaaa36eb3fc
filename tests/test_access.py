"""Tests for the access-control middleware.

Uses a minimal FastAPI app so the authenticate/authorize/dispatch chain is
exercised without the catalog behind it.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from movie_service.api.deps import PrincipalDep
from movie_service.core.access import (
    DEFAULT_ACCESS_RULES,
    AccessControlMiddleware,
    AuthenticationRequired,
    authentication_required_handler,
    find_rule,
    rule,
)
from movie_service.core.security import ROLE_ADMIN, ROLE_USER, PrincipalDirectory
from tests.conftest import ADMIN, USER


def _make_app(settings, rules=DEFAULT_ACCESS_RULES) -> FastAPI:
    app = FastAPI()
    app.add_middleware(
        AccessControlMiddleware,
        directory=PrincipalDirectory.from_settings(settings),
        rules=rules,
    )

    @app.get("/movies")
    def _movies(request: Request):
        return {"principal": request.state.principal.username}

    @app.get("/open")
    def _open():
        return {"status": "ok"}

    return app


class TestAuthentication:
    def test_missing_credentials_is_unauthorized(self, settings):
        client = TestClient(_make_app(settings))
        resp = client.get("/movies")
        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == 'Basic realm="movies"'
        assert resp.content == b""

    def test_wrong_password_is_unauthorized(self, settings):
        client = TestClient(_make_app(settings))
        resp = client.get("/movies", auth=(ADMIN[0], "wrong"))
        assert resp.status_code == 401

    def test_unknown_user_is_unauthorized(self, settings):
        client = TestClient(_make_app(settings))
        resp = client.get("/movies", auth=("mallory", "password"))
        assert resp.status_code == 401

    def test_other_scheme_is_unauthorized(self, settings):
        client = TestClient(_make_app(settings))
        resp = client.get("/movies", headers={"Authorization": "Bearer token"})
        assert resp.status_code == 401


class TestAuthorization:
    def test_user_role_is_forbidden(self, settings):
        client = TestClient(_make_app(settings))
        resp = client.get("/movies", auth=USER)
        assert resp.status_code == 403
        assert resp.content == b""

    def test_admin_is_dispatched_with_principal(self, settings):
        client = TestClient(_make_app(settings))
        resp = client.get("/movies", auth=ADMIN)
        assert resp.status_code == 200
        assert resp.json() == {"principal": ADMIN[0]}

    def test_blanket_rule_covers_unlisted_paths(self, settings):
        client = TestClient(_make_app(settings))
        assert client.get("/open", auth=USER).status_code == 403
        assert client.get("/open", auth=ADMIN).status_code == 200

    def test_unmatched_path_is_forbidden_without_catch_all(self, settings):
        rules = (rule("GET", r"^/movies$", ROLE_USER),)
        client = TestClient(_make_app(settings, rules=rules))
        assert client.get("/movies", auth=USER).status_code == 200
        assert client.get("/open", auth=ADMIN).status_code == 403


class TestRouteTable:
    def test_first_match_wins(self):
        rules = (
            rule("GET", r"^/movies$", ROLE_USER),
            rule("*", r"^/", ROLE_ADMIN),
        )
        assert find_rule(rules, "GET", "/movies").role == ROLE_USER
        assert find_rule(rules, "POST", "/movies").role == ROLE_ADMIN

    def test_default_rules_require_admin_everywhere(self):
        for method, path in [
            ("GET", "/movies"),
            ("GET", "/movies/"),
            ("GET", "/movies/abc"),
            ("GET", "/movies/abc/events"),
            ("GET", "/users/me"),
            ("GET", "/users/rob"),
            ("DELETE", "/anything"),
        ]:
            assert find_rule(DEFAULT_ACCESS_RULES, method, path).role == ROLE_ADMIN


class TestMissingPrincipal:
    def test_handler_without_middleware_gets_same_challenge(self):
        app = FastAPI()
        app.add_exception_handler(AuthenticationRequired, authentication_required_handler)

        @app.get("/me")
        def _me(current: PrincipalDep):
            return {"username": current.username}

        resp = TestClient(app).get("/me")
        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == 'Basic realm="movies"'
        assert resp.content == b""
