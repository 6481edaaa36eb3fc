from __future__ import annotations

import pytest

from movie_service.core.module_loader import collect_routers, import_optional


class TestCollectRouters:
    def test_discovers_feature_routers(self):
        prefixes = sorted(router.prefix for router in collect_routers())
        assert prefixes == ["/movies", "/users"]

    def test_missing_module_is_optional(self):
        assert import_optional("movie_service.modules.users.models") is None

    def test_broken_import_inside_module_still_raises(self, monkeypatch):
        import importlib

        def fake_import(name):
            raise ModuleNotFoundError("No module named 'somelib'", name="somelib")

        monkeypatch.setattr(importlib, "import_module", fake_import)
        with pytest.raises(ModuleNotFoundError):
            import_optional("movie_service.modules.movies.models")
