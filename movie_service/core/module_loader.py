"""Discovery of feature modules under ``movie_service.modules``.

A feature module is a subpackage. Its ``models`` module, when present, is
imported so its tables land on ``Base.metadata``; its ``router`` module, when
present, must export an ``APIRouter`` named ``router``.
"""

from __future__ import annotations

import importlib
import pkgutil
from types import ModuleType
from typing import Iterator, List

from fastapi import APIRouter


MODULES_PACKAGE = "movie_service.modules"


def iter_feature_packages(package: str = MODULES_PACKAGE) -> Iterator[str]:
    pkg = importlib.import_module(package)
    for info in pkgutil.iter_modules(pkg.__path__):
        if info.ispkg:
            yield f"{package}.{info.name}"


def import_optional(name: str) -> ModuleType | None:
    """Import ``name``, or return ``None`` when that exact module does not exist.

    A missing dependency *inside* the module still raises.
    """
    try:
        return importlib.import_module(name)
    except ModuleNotFoundError as exc:
        if exc.name != name:
            raise
        return None


def collect_routers(package: str = MODULES_PACKAGE) -> List[APIRouter]:
    routers: List[APIRouter] = []
    for feature in iter_feature_packages(package):
        import_optional(f"{feature}.models")
        router_mod = import_optional(f"{feature}.router")
        router = getattr(router_mod, "router", None)
        if isinstance(router, APIRouter):
            routers.append(router)
    return routers
