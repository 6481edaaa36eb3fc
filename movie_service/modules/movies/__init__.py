"""Movies module exposes the catalog and its per-movie event stream."""

__all__ = [
    "models",
    "schemas",
    "repository",
    "service",
    "events",
    "router",
    "bootstrap",
]
