"""Movie catalog service with per-movie server-sent event streams."""

__version__ = "0.1.0"
