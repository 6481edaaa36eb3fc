"""Feature modules live here. Each module may define:

- models.py   (SQLAlchemy models using movie_service.core.database.Base)
- schemas.py  (Pydantic models)
- service.py  (business logic)
- repository.py (data access)
- router.py   (FastAPI APIRouter exported as `router`)

Routers are auto-discovered and included; models are auto-imported so
the schema is complete before tables are created.
"""
