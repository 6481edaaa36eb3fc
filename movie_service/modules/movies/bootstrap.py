from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from .models import Movie
from .repository import MoviesRepository


logger = logging.getLogger(__name__)


DEFAULT_TITLES = (
    "Silence of the Lambdas",
    "AEon Flux",
    "Back to the Future",
)


def seed_movies(db: Session, titles: tuple[str, ...] = DEFAULT_TITLES) -> list[Movie]:
    """Reset the catalog to ``titles`` and log what ended up stored.

    Seeding is fire-and-forget: failures are logged and rolled back, never
    raised, so startup carries on with whatever the store holds.
    """
    repo = MoviesRepository(db)
    try:
        removed = repo.delete_all()
        logger.info("[bootstrap] removed %d existing movies", removed)
        repo.add_many([Movie(title=title) for title in titles])
        movies = repo.list_all()
    except Exception:
        db.rollback()
        logger.exception("[bootstrap] seeding movies failed")
        return []
    for movie in movies:
        logger.info("[bootstrap] %r", movie)
    return movies
