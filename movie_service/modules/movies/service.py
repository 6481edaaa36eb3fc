from __future__ import annotations

from sqlalchemy.orm import Session

from .repository import MoviesRepository
from .schemas import MovieRead


class MoviesService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = MoviesRepository(db)

    def list_movies(self) -> list[MovieRead]:
        return [MovieRead.model_validate(movie) for movie in self.repo.list_all()]

    def get_movie(self, movie_id: str) -> MovieRead | None:
        movie = self.repo.get_by_id(movie_id)
        if movie is None:
            return None
        return MovieRead.model_validate(movie)
