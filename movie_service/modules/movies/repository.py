from __future__ import annotations

from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from .models import Movie


class MoviesRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> list[Movie]:
        stmt = select(Movie)
        return list(self.db.scalars(stmt))

    def get_by_id(self, movie_id: str) -> Movie | None:
        return self.db.get(Movie, movie_id)

    def add(self, movie: Movie) -> Movie:
        self.db.add(movie)
        self.db.commit()
        self.db.refresh(movie)
        return movie

    def add_many(self, movies: Sequence[Movie]) -> list[Movie]:
        self.db.add_all(movies)
        self.db.commit()
        for movie in movies:
            self.db.refresh(movie)
        return list(movies)

    def delete_all(self) -> int:
        result = self.db.execute(delete(Movie))
        self.db.commit()
        return result.rowcount or 0
