from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MovieRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str


class MovieEvent(BaseModel):
    """One tick of a movie's event stream. Serialized as ``{movieId, date}``."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    movie_id: str = Field(..., alias="movieId")
    date: datetime

    def to_sse(self) -> str:
        return f"data: {self.model_dump_json(by_alias=True)}\n\n"
