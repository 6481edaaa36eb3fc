from __future__ import annotations

import logging
from contextlib import aclosing

from fastapi import APIRouter, Response, status
from fastapi.responses import StreamingResponse

from movie_service.api.deps import DbDep, PrincipalDep, SettingsDep
from .events import stream_movie_events
from .schemas import MovieRead
from .service import MoviesService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/movies", tags=["movies"])


@router.get("", response_model=list[MovieRead])
@router.get("/", response_model=list[MovieRead], include_in_schema=False)
def list_movies(db: DbDep, _: PrincipalDep):
    svc = MoviesService(db)
    return svc.list_movies()


@router.get(
    "/{movie_id}",
    response_model=MovieRead,
    responses={status.HTTP_404_NOT_FOUND: {"description": "No movie with this id"}},
)
def read_movie(movie_id: str, db: DbDep, _: PrincipalDep):
    svc = MoviesService(db)
    movie = svc.get_movie(movie_id)
    if movie is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return movie


@router.get("/{movie_id}/events", response_class=StreamingResponse)
async def movie_events(movie_id: str, settings: SettingsDep, current: PrincipalDep):
    """Server-sent events for one movie, one ``{movieId, date}`` frame per interval.

    The stream never ends on its own; closing the connection stops it.
    """
    logger.info("Opening event stream for movie %s (%s)", movie_id, current.username)

    async def generate():
        try:
            async with aclosing(
                stream_movie_events(movie_id, interval=settings.MOVIE_EVENT_INTERVAL_SECONDS)
            ) as events:
                async for event in events:
                    yield event.to_sse()
        finally:
            logger.info("Closed event stream for movie %s", movie_id)

    return StreamingResponse(
        generate(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
