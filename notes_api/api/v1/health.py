"""GET /health: reports store and cache reachability, no authentication."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from notes_api.core.cache import NoteCache, get_cache
from notes_api.core.database import check_db_connected, get_db
from notes_api.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    cache: Annotated[NoteCache | None, Depends(get_cache)],
) -> HealthResponse:
    database = "connected" if check_db_connected(db) else "disconnected"
    if cache is None:
        cache_status = "disabled"
    else:
        cache_status = "connected" if cache.ping() else "disconnected"
    # A missing cache only slows reads; a missing database breaks every route.
    return HealthResponse(
        status="ok" if database == "connected" else "degraded",
        environment=request.app.state.settings.APP_ENV,
        database=database,
        cache=cache_status,
    )
