"""Search Router - static index file and JSON search endpoint."""

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse, JSONResponse

from meetinglog.api.search_service import search_service
from meetinglog.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

# Serves the index at the path the browser-side engine fetches
index_router = APIRouter()


def _parse_pos_int(value: str | None, default: int, *, min_v: int = 1) -> int:
    try:
        x = int(value) if value is not None else default
    except ValueError:
        x = default
    return max(x, min_v)


@index_router.get(f"/{settings.SEARCH_INDEX_FILENAME}")
async def search_index_file():
    """The JSON search index produced by the build script."""
    if not search_service.index_exists():
        raise HTTPException(status_code=503, detail="Search index has not been built")
    return FileResponse(search_service.index_path, media_type="application/json")


@router.get("/search")
async def api_search(q: str | None = None, limit: str | None = None):
    """Search API (JSON) - same scoring as the in-page search box."""
    query = (q or "").strip()
    if len(query) > settings.MAX_QUERY_LEN:
        query = query[: settings.MAX_QUERY_LEN]

    per_page = min(
        _parse_pos_int(limit, settings.SEARCH_MAX_RESULTS), settings.SEARCH_MAX_RESULTS
    )

    data = search_service.search(query, per_page)
    logger.debug(f"Search {query!r}: {data['total']} hits")
    return JSONResponse(data)
