"""
Health endpoints for the archive service.

Root level (load balancer / orchestrator probes):
- /health        process answers
- /health/live   same, kept separate for liveness probes
- /health/ready  search index built and parseable

/api/v1/health reports the same index check in the API's response shape.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from meetinglog.api.search_service import search_service

router = APIRouter()
root_router = APIRouter()


def _index_ready() -> bool:
    return search_service.get_engine() is not None


@root_router.get("/health")
async def health():
    return {"status": "ok"}


@root_router.get("/health/live")
async def health_live():
    return {"status": "ok"}


@root_router.get("/health/ready")
async def health_ready():
    """503 until the search index has been built."""
    ready = _index_ready()
    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ok" if ready else "unhealthy",
            "checks": {"search_index": "ok" if ready else "unhealthy"},
        },
    )


@router.get("/health")
async def api_health():
    checks = {"app": True, "search_index": _index_ready()}
    ok = all(checks.values())
    return JSONResponse(status_code=200 if ok else 503, content={"ok": ok, "checks": checks})
