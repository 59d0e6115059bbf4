import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from meetinglog.api.middleware.request_logging import RequestLoggingMiddleware
from meetinglog.api.routers import search, system
from meetinglog.api.search_service import search_service
from meetinglog.core.config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The index is a build artifact; serve without it but say so
    if not search_service.index_exists():
        logger.warning(
            f"Search index not found at {search_service.index_path}; "
            "run scripts/build_search_index.py first"
        )
    yield


# Application
app = FastAPI(
    lifespan=lifespan,
    title="Meeting Log Archive API",
    version="0.1.0",
    description="Search over the developer meeting log archive.",
    openapi_tags=[
        {"name": "search", "description": "Search index and query endpoints"},
        {"name": "system", "description": "Health checks"},
    ],
)

# Middleware (outermost added last)
app.add_middleware(RequestLoggingMiddleware)

cors_origins = os.getenv("CORS_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Routes: static index and probes at the root, JSON API under /api/v1
app.include_router(search.index_router, tags=["search"])
app.include_router(system.root_router, tags=["system"])
app.include_router(search.router, prefix="/api/v1", tags=["search"])
app.include_router(system.router, prefix="/api/v1", tags=["system"])


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
    uvicorn.run(
        "meetinglog.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
