"""
Portfolio Content API

Thin FastAPI backend serving blog metadata and posts from Markdown files.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portfolio_api.config import configure_logging, get_settings
from portfolio_api.middleware import CacheControlMiddleware, RequestIDMiddleware
from portfolio_api.routers import blogs, site
from portfolio_api.services.content import ContentService, get_content_service

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown."""
    configure_logging(settings.log_level)
    yield


app = FastAPI(
    title="Portfolio Content API",
    description="Blog metadata and posts loaded from Markdown front-matter",
    version="0.1.0",
    lifespan=lifespan,
)

# Starlette wraps each added middleware around the previous ones,
# so the last one added runs first.
app.add_middleware(
    CacheControlMiddleware,
    rules=[("/api/blogs", settings.api_cache_control)],
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request ID (outermost)
app.add_middleware(RequestIDMiddleware)

# Routers
app.include_router(blogs.router, prefix="/api")
app.include_router(site.router)


def _run_health_checks(service: ContentService) -> dict[str, Any]:
    """Report content availability and which cache tier served the index."""
    cache = service.cache
    index = cache.get_index()

    checks: dict[str, Any] = {
        "content": "ok" if index.posts else "empty",
        "tier": cache.last_tier,
        "posts": len(index.posts),
        "skipped": len(index.failures),
    }
    if cache.durable_failure is not None:
        checks["durable_cache"] = cache.durable_failure.kind.value

    degraded = not index.posts or bool(index.failures)
    if degraded:
        logger.warning(
            "Health check degraded: %d posts, %d failures",
            len(index.posts),
            len(index.failures),
        )

    return {
        "status": "degraded" if degraded else "ok",
        "service": "portfolio-content-api",
        "version": "0.1.0",
        "checks": checks,
    }


@app.get("/api/health")
async def health_check(
    service: ContentService = Depends(get_content_service),
) -> JSONResponse:
    """Health check; a degraded index still answers 200."""
    return JSONResponse(content=_run_health_checks(service), status_code=200)


@app.post("/api/content/clear")
async def clear_content_cache(
    service: ContentService = Depends(get_content_service),
) -> dict[str, str]:
    """Drop the in-memory caches so edited posts show up (debug only)."""
    if not get_settings().debug:
        raise HTTPException(status_code=404, detail="Not Found")
    service.clear()
    return {"status": "cleared"}
