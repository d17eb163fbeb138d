"""Blog post endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from portfolio_api.models.blog import BlogMetadata, BlogPost
from portfolio_api.services.content import ContentService, get_content_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["blogs"])


def parse_limit(raw: str | None) -> int | None:
    """Lenient ``?limit=``: anything that isn't an integer means no limit."""
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


@router.get("/blogs", response_model=list[BlogMetadata])
async def list_blogs(
    limit: str | None = Query(default=None),
    service: ContentService = Depends(get_content_service),
):
    """Blog metadata, newest first."""
    limit_number = parse_limit(limit)
    posts = service.list_metadata(limit_number)
    logger.debug("Listing %d blogs (limit=%s)", len(posts), limit_number)
    return posts


@router.get("/blogs/{slug}", response_model=BlogPost)
async def get_blog(
    slug: str,
    service: ContentService = Depends(get_content_service),
):
    """A single blog post with its Markdown body."""
    post = service.get_by_slug(slug)
    if post is None:
        raise HTTPException(status_code=404, detail="Blog post not found")
    return post


@router.get("/slugs", response_model=list[str])
async def list_slugs(service: ContentService = Depends(get_content_service)):
    """Every slug in index order, for static page enumeration."""
    return service.list_slugs()


@router.get("/tags", response_model=list[str])
async def list_tags(service: ContentService = Depends(get_content_service)):
    """Distinct tags in first-seen order, for the tag filter."""
    return service.list_tags()
