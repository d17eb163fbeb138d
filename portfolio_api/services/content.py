"""Content service: the query interface pages and API routes depend on.

Listing queries are served from the cached index. A single post's body is
loaded from disk on demand (and kept in a small LRU) rather than held in
the index. Nothing here raises: failures degrade to empty results or None.
"""

import logging
from functools import lru_cache

from portfolio_api.config import Settings, get_settings
from portfolio_api.models.blog import BlogMetadata, BlogPost
from portfolio_api.services.cache import ContentCache, PostCache
from portfolio_api.services.content_errors import ContentFailure
from portfolio_api.services.content_index import IndexBuilder
from portfolio_api.services.content_paths import PathResolver
from portfolio_api.services.frontmatter_parser import parse_content_file

logger = logging.getLogger(__name__)


class ContentService:
    def __init__(self, cache: ContentCache, post_cache: PostCache | None = None) -> None:
        self._cache = cache
        self._posts = post_cache if post_cache is not None else PostCache()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ContentService":
        settings = settings or get_settings()
        builder = IndexBuilder(PathResolver.from_settings(settings))
        cache = ContentCache(builder, durable_dir=settings.durable_cache_path)
        return cls(cache, PostCache(max_size=settings.post_cache_size))

    @property
    def cache(self) -> ContentCache:
        return self._cache

    def list_metadata(self, limit: int | None = None) -> list[BlogMetadata]:
        """Posts newest first, optionally truncated to the first *limit*.

        ``None``, zero and negative limits all return the full list.
        """
        try:
            posts = self._cache.get_index().posts
        except Exception:
            logger.exception("Failed to load content index")
            return []
        if limit is not None and limit > 0:
            return list(posts[:limit])
        return list(posts)

    def get_by_slug(self, slug: str) -> BlogPost | None:
        """Metadata plus Markdown body for *slug*, or None if not found."""
        try:
            return self._load_post(slug)
        except Exception:
            logger.exception("Failed to load blog post %s", slug)
            return None

    def _load_post(self, slug: str) -> BlogPost | None:
        index = self._cache.get_index()
        record = index.get(slug)
        if record is None:
            return None

        resolver = self._cache.builder.resolver
        directory = index.content_dir or resolver.resolve(self._cache.builder.kind)
        if directory is None:
            logger.warning("Post %s is indexed but no content directory is available", slug)
            return None
        path = directory / (record.source_file or f"{slug}{resolver.extension}")

        cached = self._posts.get(slug, path)
        if cached is not None:
            return cached

        parsed = parse_content_file(path, resolver.extension)
        if isinstance(parsed, ContentFailure):
            logger.warning("Post %s could not be loaded: %s (%s)", slug, parsed.kind.value, path)
            return None

        post = BlogPost(
            **record.model_dump(),
            source_file=record.source_file,
            content=parsed.body.strip(),
        )
        self._posts.set(slug, post, parsed.mtime)
        return post

    def list_slugs(self) -> list[str]:
        try:
            return list(self._cache.get_slugs())
        except Exception:
            logger.exception("Failed to load slug list")
            return []

    def list_tags(self) -> list[str]:
        try:
            return list(self._cache.get_tags())
        except Exception:
            logger.exception("Failed to load tag list")
            return []

    def clear(self) -> None:
        """Drop in-memory index and post caches (development reload)."""
        self._cache.clear()
        self._posts.clear()


@lru_cache
def get_content_service() -> ContentService:
    """Process-wide ContentService, created on first use."""
    return ContentService.from_settings()
