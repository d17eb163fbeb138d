"""Content caches: the two-tier index cache and a small per-post body cache."""

import logging
import os
from collections import OrderedDict
from pathlib import Path

from portfolio_api.models.blog import BlogPost
from portfolio_api.services.content_errors import ContentFailure
from portfolio_api.services.content_index import ContentIndex, IndexBuilder
from portfolio_api.services.durable_store import read_durable_index

logger = logging.getLogger(__name__)

TIER_MEMORY = "memory"
TIER_DURABLE = "durable"
TIER_RUNTIME = "runtime"


class ContentCache:
    """Process-lifetime owner of the content index.

    Lookup order on every access:

    1. the in-memory index, if this process already has one;
    2. the durable tier written by the build step, promoted into memory;
    3. a runtime build through ``IndexBuilder``, stored in memory only.

    The durable tier is never written from here. The cached index is replaced
    whole, never mutated, so readers always see a consistent snapshot.
    ``clear()`` also forgets a previously recorded durable-tier failure.

    Usage::

        cache = ContentCache(IndexBuilder(PathResolver.from_settings()), durable_dir)
        index = cache.get_index()
    """

    def __init__(self, builder: IndexBuilder, durable_dir: Path | None = None) -> None:
        self._builder = builder
        self._durable_dir = durable_dir
        self._index: ContentIndex | None = None
        self.builds = 0
        self.last_tier: str | None = None
        self.durable_failure: ContentFailure | None = None

    @property
    def builder(self) -> IndexBuilder:
        return self._builder

    def get_index(self) -> ContentIndex:
        index = self._index
        if index is not None:
            self.last_tier = TIER_MEMORY
            return index

        if self._durable_dir is not None:
            durable = read_durable_index(self._durable_dir)
            if isinstance(durable, ContentIndex):
                self._index = durable
                self.last_tier = TIER_DURABLE
                return durable
            if isinstance(durable, ContentFailure):
                self.durable_failure = durable

        index = self._builder.build()
        self.builds += 1
        self._index = index
        self.last_tier = TIER_RUNTIME
        return index

    def get_slugs(self) -> tuple[str, ...]:
        return self.get_index().slugs

    def get_tags(self) -> tuple[str, ...]:
        return self.get_index().tags

    def is_loaded(self) -> bool:
        return self._index is not None

    def clear(self) -> None:
        """Drop the in-memory index. Durable files are left untouched."""
        self._index = None
        self.last_tier = None
        self.durable_failure = None
        logger.info("Content cache cleared")


class PostCache:
    """Bounded LRU of loaded posts, keyed by slug and checked against file mtime.

    An entry is only served while the source file's mtime matches the one
    recorded when the post was loaded.
    """

    def __init__(self, max_size: int = 64) -> None:
        self._max_size = max_size
        # OrderedDict preserves insertion order for LRU eviction
        self._store: OrderedDict[str, tuple[BlogPost, float]] = OrderedDict()

    def get(self, slug: str, path: Path) -> BlogPost | None:
        entry = self._store.get(slug)
        if entry is None:
            return None
        post, mtime = entry
        try:
            current = os.path.getmtime(path)
        except OSError:
            self._store.pop(slug, None)
            return None
        if current != mtime:
            self._store.pop(slug, None)
            return None
        # The entry may have been evicted since the lookup above
        if slug in self._store:
            self._store.move_to_end(slug)
        return post

    def set(self, slug: str, post: BlogPost, mtime: float) -> None:
        if self._max_size <= 0:
            return
        if slug in self._store:
            self._store.move_to_end(slug)
        self._store[slug] = (post, mtime)
        while len(self._store) > self._max_size:
            self._store.popitem(last=False)

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
