"""Content index construction.

``IndexBuilder.build`` discovers the content directory, parses every file,
sorts newest first and derives the slug and tag projections from the final
order. It never raises: a missing directory gives an empty index and bad
files are recorded in ``ContentIndex.failures`` and skipped.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from portfolio_api.models.blog import BlogMetadata
from portfolio_api.services.content_errors import ContentErrorKind, ContentFailure
from portfolio_api.services.content_paths import PathResolver, list_content_files
from portfolio_api.services.dates import effective_timestamp
from portfolio_api.services.frontmatter_parser import parse_content_file

logger = logging.getLogger(__name__)

BLOG_KIND = "blogs"


@dataclass(frozen=True)
class ContentIndex:
    """Sorted posts plus projections derived from that exact order.

    ``slugs`` and ``tags`` must only ever be produced by ``from_posts`` (or
    loaded together with ``posts`` from one durable build) so they never
    drift from ``posts``.
    """

    posts: tuple[BlogMetadata, ...] = ()
    slugs: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    content_dir: Path | None = None
    failures: tuple[ContentFailure, ...] = ()
    _by_slug: dict[str, BlogMetadata] = field(
        default_factory=dict, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if not self._by_slug and self.posts:
            object.__setattr__(self, "_by_slug", {p.slug: p for p in self.posts})

    @classmethod
    def from_posts(
        cls,
        posts: Iterable[BlogMetadata],
        content_dir: Path | None = None,
        failures: Iterable[ContentFailure] = (),
    ) -> "ContentIndex":
        ordered = tuple(sort_posts(posts))
        return cls(
            posts=ordered,
            slugs=tuple(p.slug for p in ordered),
            tags=collect_tags(ordered),
            content_dir=content_dir,
            failures=tuple(failures),
        )

    def get(self, slug: str) -> BlogMetadata | None:
        return self._by_slug.get(slug)

    def __len__(self) -> int:
        return len(self.posts)


def _sort_key(post: BlogMetadata) -> tuple[int, float]:
    ts = effective_timestamp(post.published_at, post.date)
    if ts is None:
        # Undated or unparseable posts go after every dated one
        return (1, 0.0)
    return (0, -ts)


def sort_posts(posts: Iterable[BlogMetadata]) -> list[BlogMetadata]:
    """Newest first by ``publishedAt`` (falling back to ``date``).

    The sort is stable, so equal dates keep their enumeration order.
    """
    return sorted(posts, key=_sort_key)


def collect_tags(posts: Iterable[BlogMetadata]) -> tuple[str, ...]:
    """Distinct tags in first-seen order across *posts*."""
    seen: dict[str, None] = {}
    for post in posts:
        for tag in post.tags:
            seen.setdefault(tag, None)
    return tuple(seen)


class IndexBuilder:
    """Build a fresh ``ContentIndex`` from the files on disk."""

    def __init__(self, resolver: PathResolver, kind: str = BLOG_KIND) -> None:
        self._resolver = resolver
        self._kind = kind

    @property
    def resolver(self) -> PathResolver:
        return self._resolver

    @property
    def kind(self) -> str:
        return self._kind

    def build(self) -> ContentIndex:
        directory = self._resolver.resolve(self._kind)
        if directory is None:
            return ContentIndex(
                failures=(
                    ContentFailure(
                        ContentErrorKind.MISSING_DIRECTORY,
                        self._kind,
                        "no candidate directory holds content files",
                    ),
                )
            )

        extension = self._resolver.extension
        try:
            files = list_content_files(directory, extension)
        except OSError as e:
            logger.warning("Could not list content directory %s: %s", directory, e)
            return ContentIndex(
                content_dir=directory,
                failures=(
                    ContentFailure(
                        ContentErrorKind.MISSING_DIRECTORY, str(directory), str(e)
                    ),
                ),
            )

        by_slug: dict[str, BlogMetadata] = {}
        failures: list[ContentFailure] = []
        for path in files:
            result = parse_content_file(path, extension)
            if isinstance(result, ContentFailure):
                failures.append(result)
                continue

            record = result.metadata
            previous = by_slug.get(record.slug)
            if previous is not None:
                logger.warning(
                    "Duplicate slug %r: %s replaces %s",
                    record.slug,
                    record.source_file,
                    previous.source_file,
                )
                # Re-insert so the winner takes its own enumeration position
                del by_slug[record.slug]
            by_slug[record.slug] = record

        index = ContentIndex.from_posts(
            by_slug.values(), content_dir=directory, failures=failures
        )
        logger.info(
            "Built content index: %d posts, %d tags, %d skipped from %s",
            len(index.posts),
            len(index.tags),
            len(failures),
            directory,
        )
        return index
