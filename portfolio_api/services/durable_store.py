"""Durable (build-time) tier of the content cache.

A separate build step (``scripts/build_content.py``) writes three JSON files
into one directory before the server starts:

- ``index.json``: sorted post metadata, camelCase keys
- ``slugs.json``: slugs in index order
- ``tags.json``: distinct tags in first-seen order

The server only ever reads them, and treats the three as one unit: if any of
them is missing or unreadable the whole tier is skipped.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from portfolio_api.models.blog import BlogMetadata
from portfolio_api.services.content_errors import ContentErrorKind, ContentFailure
from portfolio_api.services.content_index import ContentIndex

logger = logging.getLogger(__name__)

INDEX_FILE = "index.json"
SLUGS_FILE = "slugs.json"
TAGS_FILE = "tags.json"

DURABLE_FILES = (INDEX_FILE, SLUGS_FILE, TAGS_FILE)


def _load_string_list(path: Path) -> list[str]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list) or not all(isinstance(s, str) for s in data):
        raise ValueError(f"{path.name} is not a list of strings")
    return data


def read_durable_index(directory: Path) -> ContentIndex | ContentFailure | None:
    """Load the durable tier from *directory*.

    Returns None when the tier was never built, a ``ContentFailure`` when it
    exists but cannot be trusted, and the index otherwise. No staleness check
    against the source files is made.
    """
    paths = [directory / name for name in DURABLE_FILES]
    if not any(p.exists() for p in paths):
        return None

    try:
        posts_data = json.loads(paths[0].read_text(encoding="utf-8"))
        # Accept both list format and dict format ({"posts": [...]})
        if isinstance(posts_data, dict):
            posts_data = posts_data.get("posts", [])
        if not isinstance(posts_data, list):
            raise ValueError(f"{INDEX_FILE} is not a list")
        posts = tuple(BlogMetadata.model_validate(p) for p in posts_data)
        slugs = tuple(_load_string_list(paths[1]))
        tags = tuple(_load_string_list(paths[2]))
    except (OSError, ValueError, ValidationError) as e:
        # json.JSONDecodeError is a ValueError
        logger.warning("Ignoring unreadable durable content cache at %s: %s", directory, e)
        return ContentFailure(
            ContentErrorKind.DURABLE_CACHE_UNREADABLE, str(directory), str(e)
        )

    logger.info("Loaded durable content index: %d posts from %s", len(posts), directory)
    return ContentIndex(posts=posts, slugs=slugs, tags=tags)


def write_durable_index(index: ContentIndex, directory: Path) -> dict[str, int]:
    """Write *index* as the durable tier into *directory* (created if needed).

    Returns counts of posts, slugs and tags written.
    """
    directory.mkdir(parents=True, exist_ok=True)

    index_data = json.dumps(
        [
            {**p.model_dump(mode="json", by_alias=True), "sourceFile": p.source_file}
            for p in index.posts
        ],
        indent=2,
    )
    (directory / INDEX_FILE).write_text(index_data, encoding="utf-8")
    (directory / SLUGS_FILE).write_text(json.dumps(list(index.slugs), indent=2), encoding="utf-8")
    (directory / TAGS_FILE).write_text(json.dumps(list(index.tags), indent=2), encoding="utf-8")

    return {
        "posts": len(index.posts),
        "slugs": len(index.slugs),
        "tags": len(index.tags),
    }
