"""Front-matter parsing for Markdown content files.

``parse_content_file`` reads one file and returns a fully-populated
``BlogMetadata`` plus the raw body. Missing fields get their defaults here,
once, so nothing downstream deals with absent keys. Read and parse errors
come back as a ``ContentFailure`` instead of an exception, letting batch
callers skip the file and carry on.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import frontmatter
import yaml
from frontmatter.default_handlers import YAMLHandler

from portfolio_api.models.blog import BlogMetadata
from portfolio_api.services.content_errors import ContentErrorKind, ContentFailure
from portfolio_api.services.dates import stringify_date

logger = logging.getLogger(__name__)


class _StringDateLoader(yaml.SafeLoader):
    """SafeLoader that keeps timestamps as the strings the author wrote."""


_StringDateLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class FrontMatterHandler(YAMLHandler):
    def load(self, fm: str, **kwargs: Any) -> Any:
        return yaml.load(fm, Loader=_StringDateLoader)


_HANDLER = FrontMatterHandler()


@dataclass(frozen=True)
class ParsedFile:
    metadata: BlogMetadata
    body: str
    mtime: float = 0.0


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _tags(value: Any) -> tuple[str, ...]:
    """Front-matter tags in authored order; duplicates are kept."""
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        return tuple(str(t) for t in value if t is not None)
    return (str(value),)


def normalize_metadata(
    fm: dict[str, Any],
    *,
    filename: str,
    extension: str = ".md",
    last_modified: str = "",
) -> BlogMetadata:
    """Build a ``BlogMetadata`` from raw front-matter with documented defaults.

    ``slug`` falls back to the filename without extension and
    ``publishedAt`` falls back to ``date``.
    """
    default_slug = filename[: -len(extension)] if filename.endswith(extension) else filename
    date_value = stringify_date(fm.get("date"))
    published_at = stringify_date(fm.get("publishedAt")) or date_value
    image = _text(fm.get("image")) or None

    return BlogMetadata(
        slug=_text(fm.get("slug")).strip() or default_slug,
        title=_text(fm.get("title")),
        description=_text(fm.get("description")),
        author=_text(fm.get("author")),
        read_time=_text(fm.get("readTime")),
        date=date_value,
        published_at=published_at,
        tags=_tags(fm.get("tags")),
        image=image,
        source_file=filename,
        last_modified=last_modified,
    )


def parse_content_file(path: Path, extension: str = ".md") -> ParsedFile | ContentFailure:
    """Parse one content file into metadata and body."""
    try:
        stat = path.stat()
        text = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        return ContentFailure(ContentErrorKind.MISSING_FILE, str(path), "file not found")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read content file %s: %s", path, e)
        return ContentFailure(ContentErrorKind.UNPARSEABLE_FILE, str(path), str(e))

    try:
        post = frontmatter.loads(text, handler=_HANDLER if _HANDLER.detect(text) else None)
        last_modified = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat()
        metadata = normalize_metadata(
            dict(post.metadata),
            filename=path.name,
            extension=extension,
            last_modified=last_modified,
        )
    except (yaml.YAMLError, ValueError, TypeError, AttributeError) as e:
        logger.warning("Skipping %s: malformed front-matter (%s)", path.name, e)
        return ContentFailure(ContentErrorKind.UNPARSEABLE_FILE, str(path), str(e))

    return ParsedFile(metadata=metadata, body=post.content, mtime=stat.st_mtime)
