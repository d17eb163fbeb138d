"""Shared fixtures for portfolio content tests."""

from pathlib import Path

import pytest

from portfolio_api.services.cache import ContentCache, PostCache
from portfolio_api.services.content import ContentService
from portfolio_api.services.content_index import IndexBuilder
from portfolio_api.services.content_paths import PathResolver


def make_post(
    title: str,
    date: str = "",
    *,
    tags: list[str] | None = None,
    extra: str = "",
    body: str = "Body text.",
) -> str:
    """Render a Markdown file with YAML front-matter."""
    lines = ["---", f"title: {title}"]
    if date:
        lines.append(f"date: {date}")
    if tags is not None:
        lines.append("tags:")
        lines.extend(f"  - {t}" for t in tags)
    if extra:
        lines.append(extra.rstrip("\n"))
    lines.append("---")
    lines.append("")
    lines.append(body)
    return "\n".join(lines) + "\n"


def write_posts(directory: Path, posts: dict[str, str]) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for filename, text in posts.items():
        (directory / filename).write_text(text, encoding="utf-8")
    return directory


def make_service(
    content_dir: Path, durable_dir: Path | None = None
) -> ContentService:
    """A fresh service over a single candidate directory."""
    resolver = PathResolver({"blogs": [content_dir]})
    cache = ContentCache(IndexBuilder(resolver), durable_dir=durable_dir)
    return ContentService(cache, PostCache(max_size=8))


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reset all module-level singletons and caches between tests."""
    yield

    from portfolio_api.config import get_settings
    from portfolio_api.services.content import get_content_service

    get_settings.cache_clear()
    get_content_service.cache_clear()


@pytest.fixture
def blog_dir(tmp_path):
    """Content directory with three dated posts A, B and C."""
    return write_posts(
        tmp_path / "src" / "data" / "blogs",
        {
            "a.md": make_post("A", "2024-01-01", tags=["python", "web"]),
            "b.md": make_post("B", "2024-03-01", tags=["web", "devops"]),
            "c.md": make_post("C", "2024-02-01", tags=["python"]),
        },
    )


@pytest.fixture
def service(blog_dir):
    return make_service(blog_dir)
