"""Application configuration via environment variables."""

import logging
import os
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

from portfolio_api.middleware import RequestIDLogFilter

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s"

# Relative candidate directories per content kind, in order of preference.
# Each entry is tried under content_root first, then under every mount point.
CONTENT_DIR_CANDIDATES: dict[str, list[str]] = {
    "blogs": [
        "src/data/blogs",  # bundled with the server build
        "public/blog",  # static assets folder
        ".next/server/src/data/blogs",  # traced into the server bundle
        "blog",  # legacy layout
    ],
}


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Content discovery
    content_root: str = ""  # empty = process cwd
    content_mounts: list[str] = ["/var/task"]  # serverless bundle root
    content_extension: str = ".md"

    # Durable tier written by scripts/build_content.py
    durable_cache_dir: str = ".cache/content"

    # Single-post body cache capacity
    post_cache_size: int = 64

    # Public site
    site_url: str = "https://ilyasbashirah.com"
    api_cache_control: str = "s-maxage=3600, stale-while-revalidate=86400"

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def content_root_path(self) -> Path:
        return Path(self.content_root or os.getcwd())

    @property
    def durable_cache_path(self) -> Path:
        path = Path(self.durable_cache_dir)
        if path.is_absolute():
            return path
        return self.content_root_path / path


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Root logging setup shared by the app and the build script."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIDLogFilter) for f in handler.filters):
            handler.addFilter(RequestIDLogFilter())
