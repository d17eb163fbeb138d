"""Build the durable content index before the server starts.

Usage:
    python -m scripts.build_content
    python -m scripts.build_content --content-root . --output .cache/content

Writes index.json, slugs.json and tags.json. Exits non-zero if no content
directory is found or any file fails to parse, so a broken post fails the
build instead of silently vanishing from the site.
"""

import argparse
import logging
import sys
from pathlib import Path

from portfolio_api.config import configure_logging, get_settings
from portfolio_api.services.content_errors import ContentErrorKind
from portfolio_api.services.content_index import IndexBuilder
from portfolio_api.services.content_paths import PathResolver
from portfolio_api.services.durable_store import write_durable_index

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--content-root", help="Base directory for content lookup")
    parser.add_argument("--output", help="Directory for the durable index files")
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.content_root:
        settings = settings.model_copy(update={"content_root": args.content_root})
    configure_logging(settings.log_level)

    output = Path(args.output) if args.output else settings.durable_cache_path

    print("Starting build-time content generation...")
    index = IndexBuilder(PathResolver.from_settings(settings)).build()

    missing = [f for f in index.failures if f.kind == ContentErrorKind.MISSING_DIRECTORY]
    if missing:
        print(f"ERROR: no content directory found ({missing[0].message})")
        return 1

    stats = write_durable_index(index, output)

    print("\nContent index complete:")
    print(f"  Source:  {index.content_dir}")
    print(f"  Posts:   {stats['posts']}")
    print(f"  Slugs:   {stats['slugs']}")
    print(f"  Tags:    {stats['tags']}")
    print(f"  Skipped: {len(index.failures)}")
    print(f"  Output:  {output}")

    if index.failures:
        for failure in index.failures:
            print(f"ERROR: {failure.source}: {failure.message}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
