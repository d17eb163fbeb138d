"""Content directory discovery across deployment layouts.

Local dev, a static build and a serverless bundle each put the Markdown
files somewhere different. The resolver walks an ordered list of candidate
directories and picks the first that exists and holds at least one content
file. The winner is memoized per kind for the life of the process.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from portfolio_api.config import CONTENT_DIR_CANDIDATES, Settings, get_settings

logger = logging.getLogger(__name__)


def candidate_paths(
    relative_dirs: Iterable[str], root: Path, mounts: Iterable[str | Path] = ()
) -> list[Path]:
    """Expand relative candidate dirs under *root*, then under each mount."""
    relative_dirs = list(relative_dirs)
    bases = [root, *(Path(m) for m in mounts)]
    paths: list[Path] = []
    for base in bases:
        for rel in relative_dirs:
            path = base / rel
            if path not in paths:
                paths.append(path)
    return paths


def list_content_files(directory: Path, extension: str = ".md") -> list[Path]:
    """Content files directly inside *directory*, sorted by filename.

    Sorted order makes builds reproducible: ties in the publish date and
    slug collisions both resolve by filename.
    """
    return sorted(
        (p for p in directory.iterdir() if p.is_file() and p.name.endswith(extension)),
        key=lambda p: p.name,
    )


class PathResolver:
    """Resolve a content kind (e.g. ``"blogs"``) to a directory on disk.

    ``candidates`` maps each kind to its ordered list of absolute paths.
    ``resolve`` returns None rather than raising when nothing matches, so
    callers can fall back to an empty index.
    """

    def __init__(
        self, candidates: dict[str, list[Path]], extension: str = ".md"
    ) -> None:
        self._candidates = {kind: list(paths) for kind, paths in candidates.items()}
        self._extension = extension
        self._resolved: dict[str, Path] = {}

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "PathResolver":
        settings = settings or get_settings()
        candidates = {
            kind: candidate_paths(
                rel_dirs, settings.content_root_path, settings.content_mounts
            )
            for kind, rel_dirs in CONTENT_DIR_CANDIDATES.items()
        }
        return cls(candidates, extension=settings.content_extension)

    @property
    def extension(self) -> str:
        return self._extension

    def candidates(self, kind: str) -> list[Path]:
        return list(self._candidates.get(kind, []))

    def resolve(self, kind: str) -> Path | None:
        """Return the content directory for *kind*, or None if none qualifies."""
        cached = self._resolved.get(kind)
        if cached is not None:
            return cached

        for directory in self._candidates.get(kind, []):
            try:
                if not directory.is_dir():
                    logger.debug("Content candidate %s does not exist", directory)
                    continue
                files = list_content_files(directory, self._extension)
            except OSError as e:
                logger.debug("Cannot access content candidate %s: %s", directory, e)
                continue

            if not files:
                logger.info(
                    "Directory exists but has no %s files: %s",
                    self._extension,
                    directory,
                )
                continue

            logger.info(
                "Found %d %s files for %r at %s", len(files), self._extension, kind, directory
            )
            self._resolved[kind] = directory
            return directory

        logger.warning(
            "No content directory found for %r (tried %d candidates)",
            kind,
            len(self._candidates.get(kind, [])),
        )
        return None
