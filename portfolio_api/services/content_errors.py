"""Recoverable failure kinds for content loading.

None of these is raised to callers. Loaders return a ``ContentFailure`` in
place of a value, and the index keeps the per-file ones so a caller can tell
"no posts exist" apart from "posts failed to load".
"""

from dataclasses import dataclass
from enum import Enum


class ContentErrorKind(str, Enum):
    MISSING_DIRECTORY = "missing_directory"
    UNPARSEABLE_FILE = "unparseable_file"
    MISSING_FILE = "missing_file"
    DURABLE_CACHE_UNREADABLE = "durable_cache_unreadable"


@dataclass(frozen=True)
class ContentFailure:
    kind: ContentErrorKind
    source: str
    message: str = ""
