"""Tests for reading and writing the durable index files."""

import json

from portfolio_api.models.blog import BlogMetadata
from portfolio_api.services.content_errors import ContentErrorKind, ContentFailure
from portfolio_api.services.content_index import ContentIndex
from portfolio_api.services.durable_store import (
    read_durable_index,
    write_durable_index,
)


def _index() -> ContentIndex:
    return ContentIndex.from_posts(
        [
            BlogMetadata(
                slug="hello",
                title="Hello",
                date="2024-01-01",
                published_at="2024-01-01",
                read_time="3 min",
                tags=("intro",),
                source_file="hello.md",
                last_modified="2024-01-02T00:00:00+00:00",
            ),
            BlogMetadata(slug="later", title="Later", date="2024-05-01", tags=("intro", "x")),
        ]
    )


def test_written_index_uses_camel_case_keys(tmp_path):
    write_durable_index(_index(), tmp_path)

    data = json.loads((tmp_path / "index.json").read_text())

    assert data[1]["slug"] == "hello"
    assert data[1]["publishedAt"] == "2024-01-01"
    assert data[1]["readTime"] == "3 min"
    assert data[1]["sourceFile"] == "hello.md"
    assert data[1]["lastModified"] == "2024-01-02T00:00:00+00:00"
    assert "published_at" not in data[1]


def test_write_returns_counts(tmp_path):
    stats = write_durable_index(_index(), tmp_path / "nested" / "dir")

    assert stats == {"posts": 2, "slugs": 2, "tags": 2}


def test_read_back_matches_written(tmp_path):
    original = _index()
    write_durable_index(original, tmp_path)

    loaded = read_durable_index(tmp_path)

    assert isinstance(loaded, ContentIndex)
    assert loaded.posts == original.posts
    assert loaded.slugs == ("later", "hello")
    assert loaded.tags == ("intro", "x")
    assert loaded.get("hello").source_file == "hello.md"


def test_absent_tier_returns_none(tmp_path):
    assert read_durable_index(tmp_path / "never-built") is None


def test_incomplete_tier_is_a_failure(tmp_path):
    write_durable_index(_index(), tmp_path)
    (tmp_path / "tags.json").unlink()

    result = read_durable_index(tmp_path)

    assert isinstance(result, ContentFailure)
    assert result.kind == ContentErrorKind.DURABLE_CACHE_UNREADABLE


def test_wrong_shape_is_a_failure(tmp_path):
    write_durable_index(_index(), tmp_path)
    (tmp_path / "slugs.json").write_text(json.dumps({"slugs": []}))

    assert isinstance(read_durable_index(tmp_path), ContentFailure)


def test_invalid_record_is_a_failure(tmp_path):
    write_durable_index(_index(), tmp_path)
    (tmp_path / "index.json").write_text(json.dumps([{"title": "no slug"}]))

    assert isinstance(read_durable_index(tmp_path), ContentFailure)


def test_legacy_underscore_keys_are_migrated(tmp_path):
    legacy = [
        {
            "slug": "old",
            "title": "Old",
            "date": "2023-01-01",
            "publishedAt": "2023-01-01",
            "readTime": "",
            "author": "",
            "description": "",
            "tags": ["a"],
            "image": "",
            "_file": "old.md",
            "_lastModified": "2023-01-02T00:00:00.000Z",
        }
    ]
    (tmp_path / "index.json").write_text(json.dumps(legacy))
    (tmp_path / "slugs.json").write_text(json.dumps(["old"]))
    (tmp_path / "tags.json").write_text(json.dumps(["a"]))

    loaded = read_durable_index(tmp_path)

    post = loaded.get("old")
    assert post.source_file == "old.md"
    assert post.last_modified == "2023-01-02T00:00:00.000Z"
    assert post.image is None
