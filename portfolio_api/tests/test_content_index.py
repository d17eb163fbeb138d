"""Tests for IndexBuilder ordering, projections and partial failures."""

from conftest import make_post, write_posts

from portfolio_api.models.blog import BlogMetadata
from portfolio_api.services.content_errors import ContentErrorKind
from portfolio_api.services.content_index import (
    ContentIndex,
    IndexBuilder,
    collect_tags,
    sort_posts,
)
from portfolio_api.services.content_paths import PathResolver


def _build(directory) -> ContentIndex:
    return IndexBuilder(PathResolver({"blogs": [directory]})).build()


def test_sorted_newest_first(blog_dir):
    index = _build(blog_dir)

    assert [p.title for p in index.posts] == ["B", "C", "A"]


def test_slugs_follow_index_order(blog_dir):
    index = _build(blog_dir)

    assert index.slugs == tuple(p.slug for p in index.posts)
    assert index.slugs == ("b", "c", "a")


def test_tags_are_distinct_in_first_seen_order(blog_dir):
    index = _build(blog_dir)

    # B(web, devops) → C(python) → A(python, web)
    assert index.tags == ("web", "devops", "python")


def test_missing_directory_gives_empty_index(tmp_path):
    index = _build(tmp_path / "does-not-exist")

    assert index.posts == ()
    assert index.slugs == ()
    assert index.tags == ()
    assert index.content_dir is None
    assert [f.kind for f in index.failures] == [ContentErrorKind.MISSING_DIRECTORY]


def test_unparseable_files_are_skipped(tmp_path):
    directory = write_posts(
        tmp_path / "blogs",
        {
            "good.md": make_post("Good", "2024-01-01"),
            "bad.md": "---\ntitle: [oops\n---\nBody\n",
            "also-good.md": make_post("Also good", "2024-01-02"),
        },
    )

    index = _build(directory)

    assert [p.title for p in index.posts] == ["Also good", "Good"]
    assert len(index.failures) == 1
    assert index.failures[0].kind == ContentErrorKind.UNPARSEABLE_FILE


def test_published_at_takes_precedence_over_date(tmp_path):
    directory = write_posts(
        tmp_path / "blogs",
        {
            "old-date.md": make_post("Republished", "2020-01-01", extra="publishedAt: '2025-01-01'"),
            "new-date.md": make_post("Fresh", "2024-06-01"),
        },
    )

    index = _build(directory)

    assert [p.title for p in index.posts] == ["Republished", "Fresh"]


def test_absent_published_at_sorts_like_explicit_date():
    implicit = BlogMetadata(slug="x", date="2024-02-01", published_at="")
    explicit = BlogMetadata(slug="y", date="2024-02-01", published_at="2024-02-01")
    newer = BlogMetadata(slug="z", date="2024-03-01")
    older = BlogMetadata(slug="w", date="2024-01-01")

    a = [p.slug for p in sort_posts([older, implicit, newer])]
    b = [p.slug for p in sort_posts([older, explicit, newer])]

    assert a == ["z", "x", "w"]
    assert b == ["z", "y", "w"]


def test_invalid_and_missing_dates_sort_last(tmp_path):
    directory = write_posts(
        tmp_path / "blogs",
        {
            "a-undated.md": make_post("Undated"),
            "b-garbage.md": make_post("Garbage", "not a date"),
            "c-dated.md": make_post("Dated", "2023-05-05"),
        },
    )

    index = _build(directory)

    assert [p.title for p in index.posts] == ["Dated", "Undated", "Garbage"]
    assert index.posts[2].date == "not a date"


def test_equal_dates_keep_filename_order_across_builds(tmp_path):
    directory = write_posts(
        tmp_path / "blogs",
        {f"{name}.md": make_post(name.upper(), "2024-01-01") for name in "dcba"},
    )

    first = _build(directory)
    second = _build(directory)

    assert first.slugs == ("a", "b", "c", "d")
    assert first.slugs == second.slugs


def test_slug_collision_last_file_wins(tmp_path):
    directory = write_posts(
        tmp_path / "blogs",
        {
            "first.md": make_post("First", "2024-01-01", extra="slug: shared"),
            "second.md": make_post("Second", "2024-01-02", extra="slug: shared"),
        },
    )

    index = _build(directory)

    assert index.slugs == ("shared",)
    assert index.get("shared").title == "Second"
    assert index.get("shared").source_file == "second.md"


def test_lookup_by_slug(blog_dir):
    index = _build(blog_dir)

    assert index.get("c").title == "C"
    assert index.get("missing") is None


def test_collect_tags_deduplicates():
    posts = [
        BlogMetadata(slug="1", tags=("x", "y", "x")),
        BlogMetadata(slug="2", tags=("y", "z")),
    ]

    assert collect_tags(posts) == ("x", "y", "z")


def test_impossible_unquoted_date_sorts_last_instead_of_failing(tmp_path):
    directory = write_posts(
        tmp_path / "blogs",
        {
            "bad-date.md": make_post("Bad date", "2024-13-45"),
            "fine.md": make_post("Fine", "2022-01-01"),
        },
    )

    index = _build(directory)

    assert [p.title for p in index.posts] == ["Fine", "Bad date"]
    assert index.failures == ()


def test_byte_order_mark_file_keeps_its_metadata(tmp_path):
    directory = write_posts(
        tmp_path / "blogs",
        {
            "bom.md": "\ufeff" + make_post("Bommed", "2024-05-01", tags=["x"]),
            "plain.md": make_post("Plain", "2024-01-01"),
        },
    )

    index = _build(directory)

    assert [p.title for p in index.posts] == ["Bommed", "Plain"]
    assert index.get("bom").tags == ("x",)
