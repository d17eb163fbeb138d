"""Blog post data models."""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class BlogMetadata(BaseModel):
    """Blog post metadata for index display.

    Serialized with camelCase keys (``publishedAt``, ``readTime``, ...) so the
    API responses and the durable index files share one shape.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    slug: str
    title: str = ""
    description: str = ""
    author: str = ""
    read_time: str = ""
    date: str = ""
    published_at: str = ""
    tags: tuple[str, ...] = ()
    image: str | None = None
    # Filename relative to the content directory; internal, not serialized
    source_file: str = Field(default="", exclude=True)
    last_modified: str = ""

    @model_validator(mode="before")
    @classmethod
    def _migrate_old_fields(cls, data: dict) -> dict:
        """Backward compat: map underscore-prefixed keys from older index files."""
        if isinstance(data, dict):
            data = dict(data)
            if "_file" in data and "sourceFile" not in data:
                data["sourceFile"] = data.pop("_file")
            if "_lastModified" in data and "lastModified" not in data:
                data["lastModified"] = data.pop("_lastModified")
            # Older builds wrote "" for a missing image
            if data.get("image") == "":
                data["image"] = None
        return data


class BlogPost(BlogMetadata):
    """Full blog post: metadata plus the raw Markdown body."""

    content: str
