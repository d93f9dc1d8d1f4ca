"""Front matter block for a content record."""

from __future__ import annotations

from collections import OrderedDict
from datetime import datetime, timezone
from typing import Optional

from article_markdown.content.filters import strip_all_tags
from article_markdown.content.records import ContentRecord
from article_markdown.rendering.yaml_subset import FrontMatterValue, yaml_encode

FRONT_MATTER_DELIMITER = "---"

FRONT_MATTER_KEYS = (
    "title",
    "slug",
    "date",
    "modified",
    "author",
    "excerpt",
    "categories",
    "tags",
    "canonical",
)


def format_timestamp(value: Optional[datetime]) -> str:
    """ISO-8601 with offset, seconds precision (e.g. 2024-05-01T09:30:00+00:00)."""
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.replace(microsecond=0).isoformat()


def build_front_matter_fields(record: ContentRecord) -> "OrderedDict[str, FrontMatterValue]":
    fields: "OrderedDict[str, FrontMatterValue]" = OrderedDict()
    fields["title"] = record.title
    fields["slug"] = record.slug
    fields["date"] = format_timestamp(record.published_at)
    fields["modified"] = format_timestamp(record.modified_at)
    fields["author"] = record.author_name
    fields["excerpt"] = strip_all_tags(record.excerpt)
    fields["categories"] = list(record.categories or ())
    fields["tags"] = list(record.tags or ())
    fields["canonical"] = record.canonical_url
    return fields


def generate_front_matter(record: ContentRecord) -> str:
    body = yaml_encode(build_front_matter_fields(record))
    return f"{FRONT_MATTER_DELIMITER}\n{body}{FRONT_MATTER_DELIMITER}\n\n"
