"""Markdown response for a content record.

Body layout::

    ---
    title: "..."
    ...
    ---

    # <title>

    <converted body>
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict

from article_markdown.content.records import ContentRecord
from article_markdown.rendering.front_matter import generate_front_matter
from article_markdown.rendering.html_to_markdown import (
    DEFAULT_OPTIONS,
    ConversionOptions,
    convert_html_to_markdown,
)

logger = logging.getLogger(__name__)

MARKDOWN_CONTENT_TYPE = "text/markdown; charset=utf-8"

MARKDOWN_HEADERS: Dict[str, str] = {
    "Content-Type": MARKDOWN_CONTENT_TYPE,
    "X-Robots-Tag": "noindex, nofollow",
    "Vary": "User-Agent",
    "X-Content-Intent": "llm-ingestion",
}

_HTML_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)


@dataclass(frozen=True)
class MarkdownResponse:
    body: str
    headers: Dict[str, str] = field(default_factory=lambda: dict(MARKDOWN_HEADERS))


def strip_html_comments(markdown: str) -> str:
    return _HTML_COMMENT.sub("", markdown)


def render_markdown_body(
    record: ContentRecord,
    render_body_html: Callable[[ContentRecord], str],
    options: ConversionOptions = DEFAULT_OPTIONS,
) -> str:
    html = render_body_html(record)
    markdown = strip_html_comments(convert_html_to_markdown(html, options))
    front_matter = generate_front_matter(record)
    return f"{front_matter}# {record.title}\n\n{markdown}\n"


def render_markdown_response(
    record: ContentRecord,
    render_body_html: Callable[[ContentRecord], str],
    options: ConversionOptions = DEFAULT_OPTIONS,
) -> MarkdownResponse:
    body = render_markdown_body(record, render_body_html, options)
    logger.debug(f"Rendered Markdown for '{record.slug}' ({len(body)} chars)")
    return MarkdownResponse(body=body)
