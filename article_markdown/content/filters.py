"""Host content pipeline: raw stored body -> rendered HTML.

The body goes through the ``the_content`` filter chain, so plugins (or
tests) can add their own transformations next to the default ``autop``.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup

from article_markdown.content.records import ContentRecord
from article_markdown.hooks import HookRegistry

logger = logging.getLogger(__name__)

CONTENT_FILTER = "the_content"

_BLOCK_START = re.compile(
    r"^<(?:!--|(?:p|div|h[1-6]|ul|ol|li|dl|blockquote|pre|table|thead|tbody|tr|figure|figcaption|hr|"
    r"section|article|aside|header|footer|nav|form|fieldset|address|details|summary|iframe|video|audio)\b)",
    re.IGNORECASE,
)
_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")


def autop(text: str) -> str:
    """Wrap blank-line separated text in <p> and turn lone newlines into <br />.

    Chunks that already start with a block-level tag (or an HTML comment)
    are left untouched.
    """
    if not text or not text.strip():
        return ""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    out = []
    for chunk in _PARAGRAPH_SPLIT.split(text.strip()):
        chunk = chunk.strip()
        if not chunk:
            continue
        if _BLOCK_START.match(chunk):
            out.append(chunk)
            continue
        out.append("<p>" + chunk.replace("\n", "<br />\n") + "</p>")
    return "\n\n".join(out) + "\n"


def strip_all_tags(text: Optional[str]) -> str:
    """Plain text of an HTML fragment (script/style contents dropped)."""
    if not text:
        return ""
    soup = BeautifulSoup(text, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    return soup.get_text().strip()


def register_default_content_filters(hooks: HookRegistry) -> HookRegistry:
    hooks.add_filter(CONTENT_FILTER, autop, priority=10)
    return hooks


def render_content_html(record: ContentRecord, hooks: HookRegistry) -> str:
    html = hooks.apply_filters(CONTENT_FILTER, record.body or "")
    if not isinstance(html, str):
        raise TypeError(f"'{CONTENT_FILTER}' filters must return str, got {type(html).__name__}")
    return html
