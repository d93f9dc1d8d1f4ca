"""HTML -> Markdown conversion (markdownify on top of BeautifulSoup)."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from bs4 import BeautifulSoup, NavigableString, Tag
from markdownify import ATX, MarkdownConverter

from article_markdown.errors import ConversionError

logger = logging.getLogger(__name__)

# Tags that only structure the document and never need a converter.
_STRUCTURAL_TAGS = {"html", "head", "body", "[document]", "thead", "tbody", "tfoot", "colgroup", "col"}
_HEADING_TAG = re.compile(r"^h[1-6]$")


@dataclass(frozen=True)
class ConversionOptions:
    strip_unknown_tags: bool = True
    hard_line_breaks: bool = True


DEFAULT_OPTIONS = ConversionOptions()


class HostMarkdownConverter(MarkdownConverter):
    """markdownify converter with single-newline hard breaks.

    markdownify writes ``<br>`` as two trailing spaces plus a newline; with
    ``hard_line_breaks`` the break is a bare newline instead. Inline contexts
    (headings, table cells) keep markdownify's own handling.
    """

    def __init__(self, hard_line_breaks: bool = True, **options: Any) -> None:
        super().__init__(**options)
        self.hard_line_breaks = hard_line_breaks

    def convert_br(self, el, text, *args, **kwargs):
        out = super().convert_br(el, text, *args, **kwargs)
        if not self.hard_line_breaks or "\n" not in out:
            return out
        return "\n"

    def knows_tag(self, name: str) -> bool:
        if name in _STRUCTURAL_TAGS or _HEADING_TAG.match(name):
            return True
        return callable(getattr(self, f"convert_{name}", None))


def _opening_markup(tag: Tag) -> str:
    attrs = []
    for key, value in tag.attrs.items():
        if isinstance(value, (list, tuple)):
            value = " ".join(value)
        attrs.append(f' {key}="{value}"')
    return f"<{tag.name}{''.join(attrs)}>"


def _prepare_unknown_tags(soup: BeautifulSoup, converter: HostMarkdownConverter, strip: bool) -> None:
    """Unwrap tags markdownify has no converter for.

    With ``strip`` the tag disappears and only its content is converted;
    otherwise its opening/closing markup is kept as literal text.
    """
    for tag in soup(["script", "style", "template"]):
        tag.decompose()
    for tag in list(soup.find_all(True)):
        if converter.knows_tag(tag.name):
            continue
        if not strip:
            tag.insert_before(NavigableString(_opening_markup(tag)))
            if not tag.is_empty_element:
                tag.insert_after(NavigableString(f"</{tag.name}>"))
        tag.unwrap()


def _collapse_break_whitespace(soup: BeautifulSoup) -> None:
    """Drop the whitespace right after each ``<br>`` outside ``<pre>``; the break itself emits the newline."""
    for br in soup.find_all("br"):
        if br.find_parent("pre") is not None:
            continue
        following = br.next_sibling
        if type(following) is not NavigableString:
            continue
        stripped = following.lstrip()
        if not stripped:
            following.extract()
        elif stripped != following:
            following.replace_with(NavigableString(stripped))


def convert_html_to_markdown(html: str, options: ConversionOptions = DEFAULT_OPTIONS) -> str:
    if html is None:
        raise ConversionError("No HTML to convert")
    try:
        converter = HostMarkdownConverter(
            hard_line_breaks=options.hard_line_breaks,
            heading_style=ATX,
            bullets="-",
        )
        soup = BeautifulSoup(html, "html.parser")
        _prepare_unknown_tags(soup, converter, strip=options.strip_unknown_tags)
        if options.hard_line_breaks:
            _collapse_break_whitespace(soup)
        markdown = converter.convert_soup(soup)
    except Exception as e:
        raise ConversionError(f"HTML to Markdown conversion failed: {e}") from e
    return markdown.strip()
