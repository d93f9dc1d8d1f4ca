"""Exceptions raised by the Markdown alternate-rendering layer."""

from __future__ import annotations


class ArticleMarkdownError(Exception):
    """Base error for Markdown rendering failures."""


class ConversionError(ArticleMarkdownError):
    """HTML could not be converted to Markdown.

    Raised instead of emitting partial output; the host's generic error
    handling turns it into a 500.
    """
