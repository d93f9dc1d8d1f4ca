"""Flask request stage that serves the Markdown alternate.

Installed as a ``before_request`` function: when the classifier fires it
owns the request (Markdown body or an empty 404) and the host's view never
runs. Otherwise it returns None and Flask carries on as usual.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from flask import Flask, Response, request

from article_markdown.config import MarkdownSettings
from article_markdown.content.records import MARKDOWN_KINDS, ContentRecord
from article_markdown.errors import ConversionError
from article_markdown.hooks import HookRegistry
from article_markdown.rendering.responder import render_markdown_response
from article_markdown.routing.classifier import (
    MARKDOWN_SUFFIX,
    SIGNATURES_FILTER,
    classify,
    get_llm_agent_signatures,
)

logger = logging.getLogger(__name__)

DEFAULT_EXEMPT_PREFIXES = ("/api/",)

LookupFn = Callable[[str, Iterable[str]], Optional[ContentRecord]]
RenderFn = Callable[[ContentRecord], str]


def alternate_link_header(path: str) -> str:
    """``Link`` header value pointing HTML readers at the Markdown twin."""
    target = (path or "/").rstrip("/") or "/index"
    return f'<{target}{MARKDOWN_SUFFIX}>; rel="alternate"; type="text/markdown"'


def register_extra_signatures(hooks: HookRegistry, extra: Iterable[str]) -> None:
    extra = [s for s in extra if s]
    if not extra:
        return

    def _add_configured(signatures):
        return list(signatures) + [s for s in extra if s not in signatures]

    hooks.add_filter(SIGNATURES_FILTER, _add_configured)


def install_markdown_interceptor(
    app: Flask,
    *,
    lookup: LookupFn,
    render_body_html: RenderFn,
    hooks: HookRegistry,
    settings: Optional[MarkdownSettings] = None,
    exempt_prefixes: Iterable[str] = DEFAULT_EXEMPT_PREFIXES,
) -> Callable[[], Optional[Response]]:
    settings = settings or MarkdownSettings()
    exempt = tuple(exempt_prefixes)
    register_extra_signatures(hooks, settings.extra_agent_signatures)

    def serve_markdown_alternate() -> Optional[Response]:
        if not settings.enabled:
            return None
        path = request.path
        if exempt and path.startswith(exempt):
            return None

        decision = classify(
            path,
            request.args,
            request.headers.get("User-Agent", ""),
            get_llm_agent_signatures(hooks),
        )
        if not decision.should_serve_markdown:
            return None

        record = lookup(decision.resolved_slug, MARKDOWN_KINDS)
        if record is None:
            logger.info(f"Markdown requested for unknown path {path!r} (slug {decision.resolved_slug!r})")
            return Response(b"", status=404)

        try:
            result = render_markdown_response(record, render_body_html)
        except ConversionError as e:
            logger.error(f"Markdown conversion failed for '{record.slug}': {e}", exc_info=True)
            raise

        logger.info(f"Serving Markdown for {path!r} -> '{record.slug}' signals={','.join(decision.signals)}")
        return Response(result.body.encode("utf-8"), status=200, headers=result.headers)

    app.before_request(serve_markdown_alternate)
    return serve_markdown_alternate
