"""Request classification: should this request get the Markdown rendering?

Three independent signals, any one of which is enough:
- the path ends in ``.md``
- the User-Agent contains a known LLM / ingestion crawler signature
- the query string carries ``format=md``

Only the suffix signal changes the slug; the other two leave the path as-is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"
FORMAT_PARAM = "format"
FORMAT_VALUE = "md"

# Filter name external code hooks into to add, remove or replace signatures.
SIGNATURES_FILTER = "llm_agent_signatures"

# -----------------------------
# Known automated-ingestion clients (lowercase substrings)
# -----------------------------
DEFAULT_LLM_AGENT_SIGNATURES: Tuple[str, ...] = (
    # OpenAI
    "gptbot",
    "chatgpt-user",
    "oai-searchbot",
    # Anthropic
    "claudebot",
    "claude-web",
    "claude-user",
    "claude-searchbot",
    "anthropic-ai",
    # Perplexity
    "perplexitybot",
    "perplexity-user",
    # Google
    "google-extended",
    "googleother",
    # Common Crawl / Cohere / Meta
    "ccbot",
    "cohere-ai",
    "cohere-training-data-crawler",
    "meta-externalagent",
    "meta-externalfetcher",
    "facebookbot",
    # misc
    "bytespider",
    "amazonbot",
    "applebot-extended",
    "diffbot",
    "youbot",
    "mistralai-user",
    "duckassistbot",
    "ai2bot",
    "timpibot",
    "omgili",
    "img2dataset",
)


@dataclass(frozen=True)
class ClassificationDecision:
    should_serve_markdown: bool
    resolved_slug: str
    signals: Tuple[str, ...] = ()


def get_llm_agent_signatures(hooks: Optional[Any] = None) -> List[str]:
    """Return the signature list after running it through the filter hook.

    Called once per classification so overrides registered at any time are
    picked up on the next request.
    """
    signatures = list(DEFAULT_LLM_AGENT_SIGNATURES)
    if hooks is None:
        return signatures
    filtered = hooks.apply_filters(SIGNATURES_FILTER, signatures)
    return [str(s) for s in (filtered or []) if s]


def has_markdown_suffix(path: str) -> bool:
    return (path or "").endswith(MARKDOWN_SUFFIX)


def matches_llm_agent(user_agent: Optional[str], signatures: Iterable[str]) -> bool:
    ua = (user_agent or "").lower()
    if not ua:
        return False
    return any(sig.lower() in ua for sig in signatures if sig)


def has_format_override(query_params: Optional[Mapping[str, Any]]) -> bool:
    if not query_params:
        return False
    # MultiDict.get returns the first value, which is what we want here.
    return query_params.get(FORMAT_PARAM) == FORMAT_VALUE


def classify(
    request_path: str,
    query_params: Optional[Mapping[str, Any]],
    user_agent: Optional[str],
    signatures: Iterable[str],
) -> ClassificationDecision:
    path = request_path or ""
    signals: List[str] = []
    slug = path

    if has_markdown_suffix(path):
        signals.append("suffix")
        slug = path[: -len(MARKDOWN_SUFFIX)]
    if matches_llm_agent(user_agent, signatures):
        signals.append("agent")
    if has_format_override(query_params):
        signals.append("format")

    decision = ClassificationDecision(
        should_serve_markdown=bool(signals),
        resolved_slug=slug,
        signals=tuple(signals),
    )
    logger.debug(f"Classified {path!r}: markdown={decision.should_serve_markdown} signals={decision.signals}")
    return decision
