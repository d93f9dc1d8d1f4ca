"""Environment-driven settings for the Markdown alternate."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple


def _env_bool(value: Optional[str], default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return ()
    return tuple(item.strip().lower() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class MarkdownSettings:
    enabled: bool = True
    advertise_alternate: bool = True
    extra_agent_signatures: Tuple[str, ...] = ()
    site_url: str = "http://localhost:5002"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> MarkdownSettings:
    env = os.environ if environ is None else environ
    return MarkdownSettings(
        enabled=_env_bool(env.get("MARKDOWN_ALTERNATE_ENABLED"), True),
        advertise_alternate=_env_bool(env.get("MARKDOWN_ADVERTISE_ALTERNATE"), True),
        extra_agent_signatures=_env_list(env.get("MARKDOWN_EXTRA_AGENT_SIGNATURES")),
        site_url=(env.get("SITE_URL") or "http://localhost:5002").rstrip("/"),
    )
