"""Content record snapshot handed to the Markdown layer by the host store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional, Tuple

KIND_ARTICLE = "article"
KIND_PAGE = "page"

# Record kinds the Markdown alternate is served for.
MARKDOWN_KINDS: FrozenSet[str] = frozenset({KIND_ARTICLE, KIND_PAGE})


@dataclass(frozen=True)
class ContentRecord:
    """Read-only view of an article or page.

    ``body`` is the raw stored body (HTML or plain host markup); the rendered
    HTML comes from the host content pipeline, not from this record.
    """

    title: str
    slug: str
    body: str
    published_at: datetime
    modified_at: datetime
    canonical_url: str
    kind: str = KIND_ARTICLE
    excerpt: str = ""
    author_id: Optional[int] = None
    author_name: str = ""
    categories: Tuple[str, ...] = field(default_factory=tuple)
    tags: Tuple[str, ...] = field(default_factory=tuple)
    id: Optional[int] = None
