#!/usr/bin/env python3
"""
Export articles/pages as Markdown files (same output the site serves to LLM crawlers).

Usage:
  python export_markdown.py --path /hello-world          # print one record
  python export_markdown.py --all --out-dir exported/    # write <slug>.md per record

Exit codes: 0 ok, 1 path not found.
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

from article_markdown.config import load_settings
from article_markdown.content.filters import register_default_content_filters, render_content_html
from article_markdown.content.records import MARKDOWN_KINDS
from article_markdown.hooks import HookRegistry
from article_markdown.rendering.responder import render_markdown_body
from database import ContentDatabase


def _write(out_dir: str, slug: str, body: str) -> str:
    os.makedirs(out_dir, exist_ok=True)
    target = os.path.join(out_dir, f"{slug}.md")
    with open(target, "w", encoding="utf-8") as f:
        f.write(body)
    return target


def main(argv: Optional[List[str]] = None) -> int:
    root = os.path.dirname(os.path.abspath(__file__))
    parser = argparse.ArgumentParser(description="Export content records as Markdown with front matter")
    parser.add_argument("--env", default=os.path.join(root, ".env"), help="Path to .env file")
    parser.add_argument("--db", default=None, help="Path to SQLite DB (defaults to DB_PATH in env)")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--path", help="Record path, e.g. /about/team")
    target.add_argument("--all", action="store_true", help="Export every article and page")
    parser.add_argument("--out-dir", default=None, help="Write files here instead of stdout")
    args = parser.parse_args(argv)

    load_dotenv(args.env)
    settings = load_settings()
    db = ContentDatabase(db_path=args.db or os.environ.get("DB_PATH", "content.db"), site_url=settings.site_url)
    hooks = register_default_content_filters(HookRegistry())

    def render(record) -> str:
        return render_markdown_body(record, lambda r: render_content_html(r, hooks))

    if args.path:
        record = db.get_post_by_path(args.path, MARKDOWN_KINDS)
        if record is None:
            print(f"Not found: {args.path}", file=sys.stderr)
            return 1
        records = [record]
    else:
        records = [r for r in db.list_posts(limit=1000) if r.kind in MARKDOWN_KINDS]

    for record in records:
        body = render(record)
        if args.out_dir:
            print(f"Wrote {_write(args.out_dir, record.slug, body)}")
        else:
            sys.stdout.write(body)

    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except KeyboardInterrupt:
        print("\nInterrupted.")
        raise SystemExit(130)
