#!/usr/bin/env python3
"""
Seed a local content DB with a sample author, article and pages.
Safe to re-run: existing paths are skipped.
"""

import os
from datetime import datetime, timezone

from dotenv import load_dotenv

from article_markdown.config import load_settings
from database import ContentDatabase


def seed(db: ContentDatabase) -> int:
    created = 0
    author_id = db.get_or_create_author("Jane Doe", login="jane")

    if db.get_post_by_path("hello-world") is None:
        db.add_post(
            title="Hello World",
            slug="hello-world",
            body=(
                "Welcome to the site.\n"
                "This line follows a single line break.\n\n"
                "<!-- editor note: remove before launch -->\n\n"
                "<h2>Next steps</h2>\n"
                "<ul><li>Read the <a href=\"/about\">about page</a></li><li>Try <code>/hello-world.md</code></li></ul>"
            ),
            excerpt="A first post.",
            author_id=author_id,
            categories=["News"],
            tags=["welcome", "markdown"],
            published_at=datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc),
        )
        created += 1

    about = db.get_post_by_path("about")
    if about is None:
        about_id = db.add_post(title="About", slug="about", kind="page", body="<p>Who we are.</p>", author_id=author_id)
        created += 1
    else:
        about_id = about.id

    if db.get_post_by_path("about/team") is None:
        db.add_post(title="Team", slug="team", kind="page", parent_id=about_id, body="The people behind the site.")
        created += 1

    return created


if __name__ == "__main__":
    load_dotenv()
    settings = load_settings()
    db = ContentDatabase(db_path=os.environ.get("DB_PATH", "content.db"), site_url=settings.site_url)
    print(f"Seeded {seed(db)} record(s) into {db.db_path}")
