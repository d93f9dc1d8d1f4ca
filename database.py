#!/usr/bin/env python3
"""
SQLite content store for the site: authors, articles/pages and their terms.
Exposes path lookup used by both the HTML views and the Markdown alternate.
"""

import sqlite3
import logging
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from article_markdown.content.records import KIND_ARTICLE, KIND_PAGE, ContentRecord

logger = logging.getLogger(__name__)

TAXONOMY_CATEGORY = 'category'
TAXONOMY_TAG = 'tag'


class DatabaseError(Exception):
    """Custom exception for database operations"""
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def _to_text(value: Optional[datetime]) -> str:
    value = value or _utcnow()
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _parse_timestamp(value: Optional[str]) -> datetime:
    if not value:
        return _utcnow()
    parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    # Normalize naive to UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_path(path: str) -> str:
    """'/about/team/' -> 'about/team'"""
    return '/'.join(part for part in (path or '').strip().split('/') if part)


class ContentDatabase:
    """Content store for articles and pages"""

    def __init__(self, db_path: str = "content.db", site_url: str = "http://localhost:5002"):
        self.db_path = db_path
        self.site_url = site_url.rstrip('/')
        self.max_retries = 3
        self.retry_delay = 1.0
        self._ensure_db_directory()
        self.init_database()

    def _ensure_db_directory(self):
        """Ensure database directory exists"""
        db_dir = Path(self.db_path).parent
        db_dir.mkdir(parents=True, exist_ok=True)

    def init_database(self):
        """Create tables if missing"""
        with self.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS authors (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    login TEXT UNIQUE,
                    display_name TEXT NOT NULL DEFAULT ''
                )
            ''')

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS posts (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    kind TEXT NOT NULL DEFAULT 'article',
                    slug TEXT NOT NULL,
                    parent_id INTEGER,
                    title TEXT NOT NULL,
                    body TEXT NOT NULL DEFAULT '',
                    excerpt TEXT NOT NULL DEFAULT '',
                    author_id INTEGER,
                    published_at TEXT NOT NULL,
                    modified_at TEXT NOT NULL,
                    FOREIGN KEY (author_id) REFERENCES authors(id) ON DELETE SET NULL,
                    FOREIGN KEY (parent_id) REFERENCES posts(id) ON DELETE SET NULL
                )
            ''')

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS terms (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    taxonomy TEXT NOT NULL,
                    name TEXT NOT NULL,
                    UNIQUE(taxonomy, name)
                )
            ''')

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS post_terms (
                    post_id INTEGER NOT NULL,
                    term_id INTEGER NOT NULL,
                    position INTEGER NOT NULL DEFAULT 0,
                    PRIMARY KEY (post_id, term_id),
                    FOREIGN KEY (post_id) REFERENCES posts(id) ON DELETE CASCADE,
                    FOREIGN KEY (term_id) REFERENCES terms(id) ON DELETE CASCADE
                )
            ''')

            cursor.execute('CREATE INDEX IF NOT EXISTS idx_posts_slug ON posts(slug)')
            conn.commit()

    def _connect(self) -> sqlite3.Connection:
        for attempt in range(self.max_retries):
            try:
                conn = sqlite3.connect(self.db_path, timeout=30.0, check_same_thread=False)
                conn.row_factory = sqlite3.Row
                conn.execute('PRAGMA foreign_keys=ON;')
                return conn
            except sqlite3.OperationalError as e:
                if "database is locked" in str(e) and attempt < self.max_retries - 1:
                    logger.warning(f"Database locked, retrying in {self.retry_delay}s (attempt {attempt + 1})")
                    time.sleep(self.retry_delay)
                    continue
                raise DatabaseError(f"Database connection failed: {e}") from e
        raise DatabaseError("Database connection failed")

    @contextmanager
    def get_connection(self):
        """Connection scoped to a with-block; sqlite errors surface as DatabaseError"""
        conn = self._connect()
        try:
            yield conn
        except sqlite3.Error as e:
            conn.rollback()
            raise DatabaseError(f"Database operation failed: {e}") from e
        finally:
            conn.close()

    # =====================
    # Writes
    # =====================
    def add_author(self, display_name: str, login: Optional[str] = None) -> int:
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                'INSERT INTO authors (login, display_name) VALUES (?, ?)',
                (login, display_name or ''),
            )
            conn.commit()
            return cursor.lastrowid

    def get_or_create_author(self, display_name: str, login: str) -> int:
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('SELECT id FROM authors WHERE login = ?', (login,))
            row = cursor.fetchone()
            if row:
                return row['id']
        return self.add_author(display_name, login=login)

    def _term_id(self, cursor: sqlite3.Cursor, taxonomy: str, name: str) -> int:
        cursor.execute('INSERT OR IGNORE INTO terms (taxonomy, name) VALUES (?, ?)', (taxonomy, name))
        cursor.execute('SELECT id FROM terms WHERE taxonomy = ? AND name = ?', (taxonomy, name))
        return cursor.fetchone()['id']

    def add_post(
        self,
        title: str,
        slug: str,
        body: str = '',
        kind: str = KIND_ARTICLE,
        excerpt: str = '',
        author_id: Optional[int] = None,
        parent_id: Optional[int] = None,
        categories: Sequence[str] = (),
        tags: Sequence[str] = (),
        published_at: Optional[datetime] = None,
        modified_at: Optional[datetime] = None,
    ) -> int:
        """Insert an article or page with its categories/tags; returns the new id"""
        if not slug or '/' in slug:
            raise DatabaseError(f"Invalid slug: {slug!r}")
        published = _to_text(published_at)
        modified = _to_text(modified_at) if modified_at else published

        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('''
                INSERT INTO posts (kind, slug, parent_id, title, body, excerpt, author_id, published_at, modified_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ''', (kind, slug, parent_id, title, body or '', excerpt or '', author_id, published, modified))
            post_id = cursor.lastrowid

            for taxonomy, names in ((TAXONOMY_CATEGORY, categories), (TAXONOMY_TAG, tags)):
                for position, name in enumerate(n for n in names if n):
                    term_id = self._term_id(cursor, taxonomy, name)
                    cursor.execute(
                        'INSERT OR IGNORE INTO post_terms (post_id, term_id, position) VALUES (?, ?, ?)',
                        (post_id, term_id, position),
                    )
            conn.commit()
            logger.info(f"Stored {kind} '{slug}' (id={post_id})")
            return post_id

    # =====================
    # Reads
    # =====================
    def _terms_for(self, cursor: sqlite3.Cursor, post_id: int, taxonomy: str) -> tuple:
        cursor.execute('''
            SELECT t.name FROM post_terms pt
            JOIN terms t ON t.id = pt.term_id
            WHERE pt.post_id = ? AND t.taxonomy = ?
            ORDER BY pt.position, t.name
        ''', (post_id, taxonomy))
        return tuple(row['name'] for row in cursor.fetchall())

    def _full_path(self, cursor: sqlite3.Cursor, row: sqlite3.Row) -> str:
        parts = [row['slug']]
        parent_id = row['parent_id']
        seen = {row['id']}
        while parent_id and parent_id not in seen:
            seen.add(parent_id)
            cursor.execute('SELECT id, slug, parent_id FROM posts WHERE id = ?', (parent_id,))
            parent = cursor.fetchone()
            if parent is None:
                break
            parts.append(parent['slug'])
            parent_id = parent['parent_id']
        return '/'.join(reversed(parts))

    def _row_to_record(self, cursor: sqlite3.Cursor, row: sqlite3.Row) -> ContentRecord:
        author_name = ''
        if row['author_id'] is not None:
            cursor.execute('SELECT display_name FROM authors WHERE id = ?', (row['author_id'],))
            author = cursor.fetchone()
            author_name = author['display_name'] if author else ''

        return ContentRecord(
            id=row['id'],
            kind=row['kind'],
            title=row['title'],
            slug=row['slug'],
            body=row['body'],
            excerpt=row['excerpt'],
            published_at=_parse_timestamp(row['published_at']),
            modified_at=_parse_timestamp(row['modified_at']),
            author_id=row['author_id'],
            author_name=author_name,
            categories=self._terms_for(cursor, row['id'], TAXONOMY_CATEGORY),
            tags=self._terms_for(cursor, row['id'], TAXONOMY_TAG),
            canonical_url=self.permalink(self._full_path(cursor, row)),
        )

    def permalink(self, path: str) -> str:
        return f"{self.site_url}/{normalize_path(path)}/"

    def get_post_by_path(
        self,
        path: str,
        kinds: Iterable[str] = (KIND_ARTICLE, KIND_PAGE),
    ) -> Optional[ContentRecord]:
        """Resolve '/parent/child' style paths to a record of one of ``kinds``"""
        wanted = normalize_path(path)
        kinds = list(kinds)
        if not wanted or not kinds:
            return None
        leaf = wanted.rsplit('/', 1)[-1]

        with self.get_connection() as conn:
            cursor = conn.cursor()
            placeholders = ','.join('?' for _ in kinds)
            cursor.execute(f'''
                SELECT * FROM posts
                WHERE slug = ? AND kind IN ({placeholders})
                ORDER BY id
            ''', [leaf, *kinds])
            for row in cursor.fetchall():
                if self._full_path(cursor, row) == wanted:
                    return self._row_to_record(cursor, row)
        return None

    def list_posts(self, kind: Optional[str] = None, limit: int = 100) -> List[ContentRecord]:
        limit = max(1, min(int(limit), 1000))
        with self.get_connection() as conn:
            cursor = conn.cursor()
            if kind:
                cursor.execute(
                    'SELECT * FROM posts WHERE kind = ? ORDER BY published_at DESC, id DESC LIMIT ?',
                    (kind, limit),
                )
            else:
                cursor.execute('SELECT * FROM posts ORDER BY published_at DESC, id DESC LIMIT ?', (limit,))
            rows = cursor.fetchall()
            return [self._row_to_record(cursor, row) for row in rows]

    def get_stats(self) -> Dict[str, int]:
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('SELECT kind, COUNT(*) AS count FROM posts GROUP BY kind')
            return {row['kind']: row['count'] for row in cursor.fetchall()}
