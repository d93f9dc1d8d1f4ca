#!/usr/bin/env python3
"""
Flask web application for the article site.
Serves HTML article/page views plus a Markdown alternate for LLM crawlers,
`.md` URLs and `?format=md` requests.
"""

from flask import Flask, jsonify, request, render_template_string, abort
from werkzeug.middleware.proxy_fix import ProxyFix
import logging
import os
import secrets
from typing import Optional

from dotenv import load_dotenv

from database import ContentDatabase, DatabaseError
from article_markdown.config import MarkdownSettings, load_settings
from article_markdown.content.filters import register_default_content_filters, render_content_html
from article_markdown.content.records import MARKDOWN_KINDS
from article_markdown.hooks import HookRegistry
from article_markdown.interceptor import alternate_link_header, install_markdown_interceptor
from article_markdown.routing.classifier import MARKDOWN_SUFFIX

# Load environment variables from .env file
load_dotenv()

# Configure logging
logging.basicConfig(level=os.environ.get('LOG_LEVEL', 'INFO').upper())
logger = logging.getLogger(__name__)

DB_PATH = os.environ.get('DB_PATH', 'content.db')

PAGE_TEMPLATE = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{{ record.title }}</title>
<link rel="canonical" href="{{ record.canonical_url }}">
<link rel="alternate" type="text/markdown" href="{{ markdown_url }}">
</head>
<body>
<article>
<h1>{{ record.title }}</h1>
{% if record.author_name %}<p class="byline">By {{ record.author_name }}</p>{% endif %}
{{ body_html|safe }}
</article>
</body>
</html>
"""

INDEX_TEMPLATE = """<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><title>Articles</title></head>
<body>
<ul>
{% for post in posts %}<li><a href="{{ post.path }}">{{ post.title }}</a> (<a href="{{ post.markdown_url }}">md</a>)</li>
{% endfor %}</ul>
</body>
</html>
"""


def _post_path(db: ContentDatabase, canonical_url: str) -> str:
    path = canonical_url[len(db.site_url):] if canonical_url.startswith(db.site_url) else canonical_url
    return '/' + path.strip('/')


def add_security_headers(response):
    """Add security headers"""
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['X-Frame-Options'] = 'DENY'
    response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
    response.headers['Permissions-Policy'] = 'geolocation=(), microphone=(), camera=()'
    return response


def create_app(
    db: Optional[ContentDatabase] = None,
    settings: Optional[MarkdownSettings] = None,
    hooks: Optional[HookRegistry] = None,
) -> Flask:
    settings = settings or load_settings()
    db = db or ContentDatabase(db_path=DB_PATH, site_url=settings.site_url)
    hooks = hooks or register_default_content_filters(HookRegistry())

    app = Flask(__name__)
    # Configure app to trust proxy headers (nginx forwards X-Forwarded-Proto, etc.)
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)
    app.config['SECRET_KEY'] = os.environ.get('FLASK_SECRET_KEY', secrets.token_hex(32))

    # Must be the first before_request stage so it can short-circuit everything else
    install_markdown_interceptor(
        app,
        lookup=db.get_post_by_path,
        render_body_html=lambda record: render_content_html(record, hooks),
        hooks=hooks,
        settings=settings,
    )

    from cors_config import configure_cors
    configure_cors(app)
    app.after_request(add_security_headers)

    @app.route('/api/health')
    def health():
        try:
            counts = db.get_stats()
        except DatabaseError as e:
            logger.error(f"Health check failed: {e}")
            return jsonify({'status': 'error', 'error': 'database unavailable'}), 503
        return jsonify({
            'status': 'ok',
            'markdown_alternate': settings.enabled,
            'posts': counts,
        })

    @app.route('/api/posts')
    def list_posts():
        kind = request.args.get('kind') or None
        if kind and kind not in MARKDOWN_KINDS:
            return jsonify({'success': False, 'error': f'Unknown kind: {kind}'}), 400
        try:
            limit = int(request.args.get('limit', 50))
        except ValueError:
            return jsonify({'success': False, 'error': 'limit must be an integer'}), 400

        posts = []
        for record in db.list_posts(kind=kind, limit=limit):
            path = _post_path(db, record.canonical_url)
            posts.append({
                'id': record.id,
                'kind': record.kind,
                'title': record.title,
                'slug': record.slug,
                'url': record.canonical_url,
                'markdown_url': path + MARKDOWN_SUFFIX,
                'published_at': record.published_at.isoformat(),
                'modified_at': record.modified_at.isoformat(),
            })
        return jsonify({'success': True, 'posts': posts})

    @app.route('/')
    def index():
        posts = [
            {
                'title': record.title,
                'path': _post_path(db, record.canonical_url),
                'markdown_url': _post_path(db, record.canonical_url) + MARKDOWN_SUFFIX,
            }
            for record in db.list_posts(limit=50)
        ]
        return render_template_string(INDEX_TEMPLATE, posts=posts)

    @app.route('/<path:path>')
    def view_post(path):
        """HTML rendering of an article or page"""
        record = db.get_post_by_path(path, MARKDOWN_KINDS)
        if record is None:
            abort(404)
        markdown_url = _post_path(db, record.canonical_url) + MARKDOWN_SUFFIX
        html = render_template_string(
            PAGE_TEMPLATE,
            record=record,
            body_html=render_content_html(record, hooks),
            markdown_url=markdown_url,
        )
        response = app.make_response(html)
        if settings.advertise_alternate:
            response.headers['Link'] = alternate_link_header(_post_path(db, record.canonical_url))
        return response

    @app.errorhandler(404)
    def not_found(error):
        """Custom 404 handler"""
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        """Custom 500 handler"""
        logger.error(f"Internal server error: {error}")
        return jsonify({'error': 'Internal server error'}), 500

    return app


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5002))
    debug = os.environ.get('FLASK_ENV') == 'development'

    app = create_app()
    logger.info(f"Starting article site on port {port}")
    logger.info(f"Debug mode: {debug}")
    app.run(
        host='0.0.0.0',
        port=port,
        debug=debug,
        threaded=True
    )
