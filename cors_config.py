# CORS configuration
import logging
import os

from flask import request
from flask_cors import CORS

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5002",
    "http://127.0.0.1:3000",
]


def cors_origins():
    configured = [o.strip() for o in os.environ.get('CORS_ORIGINS', '').split(',') if o.strip()]
    return configured or list(DEFAULT_CORS_ORIGINS)


def configure_cors(app):
    # Only the JSON API is cross-origin; page and Markdown responses keep their own Vary header
    CORS(app, resources={
        r"/api/*": {
            "origins": cors_origins(),
            "methods": ["GET", "HEAD", "OPTIONS"],
            "allow_headers": ["Content-Type", "X-Requested-With"],
        }
    })

    @app.after_request
    def log_cors(response):
        if request.headers.get('Origin'):
            logger.debug(f"CORS - Origin: {request.headers.get('Origin')} {request.method} -> {response.status_code}")
        return response

    return app
