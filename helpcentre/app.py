from __future__ import annotations

import logging

from flask import Flask, current_app, jsonify
from werkzeug.exceptions import HTTPException

from .api import admin_api
from .errors import ContentError
from .public import public_api
from .responses import json_error
from .settings import Settings, configure_logging, load_settings
from .store import ContentStore

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> Flask:
    """Build the Flask app serving one content root."""
    settings = settings or load_settings()
    configure_logging(settings.debug)

    app = Flask(__name__)
    # Map-shaped responses follow the stored productIds and topicIds order.
    app.json.sort_keys = False
    app.config["ADMIN_TOKEN"] = settings.admin_token
    app.config["CONTENT_ROOT"] = settings.content_root
    app.extensions["helpcentre"] = ContentStore(
        settings.content_root,
        default_group=settings.default_group,
        cache_entries=settings.cache_entries,
    )

    app.register_blueprint(admin_api, url_prefix="/api")
    app.register_blueprint(public_api, url_prefix="/api/public/data")

    @app.errorhandler(ContentError)
    def _content_error(exc: ContentError):
        if exc.status >= 500:
            logger.error("%s", exc.message)
        return json_error(exc.message, exc.status)

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return json_error(exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def _unexpected_error(exc: Exception):
        logger.exception("Unhandled error while serving request")
        return json_error("Internal server error", 500)

    @app.route("/health", methods=["GET"])
    def healthcheck():
        root = current_app.config["CONTENT_ROOT"]
        return jsonify({
            "status": "ok",
            "content_root": str(root),
            "exists": root.is_dir(),
        })

    logger.debug("Serving content from %s", settings.content_root)
    return app


if __name__ == "__main__":
    _settings = load_settings()
    create_app(_settings).run(debug=_settings.debug)
