"""
Application factory with API-key and request timing middleware.
"""

from __future__ import annotations

import hmac
import logging
import os
import time
from typing import Any, Mapping, Optional

from flask import Flask, Response, g, jsonify, request

API_KEY_HEADER = "X-API-KEY"

logger = logging.getLogger(__name__)


def configure_logging(level: int | str = logging.INFO) -> None:
    """Attach a single stream handler to the package logger, once."""
    pkg_logger = logging.getLogger(__name__)
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO
    pkg_logger.setLevel(level)
    if not pkg_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        pkg_logger.addHandler(handler)


def create_app(test_config: Optional[Mapping[str, Any]] = None) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_mapping(
        JSON_SORT_KEYS=False,
        API_KEY=os.environ.get("SELFINVEST_API_KEY", ""),
        LOG_LEVEL=os.environ.get("SELFINVEST_LOG_LEVEL", "INFO"),
    )
    if test_config is not None:
        app.config.from_mapping(test_config)
    app.json.sort_keys = False

    configure_logging(app.config["LOG_LEVEL"])

    # ── API-key check ───────────────────────────────────────────────────────

    @app.before_request
    def _check_api_key() -> Optional[Response]:
        configured = (app.config.get("API_KEY") or "").strip()
        if not configured:
            return None
        supplied = request.headers.get(API_KEY_HEADER, "")
        if hmac.compare_digest(configured.encode(), supplied.encode()):
            return None
        logger.warning(
            "Rejected request due to missing/invalid API key from %s",
            request.remote_addr,
        )
        return Response(
            "Missing or invalid API key",
            status=401,
            content_type="text/plain; charset=utf-8",
        )

    # ── Performance middleware ──────────────────────────────────────────────

    @app.before_request
    def _start_timer() -> None:
        g.start_time = time.perf_counter()

    @app.after_request
    def _stop_timer(response: Response) -> Response:
        start = g.get("start_time")
        if start is None:
            return response
        elapsed = (time.perf_counter() - start) * 1_000
        response.headers["X-Response-Time-Ms"] = f"{elapsed:.4f}"
        logger.debug("%s %s -> %s in %.4f ms",
                     request.method, request.path, response.status_code, elapsed)
        return response

    # ── Error handlers ──────────────────────────────────────────────────────

    @app.errorhandler(400)
    def bad_request(exc: Any) -> tuple[Response, int]:
        return jsonify({"error": "Bad Request", "message": str(exc)}), 400

    @app.errorhandler(404)
    def not_found(exc: Any) -> tuple[Response, int]:
        return jsonify({"error": "Not Found", "message": str(exc)}), 404

    @app.errorhandler(405)
    def method_not_allowed(exc: Any) -> tuple[Response, int]:
        return jsonify({"error": "Method Not Allowed", "message": str(exc)}), 405

    @app.errorhandler(422)
    def unprocessable(exc: Any) -> tuple[Response, int]:
        return jsonify({"error": "Unprocessable Entity", "message": str(exc)}), 422

    @app.errorhandler(500)
    def internal_error(exc: Any) -> tuple[Response, int]:
        return jsonify({"error": "Internal Server Error", "message": str(exc)}), 500

    # ── Register blueprints ─────────────────────────────────────────────────

    from selfinvest.routes.transactions import transactions_bp
    from selfinvest.routes.performance import performance_bp

    app.register_blueprint(transactions_bp)
    app.register_blueprint(performance_bp)

    return app
