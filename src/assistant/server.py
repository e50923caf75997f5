"""
HTTP API for the Flowlab assistant.

Exposes flowchart mutation and comment clustering backed by an
OpenAI-compatible chat-completion provider. The app factory owns the
response cache lifecycle: the sweep thread is started here and stopped on
interpreter exit (or explicitly via `app.extensions["assistant"].stop()`).
"""

import atexit
from typing import Optional

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from ..shared.config import CACHE_SWEEPER_ENABLED, MAX_CONTENT_LENGTH_MB, SERVER_HOST, SERVER_PORT
from ..shared.logger import get_logger
from .api import cluster_bp, mutate_bp
from .errors import AssistantError
from .pipeline import ModelInvocationPipeline
from .response_cache import ResponseCache
from .services import build_services

logger = get_logger("assistant", __name__)


def create_app(
    cache: Optional[ResponseCache] = None,
    pipeline: Optional[ModelInvocationPipeline] = None,
    start_sweeper: Optional[bool] = None,
) -> Flask:
    """Build the Flask app and its services.

    Args:
        cache: Response cache to use (a fresh one by default).
        pipeline: Model invocation pipeline (real provider by default).
        start_sweeper: Start the cache sweep thread; defaults to CACHE_SWEEPER_ENABLED.
    """
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = MAX_CONTENT_LENGTH_MB * 1024 * 1024
    app.json.sort_keys = False

    services = build_services(cache=cache, pipeline=pipeline)
    app.extensions["assistant"] = services

    app.register_blueprint(mutate_bp)
    app.register_blueprint(cluster_bp)

    @app.errorhandler(RequestEntityTooLarge)
    def handle_payload_too_large(e):
        return jsonify({
            "error": f"Request body exceeds maximum allowed size ({MAX_CONTENT_LENGTH_MB}MB)",
            "code": "PAYLOAD_TOO_LARGE",
        }), 413

    @app.errorhandler(AssistantError)
    def handle_assistant_error(e: AssistantError):
        return jsonify(e.to_dict(include_code=True)), e.http_status

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"error": e.description or e.name, "code": e.name.upper().replace(" ", "_")}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e: Exception):
        logger.error("Unhandled error", extra={"payload": {"error": str(e)}}, exc_info=True)
        return jsonify({"error": "Internal server error", "code": "INTERNAL_ERROR"}), 500

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({
            "status": "ok",
            "cache": {
                "entries": len(services.cache),
                "sweeper_running": services.cache.is_running(),
            },
        }), 200

    if CACHE_SWEEPER_ENABLED if start_sweeper is None else start_sweeper:
        services.start()
        atexit.register(services.stop)

    return app


if __name__ == "__main__":
    create_app().run(host=SERVER_HOST, port=SERVER_PORT)
