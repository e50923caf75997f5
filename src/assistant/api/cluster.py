"""
Comment clustering endpoint.

POST /cluster with `{comments, flowId}` returns `{themes: [{name, items}]}`.
Identical comment sets (in any order) for the same flow are served from the
response cache within its TTL; X-Cache reports HIT or MISS.
"""

from flask import Blueprint, jsonify

from ...shared.logger import get_logger
from ..errors import AssistantError, InputValidationError
from ..handlers.clustering import parse_cluster_request
from .common import get_services, json_body

logger = get_logger("assistant", __name__)

cluster_bp = Blueprint("cluster", __name__)


@cluster_bp.route("/cluster", methods=["POST"])
def cluster_comments():
    """Group comments into thematic categories.

    Request body (JSON):
        {
            "comments": [{"id": "c1", "text": "...", "commentType": "BIAS", "nodeLabels": ["Recruitment"]}],
            "flowId": "flow-123"
        }

    Responses:
        200: {"themes": [{"name": "SAMPLE SELECTION", "items": [...]}]}
        400: {"error": "Valid comments array is required"}
        400: {"error": "Invalid comments", "details": "..."}
        500: {"error": "Failed to process concerns", "details": "..."}
    """
    try:
        cluster_request = parse_cluster_request(json_body())
    except InputValidationError as exc:
        return jsonify(exc.to_dict()), exc.http_status

    try:
        outcome = get_services().clustering.handle(cluster_request)
    except AssistantError as exc:
        logger.error(
            "Error processing concerns",
            extra={"payload": {
                "flow_id": cluster_request.partition_key,
                "code": exc.code,
                "error": exc.message,
                "details": exc.details,
            }},
            exc_info=True,
        )
        details = f"{exc.message}: {exc.details}" if exc.details else exc.message
        return jsonify({"error": "Failed to process concerns", "details": details}), 500

    response = jsonify(outcome.payload)
    response.headers["X-Cache"] = "HIT" if outcome.cache_hit else "MISS"
    return response, 200
