"""
Flowchart mutation endpoint.

POST /mutate with `{flowData, userInstruction}` returns the replacement graph
as the response body. Advisory warnings (e.g. nodes removed without being asked)
travel in the X-Mutation-Warnings header as a JSON list.
"""

import json

from flask import Blueprint, jsonify

from ...shared.logger import get_logger
from ..errors import AssistantError, InputValidationError
from ..handlers.mutation import parse_mutation_request
from .common import get_services, json_body

logger = get_logger("assistant", __name__)

mutate_bp = Blueprint("mutate", __name__)


@mutate_bp.route("/mutate", methods=["POST"])
def mutate_flow():
    """Transform a flowchart according to a free-text instruction.

    Request body (JSON):
        {
            "flowData": {"nodes": [...], "edges": [...]},
            "userInstruction": "change the node label to 'Updated Test Node'"
        }

    Responses:
        200: the mutated graph
        400: {"error": "Flow data and user instruction are required"}
        400: {"error": "Invalid flow data", "details": "..."}
        500: {"error": "Failed to transform flowchart", "details": "..."}
    """
    try:
        mutation_request = parse_mutation_request(json_body())
    except InputValidationError as exc:
        return jsonify(exc.to_dict()), exc.http_status

    try:
        result = get_services().mutation.handle(mutation_request)
    except AssistantError as exc:
        logger.error(
            "Error transforming flowchart",
            extra={"payload": {"code": exc.code, "error": exc.message, "details": exc.details}},
            exc_info=True,
        )
        details = f"{exc.message}: {exc.details}" if exc.details else exc.message
        return jsonify({"error": "Failed to transform flowchart", "details": details}), 500

    response = jsonify(result.graph.to_wire())
    if result.warnings:
        response.headers["X-Mutation-Warnings"] = json.dumps(result.warnings)
    if result.model:
        response.headers["X-Model"] = result.model
    return response, 200
