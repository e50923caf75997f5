"""
Clustering Handler.

Groups annotations into named themes with a single strict-mode model call.
Validated results are cached by the canonical form of the request; failures
surface directly with no fallback (the caller can retry).
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ...shared.logger import get_logger
from ...shared.model_registry import ModelProfile, get_model_profile
from ..canonical import cache_key, canonicalize_cluster_request
from ..errors import InputValidationError, format_validation_error
from ..extractor import extract_json
from ..pipeline import ModelInvocationPipeline
from ..prompts import build_cluster_messages
from ..response_cache import ResponseCache
from ..schemas.clusters import ClusterRequest, ClusterResult
from ..validators.theme_coverage import validate_cluster_result

logger = get_logger("assistant", __name__)


MISSING_COMMENTS_ERROR = "Valid comments array is required"


def parse_cluster_request(body: Dict[str, Any]) -> ClusterRequest:
    """Build a ClusterRequest from a `{comments, flowId}` body.

    Raises:
        InputValidationError: if comments is missing, empty, not a list, or
            holds malformed items / duplicate ids.
    """
    comments = body.get("comments")
    if not isinstance(comments, list) or len(comments) == 0:
        raise InputValidationError(MISSING_COMMENTS_ERROR)

    try:
        return ClusterRequest.from_wire(comments, body.get("flowId"))
    except ValidationError as exc:
        raise InputValidationError("Invalid comments", details=format_validation_error(exc)) from exc


@dataclass
class ClusterOutcome:
    payload: Dict[str, Any]
    cache_hit: bool
    key: str


class ClusteringHandler:
    """Cache lookup, then one strict model stage, then coverage validation."""

    def __init__(
        self,
        cache: ResponseCache,
        pipeline: Optional[ModelInvocationPipeline] = None,
        profile: Optional[ModelProfile] = None,
    ) -> None:
        self.cache = cache
        self.pipeline = pipeline if pipeline is not None else ModelInvocationPipeline()
        self.profile = profile or get_model_profile("cluster")

    def handle(self, request: ClusterRequest) -> ClusterOutcome:
        """Return themes for request.items, from cache when possible.

        Raises:
            AssistantError: UpstreamError, ParseError or InvariantViolationError
                from the model stage. Nothing is cached in that case.
        """
        key = cache_key(canonicalize_cluster_request(request.items, request.partition_key))
        log_ctx = {"flow_id": request.partition_key, "key": key[:12], "item_count": len(request.items)}

        entry = self.cache.get(key)
        if entry is not None:
            logger.info("Using cached clustering response", extra={"payload": log_ctx})
            return ClusterOutcome(payload=entry.payload, cache_hit=True, key=key)

        logger.info(
            "Calling model for clustering",
            extra={"payload": {**log_ctx, "model": self.profile.model_id}},
        )

        def interpret(raw_text: str) -> ClusterResult:
            return validate_cluster_result(request.items, extract_json(raw_text))

        stage = self.pipeline.run_stage(build_cluster_messages(request.items), self.profile, interpret)
        result = stage.unwrap()

        payload = result.to_wire()
        self.cache.put(key, payload)
        logger.info(
            "Clustering response cached",
            extra={"payload": {**log_ctx, "theme_count": len(result.themes), "model": stage.model}},
        )
        return ClusterOutcome(payload=payload, cache_hit=False, key=key)
