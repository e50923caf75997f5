"""
Graph Mutation Handler.

Turns a flowchart plus a free-text instruction into a replacement flowchart:
strict (JSON-mode) model first, then one lenient fallback on a cheaper plain
completion model if the strict stage fails for any reason (provider error,
unparseable text, or a graph that breaks structural invariants). Mutation is
interactive, so it degrades before giving up; results are never cached.
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError

from ...shared.logger import get_logger
from ...shared.model_registry import ModelProfile, get_model_profile
from ..canonical import graph_digest
from ..errors import InputValidationError, UpstreamError, format_validation_error
from ..extractor import extract_json
from ..pipeline import ModelInvocationPipeline
from ..prompts import build_mutation_messages
from ..result import StageResult
from ..schemas.graph import MutationRequest, MutationResult
from ..validators.graph_integrity import coerce_graph, validate_mutation_result

logger = get_logger("assistant", __name__)


MISSING_FIELDS_ERROR = "Flow data and user instruction are required"


def parse_mutation_request(body: Dict[str, Any]) -> MutationRequest:
    """Build a MutationRequest from a `{flowData, userInstruction}` body.

    Raises:
        InputValidationError: if either field is absent, the instruction is not
            a non-blank string, or the graph is malformed.
    """
    flow_data = body.get("flowData")
    instruction = body.get("userInstruction")
    if flow_data is None or not isinstance(instruction, str) or not instruction.strip():
        raise InputValidationError(MISSING_FIELDS_ERROR)

    try:
        return MutationRequest.model_validate({"flowData": flow_data, "userInstruction": instruction})
    except ValidationError as exc:
        raise InputValidationError("Invalid flow data", details=format_validation_error(exc)) from exc


class GraphMutationHandler:
    """Orchestrates strict -> lenient mutation stages for one request."""

    def __init__(
        self,
        pipeline: Optional[ModelInvocationPipeline] = None,
        strict_profile: Optional[ModelProfile] = None,
        lenient_profile: Optional[ModelProfile] = None,
    ) -> None:
        self.pipeline = pipeline if pipeline is not None else ModelInvocationPipeline()
        self.strict_profile = strict_profile or get_model_profile("strict")
        self.lenient_profile = lenient_profile or get_model_profile("lenient")

    def _run(self, request: MutationRequest, profile: ModelProfile) -> StageResult[MutationResult]:
        def interpret(raw_text: str) -> MutationResult:
            parsed = extract_json(raw_text)
            graph = coerce_graph(parsed, source=request.graph)
            warnings = validate_mutation_result(request.graph, graph, request.instruction)
            return MutationResult(graph=graph, warnings=warnings, stage=profile.key)

        messages = build_mutation_messages(request.graph, request.instruction, profile)
        return self.pipeline.run_stage(messages, profile, interpret)

    def handle(self, request: MutationRequest) -> MutationResult:
        """Mutate request.graph according to request.instruction.

        Raises:
            AssistantError: the lenient stage's error when both stages fail.
        """
        digest = graph_digest(request.graph)
        logger.info(
            "Mutation requested",
            extra={"payload": {
                "graph_digest": digest,
                "node_count": len(request.graph.nodes),
                "edge_count": len(request.graph.edges),
            }},
        )

        strict = self._run(request, self.strict_profile)
        if strict.ok:
            result = strict.value
            result.model = strict.model
            return result

        logger.warning(
            "Strict mutation stage failed, falling back to lenient model",
            extra={"payload": {
                "graph_digest": digest,
                "strict_model": self.strict_profile.model_id,
                "lenient_model": self.lenient_profile.model_id,
                "reason": strict.error.code,
            }},
        )

        lenient = self._run(request, self.lenient_profile)
        if lenient.ok:
            result = lenient.value
            result.model = lenient.model
            return result

        logger.error(
            "Mutation failed after strict and lenient attempts",
            extra={"payload": {
                "graph_digest": digest,
                "strict_error": f"{strict.error.code}: {strict.error.message}",
                "lenient_error": f"{lenient.error.code}: {lenient.error.message}",
            }},
        )
        error = lenient.error
        if error is None:  # pragma: no cover - StageResult invariant
            raise UpstreamError("Mutation failed without an error")
        raise error
