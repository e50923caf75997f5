"""
Graph Integrity Validator for mutation results.

Ensures a model-produced replacement graph is structurally usable:
- The output must parse as a Graph (unique node and edge ids).
- Every edge must reference nodes that exist in the output graph.

Node removal is handled as a warning rather than a failure: when input node ids
disappear and the instruction does not read like a removal request, the
result is accepted but flagged so the caller can review it.
"""

import copy
import re
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ...shared.logger import get_logger
from ..errors import InvariantViolationError, format_validation_error
from ..schemas.graph import Graph

logger = get_logger("assistant", __name__)

# Verbs that plausibly ask for nodes to go away (including merges/replacements).
_REMOVAL_RE = re.compile(
    r"\b(remov\w*|delet\w*|drop\w*|eliminat\w*|get rid of|take out|"
    r"merg\w*|combin\w*|consolidat\w*|collaps\w*|replac\w*|prun\w*|"
    r"simplif\w*|fewer|only keep|keep only|eras\w*|discard\w*)\b",
    re.IGNORECASE,
)

_WRAPPER_KEYS = ("flowData", "graph", "flowchart", "flow", "data")
_BACKFILL_FIELDS = ("position", "type", "data")


def instruction_requests_removal(instruction: str) -> bool:
    """True when the instruction plausibly asks for nodes to be removed."""
    return bool(instruction and _REMOVAL_RE.search(instruction))


def _backfill_nodes(candidate: Dict[str, Any], source: Graph) -> Dict[str, Any]:
    """Copy position/type/data from the source node with the same id when omitted."""
    nodes = candidate.get("nodes")
    if not isinstance(nodes, list):
        return candidate
    source_nodes = {node["id"]: node for node in source.to_wire()["nodes"]}
    filled = []
    for node in nodes:
        original = source_nodes.get(str(node.get("id"))) if isinstance(node, dict) else None
        if original is not None:
            node = dict(node)
            for field in _BACKFILL_FIELDS:
                if node.get(field) is None and field in original:
                    node[field] = copy.deepcopy(original[field])
        filled.append(node)
    return {**candidate, "nodes": filled}


def coerce_graph(raw: Dict[str, Any], source: Optional[Graph] = None) -> Graph:
    """Turn the extracted model object into a Graph.

    Accepts a bare `{nodes, edges}` object or one wrapped under a single
    common key (`flowData`, `graph`, ...). When `source` is given, nodes that
    keep an existing id inherit any position, type or data the model left out;
    new nodes must carry their own position.

    Raises:
        InvariantViolationError: if no graph can be found or it fails schema checks.
    """
    candidate = raw
    if "nodes" not in candidate:
        for key in _WRAPPER_KEYS:
            inner = raw.get(key)
            if isinstance(inner, dict) and "nodes" in inner:
                candidate = inner
                break
        else:
            raise InvariantViolationError(
                "Model output is not a flowchart graph",
                {"schema": ["missing 'nodes' array"]},
            )

    if source is not None:
        candidate = _backfill_nodes(candidate, source)

    try:
        return Graph.model_validate(candidate)
    except ValidationError as exc:
        raise InvariantViolationError(
            "Model output failed graph schema validation",
            {"schema": [format_validation_error(exc)]},
        ) from exc


def find_dangling_edges(graph: Graph) -> List[str]:
    """Describe each edge whose source or target is not a node of the graph."""
    node_ids = set(graph.node_ids())
    dangling = []
    for edge in graph.edges:
        if edge.source not in node_ids:
            dangling.append(f"{edge.id} (source {edge.source})")
        if edge.target not in node_ids:
            dangling.append(f"{edge.id} (target {edge.target})")
    return dangling


def validate_mutation_result(source: Graph, result: Graph, instruction: str) -> List[str]:
    """Validate a mutated graph against the graph it was derived from.

    Args:
        source: Graph sent by the caller.
        result: Graph produced by the model.
        instruction: The caller's free-text instruction.

    Returns:
        List of advisory warnings (empty when nothing looks suspicious).

    Raises:
        InvariantViolationError: if any edge references a nonexistent node.
    """
    dangling = find_dangling_edges(result)
    if dangling:
        raise InvariantViolationError(
            "Mutated graph has edges referencing missing nodes",
            {"dangling_edges": dangling},
        )

    warnings: List[str] = []
    removed = sorted(set(source.node_ids()) - set(result.node_ids()))
    if removed:
        if instruction_requests_removal(instruction):
            logger.info(
                "Mutation removed nodes as instructed",
                extra={"payload": {"removed_node_ids": removed}},
            )
        else:
            message = f"Nodes removed without an explicit removal instruction: {', '.join(removed)}"
            logger.warning(message, extra={"payload": {"removed_node_ids": removed}})
            warnings.append(message)

    return warnings
