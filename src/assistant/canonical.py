"""
Deterministic serialization of request payloads.

The canonical form of a cluster request is independent of item order and of
any fields outside `{id, text, tag, labels}`, so semantically identical
requests share a cache key. Graph canonicalization is only used to tag log
lines; mutation results are never cached.
"""

import json
from typing import Any, Iterable, Optional

from ..shared.utils import sha256_hex
from .schemas.clusters import ClusterItem
from .schemas.graph import Graph


def _dumps(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def sorted_items(items: Iterable[ClusterItem]) -> list:
    """Items ordered by id ascending."""
    return sorted(items, key=lambda item: item.id)


def canonicalize_cluster_request(items: Iterable[ClusterItem], partition_key: Optional[str] = None) -> str:
    """Stable string for a set of cluster items plus the caller's partition key."""
    return _dumps({
        "partition": partition_key,
        "items": [item.projection() for item in sorted_items(items)],
    })


def canonicalize_graph(graph: Graph) -> str:
    """Stable string for a graph: nodes and edges sorted by id, keys sorted."""
    wire = graph.to_wire()
    return _dumps({
        "nodes": sorted(wire.get("nodes", []), key=lambda n: str(n.get("id"))),
        "edges": sorted(wire.get("edges", []), key=lambda e: str(e.get("id"))),
    })


def cache_key(canonical: str) -> str:
    """Response Cache key for a canonical string."""
    return sha256_hex(canonical)


def graph_digest(graph: Graph, length: int = 12) -> str:
    """Short fingerprint of a graph for log correlation."""
    return sha256_hex(canonicalize_graph(graph))[:length]
