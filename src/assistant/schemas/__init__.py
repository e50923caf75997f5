"""Request/response contracts for the assistant endpoints."""

from .graph import Position, Node, Edge, Graph, MutationRequest, MutationResult
from .clusters import ClusterItem, ClusterRequest, Theme, ClusterResult

__all__ = [
    "Position",
    "Node",
    "Edge",
    "Graph",
    "MutationRequest",
    "MutationResult",
    "ClusterItem",
    "ClusterRequest",
    "Theme",
    "ClusterResult",
]
