"""Use-case handlers: graph mutation and annotation clustering."""

from .mutation import GraphMutationHandler, parse_mutation_request
from .clustering import ClusteringHandler, ClusterOutcome, parse_cluster_request

__all__ = [
    "GraphMutationHandler",
    "parse_mutation_request",
    "ClusteringHandler",
    "ClusterOutcome",
    "parse_cluster_request",
]
