"""
Validators for model outputs.

Provides graph integrity checks for mutation results and coverage checks for
clustering results.
"""

from .graph_integrity import (
    coerce_graph,
    find_dangling_edges,
    instruction_requests_removal,
    validate_mutation_result,
)
from .theme_coverage import (
    theme_count_guidance,
    validate_cluster_result,
)

__all__ = [
    "coerce_graph",
    "find_dangling_edges",
    "instruction_requests_removal",
    "validate_mutation_result",
    "theme_count_guidance",
    "validate_cluster_result",
]
