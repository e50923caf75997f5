"""Assemble chat messages for the assistant's model calls."""

import json
from typing import Dict, List

from ...shared.model_registry import ModelProfile
from ..canonical import sorted_items
from ..schemas.clusters import ClusterItem
from ..schemas.graph import Graph
from ..validators.theme_coverage import theme_count_guidance
from .defaults import (
    CLUSTER_DATA_FORMAT,
    CLUSTER_OUTPUT_FORMAT,
    CLUSTER_REQUIREMENTS,
    CLUSTER_SYSTEM_PROMPT,
    FEW_ITEMS_GUIDANCE,
    FLOWCHART_STRUCTURE_NOTES,
    MUTATION_RULES,
    MUTATION_SYSTEM_PROMPT_LENIENT,
    MUTATION_SYSTEM_PROMPT_STRICT,
)


def describe_theme_count_guidance(item_count: int) -> str:
    """Prompt sentence stating how many themes to aim for."""
    guidance = theme_count_guidance(item_count)
    if guidance is None:
        return FEW_ITEMS_GUIDANCE
    low, high = guidance
    return (
        f"There are {item_count} concerns; aim for {low}-{high} distinct themes. "
        "The goal is to find a good balance, avoiding too few themes (overly broad) "
        "or too many (overly granular)."
    )


def build_mutation_messages(graph: Graph, instruction: str, profile: ModelProfile) -> List[Dict[str, str]]:
    """Messages asking the model for a full replacement graph."""
    system_prompt = MUTATION_SYSTEM_PROMPT_STRICT if profile.strict else MUTATION_SYSTEM_PROMPT_LENIENT
    user_content = "\n\n".join([
        "You are an expert flowchart designer assistant. "
        "Your task is to modify a flowchart based on user instructions.",
        f"CURRENT FLOWCHART DATA:\n{json.dumps(graph.to_wire(), indent=2, ensure_ascii=False)}",
        f"USER'S INSTRUCTION:\n{instruction}",
        FLOWCHART_STRUCTURE_NOTES,
        MUTATION_RULES,
    ])
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_content},
    ]


def build_cluster_messages(items: List[ClusterItem]) -> List[Dict[str, str]]:
    """Messages asking the model to partition items into themes (items sorted by id)."""
    ordered = [item.projection() for item in sorted_items(items)]
    user_content = "\n\n".join([
        "You are a research analysis assistant helping to categorize concerns about research studies.",
        "TASK:\nAnalyze the following list of concerns from a research study and group them into thematic categories.",
        CLUSTER_REQUIREMENTS.format(count_guidance=describe_theme_count_guidance(len(ordered))),
        CLUSTER_DATA_FORMAT,
        f"INPUT CONCERNS:\n{json.dumps(ordered, indent=2, ensure_ascii=False)}",
        CLUSTER_OUTPUT_FORMAT,
    ])
    return [
        {"role": "system", "content": CLUSTER_SYSTEM_PROMPT},
        {"role": "user", "content": user_content},
    ]
