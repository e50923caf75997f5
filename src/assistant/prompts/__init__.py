"""Prompt text and message builders for the assistant handlers."""

from .builders import (
    build_cluster_messages,
    build_mutation_messages,
    describe_theme_count_guidance,
)

__all__ = [
    "build_cluster_messages",
    "build_mutation_messages",
    "describe_theme_count_guidance",
]
