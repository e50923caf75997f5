"""HTTP blueprints for the assistant endpoints."""

from .mutate import mutate_bp
from .cluster import cluster_bp

__all__ = ["mutate_bp", "cluster_bp"]
