"""
Centralized model registry for the Flowlab assistant.

Provides a single source of truth for the invocation profiles used by the
handlers. Values are populated from environment-derived defaults in
shared.config.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from .config import (
    STRICT_MODEL_NAME,
    STRICT_TEMPERATURE,
    LENIENT_MODEL_NAME,
    LENIENT_TEMPERATURE,
    CLUSTER_MODEL_NAME,
    CLUSTER_TEMPERATURE,
)

JSON_OBJECT_FORMAT = "json_object"


@dataclass(frozen=True)
class ModelProfile:
    """Typed invocation profile: which model, how hot, and whether JSON mode is requested."""

    key: str
    model_id: str
    temperature: float
    purpose: str
    response_format: Optional[str] = None

    @property
    def strict(self) -> bool:
        return self.response_format == JSON_OBJECT_FORMAT

    def validate(self) -> None:
        """Basic validation to catch misconfiguration early."""
        if not self.model_id:
            raise ValueError(f"Profile '{self.key}' is missing a model_id")
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError(f"Profile '{self.key}' has invalid temperature: {self.temperature}")
        if self.response_format not in (None, JSON_OBJECT_FORMAT):
            raise ValueError(f"Profile '{self.key}' has unsupported response_format: {self.response_format}")


_PROFILE_REGISTRY: Dict[str, ModelProfile] = {
    "strict": ModelProfile(
        key="strict",
        model_id=STRICT_MODEL_NAME,
        temperature=STRICT_TEMPERATURE,
        purpose="graph mutation / structured output",
        response_format=JSON_OBJECT_FORMAT,
    ),
    "lenient": ModelProfile(
        key="lenient",
        model_id=LENIENT_MODEL_NAME,
        temperature=LENIENT_TEMPERATURE,
        purpose="graph mutation fallback / plain completion",
        response_format=None,
    ),
    "cluster": ModelProfile(
        key="cluster",
        model_id=CLUSTER_MODEL_NAME,
        temperature=CLUSTER_TEMPERATURE,
        purpose="thematic clustering / structured output",
        response_format=JSON_OBJECT_FORMAT,
    ),
}

# Validate at import to fail fast on obvious issues.
for cfg in _PROFILE_REGISTRY.values():
    cfg.validate()


def get_model_profile(key: str) -> ModelProfile:
    """Fetch an invocation profile by key."""
    if key not in _PROFILE_REGISTRY:
        raise KeyError(f"Model profile not found for key: {key}")
    return _PROFILE_REGISTRY[key]


def list_profiles() -> Dict[str, ModelProfile]:
    """Return the full registry."""
    return _PROFILE_REGISTRY.copy()
