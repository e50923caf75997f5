"""Shared configuration, logging and provider access for the Flowlab assistant."""

from .config import (
    LLM_BASE_URL,
    STRICT_MODEL_NAME,
    LENIENT_MODEL_NAME,
    CLUSTER_MODEL_NAME,
    TIMEOUT_MATRIX,
    CACHE_TTL_SECONDS,
    CACHE_SWEEP_INTERVAL_SECONDS,
    get_llm_base_url,
    get_llm_api_key,
    get_llm_timeout,
)
from .model_registry import ModelProfile, get_model_profile, list_profiles

__all__ = [
    # Config exports
    "LLM_BASE_URL",
    "STRICT_MODEL_NAME",
    "LENIENT_MODEL_NAME",
    "CLUSTER_MODEL_NAME",
    "TIMEOUT_MATRIX",
    "CACHE_TTL_SECONDS",
    "CACHE_SWEEP_INTERVAL_SECONDS",
    "get_llm_base_url",
    "get_llm_api_key",
    "get_llm_timeout",
    # Model registry exports
    "ModelProfile",
    "get_model_profile",
    "list_profiles",
]
