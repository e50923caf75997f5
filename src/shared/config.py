"""
Shared configuration for the Flowlab assistant.

Centralizes provider endpoints, model identifiers and runtime limits using
environment variables. All modules should use these constants instead of
hardcoded values.
"""

import os
from typing import Optional

# ============================================
# Model Provider (OpenAI-compatible chat API)
# ============================================

LLM_BASE_URL: str = os.getenv("LLM_BASE_URL", "https://api.openai.com/v1")
OPENAI_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY")

# Strict profile - structured-output capable model, JSON object responses
STRICT_MODEL_NAME: str = os.getenv("STRICT_MODEL_NAME", "gpt-4-turbo")
STRICT_TEMPERATURE: float = float(os.getenv("STRICT_TEMPERATURE", "0.2"))

# Lenient profile - cheaper plain completion model used as mutation fallback
LENIENT_MODEL_NAME: str = os.getenv("LENIENT_MODEL_NAME", "gpt-3.5-turbo")
LENIENT_TEMPERATURE: float = float(os.getenv("LENIENT_TEMPERATURE", "0.2"))

# Cluster profile - strict mode, no fallback
CLUSTER_MODEL_NAME: str = os.getenv("CLUSTER_MODEL_NAME", "gpt-4o-mini")
CLUSTER_TEMPERATURE: float = float(os.getenv("CLUSTER_TEMPERATURE", "0.4"))

# ============================================
# Timeout Matrix (seconds)
# ============================================
TIMEOUT_MATRIX = {
    "LLM_CALL": int(os.getenv("TIMEOUT_LLM_CALL", "60")),
}

# ============================================
# Response Cache
# ============================================
CACHE_TTL_SECONDS: int = int(os.getenv("CACHE_TTL_SECONDS", str(60 * 60)))
CACHE_SWEEP_INTERVAL_SECONDS: int = int(os.getenv("CACHE_SWEEP_INTERVAL_SECONDS", str(30 * 60)))
CACHE_SWEEPER_ENABLED: bool = os.getenv("CACHE_SWEEPER_ENABLED", "true").lower() in ("true", "1", "yes")

# ============================================
# HTTP Server
# ============================================
MAX_CONTENT_LENGTH_MB: int = int(os.getenv("MAX_CONTENT_LENGTH_MB", "5"))
SERVER_HOST: str = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT: int = int(os.getenv("SERVER_PORT", "8000"))

# ============================================
# Debugging
# ============================================
# DEBUG_PROMPTS=true is read per call by llm_client._write_debug_log.
DEBUG_LOG_DIR: str = os.getenv("DEBUG_LOG_DIR", os.path.join("logs", "debug"))

# ============================================
# Environment Variable Names (for reference)
# ============================================
# These can be set in the process environment or a .env file loaded by the
# process manager:
#
# LLM_BASE_URL=https://api.openai.com/v1
# OPENAI_API_KEY=sk-...
# STRICT_MODEL_NAME=gpt-4-turbo
# LENIENT_MODEL_NAME=gpt-3.5-turbo
# CLUSTER_MODEL_NAME=gpt-4o-mini
# TIMEOUT_LLM_CALL=60
# CACHE_TTL_SECONDS=3600
# CACHE_SWEEP_INTERVAL_SECONDS=1800
# LOG_FORMAT=json

# ============================================
# Helper Functions
# ============================================

def get_llm_base_url() -> str:
    """Get the chat-completion provider base URL (no trailing slash)."""
    return LLM_BASE_URL.rstrip("/")


def get_llm_api_key() -> Optional[str]:
    """Provider API key with LLM_API_KEY override."""
    return os.getenv("LLM_API_KEY") or OPENAI_API_KEY


def get_llm_timeout() -> int:
    """Per-invocation timeout in seconds."""
    return TIMEOUT_MATRIX["LLM_CALL"]
