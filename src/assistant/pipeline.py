"""
Model invocation pipeline.

Wraps the provider adapter in stages that return StageResult values. A stage
invokes one model profile and interprets the raw text (extraction plus
validation); any ParseError or InvariantViolationError raised while
interpreting is captured in the result, so callers branch on `result.ok`.
"""

from typing import Callable, Dict, List, Optional, TypeVar

from ..shared import llm_client
from ..shared.llm_client import ProviderFailure
from ..shared.logger import get_logger
from ..shared.model_registry import ModelProfile
from .errors import InvariantViolationError, ParseError, UpstreamError
from .result import StageResult

logger = get_logger("assistant", __name__)

T = TypeVar("T")

Messages = List[Dict[str, str]]


class ModelInvocationPipeline:
    """Issues chat-completion calls for a profile and packages outcomes as StageResults."""

    def __init__(
        self,
        transport: Optional[Callable[..., llm_client.ProviderResponse]] = None,
        timeout: Optional[int] = None,
    ) -> None:
        self._transport = transport
        self.timeout = timeout

    def _call(self, **kwargs) -> llm_client.ProviderResponse:
        # Looked up per call; llm_client.chat_completion may be patched.
        transport = self._transport or llm_client.chat_completion
        return transport(**kwargs)

    def invoke(self, messages: Messages, profile: ModelProfile) -> StageResult[str]:
        """Call the provider once with the profile's model and mode."""
        response = self._call(
            model=profile.model_id,
            messages=messages,
            temperature=profile.temperature,
            response_format=profile.response_format,
            timeout=self.timeout,
        )
        if isinstance(response, ProviderFailure) or not response.ok:
            error = UpstreamError(
                f"Model provider call failed ({profile.key})",
                details=response.error,
                model=profile.model_id,
                status_code=getattr(response, "status_code", None),
            )
            return StageResult.failure(profile.key, error, model=profile.model_id)
        return StageResult.success(profile.key, response.content, model=response.model)

    def run_stage(
        self,
        messages: Messages,
        profile: ModelProfile,
        interpret: Callable[[str], T],
    ) -> StageResult[T]:
        """Invoke the profile, then interpret its raw text.

        Args:
            messages: Chat messages for the call.
            profile: Which model/mode to use.
            interpret: Turns raw model text into the stage's value; may raise
                ParseError or InvariantViolationError.

        Returns:
            StageResult carrying the interpreted value, or the first error met.
        """
        raw = self.invoke(messages, profile)
        if not raw.ok:
            logger.warning(
                "Model stage failed upstream",
                extra={"payload": {"stage": profile.key, "model": profile.model_id, "error": raw.error.details}},
            )
            return StageResult.failure(profile.key, raw.error, model=profile.model_id)

        try:
            value = interpret(raw.value)
        except (ParseError, InvariantViolationError) as exc:
            logger.warning(
                f"Model stage output rejected: {exc.message}",
                extra={"payload": {"stage": profile.key, "model": raw.model, "code": exc.code, "details": exc.details}},
            )
            return StageResult.failure(profile.key, exc, model=raw.model)

        return StageResult.success(profile.key, value, model=raw.model)
