"""
Process-level wiring for the assistant.

One AssistantServices instance owns the response cache and both handlers. The
Flask app stores it under `app.extensions["assistant"]`; tests build their own
with a fake transport and a controllable clock.
"""

from dataclasses import dataclass
from typing import Optional

from .handlers import ClusteringHandler, GraphMutationHandler
from .pipeline import ModelInvocationPipeline
from .response_cache import ResponseCache


@dataclass
class AssistantServices:
    cache: ResponseCache
    pipeline: ModelInvocationPipeline
    mutation: GraphMutationHandler
    clustering: ClusteringHandler

    def start(self) -> None:
        self.cache.start()

    def stop(self) -> None:
        self.cache.stop()


def build_services(
    cache: Optional[ResponseCache] = None,
    pipeline: Optional[ModelInvocationPipeline] = None,
) -> AssistantServices:
    cache = cache if cache is not None else ResponseCache()
    pipeline = pipeline if pipeline is not None else ModelInvocationPipeline()
    return AssistantServices(
        cache=cache,
        pipeline=pipeline,
        mutation=GraphMutationHandler(pipeline=pipeline),
        clustering=ClusteringHandler(cache=cache, pipeline=pipeline),
    )
