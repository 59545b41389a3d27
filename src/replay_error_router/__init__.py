"""Failure-response dispatching for web-archive replay services."""

from replay_error_router.core import (
    Classification,
    ConfigError,
    ContextClassification,
    DispatchEvent,
    DispatchResult,
    DispatcherConfig,
    ErrorDispatcher,
    FailureRenderContext,
    ReplayErrorRouterError,
    RepresentationId,
    RequestMetadata,
    classify_request,
    dispatch_failure,
    select_representation,
    summarize_failure,
)

__all__ = [
    "Classification",
    "ConfigError",
    "ContextClassification",
    "DispatchEvent",
    "DispatchResult",
    "DispatcherConfig",
    "ErrorDispatcher",
    "FailureRenderContext",
    "ReplayErrorRouterError",
    "RepresentationId",
    "RequestMetadata",
    "classify_request",
    "dispatch_failure",
    "select_representation",
    "summarize_failure",
]
