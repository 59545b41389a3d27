"""Core (framework-agnostic) primitives for replay-error-router."""

from replay_error_router.core.exceptions import ConfigError, ReplayErrorRouterError
from replay_error_router.core.classification import (
    Classification,
    ContextClassification,
    RequestMetadata,
    classify_request,
)
from replay_error_router.core.config import (
    DispatcherConfig,
    DispatcherSettings,
    get_dispatcher_config,
)
from replay_error_router.core.dispatcher import (
    DispatchResult,
    ErrorDispatcher,
    FailureRenderContext,
    FailureRenderer,
    dispatch_failure,
)
from replay_error_router.core.events import DispatchEvent
from replay_error_router.core.selection import RepresentationId, select_representation
from replay_error_router.core.summary import describe_failure, summarize_failure

__all__ = [
    "ReplayErrorRouterError",
    "ConfigError",
    "Classification",
    "ContextClassification",
    "RequestMetadata",
    "classify_request",
    "DispatcherConfig",
    "DispatcherSettings",
    "get_dispatcher_config",
    "DispatchResult",
    "ErrorDispatcher",
    "FailureRenderContext",
    "FailureRenderer",
    "dispatch_failure",
    "DispatchEvent",
    "RepresentationId",
    "select_representation",
    "describe_failure",
    "summarize_failure",
]
