from __future__ import annotations

import logging
from collections.abc import Callable, MutableMapping
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from replay_error_router.core.classification import (
    Classification,
    RequestMetadata,
    classify_request,
)
from replay_error_router.core.config import DispatcherConfig
from replay_error_router.core.events import DispatchEvent
from replay_error_router.core.selection import RepresentationId, select_representation
from replay_error_router.core.summary import summarize_failure


@dataclass(frozen=True)
class FailureRenderContext:
    """Everything a renderer needs to regenerate a failure page."""

    failure: Any
    metadata: Optional[RequestMetadata]
    representation: RepresentationId
    template: str
    summary: Optional[str] = None
    uri_converter: Any = None


class FailureRenderer(Protocol):
    """Renderer interface (duck-typed): any callable taking template and context works."""

    def __call__(self, template: str, context: FailureRenderContext) -> Any:  # pragma: no cover
        ...


@dataclass(frozen=True)
class DispatchResult:
    representation: RepresentationId
    template: str
    is_embedded: bool
    classification: Classification
    summary: Optional[str]
    output: Any


class ErrorDispatcher:
    """Chooses a failure representation and hands it to an external renderer."""

    def __init__(
        self,
        *,
        config: DispatcherConfig | None = None,
        on_event: Callable[[DispatchEvent], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config or DispatcherConfig()
        self._on_event = on_event
        self._logger = logger or logging.getLogger(__name__)

    @property
    def config(self) -> DispatcherConfig:
        return self._config

    def _emit(
        self, kind: str, payload: dict, error: BaseException | None = None
    ) -> None:
        event = DispatchEvent(kind=kind, payload=payload, error=error)
        if self._on_event:
            try:
                self._on_event(event)
            except Exception:
                # Observability hooks should not break failure handling.
                self._logger.debug("Dispatch event hook failed", exc_info=True)
        if error:
            self._logger.debug("dispatch.%s error=%s payload=%s", kind, error, payload)
        else:
            self._logger.debug("dispatch.%s payload=%s", kind, payload)

    def dispatch(
        self,
        failure: Any,
        metadata: RequestMetadata | None,
        *,
        render: FailureRenderer,
        headers: MutableMapping[str, str] | None = None,
        uri_converter: Any = None,
    ) -> DispatchResult:
        """Render `failure` in the representation that suits the failed request.

        - If an error header is configured and `headers` is given, the failure summary is
          set under that header once, before rendering.
        - `render` is called exactly once. Whatever it raises reaches the caller as-is.
        """
        config = self._config
        summary: str | None = None
        if config.error_header:
            summary = summarize_failure(failure, config.max_error_header_length)
            if summary is not None and headers is not None:
                headers[config.error_header] = summary
                self._emit("header_set", {"header": config.error_header, "value": summary})

        context_class = classify_request(metadata)
        self._emit(
            "request_classified",
            {
                "request_url": metadata.request_url if metadata else None,
                "is_embedded": context_class.is_embedded,
                "classification": context_class.classification.value,
            },
        )
        if context_class.is_embedded and context_class.classification is Classification.NONE:
            # Full HTML page even though the request is embedded; kept for compatibility.
            self._emit(
                "embedded_unclassified",
                {"request_url": metadata.request_url if metadata else None},
            )

        representation = select_representation(
            metadata, context_class.is_embedded, context_class.classification
        )
        template = config.template_for(representation)
        self._emit(
            "representation_selected",
            {"representation": representation.value, "template": template},
        )

        context = FailureRenderContext(
            failure=failure,
            metadata=metadata,
            representation=representation,
            template=template,
            summary=summary,
            uri_converter=uri_converter,
        )
        self._emit("render_start", {"template": template})
        try:
            output = render(template, context)
        except Exception as exc:
            self._emit("render_failed", {"template": template}, error=exc)
            raise
        self._emit("render_success", {"template": template})

        return DispatchResult(
            representation=representation,
            template=template,
            is_embedded=context_class.is_embedded,
            classification=context_class.classification,
            summary=summary,
            output=output,
        )


def dispatch_failure(
    failure: Any,
    metadata: RequestMetadata | None,
    config: DispatcherConfig,
    render: FailureRenderer,
    *,
    headers: MutableMapping[str, str] | None = None,
    uri_converter: Any = None,
) -> DispatchResult:
    """One-off dispatch with an explicit config."""
    return ErrorDispatcher(config=config).dispatch(
        failure,
        metadata,
        render=render,
        headers=headers,
        uri_converter=uri_converter,
    )
