from __future__ import annotations

from typing import Any

import pytest

from replay_error_router.core import (
    Classification,
    DispatchEvent,
    DispatcherConfig,
    ErrorDispatcher,
    FailureRenderContext,
    RepresentationId,
    RequestMetadata,
    dispatch_failure,
)


class ResourceNotInArchiveException(Exception):
    pass


class FakeRenderer:
    def __init__(self) -> None:
        self.calls: list[tuple[str, FailureRenderContext]] = []

    def __call__(self, template: str, context: FailureRenderContext) -> Any:
        self.calls.append((template, context))
        return f"rendered:{template}"


HEADER = "X-Archive-Wayback-Runtime-Error"


def test_dispatch_embedded_css_gets_css_stub() -> None:
    renderer = FakeRenderer()
    metadata = RequestMetadata(
        is_replay_request=True,
        referer_url="http://a/",
        request_url="http://a/style.css",
    )
    failure = ResourceNotInArchiveException("http://a/style.css")

    result = ErrorDispatcher().dispatch(failure, metadata, render=renderer)

    assert result.is_embedded is True
    assert result.classification is Classification.CSS
    assert result.representation is RepresentationId.CSS
    assert result.template == "exception/CSSError.html"
    assert result.output == "rendered:exception/CSSError.html"
    assert len(renderer.calls) == 1
    template, context = renderer.calls[0]
    assert context.failure is failure
    assert context.metadata is metadata
    assert context.representation is RepresentationId.CSS
    assert context.template == template


def test_dispatch_query_mode_is_html_regardless_of_embedding() -> None:
    renderer = FakeRenderer()
    metadata = RequestMetadata(
        is_replay_request=False,
        referer_url="http://a/",
        request_url="http://a/app.js",
    )
    result = ErrorDispatcher().dispatch(ValueError("bad"), metadata, render=renderer)
    assert result.representation is RepresentationId.HTML
    assert renderer.calls[0][0] == "exception/HTMLError.html"


def test_dispatch_query_mode_xml() -> None:
    renderer = FakeRenderer()
    metadata = RequestMetadata(is_replay_request=False, is_xml_mode=True)
    result = ErrorDispatcher().dispatch(ValueError("bad"), metadata, render=renderer)
    assert result.representation is RepresentationId.XML
    assert result.template == "exception/XMLError.html"


def test_dispatch_without_metadata_falls_back_to_html() -> None:
    renderer = FakeRenderer()
    result = ErrorDispatcher().dispatch(ValueError("bad"), None, render=renderer)
    assert result.is_embedded is False
    assert result.classification is Classification.NONE
    assert result.representation is RepresentationId.HTML


def test_dispatch_uses_configured_templates() -> None:
    renderer = FakeRenderer()
    config = DispatcherConfig(image_template="exception/blank.gif")
    metadata = RequestMetadata(referer_url="http://a/", request_url="http://a/logo.png")
    result = ErrorDispatcher(config=config).dispatch(None, metadata, render=renderer)
    assert result.representation is RepresentationId.IMAGE
    assert [template for template, _ in renderer.calls] == ["exception/blank.gif"]


def test_dispatch_sets_error_header_when_configured() -> None:
    config = DispatcherConfig(error_header=HEADER, max_error_header_length=40)
    headers: dict[str, str] = {}
    failure = "org.archive.wayback.exception.ResourceNotInArchiveException: http://x.example/ not\nfound"

    result = ErrorDispatcher(config=config).dispatch(
        failure, None, render=FakeRenderer(), headers=headers
    )

    assert headers == {HEADER: "ResourceNotInArchiveException: http://x."}
    assert result.summary == headers[HEADER]


def test_dispatch_header_is_set_before_rendering() -> None:
    config = DispatcherConfig(error_header=HEADER)
    headers: dict[str, str] = {}
    seen: list[dict[str, str]] = []

    def render(template: str, context: FailureRenderContext) -> str:
        seen.append(dict(headers))
        return "ok"

    ErrorDispatcher(config=config).dispatch(ValueError("bad"), None, render=render, headers=headers)
    assert seen == [{HEADER: "ValueError: bad"}]


def test_dispatch_no_header_without_configuration() -> None:
    headers: dict[str, str] = {}
    result = ErrorDispatcher().dispatch(ValueError("bad"), None, render=FakeRenderer(), headers=headers)
    assert headers == {}
    assert result.summary is None


def test_dispatch_no_header_for_absent_failure() -> None:
    config = DispatcherConfig(error_header=HEADER)
    headers: dict[str, str] = {}
    ErrorDispatcher(config=config).dispatch(None, None, render=FakeRenderer(), headers=headers)
    assert headers == {}


def test_dispatch_renderer_failure_propagates_unchanged() -> None:
    boom = RuntimeError("template missing")
    events: list[DispatchEvent] = []

    def render(template: str, context: FailureRenderContext) -> str:
        raise boom

    dispatcher = ErrorDispatcher(on_event=events.append)
    with pytest.raises(RuntimeError) as excinfo:
        dispatcher.dispatch(ValueError("bad"), None, render=render)

    assert excinfo.value is boom
    failed = [e for e in events if e.kind == "render_failed"]
    assert len(failed) == 1
    assert failed[0].error is boom


def test_dispatch_emits_events() -> None:
    events: list[DispatchEvent] = []
    config = DispatcherConfig(error_header=HEADER)
    metadata = RequestMetadata(referer_url="http://a/", request_url="http://a/page")

    ErrorDispatcher(config=config, on_event=events.append).dispatch(
        ValueError("bad"), metadata, render=FakeRenderer(), headers={}
    )

    kinds = [e.kind for e in events]
    assert kinds == [
        "header_set",
        "request_classified",
        "embedded_unclassified",
        "representation_selected",
        "render_start",
        "render_success",
    ]


def test_dispatch_event_hook_failure_is_swallowed() -> None:
    def bad_hook(event: DispatchEvent) -> None:
        raise RuntimeError("boom")

    result = ErrorDispatcher(on_event=bad_hook).dispatch(
        ValueError("bad"), None, render=FakeRenderer()
    )
    assert result.representation is RepresentationId.HTML


def test_dispatch_passes_uri_converter_to_renderer() -> None:
    renderer = FakeRenderer()
    converter = object()
    ErrorDispatcher().dispatch(ValueError("bad"), None, render=renderer, uri_converter=converter)
    assert renderer.calls[0][1].uri_converter is converter


def test_dispatch_does_not_carry_state_between_calls() -> None:
    dispatcher = ErrorDispatcher()
    renderer = FakeRenderer()
    js = RequestMetadata(referer_url="http://a/", request_url="http://a/app.js")

    first = dispatcher.dispatch(ValueError("a"), js, render=renderer)
    second = dispatcher.dispatch(ValueError("b"), None, render=renderer)

    assert first.representation is RepresentationId.JAVASCRIPT
    assert second.representation is RepresentationId.HTML


def test_dispatch_failure_function_uses_explicit_config() -> None:
    renderer = FakeRenderer()
    config = DispatcherConfig(javascript_template="errors/silent.js")
    metadata = RequestMetadata(referer_url="http://a/", is_script_context=True)
    result = dispatch_failure(ValueError("bad"), metadata, config, renderer)
    assert result.template == "errors/silent.js"


def test_dispatch_survives_failure_with_broken_str() -> None:
    class UnprintableFailure(Exception):
        def __str__(self) -> str:
            raise RuntimeError("cannot describe")

    headers: dict[str, str] = {}
    config = DispatcherConfig(error_header=HEADER)
    result = ErrorDispatcher(config=config).dispatch(
        UnprintableFailure(), None, render=FakeRenderer(), headers=headers
    )

    assert headers[HEADER].endswith(".UnprintableFailure")
    assert result.representation is RepresentationId.HTML


def test_render_events_expose_template() -> None:
    events: list[DispatchEvent] = []
    ErrorDispatcher(on_event=events.append).dispatch(ValueError("bad"), None, render=FakeRenderer())

    render_events = [e for e in events if e.kind.startswith("render_")]
    assert [e.template for e in render_events] == ["exception/HTMLError.html"] * 2
    assert all(e.error is None for e in events)
