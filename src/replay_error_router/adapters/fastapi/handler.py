from __future__ import annotations

import re
from collections.abc import Callable
from typing import Optional

from starlette.requests import Request
from starlette.responses import Response

from replay_error_router.core import (
    ErrorDispatcher,
    FailureRenderContext,
    RequestMetadata,
)

ResponseRenderer = Callable[[Request, str, FailureRenderContext], Response]

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def metadata_from_request(
    request: Request,
    *,
    request_url: Optional[str] = None,
    is_replay_request: bool = True,
    is_xml_mode: bool = False,
    is_image_context: bool = False,
    is_script_context: bool = False,
    is_style_context: bool = False,
) -> RequestMetadata:
    """Build RequestMetadata from an incoming request.

    The referer comes from the ``Referer`` header. `request_url` defaults to the URL
    the client asked for; replay services usually pass the archived URL instead.
    """
    return RequestMetadata(
        referer_url=request.headers.get("referer"),
        request_url=request_url if request_url is not None else str(request.url),
        is_replay_request=is_replay_request,
        is_xml_mode=is_xml_mode,
        is_image_context=is_image_context,
        is_script_context=is_script_context,
        is_style_context=is_style_context,
    )


def header_safe(value: str) -> str:
    """Make a summary acceptable as an HTTP header value.

    Control characters become spaces and characters outside latin-1 are written as
    backslash escapes, since Starlette encodes header values as latin-1.
    """
    cleaned = _CONTROL_CHARS.sub(" ", value)
    return cleaned.encode("latin-1", "backslashreplace").decode("latin-1")


def replay_error_handler(
    dispatcher: ErrorDispatcher,
    render: ResponseRenderer,
    *,
    metadata_for: Callable[[Request], Optional[RequestMetadata]] = metadata_from_request,
) -> Callable[[Request, Exception], Response]:
    """Return an exception handler suitable for ``app.add_exception_handler``.

    `render` receives the request, the chosen template and the render context, and must
    return a Response. The diagnostic header, when configured, is copied onto it.
    The handler is synchronous so Starlette runs it (and `render`) in its threadpool.
    """

    def handler(request: Request, exc: Exception) -> Response:
        headers: dict[str, str] = {}
        result = dispatcher.dispatch(
            exc,
            metadata_for(request),
            render=lambda template, context: render(request, template, context),
            headers=headers,
        )
        response: Response = result.output
        for name, value in headers.items():
            response.headers[name] = header_safe(value)
        return response

    return handler
