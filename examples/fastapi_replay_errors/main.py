from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from replay_error_router.adapters.fastapi import metadata_from_request, replay_error_handler
from replay_error_router.core import (
    DispatcherConfig,
    ErrorDispatcher,
    FailureRenderContext,
    RepresentationId,
)


class ResourceNotInArchive(Exception):
    """Raised by the toy replay endpoint for anything it does not hold."""


# Toy archive (demo only)
ARCHIVE: dict[str, str] = {
    "http://example.com/": "<html><body>archived home page</body></html>",
}

# 1x1 transparent GIF
BLANK_GIF = (
    b"GIF89a\x01\x00\x01\x00\x80\x00\x00\x00\x00\x00\xff\xff\xff!\xf9\x04\x01\x00\x00\x00"
    b"\x00,\x00\x00\x00\x00\x01\x00\x01\x00\x00\x02\x02D\x01\x00;"
)


def render_failure(request: Request, template: str, context: FailureRenderContext) -> Response:
    """A toy renderer, no template engine required."""
    representation = context.representation
    if representation is RepresentationId.JAVASCRIPT:
        return Response("/* archived resource unavailable */", media_type="application/javascript", status_code=404)
    if representation is RepresentationId.CSS:
        return Response("/* archived resource unavailable */", media_type="text/css", status_code=404)
    if representation is RepresentationId.XML:
        return Response(
            f"<error><message>{context.summary or ''}</message></error>",
            media_type="application/xml",
            status_code=404,
        )
    if representation is RepresentationId.IMAGE and template.endswith(".gif"):
        return Response(BLANK_GIF, media_type="image/gif", status_code=404)
    return HTMLResponse(
        f"<html><body><h1>Not in archive</h1><p>{context.failure}</p></body></html>",
        status_code=404,
    )


dispatcher = ErrorDispatcher(
    config=DispatcherConfig(
        image_template="exception/blank.gif",
        error_header="X-Archive-Wayback-Runtime-Error",
    )
)


def _metadata_for(request: Request):
    url = request.path_params.get("url") or request.query_params.get("url")
    return metadata_from_request(
        request,
        request_url=url,
        is_replay_request=request.url.path.startswith("/web/"),
        is_xml_mode=request.query_params.get("output") == "xml",
    )


app = FastAPI(title="replay-error-router: replay example")
app.add_exception_handler(
    ResourceNotInArchive,
    replay_error_handler(dispatcher, render_failure, metadata_for=_metadata_for),
)


@app.get("/web/{url:path}")
def replay(url: str) -> HTMLResponse:
    content = ARCHIVE.get(url)
    if content is None:
        raise ResourceNotInArchive(f"{url} not found")
    return HTMLResponse(content)


@app.get("/query")
def query(url: str, output: str = "html") -> PlainTextResponse:
    if url not in ARCHIVE:
        raise ResourceNotInArchive(f"no captures of {url}")
    return PlainTextResponse(f"1 capture of {url}")
