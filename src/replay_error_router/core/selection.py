from __future__ import annotations

from enum import Enum
from typing import Optional

from replay_error_router.core.classification import Classification, RequestMetadata


class RepresentationId(str, Enum):
    """Failure-response variant handed to the renderer."""

    XML = "xml"
    HTML = "html"
    JAVASCRIPT = "javascript"
    CSS = "css"
    IMAGE = "image"


_EMBEDDED_STUBS = {
    Classification.JAVASCRIPT: RepresentationId.JAVASCRIPT,
    Classification.CSS: RepresentationId.CSS,
    Classification.IMAGE: RepresentationId.IMAGE,
}


def select_representation(
    metadata: Optional[RequestMetadata],
    is_embedded: bool,
    classification: Classification,
) -> RepresentationId:
    """Pick the failure representation for a request.

    Query-mode requests asking for XML get XML. Embedded replay requests of a known type
    get a stub of that type so the embedding page keeps working. Everything else,
    including embedded requests of unknown type, gets the full HTML page.
    """
    if metadata is not None and not metadata.is_replay_request:
        # query mode never gets embedded stubs
        return RepresentationId.XML if metadata.is_xml_mode else RepresentationId.HTML
    if is_embedded:
        stub = _EMBEDDED_STUBS.get(classification)
        if stub is not None:
            return stub
    return RepresentationId.HTML
