from __future__ import annotations

import re
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

IMAGE_URL_PATTERN = re.compile(r".*\.(jpg|jpeg|gif|png|bmp|tiff|tif)", re.IGNORECASE)


class Classification(str, Enum):
    """Embedded-resource type inferred for a failed request."""

    NONE = "none"
    JAVASCRIPT = "javascript"
    CSS = "css"
    IMAGE = "image"


class RequestMetadata(BaseModel):
    """Request-scoped signals attached to a failed request by the replay/query pipeline."""

    model_config = ConfigDict(frozen=True)

    referer_url: Optional[str] = Field(
        default=None, description="Referring page; empty or missing when not embedded."
    )
    request_url: Optional[str] = Field(default=None, description="Requested archived URL.")
    is_replay_request: bool = Field(
        default=True,
        description="False for query (search) mode requests.",
    )
    is_xml_mode: bool = Field(default=False, description="Query response requested as XML.")
    is_image_context: bool = False
    is_script_context: bool = False
    is_style_context: bool = False


class ContextClassification(BaseModel):
    """Embedding state and resource type of a failed request."""

    model_config = ConfigDict(frozen=True)

    is_embedded: bool = False
    classification: Classification = Classification.NONE


def request_is_embedded(metadata: Optional[RequestMetadata]) -> bool:
    # without metadata, assume a direct request: send back HTML
    if metadata is None:
        return False
    return bool(metadata.referer_url)


def request_is_image(metadata: Optional[RequestMetadata]) -> bool:
    if metadata is None:
        return False
    if metadata.is_image_context:
        return True
    if metadata.request_url is None:
        return False
    return IMAGE_URL_PATTERN.fullmatch(metadata.request_url) is not None


def request_is_javascript(metadata: Optional[RequestMetadata]) -> bool:
    if metadata is None:
        return False
    if metadata.is_script_context:
        return True
    return metadata.request_url is not None and metadata.request_url.endswith(".js")


def request_is_css(metadata: Optional[RequestMetadata]) -> bool:
    if metadata is None:
        return False
    if metadata.is_style_context:
        return True
    return metadata.request_url is not None and metadata.request_url.endswith(".css")


# Checked in order; first match wins.
CLASSIFICATION_RULES: tuple[tuple[Classification, Callable[[Optional[RequestMetadata]], bool]], ...] = (
    (Classification.IMAGE, request_is_image),
    (Classification.JAVASCRIPT, request_is_javascript),
    (Classification.CSS, request_is_css),
)


def classify_request(metadata: Optional[RequestMetadata]) -> ContextClassification:
    """Decide whether a failed request was embedded and what kind of resource it was."""
    is_embedded = request_is_embedded(metadata)
    if metadata is None:
        return ContextClassification(is_embedded=is_embedded)

    for classification, matches in CLASSIFICATION_RULES:
        if matches(metadata):
            return ContextClassification(is_embedded=is_embedded, classification=classification)
    return ContextClassification(is_embedded=is_embedded)
