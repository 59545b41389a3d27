"""Dispatcher configuration.

`DispatcherConfig` is built once at startup and shared read-only by every dispatch.
`DispatcherSettings` reads the same options from ``REPLAY_ERRORS_*`` environment
variables (or a ``.env`` file).
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from replay_error_router.core.exceptions import ConfigError
from replay_error_router.core.selection import RepresentationId
from replay_error_router.core.summary import DEFAULT_MAX_ERROR_HEADER_LENGTH

DEFAULT_XML_TEMPLATE = "exception/XMLError.html"
DEFAULT_HTML_TEMPLATE = "exception/HTMLError.html"
# images fall back to the HTML error page unless a dedicated template is configured
DEFAULT_IMAGE_TEMPLATE = DEFAULT_HTML_TEMPLATE
DEFAULT_JAVASCRIPT_TEMPLATE = "exception/JavaScriptError.html"
DEFAULT_CSS_TEMPLATE = "exception/CSSError.html"


class DispatcherConfig(BaseModel):
    """Immutable process-wide settings for failure dispatch."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    xml_template: str = Field(default=DEFAULT_XML_TEMPLATE, min_length=1)
    html_template: str = Field(default=DEFAULT_HTML_TEMPLATE, min_length=1)
    image_template: str = Field(default=DEFAULT_IMAGE_TEMPLATE, min_length=1)
    javascript_template: str = Field(default=DEFAULT_JAVASCRIPT_TEMPLATE, min_length=1)
    css_template: str = Field(default=DEFAULT_CSS_TEMPLATE, min_length=1)
    error_header: Optional[str] = Field(
        default=None,
        description="Response header carrying the failure summary; None disables it.",
    )
    max_error_header_length: int = Field(default=DEFAULT_MAX_ERROR_HEADER_LENGTH, ge=0)

    def template_for(self, representation: RepresentationId) -> str:
        """Return the template identifier configured for a representation."""
        return {
            RepresentationId.XML: self.xml_template,
            RepresentationId.HTML: self.html_template,
            RepresentationId.IMAGE: self.image_template,
            RepresentationId.JAVASCRIPT: self.javascript_template,
            RepresentationId.CSS: self.css_template,
        }[RepresentationId(representation)]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DispatcherConfig":
        try:
            return cls(**dict(data))
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc


class DispatcherSettings(BaseSettings):
    """Environment-driven source for `DispatcherConfig`."""

    xml_template: str = DEFAULT_XML_TEMPLATE
    html_template: str = DEFAULT_HTML_TEMPLATE
    image_template: str = DEFAULT_IMAGE_TEMPLATE
    javascript_template: str = DEFAULT_JAVASCRIPT_TEMPLATE
    css_template: str = DEFAULT_CSS_TEMPLATE
    error_header: Optional[str] = None
    max_error_header_length: int = DEFAULT_MAX_ERROR_HEADER_LENGTH

    model_config = SettingsConfigDict(
        env_prefix="REPLAY_ERRORS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def to_config(self) -> DispatcherConfig:
        return DispatcherConfig.from_mapping(self.model_dump())


@lru_cache(maxsize=1)
def get_dispatcher_config() -> DispatcherConfig:
    """Return a cached DispatcherConfig read from the environment."""
    return DispatcherSettings().to_config()
