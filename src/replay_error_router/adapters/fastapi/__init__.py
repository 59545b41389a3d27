"""FastAPI/Starlette adapter (optional dependency)."""

from replay_error_router.adapters.fastapi.handler import (
    header_safe,
    metadata_from_request,
    replay_error_handler,
)

__all__ = ["header_safe", "metadata_from_request", "replay_error_handler"]
