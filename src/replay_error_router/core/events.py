"""Dispatch observability events."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class DispatchEvent:
    """One step of handling a failed request.

    `kind` is one of ``header_set``, ``request_classified``, ``embedded_unclassified``,
    ``representation_selected``, ``render_start``, ``render_success`` or
    ``render_failed``. `error` is only set for ``render_failed`` and carries the
    renderer's exception, which is re-raised to the caller afterwards.
    """

    kind: str
    payload: Dict[str, Any] = field(default_factory=dict)
    error: Optional[BaseException] = None

    @property
    def template(self) -> Optional[str]:
        """Template id involved in this step, when the step concerns rendering."""
        return self.payload.get("template")
