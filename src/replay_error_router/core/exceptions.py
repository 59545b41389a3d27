"""Exception hierarchy for replay-error-router."""

from __future__ import annotations


class ReplayErrorRouterError(Exception):
    """Base error for the package."""


class ConfigError(ReplayErrorRouterError):
    """Raised when dispatcher configuration is invalid."""
