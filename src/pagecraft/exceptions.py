"""Unified exception hierarchy for pagecraft.

All pagecraft exceptions inherit from PageCraftError, enabling:
- Catching all pagecraft errors with `except PageCraftError`
- Error context preservation via the `context` attribute
- Causality chains via `raise ... from e` patterns

The geometry engine and the metadata store never raise: out-of-range input
is clamped and unknown pages are ignored. These errors only come from the
outer surfaces (configuration, session files, page sources, recipe export).
"""

from typing import Any


class PageCraftError(Exception):
    """Base exception for all pagecraft errors.

    Args:
        message: Human-readable error description
        context: Optional dict of contextual information (file, page, field, etc.)
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}

    def __str__(self) -> str:
        base = super().__str__()
        if self.context:
            details = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base} [{details}]"
        return base


class ConfigError(PageCraftError):
    """Raised when configuration is invalid or cannot be loaded."""


class CommandError(PageCraftError):
    """Raised when an edit command is malformed or has no handler."""


class RecipeError(PageCraftError):
    """Raised when a recipe cannot be generated."""


class PageSourceError(PageCraftError):
    """Raised when page dimensions or bitmaps cannot be read."""
