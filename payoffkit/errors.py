"""Exceptions raised for caller contract violations."""

from __future__ import annotations


class InvalidInputError(ValueError):
    """Raised when an engine call receives input it cannot price."""


class TemplateError(InvalidInputError):
    """Raised when a strategy template is unknown or malformed."""


__all__ = ["InvalidInputError", "TemplateError"]
