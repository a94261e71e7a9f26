"""
errors.py

Typed errors raised by the arrow annotation and its helpers.
"""

from __future__ import annotations


class ArrowError(Exception):
    """Base error for the project."""


class ValidationError(ArrowError, ValueError):
    """A parameter was rejected (unknown enum value, bad colour, non-number)."""


class RangeError(ValidationError):
    """A numeric parameter fell outside its allowed interval."""


class InvalidActionError(ArrowError, TypeError):
    """A debouncer was triggered with something that is not callable."""
