"""Exceptions raised by the character-sheet extraction pipeline."""

from __future__ import annotations


class DocumentOpenError(ValueError):
    """Raised when uploaded bytes cannot be opened as a PDF document."""
