"""Handle around the PDF library used to open uploaded character sheets."""

from __future__ import annotations

import io
import logging
import threading
from typing import Optional

from PyPDF2 import PdfReader

from sheet_extraction.errors import DocumentOpenError

logger = logging.getLogger(__name__)


class PdfEngine:
    """Opens PDF byte streams for reading.

    The engine carries no per-document state, so one instance can be shared by
    concurrent uploads.
    """

    def __init__(self, *, strict: bool = False) -> None:
        self.strict = strict

    def open(self, pdf_bytes: bytes) -> PdfReader:
        if not pdf_bytes:
            raise DocumentOpenError("Cannot open an empty PDF payload.")
        try:
            reader = PdfReader(io.BytesIO(pdf_bytes), strict=self.strict)
        except Exception as exc:
            raise DocumentOpenError(f"Failed to read PDF: {exc}") from exc

        if reader.is_encrypted:
            # Fillable sheets exported with owner-only restrictions open with an empty password.
            try:
                decrypted = reader.decrypt("")
            except Exception as exc:
                raise DocumentOpenError(f"Unsupported PDF encryption: {exc}") from exc
            if not decrypted:
                raise DocumentOpenError("PDF is password protected.")
        return reader


_engine: Optional[PdfEngine] = None
_engine_lock = threading.Lock()


def get_pdf_engine() -> PdfEngine:
    """Return the process-wide engine, creating it on first use."""
    global _engine
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                logger.debug("Initializing PDF engine")
                _engine = PdfEngine()
    return _engine
