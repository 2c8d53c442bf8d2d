"""Character-sheet PDF extraction: raw widgets -> canonical record -> validated record."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from schemas.extracted_character import ExtractedCharacterData
from sheet_extraction.class_info import extract_class_name
from sheet_extraction.form_fields import collect_form_fields
from sheet_extraction.pdf_engine import PdfEngine
from sheet_extraction.sections import SECTION_EXTRACTORS

logger = logging.getLogger(__name__)


def _backfill_current_hp(record: Dict[str, Any]) -> None:
    # A sheet without a current-HP entry describes a character at full health.
    if record.get("maxHP") and not record.get("currentHP"):
        record["currentHP"] = record["maxHP"]


def build_character_record(raw_fields: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Run every section extractor over the raw field map.

    A section that raises is logged and left out; the rest of the record is kept.
    """
    record: Dict[str, Any] = {}
    for section, extractor in SECTION_EXTRACTORS:
        try:
            contribution = extractor(raw_fields, record)
        except Exception:
            logger.warning("Section extractor %s failed; skipping section", section, exc_info=True)
            continue
        record.update(contribution)

    _backfill_current_hp(record)
    logger.info("Extracted %d character attributes from %d form fields", len(record), len(raw_fields))
    return record


def parse_character_sheet(pdf_bytes: bytes, engine: Optional[PdfEngine] = None) -> Dict[str, Any]:
    """Collect form fields from a fillable sheet PDF and build the canonical record.

    Raises DocumentOpenError when the bytes are not a readable PDF.
    """
    raw_fields = collect_form_fields(pdf_bytes, engine=engine)
    return build_character_record(raw_fields)


def validate_extracted_data(record: Dict[str, Any]) -> Dict[str, Any]:
    """Normalize through the ExtractedCharacterData schema when possible.

    Sheets are hand-authored, so a record that does not fit the schema is returned
    unchanged instead of blocking the upload.
    """
    try:
        model = ExtractedCharacterData.model_validate(record)
    except ValidationError as exc:
        logger.warning("Extracted character data failed validation; keeping raw record: %s", exc.errors())
        return record
    return model.model_dump(exclude_unset=True)


def derive_character_identity(record: Mapping[str, Any]) -> Dict[str, str]:
    """Race, background and class name used to backfill the character itself."""
    identity: Dict[str, str] = {}
    for key in ("race", "background"):
        value = record.get(key)
        if isinstance(value, str) and value.strip():
            identity[key] = value
    class_level = record.get("classLevel")
    if isinstance(class_level, str):
        class_name = extract_class_name(class_level)
        if class_name:
            identity["class"] = class_name
    return identity
