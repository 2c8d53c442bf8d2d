"""Character-sheet PDF form-field extraction pipeline."""

from .class_info import determine_spellcasting_ability, extract_class_name
from .errors import DocumentOpenError
from .form_fields import collect_form_fields, list_form_fields
from .pdf_engine import PdfEngine, get_pdf_engine
from .pipeline import (
    build_character_record,
    derive_character_identity,
    parse_character_sheet,
    validate_extracted_data,
)
from .resolver import resolve, resolve_exact

__all__ = [
    "DocumentOpenError",
    "PdfEngine",
    "build_character_record",
    "collect_form_fields",
    "derive_character_identity",
    "determine_spellcasting_ability",
    "extract_class_name",
    "get_pdf_engine",
    "list_form_fields",
    "parse_character_sheet",
    "resolve",
    "resolve_exact",
    "validate_extracted_data",
]
