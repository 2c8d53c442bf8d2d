"""Sample character sheets for tests and manual probing."""

from .generators import (
    SAMPLE_SHEETS,
    build_fillable_pdf,
    lex_omnis_sheet_fields,
    mogar_sheet_fields,
    write_field_json,
    write_sheet_pdf,
)

__all__ = [
    "SAMPLE_SHEETS",
    "build_fillable_pdf",
    "lex_omnis_sheet_fields",
    "mogar_sheet_fields",
    "write_field_json",
    "write_sheet_pdf",
]
