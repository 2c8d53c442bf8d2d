"""CLI utility to probe character-sheet PDFs with the extraction pipeline."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict, List, Tuple

from sheet_extraction.errors import DocumentOpenError
from sheet_extraction.form_fields import list_form_fields
from sheet_extraction.pipeline import derive_character_identity, parse_character_sheet, validate_extracted_data

MAX_VALUE_WIDTH = 100

SUMMARY_FIELDS = (
    "characterName",
    "playerName",
    "race",
    "background",
    "classLevel",
    "maxHP",
    "currentHP",
    "ac",
    "initiative",
    "speed",
    "proficiencyBonus",
    "spellcastingAbility",
)


def _shorten(value: str) -> str:
    return value if len(value) <= MAX_VALUE_WIDTH else value[:MAX_VALUE_WIDTH] + "..."


def print_raw_fields(fields: List[Tuple[str, str]]) -> None:
    print("=== Raw form fields ===")
    for name, value in fields:
        print(f'  "{name}" = "{_shorten(value)}"')


def print_summary(record: Dict[str, Any]) -> None:
    print("\n=== Character summary ===")
    for key in SUMMARY_FIELDS:
        print(f"{key}: {record.get(key, '[missing]')}")
    identity = derive_character_identity(record)
    if identity:
        print(f"identity: {json.dumps(identity, ensure_ascii=False)}")


def print_sections(record: Dict[str, Any]) -> None:
    print("\n=== Sections ===")
    for key in sorted(record):
        value = record[key]
        if isinstance(value, dict):
            print(f"[OBJECT] {key}: {json.dumps(value, ensure_ascii=False)}")
        elif isinstance(value, list):
            print(f"[LIST]   {key}: {len(value)} item(s)")


def main() -> None:
    parser = argparse.ArgumentParser(description="Probe a fillable character-sheet PDF.")
    parser.add_argument("pdf_path", help="Path to the character-sheet PDF.")
    parser.add_argument("--raw", action="store_true", help="Print every raw widget name and value.")
    parser.add_argument("--dump-json", action="store_true", help="Print the validated record as JSON.")
    args = parser.parse_args()

    pdf_path = Path(args.pdf_path).expanduser().resolve()
    if not pdf_path.exists() or not pdf_path.is_file():
        raise SystemExit(f"File not found: {pdf_path}")

    pdf_bytes = pdf_path.read_bytes()
    try:
        if args.raw:
            print_raw_fields(list_form_fields(pdf_bytes))
        record = validate_extracted_data(parse_character_sheet(pdf_bytes))
    except DocumentOpenError as exc:
        raise SystemExit(f"Could not open {pdf_path.name}: {exc}") from exc

    print_summary(record)
    print_sections(record)

    if args.dump_json:
        print("\n=== Extracted JSON ===")
        print(json.dumps(record, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
