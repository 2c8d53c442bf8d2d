"""CLI for writing the sample character sheets as fillable PDFs."""

from __future__ import annotations

import argparse
import sys

from data_gen.generators import SAMPLE_SHEETS, write_field_json, write_sheet_pdf


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Write a sample fillable character sheet.")
    parser.add_argument("--sheet", required=True, choices=sorted(SAMPLE_SHEETS), help="Sample sheet to write.")
    parser.add_argument("--output", required=True, help="Output PDF file path.")
    parser.add_argument("--fields-json", help="Also write the raw field map to this JSON file.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    factory = SAMPLE_SHEETS.get(args.sheet)
    if factory is None:
        print(f"Unknown sheet: {args.sheet}", file=sys.stderr)
        sys.exit(1)

    fields = factory()
    path = write_sheet_pdf(args.output, [fields])
    print(f"Wrote {len(fields)} widgets to {path}")
    if args.fields_json:
        write_field_json(args.fields_json, fields)
        print(f"Wrote field map to {args.fields_json}")


if __name__ == "__main__":
    main()
