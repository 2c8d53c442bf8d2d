import json
import sys

from data_gen import cli
from data_gen.generators import (
    build_fillable_pdf,
    lex_omnis_sheet_fields,
    mogar_sheet_fields,
    write_field_json,
    write_sheet_pdf,
)
from sheet_extraction.form_fields import collect_form_fields


def test_sample_sheets_describe_reference_characters():
    mogar = mogar_sheet_fields()
    lex = lex_omnis_sheet_fields()
    assert mogar["CLASS  LEVEL"] == "Barbarian 3"
    assert lex["CLASS  LEVEL"] == "Wizard 3"
    assert mogar is not mogar_sheet_fields()


def test_build_fillable_pdf_round_trips_widget_values():
    fields = mogar_sheet_fields()
    pdf_bytes = build_fillable_pdf([fields])
    assert pdf_bytes.startswith(b"%PDF")
    assert collect_form_fields(pdf_bytes) == fields


def test_write_sheet_pdf_and_field_json(tmp_path):
    pdf_path = write_sheet_pdf(tmp_path / "sheets" / "lex.pdf", [lex_omnis_sheet_fields()])
    assert pdf_path.read_bytes().startswith(b"%PDF")

    json_path = tmp_path / "lex.json"
    write_field_json(json_path, lex_omnis_sheet_fields())
    assert json.loads(json_path.read_text(encoding="utf-8"))["CharacterName"] == "Lex Omnis"


def test_cli_writes_requested_sheet(tmp_path, monkeypatch, capsys):
    output = tmp_path / "mogar.pdf"
    monkeypatch.setattr(sys, "argv", ["data_gen.cli", "--sheet", "mogar", "--output", str(output)])
    cli.main()
    assert output.exists()
    assert "Wrote" in capsys.readouterr().out
