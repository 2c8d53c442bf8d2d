import json
import sys

import pytest

from data_gen.generators import mogar_sheet_fields, write_sheet_pdf
from sheet_extraction import sheet_probe


def test_probe_prints_summary_and_json(tmp_path, monkeypatch, capsys):
    pdf_path = write_sheet_pdf(tmp_path / "mogar.pdf", [mogar_sheet_fields()])
    monkeypatch.setattr(sys, "argv", ["sheet_probe", str(pdf_path), "--raw", "--dump-json"])

    sheet_probe.main()

    out = capsys.readouterr().out
    assert '"CLASS  LEVEL" = "Barbarian 3"' in out
    assert "classLevel: Barbarian 3" in out
    assert "spellcastingAbility: [missing]" in out
    payload = json.loads(out.split("=== Extracted JSON ===", 1)[1])
    assert payload["maxHP"] == "35"


def test_probe_exits_on_unreadable_file(tmp_path, monkeypatch):
    bad = tmp_path / "bad.pdf"
    bad.write_bytes(b"not a pdf")
    monkeypatch.setattr(sys, "argv", ["sheet_probe", str(bad)])
    with pytest.raises(SystemExit, match="Could not open"):
        sheet_probe.main()


def test_probe_exits_on_missing_file(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["sheet_probe", str(tmp_path / "nope.pdf")])
    with pytest.raises(SystemExit, match="File not found"):
        sheet_probe.main()
