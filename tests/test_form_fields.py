import io

import pytest
from PyPDF2 import PdfWriter
from PyPDF2.generic import ArrayObject, DictionaryObject, NameObject, TextStringObject

from data_gen.generators import build_fillable_pdf
from sheet_extraction.errors import DocumentOpenError
from sheet_extraction.form_fields import (
    _coerce_value,
    _widget_field_name,
    _widget_value,
    collect_form_fields,
    list_form_fields,
)
from sheet_extraction.pdf_engine import PdfEngine, get_pdf_engine


def _node(**entries) -> DictionaryObject:
    return DictionaryObject({NameObject(f"/{key}"): value for key, value in entries.items()})


def _written(writer: PdfWriter) -> bytes:
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def test_collect_later_page_wins_on_name_collision():
    pdf_bytes = build_fillable_pdf([{"HP": "10", "AC": "13"}, {"HP": "12"}])
    fields = collect_form_fields(pdf_bytes)
    assert fields == {"HP": "12", "AC": "13"}


def test_collect_counts_distinct_non_empty_names():
    pdf_bytes = build_fillable_pdf([{"Name": "Mogar", "Notes": ""}, {"Bonds": "Crew", "Name": "Mogar"}])
    fields = collect_form_fields(pdf_bytes)
    assert set(fields) == {"Name", "Bonds"}


def test_collect_accepts_an_injected_engine():
    pdf_bytes = build_fillable_pdf([{"CharacterName": "Lex Omnis"}])
    assert collect_form_fields(pdf_bytes, engine=PdfEngine(strict=False)) == {"CharacterName": "Lex Omnis"}


def test_list_form_fields_includes_empty_widgets_sorted():
    pdf_bytes = build_fillable_pdf([{"b": "2", "a": ""}, {"a": "1"}])
    assert list_form_fields(pdf_bytes) == [("a", "1"), ("b", "2")]


def test_collect_rejects_non_pdf_bytes():
    with pytest.raises(DocumentOpenError):
        collect_form_fields(b"not a pdf")
    with pytest.raises(DocumentOpenError):
        collect_form_fields(b"")


def test_collect_page_without_widgets_is_empty():
    assert collect_form_fields(build_fillable_pdf([{}])) == {}

    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    assert collect_form_fields(_written(writer)) == {}


def test_collect_document_without_pages_is_empty():
    assert collect_form_fields(build_fillable_pdf([])) == {}
    assert collect_form_fields(_written(PdfWriter())) == {}
    assert list_form_fields(_written(PdfWriter())) == []


def test_collect_rejects_password_protected_pdf():
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    writer.encrypt("secret")
    with pytest.raises(DocumentOpenError, match="password protected"):
        collect_form_fields(_written(writer))


def test_pdf_engine_is_a_process_wide_singleton():
    assert get_pdf_engine() is get_pdf_engine()


def test_widget_name_joins_parent_chain():
    parent = _node(T=TextStringObject("Wpn"))
    kid = _node(T=TextStringObject("Name"), Parent=parent)
    assert _widget_field_name(kid) == "Wpn.Name"


def test_widget_name_falls_back_to_mapping_name():
    assert _widget_field_name(_node(TM=TextStringObject("Speed"))) == "Speed"
    assert _widget_field_name(_node()) == ""


def test_widget_value_inherits_from_parent():
    parent = _node(T=TextStringObject("HP"), V=TextStringObject("35"))
    kid = _node(Parent=parent)
    assert _widget_value(kid) == "35"


def test_checkbox_values_drop_name_prefix():
    assert _widget_value(_node(V=NameObject("/Yes"))) == "Yes"
    assert _widget_value(_node(AS=NameObject("/Off"))) == "Off"


def test_coerce_value_joins_list_selections():
    value = ArrayObject([TextStringObject("Common"), TextStringObject("Elvish")])
    assert _coerce_value(value) == "Common, Elvish"
    assert _coerce_value(None) is None
