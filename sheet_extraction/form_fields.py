"""Collect AcroForm widget names and values from a fillable character-sheet PDF.

The collector walks page annotations rather than the document-level /AcroForm
tree: several community sheet templates ship widgets that are missing from
/Fields, and some repeat a field name on later pages with corrected values.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from PyPDF2.generic import NameObject

from sheet_extraction.pdf_engine import PdfEngine, get_pdf_engine

logger = logging.getLogger(__name__)

RawFieldMap = Dict[str, Any]

# /Parent chains deeper than this are treated as malformed.
MAX_PARENT_DEPTH = 32


def _resolve(obj: Any) -> Any:
    if obj is not None and hasattr(obj, "get_object"):
        return obj.get_object()
    return obj


def _qualified_field_name(annotation: Any) -> Optional[str]:
    """Join partial /T names along the /Parent chain into a dotted field name."""
    parts: List[str] = []
    node = annotation
    depth = 0
    while node is not None and depth < MAX_PARENT_DEPTH:
        partial = _resolve(node.get("/T"))
        if partial:
            parts.append(str(partial))
        node = _resolve(node.get("/Parent"))
        depth += 1
    if not parts:
        return None
    return ".".join(reversed(parts))


def _widget_field_name(annotation: Any) -> str:
    name = _qualified_field_name(annotation)
    if name:
        return name
    # Unnamed widgets sometimes only carry the export mapping name.
    mapping_name = _resolve(annotation.get("/TM"))
    return str(mapping_name) if mapping_name else ""


def _inherited_value(annotation: Any) -> Any:
    """/V is inheritable, so kids without their own value take the parent's."""
    node = annotation
    depth = 0
    while node is not None and depth < MAX_PARENT_DEPTH:
        value = _resolve(node.get("/V"))
        if value is not None:
            return value
        node = _resolve(node.get("/Parent"))
        depth += 1
    return None


def _coerce_value(value: Any) -> Optional[str]:
    value = _resolve(value)
    if value is None:
        return None
    if isinstance(value, NameObject):
        return str(value).lstrip("/")
    if isinstance(value, str):
        return str(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, (list, tuple)):
        items = [_coerce_value(item) for item in value]
        return ", ".join(item for item in items if item)
    return str(value)


def _widget_value(annotation: Any) -> Optional[str]:
    value = _coerce_value(_inherited_value(annotation))
    if not value:
        # Checkbox-style widgets often only carry their appearance state.
        value = _coerce_value(annotation.get("/AS"))
    return value or None


def _iter_page_widgets(page: Any):
    annotations = _resolve(page.get("/Annots"))
    if not annotations:
        return
    for ref in annotations:
        annotation = _resolve(ref)
        if not hasattr(annotation, "get"):
            continue
        if annotation.get("/Subtype") != "/Widget":
            continue
        yield annotation


def _walk_widgets(pdf_bytes: bytes, engine: Optional[PdfEngine]) -> Tuple[int, List[Tuple[int, str, Optional[str]]]]:
    reader = (engine or get_pdf_engine()).open(pdf_bytes)
    widgets: List[Tuple[int, str, Optional[str]]] = []
    page_count = 0
    for page_number, page in enumerate(reader.pages, start=1):
        page_count = page_number
        for annotation in _iter_page_widgets(page):
            name = _widget_field_name(annotation)
            if not name:
                continue
            widgets.append((page_number, name, _widget_value(annotation)))
    return page_count, widgets


def collect_form_fields(pdf_bytes: bytes, engine: Optional[PdfEngine] = None) -> RawFieldMap:
    """
    Return a flat mapping of widget name -> value for every widget with a value.

    Pages are read in order and a later page overwrites an earlier one when both
    carry the same field name. Raises DocumentOpenError when the bytes are not a
    readable PDF; a document without widgets yields an empty mapping.
    """
    fields: RawFieldMap = {}
    page_count, widgets = _walk_widgets(pdf_bytes, engine)
    for page_number, name, value in widgets:
        if value is None:
            continue
        if name in fields and fields[name] != value:
            logger.debug("Field %r on page %d overrides an earlier value", name, page_number)
        fields[name] = value

    logger.info("Collected %d form fields across %d page(s)", len(fields), page_count)
    return fields


def list_form_fields(pdf_bytes: bytes, engine: Optional[PdfEngine] = None) -> List[Tuple[str, str]]:
    """Every named widget with its value (empty when unset), sorted by name."""
    merged: Dict[str, str] = {}
    _, widgets = _walk_widgets(pdf_bytes, engine)
    for _, name, value in widgets:
        if value or name not in merged:
            merged[name] = value or ""
    return sorted(merged.items(), key=lambda item: item[0])
