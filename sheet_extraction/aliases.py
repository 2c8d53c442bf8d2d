"""Loader for the canonical-field alias table (field_aliases.yaml)."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from sheet_extraction.resolver import resolve, resolve_exact

ALIASES_PATH = Path(__file__).resolve().parent / "field_aliases.yaml"

MATCH_LOOSE = "loose"
MATCH_EXACT = "exact"
MATCH_MODES = (MATCH_LOOSE, MATCH_EXACT)


@dataclass(frozen=True)
class FieldAlias:
    section: str
    field: str
    aliases: Tuple[str, ...]
    match: str = MATCH_LOOSE

    def lookup(self, raw_fields: Mapping[str, Any]) -> Optional[Any]:
        if self.match == MATCH_EXACT:
            return resolve_exact(raw_fields, self.aliases)
        return resolve(raw_fields, self.aliases)


def _build_entry(index: int, raw: Any) -> FieldAlias:
    if not isinstance(raw, dict):
        raise ValueError(f"Alias record #{index} must be a mapping.")
    missing = [key for key in ("section", "field", "aliases") if not raw.get(key)]
    if missing:
        raise ValueError(f"Alias record #{index} missing required keys: {', '.join(missing)}")
    aliases = raw["aliases"]
    if not isinstance(aliases, list) or not all(isinstance(a, str) and a.strip() for a in aliases):
        raise ValueError(f"Alias record {raw['section']}.{raw['field']} needs a list of non-empty names.")
    match = raw.get("match", MATCH_LOOSE)
    if match not in MATCH_MODES:
        raise ValueError(f"Alias record {raw['section']}.{raw['field']} has unknown match mode: {match}")
    return FieldAlias(
        section=str(raw["section"]),
        field=str(raw["field"]),
        aliases=tuple(aliases),
        match=match,
    )


def parse_alias_records(raw: Any) -> Dict[str, List[FieldAlias]]:
    """Validate raw YAML records and group them by section, keeping file order."""
    if not isinstance(raw, list):
        raise ValueError("Alias table must be a list of records.")
    table: Dict[str, List[FieldAlias]] = {}
    seen = set()
    for index, record in enumerate(raw):
        entry = _build_entry(index, record)
        key = (entry.section, entry.field)
        if key in seen:
            raise ValueError(f"Duplicate alias record: {entry.section}.{entry.field}")
        seen.add(key)
        table.setdefault(entry.section, []).append(entry)
    return table


@lru_cache(maxsize=1)
def load_alias_table() -> Dict[str, List[FieldAlias]]:
    if not ALIASES_PATH.exists():
        raise FileNotFoundError(f"Alias table not found at {ALIASES_PATH}")
    with ALIASES_PATH.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or []
    return parse_alias_records(raw)


def get_section_aliases(section: str) -> List[FieldAlias]:
    return list(load_alias_table().get(section, []))


def get_field_alias(section: str, field: str) -> Optional[FieldAlias]:
    for entry in load_alias_table().get(section, []):
        if entry.field == field:
            return entry
    return None


def reload_alias_table() -> None:
    """Clear the cached table (useful for tests)."""
    load_alias_table.cache_clear()
