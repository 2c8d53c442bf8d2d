"""Look up canonical attributes in a raw form-field map by alias."""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Optional

_WHITESPACE_RE = re.compile(r"\s+")


def _exact_key(name: str) -> str:
    return name.strip().lower()


def _loose_key(name: str) -> str:
    return _WHITESPACE_RE.sub("", name).lower()


def _has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _exact_pass(raw_fields: Mapping[str, Any], candidates: Iterable[str]) -> Optional[Any]:
    by_key = {}
    for key, value in raw_fields.items():
        if _has_value(value):
            # Later keys win, matching the collector's last-write-wins order.
            by_key[_exact_key(key)] = value
    for candidate in candidates:
        hit = by_key.get(_exact_key(candidate))
        if hit is not None:
            return hit
    return None


def resolve_exact(raw_fields: Mapping[str, Any], candidates: Iterable[str]) -> Optional[Any]:
    """Return the value of the first candidate whose name matches a raw key exactly.

    Matching ignores case and surrounding whitespace only.
    """
    return _exact_pass(raw_fields, list(candidates))


def resolve(raw_fields: Mapping[str, Any], candidates: Iterable[str]) -> Optional[Any]:
    """
    Return the value for the first matching candidate name, or None.

    All candidates are tried for an exact (case/outer-whitespace insensitive) match
    before any substring matching is attempted, so an exact alias later in the list
    beats a partial hit on an earlier one. The substring pass ignores all whitespace
    and accepts containment in either direction ("Animal" finds "Animal Handling").
    """
    names = list(candidates)
    hit = _exact_pass(raw_fields, names)
    if hit is not None:
        return hit

    loose_fields = [
        (_loose_key(key), value)
        for key, value in raw_fields.items()
        if _has_value(value) and _loose_key(key)
    ]
    for candidate in names:
        wanted = _loose_key(candidate)
        if not wanted:
            continue
        for key, value in loose_fields:
            if wanted in key or key in wanted:
                return value
    return None
