"""Class-name and spellcasting-ability derivation from a "Class N" string."""

from __future__ import annotations

import re
from typing import Optional

_CLASS_NAME_RE = re.compile(r"([A-Za-z\s]+?)\s+(\d+)$")
_LEADING_CLASS_RE = re.compile(r"([A-Za-z\s]+?)\s+\d+")

# Classes outside this table (fighter, rogue, barbarian, homebrew) yield no ability.
SPELLCASTING_ABILITY_BY_CLASS = {
    "bard": "CHA",
    "cleric": "WIS",
    "druid": "WIS",
    "paladin": "CHA",
    "ranger": "WIS",
    "sorcerer": "CHA",
    "warlock": "CHA",
    "wizard": "INT",
    "artificer": "INT",
    "monk": "WIS",
}


def extract_class_name(class_level: Optional[str]) -> Optional[str]:
    """Return "Barbarian" for "Barbarian 3"; None when the text is not "Name N"."""
    if not class_level:
        return None
    match = _CLASS_NAME_RE.search(class_level.strip())
    if not match:
        return None
    name = match.group(1).strip()
    return name or None


def determine_spellcasting_ability(class_level: Optional[str]) -> Optional[str]:
    if not class_level:
        return None
    match = _LEADING_CLASS_RE.search(class_level)
    if not match:
        return None
    return SPELLCASTING_ABILITY_BY_CLASS.get(match.group(1).strip().lower())
