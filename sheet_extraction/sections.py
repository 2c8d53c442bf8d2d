"""Section extractors that map a raw form-field map onto the canonical record.

Every extractor takes ``(raw_fields, record)`` and returns the keys it
contributes. ``record`` is the partially built result of the extractors that ran
before it; only the spellcasting extractor reads from it. A missing source field
contributes nothing.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from sheet_extraction.aliases import get_field_alias, get_section_aliases
from sheet_extraction.class_info import determine_spellcasting_ability
from sheet_extraction.resolver import resolve, resolve_exact

logger = logging.getLogger(__name__)

Extractor = Callable[[Mapping[str, Any], Mapping[str, Any]], Dict[str, Any]]

# Skill widgets are named after the skill itself; "Animal" and "SleightofHand"
# are the truncated names the official sheet uses.
SKILL_NAMES = (
    "Acrobatics",
    "Animal",
    "Arcana",
    "Athletics",
    "Deception",
    "History",
    "Insight",
    "Intimidation",
    "Investigation",
    "Medicine",
    "Nature",
    "Perception",
    "Performance",
    "Persuasion",
    "Religion",
    "SleightofHand",
    "Stealth",
    "Survival",
)

NOTE_BLOCK_FIELDS = ("AdditionalNotes1", "AdditionalNotes2")

WEAPON_TABLE_MARKER = "wpn"
WEAPON_NAME_TOKEN = "name"

_SPELL_NAME_RE = re.compile(r"^spellName\d+$", re.IGNORECASE)
_RESISTANCES_RE = re.compile(r"Resistances?\s*-?\s*([^\n]+)", re.IGNORECASE)
_UNPARSED_DEFENSE_RE = re.compile(r"immunit|vulnerab", re.IGNORECASE)

PROFICIENCY_HEADERS = (
    ("languages", "LANGUAGES"),
    ("weaponProficiencies", "WEAPONS"),
    ("armorProficiencies", "ARMOR"),
)


def _as_text(value: Any) -> Optional[str]:
    """Return string values that carry text; checkbox booleans and blanks give None."""
    if isinstance(value, str) and value.strip():
        return value
    return None


def _split_list(text: str) -> List[str]:
    return [item.strip() for item in text.split(",") if item.strip()]


def _header_block_re(header: str) -> "re.Pattern[str]":
    # Header word ends its line ("=== HEADER ===", "HEADER:" or "PROFICIENCIES & HEADER").
    # Block runs to the next blank line, the next "===" marker, or the end of the text.
    return re.compile(
        rf"\b{header}\b[ \t=:]*\n(.*?)(?:\n[ \t]*\n|===|\Z)",
        re.IGNORECASE | re.DOTALL,
    )


_PROFICIENCY_BLOCKS: Tuple[Tuple[str, "re.Pattern[str]"], ...] = tuple(
    (field, _header_block_re(header)) for field, header in PROFICIENCY_HEADERS
)


def _lookup_section(raw_fields: Mapping[str, Any], section: str, *, strip: bool = False) -> Dict[str, Any]:
    found: Dict[str, Any] = {}
    for entry in get_section_aliases(section):
        value = _as_text(entry.lookup(raw_fields))
        if value is None:
            continue
        found[entry.field] = value.strip() if strip else value
    return found


def _lookup_single(raw_fields: Mapping[str, Any], section: str, field: str) -> Optional[str]:
    entry = get_field_alias(section, field)
    if entry is None:
        return None
    return _as_text(entry.lookup(raw_fields))


def _unique(values: Sequence[str]) -> List[str]:
    seen: Dict[str, None] = {}
    for value in values:
        seen.setdefault(value, None)
    return list(seen)


def extract_identity(raw_fields: Mapping[str, Any], record: Mapping[str, Any]) -> Dict[str, Any]:
    return _lookup_section(raw_fields, "identity")


def extract_combat(raw_fields: Mapping[str, Any], record: Mapping[str, Any]) -> Dict[str, Any]:
    """Combat numbers stay literal strings ("13 (16 with shield)" is legitimate)."""
    return _lookup_section(raw_fields, "combat")


def extract_ability_scores(raw_fields: Mapping[str, Any], record: Mapping[str, Any]) -> Dict[str, Any]:
    scores = _lookup_section(raw_fields, "abilityScores")
    return {"abilityScores": scores} if scores else {}


def extract_saving_throws(raw_fields: Mapping[str, Any], record: Mapping[str, Any]) -> Dict[str, Any]:
    saves = _lookup_section(raw_fields, "savingThrows")
    return {"savingThrows": saves} if saves else {}


def extract_skills(raw_fields: Mapping[str, Any], record: Mapping[str, Any]) -> Dict[str, Any]:
    skills: Dict[str, Any] = {}
    for skill in SKILL_NAMES:
        value = _as_text(resolve(raw_fields, [skill]))
        if value is not None:
            skills[skill] = value
    return {"skills": skills} if skills else {}


def extract_defenses(raw_fields: Mapping[str, Any], record: Mapping[str, Any]) -> Dict[str, Any]:
    defenses = _lookup_single(raw_fields, "defenses", "defenses")
    if defenses is None:
        return {}

    result: Dict[str, Any] = {"defenses": defenses}
    if "resistance" in defenses.lower():
        match = _RESISTANCES_RE.search(defenses)
        if match:
            resistances = _split_list(match.group(1))
            if resistances:
                result["damageResistances"] = resistances
    # TODO: parse immunities and vulnerabilities once a sheet template with a known layout for them is collected.
    if _UNPARSED_DEFENSE_RE.search(defenses):
        logger.debug("Defenses text mentions immunities/vulnerabilities that are not parsed: %r", defenses)
    return result


def extract_senses(raw_fields: Mapping[str, Any], record: Mapping[str, Any]) -> Dict[str, Any]:
    """Record a sense only when the matched text names it.

    One shared "AdditionalSenses" widget usually describes a single sense, so it
    must not be attributed to all four.
    """
    senses: Dict[str, Any] = {}
    for entry in get_section_aliases("senses"):
        for alias in entry.aliases:
            value = _as_text(resolve(raw_fields, [alias]))
            if value is not None and entry.field.lower() in value.lower():
                senses[entry.field] = value
                break
    return {"senses": senses} if senses else {}


def extract_proficiencies(raw_fields: Mapping[str, Any], record: Mapping[str, Any]) -> Dict[str, Any]:
    text = _lookup_single(raw_fields, "proficiencies", "proficienciesAndLanguages")
    if text is None:
        return {}

    result: Dict[str, Any] = {}
    for field, pattern in _PROFICIENCY_BLOCKS:
        match = pattern.search(text)
        if not match:
            continue
        items = _split_list(match.group(1))
        if items:
            result[field] = items
    return result


def extract_equipment(raw_fields: Mapping[str, Any], record: Mapping[str, Any]) -> Dict[str, Any]:
    names: List[str] = []
    for key, value in raw_fields.items():
        lowered = key.lower()
        if WEAPON_TABLE_MARKER not in lowered or WEAPON_NAME_TOKEN not in lowered:
            continue
        text = _as_text(value)
        if text is not None:
            names.append(text.strip())
    equipment = _unique(names)
    return {"equipment": equipment} if equipment else {}


def extract_class_features(raw_fields: Mapping[str, Any], record: Mapping[str, Any]) -> Dict[str, Any]:
    actions = _lookup_single(raw_fields, "classFeatures", "classFeatures")
    return {"classFeatures": [actions]} if actions is not None else {}


def extract_spells(raw_fields: Mapping[str, Any], record: Mapping[str, Any]) -> Dict[str, Any]:
    names: List[str] = []
    for key, value in raw_fields.items():
        if not _SPELL_NAME_RE.match(key.strip()):
            continue
        text = _as_text(value)
        if text is not None:
            names.append(text.strip())
    spells = _unique(names)
    return {"spells": spells} if spells else {}


def extract_spellcasting_ability(raw_fields: Mapping[str, Any], record: Mapping[str, Any]) -> Dict[str, Any]:
    ability = determine_spellcasting_ability(record.get("classLevel"))
    return {"spellcastingAbility": ability} if ability else {}


def _combined_note_blocks(raw_fields: Mapping[str, Any]) -> Optional[str]:
    notes = []
    for field in NOTE_BLOCK_FIELDS:
        value = _as_text(resolve_exact(raw_fields, [field]))
        if value is not None:
            notes.append(value.strip())
    return "\n\n".join(notes) if notes else None


def extract_personality(raw_fields: Mapping[str, Any], record: Mapping[str, Any]) -> Dict[str, Any]:
    """Personality widgets are matched exactly; substring matching let "Notes" bleed into unrelated widgets."""
    result = _lookup_section(raw_fields, "personality", strip=True)
    combined = _combined_note_blocks(raw_fields)
    if combined is not None:
        result["additionalNotesField"] = combined
    return result


def extract_features(raw_fields: Mapping[str, Any], record: Mapping[str, Any]) -> Dict[str, Any]:
    return _lookup_section(raw_fields, "features", strip=True)


# Spellcasting must run after combat, which supplies classLevel.
SECTION_EXTRACTORS: Tuple[Tuple[str, Extractor], ...] = (
    ("identity", extract_identity),
    ("combat", extract_combat),
    ("abilityScores", extract_ability_scores),
    ("savingThrows", extract_saving_throws),
    ("skills", extract_skills),
    ("defenses", extract_defenses),
    ("senses", extract_senses),
    ("proficiencies", extract_proficiencies),
    ("equipment", extract_equipment),
    ("classFeatures", extract_class_features),
    ("spells", extract_spells),
    ("spellcasting", extract_spellcasting_ability),
    ("personality", extract_personality),
    ("features", extract_features),
)
