"""Sample character-sheet field maps and a fillable-PDF builder for them."""

from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence

from PyPDF2 import PdfWriter
from PyPDF2.generic import (
    ArrayObject,
    BooleanObject,
    DictionaryObject,
    FloatObject,
    NameObject,
    NumberObject,
    TextStringObject,
)

PAGE_WIDTH = 612
PAGE_HEIGHT = 792
WIDGET_HEIGHT = 14
WIDGET_WIDTH = 260
WIDGETS_PER_COLUMN = 48


def mogar_sheet_fields() -> Dict[str, str]:
    """Return the reference Barbarian 3 sheet as WotC/D&D Beyond widget names."""
    return {
        "CharacterName": "Mogar IX",
        "PLAYER NAME": "NinePiece2",
        "RACE ": "Dragonborn",
        "BACKGROUND": "Soldier",
        "Alignment": "Chaotic Neutral",
        "CLASS  LEVEL": "Barbarian 3",
        "EXPERIENCE POINTS": "900",
        "MaxHP": "35",
        "AC": "13",
        "Init": "+0",
        "Speed": "30 ft. (Walking)",
        "ProfBonus": "+2",
        "Total": "3d12",
        "Passive1": "12",
        "STR": "17",
        "DEX": "11",
        "CON": "16",
        "INT": "10",
        "WIS": "10",
        "CHA": "10",
        "ST Strength": "+5",
        "ST Dexterity": "+0",
        "ST Constitution": "+5",
        "ST Intelligence": "+0",
        "ST Wisdom": "+0",
        "ST Charisma": "+0",
        "Acrobatics": "+0",
        "Animal": "+2",
        "Arcana": "+0",
        "Athletics": "+5",
        "Deception": "+0",
        "History": "+0",
        "Insight": "+0",
        "Intimidation": "+2",
        "Investigation": "+0",
        "Medicine": "+0",
        "Nature": "+0",
        "Perception": "+2",
        "Performance": "+0",
        "Persuasion": "+0",
        "Religion": "+0",
        "SleightofHand": "+0",
        "Stealth": "+0",
        "Survival": "+2",
        "Wpn Name": "Greataxe",
        "Wpn1 AtkBonus": "+5",
        "Wpn Name 2": "Handaxe",
        "Wpn2 AtkBonus": "+5",
        "Wpn Name 3": "Unarmed Strike",
        "Wpn3 AtkBonus": "+5",
        "Defenses": "Resistances - Fire",
        "ProficienciesLang": (
            "=== ARMOR ===\n"
            "Light Armor, Medium Armor, Shields\n"
            "\n"
            "=== WEAPONS ===\n"
            "Martial Weapons, Simple Weapons\n"
            "\n"
            "=== LANGUAGES ===\n"
            "Common, Draconic"
        ),
        "Actions1": "Rage: 3/Long Rest. Reckless Attack. Danger Sense.",
        "PersonalityTraits": "I face problems head-on.",
        "Ideals": "Might. The strongest are meant to rule.",
        "Bonds": "I fight for those who cannot fight for themselves.",
        "Flaws": "I have little respect for anyone who is not a proven warrior.",
        "FEATURES  TRAITS": "Breath Weapon (Fire). Unarmored Defense. Military Rank.",
        "AdditionalNotes1": "Served in the Ninth Legion.",
        "AdditionalNotes2": "Owes a debt to the quartermaster.",
    }


def lex_omnis_sheet_fields() -> Dict[str, str]:
    """Return a Wizard 3 sheet with a spell list and no senses entry."""
    return {
        "CharacterName": "Lex Omnis",
        "PLAYER NAME": "SidTheScienceKid7",
        "RACE ": "Human",
        "BACKGROUND": "Custom Background",
        "Alignment": "Lawful Neutral",
        "CLASS  LEVEL": "Wizard 3",
        "EXPERIENCE POINTS": "900",
        "MaxHP": "20",
        "AC": "10",
        "Init": "+0",
        "Speed": "30 ft. (Walking)",
        "ProfBonus": "+2",
        "Total": "3d6",
        "Passive1": "14",
        "STR": "9",
        "DEX": "10",
        "CON": "14",
        "INT": "16",
        "WIS": "15",
        "CHA": "14",
        "ST Strength": "-1",
        "ST Dexterity": "+0",
        "ST Constitution": "+2",
        "ST Intelligence": "+5",
        "ST Wisdom": "+4",
        "ST Charisma": "+2",
        "Acrobatics": "+0",
        "Animal": "+2",
        "Arcana": "+5",
        "Athletics": "-1",
        "Deception": "+2",
        "History": "+5",
        "Insight": "+4",
        "Intimidation": "+2",
        "Investigation": "+5",
        "Medicine": "+2",
        "Nature": "+3",
        "Perception": "+2",
        "Performance": "+2",
        "Persuasion": "+2",
        "Religion": "+3",
        "SleightofHand": "+0",
        "Stealth": "+0",
        "Survival": "+2",
        "Wpn Name": "Quarterstaff",
        "Wpn1 AtkBonus": "+1",
        "ProficienciesLang": (
            "=== WEAPONS ===\n"
            "Daggers, Darts, Light Crossbows, Quarterstaffs, Slings\n"
            "\n"
            "=== LANGUAGES ===\n"
            "Common, Elvish, Draconic"
        ),
        "spellName0": "Fire Bolt",
        "spellName1": "Mage Hand",
        "spellName2": "Magic Missile",
        "spellName3": "Shield",
        "spellName4": "Magic Missile",
        "spellName5": "Misty Step",
        "PersonalityTraits": "I use polysyllabic words that convey the impression of great erudition.",
        "Ideals": "Knowledge. The path to power is through study.",
        "Bonds": "I have an ancient text that holds terrible secrets.",
        "Flaws": "I overlook obvious solutions in favor of complicated ones.",
        "Backstory": "Apprenticed at the Omnis Athenaeum.",
    }


SAMPLE_SHEETS = {
    "mogar": mogar_sheet_fields,
    "lex": lex_omnis_sheet_fields,
}


def _text_widget(name: str, value: str, index: int) -> DictionaryObject:
    column, row = divmod(index, WIDGETS_PER_COLUMN)
    left = 36 + column * (WIDGET_WIDTH + 20)
    top = PAGE_HEIGHT - 36 - row * (WIDGET_HEIGHT + 1)
    return DictionaryObject(
        {
            NameObject("/Type"): NameObject("/Annot"),
            NameObject("/Subtype"): NameObject("/Widget"),
            NameObject("/FT"): NameObject("/Tx"),
            NameObject("/F"): NumberObject(4),
            NameObject("/T"): TextStringObject(name),
            NameObject("/V"): TextStringObject(value),
            NameObject("/Rect"): ArrayObject(
                [
                    FloatObject(left),
                    FloatObject(top - WIDGET_HEIGHT),
                    FloatObject(left + WIDGET_WIDTH),
                    FloatObject(top),
                ]
            ),
        }
    )


def build_fillable_pdf(pages: Sequence[Mapping[str, str]]) -> bytes:
    """
    Write a PDF with one text widget per entry, one page per mapping.

    A name repeated on several pages becomes separate widgets, which is how the
    multi-page community templates carry corrected values on later pages.
    """
    writer = PdfWriter()
    all_fields = ArrayObject()
    for fields in pages:
        page = writer.add_blank_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
        annots = ArrayObject()
        for index, (name, value) in enumerate(fields.items()):
            ref = writer._add_object(_text_widget(name, value, index))
            annots.append(ref)
            all_fields.append(ref)
        page[NameObject("/Annots")] = annots

    writer._root_object[NameObject("/AcroForm")] = DictionaryObject(
        {
            NameObject("/Fields"): all_fields,
            NameObject("/NeedAppearances"): BooleanObject(True),
        }
    )
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def write_sheet_pdf(path: str | Path, pages: Sequence[Mapping[str, str]]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(build_fillable_pdf(pages))
    return path


def write_field_json(path: str | Path, fields: Mapping[str, Any]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(dict(fields), f, indent=2, ensure_ascii=False)
        f.write("\n")