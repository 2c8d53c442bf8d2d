"""Declared shape of the canonical character record extracted from a sheet PDF."""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict


class _SheetModel(BaseModel):
    # Unknown keys are dropped rather than rejected.
    model_config = ConfigDict(extra="ignore")


class AbilityBlock(_SheetModel):
    strength: Optional[str] = None
    dexterity: Optional[str] = None
    constitution: Optional[str] = None
    intelligence: Optional[str] = None
    wisdom: Optional[str] = None
    charisma: Optional[str] = None


class SensesBlock(_SheetModel):
    darkvision: Optional[str] = None
    truesight: Optional[str] = None
    blindsight: Optional[str] = None
    tremorsense: Optional[str] = None


class SpellSlots(_SheetModel):
    firstLevel: Optional[str] = None
    secondLevel: Optional[str] = None
    thirdLevel: Optional[str] = None
    fourthLevel: Optional[str] = None
    fifthLevel: Optional[str] = None
    sixthLevel: Optional[str] = None
    seventhLevel: Optional[str] = None
    eighthLevel: Optional[str] = None
    ninthLevel: Optional[str] = None


class SpellBook(_SheetModel):
    byLevel: Optional[Dict[str, List[str]]] = None
    cantrips: Optional[List[str]] = None
    rituals: Optional[List[str]] = None
    prepared: Optional[List[str]] = None


class ExtractedCharacterData(_SheetModel):
    """Every attribute is optional; numeric-looking values stay strings."""

    # Identity
    characterName: Optional[str] = None
    playerName: Optional[str] = None
    race: Optional[str] = None
    background: Optional[str] = None
    alignment: Optional[str] = None

    # Combat
    classLevel: Optional[str] = None
    maxHP: Optional[str] = None
    currentHP: Optional[str] = None
    temporaryHP: Optional[str] = None
    ac: Optional[str] = None
    armorDescription: Optional[str] = None
    initiative: Optional[str] = None
    speed: Optional[str] = None
    proficiencyBonus: Optional[str] = None
    experiencePoints: Optional[str] = None
    hitDice: Optional[str] = None
    passivePerception: Optional[str] = None

    abilityScores: Optional[AbilityBlock] = None
    savingThrows: Optional[AbilityBlock] = None
    skills: Optional[Dict[str, str]] = None

    defenses: Optional[str] = None
    damageResistances: Optional[List[str]] = None
    damageImmunities: Optional[List[str]] = None
    damageVulnerabilities: Optional[List[str]] = None
    conditionImmunities: Optional[List[str]] = None

    senses: Optional[SensesBlock] = None
    languages: Optional[List[str]] = None

    classFeatures: Optional[List[str]] = None
    racialTraits: Optional[List[str]] = None
    feats: Optional[List[str]] = None
    traits: Optional[List[str]] = None

    spellSlots: Optional[SpellSlots] = None
    cantrips: Optional[List[str]] = None
    spells: Optional[List[str]] = None
    spellBook: Optional[SpellBook] = None
    spellcastingAbility: Optional[Literal["INT", "WIS", "CHA"]] = None

    weaponProficiencies: Optional[List[str]] = None
    armorProficiencies: Optional[List[str]] = None
    equipment: Optional[List[str]] = None

    personalityTraits: Optional[str] = None
    ideals: Optional[str] = None
    bonds: Optional[str] = None
    flaws: Optional[str] = None
    backstory: Optional[str] = None
    additionalNotesField: Optional[str] = None
    features: Optional[str] = None
    additionalFeatures: Optional[str] = None
    alliesOrganizations: Optional[str] = None
