from sheet_extraction.sections import (
    SECTION_EXTRACTORS,
    extract_class_features,
    extract_combat,
    extract_defenses,
    extract_equipment,
    extract_identity,
    extract_personality,
    extract_proficiencies,
    extract_saving_throws,
    extract_senses,
    extract_skills,
    extract_spellcasting_ability,
    extract_spells,
)


def test_identity_keeps_only_non_empty_values():
    raw = {"CharacterName": "Mogar IX", "PLAYER NAME": "", "RACE ": "Dragonborn"}
    assert extract_identity(raw, {}) == {"characterName": "Mogar IX", "race": "Dragonborn"}


def test_combat_values_stay_literal_strings():
    raw = {"AC": "13 (16 with shield)", "MaxHP": "35", "Speed": "30 ft. (Walking)"}
    combat = extract_combat(raw, {})
    assert combat["ac"] == "13 (16 with shield)"
    assert combat["maxHP"] == "35"
    assert combat["speed"] == "30 ft. (Walking)"
    assert "currentHP" not in combat


def test_saving_throws_nest_under_ability_names():
    raw = {"ST Strength": "+5", "ST Constitution": "+5"}
    assert extract_saving_throws(raw, {}) == {"savingThrows": {"strength": "+5", "constitution": "+5"}}
    assert extract_saving_throws({}, {}) == {}


def test_skills_match_truncated_sheet_names():
    raw = {"Animal Handling": "+2", "Sleight of Hand": "+4", "Athletics": "+5"}
    skills = extract_skills(raw, {})["skills"]
    assert skills == {"Animal": "+2", "Athletics": "+5", "SleightofHand": "+4"}


def test_defenses_parse_resistance_list():
    result = extract_defenses({"Defenses": "Resistances - Fire, Poison\nSome other text"}, {})
    assert result["defenses"].startswith("Resistances")
    assert result["damageResistances"] == ["Fire", "Poison"]


def test_defenses_never_emit_immunities_or_vulnerabilities():
    result = extract_defenses({"Defenses": "Immunities - Poison\nVulnerabilities - Cold"}, {})
    assert result == {"defenses": "Immunities - Poison\nVulnerabilities - Cold"}


def test_senses_only_record_the_named_sense():
    senses = extract_senses({"AdditionalSenses": "Darkvision 60 ft."}, {})["senses"]
    assert senses == {"darkvision": "Darkvision 60 ft."}


def test_senses_skip_text_that_names_no_known_sense():
    assert extract_senses({"AdditionalSenses": "Keen Smell"}, {}) == {}


def test_proficiency_blocks_split_on_headers():
    text = (
        "=== ARMOR ===\n"
        "Light Armor, Shields\n"
        "\n"
        "=== WEAPONS ===\n"
        "Simple Weapons,  Martial Weapons\n"
        "\n"
        "=== LANGUAGES ===\n"
        "Common, Draconic"
    )
    result = extract_proficiencies({"ProficienciesLang": text}, {})
    assert result == {
        "armorProficiencies": ["Light Armor", "Shields"],
        "weaponProficiencies": ["Simple Weapons", "Martial Weapons"],
        "languages": ["Common", "Draconic"],
    }


def test_proficiency_headers_accept_colon_style():
    text = "LANGUAGES:\nCommon, Elvish\n\nTOOLS:\nThieves' Tools"
    assert extract_proficiencies({"ProficienciesLang": text}, {}) == {"languages": ["Common", "Elvish"]}


def test_proficiency_header_may_follow_other_words_on_its_line():
    text = "PROFICIENCIES & LANGUAGES\nCommon, Elvish"
    assert extract_proficiencies({"ProficienciesLang": text}, {}) == {"languages": ["Common", "Elvish"]}


def test_proficiency_items_containing_header_words_do_not_start_blocks():
    text = "=== ARMOR ===\nLight Armor, Shields\n\n=== WEAPONS ===\nSimple Weapons"
    result = extract_proficiencies({"ProficienciesLang": text}, {})
    assert result["armorProficiencies"] == ["Light Armor", "Shields"]
    assert result["weaponProficiencies"] == ["Simple Weapons"]


def test_short_keys_fill_absent_fields_through_substring_match():
    # Sheets without an XP or Acrobatics widget pick up INT and AC.
    assert extract_combat({"INT": "10"}, {})["experiencePoints"] == "10"
    assert extract_skills({"AC": "13"}, {})["skills"]["Acrobatics"] == "13"


def test_exact_keys_win_over_short_key_substrings():
    raw = {"INT": "10", "EXPERIENCE POINTS": "900", "AC": "13", "Acrobatics": "+0"}
    assert extract_combat(raw, {})["experiencePoints"] == "900"
    assert extract_skills(raw, {})["skills"]["Acrobatics"] == "+0"


def test_equipment_collects_weapon_names_in_order_without_duplicates():
    raw = {
        "Wpn Name": "Greataxe",
        "Wpn1 AtkBonus": "+5",
        "Wpn Name 2": "Handaxe",
        "Wpn Name 3": "Greataxe",
        "Wpn Name 4": "",
    }
    assert extract_equipment(raw, {}) == {"equipment": ["Greataxe", "Handaxe"]}


def test_spells_collect_numbered_spell_name_fields():
    raw = {"spellName0": "Fire Bolt", "spellName12": "Shield", "spellName3": "Fire Bolt", "spellNameX": "Nope"}
    assert extract_spells(raw, {}) == {"spells": ["Fire Bolt", "Shield"]}


def test_class_features_wrap_actions_text_in_a_list():
    assert extract_class_features({"Actions1": "Rage"}, {}) == {"classFeatures": ["Rage"]}


def test_spellcasting_reads_class_level_from_partial_record():
    assert extract_spellcasting_ability({}, {"classLevel": "Wizard 3"}) == {"spellcastingAbility": "INT"}
    assert extract_spellcasting_ability({}, {"classLevel": "Barbarian 3"}) == {}


def test_personality_combines_numbered_note_blocks():
    raw = {
        "Bonds": "  My crew  ",
        "AdditionalNotes": "fallback",
        "AdditionalNotes1": " First ",
        "AdditionalNotes2": "Second",
    }
    result = extract_personality(raw, {})
    assert result["bonds"] == "My crew"
    assert result["additionalNotesField"] == "First\n\nSecond"


def test_personality_uses_generic_notes_without_numbered_blocks():
    assert extract_personality({"Additional Notes": "fallback"}, {}) == {"additionalNotesField": "fallback"}


def test_extractors_cover_every_section_once():
    names = [name for name, _ in SECTION_EXTRACTORS]
    assert len(names) == len(set(names))
    assert names.index("combat") < names.index("spellcasting")
