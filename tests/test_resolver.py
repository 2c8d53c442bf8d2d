from sheet_extraction.resolver import resolve, resolve_exact


def test_resolve_prefers_exact_match_ignoring_case_and_outer_whitespace():
    raw = {"maxhp ": "35", "MaxHP Bonus": "99"}
    assert resolve(raw, ["MaxHP"]) == "35"


def test_resolve_falls_back_to_whitespace_insensitive_substring():
    assert resolve({" Max HP ": "35"}, ["MaxHP"]) == "35"


def test_resolve_checks_every_candidate_exactly_before_substring_matching():
    raw = {"Strength Mod": "+3", "STR": "17"}
    # "Strength" would hit "Strength Mod" by substring, but "STR" matches exactly.
    assert resolve(raw, ["Strength", "STR"]) == "17"


def test_resolve_substring_matches_in_either_direction():
    assert resolve({"Animal Handling": "+2"}, ["Animal"]) == "+2"
    assert resolve({"Init": "+1"}, ["Initiative"]) == "+1"


def test_resolve_skips_blank_values():
    raw = {"MaxHP": "   ", "Max HP": "40"}
    assert resolve(raw, ["MaxHP"]) == "40"


def test_resolve_returns_none_when_nothing_matches():
    assert resolve({"Speed": "30 ft."}, ["Alignment"]) is None
    assert resolve({}, ["MaxHP"]) is None


def test_resolve_exact_never_uses_substrings():
    raw = {"Additional Notes 1": "Met the duke", "Bonds ": "My crew"}
    assert resolve_exact(raw, ["Notes"]) is None
    assert resolve_exact(raw, ["bonds"]) == "My crew"


def test_resolve_exact_returns_first_candidate_in_order():
    raw = {"Backstory": "short", "Character Backstory": "long"}
    assert resolve_exact(raw, ["Character Backstory", "Backstory"]) == "long"
