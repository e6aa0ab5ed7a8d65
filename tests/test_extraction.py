from casevis.core.case_data import load_case
from casevis.core.extraction import extract_organ_highlights
from casevis.core.mapping import DEFAULT_MAPPINGS


def pairs(highlights):
    return [(h.organ_name, h.color) for h in highlights]


def test_necrotic_gut_highlights_abdomen_once_each():
    highlights = extract_organ_highlights("History of necrotic gut requiring intervention.")
    assert pairs(highlights) == [("06_Abdomen", "#8B0000"), ("07_Lower_abdomen", "#8B0000")]
    assert highlights[0].description == "Necrotic Gut (Abdomen Area)"
    assert highlights[1].description == "Necrotic Gut (Lower Abdomen Area)"


def test_no_match_returns_empty_list():
    assert extract_organ_highlights("Routine follow-up, no complaints.") == []
    assert extract_organ_highlights("") == []


def test_repeated_terms_do_not_duplicate():
    text = "necrotic gut ... NECROTIC GUT ... necrotic gut"
    assert len(extract_organ_highlights(text)) == 2


def test_same_region_different_colors_kept_in_table_order():
    text = "abdominal pain with cecal volvulus"
    assert pairs(extract_organ_highlights(text)) == [
        ("06_Abdomen", "#FF6347"),
        ("07_Lower_abdomen", "#FF6347"),
        ("06_Abdomen", "#FFA500"),
        ("07_Lower_abdomen", "#FFA500"),
    ]


def test_overlapping_region_same_color_deduplicated():
    highlights = extract_organ_highlights("back pain after right nephrectomy", DEFAULT_MAPPINGS)
    assert pairs(highlights) == [
        ("21_Lower_back", "#A9A9A9"),
        ("20_Back", "#4CAF50"),
        ("21_Lower_back", "#4CAF50"),
    ]


def test_every_matching_mapping_contributes():
    text = "headache and arm injury"
    organs = {h.organ_name for h in extract_organ_highlights(text)}
    assert {"01_Scalp", "SA_01_FOREHEAD", "SA_02_TEMPLES", "10_Upper_arms", "14_Hand_palms"} <= organs


def test_demo_case_notes():
    highlights = extract_organ_highlights(load_case().notes)
    assert len(set(pairs(highlights))) == len(highlights)
    assert pairs(highlights) == [
        ("06_Abdomen", "#FF6347"),
        ("07_Lower_abdomen", "#FF6347"),
        ("06_Abdomen", "#FFA500"),
        ("07_Lower_abdomen", "#FFA500"),
        ("06_Abdomen", "#8B0000"),
        ("07_Lower_abdomen", "#8B0000"),
        ("05_Chest", "#1E90FF"),
        ("21_Lower_back", "#A9A9A9"),
    ]
