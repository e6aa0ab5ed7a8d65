from casevis.core.case_data import load_case
from casevis.core.mapping import parse_mappings
from casevis.core.phrases import derive_clickable_phrases


def test_ct_scan_point_yields_both_alternatives():
    point = "CT scan showed large bowel obstruction/cecal volvulus."
    phrases = derive_clickable_phrases([point])
    assert phrases == ["large bowel obstruction", "cecal volvulus"]
    for phrase in phrases:
        assert phrase in point


def test_casing_preserved_and_duplicates_collapse():
    points = ["Severe Abdominal Pain at night.", "Abdominal Pain again.", "abdominal pain resolved."]
    assert derive_clickable_phrases(points) == ["Abdominal Pain", "abdominal pain"]


def test_organ_names_match_whole_words_only():
    points = [
        "Marked region 06_Abdomen on the chart.",
        "Region x06_Abdomenx is not a name.",
        "Lower: 07_LOWER_ABDOMEN.",
    ]
    assert derive_clickable_phrases(points) == ["06_Abdomen", "07_LOWER_ABDOMEN"]


def test_pattern_hits_come_before_organ_names():
    points = ["05_Chest shows respiratory distress."]
    assert derive_clickable_phrases(points) == ["respiratory distress", "05_Chest"]


def test_no_matches():
    assert derive_clickable_phrases(["Patient recovered well."]) == []
    assert derive_clickable_phrases([]) == []


def test_custom_table():
    mappings = parse_mappings(
        '- pattern: "chest pain"\n'
        '  highlights:\n'
        '    - organ: "Heart"\n'
        '      color: "#FF0000"\n'
    )
    points = ["Chest pain radiating; heart sounds normal; hearts of palm."]
    assert derive_clickable_phrases(points, mappings) == ["Chest pain", "heart"]


def test_demo_summary():
    assert derive_clickable_phrases(load_case().summary_points) == [
        "abdominal pain",
        "large bowel obstruction",
        "cecal volvulus",
        "necrotic gut",
        "respiratory distress",
    ]
