import pytest

from casevis.core.case_data import load_case, parse_case


def test_embedded_case():
    case = load_case()
    assert case.title == "Medical Case Visualizer"
    assert case.notes.startswith("Attending:First Name (LF) 301\nChief Complaint:")
    assert "necrotic gut" in case.notes
    assert len(case.summary_points) == 8
    assert case.summary_points[1] == "CT scan showed large bowel obstruction/cecal volvulus."
    assert case.summary_intro.startswith("Here is a chronological summary")


def test_case_file(tmp_path):
    path = tmp_path / "case.yaml"
    path.write_text(
        'notes: "Severe headache after a fall."\n'
        'summary_points:\n'
        '  - "Presented with headache."\n',
        encoding="utf-8",
    )
    case = load_case(str(path))
    assert case.notes == "Severe headache after a fall."
    assert case.summary_points == ["Presented with headache."]
    assert case.summary_intro == ""
    assert case.title == "Medical Case Visualizer"


def test_case_requires_notes():
    with pytest.raises(ValueError, match="'notes'"):
        parse_case("summary_points: []\n")


def test_case_points_must_be_strings():
    with pytest.raises(ValueError, match="summary_points"):
        parse_case('notes: "x"\nsummary_points: [1, 2]\n')


@pytest.mark.parametrize("yaml_text, message", [
    ('notes: "x"\nsummary_intro: [1]\n', "'summary_intro'"),
    ('notes: "x"\ntitle: 42\n', "'title'"),
    ('notes: "x\n', "not valid YAML"),
])
def test_malformed_case_raises_value_error(yaml_text, message):
    with pytest.raises(ValueError, match=message):
        parse_case(yaml_text, source="case.yaml")
