import pytest

from casevis.core.annotate import (
    Segment,
    annotate_text,
    build_phrase_pattern,
    render_notes_html,
    render_summary_html,
    split_on_phrase,
)


def joined(segments):
    return "".join(s.text for s in segments)


def test_longest_phrase_wins():
    segments = annotate_text("large bowel obstruction/cecal volvulus", ["bowel", "bowel obstruction"])
    assert segments == [
        Segment("large "),
        Segment("bowel obstruction", clickable=True),
        Segment("/cecal volvulus"),
    ]


def test_matching_is_case_insensitive_and_keeps_text_casing():
    segments = annotate_text("Abdominal PAIN and abdominal pain", ["abdominal pain"])
    assert [s.text for s in segments if s.clickable] == ["Abdominal PAIN", "abdominal pain"]


@pytest.mark.parametrize("text, phrases", [
    ("CT scan showed large bowel obstruction/cecal volvulus.", ["large bowel obstruction", "cecal volvulus"]),
    ("necrotic gut", ["necrotic gut"]),
    ("a.b*c (d) [e]", ["b*c", "(d)", "[e]", "."]),
    ("nothing to see", ["absent"]),
    ("overlap abcd", ["abc", "bcd"]),
    ("x", []),
])
def test_segments_reconstruct_text(text, phrases):
    assert joined(annotate_text(text, phrases)) == text


def test_regex_metacharacters_are_literal():
    segments = annotate_text("dose 1.5 vs 105", ["1.5"])
    assert [s.text for s in segments if s.clickable] == ["1.5"]


def test_empty_candidates_give_one_plain_segment():
    assert annotate_text("plain text", []) == [Segment("plain text")]
    assert annotate_text("plain text", [""]) == [Segment("plain text")]
    assert build_phrase_pattern([]) is None


def test_empty_text():
    assert annotate_text("", ["x"]) == []


def test_split_on_phrase_first_occurrence_only():
    assert split_on_phrase("abc FOO def FOO ghi", "foo") == ("abc ", "FOO", " def FOO ghi")


def test_split_on_phrase_absent_or_empty():
    assert split_on_phrase("abc", None) is None
    assert split_on_phrase("abc", "") is None
    assert split_on_phrase("abc", "zzz") is None


def test_split_on_phrase_across_line_break_not_found():
    assert split_on_phrase("large bowel obstruction/cecal\nvolvulus", "cecal volvulus") is None


def test_notes_html_emphasizes_first_occurrence():
    page = render_notes_html("abc FOO def FOO ghi", phrase="foo", version=3)
    assert page.count("<mark") == 1
    assert '<mark id="phrase-target"' in page
    assert ">FOO</mark> def FOO ghi" in page
    assert "scrollIntoView" in page
    assert "phrase request 3" in page


def test_notes_html_without_phrase_is_verbatim():
    page = render_notes_html("a < b & c", phrase=None)
    assert "a &lt; b &amp; c" in page
    assert "<mark" not in page
    assert "scrollIntoView" not in page


def test_same_phrase_new_version_gives_new_document():
    first = render_notes_html("abc FOO", phrase="foo", version=1)
    second = render_notes_html("abc FOO", phrase="foo", version=2)
    assert first != second


def test_summary_html_marks_phrases_and_escapes():
    page = render_summary_html(["Pain <severe> with necrotic gut."], ["necrotic gut"], intro="Intro & more")
    assert "<p>Intro &amp; more</p>" in page
    assert "&lt;severe&gt;" in page
    assert 'class="clickable-phrase"' in page
    assert ">necrotic gut</span>" in page
