from typing import List

import pytest

from fretpos.scale import (
    MODE_LOOKUP,
    MODE_TEMPLATES,
    ChordQuality,
    ModeTemplate,
    Root,
    accidental_to_string,
    degree_label,
    note_semitone,
    parse_note_name,
    spell_scale,
)

IONIAN_INTERVALS = [0, 2, 4, 5, 7, 9, 11]


@pytest.mark.parametrize(
    "root_name, intervals, expected",
    [
        ("C", IONIAN_INTERVALS, ["C", "D", "E", "F", "G", "A", "B"]),
        ("D♭", IONIAN_INTERVALS, ["D♭", "E♭", "F", "G♭", "A♭", "B♭", "C"]),
        ("G", IONIAN_INTERVALS, ["G", "A", "B", "C", "D", "E", "F#"]),
        ("B", [0, 2, 4, 6, 7, 9, 11], ["B", "C#", "D#", "E#", "F#", "G#", "A#"]),
        (
            "G♭",
            [0, 1, 3, 5, 6, 8, 10],
            ["G♭", "A♭♭", "B♭♭", "C♭", "D♭♭", "E♭♭", "F♭"],
        ),
        ("D", [0, 2, 3, 5, 7, 9, 10], ["D", "E", "F", "G", "A", "B", "C"]),
    ],
)
def test_spell_scale(root_name: str, intervals: List[int], expected: List[str]) -> None:
    assert spell_scale(root_name, intervals) == expected


@pytest.mark.parametrize("root", list(Root))
@pytest.mark.parametrize("template_index", range(len(MODE_TEMPLATES)))
def test_spell_scale_uses_every_letter_once(root: Root, template_index: int) -> None:
    template = MODE_TEMPLATES[template_index]
    notes = spell_scale(root.display, template.intervals)
    assert len(notes) == 7
    assert len({n[0] for n in notes}) == 7
    # Letters climb from the root's letter
    assert notes[0][0] == root.display[0]
    # Every spelled note sounds the intended pitch class
    for note, interval in zip(notes, template.intervals):
        assert note_semitone(note) == (root.value + interval) % 12


def test_parse_note_name() -> None:
    assert parse_note_name("C") == ("C", 0)
    assert parse_note_name("E♭") == ("E", -1)
    assert parse_note_name("Eb") == ("E", -1)
    assert parse_note_name("F#") == ("F", 1)
    assert parse_note_name("A♭♭") == ("A", -2)
    with pytest.raises(ValueError):
        parse_note_name("H")
    with pytest.raises(ValueError):
        parse_note_name("")


def test_accidental_limits() -> None:
    assert accidental_to_string(0) == ""
    assert accidental_to_string(2) == "##"
    assert accidental_to_string(-2) == "♭♭"
    with pytest.raises(ValueError):
        accidental_to_string(3)
    with pytest.raises(ValueError):
        accidental_to_string(-3)


def test_degree_label() -> None:
    assert degree_label(0, 0) == "1"
    assert degree_label(2, 3) == "♭3"
    assert degree_label(3, 6) == "#4"
    assert degree_label(4, 6) == "♭5"


def test_root_lookup() -> None:
    assert Root.lookup("B♭") == Root.Bb
    assert Root.lookup("Bb") == Root.Bb
    assert Root.lookup("A#") == Root.Bb
    assert Root.lookup("A♯") == Root.Bb
    assert Root.lookup("C#") == Root.Db
    assert Root.lookup("F#") == Root.Gb
    assert Root.lookup("G") == Root.G
    assert Root.lookup("Cb") is None
    assert Root.lookup("E#") is None
    assert Root.lookup("") is None


def test_root_display_and_steps() -> None:
    assert Root.Eb.display == "E♭"
    assert Root.C.display == "C"
    assert Root.A.add_steps(3) == Root.C
    assert Root.C.add_steps(-1) == Root.B
    assert Root.B.add_steps(13) == Root.C


def test_templates() -> None:
    assert [t.name for t in MODE_TEMPLATES] == [
        "Ionian",
        "Dorian",
        "Phrygian",
        "Lydian",
        "Mixolydian",
        "Aeolian",
        "Locrian",
    ]
    assert MODE_LOOKUP["mixolydian"] == 4
    for template in MODE_TEMPLATES:
        assert template.chord_degree_indices == [0, 2, 4, 6]
    assert MODE_TEMPLATES[0].chord_degrees == "1 3 5 7"
    assert MODE_TEMPLATES[1].chord_degrees == "1 ♭3 5 ♭7"
    assert MODE_TEMPLATES[4].chord_degrees == "1 3 5 ♭7"
    assert MODE_TEMPLATES[6].chord_degrees == "1 ♭3 ♭5 ♭7"


def test_template_rejects_bad_intervals() -> None:
    with pytest.raises(AssertionError):
        ModeTemplate(
            "bad", "Bad", [0, 2, 2, 5, 7, 9, 11], ChordQuality.Major7, [0, 2, 4, 6]
        )


def test_templates_are_rotations_of_major() -> None:
    # The template on major-scale degree d is the rotation starting at d
    for degree, template in enumerate(MODE_TEMPLATES):
        offset = IONIAN_INTERVALS[degree]
        rotated = sorted((i - offset) % 12 for i in IONIAN_INTERVALS)
        assert template.intervals == rotated
