import pytest

from fretpos import constants
from fretpos.fretboard import FretOccurrence, build_fret_map
from fretpos.mode import resolve_mode
from fretpos.scale import IONIAN, MODE_TEMPLATES, Root


def test_occurrence_unpacks() -> None:
    name, fret, semi = FretOccurrence(name="E♭", fret=1, semi=3)
    assert (name, fret, semi) == ("E♭", 1, 3)


def test_c_major_b_string() -> None:
    mode = resolve_mode(Root.C, MODE_TEMPLATES[IONIAN])
    fret_map = build_fret_map(mode.semis, mode.notes)
    assert len(fret_map) == constants.NUM_STRINGS
    b_string = fret_map[constants.B_STRING]
    assert [(o.name, o.fret) for o in b_string] == [
        ("B", 0),
        ("C", 1),
        ("D", 3),
        ("E", 5),
        ("F", 6),
        ("G", 8),
        ("A", 10),
        ("B", 12),
        ("C", 13),
        ("D", 15),
        ("E", 17),
        ("F", 18),
        ("G", 20),
        ("A", 22),
    ]


def test_chromatic_pitch_outside_scale_is_absent() -> None:
    mode = resolve_mode(Root.C, MODE_TEMPLATES[IONIAN])
    fret_map = build_fret_map(mode.semis, mode.notes)
    # F# (fret 2 on the high e) is not in C major
    assert 2 not in [o.fret for o in fret_map[constants.HIGH_E_STRING]]


@pytest.mark.parametrize("root", list(Root))
@pytest.mark.parametrize("template_index", range(len(MODE_TEMPLATES)))
def test_fret_map_shape(root: Root, template_index: int) -> None:
    mode = resolve_mode(root, MODE_TEMPLATES[template_index])
    fret_map = build_fret_map(mode.semis, mode.notes)
    for open_semi, occurrences in zip(constants.OPEN_STRINGS, fret_map):
        frets = [o.fret for o in occurrences]
        assert frets == sorted(frets)
        assert frets[0] >= constants.MIN_FRET
        assert frets[-1] <= constants.MAX_FRET
        for occ in occurrences:
            assert occ.semi == (open_semi + occ.fret) % constants.MAX_NOTES
            assert mode.notes[mode.semis.index(occ.semi)] == occ.name
    # Both E strings carry the same notes
    assert fret_map[constants.HIGH_E_STRING] == fret_map[constants.LOW_E_STRING]
