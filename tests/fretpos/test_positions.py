from dataclasses import replace
from typing import List

import pytest

from fretpos import constants
from fretpos.fretboard import FretMap, FretOccurrence, build_fret_map
from fretpos.mode import resolve_mode
from fretpos.positions import (
    NoteGroup,
    Position,
    PositionInstance,
    find_position,
    generate_positions,
    pick_trio,
    positions_for,
    rank_positions_by_proximity,
    span_overlap,
)
from fretpos.scale import DORIAN, IONIAN, MIXOLYDIAN, MODE_TEMPLATES, Root


def c_major_fret_map() -> FretMap:
    mode = resolve_mode(Root.C, MODE_TEMPLATES[IONIAN])
    return build_fret_map(mode.semis, mode.notes)


C_MAJOR_NOTES = ["C", "D", "E", "F", "G", "A", "B"]


def group(*frets: int) -> NoteGroup:
    return [FretOccurrence(name="X", fret=f, semi=0) for f in frets]


def cells(notes: NoteGroup) -> List[str]:
    return [f"{o.name}{o.fret}" for o in notes]


def shift_string(fret_map: FretMap, str_index: int, steps: int) -> FretMap:
    shifted = list(fret_map)
    shifted[str_index] = [replace(o, fret=o.fret + steps) for o in fret_map[str_index]]
    return shifted


def test_c_ionian_position_one() -> None:
    positions = positions_for(Root.C, MODE_TEMPLATES[IONIAN])
    first = positions[0]
    assert first.id == 1
    assert first.label == "D, E"
    assert first.span_display == "1–5, 13–17"
    low = first.instances[0]
    assert (low.fret_min, low.fret_max) == (1, 5)
    assert [cells(g) for g in low.strings if g is not None] == [
        ["F1", "G3", "A5"],
        ["D3", "E5"],
        ["A2", "B4", "C5"],
        ["E2", "F3", "G5"],
        ["B2", "C3", "D5"],
        ["F1", "G3", "A5"],
    ]


def test_c_ionian_spans() -> None:
    positions = positions_for(Root.C, MODE_TEMPLATES[IONIAN])
    assert [p.span_display for p in positions] == [
        "1–5, 13–17",
        "3–7, 15–19",
        "5–9, 17–21",
        "7–10, 19–22",
        "8–12",
        "10–14",
        "0–4, 12–16",
    ]


def test_c_ionian_pair_labels() -> None:
    positions = positions_for(Root.C, MODE_TEMPLATES[IONIAN])
    assert [p.label for p in positions] == [
        "D, E",
        "E, F",
        "F, G",
        "G, A",
        "A, B",
        "B, C",
        "C, D",
    ]


def test_string_start_degrees() -> None:
    # Position i starts each trio string on a fixed degree shifted by i
    degree_of = {name: i for i, name in enumerate(C_MAJOR_NOTES)}
    positions = positions_for(Root.C, MODE_TEMPLATES[IONIAN])
    for i, position in enumerate(positions):
        for instance in position.instances:
            b_pair = instance.strings[constants.B_STRING]
            assert b_pair is not None
            assert degree_of[b_pair[0].name] == (1 + i) % 7
            for str_index, offset in constants.STRING_DEGREE_OFFSETS.items():
                trio = instance.strings[str_index]
                assert trio is not None
                assert degree_of[trio[0].name] == (offset + i) % 7


@pytest.mark.parametrize("root", list(Root))
@pytest.mark.parametrize("template_index", range(len(MODE_TEMPLATES)))
def test_position_structure(root: Root, template_index: int) -> None:
    positions = positions_for(root, MODE_TEMPLATES[template_index])
    assert [p.id for p in positions] == list(range(1, 8))
    for position in positions:
        assert position.instances
        for instance in position.instances:
            assert len(instance.strings) == constants.NUM_STRINGS
            for str_index, notes in enumerate(instance.strings):
                assert notes is not None
                expected = 2 if str_index == constants.B_STRING else 3
                assert len(notes) == expected
                for occ in notes:
                    assert instance.fret_min <= occ.fret <= instance.fret_max
            assert (
                instance.strings[constants.LOW_E_STRING]
                == instance.strings[constants.HIGH_E_STRING]
            )
            assert constants.MIN_FRET <= instance.fret_min
            assert instance.fret_max <= constants.MAX_FRET
        mins = [inst.fret_min for inst in position.instances]
        assert mins == sorted(mins)


def test_span_overlap() -> None:
    assert span_overlap(3, 5, group(1, 3, 5)) == 2
    assert span_overlap(3, 5, group(6, 7, 8)) == -1
    assert span_overlap(3, 5, group(7, 8, 9)) == -2


def test_pick_trio_tolerance_boundary() -> None:
    touching = group(6, 7, 8)
    apart = group(7, 8, 9)
    assert pick_trio([touching], 3, 5) == touching
    assert pick_trio([apart], 3, 5) is None
    assert pick_trio([apart], 3, 5, tolerance=-2) == apart
    assert pick_trio([touching], 3, 5, tolerance=0) is None
    assert pick_trio([], 3, 5) is None


def test_pick_trio_prefers_best_then_first() -> None:
    far = group(13, 15, 17)
    near = group(1, 3, 5)
    also_near = group(2, 4, 5)
    assert pick_trio([far, near], 3, 5) == near
    assert pick_trio([near, also_near], 3, 5) == near


def test_generate_positions_accepts_gap_at_tolerance() -> None:
    # Moving the high e up five frets leaves a one-fret gap to the pair
    fret_map = shift_string(c_major_fret_map(), constants.HIGH_E_STRING, 5)
    first = generate_positions(fret_map, C_MAJOR_NOTES)[0]
    assert len(first.instances) == 2


def test_generate_positions_drops_incomplete_anchors() -> None:
    # Six frets up leaves a two-fret gap, beyond the default tolerance
    fret_map = shift_string(c_major_fret_map(), constants.HIGH_E_STRING, 6)
    positions = generate_positions(fret_map, C_MAJOR_NOTES)
    assert len(positions) == 7
    first = positions[0]
    assert first.instances == []
    assert first.span_display == "?"
    assert first.label == "D, E"
    relaxed = generate_positions(fret_map, C_MAJOR_NOTES, overlap_tolerance=-2)
    assert len(relaxed[0].instances) == 2


def test_generate_positions_without_anchors() -> None:
    fret_map = c_major_fret_map()
    fret_map[constants.B_STRING] = []
    positions = generate_positions(fret_map, C_MAJOR_NOTES)
    assert [p.label for p in positions][:2] == ["D, E", "E, F"]
    assert all(p.span_display == "?" for p in positions)


def test_find_position() -> None:
    positions = positions_for(Root.C, MODE_TEMPLATES[IONIAN])
    found = find_position(positions, 3)
    assert found is not None and found.id == 3
    assert find_position(positions, 8) is None


def test_rank_without_reference() -> None:
    positions = positions_for(Root.G, MODE_TEMPLATES[MIXOLYDIAN])
    assert rank_positions_by_proximity(positions, None) == [1, 2, 3, 4, 5, 6, 7]
    assert rank_positions_by_proximity(positions, None, count=3) == [1, 2, 3]


def test_rank_against_own_position() -> None:
    positions = positions_for(Root.C, MODE_TEMPLATES[IONIAN])
    from_first = rank_positions_by_proximity(positions, positions[0])
    from_fifth = rank_positions_by_proximity(positions, positions[4])
    assert from_first[0] == 1
    assert from_fifth[0] == 5
    assert from_first != from_fifth
    assert sorted(from_first) == list(range(1, 8))


def test_rank_across_keys() -> None:
    d_dorian = positions_for(Root.D, MODE_TEMPLATES[DORIAN])
    g_mixolydian = positions_for(Root.G, MODE_TEMPLATES[MIXOLYDIAN])
    assert d_dorian[1].span_display == g_mixolydian[5].span_display
    ranked = rank_positions_by_proximity(g_mixolydian, d_dorian[1])
    assert ranked[0] == 6
    assert ranked[:3] == [6, 7, 5]


def test_rank_ties_break_by_id() -> None:
    empty = [Position(id=i, label="", span_display="?", instances=[]) for i in (3, 1, 2)]
    reference = Position(
        id=1,
        label="",
        span_display="1–5",
        instances=[PositionInstance(strings=[], fret_min=1, fret_max=5)],
    )
    assert rank_positions_by_proximity(empty, reference) == [1, 2, 3]
