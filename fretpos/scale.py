"""Note names, roots, mode templates and scale spelling for fretpos.

This module provides the twelve canonical roots, the four seventh-chord
qualities, the seven mode templates (rotations of the major scale) and the
speller that turns a root plus intervals into correctly lettered note names.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Dict, List, Optional, Tuple

from fretpos.constants import (
    MAJOR_INTERVALS,
    MAX_NOTES,
    SCALE_SIZE,
    make_enum_value_lookup,
)

FLAT = "♭"
"""Flat sign used in spelled note names and degree labels."""

SHARP = "#"
"""Sharp sign used in spelled note names and degree labels."""

LETTERS: List[str] = ["C", "D", "E", "F", "G", "A", "B"]
"""The seven note letters in scale order starting from C."""

LETTER_SEMITONES: Dict[str, int] = {
    "C": 0,
    "D": 2,
    "E": 4,
    "F": 5,
    "G": 7,
    "A": 9,
    "B": 11,
}
"""Pitch class of each natural letter."""


@unique
class Root(Enum):
    """The twelve selectable roots, one canonical spelling per pitch class.

    Values are semitone offsets from C. Accidentals use flat spellings
    (Db, Eb, Gb, Ab, Bb), so sharps are normalized on lookup.
    """

    C = 0
    Db = 1
    D = 2
    Eb = 3
    E = 4
    F = 5
    Gb = 6
    G = 7
    Ab = 8
    A = 9
    Bb = 10
    B = 11

    @property
    def display(self) -> str:
        """The root as written in note names and chord symbols, e.g. ``B♭``."""
        return self.name.replace("b", FLAT)

    def add_steps(self, steps: int) -> Root:
        """Add semitone steps to this root.

        Args:
            steps: Number of semitones to add (can be negative).

        Returns:
            The root reached after moving by the given steps.
        """
        return ROOT_VALUE_LOOKUP[(self.value + steps) % MAX_NOTES]

    @staticmethod
    def lookup(text: str) -> Optional[Root]:
        """Find the canonical root for a written root name.

        Accepts the display form (``B♭``), ASCII flats (``Bb``) and sharp
        spellings (``A#``, ``A♯``), which resolve to their flat equivalent.

        Args:
            text: A letter optionally followed by one accidental.

        Returns:
            The matching root, or None if the spelling is not one of the
            accepted forms.
        """
        return ROOT_NAME_LOOKUP.get(text)


ROOT_VALUE_LOOKUP: Dict[int, Root] = make_enum_value_lookup(Root)
"""Lookup table from pitch class (0-11) to Root."""


def _build_root_name_lookup() -> Dict[str, Root]:
    lookup: Dict[str, Root] = {}
    for root in Root:
        lookup[root.display] = root
        lookup[root.name] = root
    for flat_root in [Root.Db, Root.Eb, Root.Gb, Root.Ab, Root.Bb]:
        sharp_letter = LETTERS[LETTERS.index(flat_root.name[0]) - 1]
        lookup[sharp_letter + SHARP] = flat_root
        lookup[sharp_letter + "♯"] = flat_root
    return lookup


ROOT_NAME_LOOKUP = _build_root_name_lookup()
"""Lookup table from accepted root spellings to the canonical Root."""


@unique
class ChordQuality(Enum):
    """The four seventh-chord qualities produced by the modes.

    Values are the quality keys used in persisted chord slots.
    """

    Major7 = "maj7"
    Minor7 = "m7"
    Dominant7 = "7"
    HalfDiminished7 = "m7♭5"

    @property
    def minor_type(self) -> bool:
        """True when the chord has a minor third."""
        return self in (ChordQuality.Minor7, ChordQuality.HalfDiminished7)

    @staticmethod
    def lookup(key: str) -> Optional[ChordQuality]:
        """Find the quality for a persisted quality key, or None if unknown."""
        return QUALITY_KEY_LOOKUP.get(key)


QUALITY_KEY_LOOKUP: Dict[str, ChordQuality] = {q.value: q for q in ChordQuality}
"""Lookup table from quality key to ChordQuality."""


def parse_note_name(name: str) -> Tuple[str, int]:
    """Split a note name into its letter and accidental offset.

    Args:
        name: A letter followed by any number of ``#``/``♯`` or ``♭``/``b``.

    Returns:
        Tuple of (letter, accidental offset in semitones).

    Raises:
        ValueError: If the name does not start with a letter A-G.
    """
    if not name or name[0] not in LETTER_SEMITONES:
        raise ValueError(f"Invalid note name: {name!r}")
    offset = 0
    for ch in name[1:]:
        if ch in (SHARP, "♯"):
            offset += 1
        elif ch in (FLAT, "b"):
            offset -= 1
    return name[0], offset


def note_semitone(name: str) -> int:
    """Return the pitch class (0-11) of a note name."""
    letter, offset = parse_note_name(name)
    return (LETTER_SEMITONES[letter] + offset) % MAX_NOTES


def accidental_to_string(offset: int) -> str:
    """Render an accidental offset as sharps or flats.

    Args:
        offset: Semitone offset between -2 and 2.

    Returns:
        The accidental marks, empty for a natural.

    Raises:
        ValueError: If the offset is beyond a double sharp or double flat.
    """
    if offset < -2 or offset > 2:
        raise ValueError(f"Unsupported accidental offset: {offset}")
    elif offset < 0:
        return FLAT * -offset
    else:
        return SHARP * offset


def spell_scale(root_name: str, intervals: List[int]) -> List[str]:
    """Spell a seven-note scale so each letter appears exactly once.

    Letters are assigned cyclically from the root's letter; each letter then
    takes the smallest accidental that lands on the target pitch class.

    Args:
        root_name: The root note name, e.g. ``"E♭"`` or ``"F#"``.
        intervals: Seven ascending semitone offsets from the root, starting at 0.

    Returns:
        The seven spelled note names in scale order.
    """
    root_letter, _ = parse_note_name(root_name)
    root_letter_index = LETTERS.index(root_letter)
    root_semi = note_semitone(root_name)
    notes: List[str] = []
    for i, interval in enumerate(intervals):
        target = (root_semi + interval) % MAX_NOTES
        letter = LETTERS[(root_letter_index + i) % SCALE_SIZE]
        diff = target - LETTER_SEMITONES[letter]
        if diff > 6:
            diff -= MAX_NOTES
        elif diff < -6:
            diff += MAX_NOTES
        notes.append(letter + accidental_to_string(diff))
    return notes


def degree_label(index: int, interval: int) -> str:
    """Label one scale degree relative to the major scale.

    Args:
        index: 0-indexed scale degree.
        interval: The mode's semitone offset at that degree.

    Returns:
        The degree number with any accidental, e.g. ``"♭3"`` or ``"#4"``.
    """
    base = str(index + 1)
    diff = interval - MAJOR_INTERVALS[index]
    if -2 <= diff <= 2:
        return accidental_to_string(diff) + base
    else:
        return base


@dataclass(frozen=True)
class ModeTemplate:
    """A mode before it is given a root.

    The template fixes the interval pattern and the seventh chord the mode
    produces; resolving it against a root yields a Mode.
    """

    key: str
    """Stable identifier, e.g. ``"dorian"``."""
    name: str
    """Display name, e.g. ``"Dorian"``."""
    intervals: List[int]
    """Seven semitone offsets from the root, starting at 0."""
    quality: ChordQuality
    """Quality of the seventh chord built on the mode's root."""
    chord_degree_indices: List[int]
    """Scale-degree indices that form the seventh chord."""

    def __post_init__(self) -> None:
        assert len(self.intervals) == SCALE_SIZE
        assert self.intervals[0] == 0
        last_steps = -1
        for steps in self.intervals:
            assert steps > last_steps and steps < MAX_NOTES
            last_steps = steps

    @property
    def chord_degrees(self) -> str:
        """The chord's degree formula, e.g. ``"1 ♭3 5 ♭7"``."""
        return " ".join(
            degree_label(i, self.intervals[i]) for i in self.chord_degree_indices
        )


SEVENTH_CHORD_DEGREES: List[int] = [0, 2, 4, 6]
"""Degree indices 1-3-5-7 that build every mode's seventh chord."""

MODE_TEMPLATES: List[ModeTemplate] = [
    ModeTemplate(
        "ionian",
        "Ionian",
        [0, 2, 4, 5, 7, 9, 11],
        ChordQuality.Major7,
        SEVENTH_CHORD_DEGREES,
    ),
    ModeTemplate(
        "dorian",
        "Dorian",
        [0, 2, 3, 5, 7, 9, 10],
        ChordQuality.Minor7,
        SEVENTH_CHORD_DEGREES,
    ),
    ModeTemplate(
        "phrygian",
        "Phrygian",
        [0, 1, 3, 5, 7, 8, 10],
        ChordQuality.Minor7,
        SEVENTH_CHORD_DEGREES,
    ),
    ModeTemplate(
        "lydian",
        "Lydian",
        [0, 2, 4, 6, 7, 9, 11],
        ChordQuality.Major7,
        SEVENTH_CHORD_DEGREES,
    ),
    ModeTemplate(
        "mixolydian",
        "Mixolydian",
        [0, 2, 4, 5, 7, 9, 10],
        ChordQuality.Dominant7,
        SEVENTH_CHORD_DEGREES,
    ),
    ModeTemplate(
        "aeolian",
        "Aeolian",
        [0, 2, 3, 5, 7, 8, 10],
        ChordQuality.Minor7,
        SEVENTH_CHORD_DEGREES,
    ),
    ModeTemplate(
        "locrian",
        "Locrian",
        [0, 1, 3, 5, 6, 8, 10],
        ChordQuality.HalfDiminished7,
        SEVENTH_CHORD_DEGREES,
    ),
]
"""The seven modes of the major scale, in degree order.

The template at index ``d`` is the mode built on degree ``d`` (0-indexed) of
the major scale, which the diatonic suggestion relies on.
"""

IONIAN = 0
DORIAN = 1
PHRYGIAN = 2
LYDIAN = 3
MIXOLYDIAN = 4
AEOLIAN = 5
LOCRIAN = 6


def _build_mode_lookup() -> Dict[str, int]:
    lookup: Dict[str, int] = {}
    for index, template in enumerate(MODE_TEMPLATES):
        lookup[template.key] = index
    assert len(lookup) == len(MODE_TEMPLATES)
    return lookup


MODE_LOOKUP = _build_mode_lookup()
"""Lookup from mode key (the lowercase mode name) to template index."""
