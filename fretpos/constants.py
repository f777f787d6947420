"""Constants for the standard-tuning fretboard and the position model.

This module defines the fixed instrument geometry (six strings in standard
tuning, a 0-22 fret window), the reference major-scale intervals, and the
per-string degree offsets that give every position its shape.
"""

from enum import Enum
from typing import Dict, List, Type, TypeVar

E = TypeVar("E", bound=Enum)
"""Type variable for enum types."""


def make_enum_value_lookup(enum_type: Type[E]) -> Dict[int, E]:
    """Create a reverse lookup dictionary from enum values to enum instances.

    Args:
        enum_type: The enum class to create a lookup for.

    Returns:
        A dictionary mapping enum values to enum instances.
    """
    lookup: Dict[int, E] = {}
    for enum_val in enum_type.__members__.values():
        lookup[enum_val.value] = enum_val
    return lookup


MAX_NOTES = 12
"""Number of pitch classes in an octave."""

SCALE_SIZE = 7
"""Number of notes (and letters) in every supported mode."""

NUM_STRINGS = 6
"""Number of strings on the instrument."""

OPEN_STRINGS: List[int] = [4, 11, 7, 2, 9, 4]
"""Open-string pitch classes, index 0 is the 1st (highest) string.

Reads e, B, G, D, A, E. Index 5 is the low E, which shares its pitch class
with index 0.
"""

STRING_LABELS: List[str] = ["e", "B", "G", "D", "A", "E"]
"""Display label for each string index."""

MIN_FRET = 0
"""Lowest fret considered when mapping the neck (the open string)."""

MAX_FRET = 22
"""Highest fret considered when mapping the neck (inclusive)."""

MAJOR_INTERVALS: List[int] = [0, 2, 4, 5, 7, 9, 11]
"""Semitone offsets of the reference major (Ionian) scale."""

B_STRING = 1
"""Index of the string that carries two notes per position."""

HIGH_E_STRING = 0
"""Index of the 1st string."""

LOW_E_STRING = 5
"""Index of the 6th string, which mirrors the 1st string's notes."""

B_STRING_GROUP = 2
"""Notes per position on the B string."""

OTHER_STRING_GROUP = 3
"""Notes per position on every other string."""

B_PAIR_START_DEGREE = 1
"""Scale degree (0-indexed) where position 1's B-string pair starts."""

STRING_DEGREE_OFFSETS: Dict[int, int] = {
    0: 3,
    2: 5,
    3: 2,
    4: 6,
}
"""Starting scale degree of each trio string for position 1.

Keys are string indices; values are 0-indexed scale degrees. Position ``i``
(0-indexed) shifts every value by ``i`` (mod 7). These hold for all seven
modes in every key because each mode is a rotation of the major scale.
String 5 is not listed: it copies string 0.
"""

OVERLAP_TOLERANCE = -1
"""Smallest fret-span overlap at which a trio still joins a B-string pair."""

DEFAULT_RANK_COUNT = 7
"""Default number of position ids returned by proximity ranking."""

NUM_POSITIONS = 7
"""Number of positions generated for every mode."""
