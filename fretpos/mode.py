"""Resolution of mode templates against a root.

A Mode is the fully spelled form of a ModeTemplate in a given key: note
names, degree labels, the seventh chord and the absolute pitch classes
needed to map the mode onto the fretboard.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto, unique
from typing import Dict, List

from fretpos.base import MatchException
from fretpos.chords import DEFAULT_NOTATION, ChordNotation, format_chord_symbol
from fretpos.constants import MAX_NOTES
from fretpos.scale import ModeTemplate, Root, degree_label, spell_scale


@unique
class LabelMode(Enum):
    """How notes are labelled when a mode is displayed."""

    Note = auto()  # Spelled note name, e.g. E♭
    Degree = auto()  # Scale degree, e.g. ♭3


@dataclass(frozen=True)
class Mode:
    """A mode template resolved against a specific root.

    Modes are recomputed whenever the root or template changes and are never
    mutated in place.
    """

    key: str
    """Identifier of the template this mode was resolved from."""
    name: str
    """Display name of the mode, e.g. ``"Dorian"``."""
    root: Root
    """The root the template was resolved against."""
    semis: List[int]
    """Absolute pitch class of each scale note, in scale order."""
    notes: List[str]
    """Spelled note names, one per letter, in scale order."""
    degrees: Dict[str, str]
    """Map from note name to its degree label."""
    chord: str
    """Seventh-chord symbol on the root, e.g. ``"Dm7"``."""
    chord_tones: List[str]
    """Note names of the seventh chord (degrees 1-3-5-7)."""
    chord_degrees: str
    """Degree formula of the seventh chord, e.g. ``"1 ♭3 5 ♭7"``."""

    @property
    def title(self) -> str:
        """Root and mode name together, e.g. ``"D Dorian"``."""
        return f"{self.root.display} {self.name}"

    def is_chord_tone(self, note_name: str) -> bool:
        """Check whether a note belongs to the mode's seventh chord."""
        return note_name in self.chord_tones

    def label(self, note_name: str, label_mode: LabelMode) -> str:
        """Label a note for display.

        Args:
            note_name: A spelled note name from this mode.
            label_mode: Whether to show the note name or its degree.

        Returns:
            The note name, or its degree label when requested and known.

        Raises:
            MatchException: If an unknown label mode is given.
        """
        if label_mode == LabelMode.Note:
            return note_name
        elif label_mode == LabelMode.Degree:
            return self.degrees.get(note_name, note_name)
        else:
            raise MatchException(label_mode)


def build_degree_map(intervals: List[int], notes: List[str]) -> Dict[str, str]:
    """Label each note of a mode with its degree relative to the major scale.

    Args:
        intervals: The mode's seven semitone offsets from its root.
        notes: The spelled note names for the same degrees.

    Returns:
        Dictionary from note name to degree label (``"1"``, ``"♭3"``, ``"#4"``).
    """
    return {
        note: degree_label(i, interval)
        for i, (interval, note) in enumerate(zip(intervals, notes))
    }


def resolve_mode(
    root: Root, template: ModeTemplate, notation: ChordNotation = DEFAULT_NOTATION
) -> Mode:
    """Resolve a mode template against a root.

    Args:
        root: The root of the mode.
        template: The mode template to resolve.
        notation: Chord-symbol notation used for the chord name.

    Returns:
        The fully populated Mode.
    """
    notes = spell_scale(root.display, template.intervals)
    return Mode(
        key=template.key,
        name=template.name,
        root=root,
        semis=[(root.value + s) % MAX_NOTES for s in template.intervals],
        notes=notes,
        degrees=build_degree_map(template.intervals, notes),
        chord=format_chord_symbol(notes[0], template.quality, notation),
        chord_tones=[notes[i] for i in template.chord_degree_indices],
        chord_degrees=template.chord_degrees,
    )
