"""Projection of a mode onto the six strings of a standard-tuned neck.

This module maps the pitch classes of a resolved mode onto every string in
the playable fret window, producing the per-string note occurrences that
positions are carved out of.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Generator, List, Union

from fretpos import constants


@dataclass(frozen=True)
class FretOccurrence:
    """One place on a string where a scale tone sounds."""

    name: str
    """Spelled note name of the tone."""
    fret: int
    """Fret number (0 is the open string)."""
    semi: int
    """Pitch class of the tone (0-11)."""

    def __iter__(self) -> Generator[Union[str, int], None, None]:
        """Iterate over name, fret and pitch class.

        Yields:
            The note name, then the fret, then the pitch class.
        """
        yield self.name
        yield self.fret
        yield self.semi


FretMap = List[List[FretOccurrence]]
"""One fret-ascending list of occurrences per string, string 0 first."""


def build_fret_map(scale_semis: List[int], note_names: List[str]) -> FretMap:
    """Map a scale's pitch classes onto every string of the neck.

    Args:
        scale_semis: Absolute pitch class of each scale note.
        note_names: Spelled note name for each entry of ``scale_semis``.

    Returns:
        Six lists of occurrences, one per string in string-index order, each
        covering frets ``MIN_FRET`` through ``MAX_FRET`` inclusive.
    """
    semi_to_name: Dict[int, str] = dict(zip(scale_semis, note_names))
    fret_map: FretMap = []
    for open_semi in constants.OPEN_STRINGS:
        occurrences: List[FretOccurrence] = []
        for fret in range(constants.MIN_FRET, constants.MAX_FRET + 1):
            semi = (open_semi + fret) % constants.MAX_NOTES
            name = semi_to_name.get(semi)
            if name is not None:
                occurrences.append(FretOccurrence(name=name, fret=fret, semi=semi))
        fret_map.append(occurrences)
    return fret_map
