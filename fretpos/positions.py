"""Generation and ranking of the seven fretboard positions of a mode.

A position is one fingering shape that covers all six strings: two notes on
the B string and three notes on every other string, each string starting on a
fixed scale degree relative to the B-string pair. The seven positions are
cyclic rotations of that shape through the scale. Each position may recur at
several places on the neck (roughly an octave apart); each complete
occurrence is a PositionInstance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from fretpos import constants
from fretpos.fretboard import FretMap, FretOccurrence, build_fret_map
from fretpos.mode import Mode, resolve_mode
from fretpos.scale import ModeTemplate, Root

NoteGroup = List[FretOccurrence]
"""Consecutive occurrences on one string, fret-ascending."""


def group_span_display(fret_min: int, fret_max: int) -> str:
    """Format a fret span, e.g. ``"5–9"``."""
    return f"{fret_min}–{fret_max}"


@dataclass(frozen=True)
class PositionInstance:
    """One concrete occurrence of a position on the neck."""

    strings: List[Optional[NoteGroup]]
    """Notes on each string in string-index order, None where absent."""
    fret_min: int
    """Lowest fret used by the instance."""
    fret_max: int
    """Highest fret used by the instance."""

    @property
    def center(self) -> float:
        """Midpoint of the instance's fret span."""
        return (self.fret_min + self.fret_max) / 2

    @property
    def span_display(self) -> str:
        """The instance's fret span for display."""
        return group_span_display(self.fret_min, self.fret_max)

    @staticmethod
    def from_strings(strings: List[Optional[NoteGroup]]) -> PositionInstance:
        """Build an instance, computing its fret span from the string contents.

        Args:
            strings: Notes on each string; at least one must be present.

        Returns:
            The instance spanning every fret used on any string.
        """
        frets = [occ.fret for group in strings if group is not None for occ in group]
        return PositionInstance(strings=strings, fret_min=min(frets), fret_max=max(frets))


@dataclass(frozen=True)
class Position:
    """One of the seven positions of a mode, with all its instances."""

    id: int
    """Position number, 1-7."""
    label: str
    """The B-string note pair that defines the position, e.g. ``"D, E"``."""
    span_display: str
    """Fret spans of every instance, e.g. ``"1–5, 13–17"``, or ``"?"``."""
    instances: List[PositionInstance]
    """Complete instances ordered from the lowest fret up."""


def degree_groups(
    occurrences: List[FretOccurrence], degree_of: Dict[str, int], size: int
) -> List[NoteGroup]:
    """Find runs of adjacent occurrences that climb consecutive scale degrees.

    Args:
        occurrences: One string's occurrences, fret-ascending.
        degree_of: Map from note name to 0-indexed scale degree.
        size: Number of notes in each run.

    Returns:
        Every qualifying run, in fret order.
    """
    groups: List[NoteGroup] = []
    for start in range(len(occurrences) - size + 1):
        group = occurrences[start : start + size]
        degrees = [degree_of[occ.name] for occ in group]
        if all(
            degrees[j + 1] == (degrees[j] + 1) % constants.SCALE_SIZE
            for j in range(size - 1)
        ):
            groups.append(group)
    return groups


def span_overlap(fret_min: int, fret_max: int, group: NoteGroup) -> int:
    """Measure how far a group's fret span overlaps a reference span.

    Negative values give the size of the gap between the two spans.
    """
    return min(fret_max, group[-1].fret) - max(fret_min, group[0].fret)


def pick_trio(
    candidates: List[NoteGroup],
    fret_min: int,
    fret_max: int,
    tolerance: int = constants.OVERLAP_TOLERANCE,
) -> Optional[NoteGroup]:
    """Choose the candidate whose span best overlaps a reference span.

    Args:
        candidates: Groups to choose from, in fret order.
        fret_min: Low end of the reference span.
        fret_max: High end of the reference span.
        tolerance: Smallest acceptable overlap.

    Returns:
        The first group with the largest overlap, or None if there are no
        candidates or the best overlap is below the tolerance.
    """
    best: Optional[NoteGroup] = None
    best_overlap = 0
    for candidate in candidates:
        overlap = span_overlap(fret_min, fret_max, candidate)
        if best is None or overlap > best_overlap:
            best = candidate
            best_overlap = overlap
    if best is None or best_overlap < tolerance:
        return None
    return best


def generate_positions(
    fret_map: FretMap,
    scale_notes: List[str],
    overlap_tolerance: int = constants.OVERLAP_TOLERANCE,
) -> List[Position]:
    """Partition a fret map into the seven positions of its mode.

    Position ``i`` (0-indexed) is anchored on every B-string pair that starts
    on scale degree ``(1 + i) mod 7``. Each anchor collects one trio per other
    string, starting on that string's fixed degree offset plus ``i``, choosing
    the trio that overlaps the pair's frets the most. String 5 copies string
    0. Anchors that cannot fill all six strings are dropped.

    Args:
        fret_map: Per-string occurrences from ``build_fret_map``.
        scale_notes: The mode's spelled notes in scale order.
        overlap_tolerance: Smallest overlap at which a trio is accepted.

    Returns:
        Exactly seven positions with ids 1-7. A position with no complete
        instance is still returned, with an empty instance list.
    """
    degree_of = {name: i for i, name in enumerate(scale_notes)}
    pairs = degree_groups(
        fret_map[constants.B_STRING], degree_of, constants.B_STRING_GROUP
    )
    trios = {
        str_index: degree_groups(
            fret_map[str_index], degree_of, constants.OTHER_STRING_GROUP
        )
        for str_index in constants.STRING_DEGREE_OFFSETS
    }

    positions: List[Position] = []
    for i in range(constants.NUM_POSITIONS):
        pair_degree = (constants.B_PAIR_START_DEGREE + i) % constants.SCALE_SIZE
        anchors = [p for p in pairs if degree_of[p[0].name] == pair_degree]
        instances: List[PositionInstance] = []
        for pair in anchors:
            strings: List[Optional[NoteGroup]] = [None] * constants.NUM_STRINGS
            strings[constants.B_STRING] = pair
            for str_index, offset in constants.STRING_DEGREE_OFFSETS.items():
                start_degree = (offset + i) % constants.SCALE_SIZE
                candidates = [
                    t for t in trios[str_index] if degree_of[t[0].name] == start_degree
                ]
                strings[str_index] = pick_trio(
                    candidates, pair[0].fret, pair[-1].fret, overlap_tolerance
                )
            strings[constants.LOW_E_STRING] = strings[constants.HIGH_E_STRING]
            if all(group is not None for group in strings):
                instances.append(PositionInstance.from_strings(strings))

        if anchors:
            label = ", ".join(occ.name for occ in anchors[0])
        else:
            next_degree = (pair_degree + 1) % constants.SCALE_SIZE
            label = f"{scale_notes[pair_degree]}, {scale_notes[next_degree]}"
        if instances:
            span_display = ", ".join(inst.span_display for inst in instances)
        else:
            span_display = "?"
        logging.debug(
            "position %d (%s): %d of %d anchors complete",
            i + 1,
            label,
            len(instances),
            len(anchors),
        )
        positions.append(
            Position(
                id=i + 1, label=label, span_display=span_display, instances=instances
            )
        )
    return positions


def positions_for_mode(
    mode: Mode, overlap_tolerance: int = constants.OVERLAP_TOLERANCE
) -> List[Position]:
    """Map a resolved mode onto the neck and generate its positions."""
    fret_map = build_fret_map(mode.semis, mode.notes)
    return generate_positions(fret_map, mode.notes, overlap_tolerance)


def positions_for(
    root: Root,
    template: ModeTemplate,
    overlap_tolerance: int = constants.OVERLAP_TOLERANCE,
) -> List[Position]:
    """Resolve a mode and generate its positions in one step.

    Args:
        root: The root of the mode.
        template: The mode template.
        overlap_tolerance: Smallest overlap at which a trio is accepted.

    Returns:
        The seven positions of the resolved mode.
    """
    return positions_for_mode(resolve_mode(root, template), overlap_tolerance)


def find_position(positions: List[Position], position_id: int) -> Optional[Position]:
    """Look up a position by id, returning None if absent."""
    for position in positions:
        if position.id == position_id:
            return position
    return None


def min_instance_distance(a: Position, b: Position) -> float:
    """Smallest distance between the centers of any instance of a and of b.

    Positions without instances are treated as zero distance away.
    """
    distances = [
        abs(ai.center - bi.center) for ai in a.instances for bi in b.instances
    ]
    return min(distances) if distances else 0.0


def rank_positions_by_proximity(
    positions: List[Position],
    reference: Optional[Position],
    count: int = constants.DEFAULT_RANK_COUNT,
) -> List[int]:
    """Order positions by how close they sit to a reference position.

    Args:
        positions: Candidate positions, usually the seven of the next chord.
        reference: The previously played position, or None.
        count: Maximum number of ids to return.

    Returns:
        Position ids, closest first with ties broken by id. Without a
        reference the positions keep their given order.
    """
    if reference is None:
        return [p.id for p in positions[:count]]
    ranked = sorted(
        positions, key=lambda p: (min_instance_distance(reference, p), p.id)
    )
    return [p.id for p in ranked[:count]]
