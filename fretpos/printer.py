"""Plain-text rendering of modes, positions and progressions."""

from __future__ import annotations

from typing import List

from fretpos import constants
from fretpos.chords import ChordNotation, format_chord_symbol
from fretpos.mode import LabelMode, Mode
from fretpos.positions import Position, PositionInstance
from fretpos.progression import (
    EffectiveSelection,
    Progression,
    chord_roman_numeral,
    is_diatonic,
    ranked_positions_for_chord,
)
from fretpos.scale import MODE_TEMPLATES

CHORD_TONE_MARK = "*"


def render_mode(mode: Mode) -> str:
    """Summarize a mode: title, notes and its seventh chord."""
    return "\n".join(
        [
            mode.title,
            "  notes: " + " ".join(mode.notes),
            "  degrees: " + " ".join(mode.degrees[n] for n in mode.notes),
            f"  chord: {mode.chord} = {' '.join(mode.chord_tones)} ({mode.chord_degrees})",
        ]
    )


def render_instance(
    instance: PositionInstance, mode: Mode, label_mode: LabelMode
) -> List[str]:
    """Render one instance as a line per string, 1st string first.

    Chord tones are marked with an asterisk.
    """
    lines = [f"  fret {instance.span_display}"]
    for str_index, group in enumerate(instance.strings):
        cells: List[str] = []
        for occ in group or []:
            mark = CHORD_TONE_MARK if mode.is_chord_tone(occ.name) else ""
            cells.append(f"{mode.label(occ.name, label_mode)}{mark}@{occ.fret}")
        label = constants.STRING_LABELS[str_index]
        lines.append(f"    {label} | " + "  ".join(cells))
    return lines


def render_position(position: Position, mode: Mode, label_mode: LabelMode) -> str:
    """Render a position header followed by each of its instances."""
    lines = [f"Pos {position.id}: fret {position.span_display} | B: {position.label}"]
    for instance in position.instances:
        lines.extend(render_instance(instance, mode, label_mode))
    return "\n".join(lines)


def render_progression(
    progression: Progression,
    selections: List[EffectiveSelection],
    notation: ChordNotation,
    rank_count: int = constants.DEFAULT_RANK_COUNT,
    overlap_tolerance: int = constants.OVERLAP_TOLERANCE,
) -> str:
    """Render each chord with the mode and position it resolves to.

    Unconfirmed positions are flagged with ``?``, followed by the positions
    nearest the previous chord.
    """
    key = progression.song_key
    lines = [progression.name + (f" ({key.display})" if key is not None else "")]
    for index, (slot, selection) in enumerate(zip(progression.chords, selections)):
        quality = slot.chord_quality
        if quality is None:
            lines.append(f"  {slot.symbol}: skipped (unsupported)")
            continue
        symbol = format_chord_symbol(slot.root.display, quality, notation)
        mode_name = MODE_TEMPLATES[selection.mode_index].name
        flags = "" if slot.position_confirmed else " ?"
        numeral = chord_roman_numeral(slot.root, quality, key)
        parts = [f"  {symbol}: {mode_name} Pos {selection.position_id}{flags}"]
        if numeral is not None:
            parts.append(numeral)
        if not is_diatonic(slot.root, quality, key):
            parts.append("(non-diatonic)")
        ranked = ranked_positions_for_chord(
            progression.chords, selections, index, rank_count, overlap_tolerance
        )
        parts.append("near: " + " ".join(str(pid) for pid in ranked))
        lines.append(" ".join(parts))
    return "\n".join(lines)
