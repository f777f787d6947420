"""Fretboard position engine for the seven modes of the major scale."""

from fretpos.chords import (
    QUALITY_TO_MODES,
    ChordNotation,
    ParsedChord,
    normalize_chord_symbol,
    parse_chord_symbol,
)
from fretpos.fretboard import FretMap, FretOccurrence, build_fret_map
from fretpos.mode import LabelMode, Mode, build_degree_map, resolve_mode
from fretpos.positions import (
    Position,
    PositionInstance,
    generate_positions,
    positions_for,
    rank_positions_by_proximity,
)
from fretpos.progression import (
    PRESET_PROGRESSIONS,
    ChordSlot,
    EffectiveSelection,
    Progression,
    SongKey,
    build_chord_slot,
    chord_roman_numeral,
    compute_effective_selections,
    is_diatonic,
    suggest_mode,
)
from fretpos.scale import MODE_TEMPLATES, ChordQuality, ModeTemplate, Root, spell_scale
from fretpos.storage import JsonStore, load_progressions, save_progressions

__all__ = [
    "MODE_TEMPLATES",
    "PRESET_PROGRESSIONS",
    "QUALITY_TO_MODES",
    "ChordNotation",
    "ChordQuality",
    "ChordSlot",
    "EffectiveSelection",
    "FretMap",
    "FretOccurrence",
    "JsonStore",
    "LabelMode",
    "Mode",
    "ModeTemplate",
    "ParsedChord",
    "Position",
    "PositionInstance",
    "Progression",
    "Root",
    "SongKey",
    "build_chord_slot",
    "build_degree_map",
    "build_fret_map",
    "chord_roman_numeral",
    "compute_effective_selections",
    "generate_positions",
    "is_diatonic",
    "load_progressions",
    "normalize_chord_symbol",
    "parse_chord_symbol",
    "positions_for",
    "rank_positions_by_proximity",
    "resolve_mode",
    "save_progressions",
    "spell_scale",
    "suggest_mode",
]
