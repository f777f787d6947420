"""Chord progressions with automatic mode and position suggestions.

A progression is an ordered list of chord slots. Each slot either carries a
mode and position the user confirmed, or is resolved automatically: the mode
that is diatonic to the song key, and the position of that mode lying closest
on the neck to the previous chord's resolved position.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional

from fretpos import constants
from fretpos.chords import (
    QUALITY_TO_MODES,
    ParsedChord,
    compatible_modes,
    normalize_chord_symbol,
    parse_chord_symbol,
)
from fretpos.positions import (
    Position,
    find_position,
    positions_for,
    rank_positions_by_proximity,
)
from fretpos.scale import MODE_TEMPLATES, ChordQuality, Root

RELATIVE_MAJOR_STEPS = 3
"""Semitones from a minor key's root up to its relative major."""

ROMAN_NUMERALS: List[str] = [
    "I",
    "♭II",
    "II",
    "♭III",
    "III",
    "IV",
    "♯IV",
    "V",
    "♭VI",
    "VI",
    "♭VII",
    "VII",
]
"""Roman numeral for each semitone interval above the key root."""

HALF_DIMINISHED_MARK = "ø"


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise TypeError(f"Expected an object for {what}, got {type(data).__name__}")
    return data


def _read_flag(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise TypeError(f"Expected a boolean for {key}, got {value!r}")
    return value


@dataclass(frozen=True)
class SongKey:
    """The tonal center used to pick diatonic modes."""

    root: Root
    minor: bool = False

    @property
    def major_root(self) -> Root:
        """Root of the major scale the key is diatonic to."""
        if self.minor:
            return self.root.add_steps(RELATIVE_MAJOR_STEPS)
        return self.root

    @property
    def display(self) -> str:
        """The key for display, e.g. ``"A minor"``."""
        return f"{self.root.display} {'minor' if self.minor else 'major'}"

    def to_dict(self) -> Dict[str, Any]:
        return {"root": self.root.display, "minor": self.minor}

    @staticmethod
    def from_dict(data: Any) -> SongKey:
        """Deserialize a song key, accepting the legacy bare root name.

        Raises:
            TypeError: If the data is neither a root name nor an object.
            ValueError: If the root spelling is not recognized.
        """
        if isinstance(data, str):
            root_name, minor = data, False
        else:
            fields = _require_mapping(data, "song key")
            root_name, minor = fields["root"], _read_flag(fields, "minor")
        root = Root.lookup(root_name)
        if root is None:
            raise ValueError(f"Unknown song key root: {root_name!r}")
        return SongKey(root=root, minor=minor)


@dataclass(frozen=True)
class ChordSlot:
    """One chord in a progression with its chosen mode and position."""

    symbol: str
    """The chord symbol as displayed."""
    root: Root
    quality: str
    """Quality key (see ChordQuality); unsupported keys are kept as-is."""
    mode_index: int
    """Index into MODE_TEMPLATES."""
    position_id: int
    """Position id 1-7."""
    position_confirmed: bool = False
    """True once the user picked the position rather than accepting a suggestion."""
    mode_confirmed: bool = False
    """True once the user picked the mode rather than accepting a suggestion."""

    @property
    def chord_quality(self) -> Optional[ChordQuality]:
        return ChordQuality.lookup(self.quality)

    @property
    def supported(self) -> bool:
        """True when some mode produces this chord's quality."""
        return self.chord_quality is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "root": self.root.display,
            "quality": self.quality,
            "mode_index": self.mode_index,
            "position_id": self.position_id,
            "position_confirmed": self.position_confirmed,
            "mode_confirmed": self.mode_confirmed,
        }

    @staticmethod
    def from_dict(data: Any) -> ChordSlot:
        """Deserialize a chord slot, normalizing legacy symbols.

        Raises:
            KeyError: If a required field is missing.
            TypeError: If the data or a confirmation flag has the wrong type.
            ValueError: If the root spelling is not recognized, or a supported
                chord stores an incompatible mode or a position outside 1-7.
        """
        data = _require_mapping(data, "chord")
        root = Root.lookup(data["root"])
        if root is None:
            raise ValueError(f"Unknown chord root: {data['root']!r}")
        slot = ChordSlot(
            symbol=normalize_chord_symbol(str(data["symbol"])),
            root=root,
            quality=str(data["quality"]),
            mode_index=int(data["mode_index"]),
            position_id=int(data["position_id"]),
            position_confirmed=_read_flag(data, "position_confirmed"),
            mode_confirmed=_read_flag(data, "mode_confirmed"),
        )
        if slot.supported:
            if slot.mode_index not in compatible_modes(slot.quality):
                raise ValueError(
                    f"Mode index {slot.mode_index} does not fit {slot.symbol}"
                )
            if slot.position_id < 1 or slot.position_id > constants.NUM_POSITIONS:
                raise ValueError(f"Invalid position id: {slot.position_id}")
        return slot


@dataclass(frozen=True)
class Progression:
    """A named, ordered list of chord slots with an optional song key."""

    name: str
    chords: List[ChordSlot] = field(default_factory=list)
    song_key: Optional[SongKey] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "song_key": None if self.song_key is None else self.song_key.to_dict(),
            "chords": [c.to_dict() for c in self.chords],
        }

    @staticmethod
    def from_dict(data: Any) -> Progression:
        """Deserialize a progression, normalizing legacy song keys and symbols.

        Raises:
            KeyError: If a required field is missing.
            TypeError: If the data or its chord list has the wrong shape.
            ValueError: If a root or stored selection is invalid.
        """
        data = _require_mapping(data, "progression")
        raw_key = data.get("song_key")
        raw_chords = data["chords"]
        if not isinstance(raw_chords, list):
            raise TypeError(
                f"Expected a list of chords, got {type(raw_chords).__name__}"
            )
        return Progression(
            name=str(data["name"]),
            chords=[ChordSlot.from_dict(c) for c in raw_chords],
            song_key=None if raw_key is None else SongKey.from_dict(raw_key),
        )


@dataclass(frozen=True)
class EffectiveSelection:
    """The mode and position a chord will actually be played with."""

    mode_index: int
    position_id: int


def _key_interval(root: Root, song_key: SongKey) -> int:
    return (root.value - song_key.major_root.value) % constants.MAX_NOTES


def _diatonic_mode(
    root: Root, quality: ChordQuality, song_key: SongKey
) -> Optional[int]:
    interval = _key_interval(root, song_key)
    if interval not in constants.MAJOR_INTERVALS:
        return None
    degree = constants.MAJOR_INTERVALS.index(interval)
    if MODE_TEMPLATES[degree].quality != quality:
        return None
    return degree


def suggest_mode(
    root: Root, quality: ChordQuality, song_key: Optional[SongKey] = None
) -> int:
    """Pick the mode to play over a chord.

    When the chord's root sits on a degree of the key's major scale and the
    mode on that degree yields the chord's quality, that mode is chosen (for
    example Dm7 in C gives Dorian). Otherwise, or without a key, the first
    mode compatible with the quality is used.

    Args:
        root: Chord root.
        quality: Chord quality.
        song_key: Optional key; minor keys use their relative major.

    Returns:
        An index into MODE_TEMPLATES.
    """
    if song_key is not None:
        degree = _diatonic_mode(root, quality, song_key)
        if degree is not None:
            return degree
    return QUALITY_TO_MODES[quality][0]


def is_diatonic(
    root: Root, quality: ChordQuality, song_key: Optional[SongKey] = None
) -> bool:
    """Check whether a chord belongs to the key, in both root and quality.

    Without a key nothing can contradict the chord, so it counts as diatonic.
    """
    if song_key is None:
        return True
    return _diatonic_mode(root, quality, song_key) is not None


def chord_roman_numeral(
    root: Root, quality: ChordQuality, song_key: Optional[SongKey] = None
) -> Optional[str]:
    """Label a chord with its roman numeral relative to the key root.

    Minor-type chords are lowercase and half-diminished chords get a trailing
    ``ø``. Returns None without a key.
    """
    if song_key is None:
        return None
    interval = (root.value - song_key.root.value) % constants.MAX_NOTES
    numeral = ROMAN_NUMERALS[interval]
    if quality.minor_type:
        numeral = numeral.lower()
    if quality == ChordQuality.HalfDiminished7:
        numeral += HALF_DIMINISHED_MARK
    return numeral


def compute_effective_selections(
    chords: List[ChordSlot],
    song_key: Optional[SongKey] = None,
    overlap_tolerance: int = constants.OVERLAP_TOLERANCE,
) -> List[EffectiveSelection]:
    """Resolve the mode and position each chord will be played with.

    Runs strictly left to right: an unconfirmed position is ranked against
    the resolved position of the previous participating chord, so changing
    an earlier chord can move every later suggestion. Unsupported chords
    keep their stored values and are skipped as a reference.

    Args:
        chords: The progression's chord slots.
        song_key: Optional key used for mode suggestion.
        overlap_tolerance: Trio acceptance threshold for position generation.

    Returns:
        One selection per chord, in the same order.
    """
    selections: List[EffectiveSelection] = []
    previous: Optional[Position] = None
    for slot in chords:
        quality = slot.chord_quality
        if quality is None:
            selections.append(EffectiveSelection(slot.mode_index, slot.position_id))
            continue
        if slot.mode_confirmed:
            mode_index = slot.mode_index
        else:
            mode_index = suggest_mode(slot.root, quality, song_key)
        positions = positions_for(
            slot.root, MODE_TEMPLATES[mode_index], overlap_tolerance
        )
        if slot.position_confirmed:
            position_id = slot.position_id
        else:
            ranked = rank_positions_by_proximity(positions, previous, count=1)
            position_id = ranked[0] if ranked else 1
        selections.append(EffectiveSelection(mode_index, position_id))
        previous = find_position(positions, position_id)
    return selections


def ranked_positions_for_chord(
    chords: List[ChordSlot],
    selections: List[EffectiveSelection],
    index: int,
    count: int = constants.DEFAULT_RANK_COUNT,
    overlap_tolerance: int = constants.OVERLAP_TOLERANCE,
) -> List[int]:
    """Rank one chord's positions by closeness to the previous chord.

    Args:
        chords: The progression's chord slots.
        selections: Their resolved selections from compute_effective_selections.
        index: The chord to rank positions for.
        count: Maximum number of ids to return.
        overlap_tolerance: Trio acceptance threshold for position generation.

    Returns:
        Position ids of the chord's resolved mode, closest first, measured
        from the resolved position of the previous supported chord. Empty for
        an unsupported chord.
    """
    if not chords[index].supported:
        return []
    previous: Optional[Position] = None
    for j in range(index - 1, -1, -1):
        if chords[j].supported:
            prev_positions = positions_for(
                chords[j].root,
                MODE_TEMPLATES[selections[j].mode_index],
                overlap_tolerance,
            )
            previous = find_position(prev_positions, selections[j].position_id)
            break
    slot = chords[index]
    positions = positions_for(
        slot.root, MODE_TEMPLATES[selections[index].mode_index], overlap_tolerance
    )
    return rank_positions_by_proximity(positions, previous, count)


def build_chord_slot(
    symbol: str,
    parsed: ParsedChord,
    prev_position_id: Optional[int] = None,
    song_key: Optional[SongKey] = None,
) -> ChordSlot:
    """Create an unconfirmed slot for a freshly parsed chord.

    Args:
        symbol: The symbol as entered.
        parsed: Its parsed root and quality.
        prev_position_id: Position of the previous chord, used as a start.
        song_key: Optional key used to suggest the mode.

    Returns:
        A slot with the suggested mode and neither choice confirmed.
    """
    return ChordSlot(
        symbol=symbol,
        root=parsed.root,
        quality=parsed.quality.value,
        mode_index=suggest_mode(parsed.root, parsed.quality, song_key),
        position_id=prev_position_id if prev_position_id is not None else 1,
        position_confirmed=False,
        mode_confirmed=False,
    )


def add_chord(progression: Progression, text: str) -> Optional[Progression]:
    """Append a chord typed by the user.

    Returns:
        The extended progression, or None if the symbol is not supported.
    """
    symbol = text.strip()
    parsed = parse_chord_symbol(symbol)
    if parsed is None:
        return None
    prev_position_id = progression.chords[-1].position_id if progression.chords else 1
    slot = build_chord_slot(symbol, parsed, prev_position_id, progression.song_key)
    return replace(progression, chords=progression.chords + [slot])


def remove_chord(progression: Progression, index: int) -> Progression:
    """Remove the chord at an index.

    Raises:
        IndexError: If the index is out of range.
    """
    if index < 0 or index >= len(progression.chords):
        raise IndexError(f"No chord at index {index}")
    chords = progression.chords[:index] + progression.chords[index + 1 :]
    return replace(progression, chords=chords)


def move_chord(progression: Progression, index: int, direction: int) -> Progression:
    """Swap a chord with its neighbour; moving past either end does nothing."""
    target = index + direction
    if index < 0 or target < 0 or target >= len(progression.chords):
        return progression
    chords = list(progression.chords)
    chords[index], chords[target] = chords[target], chords[index]
    return replace(progression, chords=chords)


def change_song_key(
    progression: Progression, song_key: Optional[SongKey]
) -> Progression:
    """Set the song key and re-suggest the mode of every unconfirmed chord."""
    chords: List[ChordSlot] = []
    for slot in progression.chords:
        quality = slot.chord_quality
        if slot.mode_confirmed or quality is None:
            chords.append(slot)
        else:
            chords.append(
                replace(slot, mode_index=suggest_mode(slot.root, quality, song_key))
            )
    return replace(progression, song_key=song_key, chords=chords)


def choose_mode(progression: Progression, index: int, mode_index: int) -> Progression:
    """Store and confirm the mode of one chord.

    Raises:
        ValueError: If the mode does not produce the chord's quality.
    """
    slot = progression.chords[index]
    if mode_index not in compatible_modes(slot.quality):
        raise ValueError(f"Mode index {mode_index} does not fit {slot.symbol}")
    chords = list(progression.chords)
    chords[index] = replace(slot, mode_index=mode_index, mode_confirmed=True)
    return replace(progression, chords=chords)


def choose_position(
    progression: Progression, index: int, position_id: int
) -> Progression:
    """Store and confirm the position of one chord.

    Raises:
        ValueError: If the position id is outside 1-7.
    """
    if position_id < 1 or position_id > constants.NUM_POSITIONS:
        raise ValueError(f"Invalid position id: {position_id}")
    chords = list(progression.chords)
    chords[index] = replace(
        chords[index], position_id=position_id, position_confirmed=True
    )
    return replace(progression, chords=chords)


def _preset(name: str, song_key: SongKey, symbols: List[str]) -> Progression:
    chords: List[ChordSlot] = []
    for symbol in symbols:
        parsed = parse_chord_symbol(symbol)
        assert parsed is not None, symbol
        chords.append(build_chord_slot(symbol, parsed, None, song_key))
    return Progression(name=name, chords=chords, song_key=song_key)


PRESET_PROGRESSIONS: List[Progression] = [
    _preset("II-V-I in C", SongKey(Root.C), ["Dm7", "G7", "CM7"]),
    _preset("II-V-I in F", SongKey(Root.F), ["Gm7", "C7", "FM7"]),
    _preset("II-V-I in B♭", SongKey(Root.Bb), ["Cm7", "F7", "B♭M7"]),
    _preset("II-V-I in A minor", SongKey(Root.A, minor=True), ["Bm7♭5", "E7", "Am7"]),
]
"""Progressions offered when nothing has been saved yet."""
