"""Chord-symbol parsing and notation for fretpos using Lark.

Only the four seventh-chord qualities that the modes produce are supported.
Anything else (triads, diminished, added tones, a bare root) is reported as a
no-match rather than an error, so callers can reject the symbol and move on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from lark import Lark, Transformer
from lark.exceptions import UnexpectedInput

from fretpos.base import MatchException
from fretpos.scale import (
    AEOLIAN,
    DORIAN,
    IONIAN,
    LOCRIAN,
    LYDIAN,
    MIXOLYDIAN,
    PHRYGIAN,
    ChordQuality,
    Root,
)

# Lark grammar for seventh-chord symbols such as "Dm7", "B♭maj7" or "F#m7b5".
# Terminals are matched longest first, so "m7b5" wins over "m7".
CHORD_GRAMMAR = """
start: root quality

root: LETTER ACCIDENTAL?
quality: MAJOR7 | HALF_DIMINISHED7 | MINOR7 | DOMINANT7

LETTER: "A".."G"
ACCIDENTAL: "♭" | "♯" | "#" | "b"

MAJOR7: "maj7" | "M7"
HALF_DIMINISHED7: "m7♭5" | "m7b5"
MINOR7: "m7"
DOMINANT7: "7"
"""

_QUALITY_TERMINALS: Dict[str, ChordQuality] = {
    "MAJOR7": ChordQuality.Major7,
    "HALF_DIMINISHED7": ChordQuality.HalfDiminished7,
    "MINOR7": ChordQuality.Minor7,
    "DOMINANT7": ChordQuality.Dominant7,
}


@dataclass(frozen=True)
class ParsedChord:
    """Root and quality recognized in a chord symbol."""

    root: Root
    quality: ChordQuality


class ChordSymbolTransformer(Transformer):
    """Transform a parsed chord symbol into a ParsedChord."""

    def start(self, items):
        """Combine root and quality, or None for an unaccepted root spelling."""
        root, quality = items
        if root is None:
            return None
        return ParsedChord(root=root, quality=quality)

    def root(self, items):
        """Normalize the written root to its canonical flat spelling."""
        return Root.lookup("".join(str(token) for token in items))

    def quality(self, items):
        """Map the matched suffix terminal to its quality."""
        return _QUALITY_TERMINALS[items[0].type]


_CHORD_PARSER = Lark(CHORD_GRAMMAR, parser="lalr")


def parse_chord_symbol(symbol: str) -> Optional[ParsedChord]:
    """Parse a chord symbol into its root and quality.

    Args:
        symbol: A chord symbol; surrounding whitespace is ignored.

    Returns:
        The parsed chord, or None if the symbol is empty, has an unknown
        root spelling, or has a quality other than the four supported ones.

    Examples:
        >>> parse_chord_symbol("F#m7b5")
        ParsedChord(root=<Root.Gb: 6>, quality=<ChordQuality.HalfDiminished7: 'm7♭5'>)

        >>> parse_chord_symbol("Bdim") is None
        True
    """
    trimmed = symbol.strip()
    if not trimmed:
        return None
    try:
        tree = _CHORD_PARSER.parse(trimmed)
    except UnexpectedInput:
        return None
    return ChordSymbolTransformer().transform(tree)


def normalize_chord_symbol(symbol: str) -> str:
    """Rewrite a legacy ``maj7`` suffix to the current ``M7`` spelling."""
    if symbol.endswith("maj7"):
        return symbol[: -len("maj7")] + "M7"
    return symbol


QUALITY_TO_MODES: Dict[ChordQuality, List[int]] = {
    ChordQuality.Major7: [IONIAN, LYDIAN],
    ChordQuality.Minor7: [DORIAN, PHRYGIAN, AEOLIAN],
    ChordQuality.Dominant7: [MIXOLYDIAN],
    ChordQuality.HalfDiminished7: [LOCRIAN],
}
"""Mode template indices whose seventh chord has each quality."""


def compatible_modes(quality_key: str) -> List[int]:
    """Mode indices for a persisted quality key; empty if unsupported."""
    quality = ChordQuality.lookup(quality_key)
    if quality is None:
        return []
    return QUALITY_TO_MODES[quality]


NOTATION_OPTIONS: Dict[ChordQuality, List[str]] = {
    ChordQuality.Major7: ["M7", "maj7", "△7"],
    ChordQuality.Minor7: ["m7", "mi7", "-7"],
    ChordQuality.Dominant7: ["7"],
    ChordQuality.HalfDiminished7: ["m7♭5", "ø7"],
}
"""Display suffixes offered for each quality; the first is the default."""


@dataclass(frozen=True)
class ChordNotation:
    """Preferred display suffix for each chord quality."""

    major7: str = "M7"
    minor7: str = "m7"
    dominant7: str = "7"
    half_diminished7: str = "m7♭5"

    def suffix(self, quality: ChordQuality) -> str:
        """Return the display suffix chosen for a quality.

        Raises:
            MatchException: If an unknown quality is given.
        """
        if quality == ChordQuality.Major7:
            return self.major7
        elif quality == ChordQuality.Minor7:
            return self.minor7
        elif quality == ChordQuality.Dominant7:
            return self.dominant7
        elif quality == ChordQuality.HalfDiminished7:
            return self.half_diminished7
        else:
            raise MatchException(quality)

    def to_dict(self) -> Dict[str, str]:
        """Serialize as a map from quality key to suffix."""
        return {q.value: self.suffix(q) for q in ChordQuality}

    @staticmethod
    def from_dict(data: Mapping[str, object]) -> ChordNotation:
        """Deserialize, keeping the default for any missing or unknown suffix."""

        def pick(quality: ChordQuality) -> str:
            value = data.get(quality.value)
            options = NOTATION_OPTIONS[quality]
            return value if isinstance(value, str) and value in options else options[0]

        return ChordNotation(
            major7=pick(ChordQuality.Major7),
            minor7=pick(ChordQuality.Minor7),
            dominant7=pick(ChordQuality.Dominant7),
            half_diminished7=pick(ChordQuality.HalfDiminished7),
        )


DEFAULT_NOTATION = ChordNotation()
"""Notation used when the user has not chosen one."""


def format_quality(quality: ChordQuality, notation: ChordNotation) -> str:
    """Format just the quality suffix of a chord."""
    return notation.suffix(quality)


def format_chord_symbol(
    root_name: str, quality: ChordQuality, notation: ChordNotation
) -> str:
    """Format a chord symbol as root name plus the preferred suffix."""
    return root_name + format_quality(quality, notation)
