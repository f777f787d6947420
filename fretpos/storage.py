"""Persistence of progressions and notation preferences.

State lives in a single JSON document treated as a key-value store; every
write replaces the whole document. Loading never fails: malformed or missing
progressions fall back to the built-in presets, and legacy formats (bare-root
song keys, ``maj7`` chord symbols) are normalized as they are read.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from fretpos.chords import DEFAULT_NOTATION, ChordNotation
from fretpos.progression import PRESET_PROGRESSIONS, Progression

PROGRESSIONS_KEY = "progressions"
NOTATION_KEY = "chord-notation"


class JsonStore:
    """A key-value store backed by one JSON file."""

    def __init__(self, path: Path) -> None:
        """Initialize the store.

        Args:
            path: Location of the JSON document; it need not exist yet.
        """
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        data = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Store {self._path} does not hold a JSON object")
        return data

    def get(self, key: str) -> Optional[Any]:
        """Read the value stored under a key.

        Returns:
            The decoded value, or None if the key or the file is missing.

        Raises:
            OSError: If the file cannot be read.
            ValueError: If the file is not a valid JSON object.
        """
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        """Store a value under a key, rewriting the whole document.

        An unreadable existing document is replaced rather than merged.
        """
        try:
            data = self._read()
        except (OSError, ValueError) as e:
            logging.warning("Discarding unreadable store %s: %s", self._path, e)
            data = {}
        data[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8"
        )
        logging.debug("Wrote %s to %s", key, self._path)


def save_progressions(store: JsonStore, progressions: List[Progression]) -> None:
    """Persist the full progression list."""
    store.set(PROGRESSIONS_KEY, [p.to_dict() for p in progressions])


def load_progressions(store: JsonStore) -> List[Progression]:
    """Load the saved progressions.

    Returns:
        The saved progressions with legacy fields normalized, or a copy of the
        presets if nothing was saved or the saved data cannot be decoded.
    """
    try:
        raw = store.get(PROGRESSIONS_KEY)
        if raw is None:
            logging.info("No saved progressions, using presets")
            return list(PRESET_PROGRESSIONS)
        if not isinstance(raw, list):
            raise TypeError(f"Expected a list of progressions, got {type(raw)}")
        return [Progression.from_dict(p) for p in raw]
    except (OSError, ValueError, KeyError, TypeError) as e:
        logging.warning("Failed to load progressions, using presets: %s", e)
        return list(PRESET_PROGRESSIONS)


def save_notation(store: JsonStore, notation: ChordNotation) -> None:
    """Persist the chord notation preferences."""
    store.set(NOTATION_KEY, notation.to_dict())


def load_notation(store: JsonStore) -> ChordNotation:
    """Load the chord notation preferences, defaulting when absent or invalid."""
    try:
        raw = store.get(NOTATION_KEY)
    except (OSError, ValueError) as e:
        logging.warning("Failed to load chord notation, using default: %s", e)
        return DEFAULT_NOTATION
    if not isinstance(raw, dict):
        return DEFAULT_NOTATION
    return ChordNotation.from_dict(raw)
