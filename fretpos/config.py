"""Configuration for the fretpos command line.

The core functions take their tuning parameters as keyword arguments with
defaults from ``fretpos.constants``; this module gathers the values chosen at
the command line (or from the environment) into one immutable Config.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fretpos import constants
from fretpos.chords import DEFAULT_NOTATION, ChordNotation

STORE_ENV_VAR = "FRETPOS_STORE"
"""Environment variable that overrides the store location."""


def default_store_path() -> Path:
    """Location of the store when neither flag nor environment sets one."""
    env_path = os.environ.get(STORE_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path.home() / ".fretpos" / "store.json"


@dataclass(frozen=True)
class Config:
    """Settings shared by the command-line operations."""

    store_path: Path  # JSON document holding progressions and preferences
    overlap_tolerance: int  # Trio acceptance threshold for position generation
    rank_count: int  # Number of ranked positions shown per chord
    notation: ChordNotation  # Display suffix per chord quality


def init_config(
    store_path: Optional[Path] = None,
    overlap_tolerance: int = constants.OVERLAP_TOLERANCE,
    rank_count: int = constants.DEFAULT_RANK_COUNT,
    notation: ChordNotation = DEFAULT_NOTATION,
) -> Config:
    """Create the configuration, filling in the default store location.

    Args:
        store_path: Store location, or None for ``default_store_path()``.
        overlap_tolerance: Smallest overlap at which a trio is accepted.
        rank_count: Number of ranked positions shown per chord.
        notation: Display suffix per chord quality.

    Returns:
        The assembled configuration.

    Raises:
        ValueError: If the rank count is outside 1-7.
    """
    if rank_count < 1 or rank_count > constants.NUM_POSITIONS:
        raise ValueError(f"Rank count must be 1-{constants.NUM_POSITIONS}")
    return Config(
        store_path=store_path if store_path is not None else default_store_path(),
        overlap_tolerance=overlap_tolerance,
        rank_count=rank_count,
        notation=notation,
    )
