"""Main entry point for the fretpos command line.

This module parses command-line arguments, sets up logging and the store,
and prints positions for a mode or the resolved fingerings of a stored
chord progression.
"""

import logging
import sys
from argparse import ArgumentParser, Namespace
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from fretpos import constants
from fretpos.chords import NOTATION_OPTIONS, ChordNotation
from fretpos.config import Config, init_config
from fretpos.mode import LabelMode, resolve_mode
from fretpos.positions import positions_for_mode
from fretpos.printer import render_mode, render_position, render_progression
from fretpos.progression import (
    Progression,
    SongKey,
    add_chord,
    compute_effective_selections,
)
from fretpos.scale import MODE_LOOKUP, MODE_TEMPLATES, ChordQuality, Root
from fretpos.storage import (
    JsonStore,
    load_notation,
    load_progressions,
    save_notation,
    save_progressions,
)


def run_positions(config: Config, args: Namespace) -> int:
    """Print a mode and its positions."""
    root = Root.lookup(args.root)
    if root is None:
        logging.error("Unknown root: %s", args.root)
        return 1
    mode_index = MODE_LOOKUP.get(args.mode)
    if mode_index is None:
        logging.error("Unknown mode: %s", args.mode)
        return 1
    mode = resolve_mode(root, MODE_TEMPLATES[mode_index], config.notation)
    positions = positions_for_mode(mode, config.overlap_tolerance)
    label_mode = LabelMode.Degree if args.degrees else LabelMode.Note
    print(render_mode(mode))
    for position in positions:
        if args.position is None or position.id == args.position:
            print(render_position(position, mode, label_mode))
    return 0


def run_progressions(config: Config, args: Namespace) -> int:
    """List the stored progressions."""
    for index, progression in enumerate(load_progressions(JsonStore(config.store_path))):
        print(f"{index}: {progression.name} ({len(progression.chords)} chords)")
    return 0


def find_progression(progressions: List[Progression], name: str) -> Optional[Progression]:
    """Find a progression by name, or by its index in the list."""
    for progression in progressions:
        if progression.name == name:
            return progression
    if name.isdigit() and int(name) < len(progressions):
        return progressions[int(name)]
    return None


def run_progression(config: Config, args: Namespace) -> int:
    """Print the resolved fingering of every chord in a progression."""
    progression = find_progression(
        load_progressions(JsonStore(config.store_path)), args.name
    )
    if progression is None:
        logging.error("No progression named %s", args.name)
        return 1
    selections = compute_effective_selections(
        progression.chords, progression.song_key, config.overlap_tolerance
    )
    print(
        render_progression(
            progression,
            selections,
            config.notation,
            config.rank_count,
            config.overlap_tolerance,
        )
    )
    return 0


def run_new(config: Config, args: Namespace) -> int:
    """Create or replace a stored progression from chord symbols."""
    song_key: Optional[SongKey] = None
    if args.key is not None:
        key_root = Root.lookup(args.key)
        if key_root is None:
            logging.error("Unknown key root: %s", args.key)
            return 1
        song_key = SongKey(root=key_root, minor=args.minor)
    progression = Progression(name=args.name, song_key=song_key)
    for text in args.chords:
        extended = add_chord(progression, text)
        if extended is None:
            logging.warning("Skipping unsupported chord %r (M7/m7/7/m7♭5 only)", text)
        else:
            progression = extended
    store = JsonStore(config.store_path)
    progressions = [
        p for p in load_progressions(store) if p.name != progression.name
    ] + [progression]
    save_progressions(store, progressions)
    logging.info("saved %s with %d chords", progression.name, len(progression.chords))
    return 0


def run_notation(config: Config, args: Namespace) -> int:
    """Show or update the chord notation preferences."""
    notation = config.notation
    if args.major7 is not None:
        notation = replace(notation, major7=args.major7)
    if args.minor7 is not None:
        notation = replace(notation, minor7=args.minor7)
    if args.half_diminished7 is not None:
        notation = replace(notation, half_diminished7=args.half_diminished7)
    if notation != config.notation:
        save_notation(JsonStore(config.store_path), notation)
    for quality in ChordQuality:
        print(f"{quality.value}: {notation.suffix(quality)}")
    return 0


def make_parser() -> ArgumentParser:
    """Create the command-line argument parser.

    Returns:
        An ArgumentParser with one subcommand per operation.
    """
    parser = ArgumentParser(prog="fretpos")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--store", type=Path, default=None)
    parser.add_argument(
        "--overlap-tolerance", type=int, default=constants.OVERLAP_TOLERANCE
    )
    parser.add_argument("--rank-count", type=int, default=constants.DEFAULT_RANK_COUNT)
    sub = parser.add_subparsers(dest="command", required=True)

    positions = sub.add_parser("positions", help="show the positions of a mode")
    positions.add_argument("root")
    positions.add_argument(
        "mode", type=str.lower, choices=[t.key for t in MODE_TEMPLATES]
    )
    positions.add_argument("--position", type=int, default=None)
    positions.add_argument("--degrees", action="store_true")
    positions.set_defaults(run=run_positions)

    listing = sub.add_parser("progressions", help="list stored progressions")
    listing.set_defaults(run=run_progressions)

    show = sub.add_parser("progression", help="resolve a stored progression")
    show.add_argument("name")
    show.set_defaults(run=run_progression)

    new = sub.add_parser("new", help="store a progression")
    new.add_argument("name")
    new.add_argument("chords", nargs="+")
    new.add_argument("--key", default=None)
    new.add_argument("--minor", action="store_true")
    new.set_defaults(run=run_new)

    notation = sub.add_parser("notation", help="show or set chord notation")
    notation.add_argument("--major7", choices=NOTATION_OPTIONS[ChordQuality.Major7])
    notation.add_argument("--minor7", choices=NOTATION_OPTIONS[ChordQuality.Minor7])
    notation.add_argument(
        "--half-diminished7", choices=NOTATION_OPTIONS[ChordQuality.HalfDiminished7]
    )
    notation.set_defaults(run=run_notation)
    return parser


def configure_logging(log_level: str) -> None:
    """Configure the logging system with the specified log level.

    Args:
        log_level: The logging level (e.g., 'DEBUG', 'INFO', 'WARNING').
    """
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(filename)s:%(lineno)d -- %(message)s",
        level=log_level,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the fretpos command line.

    Parses arguments, configures logging, loads notation preferences from the
    store and runs the chosen subcommand.

    Returns:
        The process exit status.
    """
    parser = make_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    config = init_config(
        store_path=args.store,
        overlap_tolerance=args.overlap_tolerance,
        rank_count=args.rank_count,
    )
    notation: ChordNotation = load_notation(JsonStore(config.store_path))
    config = replace(config, notation=notation)
    return args.run(config, args)


if __name__ == "__main__":
    sys.exit(main())
