"""Command line interface to generate procedural dungeons for development."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Sequence

from config.config_loader import load_generation_parameters
from modules.dungeon.gen.params import AlgorithmType, DungeonTheme, GenerationParameters
from modules.dungeon.gen.validate import layout_statistics
from modules.dungeon.generator import DungeonGenerationError
from modules.dungeon.render import render_ascii
from modules.dungeon.serialization import save_json
from modules.dungeon.systems.dungeon_generator import generate_validated_dungeon
from utils.logger import get_dungeon_logger


def _bool_flag(parser: argparse.ArgumentParser, name: str, help_text: str) -> None:
    dest = name.replace("-", "_")
    group = parser.add_mutually_exclusive_group()
    group.add_argument(f"--{name}", dest=dest, action="store_true", default=None, help=help_text)
    group.add_argument(f"--no-{name}", dest=dest, action="store_false", default=None)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a procedural dungeon layout.")
    parser.add_argument("--config", help="YAML file whose 'dungeon' section provides parameter defaults.")
    parser.add_argument("--section", default="dungeon", help="Section of the YAML file to read.")
    parser.add_argument("--map-bounds", help="Map size as WIDTHxHEIGHT, e.g. 60x40.")
    parser.add_argument("--min-rooms", type=int)
    parser.add_argument("--max-rooms", type=int)
    parser.add_argument("--min-room-size", help="Minimum room size as WxH.")
    parser.add_argument("--max-room-size", help="Maximum room size as WxH.")
    parser.add_argument("--density", type=float)
    parser.add_argument("--special-room-ratio", type=float)
    parser.add_argument("--corridor-width", type=int)
    parser.add_argument("--seed", type=int)
    parser.add_argument("--algorithm", choices=[algorithm.value for algorithm in AlgorithmType])
    parser.add_argument("--branching", type=float)
    parser.add_argument("--critical-path-length", type=int)
    parser.add_argument("--theme", choices=[theme.value for theme in DungeonTheme])
    _bool_flag(parser, "allow-loops", "Inject extra corridors between nearby rooms.")
    _bool_flag(parser, "remove-dead-ends", "Prune rooms with a single connection.")
    _bool_flag(parser, "mark-doors", "Mark corridor entrances with door cells.")
    parser.add_argument("--out", help="Path to the JSON layout output.")
    parser.add_argument("--ascii", action="store_true", help="Print an ASCII rendering of the layout.")
    parser.add_argument("--stats", action="store_true", help="Print layout statistics.")
    parser.add_argument("--verbose", "-v", action="count", default=0, help="Increase log verbosity.")
    return parser


_PARAMETER_OPTIONS = (
    "map_bounds",
    "min_rooms",
    "max_rooms",
    "min_room_size",
    "max_room_size",
    "density",
    "special_room_ratio",
    "corridor_width",
    "seed",
    "algorithm",
    "allow_loops",
    "branching",
    "remove_dead_ends",
    "critical_path_length",
    "theme",
    "mark_doors",
)


def _collect_overrides(args: argparse.Namespace) -> dict[str, Any]:
    return {name: getattr(args, name) for name in _PARAMETER_OPTIONS if getattr(args, name) is not None}


def _resolve_parameters(parser: argparse.ArgumentParser, args: argparse.Namespace) -> GenerationParameters:
    overrides = _collect_overrides(args)
    try:
        if args.config:
            if not Path(args.config).is_file():
                parser.error(f"configuration file '{args.config}' does not exist")
            return load_generation_parameters(args.config, section=args.section, **overrides)
        return GenerationParameters.from_mapping(overrides)
    except ValueError as exc:
        parser.error(str(exc))


def _log_level(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    get_dungeon_logger(_log_level(args.verbose))

    params = _resolve_parameters(parser, args)
    try:
        layout, diagnostics = generate_validated_dungeon(params)
    except DungeonGenerationError as exc:
        parser.exit(1, f"error: {exc}\n")

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        save_json(layout, out_path)
    if args.ascii:
        print(render_ascii(layout))
    if args.stats:
        print(layout_statistics(layout))
        for issue in diagnostics:
            print(f"warning: {issue}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
