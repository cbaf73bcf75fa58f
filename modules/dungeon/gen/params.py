"""User-facing parameters for procedural dungeon generation."""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Mapping


class AlgorithmType(str, Enum):
    """Primary layout algorithm used before post-processing."""

    BSP = "bsp"
    CELLULAR_AUTOMATA = "cellular_automata"
    ROOM_FIRST_GROWTH = "room_first_growth"
    CORRIDOR_FIRST_MAZE = "corridor_first_maze"
    HYBRID_APPROACH = "hybrid_approach"


class DungeonTheme(str, Enum):
    """Visual theme forwarded untouched to tile renderers."""

    STONE_DUNGEON = "stone_dungeon"
    ICE_CAVERN = "ice_cavern"
    LAVA_FORTRESS = "lava_fortress"
    ANCIENT_RUINS = "ancient_ruins"
    TECH_FACILITY = "tech_facility"


Size2D = tuple[int, int]


def _parse_pair(name: str, value: Any) -> Size2D:
    if isinstance(value, str):
        parts = value.lower().replace(",", "x").split("x")
    else:
        try:
            parts = list(value)
        except TypeError as exc:
            raise ValueError(f"{name} must be a (width, height) pair") from exc
    if len(parts) != 2:
        raise ValueError(f"{name} must be a (width, height) pair")
    try:
        return int(parts[0]), int(parts[1])
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must contain integers") from exc


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "on"}:
        return True
    if text in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


@dataclass(frozen=True, slots=True)
class GenerationParameters:
    """Configuration bundle describing the desired dungeon.

    Instances are immutable; a generated layout keeps a reference to the
    parameters it was built from for provenance.
    """

    map_bounds: Size2D = (100, 100)
    min_rooms: int = 5
    max_rooms: int = 50
    min_room_size: Size2D = (3, 3)
    max_room_size: Size2D = (15, 15)
    density: float = 0.5
    special_room_ratio: float = 0.15
    corridor_width: int = 1
    seed: int = 0
    algorithm: AlgorithmType = AlgorithmType.BSP
    allow_loops: bool = True
    branching: float = 0.3
    remove_dead_ends: bool = False
    critical_path_length: int = 5
    theme: DungeonTheme = DungeonTheme.STONE_DUNGEON
    mark_doors: bool = True

    def __post_init__(self) -> None:
        for field_name in ("map_bounds", "min_room_size", "max_room_size"):
            object.__setattr__(self, field_name, _parse_pair(field_name, getattr(self, field_name)))

        width, height = self.map_bounds
        if width <= 0 or height <= 0:
            raise ValueError("map_bounds must be positive")

        for field_name, (w, h) in (
            ("min_room_size", self.min_room_size),
            ("max_room_size", self.max_room_size),
        ):
            if w <= 0 or h <= 0:
                raise ValueError(f"{field_name} must be positive")
        if (
            self.min_room_size[0] > self.max_room_size[0]
            or self.min_room_size[1] > self.max_room_size[1]
        ):
            raise ValueError("min_room_size must not exceed max_room_size")

        if self.min_rooms < 0:
            raise ValueError("min_rooms must not be negative")
        if self.min_rooms > self.max_rooms:
            raise ValueError("min_rooms must not exceed max_rooms")

        for field_name, value in (
            ("density", self.density),
            ("special_room_ratio", self.special_room_ratio),
            ("branching", self.branching),
        ):
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{field_name} must lie between 0 and 1")

        if self.corridor_width < 1:
            raise ValueError("corridor_width must be at least 1")
        if self.critical_path_length < 0:
            raise ValueError("critical_path_length must not be negative")

        # Accept the string values when constructed by hand.
        object.__setattr__(self, "algorithm", AlgorithmType(self.algorithm))
        object.__setattr__(self, "theme", DungeonTheme(self.theme))

    @property
    def width(self) -> int:
        return self.map_bounds[0]

    @property
    def height(self) -> int:
        return self.map_bounds[1]

    def with_seed(self, seed: int) -> "GenerationParameters":
        """Return a copy of these parameters using ``seed``."""

        return replace(self, seed=seed)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GenerationParameters":
        """Build parameters from plain values such as a YAML section."""

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown generation parameter(s): {', '.join(unknown)}")

        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if value is None:
                continue
            if key in {"map_bounds", "min_room_size", "max_room_size"}:
                kwargs[key] = _parse_pair(key, value)
            elif key in {"allow_loops", "remove_dead_ends", "mark_doors"}:
                kwargs[key] = _parse_bool(key, value)
            elif key in {"density", "special_room_ratio", "branching"}:
                kwargs[key] = float(value)
            elif key == "algorithm":
                try:
                    kwargs[key] = AlgorithmType(str(value).lower())
                except ValueError as exc:
                    raise ValueError(f"unknown algorithm '{value}'") from exc
            elif key == "theme":
                try:
                    kwargs[key] = DungeonTheme(str(value).lower())
                except ValueError as exc:
                    raise ValueError(f"unknown theme '{value}'") from exc
            else:
                kwargs[key] = int(value)
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation."""

        return {
            "map_bounds": list(self.map_bounds),
            "min_rooms": self.min_rooms,
            "max_rooms": self.max_rooms,
            "min_room_size": list(self.min_room_size),
            "max_room_size": list(self.max_room_size),
            "density": self.density,
            "special_room_ratio": self.special_room_ratio,
            "corridor_width": self.corridor_width,
            "seed": self.seed,
            "algorithm": self.algorithm.value,
            "allow_loops": self.allow_loops,
            "branching": self.branching,
            "remove_dead_ends": self.remove_dead_ends,
            "critical_path_length": self.critical_path_length,
            "theme": self.theme.value,
            "mark_doors": self.mark_doors,
        }


__all__ = [
    "AlgorithmType",
    "DungeonTheme",
    "GenerationParameters",
    "Size2D",
]
