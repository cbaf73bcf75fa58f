"""Dungeon layout value types and the accumulator used while generating them."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional

from modules.dungeon.geometry import GridPos, Rect
from modules.dungeon.gen.params import AlgorithmType, GenerationParameters


WALL = 0
FLOOR = 1
DOOR = 2
"""Abstract cell codes stored in :attr:`DungeonLayout.grid_map`."""

PASSABLE = frozenset({FLOOR, DOOR})

IntGrid = list[list[int]]


class RoomType(str, Enum):
    STANDARD = "standard"
    COMBAT = "combat"
    EMPTY = "empty"
    TREASURE = "treasure"
    SECRET = "secret"
    PUZZLE = "puzzle"
    TRAP = "trap"
    BOSS = "boss"


class RoomShape(str, Enum):
    RECTANGLE = "rectangle"
    IRREGULAR = "irregular"


@dataclass(frozen=True, slots=True)
class DungeonRoom:
    """A room of a finished layout."""

    id: int
    room_type: RoomType
    shape: RoomShape
    bounds: Rect
    center: GridPos
    connected_rooms: frozenset[int] = frozenset()
    distance_from_start: int = -1
    is_main_path: bool = False
    cells: Optional[frozenset[GridPos]] = None

    def footprint(self) -> Iterator[GridPos]:
        """Yield the cells occupied by the room.

        Rectangular rooms fill their bounds; irregular rooms only cover the
        cells they were extracted from.
        """

        if self.cells is not None:
            yield from sorted(self.cells, key=lambda pos: (pos.y, pos.x))
        else:
            yield from self.bounds.cells()


@dataclass(frozen=True, slots=True)
class DungeonCorridor:
    """An L-shaped corridor between the centers of two rooms."""

    id: int
    width: int
    start_room_id: int
    end_room_id: int
    path: tuple[GridPos, ...]


@dataclass(frozen=True, slots=True)
class GenerationReport:
    """Bookkeeping describing how a layout came to be."""

    algorithm: AlgorithmType
    requested_rooms: int = 0
    placed_rooms: int = 0
    removed_rooms: int = 0
    loops_added: int = 0
    connectivity_repairs: int = 0
    phases: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DungeonLayout:
    """The generator's sole output: grid, rooms, corridors and their graph."""

    size: tuple[int, int]
    grid_map: tuple[tuple[int, ...], ...]
    rooms: tuple[DungeonRoom, ...]
    corridors: tuple[DungeonCorridor, ...]
    start_room_id: int
    boss_room_id: int
    parameters: GenerationParameters
    report: GenerationReport

    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def height(self) -> int:
        return self.size[1]

    def cell(self, x: int, y: int) -> int:
        return self.grid_map[y][x]

    def room(self, room_id: int) -> Optional[DungeonRoom]:
        """Return the room with ``room_id`` or ``None`` when it does not exist."""

        for room in self.rooms:
            if room.id == room_id:
                return room
        return None

    def corridor(self, corridor_id: int) -> Optional[DungeonCorridor]:
        for corridor in self.corridors:
            if corridor.id == corridor_id:
                return corridor
        return None

    def rooms_of_type(self, room_type: RoomType) -> list[DungeonRoom]:
        return [room for room in self.rooms if room.room_type == room_type]

    def main_path(self) -> list[DungeonRoom]:
        """Return the critical path rooms ordered from start to boss."""

        path = [room for room in self.rooms if room.is_main_path]
        path.sort(key=lambda room: room.distance_from_start)
        return path


# ----------------------------------------------------------------------
# Mutable accumulator
# ----------------------------------------------------------------------
@dataclass(slots=True)
class RoomDraft:
    id: int
    room_type: RoomType
    shape: RoomShape
    bounds: Rect
    center: GridPos
    cells: Optional[frozenset[GridPos]] = None
    connected: list[int] = field(default_factory=list)
    distance_from_start: int = -1
    is_main_path: bool = False
    removed: bool = False

    @property
    def degree(self) -> int:
        return len(self.connected)

    def footprint(self) -> Iterable[GridPos]:
        if self.cells is not None:
            return self.cells
        return self.bounds.cells()


@dataclass(slots=True)
class CorridorDraft:
    id: int
    width: int
    start_room_id: int
    end_room_id: int
    path: list[GridPos]
    removed: bool = False


def corridor_band(center: int, width: int) -> tuple[int, int]:
    """Return the inclusive span of a ``width``-wide band around ``center``."""

    half = width // 2
    if width % 2 == 0:
        return center - half + 1, center + half
    return center - half, center + half


class LayoutBuilder:
    """Private grid/room accumulator owned by a single generation call.

    Room and corridor ids are arena slots: they are assigned on creation and
    never reused, even once a room has been removed.
    """

    def __init__(self, params: GenerationParameters) -> None:
        self.params = params
        self.width, self.height = params.map_bounds
        self.grid: IntGrid = [[WALL for _ in range(self.width)] for _ in range(self.height)]
        self.rooms: list[RoomDraft] = []
        self.corridors: list[CorridorDraft] = []
        self.start_room_id = 0
        self.boss_room_id = 0
        self.requested_rooms = 0
        self.placed_rooms = 0
        self.removed_rooms = 0
        self.loops_added = 0
        self.connectivity_repairs = 0
        self.phases: list[str] = []

    # ------------------------------------------------------------------
    # Grid access
    # ------------------------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set_cell(self, x: int, y: int, value: int) -> None:
        if self.in_bounds(x, y):
            self.grid[y][x] = value

    def get_cell(self, x: int, y: int) -> int:
        return self.grid[y][x]

    def carve_rect(self, rect: Rect, value: int = FLOOR) -> None:
        for y in range(max(0, rect.y), min(self.height, rect.y + rect.height)):
            row = self.grid[y]
            for x in range(max(0, rect.x), min(self.width, rect.x + rect.width)):
                row[x] = value

    def carve_path(self, path: Iterable[GridPos], width: int, value: int = FLOOR) -> None:
        """Stamp a ``width``-wide band around every cell of ``path``."""

        for pos in path:
            x0, x1 = corridor_band(pos.x, width)
            y0, y1 = corridor_band(pos.y, width)
            self.carve_rect(Rect(x0, y0, x1 - x0 + 1, y1 - y0 + 1), value)

    def carve_room(self, room: RoomDraft, value: int = FLOOR) -> None:
        for pos in room.footprint():
            self.set_cell(pos.x, pos.y, value)

    # ------------------------------------------------------------------
    # Rooms and corridors
    # ------------------------------------------------------------------
    def add_room(
        self,
        bounds: Rect,
        room_type: RoomType,
        *,
        shape: RoomShape = RoomShape.RECTANGLE,
        cells: Optional[frozenset[GridPos]] = None,
        center: Optional[GridPos] = None,
    ) -> RoomDraft:
        room = RoomDraft(
            id=len(self.rooms),
            room_type=room_type,
            shape=shape,
            bounds=bounds,
            center=center if center is not None else bounds.center(),
            cells=cells,
        )
        self.rooms.append(room)
        return room

    def live_rooms(self) -> list[RoomDraft]:
        return [room for room in self.rooms if not room.removed]

    def room(self, room_id: int) -> RoomDraft:
        room = self.rooms[room_id]
        if room.removed:
            raise KeyError(f"room {room_id} has been removed")
        return room

    def add_corridor(self, start: RoomDraft, end: RoomDraft, path: list[GridPos], width: int) -> CorridorDraft:
        corridor = CorridorDraft(
            id=len(self.corridors),
            width=width,
            start_room_id=start.id,
            end_room_id=end.id,
            path=path,
        )
        self.corridors.append(corridor)
        self.link(start, end)
        return corridor

    def live_corridors(self) -> list[CorridorDraft]:
        return [corridor for corridor in self.corridors if not corridor.removed]

    @staticmethod
    def link(a: RoomDraft, b: RoomDraft) -> None:
        """Record a symmetric adjacency between ``a`` and ``b``."""

        if a.id == b.id:
            return
        if b.id not in a.connected:
            a.connected.append(b.id)
        if a.id not in b.connected:
            b.connected.append(a.id)

    def remove_room(self, room_id: int) -> None:
        """Drop a room, its edges and its corridors without renumbering ids."""

        room = self.room(room_id)
        room.removed = True
        for neighbour_id in room.connected:
            neighbour = self.rooms[neighbour_id]
            if room_id in neighbour.connected:
                neighbour.connected.remove(room_id)
        room.connected.clear()

        self.carve_room(room, WALL)
        for corridor in self.corridors:
            if corridor.removed:
                continue
            if room_id in (corridor.start_room_id, corridor.end_room_id):
                corridor.removed = True
                self.carve_path(corridor.path, corridor.width, WALL)

        # Blanking may have cut through geometry that is still in use.
        self.restamp()
        self.removed_rooms += 1

    def restamp(self) -> None:
        """Re-carve every live corridor and room footprint as floor."""

        for corridor in self.live_corridors():
            self.carve_path(corridor.path, corridor.width)
        for room in self.live_rooms():
            self.carve_room(room)

    # ------------------------------------------------------------------
    # Finalisation
    # ------------------------------------------------------------------
    def build(self) -> DungeonLayout:
        """Freeze the accumulated state into a :class:`DungeonLayout`."""

        rooms = tuple(
            DungeonRoom(
                id=room.id,
                room_type=room.room_type,
                shape=room.shape,
                bounds=room.bounds,
                center=room.center,
                connected_rooms=frozenset(room.connected),
                distance_from_start=room.distance_from_start,
                is_main_path=room.is_main_path,
                cells=room.cells,
            )
            for room in self.live_rooms()
        )
        corridors = tuple(
            DungeonCorridor(
                id=corridor.id,
                width=corridor.width,
                start_room_id=corridor.start_room_id,
                end_room_id=corridor.end_room_id,
                path=tuple(corridor.path),
            )
            for corridor in self.live_corridors()
        )
        report = GenerationReport(
            algorithm=self.params.algorithm,
            requested_rooms=self.requested_rooms,
            placed_rooms=self.placed_rooms,
            removed_rooms=self.removed_rooms,
            loops_added=self.loops_added,
            connectivity_repairs=self.connectivity_repairs,
            phases=tuple(self.phases),
        )
        return DungeonLayout(
            size=(self.width, self.height),
            grid_map=tuple(tuple(row) for row in self.grid),
            rooms=rooms,
            corridors=corridors,
            start_room_id=self.start_room_id,
            boss_room_id=self.boss_room_id,
            parameters=self.params,
            report=report,
        )


__all__ = [
    "WALL",
    "FLOOR",
    "DOOR",
    "PASSABLE",
    "RoomType",
    "RoomShape",
    "DungeonRoom",
    "DungeonCorridor",
    "GenerationReport",
    "DungeonLayout",
    "RoomDraft",
    "CorridorDraft",
    "LayoutBuilder",
    "corridor_band",
]
