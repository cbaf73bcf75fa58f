"""JSON persistence for :class:`~modules.dungeon.layout.DungeonLayout`.

Documents are validated with pydantic models before the frozen layout values
are rebuilt, so a hand-edited or truncated file fails loudly on load.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from modules.dungeon.gen.params import AlgorithmType, GenerationParameters
from modules.dungeon.geometry import GridPos, Rect
from modules.dungeon.layout import (
    DOOR,
    WALL,
    DungeonCorridor,
    DungeonLayout,
    DungeonRoom,
    GenerationReport,
    RoomShape,
    RoomType,
)


FORMAT_VERSION = 1


class _Model(BaseModel):
    model_config = ConfigDict(extra="forbid")


class RectModel(_Model):
    x: int
    y: int
    width: int = Field(gt=0)
    height: int = Field(gt=0)


class RoomModel(_Model):
    id: int = Field(ge=0)
    room_type: RoomType
    shape: RoomShape
    bounds: RectModel
    center: Tuple[int, int]
    connected_rooms: List[int] = Field(default_factory=list)
    distance_from_start: int = -1
    is_main_path: bool = False
    cells: Optional[List[Tuple[int, int]]] = None


class CorridorModel(_Model):
    id: int = Field(ge=0)
    width: int = Field(ge=1)
    start_room_id: int
    end_room_id: int
    path: List[Tuple[int, int]]


class ReportModel(_Model):
    algorithm: AlgorithmType
    requested_rooms: int = 0
    placed_rooms: int = 0
    removed_rooms: int = 0
    loops_added: int = 0
    connectivity_repairs: int = 0
    phases: List[str] = Field(default_factory=list)


class LayoutModel(_Model):
    version: int = FORMAT_VERSION
    size: Tuple[int, int]
    grid_map: List[List[int]]
    rooms: List[RoomModel]
    corridors: List[CorridorModel]
    start_room_id: int
    boss_room_id: int
    parameters: Dict[str, Any]
    report: ReportModel

    @model_validator(mode="after")
    def _check_grid(self) -> "LayoutModel":
        width, height = self.size
        if len(self.grid_map) != height:
            raise ValueError(f"grid_map has {len(self.grid_map)} rows, expected {height}")
        for y, row in enumerate(self.grid_map):
            if len(row) != width:
                raise ValueError(f"grid_map row {y} has {len(row)} cells, expected {width}")
            for cell in row:
                if not WALL <= cell <= DOOR:
                    raise ValueError(f"grid_map row {y} contains unknown cell code {cell}")
        return self


def _rect_to_dict(rect: Rect) -> dict[str, int]:
    return {"x": rect.x, "y": rect.y, "width": rect.width, "height": rect.height}


def layout_to_dict(layout: DungeonLayout) -> dict[str, Any]:
    """Return a JSON-friendly dictionary holding every layout field."""

    return {
        "version": FORMAT_VERSION,
        "size": list(layout.size),
        "grid_map": [list(row) for row in layout.grid_map],
        "rooms": [
            {
                "id": room.id,
                "room_type": room.room_type.value,
                "shape": room.shape.value,
                "bounds": _rect_to_dict(room.bounds),
                "center": list(room.center.as_tuple()),
                "connected_rooms": sorted(room.connected_rooms),
                "distance_from_start": room.distance_from_start,
                "is_main_path": room.is_main_path,
                "cells": None if room.cells is None else [list(pos.as_tuple()) for pos in room.footprint()],
            }
            for room in layout.rooms
        ],
        "corridors": [
            {
                "id": corridor.id,
                "width": corridor.width,
                "start_room_id": corridor.start_room_id,
                "end_room_id": corridor.end_room_id,
                "path": [list(pos.as_tuple()) for pos in corridor.path],
            }
            for corridor in layout.corridors
        ],
        "start_room_id": layout.start_room_id,
        "boss_room_id": layout.boss_room_id,
        "parameters": layout.parameters.to_dict(),
        "report": {
            "algorithm": layout.report.algorithm.value,
            "requested_rooms": layout.report.requested_rooms,
            "placed_rooms": layout.report.placed_rooms,
            "removed_rooms": layout.report.removed_rooms,
            "loops_added": layout.report.loops_added,
            "connectivity_repairs": layout.report.connectivity_repairs,
            "phases": list(layout.report.phases),
        },
    }


def _room_from_model(model: RoomModel) -> DungeonRoom:
    cells = None
    if model.cells is not None:
        cells = frozenset(GridPos(x, y) for x, y in model.cells)
    return DungeonRoom(
        id=model.id,
        room_type=model.room_type,
        shape=model.shape,
        bounds=Rect(model.bounds.x, model.bounds.y, model.bounds.width, model.bounds.height),
        center=GridPos(*model.center),
        connected_rooms=frozenset(model.connected_rooms),
        distance_from_start=model.distance_from_start,
        is_main_path=model.is_main_path,
        cells=cells,
    )


def layout_from_dict(data: dict[str, Any]) -> DungeonLayout:
    """Validate ``data`` and rebuild the :class:`DungeonLayout` it describes.

    Raises :class:`pydantic.ValidationError` for malformed documents and
    :class:`ValueError` for invalid generation parameters.
    """

    model = LayoutModel.model_validate(data)
    report = model.report
    return DungeonLayout(
        size=model.size,
        grid_map=tuple(tuple(row) for row in model.grid_map),
        rooms=tuple(_room_from_model(room) for room in model.rooms),
        corridors=tuple(
            DungeonCorridor(
                id=corridor.id,
                width=corridor.width,
                start_room_id=corridor.start_room_id,
                end_room_id=corridor.end_room_id,
                path=tuple(GridPos(x, y) for x, y in corridor.path),
            )
            for corridor in model.corridors
        ),
        start_room_id=model.start_room_id,
        boss_room_id=model.boss_room_id,
        parameters=GenerationParameters.from_mapping(model.parameters),
        report=GenerationReport(
            algorithm=report.algorithm,
            requested_rooms=report.requested_rooms,
            placed_rooms=report.placed_rooms,
            removed_rooms=report.removed_rooms,
            loops_added=report.loops_added,
            connectivity_repairs=report.connectivity_repairs,
            phases=tuple(report.phases),
        ),
    )


def save_json(layout: DungeonLayout, path: str | Path) -> None:
    """Serialise ``layout`` to JSON on disk."""

    destination = Path(path)
    destination.write_text(json.dumps(layout_to_dict(layout), indent=2), encoding="utf-8")


def load_json(path: str | Path) -> DungeonLayout:
    """Load a :class:`DungeonLayout` from JSON data on disk."""

    source = Path(path)
    text = source.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise json.JSONDecodeError(
            f"Error parsing JSON in file '{source}': {exc.msg}",
            exc.doc,
            exc.pos,
        ) from exc
    try:
        return layout_from_dict(data)
    except (ValidationError, ValueError) as exc:
        raise ValueError(f"Invalid dungeon layout in file '{source}': {exc}") from exc


__all__ = [
    "FORMAT_VERSION",
    "LayoutModel",
    "layout_to_dict",
    "layout_from_dict",
    "save_json",
    "load_json",
]
