"""Integer grid geometry shared by the dungeon generators."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True, slots=True)
class GridPos:
    """A cell coordinate on the occupancy grid."""

    x: int
    y: int

    def distance_to(self, other: "GridPos") -> float:
        """Return the Euclidean distance between two cells."""

        return math.hypot(self.x - other.x, self.y - other.y)

    def as_tuple(self) -> tuple[int, int]:
        return self.x, self.y


@dataclass(frozen=True, slots=True)
class Rect:
    """Axis-aligned rectangle helper."""

    x: int
    y: int
    width: int
    height: int

    @property
    def x2(self) -> int:
        return self.x + self.width - 1

    @property
    def y2(self) -> int:
        return self.y + self.height - 1

    @property
    def area(self) -> int:
        return self.width * self.height

    def center(self) -> GridPos:
        return GridPos(self.x + self.width // 2, self.y + self.height // 2)

    def contains(self, pos: GridPos) -> bool:
        return self.x <= pos.x <= self.x2 and self.y <= pos.y <= self.y2

    def overlaps(self, other: "Rect") -> bool:
        """Return ``True`` when both rectangles share at least one cell.

        Rectangles that merely touch along an edge do not overlap.
        """

        return (
            self.x < other.x + other.width
            and other.x < self.x + self.width
            and self.y < other.y + other.height
            and other.y < self.y + self.height
        )

    def cells(self) -> Iterator[GridPos]:
        for y in range(self.y, self.y + self.height):
            for x in range(self.x, self.x + self.width):
                yield GridPos(x, y)

    @classmethod
    def bounding(cls, cells: "list[GridPos] | frozenset[GridPos]") -> "Rect":
        """Return the smallest rectangle covering ``cells``."""

        if not cells:
            raise ValueError("cannot bound an empty cell set")
        xs = [cell.x for cell in cells]
        ys = [cell.y for cell in cells]
        min_x, max_x = min(xs), max(xs)
        min_y, max_y = min(ys), max(ys)
        return cls(min_x, min_y, max_x - min_x + 1, max_y - min_y + 1)


__all__ = ["GridPos", "Rect"]
