"""Uniform-grid broad phase for collision detection."""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Iterator, Optional

from .body import AABB, RigidBody

Cell = tuple[int, int]


class SpatialHash:
    """Buckets bodies into square grid cells by their bounding boxes."""

    def __init__(self, cell_size: float = 100.0) -> None:
        self.cell_size = cell_size
        self._cells: defaultdict[Cell, list[RigidBody]] = defaultdict(list)

    def _cells_for(self, aabb: AABB) -> Iterator[Cell]:
        min_x = math.floor(aabb.min.x / self.cell_size)
        min_y = math.floor(aabb.min.y / self.cell_size)
        max_x = math.floor(aabb.max.x / self.cell_size)
        max_y = math.floor(aabb.max.y / self.cell_size)
        for y in range(min_y, max_y + 1):
            for x in range(min_x, max_x + 1):
                yield (x, y)

    def insert(self, body: Optional[RigidBody]) -> None:
        """Add a body to every cell its bounding box touches."""
        if body is None:
            return
        for cell in self._cells_for(body.aabb):
            self._cells[cell].append(body)

    def clear(self) -> None:
        self._cells.clear()

    def query_potential_collisions(self, body: Optional[RigidBody]) -> list[RigidBody]:
        """Return the other bodies sharing a cell with ``body``, each once."""
        if body is None:
            return []
        seen: set[int] = set()
        result: list[RigidBody] = []
        for cell in self._cells_for(body.aabb):
            for other in self._cells.get(cell, ()):
                if other is not body and id(other) not in seen:
                    seen.add(id(other))
                    result.append(other)
        return result

    def query_all_potential_collisions(self) -> list[tuple[RigidBody, RigidBody]]:
        """Return every distinct pair of bodies that share at least one cell."""
        seen: set[tuple[int, int]] = set()
        result: list[tuple[RigidBody, RigidBody]] = []
        for bodies in self._cells.values():
            for i, body_a in enumerate(bodies):
                for body_b in bodies[i + 1:]:
                    key = (min(id(body_a), id(body_b)), max(id(body_a), id(body_b)))
                    if key in seen:
                        continue
                    seen.add(key)
                    result.append((body_a, body_b))
        return result