"""
Seed worklist for the mountain flood.

A plain LIFO stack of (x, y) coordinates. Growth is limited only by
available memory; coordinates on the image border are never admitted.
"""

from typing import Iterable, List, Optional

from .field import Coordinate, is_interior


class SeedWorklist:
    """Growable LIFO of pending coordinates, without deduplication."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self._stack: List[Coordinate] = []

    def push(self, x: int, y: int) -> None:
        """Add (x, y) if strictly interior; border coordinates are ignored."""
        if is_interior(x, y, self.width, self.height):
            self._stack.append((x, y))

    def extend(self, coords: Iterable[Coordinate]) -> None:
        for x, y in coords:
            self.push(x, y)

    def pop(self) -> Optional[Coordinate]:
        """Most recently pushed coordinate, or None once the worklist is empty."""
        if not self._stack:
            return None
        return self._stack.pop()

    def __len__(self) -> int:
        return len(self._stack)

    def __bool__(self) -> bool:
        return bool(self._stack)
