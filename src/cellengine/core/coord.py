"""Coordinates used for neighbor computation and grid sizing."""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Coordinate:
    """Position with three components.

    Automata are built on 2D grids for now, so ``z`` defaults to zero.
    """

    x: int
    y: int
    z: int = 0

    @classmethod
    def from_2d(cls, x: int, y: int) -> "Coordinate":
        """Build a coordinate from a 2D pair.

        Args:
            x: Column component
            y: Row component

        Returns:
            New coordinate with ``z == 0``
        """
        return cls(x, y)

    def as_tuple(self) -> Tuple[int, int]:
        """Return the ``(x, y)`` pair."""
        return (self.x, self.y)


@dataclass(frozen=True)
class GridCoord(Coordinate):
    """Coordinate of a slot in a 2D grid.

    Grids keep their cells in one flat row-major sequence, so this
    coordinate converts to and from a linear offset given the grid extents.
    """

    @classmethod
    def from_offset(cls, offset: int, rows: int, cols: int) -> "GridCoord":
        """Build a coordinate from a linear storage offset.

        Args:
            offset: Index into the flat cell storage
            rows: Number of grid rows
            cols: Number of grid columns

        Returns:
            Coordinate with ``x`` as the column and ``y`` as the row

        Raises:
            ValueError: If rows or cols is not positive
            IndexError: If offset is outside ``[0, rows * cols)``
        """
        if rows < 1 or cols < 1:
            raise ValueError(f"Grid extents must be positive, got {rows}x{cols}")
        if not 0 <= offset < rows * cols:
            raise IndexError(f"Offset {offset} out of range for {rows}x{cols} grid")

        col = offset % cols
        row = (offset - col) // cols
        return cls(col, row)

    def offset(self, cols: int) -> int:
        """Linear offset of this coordinate in a grid with ``cols`` columns."""
        return self.y * cols + self.x

    def in_bounds(self, rows: int, cols: int) -> bool:
        """Check whether the coordinate lies inside a ``rows`` x ``cols`` grid."""
        return 0 <= self.x < cols and 0 <= self.y < rows
