"""Array and text views of a cell snapshot."""

from typing import Any, Callable, Sequence

import numpy as np

from .traits import Cell


def cells_to_array(
    cells: Sequence[Cell],
    rows: int,
    cols: int,
    value: Callable[[Cell], Any],
    dtype: Any = np.int8,
) -> np.ndarray:
    """Convert a row-major snapshot into a 2D array.

    Args:
        cells: Snapshot as returned by ``Grid.cells()``
        rows: Number of grid rows
        cols: Number of grid columns
        value: Extracts the array value of one cell
        dtype: Array dtype

    Returns:
        Array of shape ``(rows, cols)``; ``array[y, x]`` is the cell at (x, y)

    Raises:
        ValueError: If the snapshot size doesn't match the extents
    """
    if len(cells) != rows * cols:
        raise ValueError(f"Snapshot has {len(cells)} cells, expected {rows * cols}")

    flat = np.fromiter((value(cell) for cell in cells), dtype=dtype, count=len(cells))
    return flat.reshape(rows, cols)


def render_text(
    cells: Sequence[Cell],
    rows: int,
    cols: int,
    alive: Callable[[Cell], bool],
) -> str:
    """Render a snapshot with living cells as '*' and dead as '.'."""
    grid = cells_to_array(cells, rows, cols, alive, dtype=bool)
    return "\n".join("".join("*" if v else "." for v in row) for row in grid)
