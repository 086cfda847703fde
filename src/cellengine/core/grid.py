"""Double-buffered 2D grid for cellular automata."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Tuple, Type

from .config import EdgePolicy, GridConfig
from .coord import Coordinate, GridCoord
from .traits import Cell, EvolutionState, Grid, Nhood

logger = logging.getLogger(__name__)


class TwodimGrid(Grid):
    """2D grid implemented with two buffers swapped on every step.

    The old buffer is read-only neighbor data for the step; the new buffer
    receives the updated cells. Both buffers are flat lists in row-major
    order, indexed by :meth:`GridCoord.offset`.

    Neighbor offsets are resolved once at construction under the chosen
    :class:`EdgePolicy`, so a step only does list lookups.
    """

    def __init__(
        self,
        rows: int,
        cols: int,
        nhood: Nhood,
        state: EvolutionState,
        cell_type: Type[Cell],
        edge_policy: EdgePolicy = EdgePolicy.BOUNDED,
        workers: int = 1,
    ) -> None:
        """Initialize a new grid.

        Args:
            rows: Number of rows
            cols: Number of columns
            nhood: Neighborhood strategy
            state: Initial global evolution state
            cell_type: Cell class; every slot starts as ``cell_type.with_coord``
            edge_policy: Resolution of neighbors that fall off the grid
            workers: Threads used for the cell pass of each step

        Raises:
            ValueError: If extents or workers are not positive, or if the
                neighborhood returns a wrong number of neighbors
        """
        if rows < 1 or cols < 1:
            raise ValueError(f"Grid extents must be positive, got {rows}x{cols}")
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")

        self._rows = rows
        self._cols = cols
        self._nhood = nhood
        self._state = state
        self._edge_policy = EdgePolicy(edge_policy)
        self._workers = workers
        self._generation = 0

        size = rows * cols
        coords = [GridCoord.from_offset(offset, rows, cols) for offset in range(size)]
        self._neighbors: List[Tuple[Optional[int], ...]] = [self._neighbor_offsets(c) for c in coords]

        # Index of the buffer holding the current generation
        self._current = 0
        self._buffers: List[List[Cell]] = [
            [cell_type.with_coord(c) for c in coords],
            [cell_type.with_coord(c) for c in coords],
        ]

        self._parts = self._split(size, workers)
        # One pool for the grid's lifetime; see close()
        self._pool: Optional[ThreadPoolExecutor] = None
        if len(self._parts) > 1:
            self._pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="cellengine-grid")

        logger.debug(
            "Created %dx%d grid of %s with %r, edges=%s, workers=%d",
            rows,
            cols,
            cell_type.__name__,
            nhood,
            self._edge_policy.value,
            workers,
        )

    @classmethod
    def from_config(
        cls, config: GridConfig, nhood: Nhood, state: EvolutionState, cell_type: Type[Cell]
    ) -> "TwodimGrid":
        """Create a grid from a :class:`GridConfig`."""
        return cls(
            config.rows,
            config.cols,
            nhood,
            state,
            cell_type,
            edge_policy=config.edge_policy,
            workers=config.workers,
        )

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def nhood(self) -> Nhood:
        return self._nhood

    @property
    def edge_policy(self) -> EdgePolicy:
        return self._edge_policy

    @property
    def generation(self) -> int:
        """Number of completed evolution steps."""
        return self._generation

    def __len__(self) -> int:
        return self._rows * self._cols

    def _neighbor_offsets(self, coord: GridCoord) -> Tuple[Optional[int], ...]:
        """Resolve the neighbor coordinates of ``coord`` to buffer offsets."""
        expected = self._nhood.neighbors_count()
        neighbors = self._nhood.neighbors(coord)
        if len(neighbors) != expected:
            raise ValueError(
                f"{self._nhood!r} returned {len(neighbors)} neighbors for "
                f"({coord.x}, {coord.y}), expected {expected}"
            )
        return tuple(self._resolve(n) for n in neighbors)

    def _resolve(self, coord: Coordinate) -> Optional[int]:
        """Map a possibly off-grid coordinate to an offset under the edge policy."""
        x, y = coord.x, coord.y

        if self._edge_policy is EdgePolicy.TOROIDAL:
            x = x % self._cols
            y = y % self._rows
        elif self._edge_policy is EdgePolicy.CLAMP:
            x = min(max(x, 0), self._cols - 1)
            y = min(max(y, 0), self._rows - 1)
        elif not (0 <= x < self._cols and 0 <= y < self._rows):
            return None

        return y * self._cols + x

    @staticmethod
    def _split(size: int, workers: int) -> List[Tuple[int, int]]:
        """Split ``range(size)`` into at most ``workers`` contiguous parts."""
        chunk = -(-size // workers)
        return [(start, min(start + chunk, size)) for start in range(0, size, chunk)]

    def _update_range(self, old: List[Cell], new: List[Cell], start: int, end: int) -> None:
        """Update slots ``[start, end)`` reading only from ``old``."""
        state = self._state
        table = self._neighbors

        for offset in range(start, end):
            neighbors = [None if n is None else old[n] for n in table[offset]]
            cell = old[offset].update(neighbors, state)
            if not isinstance(cell, Cell):
                raise TypeError(
                    f"{type(old[offset]).__name__}.update returned {type(cell).__name__}, expected a Cell"
                )
            new[offset] = cell

    def update(self) -> None:
        """Advance the grid by one generation.

        Every cell is computed from the previous generation only, then the
        buffers swap roles and the global state updates once.
        """
        old = self._buffers[self._current]
        new = self._buffers[1 - self._current]

        if self._pool is None:
            self._update_range(old, new, 0, len(old))
        else:
            futures = [self._pool.submit(self._update_range, old, new, start, end) for start, end in self._parts]
            for future in futures:
                future.result()

        self._current = 1 - self._current
        self._generation += 1
        self._state.update()

    def cells(self) -> Tuple[Cell, ...]:
        """Snapshot of the current generation in row-major order."""
        return tuple(self._buffers[self._current])

    def cell_at(self, x: int, y: int) -> Cell:
        """Get the current cell at column ``x``, row ``y``.

        Raises:
            IndexError: If coordinates are out of bounds
        """
        if not (0 <= x < self._cols and 0 <= y < self._rows):
            raise IndexError(f"Coordinates ({x}, {y}) out of bounds")
        return self._buffers[self._current][y * self._cols + x]

    def set_cells(self, cells: Iterable[Cell]) -> None:
        """Write cells into the current generation.

        Each cell lands in the slot of its own coordinate, so passing a full
        generation replaces it and passing a few cells changes only those.

        Args:
            cells: Cells to place

        Raises:
            IndexError: If a cell's coordinate is outside the grid
        """
        cells = list(cells)

        # Check every coordinate before writing so a failure changes nothing
        offsets = []
        for cell in cells:
            x, y = cell.coord.x, cell.coord.y
            if not (0 <= x < self._cols and 0 <= y < self._rows):
                raise IndexError(f"Cell coordinate ({x}, {y}) outside {self._rows}x{self._cols} grid")
            offsets.append(y * self._cols + x)

        current = self._buffers[self._current]
        for offset, cell in zip(offsets, cells):
            current[offset] = cell

        logger.debug("Set %d cells externally at generation %d", len(cells), self._generation)

    def state(self) -> EvolutionState:
        return self._state

    def dimensions(self) -> Coordinate:
        """Grid extents as ``Coordinate(x=rows, y=cols)``."""
        return Coordinate.from_2d(self._rows, self._cols)

    def neighbors_of(self, x: int, y: int) -> List[Optional[Cell]]:
        """Current-generation neighbors of a cell as the next step will see them."""
        if not GridCoord(x, y).in_bounds(self._rows, self._cols):
            raise IndexError(f"Coordinates ({x}, {y}) out of bounds")
        current = self._buffers[self._current]
        return [None if n is None else current[n] for n in self._neighbors[y * self._cols + x]]

    def close(self) -> None:
        """Shut down the worker threads of a grid built with ``workers > 1``.

        Later updates run on the calling thread. Single-worker grids hold
        no threads, so this is a no-op for them.
        """
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None

    def __enter__(self) -> "TwodimGrid":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"TwodimGrid(rows={self._rows}, cols={self._cols}, nhood={self._nhood!r}, "
            f"edge_policy={self._edge_policy.value}, generation={self._generation})"
        )
