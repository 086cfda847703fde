"""Conway's Game of Life on the generic engine.

Implements the classic rules:
- Live cell with 2-3 neighbors survives
- Dead cell with exactly 3 neighbors becomes alive
- All other cells die or stay dead

Besides the per-cell :class:`LifeCell`, the module keeps a vectorized
implementation of the same rules on numpy arrays (neighbor counting via a
PyTorch convolution) that serves as an independent oracle.
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import torch
import torch.nn.functional as F

from ..core.config import EdgePolicy
from ..core.coord import GridCoord
from ..core.grid import TwodimGrid
from ..core.nhood import MooreNhood
from ..core.snapshot import cells_to_array
from ..core.traits import Cell, EvolutionState

_KERNEL = torch.tensor([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=torch.float32).unsqueeze(0).unsqueeze(0)


class GenerationCounter(EvolutionState):
    """Global state counting completed generations."""

    def __init__(self, generation: int = 0) -> None:
        self.generation = generation

    def update(self) -> None:
        self.generation += 1


@dataclass
class LifeCell(Cell):
    """A Game of Life cell. Neighbors off a bounded grid count as dead."""

    coord: GridCoord
    alive: bool = False

    @classmethod
    def with_coord(cls, coord: GridCoord) -> "LifeCell":
        return cls(coord)

    def alive_count(self, neighbors: Sequence[Optional["LifeCell"]]) -> int:
        return sum(1 for n in neighbors if n is not None and n.alive)

    def update(self, neighbors: Sequence[Optional["LifeCell"]], state: EvolutionState) -> "LifeCell":
        count = self.alive_count(neighbors)
        if self.alive:
            alive = count in (2, 3)
        else:
            alive = count == 3
        return replace(self, alive=alive)


def life_grid(
    rows: int,
    cols: int,
    edge_policy: EdgePolicy = EdgePolicy.BOUNDED,
    workers: int = 1,
) -> TwodimGrid:
    """Create an all-dead Game of Life grid with a Moore neighborhood."""
    return TwodimGrid(rows, cols, MooreNhood(), GenerationCounter(), LifeCell, edge_policy=edge_policy, workers=workers)


def alive_array(cells: Sequence[LifeCell], rows: int, cols: int) -> np.ndarray:
    """Snapshot as an int8 array of shape (rows, cols), 1 for alive."""
    return cells_to_array(cells, rows, cols, lambda c: 1 if c.alive else 0)


def count_alive_neighbors(alive: np.ndarray, wrap: bool = False) -> np.ndarray:
    """Count living Moore neighbors of every cell using a convolution.

    Args:
        alive: Array of shape (rows, cols), nonzero for living cells
        wrap: Use circular padding (toroidal) instead of zero padding

    Returns:
        int8 array of neighbor counts with the same shape
    """
    board = torch.from_numpy((alive > 0).astype(np.float32)).unsqueeze(0).unsqueeze(0)

    if wrap:
        padded = F.pad(board, (1, 1, 1, 1), mode="circular")
        neighbors = F.conv2d(padded, _KERNEL)
    else:
        neighbors = F.conv2d(board, _KERNEL, padding=1)

    return neighbors[0, 0].numpy().astype(np.int8)


def life_step(alive: np.ndarray, wrap: bool = False) -> np.ndarray:
    """Apply one generation of the rules to a whole array."""
    counts = count_alive_neighbors(alive, wrap)
    cells = (alive > 0).astype(np.int8)

    birth = (cells == 0) & (counts == 3)
    survive = (cells > 0) & ((counts == 2) | (counts == 3))

    return (birth | survive).astype(np.int8)


class Pattern:
    """A named set of living cells."""

    def __init__(self, name: str, cells: List[Tuple[int, int]], description: str = "") -> None:
        """Initialize a pattern.

        Args:
            name: Pattern name
            cells: List of (x, y) coordinates for living cells
            description: Optional description
        """
        self.name = name
        self.cells = cells
        self.description = description

    def get_bounding_box(self) -> Tuple[int, int, int, int]:
        """Get bounding box of the pattern as (min_x, min_y, max_x, max_y)."""
        if not self.cells:
            return (0, 0, 0, 0)

        xs, ys = zip(*self.cells)
        return (min(xs), min(ys), max(xs), max(ys))

    def get_size(self) -> Tuple[int, int]:
        """Get pattern size as (width, height)."""
        min_x, min_y, max_x, max_y = self.get_bounding_box()
        return (max_x - min_x + 1, max_y - min_y + 1)

    def to_cells(self, rows: int, cols: int, offset_x: int = 0, offset_y: int = 0) -> List[LifeCell]:
        """Living cells for ``Grid.set_cells``.

        Cells that fall outside a ``rows`` x ``cols`` grid are skipped.
        """
        result = []
        for x, y in self.cells:
            coord = GridCoord.from_2d(x + offset_x, y + offset_y)
            if coord.in_bounds(rows, cols):
                result.append(LifeCell(coord, alive=True))
        return result

    def __repr__(self) -> str:
        return f"Pattern({self.name!r}, {len(self.cells)} cells)"


PATTERNS: Dict[str, Pattern] = {
    p.name: p
    for p in [
        Pattern("Block", [(0, 0), (0, 1), (1, 0), (1, 1)], "2x2 still life block"),
        Pattern("Beehive", [(1, 0), (2, 0), (0, 1), (3, 1), (1, 2), (2, 2)], "Beehive still life"),
        Pattern("Blinker", [(0, 1), (1, 1), (2, 1)], "Period-2 oscillator"),
        Pattern("Toad", [(1, 0), (2, 0), (3, 0), (0, 1), (1, 1), (2, 1)], "Period-2 oscillator"),
        Pattern("Glider", [(1, 0), (2, 1), (0, 2), (1, 2), (2, 2)], "Smallest spaceship, period-4"),
        Pattern("R-pentomino", [(1, 0), (2, 0), (0, 1), (1, 1), (1, 2)], "Methuselah"),
    ]
}


def get_pattern(name: str) -> Pattern:
    """Look up a built-in pattern.

    Raises:
        KeyError: If no pattern has that name
    """
    try:
        return PATTERNS[name]
    except KeyError:
        raise KeyError(f"Unknown pattern {name!r}; known: {', '.join(sorted(PATTERNS))}") from None
