"""Interfaces the engine is built on.

Automaton authors implement :class:`Cell` (and optionally
:class:`EvolutionState`); the package provides the neighborhoods, the
grid and the engine. Consumers are the interface to the outer world.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence, Tuple

from .coord import Coordinate


class EvolutionState(ABC):
    """Global state of the whole simulation.

    Updated once per evolution step independently of any cell. Keep shared
    data here: it is created once and handed to every cell by reference,
    never copied.
    """

    @abstractmethod
    def update(self) -> None:
        """Advance the state; called once per step after all cells update."""


class EmptyState(EvolutionState):
    """No-op state for automata that have no global state."""

    def update(self) -> None:
        pass


class Cell(ABC):
    """Per-cell logic of an automaton.

    A grid holds one cell type, so a cell should be all-in-one: its
    coordinate plus whatever payload the rule needs. Subclasses must
    provide a ``coord`` attribute.
    """

    coord: Coordinate

    @abstractmethod
    def update(self, neighbors: Sequence[Optional["Cell"]], state: Any) -> "Cell":
        """Compute the next-generation cell.

        Called on the old-generation cell. Must not mutate ``self``, the
        neighbors or the state.

        Args:
            neighbors: Old-generation neighbors in neighborhood order,
                ``None`` where a neighbor falls off a bounded grid
            state: Global evolution state of the grid (read-only)

        Returns:
            New cell for the next generation
        """

    @classmethod
    @abstractmethod
    def with_coord(cls, coord: Coordinate) -> "Cell":
        """Construct a default cell bound to ``coord``."""

    def set_coord(self, coord: Coordinate) -> None:
        """Rebind the cell to another coordinate.

        For grids relocating cells; not meant to be used inside ``update``.
        """
        self.coord = coord


class Nhood(ABC):
    """Neighborhood strategy mapping a coordinate to neighbor coordinates."""

    @abstractmethod
    def neighbors(self, coord: Coordinate) -> List[Coordinate]:
        """Coordinates surrounding ``coord`` in a fixed order."""

    @abstractmethod
    def neighbors_count(self) -> int:
        """Number of coordinates ``neighbors`` always returns."""


class Grid(ABC):
    """Stores cells, updates them and owns the global evolution state."""

    @abstractmethod
    def update(self) -> None:
        """Run one evolution step."""

    @abstractmethod
    def cells(self) -> Tuple[Cell, ...]:
        """Current generation in linear storage order."""

    @abstractmethod
    def set_cells(self, cells: Sequence[Cell]) -> None:
        """Change the grid externally.

        Used by consumers reacting to user input, or by engines receiving
        updates from elsewhere.
        """

    @abstractmethod
    def state(self) -> EvolutionState:
        """Global evolution state."""

    @abstractmethod
    def dimensions(self) -> Coordinate:
        """Grid extents as a coordinate (rows, cols)."""


class Consumer(ABC):
    """Receives the cells after every evolution step."""

    @abstractmethod
    def consume(self, cells: Sequence[Cell]) -> None:
        """Handle the snapshot of one completed step."""


class Engine(ABC):
    """Drives a grid and reports to a consumer."""

    @abstractmethod
    def run_times(self, times: int) -> None:
        """Run the evolution a fixed number of steps."""
