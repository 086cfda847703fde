"""HPP lattice gas (https://en.wikipedia.org/wiki/HPP_model).

Every cell holds up to four particles, one per direction of travel. Steps
alternate between a collision phase, where head-on pairs inside a cell turn
90 degrees, and a transport phase, where every particle moves one cell
along its direction. The current phase is global evolution state, so all
cells of a step agree on it. Uses the Von Neumann neighborhood. On bounded
and clamped grids particles hitting a wall bounce back; a clamped neighbor
that resolves to the cell itself counts as a wall.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence, Tuple

from ..core.config import EdgePolicy
from ..core.coord import GridCoord
from ..core.grid import TwodimGrid
from ..core.nhood import VonNeumannNhood
from ..core.traits import Cell, EvolutionState

Particles = Tuple[bool, bool, bool, bool]

EMPTY: Particles = (False, False, False, False)


class Direction(Enum):
    """Direction of travel; values index the Von Neumann neighbor list."""

    UP = 0
    LEFT = 1
    RIGHT = 2
    DOWN = 3

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITE[self]


_OPPOSITE = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

_VERTICAL_PAIR: Particles = (True, False, False, True)
_HORIZONTAL_PAIR: Particles = (False, True, True, False)


class Stage(Enum):
    COLLISION = "collision"
    TRANSPORT = "transport"


class HPPPhase(EvolutionState):
    """Global phase alternating between collision and transport."""

    def __init__(self, stage: Stage = Stage.COLLISION) -> None:
        self.stage = stage

    def update(self) -> None:
        self.stage = Stage.TRANSPORT if self.stage is Stage.COLLISION else Stage.COLLISION


@dataclass
class HPPCell(Cell):
    """Lattice site with one particle slot per direction."""

    coord: GridCoord
    particles: Particles = EMPTY

    @classmethod
    def with_coord(cls, coord: GridCoord) -> "HPPCell":
        return cls(coord)

    @classmethod
    def with_particles(cls, x: int, y: int, *directions: Direction) -> "HPPCell":
        """Cell at (x, y) holding particles moving in ``directions``."""
        particles = [False] * 4
        for direction in directions:
            particles[direction.value] = True
        return cls(GridCoord.from_2d(x, y), tuple(particles))

    def particle(self, direction: Direction) -> bool:
        return self.particles[direction.value]

    @property
    def count(self) -> int:
        return sum(self.particles)

    def update(self, neighbors: Sequence[Optional["HPPCell"]], state: HPPPhase) -> "HPPCell":
        if state.stage is Stage.COLLISION:
            return self.collide()
        return self.transport(neighbors)

    def collide(self) -> "HPPCell":
        """Rotate an isolated head-on pair by 90 degrees."""
        if self.particles == _VERTICAL_PAIR:
            return replace(self, particles=_HORIZONTAL_PAIR)
        if self.particles == _HORIZONTAL_PAIR:
            return replace(self, particles=_VERTICAL_PAIR)
        return replace(self)

    def transport(self, neighbors: Sequence[Optional["HPPCell"]]) -> "HPPCell":
        """Gather particles arriving from neighbors and bounce those hitting a wall."""
        particles = [False] * 4

        for direction in Direction:
            behind = neighbors[direction.opposite.value]
            if not self._is_wall(behind) and behind.particle(direction):
                particles[direction.value] = True

            if self._is_wall(neighbors[direction.value]) and self.particle(direction):
                particles[direction.opposite.value] = True

        return replace(self, particles=tuple(particles))

    def _is_wall(self, neighbor: Optional["HPPCell"]) -> bool:
        # Bounded edges give None, clamped edges give the cell itself
        return neighbor is None or neighbor.coord == self.coord


def hpp_grid(rows: int, cols: int, edge_policy: EdgePolicy = EdgePolicy.BOUNDED) -> TwodimGrid:
    """Create an empty HPP grid starting in the collision phase."""
    return TwodimGrid(rows, cols, VonNeumannNhood(), HPPPhase(), HPPCell, edge_policy=edge_policy)


def particle_count(cells: Sequence[HPPCell], direction: Optional[Direction] = None) -> int:
    """Total particles in a snapshot, optionally only those moving in ``direction``."""
    if direction is None:
        return sum(cell.count for cell in cells)
    return sum(1 for cell in cells if cell.particle(direction))
