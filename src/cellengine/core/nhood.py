"""Neighborhood strategies."""

from typing import List

from .coord import Coordinate
from .traits import Nhood


class MooreNhood(Nhood):
    """Eight surrounding cells, diagonals included.

    Order::

        0 | 1 | 2
        3 | x | 4
        5 | 6 | 7
    """

    def neighbors(self, coord: Coordinate) -> List[Coordinate]:
        x, y = coord.x, coord.y
        make = type(coord).from_2d
        return [
            make(x - 1, y - 1),
            make(x, y - 1),
            make(x + 1, y - 1),
            make(x - 1, y),
            make(x + 1, y),
            make(x - 1, y + 1),
            make(x, y + 1),
            make(x + 1, y + 1),
        ]

    def neighbors_count(self) -> int:
        return 8

    def __repr__(self) -> str:
        return "MooreNhood()"


class VonNeumannNhood(Nhood):
    """Four orthogonal cells: up, left, right, down.

    Order::

        - | 0 | -
        1 | x | 2
        - | 3 | -
    """

    def neighbors(self, coord: Coordinate) -> List[Coordinate]:
        x, y = coord.x, coord.y
        make = type(coord).from_2d
        return [
            make(x, y - 1),
            make(x - 1, y),
            make(x + 1, y),
            make(x, y + 1),
        ]

    def neighbors_count(self) -> int:
        return 4

    def __repr__(self) -> str:
        return "VonNeumannNhood()"
