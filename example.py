#!/usr/bin/env python3
"""
Example usage of the cellengine package.
"""

import logging

from cellengine import EdgePolicy, Sequential
from cellengine.core.consumers import CycleDetector, PrintConsumer
from cellengine.examples.hpp import Direction, HPPCell, hpp_grid, particle_count
from cellengine.examples.life import get_pattern, life_grid


class Tee(PrintConsumer):
    """Prints each step and feeds a cycle detector."""

    def __init__(self, rows, cols, detector):
        super().__init__(rows, cols, lambda cell: cell.alive)
        self.detector = detector

    def consume(self, cells):
        super().consume(cells)
        self.detector.consume(cells)


def main():
    """Demonstrate programmatic usage of the cellengine package."""
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    # Game of Life: glider on a 10x10 torus
    grid = life_grid(10, 10, edge_policy=EdgePolicy.TOROIDAL)
    grid.set_cells(get_pattern("Glider").to_cells(10, 10, offset_x=3, offset_y=3))

    detector = CycleDetector(key=lambda cells: tuple(c.alive for c in cells))
    engine = Sequential(grid, Tee(grid.rows, grid.cols, detector))
    engine.run_times(8)

    print(f"Generation: {grid.state().generation}")
    print(f"Population: {sum(c.alive for c in grid.cells())}")
    if detector.cycle_detected:
        print(f"Cycle detected! Length: {detector.cycle_length}")
    print()

    # HPP lattice gas: two particles colliding head-on
    gas = hpp_grid(5, 5)
    gas.set_cells(
        [
            HPPCell.with_particles(2, 2, Direction.UP, Direction.DOWN),
            HPPCell.with_particles(0, 4, Direction.RIGHT),
        ]
    )
    for _ in range(6):
        gas.update()
        print(f"Step {gas.generation}: {particle_count(gas.cells())} particles, next phase {gas.state().stage.value}")


if __name__ == "__main__":
    main()
