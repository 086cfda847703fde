"""Engines driving a grid through evolution steps."""

import logging

from .traits import Consumer, Engine, Grid

logger = logging.getLogger(__name__)


class Sequential(Engine):
    """Runs evolution steps one after another on the calling thread.

    Useful for tests and for grids with interior parallelism. It is the
    reference behavior other engines must reproduce: the same sequence of
    consumed snapshots for the same initial grid and deterministic cells.
    """

    def __init__(self, grid: Grid, consumer: Consumer) -> None:
        """Initialize the engine.

        Args:
            grid: Grid to evolve
            consumer: Receives the cells after every step
        """
        self.grid = grid
        self.consumer = consumer
        self._steps_run = 0

    @property
    def steps_run(self) -> int:
        """Total number of steps completed by this engine."""
        return self._steps_run

    def step(self) -> None:
        """Run one step and report the resulting cells."""
        self.grid.update()
        self._steps_run += 1
        self.consumer.consume(self.grid.cells())

    def run_times(self, times: int) -> None:
        """Run exactly ``times`` steps, reporting after each one.

        Args:
            times: Number of steps; zero runs nothing

        Raises:
            ValueError: If times is negative
        """
        if times < 0:
            raise ValueError(f"times must be >= 0, got {times}")

        logger.debug("Running %d steps from step %d", times, self._steps_run)
        for _ in range(times):
            self.step()
        logger.debug("Finished at step %d", self._steps_run)
