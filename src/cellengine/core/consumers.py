"""Reference consumers for engine output."""

import logging
import sys
from collections import deque
from typing import Callable, Deque, Dict, Hashable, List, Optional, Sequence, TextIO, Tuple

from .snapshot import render_text
from .traits import Cell, Consumer

logger = logging.getLogger(__name__)


class CollectingConsumer(Consumer):
    """Keeps the snapshots it receives.

    With ``maxlen`` only the most recent snapshots are kept.
    """

    def __init__(self, maxlen: Optional[int] = None) -> None:
        self._snapshots: Deque[Tuple[Cell, ...]] = deque(maxlen=maxlen)
        self._consumed = 0

    def consume(self, cells: Sequence[Cell]) -> None:
        self._snapshots.append(tuple(cells))
        self._consumed += 1

    @property
    def snapshots(self) -> List[Tuple[Cell, ...]]:
        """Kept snapshots, oldest first."""
        return list(self._snapshots)

    @property
    def consumed(self) -> int:
        """Number of snapshots received, kept or not."""
        return self._consumed

    @property
    def last(self) -> Optional[Tuple[Cell, ...]]:
        return self._snapshots[-1] if self._snapshots else None


class CallbackConsumer(Consumer):
    """Forwards every snapshot to a callable."""

    def __init__(self, callback: Callable[[Sequence[Cell]], None]) -> None:
        self.callback = callback

    def consume(self, cells: Sequence[Cell]) -> None:
        self.callback(cells)


class PrintConsumer(Consumer):
    """Writes a text rendering of every snapshot to a stream."""

    def __init__(
        self,
        rows: int,
        cols: int,
        alive: Callable[[Cell], bool],
        stream: Optional[TextIO] = None,
    ) -> None:
        """Initialize the consumer.

        Args:
            rows: Number of grid rows
            cols: Number of grid columns
            alive: Whether a cell is drawn as '*'
            stream: Output stream, stdout by default
        """
        self.rows = rows
        self.cols = cols
        self.alive = alive
        self.stream = stream or sys.stdout
        self._step = 0

    def consume(self, cells: Sequence[Cell]) -> None:
        self._step += 1
        self.stream.write(f"Step {self._step}:\n")
        self.stream.write(render_text(cells, self.rows, self.cols, self.alive))
        self.stream.write("\n\n")


class CycleDetector(Consumer):
    """Detects when a snapshot repeats an earlier one.

    Snapshots are reduced to hashable keys by ``key``; the first repeat
    fixes the cycle start and length, later snapshots are ignored.
    """

    def __init__(self, key: Callable[[Sequence[Cell]], Hashable], max_history: int = 1000) -> None:
        """Initialize the detector.

        Args:
            key: Reduces a snapshot to a hashable value
            max_history: Number of recent keys remembered
        """
        self.key = key
        self._seen: Dict[Hashable, int] = {}
        self._history: Deque[Hashable] = deque()
        self._max_history = max_history
        self._step = 0
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start = 0

    @property
    def cycle_detected(self) -> bool:
        return self._cycle_detected

    @property
    def cycle_length(self) -> int:
        """Length of detected cycle (0 if no cycle)."""
        return self._cycle_length

    @property
    def cycle_start(self) -> int:
        """Step where the cycle started (0 if no cycle)."""
        return self._cycle_start

    def consume(self, cells: Sequence[Cell]) -> None:
        self._step += 1
        if self._cycle_detected:
            return

        current = self.key(cells)
        if current in self._seen:
            first = self._seen[current]
            self._cycle_detected = True
            self._cycle_length = self._step - first
            self._cycle_start = first
            logger.debug("Cycle of length %d detected at step %d", self._cycle_length, self._step)
            return

        self._seen[current] = self._step
        self._history.append(current)

        if len(self._history) > self._max_history:
            oldest = self._history.popleft()
            if self._seen.get(oldest) == self._step - len(self._history):
                del self._seen[oldest]
