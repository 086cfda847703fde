"""Grid configuration."""

from dataclasses import dataclass
from enum import Enum


class EdgePolicy(Enum):
    """How neighbor coordinates outside the grid are resolved."""

    BOUNDED = "bounded"  # None placeholder
    TOROIDAL = "toroidal"
    CLAMP = "clamp"


@dataclass(frozen=True)
class GridConfig:
    """Configuration for a 2D grid."""

    rows: int = 50
    cols: int = 50
    edge_policy: EdgePolicy = EdgePolicy.BOUNDED
    workers: int = 1

    def __post_init__(self) -> None:
        if self.rows < 1:
            raise ValueError("rows must be >= 1")
        if self.cols < 1:
            raise ValueError("cols must be >= 1")
        if self.workers < 1:
            raise ValueError("workers must be >= 1")
        if not isinstance(self.edge_policy, EdgePolicy):
            # Accept the enum's string values, e.g. "toroidal"
            object.__setattr__(self, "edge_policy", EdgePolicy(self.edge_policy))
