"""Framework for building and running cellular automata."""

__version__ = "0.1.0"

from .core.config import EdgePolicy, GridConfig
from .core.coord import Coordinate, GridCoord
from .core.engine import Sequential
from .core.grid import TwodimGrid
from .core.nhood import MooreNhood, VonNeumannNhood
from .core.traits import Cell, Consumer, EmptyState, Engine, EvolutionState, Grid, Nhood

__all__ = [
    "Cell",
    "Consumer",
    "Coordinate",
    "EdgePolicy",
    "EmptyState",
    "Engine",
    "EvolutionState",
    "Grid",
    "GridConfig",
    "GridCoord",
    "MooreNhood",
    "Nhood",
    "Sequential",
    "TwodimGrid",
    "VonNeumannNhood",
]
