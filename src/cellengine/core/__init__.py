"""Grid, neighborhood and engine machinery."""

from .config import EdgePolicy, GridConfig
from .consumers import CallbackConsumer, CollectingConsumer, CycleDetector, PrintConsumer
from .coord import Coordinate, GridCoord
from .engine import Sequential
from .grid import TwodimGrid
from .nhood import MooreNhood, VonNeumannNhood
from .snapshot import cells_to_array, render_text
from .traits import Cell, Consumer, EmptyState, Engine, EvolutionState, Grid, Nhood

__all__ = [
    "CallbackConsumer",
    "Cell",
    "CollectingConsumer",
    "Consumer",
    "Coordinate",
    "CycleDetector",
    "EdgePolicy",
    "EmptyState",
    "Engine",
    "EvolutionState",
    "Grid",
    "GridConfig",
    "GridCoord",
    "MooreNhood",
    "Nhood",
    "PrintConsumer",
    "Sequential",
    "TwodimGrid",
    "VonNeumannNhood",
    "cells_to_array",
    "render_text",
]
