"""Example automata built on the engine."""

from .hpp import Direction, HPPCell, HPPPhase, Stage
from .life import GenerationCounter, LifeCell, Pattern

__all__ = ["Direction", "GenerationCounter", "HPPCell", "HPPPhase", "LifeCell", "Pattern", "Stage"]
