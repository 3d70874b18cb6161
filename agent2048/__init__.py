"""Expectimax move selection for the 2048 sliding-tile puzzle."""

from agent2048.brain import AgentBrain, Direction
from agent2048.config import DEFAULT_CONFIG, WEIGHT_PRESETS, SearchConfig
from agent2048.errors import InvalidSnapshotError, InvariantViolation
from agent2048.evaluator import evaluate_grid
from agent2048.expectimax import ExpectimaxAgent, expectimax, select_move
from agent2048.grid import Grid, Tile

__all__ = [
    "AgentBrain",
    "Direction",
    "DEFAULT_CONFIG",
    "WEIGHT_PRESETS",
    "SearchConfig",
    "InvalidSnapshotError",
    "InvariantViolation",
    "evaluate_grid",
    "ExpectimaxAgent",
    "expectimax",
    "select_move",
    "Grid",
    "Tile",
]
