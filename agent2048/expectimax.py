import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Tuple

from agent2048.brain import AgentBrain, Direction
from agent2048.config import DEFAULT_CONFIG, SearchConfig
from agent2048.errors import InvalidSnapshotError
from agent2048.evaluator import evaluate_grid

logger = logging.getLogger(__name__)


def expectimax(brain: AgentBrain, chance: bool, depth: int, config: Optional[SearchConfig] = None) -> float:
    """
    Expected value of ``brain`` searched ``depth`` layers deep.

    Decision layers take the best of the legal moves (0 when none is legal);
    chance layers average over every empty cell and every spawn value.
    The brain passed in is never mutated.
    """
    if config is None:
        config = DEFAULT_CONFIG
    if depth <= 0:
        return evaluate_grid(brain.grid, config)

    if chance:
        return _chance_value(brain, depth, config)
    return _max_value(brain, depth, config)


def _max_value(brain: AgentBrain, depth: int, config: SearchConfig) -> float:
    best = None
    for direction in Direction:
        child = brain.clone()
        if not child.move(direction):
            continue
        value = expectimax(child, True, depth - 1, config)
        if best is None or value > best:
            best = value
    return 0.0 if best is None else best


def _chance_value(brain: AgentBrain, depth: int, config: SearchConfig) -> float:
    empties = brain.grid.available_cells()
    if not empties:
        return evaluate_grid(brain.grid, config)

    total = 0.0
    for cell in empties:
        for value, prob in config.spawn_values:
            child = brain.clone()
            child.add_tile(cell, value)
            total += prob * expectimax(child, False, depth - 1, config)
    return total / len(empties)


def _score_direction(brain: AgentBrain, direction: Direction, config: SearchConfig) -> Optional[float]:
    child = brain.clone()
    if not child.move(direction):
        return None
    return expectimax(child, True, config.depth_limit, config)


def score_moves(brain: AgentBrain, config: Optional[SearchConfig] = None) -> Dict[Direction, Optional[float]]:
    """Search score for every direction, None for directions that change nothing."""
    if config is None:
        config = DEFAULT_CONFIG
    directions = list(Direction)
    if config.workers > 1:
        with ThreadPoolExecutor(max_workers=config.workers) as pool:
            scores = list(pool.map(lambda d: _score_direction(brain, d, config), directions))
    else:
        scores = [_score_direction(brain, d, config) for d in directions]
    return dict(zip(directions, scores))


def pick_best(scores: Dict[Direction, Optional[float]]) -> Optional[Direction]:
    """Highest-scoring legal direction; ties go to the first in direction order.

    When every legal direction scores exactly 0 the last legal one is returned.
    None means no direction is legal.
    """
    legal: List[Tuple[Direction, float]] = [(d, s) for d, s in scores.items() if s is not None]
    if not legal:
        return None
    if all(s == 0 for _, s in legal):
        return legal[-1][0]

    best_move, best_score = None, float('-inf')
    for direction, score in legal:
        if score > best_score:
            best_move, best_score = direction, score
    return best_move


def load_brain(snapshot, config: SearchConfig) -> AgentBrain:
    """Validate a snapshot against the config before any simulation runs."""
    brain = snapshot if isinstance(snapshot, AgentBrain) else AgentBrain.from_snapshot(snapshot)
    if config.position_weights.shape != (brain.size, brain.size):
        raise InvalidSnapshotError(
            f"Board is {brain.size}x{brain.size} but position_weights has shape {config.position_weights.shape}")
    return brain


def select_move(snapshot, config: Optional[SearchConfig] = None) -> Optional[Direction]:
    """Choose a move for a board snapshot (or an existing AgentBrain).

    Returns None when no direction is legal, i.e. the game is over.
    """
    if config is None:
        config = DEFAULT_CONFIG
    brain = load_brain(snapshot, config)
    scores = score_moves(brain, config)
    move = pick_best(scores)
    if move is None:
        logger.debug("No legal move on board %s", brain.grid.serialize()['cells'])
    else:
        logger.debug("Scores %s -> %s", {d.name: s for d, s in scores.items()}, move.name)
    return move


class ExpectimaxAgent:
    """Move picker bound to one SearchConfig; keeps the scores of its last search."""

    def __init__(self, config: Optional[SearchConfig] = None):
        self.config = config if config is not None else DEFAULT_CONFIG
        self.last_scores: Dict[Direction, Optional[float]] = {}

    def get_move(self, game) -> Optional[Direction]:
        """``game`` may be a live Game2048, a snapshot dict or a 2-D board."""
        snapshot = game.snapshot() if hasattr(game, 'snapshot') else game
        brain = load_brain(snapshot, self.config)
        self.last_scores = score_moves(brain, self.config)
        move = pick_best(self.last_scores)
        logger.debug("Agent scores %s -> %s",
                     {d.name: s for d, s in self.last_scores.items()}, move.name if move is not None else None)
        return move
