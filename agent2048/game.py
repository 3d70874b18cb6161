import random
import numpy as np
from typing import List, Optional, Tuple

from agent2048.brain import Direction
from agent2048.config import DEFAULT_SPAWN_VALUES


class Game2048:
    """
    Headless 2048 game that owns the authoritative board.
    The agent only ever sees ``snapshot()``; moves chosen by the agent are
    applied here, followed by a random 2 (p=0.9) or 4 (p=0.1) spawn.
    """

    def __init__(self, size: int = 4, seed: Optional[int] = None):
        self.n = size
        self.rng = random.Random(seed)
        self.reset()

    def reset(self):
        """Reset the game to its initial state with two random tiles."""
        self.board = np.zeros((self.n, self.n), dtype=int)
        self.score = 0
        self.move_count = 0
        self._add_random_tile()
        self._add_random_tile()

    def _add_random_tile(self) -> Optional[Tuple[int, int, int]]:
        """Spawn a tile on a random empty cell; returns (row, col, value), or None on a full board."""
        empty = np.argwhere(self.board == 0)
        if len(empty) == 0:
            return None
        row, col = (int(v) for v in empty[self.rng.randrange(len(empty))])
        values, weights = zip(*DEFAULT_SPAWN_VALUES)
        value = self.rng.choices(values, weights=weights)[0]
        self.board[row, col] = value
        return (row, col, value)

    @staticmethod
    def _transform(arr: np.ndarray, direction: Direction) -> np.ndarray:
        """Return a view in which ``direction`` becomes a slide to the left."""
        out = arr
        if direction in (Direction.UP, Direction.DOWN):
            out = out.T
        if direction in (Direction.DOWN, Direction.RIGHT):
            out = np.flip(out, axis=1)
        return out

    @staticmethod
    def _inverse_transform(arr: np.ndarray, direction: Direction) -> np.ndarray:
        out = arr
        if direction in (Direction.DOWN, Direction.RIGHT):
            out = np.flip(out, axis=1)
        if direction in (Direction.UP, Direction.DOWN):
            out = out.T
        return out

    @staticmethod
    def _slide_and_merge_row(row: np.ndarray) -> Tuple[np.ndarray, int]:
        """Slide and merge a single row to the left, return (new_row, score_gain)."""
        packed: List[int] = []
        score_gain = 0
        pending = None
        for value in (int(v) for v in row if v):
            if pending == value:
                packed[-1] = value * 2
                score_gain += value * 2
                pending = None
            else:
                packed.append(value)
                pending = value
        new_row = np.zeros(len(row), dtype=int)
        new_row[:len(packed)] = packed
        return new_row, score_gain

    def _slide(self, direction: Direction) -> Tuple[np.ndarray, int, bool]:
        vboard = self._transform(self.board.copy(), direction).copy()
        changed = False
        total_score_gain = 0
        for r in range(self.n):
            old_row = vboard[r].copy()
            new_row, score_gain = self._slide_and_merge_row(old_row)
            vboard[r] = new_row
            total_score_gain += score_gain
            if not np.array_equal(old_row, new_row):
                changed = True
        return self._inverse_transform(vboard, direction), total_score_gain, changed

    def move(self, direction) -> bool:
        """
        Perform a move in the given direction.
        Returns True if the move changed the board (a new tile is then spawned).
        """
        try:
            direction = Direction(direction)
        except ValueError:
            raise ValueError(f"Invalid move direction: {direction!r}") from None

        new_board, score_gain, changed = self._slide(direction)
        if not changed:
            return False

        self.board = np.ascontiguousarray(new_board)
        self.score += score_gain
        self.move_count += 1
        self._add_random_tile()
        return True

    def get_valid_moves(self) -> List[Direction]:
        return [d for d in Direction if self._slide(d)[2]]

    def is_game_over(self) -> bool:
        """The game is over when no direction changes the board."""
        return len(self.get_valid_moves()) == 0

    def max_tile(self) -> int:
        return int(self.board.max())

    def snapshot(self) -> dict:
        """Read-only copy of the board for the agent: dimension plus row-major cell values."""
        return {'dimension': self.n, 'cells': self.board.tolist()}
