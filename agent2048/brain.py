from enum import IntEnum
from typing import List, Tuple

from agent2048.errors import InvariantViolation
from agent2048.grid import Grid, Position, Tile


class Direction(IntEnum):
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    @property
    def vector(self) -> Tuple[int, int]:
        return _VECTORS[self]

    @property
    def symbol(self) -> str:
        return '↑→↓←'[self]


# (dx, dy); y grows downwards
_VECTORS = {
    Direction.UP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
}


class AgentBrain:
    """
    Simulation context for lookahead: one private grid plus the score
    accumulated along the current branch. Never touches the live game.
    """

    def __init__(self, grid: Grid, score: int = 0):
        self.grid = grid
        self.score = score

    @classmethod
    def from_snapshot(cls, snapshot) -> 'AgentBrain':
        return cls(Grid.from_snapshot(snapshot))

    def clone(self) -> 'AgentBrain':
        return AgentBrain(self.grid.clone(), self.score)

    @property
    def size(self) -> int:
        return self.grid.size

    def add_tile(self, position: Position, value: int):
        self.grid.insert_tile(Tile(position, value))

    # ---------- Move simulation ----------

    def build_traversals(self, vector: Tuple[int, int]) -> Tuple[List[int], List[int]]:
        """Visit cells farthest along the direction of travel first."""
        xs = list(range(self.size))
        ys = list(range(self.size))
        if vector[0] == 1:
            xs.reverse()
        if vector[1] == 1:
            ys.reverse()
        return xs, ys

    def find_farthest_position(self, cell: Position, vector: Tuple[int, int]) -> Tuple[Position, Position]:
        return self.grid.find_farthest_position(cell, vector)

    def move_tile(self, tile: Tile, cell: Position):
        if not self.grid.within_bounds(cell):
            raise InvariantViolation(f"Cannot move {tile!r} out of bounds to {cell}")
        self.grid.remove_tile(tile)
        tile.update_position(cell)
        self.grid.insert_tile(tile)

    def move(self, direction) -> bool:
        """
        Slide and merge every tile in ``direction``, mutating this brain.
        Returns True if at least one tile ended up somewhere else.
        """
        vector = Direction(direction).vector
        xs, ys = self.build_traversals(vector)
        moved = False

        for tile in self.grid.tiles():
            tile.merged = False

        for x in xs:
            for y in ys:
                tile = self.grid.cell_content((x, y))
                if tile is None:
                    continue

                farthest, nxt = self.find_farthest_position((x, y), vector)
                next_tile = self.grid.cell_content(nxt)

                # A tile created by a merge in this move never merges again
                if next_tile and next_tile.value == tile.value and not next_tile.merged:
                    merged = Tile(nxt, tile.value * 2)
                    merged.merged = True
                    self.grid.remove_tile(next_tile)
                    self.grid.remove_tile(tile)
                    self.grid.insert_tile(merged)
                    tile.update_position(nxt)
                    self.score += merged.value
                else:
                    self.move_tile(tile, farthest)

                if tile.position != (x, y):
                    moved = True

        for tile in self.grid.tiles():
            tile.merged = False
        return moved

    def legal_moves(self) -> List[Direction]:
        return [d for d in Direction if self.clone().move(d)]

    def is_stuck(self) -> bool:
        return not self.legal_moves()
