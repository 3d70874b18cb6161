import numbers
import numpy as np
from typing import Dict, List, Optional, Tuple

from agent2048.errors import InvalidSnapshotError, InvariantViolation

Position = Tuple[int, int]


class Tile:
    """A single tile on a simulated grid.

    ``merged`` marks a tile created by a merge during the move currently being
    applied. The flag only lives for one move application.
    """

    def __init__(self, position: Position, value: int):
        self.x, self.y = position
        self.value = value
        self.merged = False

    @property
    def position(self) -> Position:
        return (self.x, self.y)

    def update_position(self, position: Position):
        self.x, self.y = position

    def copy(self) -> 'Tile':
        return Tile((self.x, self.y), self.value)

    def __repr__(self):
        return f"Tile(({self.x}, {self.y}), {self.value})"


class Grid:
    """
    Minimal square board used purely for lookahead.
    Cells are stored row-major: ``cells[y][x]`` is a Tile or None.
    """

    def __init__(self, size: int = 4):
        self.size = size
        self.cells: List[List[Optional[Tile]]] = [[None] * size for _ in range(size)]

    # ---------- Construction at the live-engine boundary ----------

    @classmethod
    def from_snapshot(cls, snapshot) -> 'Grid':
        """Build a grid from ``{'dimension': n, 'cells': n x n values}`` or a 2-D array.

        Empty cells may be given as 0 or None.
        """
        if isinstance(snapshot, dict):
            try:
                dimension = snapshot['dimension']
                rows = snapshot['cells']
            except KeyError as e:
                raise InvalidSnapshotError(f"Snapshot is missing {e.args[0]!r}") from None
        else:
            rows = snapshot
            try:
                dimension = len(rows)
            except TypeError:
                raise InvalidSnapshotError(f"Unsupported snapshot type {type(snapshot).__name__}") from None

        if isinstance(dimension, bool) or not isinstance(dimension, numbers.Integral):
            raise InvalidSnapshotError(f"Dimension must be an integer, got {dimension!r}")
        if dimension <= 0:
            raise InvalidSnapshotError(f"Dimension must be positive, got {dimension}")
        if isinstance(rows, np.ndarray):
            rows = rows.tolist()
        if not isinstance(rows, (list, tuple)) or len(rows) != dimension:
            raise InvalidSnapshotError(f"Expected {dimension} rows of cells")

        grid = cls(int(dimension))
        for y, row in enumerate(rows):
            if isinstance(row, np.ndarray):
                row = row.tolist()
            if not isinstance(row, (list, tuple)) or len(row) != dimension:
                raise InvalidSnapshotError(f"Row {y} does not have {dimension} cells (board must be square)")
            for x, value in enumerate(row):
                if value is None:
                    continue
                if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                    raise InvalidSnapshotError(f"Cell ({x}, {y}) holds a non-integer value {value!r}")
                if value == 0:
                    continue
                value = int(value)
                if value < 2 or value & (value - 1):
                    raise InvalidSnapshotError(f"Cell ({x}, {y}) holds {value}, which is not a power of two")
                grid.cells[y][x] = Tile((x, y), value)
        return grid

    def serialize(self) -> Dict[str, object]:
        return {
            'dimension': self.size,
            'cells': [[tile.value if tile else 0 for tile in row] for row in self.cells],
        }

    def to_array(self) -> np.ndarray:
        return np.array(self.serialize()['cells'], dtype=int).reshape(self.size, self.size)

    def clone(self) -> 'Grid':
        """Deep copy of occupancy and tile values."""
        other = Grid(self.size)
        other.cells = [[tile.copy() if tile else None for tile in row] for row in self.cells]
        return other

    # ---------- Queries ----------

    def within_bounds(self, position: Position) -> bool:
        x, y = position
        return 0 <= x < self.size and 0 <= y < self.size

    def cell_content(self, position: Position) -> Optional[Tile]:
        if not self.within_bounds(position):
            return None
        x, y = position
        return self.cells[y][x]

    def cell_available(self, position: Position) -> bool:
        return self.cell_content(position) is None

    def cell_occupied(self, position: Position) -> bool:
        return self.cell_content(position) is not None

    def available_cells(self) -> List[Position]:
        return [(x, y) for y in range(self.size) for x in range(self.size) if self.cells[y][x] is None]

    def cells_available(self) -> bool:
        return any(tile is None for row in self.cells for tile in row)

    def find_farthest_position(self, cell: Position, vector: Tuple[int, int]) -> Tuple[Position, Position]:
        """Walk from ``cell`` along ``vector`` until an edge or an occupied cell.

        Returns the last empty cell reached and the cell just beyond it.
        """
        dx, dy = vector
        previous = cell
        cell = (previous[0] + dx, previous[1] + dy)
        while self.within_bounds(cell) and self.cells[cell[1]][cell[0]] is None:
            previous = cell
            cell = (previous[0] + dx, previous[1] + dy)
        return previous, cell

    def tiles(self) -> List[Tile]:
        return [tile for row in self.cells for tile in row if tile]

    def tile_sum(self) -> int:
        return sum(tile.value for tile in self.tiles())

    def max_tile(self) -> int:
        return max((tile.value for tile in self.tiles()), default=0)

    # ---------- Mutation ----------

    def insert_tile(self, tile: Tile):
        if not self.within_bounds(tile.position):
            raise InvariantViolation(f"{tile!r} lies outside a {self.size}x{self.size} grid")
        if self.cells[tile.y][tile.x] is not None:
            raise InvariantViolation(f"Cell {tile.position} is already occupied")
        self.cells[tile.y][tile.x] = tile

    def remove_tile(self, tile: Tile):
        self.cells[tile.y][tile.x] = None

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return self.serialize() == other.serialize()

    def __repr__(self):
        return f"Grid({self.serialize()['cells']})"
