import math
from typing import Optional

from agent2048.config import DEFAULT_CONFIG, SearchConfig
from agent2048.grid import Grid

# Smoothness compares each cell with its nearest occupied neighbour to the right and below
_SMOOTHNESS_VECTORS = ((1, 0), (0, 1))


def position_score(grid: Grid, config: SearchConfig) -> float:
    """Sum of tile value times the positional weight of its cell."""
    weights = config.position_weights
    if weights.shape != (grid.size, grid.size):
        raise ValueError(
            f"position_weights has shape {weights.shape}, grid is {grid.size}x{grid.size}")
    score = 0.0
    for tile in grid.tiles():
        score += tile.value * weights[tile.y, tile.x]
    return float(score)


def smoothness_score(grid: Grid) -> float:
    """Negative sum of log2 gaps between each cell and its nearest occupied neighbours."""
    smoothness = 0.0
    for y in range(grid.size):
        for x in range(grid.size):
            tile = grid.cells[y][x]
            value = math.log2(tile.value) if tile else 0.0
            for vector in _SMOOTHNESS_VECTORS:
                _, target = grid.find_farthest_position((x, y), vector)
                neighbour = grid.cell_content(target)
                if neighbour:
                    smoothness -= abs(value - math.log2(neighbour.value))
    return smoothness


def evaluate_grid(grid: Grid, config: Optional[SearchConfig] = None) -> float:
    """Static desirability of a board: position weights, smoothness and free cells."""
    if config is None:
        config = DEFAULT_CONFIG

    score = position_score(grid, config) + config.smoothness_weight * smoothness_score(grid)

    cell_count = grid.size * grid.size
    free = len(grid.available_cells())
    # Near-full boards are penalised, open boards rewarded
    if free < cell_count / 2:
        score -= score * free / cell_count
    else:
        score += score * free / cell_count
    return score
