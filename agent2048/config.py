import numpy as np
from dataclasses import dataclass, field, replace
from typing import Tuple

# ===== TUNABLE POSITION WEIGHTS =====
# Indexed [row, col]. Larger weights pull big tiles toward the anchor corner.

WEIGHT_PRESETS = {
    # Corner gradient anchored at the top-left cell, decreasing along both axes.
    'gradient': np.array([
        [0.135759, 0.0997992, 0.060654, 0.0125498],
        [0.121925, 0.08884805, 0.0562579, 0.00992495],
        [0.102812, 0.076711, 0.037116, 0.00575871],
        [0.099937, 0.0724143, 0.0161889, 0.00335193],
    ]),
    # Power-of-two snake that winds up the columns into the bottom-right cell.
    'snake': np.array([
        [2.0 ** 4, 2.0 ** 5, 2.0 ** 12, 2.0 ** 13],
        [2.0 ** 3, 2.0 ** 6, 2.0 ** 11, 2.0 ** 14],
        [2.0 ** 2, 2.0 ** 7, 2.0 ** 10, 2.0 ** 15],
        [2.0 ** 1, 2.0 ** 8, 2.0 ** 9, 2.0 ** 16],
    ]) / 2.0 ** 17,
}

DEFAULT_PRESET = 'gradient'

# (tile value, probability) for the environment's random spawn
DEFAULT_SPAWN_VALUES = ((2, 0.9), (4, 0.1))


def _default_weights() -> np.ndarray:
    return WEIGHT_PRESETS[DEFAULT_PRESET].copy()


@dataclass(eq=False)
class SearchConfig:
    """Tunables shared by the evaluator and the expectimax search.

    ``depth_limit`` counts layers, so a limit of 4 looks two full
    move/spawn rounds ahead of the candidate move.
    ``workers`` > 1 evaluates the top-level directions on a thread pool.
    """

    depth_limit: int = 4
    position_weights: np.ndarray = field(default_factory=_default_weights)
    smoothness_weight: float = 0.1
    spawn_values: Tuple[Tuple[int, float], ...] = DEFAULT_SPAWN_VALUES
    workers: int = 1

    def __post_init__(self):
        if self.depth_limit < 0:
            raise ValueError(f"depth_limit must be >= 0, got {self.depth_limit}")
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")

        weights = np.asarray(self.position_weights, dtype=float)
        if weights.ndim != 2 or weights.shape[0] != weights.shape[1]:
            raise ValueError(f"position_weights must be a square matrix, got shape {weights.shape}")
        self.position_weights = weights

        self.spawn_values = tuple((int(v), float(p)) for v, p in self.spawn_values)
        if not self.spawn_values:
            raise ValueError("spawn_values must not be empty")
        for value, prob in self.spawn_values:
            if value < 2 or value & (value - 1):
                raise ValueError(f"spawn value {value} is not a power of two")
            if prob < 0:
                raise ValueError(f"spawn probability for {value} is negative")
        if not np.isclose(sum(p for _, p in self.spawn_values), 1.0):
            raise ValueError("spawn probabilities must sum to 1")

    def __eq__(self, other):
        if not isinstance(other, SearchConfig):
            return NotImplemented
        return (self.depth_limit == other.depth_limit
                and np.array_equal(self.position_weights, other.position_weights)
                and self.smoothness_weight == other.smoothness_weight
                and self.spawn_values == other.spawn_values
                and self.workers == other.workers)

    @classmethod
    def from_preset(cls, name: str, **overrides) -> 'SearchConfig':
        """Build a config using one of ``WEIGHT_PRESETS`` for the position weights."""
        if name not in WEIGHT_PRESETS:
            raise ValueError(f"Unknown weight preset {name!r}; choose from {sorted(WEIGHT_PRESETS)}")
        return cls(position_weights=WEIGHT_PRESETS[name].copy(), **overrides)

    def with_overrides(self, **overrides) -> 'SearchConfig':
        return replace(self, **overrides)


DEFAULT_CONFIG = SearchConfig()
