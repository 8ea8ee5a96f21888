"""Monte Carlo simulation models package.

Provides interchangeable stochastic models for price path simulation:
- GBM: Geometric Brownian Motion (constant volatility)
- JUMP_DIFFUSION: Merton jump-diffusion
- HESTON: Heston stochastic volatility (two-factor)
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SimModel(str, Enum):
    GBM = "gbm"
    JUMP_DIFFUSION = "jumpDiffusion"
    HESTON = "heston"


@dataclass(frozen=True, eq=False)
class Ensemble:
    """All simulated paths of one run.

    ``paths`` has shape (n_paths, n_steps + 1); row i is path i and column j
    is time j * time_horizon / n_steps. The array is read-only.
    """

    paths: np.ndarray
    time_horizon: float
    model: str = ""

    def __post_init__(self) -> None:
        arr = np.array(self.paths, dtype=float)
        if arr.ndim != 2 or arr.shape[0] < 1 or arr.shape[1] < 1:
            raise ValueError(f"paths must be a non-empty 2-D array, got shape {arr.shape}")
        arr.setflags(write=False)
        object.__setattr__(self, "paths", arr)

    @property
    def n_paths(self) -> int:
        return self.paths.shape[0]

    @property
    def n_steps(self) -> int:
        return self.paths.shape[1] - 1

    @property
    def times(self) -> np.ndarray:
        """Time of each column, in the units of ``time_horizon``."""
        return np.linspace(0.0, self.time_horizon, self.n_steps + 1)

    @property
    def initial_values(self) -> np.ndarray:
        return self.paths[:, 0]

    @property
    def terminal_values(self) -> np.ndarray:
        return self.paths[:, -1]

    @property
    def returns(self) -> np.ndarray:
        """Total return of every path from its first to its last price."""
        return (self.terminal_values - self.initial_values) / self.initial_values


class StatisticsSummary(BaseModel):
    """Risk/return metrics reduced from one ensemble."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    initial_value: float
    mean_terminal_value: float
    standard_deviation: float
    min_value: float
    max_value: float
    mean_return: float
    sharpe_ratio: float
    max_drawdown: float
    value_at_risk: float


__all__ = ["SimModel", "Ensemble", "StatisticsSummary"]
