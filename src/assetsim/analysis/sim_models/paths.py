"""Stepwise path generator shared by every model.

Each model supplies a step function that returns the log-price increment of
all paths for one time step; the generator owns the outer loop:

    S[:, j] = S[:, j-1] · exp(step(S[:, j-1], source))
"""

import logging
from typing import Callable

import numpy as np

from . import Ensemble
from .random_source import VariateSource

logger = logging.getLogger(__name__)

StepFunction = Callable[[np.ndarray, VariateSource], np.ndarray]


def generate_paths(
    initial_price: float,
    steps: int,
    num_paths: int,
    step: StepFunction,
    source: VariateSource,
    time_horizon: float,
    model: str = "",
) -> Ensemble:
    """Roll ``num_paths`` prices forward ``steps`` times with ``step``.

    Args:
        initial_price: Price at t=0 for every path.
        steps: Number of time steps N (columns after the first).
        num_paths: Number of paths M (rows).
        step: Callable returning the log increment of every path.
        source: Variate source handed to ``step``.
        time_horizon: Horizon T, stored on the ensemble.
        model: Model identifier stored on the ensemble.

    Returns:
        Ensemble of shape (num_paths, steps + 1).
    """
    if steps < 1:
        raise ValueError(f"steps must be >= 1, got {steps}")
    if num_paths < 1:
        raise ValueError(f"paths must be >= 1, got {num_paths}")
    if initial_price <= 0:
        raise ValueError(f"initial_price must be > 0, got {initial_price}")

    prices = np.empty((num_paths, steps + 1))
    prices[:, 0] = initial_price

    for j in range(1, steps + 1):
        increment = np.broadcast_to(step(prices[:, j - 1], source), (num_paths,))
        prices[:, j] = prices[:, j - 1] * np.exp(increment)

    logger.debug("%s: generated %d paths x %d steps", model or "paths", num_paths, steps)
    return Ensemble(paths=prices, time_horizon=time_horizon, model=model)
