"""Geometric Brownian Motion (constant volatility) simulation.

Exact log-normal discretisation:
  S(t+dt) = S(t) · exp((μ − σ²/2)dt + σ√dt·Z)
Prices stay strictly positive for any dt.
"""

import logging
from typing import Any, Mapping

import numpy as np

from . import Ensemble, SimModel
from .params import GBMParams, parse_params
from .paths import generate_paths
from .random_source import VariateSource, default_source

logger = logging.getLogger(__name__)


class GBMStep:
    """Log increment (μ − σ²/2)dt + σ√dt·z for every path."""

    def __init__(self, drift: float, volatility: float, dt: float):
        self.drift = (drift - 0.5 * volatility**2) * dt
        self.diffusion = volatility * np.sqrt(dt)

    def __call__(self, prev: np.ndarray, source: VariateSource) -> np.ndarray:
        z = source.standard_normal(prev.shape[0])
        return self.drift + self.diffusion * z


def simulate_gbm(
    params: GBMParams | Mapping[str, Any],
    source: VariateSource | None = None,
) -> Ensemble:
    """Run a GBM simulation.

    Args:
        params: GBM parameters (initial price, drift, volatility, horizon,
            steps, paths), as a model or a plain mapping.
        source: Variate source; an unseeded Box-Muller source if omitted.

    Returns:
        Ensemble of ``paths`` rows and ``steps + 1`` columns.
    """
    p = parse_params(SimModel.GBM, params)
    source = source if source is not None else default_source()

    if p.volatility == 0.0:
        logger.debug("GBM: zero volatility, paths follow deterministic drift")

    return generate_paths(
        p.initial_price,
        p.steps,
        p.paths,
        GBMStep(p.drift, p.volatility, p.dt),
        source,
        time_horizon=p.time_horizon,
        model=SimModel.GBM.value,
    )
