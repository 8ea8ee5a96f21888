"""Merton jump-diffusion model simulation.

GBM + compound Poisson jumps in log-price:
  log S(t+dt) = log S(t) + (μ − σ²/2)dt + σ√dt·Z + Σ_{k=1..N} J_k
  N ~ Poisson(λ·dt), J_k ~ Normal(μ_J, σ_J)

No jump compensator is applied to the drift, so the expected number of jumps
over the horizon is λ·T and jumps shift the mean as well as the tails.
"""

import logging
from typing import Any, Mapping

import numpy as np

from . import Ensemble, SimModel
from .gbm import GBMStep
from .params import JumpDiffusionParams, parse_params
from .paths import generate_paths
from .random_source import VariateSource, default_source

logger = logging.getLogger(__name__)


class JumpDiffusionStep:
    """GBM increment plus the summed log jump sizes of each path."""

    def __init__(
        self,
        drift: float,
        volatility: float,
        dt: float,
        jump_intensity: float,
        mean_jump_size: float,
        jump_volatility: float,
    ):
        self.diffusion = GBMStep(drift, volatility, dt)
        self.jump_rate = jump_intensity * dt
        self.mean_jump_size = mean_jump_size
        self.jump_volatility = jump_volatility

    def __call__(self, prev: np.ndarray, source: VariateSource) -> np.ndarray:
        n = prev.shape[0]
        increment = self.diffusion(prev, source)

        counts = np.asarray(source.poisson(self.jump_rate, n), dtype=np.int64)
        total_jumps = int(counts.sum())
        if total_jumps == 0:
            return increment

        # Draw every jump of this step at once, then sum them back per path
        z2 = np.asarray(source.standard_normal(total_jumps), dtype=float)
        sizes = self.mean_jump_size + self.jump_volatility * z2
        owner = np.repeat(np.arange(n), counts)
        return increment + np.bincount(owner, weights=sizes, minlength=n)


def simulate_jump_diffusion(
    params: JumpDiffusionParams | Mapping[str, Any],
    source: VariateSource | None = None,
) -> Ensemble:
    """Run a Merton jump-diffusion simulation.

    Args:
        params: GBM parameters plus jump intensity λ (per year), mean jump
            size μ_J and jump volatility σ_J (log scale).
        source: Variate source; an unseeded Box-Muller source if omitted.
    """
    p = parse_params(SimModel.JUMP_DIFFUSION, params)
    source = source if source is not None else default_source()

    logger.debug(
        "Jump diffusion: expected %.2f jumps per path over the horizon",
        p.jump_intensity * p.time_horizon,
    )

    step = JumpDiffusionStep(
        p.drift,
        p.volatility,
        p.dt,
        p.jump_intensity,
        p.mean_jump_size,
        p.jump_volatility,
    )
    return generate_paths(
        p.initial_price,
        p.steps,
        p.paths,
        step,
        source,
        time_horizon=p.time_horizon,
        model=SimModel.JUMP_DIFFUSION.value,
    )
