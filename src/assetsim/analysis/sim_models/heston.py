"""Heston stochastic volatility model simulation.

Two coupled SDEs with full-truncation Euler discretisation:
  dS = μ·S·dt + √V·S·dW₁
  dV = κ(θ − V)dt + ξ√V·dW₂
  corr(W₁, W₂) = ρ

Variance is floored at zero after every step. This biases the variance
process slightly compared with exact non-central chi-squared sampling.
"""

import logging
from typing import Any, Mapping

import numpy as np

from . import Ensemble, SimModel
from .params import HestonParams, parse_params
from .paths import generate_paths
from .random_source import VariateSource, default_source

logger = logging.getLogger(__name__)


class HestonStep:
    """Price increment driven by a co-evolving per-path variance.

    One instance serves one run: the variance state starts at ``v0`` for
    every path on the first call. With ``record=True`` each step's variance
    vector is appended to ``history``.
    """

    def __init__(
        self,
        drift: float,
        dt: float,
        kappa: float,
        theta: float,
        xi: float,
        rho: float,
        v0: float,
        record: bool = False,
    ):
        self.drift = drift * dt
        self.dt = dt
        self.sqrt_dt = np.sqrt(dt)
        self.kappa = kappa
        self.theta = theta
        self.xi = xi
        self.rho = rho
        self.rho_perp = np.sqrt(max(0.0, 1.0 - rho**2))
        self.v0 = v0
        self.record = record
        self.variance: np.ndarray | None = None
        self.history: list[np.ndarray] = []

    @classmethod
    def from_params(cls, params: HestonParams, record: bool = False) -> "HestonStep":
        return cls(
            params.drift, params.dt, params.kappa, params.theta,
            params.xi, params.rho, params.v0, record=record,
        )

    def __call__(self, prev: np.ndarray, source: VariateSource) -> np.ndarray:
        n = prev.shape[0]
        if self.variance is None:
            self.variance = np.full(n, self.v0, dtype=float)
            if self.record:
                self.history.append(self.variance.copy())
        elif self.variance.shape[0] != n:
            raise ValueError(
                f"step holds variance for {self.variance.shape[0]} paths, got {n}"
            )

        # Cholesky factor of the 2x2 correlation matrix
        z1 = np.asarray(source.standard_normal(n), dtype=float)
        z_indep = np.asarray(source.standard_normal(n), dtype=float)
        z2 = self.rho * z1 + self.rho_perp * z_indep

        v_prev = np.maximum(self.variance, 0.0)  # full truncation
        sqrt_v = np.sqrt(v_prev)

        self.variance = np.maximum(
            0.0,
            v_prev + self.kappa * (self.theta - v_prev) * self.dt
            + self.xi * sqrt_v * self.sqrt_dt * z2,
        )
        if self.record:
            self.history.append(self.variance.copy())

        return self.drift + sqrt_v * self.sqrt_dt * z1

    def variance_paths(self) -> np.ndarray:
        """Recorded variance, shape (n_paths, steps + 1)."""
        if not self.history:
            return np.empty((0, 0))
        return np.column_stack(self.history)


def _run(
    params: HestonParams | Mapping[str, Any],
    source: VariateSource | None,
    record_variance: bool,
) -> tuple[Ensemble, HestonStep]:
    p = parse_params(SimModel.HESTON, params)
    source = source if source is not None else default_source()

    if 2 * p.kappa * p.theta <= p.xi**2:
        logger.warning(
            "Heston: Feller condition violated (2κθ=%.4f ≤ ξ²=%.4f). "
            "Variance may hit zero; full truncation will handle it.",
            2 * p.kappa * p.theta, p.xi**2,
        )

    step = HestonStep.from_params(p, record=record_variance)
    ensemble = generate_paths(
        p.initial_price,
        p.steps,
        p.paths,
        step,
        source,
        time_horizon=p.time_horizon,
        model=SimModel.HESTON.value,
    )
    return ensemble, step


def simulate_heston(
    params: HestonParams | Mapping[str, Any],
    source: VariateSource | None = None,
) -> Ensemble:
    """Run a Heston stochastic volatility simulation.

    Args:
        params: Initial price, drift, horizon, steps, paths and the variance
            process parameters kappa, theta, xi, rho, v0.
        source: Variate source; an unseeded Box-Muller source if omitted.

    Returns:
        Price ensemble only; the variance process stays internal.
    """
    ensemble, _ = _run(params, source, record_variance=False)
    return ensemble


def simulate_heston_with_variance(
    params: HestonParams | Mapping[str, Any],
    source: VariateSource | None = None,
) -> tuple[Ensemble, np.ndarray]:
    """Same run as ``simulate_heston``, also returning the variance paths.

    The variance array has the ensemble's shape, (paths, steps + 1), with
    column 0 equal to ``v0``. Draws are consumed in the same order, so a
    seeded source gives the same prices as ``simulate_heston``.
    """
    ensemble, step = _run(params, source, record_variance=True)
    return ensemble, step.variance_paths()
