"""Risk and return statistics for a simulated ensemble.

Pure computation functions: an ensemble goes in, a ``StatisticsSummary``
comes out. Nothing is cached between calls.

Volatility note: ``daily_volatility`` is the root-mean-square of the
per-step *ensemble-averaged* returns, not the volatility of each path's own
return series. Averaging across paths first cancels most of the noise, so
this understates realised volatility compared with a textbook per-path
estimator (and therefore inflates the Sharpe ratio). It is kept as-is so
results stay comparable with the existing front end.
"""

import logging
import math
from typing import Any

import numpy as np

from assetsim.analysis.sim_models import Ensemble, StatisticsSummary

logger = logging.getLogger(__name__)

TRADING_DAYS_PER_YEAR = 252
DEFAULT_RISK_FREE_RATE = 0.02
VAR_TAIL = 0.05  # 95% confidence


def _as_ensemble(ensemble: Ensemble | Any) -> Ensemble:
    if not isinstance(ensemble, Ensemble):
        paths = np.asarray(ensemble, dtype=float)
        if paths.ndim != 2 or paths.shape[0] < 1:
            raise ValueError(f"expected a (paths, steps + 1) array, got shape {paths.shape}")
        ensemble = Ensemble(paths=paths, time_horizon=1.0)
    if ensemble.n_steps < 1:
        raise ValueError("ensemble must contain at least one time step")
    return ensemble


def step_returns(paths: np.ndarray) -> np.ndarray:
    """Simple returns between consecutive steps, shape (paths, steps)."""
    return np.diff(paths, axis=1) / paths[:, :-1]


def max_drawdowns(ensemble: Ensemble | Any) -> np.ndarray:
    """Maximum peak-to-trough decline of each path, as a positive fraction.

    MDD = max_j (peak_j − S_j) / peak_j with peak_j the running maximum
    from the first price.
    """
    paths = _as_ensemble(ensemble).paths
    with np.errstate(divide="ignore", invalid="ignore"):
        peaks = np.maximum.accumulate(paths, axis=1)
        drawdowns = (peaks - paths) / peaks
    return drawdowns.max(axis=1)


def value_at_risk(returns: np.ndarray, tail: float = VAR_TAIL) -> float:
    """Empirical VaR: |sorted_returns[floor(M · tail)]|.

    For fewer than 1/tail paths the index is 0, i.e. the single worst
    return.
    """
    sorted_returns = np.sort(np.asarray(returns, dtype=float))
    index = math.floor(len(sorted_returns) * tail)
    return float(abs(sorted_returns[index]))


def summarize(
    ensemble: Ensemble | Any,
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
) -> StatisticsSummary:
    """Reduce an ensemble to its risk/return summary.

    Args:
        ensemble: Ensemble, or any 2-D array-like of shape (paths, steps + 1).
        risk_free_rate: Annualised rate subtracted in the Sharpe ratio.

    Returns:
        StatisticsSummary. Degenerate inputs (zero volatility, non-positive
        prices) yield NaN/inf fields rather than an error.
    """
    ensemble = _as_ensemble(ensemble)
    paths = ensemble.paths
    terminal_values = ensemble.terminal_values

    # Degenerate ensembles are reported as non-finite values, not warnings
    with np.errstate(divide="ignore", invalid="ignore"):
        returns = ensemble.returns

        avg_daily_returns = step_returns(paths).mean(axis=0)
        daily_volatility = np.sqrt(np.mean(avg_daily_returns**2))

        annualized_return = np.sum(avg_daily_returns) * TRADING_DAYS_PER_YEAR
        annualized_volatility = daily_volatility * np.sqrt(TRADING_DAYS_PER_YEAR)
        sharpe_ratio = (annualized_return - risk_free_rate) / annualized_volatility

        mean_drawdown = np.mean(max_drawdowns(ensemble))

    if not np.isfinite(sharpe_ratio):
        logger.debug(
            "Sharpe ratio is non-finite (annualised volatility=%.6g)",
            float(annualized_volatility),
        )

    return StatisticsSummary(
        initial_value=float(ensemble.initial_values[0]),
        mean_terminal_value=float(np.mean(terminal_values)),
        standard_deviation=float(np.std(terminal_values)),
        min_value=float(np.min(terminal_values)),
        max_value=float(np.max(terminal_values)),
        mean_return=float(np.mean(returns)),
        sharpe_ratio=float(sharpe_ratio),
        max_drawdown=float(mean_drawdown),
        value_at_risk=value_at_risk(returns),
    )
