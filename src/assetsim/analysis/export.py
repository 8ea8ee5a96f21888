"""Tabular views of an ensemble for export and charting.

- ``to_frame`` / ``to_csv``: one row per time step, one column per path.
- ``step_envelope``: per-step mean/min/max across paths.
- ``terminal_histogram``: binned distribution of terminal prices.
"""

import logging
from typing import IO, TypedDict

import numpy as np
import pandas as pd

from assetsim.analysis.sim_models import Ensemble

logger = logging.getLogger(__name__)

TIME_COLUMN = "Time Point"
DEFAULT_HISTOGRAM_BINS = 20


class HistogramBin(TypedDict):
    bin_start: float
    bin_end: float
    bin_center: float
    count: int
    percentage: float


def to_frame(ensemble: Ensemble) -> pd.DataFrame:
    """Paths as a DataFrame indexed by time (in ``time_horizon`` units)."""
    columns = [f"Path {i + 1}" for i in range(ensemble.n_paths)]
    index = pd.Index(ensemble.times, name=TIME_COLUMN)
    return pd.DataFrame(ensemble.paths.T, index=index, columns=columns)


def to_csv(ensemble: Ensemble, path_or_buf: str | IO[str] | None = None) -> str | None:
    """Write the ensemble as CSV with times and prices to 2 decimals.

    Returns the CSV text when ``path_or_buf`` is None, like
    ``DataFrame.to_csv``.
    """
    frame = to_frame(ensemble)
    frame.index = frame.index.map(lambda t: f"{t:.2f}")
    result = frame.to_csv(path_or_buf, float_format="%.2f")
    if path_or_buf is not None:
        logger.info(
            "Exported %d paths x %d steps to %s",
            ensemble.n_paths, ensemble.n_steps, path_or_buf,
        )
    return result


def step_envelope(ensemble: Ensemble) -> pd.DataFrame:
    """Mean, min and max price across paths at every time step."""
    paths = ensemble.paths
    return pd.DataFrame({
        "time": ensemble.times,
        "mean": paths.mean(axis=0),
        "min": paths.min(axis=0),
        "max": paths.max(axis=0),
    })


def terminal_histogram(
    ensemble: Ensemble,
    bins: int = DEFAULT_HISTOGRAM_BINS,
) -> list[HistogramBin]:
    """Equal-width histogram of terminal prices.

    The maximum value falls into the last bin. When every terminal price
    is identical, all of them land in the first bin.
    """
    if bins < 1:
        raise ValueError(f"bins must be >= 1, got {bins}")

    terminal = ensemble.terminal_values
    low = float(terminal.min())
    high = float(terminal.max())
    width = (high - low) / bins

    if width > 0:
        idx = np.minimum(np.floor((terminal - low) / width).astype(int), bins - 1)
    else:
        idx = np.zeros(len(terminal), dtype=int)
    counts = np.bincount(idx, minlength=bins)

    total = len(terminal)
    return [
        HistogramBin(
            bin_start=low + i * width,
            bin_end=low + (i + 1) * width,
            bin_center=low + (i + 0.5) * width,
            count=int(counts[i]),
            percentage=float(counts[i] / total * 100),
        )
        for i in range(bins)
    ]
