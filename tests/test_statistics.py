"""Unit tests for assetsim.analysis.statistics."""

import math

import numpy as np
import pytest

from assetsim.analysis.sim_models import Ensemble, StatisticsSummary
from assetsim.analysis.statistics import (
    TRADING_DAYS_PER_YEAR,
    max_drawdowns,
    summarize,
    value_at_risk,
)


def _ensemble_with_returns(returns, initial=100.0):
    """Two-step paths ending at initial * (1 + r) for each r."""
    terminal = initial * (1 + np.asarray(returns))
    paths = np.column_stack([np.full(len(terminal), initial), terminal])
    return Ensemble(paths=paths, time_horizon=1.0)


class TestConstantEnsemble:
    """Every path flat at S0."""

    @pytest.fixture
    def summary(self):
        return summarize(Ensemble(paths=np.full((5, 11), 100.0), time_horizon=1.0))

    def test_zero_metrics(self, summary):
        assert summary.mean_return == 0.0
        assert summary.standard_deviation == 0.0
        assert summary.max_drawdown == 0.0
        assert summary.value_at_risk == 0.0

    def test_values(self, summary):
        assert summary.initial_value == 100.0
        assert summary.mean_terminal_value == 100.0
        assert summary.min_value == summary.max_value == 100.0

    def test_zero_volatility_sharpe_is_not_finite(self, summary):
        # (0 - 0.02) / 0
        assert summary.sharpe_ratio == float("-inf")


class TestHandComputedEnsemble:
    @pytest.fixture
    def summary(self):
        paths = np.array([
            [100.0, 110.0, 121.0],
            [100.0, 100.0, 110.0],
        ])
        return summarize(paths)

    def test_terminal_statistics(self, summary):
        assert summary.mean_terminal_value == pytest.approx(115.5)
        assert summary.standard_deviation == pytest.approx(5.5)  # population std
        assert summary.min_value == 110.0
        assert summary.max_value == 121.0

    def test_mean_return(self, summary):
        assert summary.mean_return == pytest.approx((0.21 + 0.10) / 2)

    def test_sharpe_uses_ensemble_averaged_step_returns(self, summary):
        avg = np.array([0.05, 0.10])
        daily_vol = math.sqrt(np.mean(avg**2))
        expected = (avg.sum() * TRADING_DAYS_PER_YEAR - 0.02) / (daily_vol * math.sqrt(TRADING_DAYS_PER_YEAR))
        assert summary.sharpe_ratio == pytest.approx(expected)

    def test_var_with_two_paths_is_worst_return(self, summary):
        assert summary.value_at_risk == pytest.approx(0.10)

    def test_monotone_paths_have_no_drawdown(self, summary):
        assert summary.max_drawdown == 0.0

    def test_risk_free_rate_shifts_sharpe(self):
        paths = np.array([[100.0, 101.0, 103.0], [100.0, 99.0, 102.0]])
        low = summarize(paths, risk_free_rate=0.0)
        high = summarize(paths, risk_free_rate=0.05)
        assert high.sharpe_ratio < low.sharpe_ratio


class TestMaxDrawdown:
    def test_per_path_running_peak(self):
        paths = np.array([
            [100.0, 120.0, 90.0, 130.0, 117.0],
            [100.0, 50.0, 200.0, 200.0, 150.0],
        ])
        np.testing.assert_allclose(max_drawdowns(paths), [0.25, 0.5])

    def test_summary_averages_paths(self):
        paths = np.array([
            [100.0, 120.0, 90.0, 130.0, 117.0],
            [100.0, 50.0, 200.0, 200.0, 150.0],
        ])
        assert summarize(paths).max_drawdown == pytest.approx(0.375)

    def test_initial_price_counts_as_peak(self):
        assert max_drawdowns(np.array([[100.0, 80.0, 90.0]]))[0] == pytest.approx(0.2)


class TestValueAtRisk:
    def test_ten_paths_selects_single_worst(self):
        returns = [0.05, -0.12, 0.3, -0.31, 0.0, 0.1, -0.02, 0.07, 0.2, -0.3]
        summary = summarize(_ensemble_with_returns(returns))
        assert summary.value_at_risk == pytest.approx(0.31)

    def test_twenty_paths_selects_second_worst(self):
        returns = np.linspace(-0.4, 0.55, 20)
        summary = summarize(_ensemble_with_returns(returns))
        assert summary.value_at_risk == pytest.approx(abs(returns[1]))

    def test_absolute_value_of_gain(self):
        # Every path gains: VaR reports the smallest gain as a magnitude
        assert value_at_risk(np.array([0.2, 0.1, 0.3])) == pytest.approx(0.1)

    def test_large_ensemble_index(self):
        returns = np.arange(100) / 100.0 - 0.5
        assert value_at_risk(returns) == pytest.approx(0.45)


class TestDegenerateInput:
    def test_non_positive_price_propagates_nan(self):
        summary = summarize(np.array([[100.0, 0.0, 10.0]]))
        assert not np.isfinite(summary.sharpe_ratio)

    def test_single_column_rejected(self):
        with pytest.raises(ValueError):
            summarize(np.full((3, 1), 100.0))

    def test_one_dimensional_rejected(self):
        with pytest.raises(ValueError):
            summarize([100.0, 101.0])


class TestSummaryModel:
    def test_camel_case_dump(self):
        summary = summarize(np.array([[100.0, 110.0]]))
        dumped = summary.model_dump(by_alias=True)
        assert set(dumped) == {
            "initialValue", "meanTerminalValue", "standardDeviation",
            "minValue", "maxValue", "meanReturn", "sharpeRatio",
            "maxDrawdown", "valueAtRisk",
        }

    def test_is_frozen(self):
        summary = summarize(np.array([[100.0, 110.0]]))
        assert isinstance(summary, StatisticsSummary)
        with pytest.raises(Exception):
            summary.mean_return = 1.0

    def test_recomputed_per_call(self):
        paths = np.array([[100.0, 110.0], [100.0, 90.0]])
        assert summarize(paths) == summarize(paths)


class TestEnsembleReturns:
    def test_total_return_per_path(self):
        ensemble = _ensemble_with_returns([0.1, -0.25, 0.0])
        np.testing.assert_allclose(ensemble.returns, [0.1, -0.25, 0.0])

    def test_summary_reduces_ensemble_returns(self):
        ensemble = _ensemble_with_returns([0.1, -0.25, 0.0, 0.4])
        summary = summarize(ensemble)
        assert summary.mean_return == pytest.approx(np.mean(ensemble.returns))
        assert summary.value_at_risk == pytest.approx(value_at_risk(ensemble.returns))

    def test_array_input_matches_ensemble_input(self):
        paths = np.array([[100.0, 104.0, 99.0], [100.0, 97.0, 103.0]])
        assert summarize(paths) == summarize(Ensemble(paths=paths, time_horizon=2.0))
