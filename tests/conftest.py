"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from assetsim.analysis.sim_models.random_source import BoxMullerSource


class StubSource:
    """Deterministic variate source: every normal and every jump count is fixed."""

    def __init__(self, normal: float = 0.0, jumps: int = 0):
        self.normal = normal
        self.jumps = jumps

    def standard_normal(self, size=None):
        if size is None:
            return self.normal
        return np.full(size, self.normal, dtype=float)

    def poisson(self, mean_rate, size=None):
        if size is None:
            return self.jumps
        return np.full(size, self.jumps, dtype=np.int64)


class QueueGenerator:
    """Stands in for numpy.random.Generator, replaying preset uniforms."""

    def __init__(self, values):
        self.values = list(values)

    def random(self, size=None):
        if size is None:
            return self.values.pop(0)
        out = np.array(self.values[:size], dtype=float)
        del self.values[:size]
        return out


@pytest.fixture
def make_stub():
    return StubSource


@pytest.fixture
def make_queue_generator():
    return QueueGenerator


@pytest.fixture
def zero_source():
    return StubSource(normal=0.0, jumps=0)


@pytest.fixture
def seeded_source():
    return BoxMullerSource(seed=12345)


@pytest.fixture
def gbm_params():
    return {
        "initialPrice": 100.0,
        "drift": 0.1,
        "volatility": 0.2,
        "timeHorizon": 1.0,
        "steps": 50,
        "paths": 200,
    }


@pytest.fixture
def jump_params(gbm_params):
    return {
        **gbm_params,
        "jumpIntensity": 2.0,
        "meanJumpSize": -0.05,
        "jumpVolatility": 0.1,
    }


@pytest.fixture
def heston_params():
    return {
        "initialPrice": 100.0,
        "drift": 0.05,
        "timeHorizon": 1.0,
        "steps": 50,
        "paths": 200,
        "kappa": 2.0,
        "theta": 0.04,
        "xi": 0.3,
        "rho": -0.7,
        "v0": 0.04,
    }
