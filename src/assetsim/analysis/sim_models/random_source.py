"""Random variate source shared by all simulators.

Normals come from the Box-Muller transform and Poisson counts from Knuth's
multiplication method, both driven by uniform draws from a NumPy generator.
Simulators take the source as an argument, so tests can pass a seeded or a
fully deterministic one.
"""

import math
from typing import Protocol

import numpy as np

Size = int | tuple[int, ...] | None


class VariateSource(Protocol):
    def standard_normal(self, size: Size = None) -> float | np.ndarray:
        """Standard normal draw(s); a float when ``size`` is None."""
        ...

    def poisson(self, mean_rate: float, size: Size = None) -> int | np.ndarray:
        """Poisson event count(s) for a unit interval with the given mean."""
        ...


class BoxMullerSource:
    """Variate source built on uniform draws from ``numpy.random.Generator``.

    Args:
        rng: Generator supplying U(0, 1) draws. Built from ``seed`` if omitted.
        seed: Seed for a fresh generator; ignored when ``rng`` is given.
    """

    def __init__(self, rng: np.random.Generator | None = None, seed: int | None = None):
        self._rng = rng if rng is not None else np.random.default_rng(seed)

    def uniform(self, size: Size = None) -> float | np.ndarray:
        """U(0, 1) draw(s) with exact zeros redrawn."""
        if size is None:
            u = self._rng.random()
            while u == 0.0:
                u = self._rng.random()
            return float(u)

        u = self._rng.random(size)
        zero = u == 0.0
        while zero.any():
            u[zero] = self._rng.random(int(zero.sum()))
            zero = u == 0.0
        return u

    def standard_normal(self, size: Size = None) -> float | np.ndarray:
        u = self.uniform(size)
        v = self.uniform(size)
        z = np.sqrt(-2.0 * np.log(u)) * np.cos(2.0 * np.pi * v)
        return float(z) if size is None else z

    def poisson(self, mean_rate: float, size: Size = None) -> int | np.ndarray:
        # Zero rate never fires; skip the draw so the normal stream is unchanged.
        if mean_rate <= 0:
            return 0 if size is None else np.zeros(size, dtype=np.int64)

        limit = math.exp(-mean_rate)
        if size is None:
            count = 0
            product = 1.0
            while True:
                count += 1
                product *= self.uniform()
                if product <= limit:
                    return count - 1

        counts = np.zeros(size, dtype=np.int64)
        product = np.ones(size)
        active = np.ones(size, dtype=bool)
        while active.any():
            counts[active] += 1
            product[active] *= self.uniform(int(active.sum()))
            active &= product > limit
        return counts - 1


def default_source(seed: int | None = None) -> BoxMullerSource:
    """Fresh Box-Muller source, seeded when ``seed`` is given."""
    return BoxMullerSource(seed=seed)
