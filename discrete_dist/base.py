"""
Abstract contract shared by every discrete distribution.

Concrete families are frozen dataclasses implementing `_pmf(k)` and `_cdf(k)`
for integers k inside their support, and exposing `support`. This base class
handles saturation outside the support, argument checking, interval
probabilities, and the default inverse CDF via the search engine.
"""

import math
from abc import ABC, abstractmethod
from numbers import Real
from typing import ClassVar, Optional
from .types import Family, Support, SearchConfig, DEFAULT_SEARCH_CONFIG
from .errors import InvalidArgumentError
from .search import check_probability, inverse_cdf_search

# Standard deviations below the mean used as the search anchor when a
# distribution is unbounded below and offers no guess of its own.
LOWER_ANCHOR_SIGMAS = 4.0

def _check_real(x) -> None:
    if isinstance(x, bool) or not isinstance(x, Real):
        raise InvalidArgumentError(f"x must be a real number, got {x!r}")
    if math.isnan(x):
        raise InvalidArgumentError("x must not be NaN")

def _floor_point(x) -> Optional[int]:
    """Floor a real point to an integer; None for an infinite argument."""
    _check_real(x)
    if isinstance(x, int):
        return x
    if math.isinf(x):
        return None
    return math.floor(x)


class DiscreteDistribution(ABC):
    """
    Integer-valued distribution with PMF, CDF and inverse CDF.

    Every operation is a pure function of the fixed parameters and its
    argument, so one instance can be shared freely between threads.
    """

    family: ClassVar[Family]
    search_config: ClassVar[SearchConfig] = DEFAULT_SEARCH_CONFIG

    @property
    @abstractmethod
    def support(self) -> Support:
        ...

    @abstractmethod
    def _pmf(self, k: int) -> float:
        """Mass at an integer k inside the support."""

    @abstractmethod
    def _cdf(self, k: int) -> float:
        """P(X <= k) for an integer k inside the support."""

    def initial_domain(self, p: float) -> Optional[int]:
        """Starting point for the quantile search, or None for the support's lower bound."""
        if self.support.lower is not None:
            return None
        mean = getattr(self, "mean", None)
        variance = getattr(self, "variance", None)
        if mean is None or variance is None:
            return None
        return math.floor(mean - LOWER_ANCHOR_SIGMAS * math.sqrt(variance))

    def probability(self, x) -> float:
        """P(X = x); zero outside the support and at non-integral points."""
        _check_real(x)
        if not isinstance(x, int):
            x = float(x)
            if not x.is_integer():
                return 0.0
            x = int(x)
        if not self.support.contains(x):
            return 0.0
        return float(self._pmf(x))

    def _cumulative(self, x) -> float:
        k = _floor_point(x)
        if k is None:
            return 0.0 if x < 0 else 1.0
        support = self.support
        if support.lower is not None and k < support.lower:
            return 0.0
        if support.upper is not None and k >= support.upper:
            return 1.0
        # Clamp summation round-off into [0, 1].
        return min(max(float(self._cdf(k)), 0.0), 1.0)

    def cumulative_probability(self, x0, x1=None) -> float:
        """
        P(X <= x0), or P(x0 <= X <= x1) when x1 is given.

        The interval form equals cdf(x1) - cdf(x0 - 1) and raises
        InvalidArgumentError when x0 > x1.
        """
        if x1 is None:
            return self._cumulative(x0)
        _check_real(x0)
        _check_real(x1)
        if x0 > x1:
            raise InvalidArgumentError(f"lower endpoint must be <= upper endpoint, got x0={x0}, x1={x1}")
        k0 = _floor_point(x0)
        if k0 is None:
            below = self._cumulative(x0)
        else:
            # Mass on [x0, x1] starts at the first integer >= x0.
            if k0 != x0:
                k0 += 1
            below = self._cumulative(k0 - 1)
        return max(self._cumulative(x1) - below, 0.0)

    def inverse_cumulative_probability(self, p: float) -> int:
        """Smallest integer x with cumulative_probability(x) >= p, for p in (0, 1)."""
        p = check_probability(p)
        return inverse_cdf_search(self._cumulative, p, self.support,
                                  guess=self.initial_domain(p), config=self.search_config)
