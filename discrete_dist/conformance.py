"""
Conformance checks for DiscreteDistribution implementations.

A ConformanceCase bundles one distribution with parallel arrays of test
points and expected values for each operation. The verify_* functions feed
the points through the distribution and raise AssertionError on the first
mismatch: densities and cumulative probabilities are compared within an
absolute tolerance, inverse cumulative probabilities must match exactly.
"""

from dataclasses import dataclass, field
from typing import Sequence, Tuple
from .base import DiscreteDistribution
from .errors import InvalidArgumentError

DEFAULT_TOLERANCE = 1e-4

# Arguments every distribution must reject.
ILLEGAL_INTERVAL = (1, 0)
ILLEGAL_PROBABILITIES = (-1.0, 1.0, 2.0)

@dataclass(frozen=True)
class ConformanceCase:
    distribution: DiscreteDistribution
    density_points: Sequence[int] = ()
    density_values: Sequence[float] = ()
    cumulative_points: Sequence[int] = ()
    cumulative_values: Sequence[float] = ()
    inverse_points: Sequence[float] = ()
    inverse_values: Sequence[int] = ()
    tolerance: float = DEFAULT_TOLERANCE
    name: str = field(default="")

    def __post_init__(self):
        for label, points, values in (
            ("density", self.density_points, self.density_values),
            ("cumulative", self.cumulative_points, self.cumulative_values),
            ("inverse cumulative", self.inverse_points, self.inverse_values),
        ):
            if len(points) != len(values):
                raise ValueError(f"{label} points and values must have equal length, "
                                 f"got {len(points)} and {len(values)}")
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be nonnegative, got {self.tolerance}")

    @property
    def label(self) -> str:
        return self.name or repr(self.distribution)

def verify_densities(case: ConformanceCase) -> None:
    dist = case.distribution
    for x, expected in zip(case.density_points, case.density_values):
        got = dist.probability(x)
        if abs(got - expected) > case.tolerance:
            raise AssertionError(f"{case.label}: incorrect density value returned for {x}: "
                                 f"expected {expected}, got {got} (tol={case.tolerance:.0e})")

def verify_cumulative_probabilities(case: ConformanceCase) -> None:
    dist = case.distribution
    for x, expected in zip(case.cumulative_points, case.cumulative_values):
        got = dist.cumulative_probability(x)
        if abs(got - expected) > case.tolerance:
            raise AssertionError(f"{case.label}: incorrect cumulative probability value returned for {x}: "
                                 f"expected {expected}, got {got} (tol={case.tolerance:.0e})")

def verify_inverse_cumulative_probabilities(case: ConformanceCase) -> None:
    dist = case.distribution
    for p, expected in zip(case.inverse_points, case.inverse_values):
        got = dist.inverse_cumulative_probability(p)
        if got != expected:
            raise AssertionError(f"{case.label}: incorrect inverse cumulative probability value "
                                 f"returned for {p}: expected {expected}, got {got}")

def _expect_invalid(call, description: str, label: str) -> None:
    try:
        call()
    except InvalidArgumentError:
        return
    raise AssertionError(f"{label}: expecting InvalidArgumentError for {description}")

def verify_illegal_arguments(case: ConformanceCase,
                             interval: Tuple[int, int] = ILLEGAL_INTERVAL,
                             probabilities: Sequence[float] = ILLEGAL_PROBABILITIES) -> None:
    dist = case.distribution
    x0, x1 = interval
    _expect_invalid(lambda: dist.cumulative_probability(x0, x1),
                    f"bad cumulative_probability interval ({x0}, {x1})", case.label)
    for p in probabilities:
        _expect_invalid(lambda: dist.inverse_cumulative_probability(p), f"p = {p}", case.label)

def verify_all(case: ConformanceCase) -> None:
    verify_densities(case)
    verify_cumulative_probabilities(case)
    verify_inverse_cumulative_probabilities(case)
    verify_illegal_arguments(case)
