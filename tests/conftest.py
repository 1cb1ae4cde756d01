import sys
from pathlib import Path

# Add project root to path so we can import discrete_dist_api
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import numpy as np
import pytest

from discrete_dist_api import Binomial, Poisson, Geometric, Pascal, Hypergeometric

TOL_MICRO = 1e-12

REFERENCE_DISTRIBUTIONS = [
    Binomial(10, 0.7),
    Binomial(10, 0.5),
    Binomial(200, 0.03),
    Poisson(4.0),
    Poisson(250.0),
    Geometric(0.3),
    Pascal(3, 0.5),
    Hypergeometric(10, 5, 5),
    Hypergeometric(500, 120, 60),
]

@pytest.fixture(params=REFERENCE_DISTRIBUTIONS, ids=repr)
def reference_dist(request):
    return request.param

def assert_monotone_nondecreasing(a: np.ndarray, tol: float = 0.0):
    diffs = np.diff(a)
    if np.any(diffs < -tol):
        idx = int(np.where(diffs < -tol)[0][0])
        raise AssertionError(f"Sequence not nondecreasing at idx {idx}: diff={diffs[idx]:.3e}")

def assert_monotone_nonincreasing(a: np.ndarray, tol: float = 0.0):
    diffs = np.diff(a)
    if np.any(diffs > tol):
        idx = int(np.where(diffs > tol)[0][0])
        raise AssertionError(f"Sequence not nonincreasing at idx {idx}: diff={diffs[idx]:.3e}")

def assert_budget_close(p_neg: float, pmf: np.ndarray, p_pos: float, expected: float = 1.0, tol: float = TOL_MICRO):
    total = float(p_neg) + float(pmf.sum()) + float(p_pos)
    if abs(total - expected) > tol:
        raise AssertionError(f"Budget mismatch: got {total:.12f}, expected {expected:.12f}, |err|={abs(total-expected):.3e}")

def assert_quantile(dist, p: float, x: int, slack: float = TOL_MICRO):
    """x is the smallest integer whose CDF reaches p, up to a rounding slack relative to p."""
    tol = slack * p
    F_x = dist.cumulative_probability(x)
    F_prev = dist.cumulative_probability(x - 1)
    if F_x < p - tol:
        raise AssertionError(f"{dist!r}: cdf({x})={F_x:.15g} below p={p:.15g}")
    if F_prev >= p + tol:
        raise AssertionError(f"{dist!r}: cdf({x - 1})={F_prev:.15g} already reaches p={p:.15g}")
