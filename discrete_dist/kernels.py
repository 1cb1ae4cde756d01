import math
import numpy as np
from numba import njit
from .types import DistKind, DiscreteDist

def check_mass_conservation(dist: DiscreteDist, tolerance: float = 1e-11) -> None:
    """
    Check if a PMF table conserves probability mass within tolerance.
    Raises ValueError if mass conservation fails.

    Parameters:
    -----------
    dist : DiscreteDist
        Distribution table to check (must be PMF kind)
    tolerance : float
        Maximum allowed error in mass conservation
    """
    if dist.kind != DistKind.PMF:
        raise ValueError(f"check_mass_conservation expects PMF, got {dist.kind}")
    total_mass = dist.vals.sum() + dist.p_neg_inf + dist.p_pos_inf
    mass_error = abs(total_mass - 1.0)

    if mass_error > tolerance:
        error_msg = f"MASS CONSERVATION ERROR"
        error_msg += f": Error={mass_error:.2e} (tolerance={tolerance:.0e})"
        error_msg += f", PMF sum={dist.vals.sum():.15f}"
        error_msg += f", p_neg_inf={dist.p_neg_inf:.2e}"
        error_msg += f", p_pos_inf={dist.p_pos_inf:.2e}"
        error_msg += f", Total mass={total_mass:.15f}"
        raise ValueError(error_msg)


@njit(cache=True)
def _log_comb_numba(n, k):
    return math.lgamma(n + 1.0) - math.lgamma(k + 1.0) - math.lgamma(n - k + 1.0)

@njit(cache=True)
def hypergeom_log_pmf_numba(population, successes, sample, k):
    """log P(X = k) for X ~ Hypergeometric(population, successes, sample); k inside the support."""
    return (_log_comb_numba(successes, k)
            + _log_comb_numba(population - successes, sample - k)
            - _log_comb_numba(population, sample))

@njit(cache=True)
def hypergeom_lower_tail_numba(population, successes, sample, lower, x):
    """
    Numba kernel for P(lower <= X <= x), summed from x downward.

    One log-space evaluation at x, then the ratio recurrence
        P(k-1)/P(k) = k (N-K-n+k) / ((K-k+1)(n-k+1))
    Starting at the largest term keeps underflow confined to negligible terms
    when x lies below the mode.
    """
    if x < lower:
        return 0.0
    failures = population - successes
    term = math.exp(hypergeom_log_pmf_numba(population, successes, sample, x))
    total = term
    for k in range(x, lower, -1):
        term *= (k * (failures - sample + k)) / ((successes - k + 1.0) * (sample - k + 1.0))
        total += term
    return total

@njit(cache=True)
def hypergeom_upper_tail_numba(population, successes, sample, x, upper):
    """
    Numba kernel for P(x <= X <= upper), summed from x upward with
        P(k+1)/P(k) = (K-k)(n-k) / ((k+1)(N-K-n+k+1))
    """
    if x > upper:
        return 0.0
    failures = population - successes
    term = math.exp(hypergeom_log_pmf_numba(population, successes, sample, x))
    total = term
    for k in range(x, upper):
        term *= ((successes - k) * (sample - k)) / ((k + 1.0) * (failures - sample + k + 1.0))
        total += term
    return total

@njit(cache=True)
def pmf_to_cdf_numba(pmf: np.ndarray, p_neg_inf: float, p_pos_inf: float):
    """Running sum of a PMF table offset by the -inf mass, capped at 1 - p_pos_inf."""
    F = np.empty(pmf.size, dtype=np.float64)
    acc = p_neg_inf
    cap = 1.0 - p_pos_inf
    for i in range(pmf.size):
        acc += pmf[i]
        F[i] = acc if acc < cap else cap
    return F
