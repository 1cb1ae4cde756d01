"""
Inverse-CDF search over a monotone integer step function.

The CDF is treated as a black box: the engine only evaluates it at integer
points. A quantile query runs in two phases:

1. Bracketing - starting from an anchor (a guess, the support's lower bound,
   or 0), step away by doubling increments until the target probability is
   straddled, giving (lo, hi) with cdf(lo) < p <= cdf(hi).
2. Bisection - halve [lo, hi] while keeping that invariant until hi - lo == 1.
   The answer is hi.

Known support bounds are never evaluated: cdf(lower - 1) is 0 and cdf(upper)
is 1 by definition, and p is strictly inside (0, 1).
"""

import logging
import math
from typing import Callable, Optional, Tuple
from .types import Support, SearchConfig, DEFAULT_SEARCH_CONFIG
from .errors import InvalidArgumentError, ConvergenceError

logger = logging.getLogger(__name__)

CdfFn = Callable[[int], float]

def check_probability(p: float) -> float:
    """Validate a quantile query; p must lie in the open interval (0, 1)."""
    try:
        p = float(p)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"p must be a real number, got {p!r}") from None
    if math.isnan(p) or not (0.0 < p < 1.0):
        raise InvalidArgumentError(f"p must be in the open interval (0, 1), got {p}")
    return p

def meets(value: float, p: float, config: SearchConfig = DEFAULT_SEARCH_CONFIG) -> bool:
    """True when a CDF value is >= p up to the configured rounding slack."""
    return value >= p - config.slack(p)

def _expand_down(cdf: CdfFn, p: float, hi: int, support: Support, config: SearchConfig) -> Tuple[int, int]:
    # Invariant on entry: cdf(hi) meets p.
    step = 1
    for i in range(config.max_doublings):
        lo = hi - step
        if support.lower is not None and lo < support.lower:
            lo = support.lower - 1
            logger.debug("bracket hit lower bound %d after %d doublings", support.lower, i)
            return lo, hi
        value = cdf(lo)
        if not meets(value, p, config):
            logger.debug("bracket (%d, %d] found downward after %d doublings", lo, hi, i + 1)
            return lo, hi
        hi = lo
        step *= 2
    logger.warning("quantile bracket for p=%r not found below %d within %d doublings",
                   p, hi, config.max_doublings)
    raise ConvergenceError(
        f"CDF never dropped below p={p} within {config.max_doublings} doublings; "
        f"last probe x={hi} had cdf={cdf(hi)}")

def _expand_up(cdf: CdfFn, p: float, lo: int, support: Support, config: SearchConfig) -> Tuple[int, int]:
    # Invariant on entry: cdf(lo) does not meet p.
    if support.upper is not None and lo >= support.upper:
        # Rounding left cdf(upper) short of p; the upper bound holds all remaining mass.
        return support.upper - 1, support.upper
    step = 1
    value = float("nan")
    for i in range(config.max_doublings):
        hi = lo + step
        if support.upper is not None and hi >= support.upper:
            logger.debug("bracket hit upper bound %d after %d doublings", support.upper, i)
            return lo, support.upper
        value = cdf(hi)
        if meets(value, p, config):
            logger.debug("bracket (%d, %d] found upward after %d doublings", lo, hi, i + 1)
            return lo, hi
        lo = hi
        step *= 2
    logger.warning("quantile bracket for p=%r not found above %d within %d doublings",
                   p, lo, config.max_doublings)
    raise ConvergenceError(
        f"CDF never reached p={p} within {config.max_doublings} doublings; "
        f"last probe x={lo} had cdf={value}")

def bracket_quantile(cdf: CdfFn, p: float, support: Support = Support(), guess: Optional[int] = None,
                     config: SearchConfig = DEFAULT_SEARCH_CONFIG) -> Tuple[int, int]:
    """
    Find integers lo < hi with cdf(lo) < p <= cdf(hi) (up to tolerance).

    Parameters:
    -----------
    cdf : callable
        Nondecreasing integer CDF
    p : float
        Target probability in (0, 1)
    support : Support
        Known support bounds; either side may be None
    guess : Optional[int]
        Starting point; clamped into the support. Defaults to the support's
        lower bound, or 0 when unbounded below.
    config : SearchConfig
        Tolerances and doubling cap

    Returns:
    --------
    (lo, hi) : Tuple[int, int]
    """
    if guess is not None:
        anchor = support.clamp(int(guess))
    elif support.lower is not None:
        anchor = support.lower
    else:
        anchor = support.clamp(0)

    if support.upper is not None and anchor == support.upper:
        return _expand_down(cdf, p, anchor, support, config)
    if meets(cdf(anchor), p, config):
        return _expand_down(cdf, p, anchor, support, config)
    return _expand_up(cdf, p, anchor, support, config)

def bisect_quantile(cdf: CdfFn, p: float, lo: int, hi: int,
                    config: SearchConfig = DEFAULT_SEARCH_CONFIG) -> int:
    """Smallest x in (lo, hi] with cdf(x) meeting p, given cdf(lo) < p <= cdf(hi)."""
    if hi <= lo:
        raise ValueError(f"Invalid bracket: lo={lo} >= hi={hi}")
    n_probes = 0
    while hi - lo > 1:
        mid = lo + (hi - lo) // 2
        if meets(cdf(mid), p, config):
            hi = mid
        else:
            lo = mid
        n_probes += 1
    logger.debug("bisection settled on %d after %d probes", hi, n_probes)
    return hi

def inverse_cdf_search(cdf: CdfFn, p: float, support: Support = Support(), guess: Optional[int] = None,
                       config: SearchConfig = DEFAULT_SEARCH_CONFIG) -> int:
    """
    Smallest integer x with cdf(x) >= p.

    Costs O(log D) CDF evaluations, D being the distance between the anchor
    and the answer. Raises InvalidArgumentError when p is outside (0, 1) and
    ConvergenceError when the CDF never straddles p within the doubling cap.
    """
    p = check_probability(p)
    lo, hi = bracket_quantile(cdf, p, support, guess, config)
    return bisect_quantile(cdf, p, lo, hi, config)
