"""
Tabulated forms of discrete distributions.

- `tabulate` evaluates any DiscreteDistribution on its integer grid and
  returns a DiscreteDist table (PMF, CDF or CCDF) with the truncated tails
  carried in p_neg_inf / p_pos_inf.
- `step_cdf_*` / `step_ccdf_right` evaluate CDF/CCDF tables at arbitrary points.
- `TabulatedDistribution` turns a PMF table on an integer grid back into a
  DiscreteDistribution, so tables can be queried and inverted like any family.
"""

import logging
from dataclasses import dataclass
from typing import ClassVar, Sequence
import numpy as np
from .base import DiscreteDistribution
from .types import Family, DistKind, DiscreteDist, Support
from .errors import InvalidArgumentError
from .kernels import check_mass_conservation, pmf_to_cdf_numba

logger = logging.getLogger(__name__)

def budget_correction_last_bin(dist: DiscreteDist, expected_total: float = 1.0, tol: float = 1e-9) -> None:
    """Correct budget in last bin of PMF (modifies dist.vals in-place)."""
    if dist.kind != DistKind.PMF:
        raise ValueError(f"budget_correction_last_bin expects PMF, got {dist.kind}")
    pmf = dist.vals
    eps = (dist.p_neg_inf + float(pmf.sum()) + dist.p_pos_inf) - expected_total
    if abs(eps) <= tol and pmf.size:
        pmf[-1] = max(pmf[-1] - eps, 0.0)

def pmf_table_to_kind(table: DiscreteDist, kind: DistKind) -> DiscreteDist:
    """Convert a PMF table to the requested kind on the same grid."""
    if table.kind != DistKind.PMF:
        raise ValueError(f"pmf_table_to_kind expects PMF, got {table.kind}")
    if kind == DistKind.PMF:
        return table
    F = pmf_to_cdf_numba(table.vals, table.p_neg_inf, table.p_pos_inf)
    if kind == DistKind.CDF:
        vals = F
    elif kind == DistKind.CCDF:
        vals = np.maximum(1.0 - F, table.p_pos_inf)
    else:
        raise ValueError(f"Unknown kind: {kind}")
    return DiscreteDist(x=table.x, kind=kind, vals=vals, p_neg_inf=table.p_neg_inf,
                        p_pos_inf=table.p_pos_inf, name=table.name)

def tabulate(dist: DiscreteDistribution, kind: DistKind = DistKind.PMF, beta: float = 1e-12) -> DiscreteDist:
    """
    Tabulate a distribution on the integers of its (trimmed) support.

    Parameters:
    -----------
    dist : DiscreteDistribution
        Distribution to evaluate
    kind : DistKind
        Kind of the returned table (default: PMF)
    beta : float
        Tail probability to trim on unbounded sides, split evenly between
        the two tails

    Returns:
    --------
    DiscreteDist
        Table on an integer grid; mass outside the grid is recorded in
        p_neg_inf / p_pos_inf

    Algorithm:
    1. Grid ends: known support bounds, else the beta/2 and 1-beta/2 quantiles
    2. PMF at every grid integer
    3. Tail masses from the CDF at the grid ends
    4. Last-bin budget correction and mass conservation check
    """
    if not (0 < beta < 1):
        raise InvalidArgumentError(f"beta must be in (0, 1), got {beta}")
    support = dist.support
    lo = support.lower if support.lower is not None else dist.inverse_cumulative_probability(beta / 2)
    hi = support.upper if support.upper is not None else dist.inverse_cumulative_probability(1 - beta / 2)
    logger.debug("tabulating %r on [%d, %d] (%d points)", dist, lo, hi, hi - lo + 1)

    x = np.arange(lo, hi + 1, dtype=np.float64)
    pmf = np.array([dist.probability(k) for k in range(lo, hi + 1)], dtype=np.float64)
    p_neg_inf = 0.0 if support.lower is not None else dist.cumulative_probability(lo - 1)
    p_pos_inf = 0.0 if support.upper is not None else max(1.0 - dist.cumulative_probability(hi), 0.0)

    table = DiscreteDist(x=x, kind=DistKind.PMF, vals=pmf, p_neg_inf=p_neg_inf,
                         p_pos_inf=p_pos_inf, name=repr(dist))
    budget_correction_last_bin(table)
    check_mass_conservation(table)
    return pmf_table_to_kind(table, kind)

def step_cdf_left(dist: DiscreteDist, q: float) -> float:
    """Evaluate left-continuous CDF step function at q, i.e. P(X < q)."""
    if dist.kind != DistKind.CDF:
        raise ValueError(f"step_cdf_left expects CDF, got {dist.kind}")
    x = dist.x
    if q <= x[0]:
        return float(dist.p_neg_inf)
    if q > x[-1]:
        return float(1.0 - dist.p_pos_inf)
    idx = int(np.searchsorted(x, q, side="left")) - 1
    return float(dist.vals[idx])

def step_cdf_right(dist: DiscreteDist, q: float) -> float:
    """Evaluate right-continuous CDF step function at q, i.e. P(X <= q)."""
    if dist.kind != DistKind.CDF:
        raise ValueError(f"step_cdf_right expects CDF, got {dist.kind}")
    x = dist.x
    if q < x[0]:
        return float(dist.p_neg_inf)
    if q >= x[-1]:
        return float(1.0 - dist.p_pos_inf)
    idx = int(np.searchsorted(x, q, side="right")) - 1
    return float(dist.vals[idx])

def step_ccdf_right(dist: DiscreteDist, q: float) -> float:
    """Evaluate right-continuous CCDF step function at q, i.e. P(X > q)."""
    if dist.kind != DistKind.CCDF:
        raise ValueError(f"step_ccdf_right expects CCDF, got {dist.kind}")
    x = dist.x
    if q < x[0]:
        return float(1.0 - dist.p_neg_inf)
    if q >= x[-1]:
        return float(dist.p_pos_inf)
    idx = int(np.searchsorted(x, q, side="right")) - 1
    return float(dist.vals[idx])


@dataclass(frozen=True, eq=False)
class TabulatedDistribution(DiscreteDistribution):
    """
    Distribution given by a PMF table on an integer grid.

    Integers between grid points carry no mass. A positive p_neg_inf is
    placed one below the first grid point, a positive p_pos_inf one above
    the last, so the CDF reaches 1 on a finite support.
    """
    table: DiscreteDist

    family: ClassVar[Family] = Family.TABULATED

    def __post_init__(self):
        table = self.table
        if table.kind != DistKind.PMF:
            raise InvalidArgumentError(f"TabulatedDistribution expects a PMF table, got {table.kind}")
        if table.x.size == 0:
            raise InvalidArgumentError("TabulatedDistribution needs at least one grid point")
        if not np.all(table.x == np.round(table.x)):
            raise InvalidArgumentError("TabulatedDistribution needs an integer grid")
        if np.any(table.vals < 0):
            raise InvalidArgumentError("PMF must be nonnegative")
        check_mass_conservation(table)

        F = pmf_to_cdf_numba(table.vals, table.p_neg_inf, table.p_pos_inf)
        points = table.x.astype(np.int64)
        points.flags.writeable = False
        mass = table.vals.copy()
        mass.flags.writeable = False
        cdf_table = DiscreteDist(x=table.x.copy(), kind=DistKind.CDF, vals=F,
                                 p_neg_inf=float(table.p_neg_inf), p_pos_inf=float(table.p_pos_inf))
        lower = int(points[0]) - (1 if table.p_neg_inf > 0 else 0)
        upper = int(points[-1]) + (1 if table.p_pos_inf > 0 else 0)
        object.__setattr__(self, "_points", points)
        object.__setattr__(self, "_mass", mass)
        object.__setattr__(self, "_tails", (float(table.p_neg_inf), float(table.p_pos_inf)))
        object.__setattr__(self, "_cdf_table", cdf_table)
        object.__setattr__(self, "_support", Support(lower, upper))

    @classmethod
    def from_pmf(cls, points: Sequence[int], masses: Sequence[float], name: str = None) -> "TabulatedDistribution":
        return cls(DiscreteDist(x=np.asarray(points, dtype=np.float64), kind=DistKind.PMF,
                                vals=np.asarray(masses, dtype=np.float64), name=name))

    @property
    def support(self) -> Support:
        return self._support

    @property
    def mean(self) -> float:
        p_neg, p_pos = self._tails
        total = float(np.dot(self._points, self._mass))
        total += (self._points[0] - 1) * p_neg + (self._points[-1] + 1) * p_pos
        return float(total)

    def _pmf(self, k: int) -> float:
        p_neg, p_pos = self._tails
        if k == self._points[0] - 1 and p_neg > 0:
            return p_neg
        if k == self._points[-1] + 1 and p_pos > 0:
            return p_pos
        idx = int(np.searchsorted(self._points, k, side="left"))
        if idx < self._points.size and self._points[idx] == k:
            return float(self._mass[idx])
        return 0.0

    def _cdf(self, k: int) -> float:
        return step_cdf_right(self._cdf_table, k)

    def __repr__(self):
        name = self.table.name or f"{self._points.size} points"
        return f"TabulatedDistribution({name})"
