"""
Common types and enums for the discrete distribution library.

This module contains the shared enums, the support and search configuration
records, and the DiscreteDist table class, to avoid circular imports and
provide a single source of truth.
"""

from dataclasses import dataclass
from typing import Optional
from enum import Enum
import numpy as np

# Enums
class Family(Enum):
    """Reference distribution family."""
    BINOMIAL = "binomial"
    POISSON = "poisson"
    GEOMETRIC = "geometric"
    PASCAL = "pascal"
    HYPERGEOMETRIC = "hypergeometric"
    TABULATED = "tabulated"

class DistKind(Enum):
    """Table kind."""
    PMF = "pmf"  # Probability mass function
    CDF = "cdf"  # Cumulative distribution function
    CCDF = "ccdf"  # Complementary cumulative distribution function

@dataclass(frozen=True)
class Support:
    """Integer support bounds; None marks an unbounded side."""
    lower: Optional[int] = None
    upper: Optional[int] = None

    def __post_init__(self):
        if self.lower is not None and self.upper is not None and self.lower > self.upper:
            raise ValueError(f"Support lower bound {self.lower} exceeds upper bound {self.upper}")

    def contains(self, k: int) -> bool:
        if self.lower is not None and k < self.lower:
            return False
        if self.upper is not None and k > self.upper:
            return False
        return True

    def clamp(self, k: int) -> int:
        if self.lower is not None and k < self.lower:
            return self.lower
        if self.upper is not None and k > self.upper:
            return self.upper
        return k

@dataclass(frozen=True)
class SearchConfig:
    """
    Tolerances and iteration cap for the inverse-CDF search.

    A probed CDF value meets the target p when
    cdf >= p - min(abs_tol, rel_tol * p). The slack is capped by abs_tol
    and shrinks with p, so it never reaches p itself.
    """
    abs_tol: float = 1e-14
    rel_tol: float = 1e-12
    max_doublings: int = 64

    def __post_init__(self):
        if self.abs_tol < 0 or self.rel_tol < 0:
            raise ValueError("abs_tol and rel_tol must be nonnegative")
        if self.rel_tol >= 1:
            raise ValueError(f"rel_tol must be below 1, got {self.rel_tol}")
        if self.max_doublings < 1:
            raise ValueError(f"max_doublings must be >= 1, got {self.max_doublings}")

    def slack(self, p: float) -> float:
        return min(self.abs_tol, self.rel_tol * abs(p))

DEFAULT_SEARCH_CONFIG = SearchConfig()

# Main data class
@dataclass
class DiscreteDist:
    x: np.ndarray
    kind: DistKind
    vals: np.ndarray
    p_neg_inf: float = 0.0
    p_pos_inf: float = 0.0
    name: Optional[str] = None
    debug_check: bool = False
    tol: float = 1e-12

    def __post_init__(self):
        self.x = np.ascontiguousarray(self.x, dtype=np.float64)
        self.vals = np.ascontiguousarray(self.vals, dtype=np.float64)
        if self.x.ndim != 1 or self.vals.ndim != 1 or self.x.shape != self.vals.shape:
            raise ValueError("x and vals must be 1-D arrays of equal length")
        if not np.all(np.diff(self.x) > 0):
            raise ValueError("x must be strictly increasing")
        if self.p_neg_inf < -self.tol or self.p_pos_inf < -self.tol:
            raise ValueError("p_neg_inf and p_pos_inf must be nonnegative")
        if self.debug_check:
            if self.kind == DistKind.PMF:
                if np.any(self.vals < -self.tol):
                    raise ValueError("PMF must be nonnegative")
            elif self.kind == DistKind.CDF:
                if np.any(np.diff(self.vals) < -self.tol):
                    raise ValueError("CDF must be nondecreasing")
            elif self.kind == DistKind.CCDF:
                if np.any(np.diff(self.vals) > self.tol):
                    raise ValueError("CCDF must be nonincreasing")
