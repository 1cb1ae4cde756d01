"""
Reference discrete distribution families.

Each family is a frozen dataclass implementing the DiscreteDistribution
contract from its mass function and a closed-form or summed CDF. Formulas are
evaluated in log space through scipy.special; the hypergeometric CDF is summed
by the numba kernels in `kernels`.

All families count from 0 where that is the convention:
- Geometric counts failures before the first success
- Pascal counts failures before the r-th success
"""

import math
from dataclasses import dataclass
from numbers import Integral, Real
from typing import ClassVar, Optional
from scipy import special
from .base import DiscreteDistribution
from .types import Family, Support
from .errors import InvalidArgumentError
from .kernels import hypergeom_log_pmf_numba, hypergeom_lower_tail_numba, hypergeom_upper_tail_numba

def _chk(cond: bool, msg: str):
    if not cond:
        raise InvalidArgumentError(msg)

def _as_count(value, name: str, minimum: int = 0) -> int:
    _chk(isinstance(value, Integral) and not isinstance(value, bool), f"{name} must be an integer, got {value!r}")
    _chk(value >= minimum, f"{name} must be >= {minimum}, got {value}")
    return int(value)

def _as_probability(value, name: str, allow_zero: bool = True) -> float:
    _chk(isinstance(value, Real) and not isinstance(value, bool), f"{name} must be a real number, got {value!r}")
    value = float(value)
    lo_ok = value >= 0.0 if allow_zero else value > 0.0
    _chk(lo_ok and value <= 1.0, f"{name} must be in {'[' if allow_zero else '('}0, 1], got {value}")
    return value


@dataclass(frozen=True)
class Binomial(DiscreteDistribution):
    """Number of successes in n independent trials with success probability p."""
    n: int
    p: float

    family: ClassVar[Family] = Family.BINOMIAL

    def __post_init__(self):
        object.__setattr__(self, "n", _as_count(self.n, "n"))
        object.__setattr__(self, "p", _as_probability(self.p, "p"))

    @property
    def support(self) -> Support:
        if self.p == 0.0:
            return Support(0, 0)
        if self.p == 1.0:
            return Support(self.n, self.n)
        return Support(0, self.n)

    @property
    def mean(self) -> float:
        return self.n * self.p

    @property
    def variance(self) -> float:
        return self.n * self.p * (1.0 - self.p)

    def _pmf(self, k: int) -> float:
        n, p = self.n, self.p
        log_pmf = (special.gammaln(n + 1) - special.gammaln(k + 1) - special.gammaln(n - k + 1)
                   + special.xlogy(k, p) + special.xlog1py(n - k, -p))
        return math.exp(log_pmf)

    def _cdf(self, k: int) -> float:
        return float(special.bdtr(k, self.n, self.p))

    def initial_domain(self, p: float) -> Optional[int]:
        return math.floor(self.mean)


@dataclass(frozen=True)
class Poisson(DiscreteDistribution):
    """Count of events with mean rate lam."""
    lam: float

    family: ClassVar[Family] = Family.POISSON

    def __post_init__(self):
        _chk(isinstance(self.lam, Real) and not isinstance(self.lam, bool), f"lam must be a real number, got {self.lam!r}")
        _chk(math.isfinite(self.lam) and self.lam > 0, f"lam must be finite and > 0, got {self.lam}")
        object.__setattr__(self, "lam", float(self.lam))

    @property
    def support(self) -> Support:
        return Support(0, None)

    @property
    def mean(self) -> float:
        return self.lam

    @property
    def variance(self) -> float:
        return self.lam

    def _pmf(self, k: int) -> float:
        return math.exp(special.xlogy(k, self.lam) - self.lam - special.gammaln(k + 1))

    def _cdf(self, k: int) -> float:
        return float(special.pdtr(k, self.lam))

    def initial_domain(self, p: float) -> Optional[int]:
        return math.floor(self.lam)


@dataclass(frozen=True)
class Geometric(DiscreteDistribution):
    """Failures before the first success, success probability p."""
    p: float

    family: ClassVar[Family] = Family.GEOMETRIC

    def __post_init__(self):
        object.__setattr__(self, "p", _as_probability(self.p, "p", allow_zero=False))

    @property
    def support(self) -> Support:
        return Support(0, 0) if self.p == 1.0 else Support(0, None)

    @property
    def mean(self) -> float:
        return (1.0 - self.p) / self.p

    @property
    def variance(self) -> float:
        return (1.0 - self.p) / (self.p * self.p)

    def _pmf(self, k: int) -> float:
        return math.exp(special.xlog1py(k, -self.p) + math.log(self.p))

    def _cdf(self, k: int) -> float:
        # 1 - (1-p)^(k+1)
        return -math.expm1((k + 1) * math.log1p(-self.p))

    def initial_domain(self, p: float) -> Optional[int]:
        if self.p == 1.0:
            return None
        # Closed-form quantile; the search only has to confirm it.
        ratio = math.log1p(-p) / math.log1p(-self.p)
        if not math.isfinite(ratio):
            return None
        return math.ceil(ratio) - 1


@dataclass(frozen=True)
class Pascal(DiscreteDistribution):
    """Failures before the r-th success (negative binomial), success probability p."""
    r: int
    p: float

    family: ClassVar[Family] = Family.PASCAL

    def __post_init__(self):
        object.__setattr__(self, "r", _as_count(self.r, "r", minimum=1))
        object.__setattr__(self, "p", _as_probability(self.p, "p", allow_zero=False))

    @property
    def support(self) -> Support:
        return Support(0, 0) if self.p == 1.0 else Support(0, None)

    @property
    def mean(self) -> float:
        return self.r * (1.0 - self.p) / self.p

    @property
    def variance(self) -> float:
        return self.r * (1.0 - self.p) / (self.p * self.p)

    def _pmf(self, k: int) -> float:
        r, p = self.r, self.p
        log_pmf = (special.gammaln(k + r) - special.gammaln(k + 1) - special.gammaln(r)
                   + r * math.log(p) + special.xlog1py(k, -p))
        return math.exp(log_pmf)

    def _cdf(self, k: int) -> float:
        # Regularized incomplete beta I_p(r, k+1)
        return float(special.betainc(self.r, k + 1, self.p))

    def initial_domain(self, p: float) -> Optional[int]:
        return math.floor(self.mean)


@dataclass(frozen=True)
class Hypergeometric(DiscreteDistribution):
    """Successes in a sample drawn without replacement from a finite population."""
    population: int
    successes: int
    sample: int

    family: ClassVar[Family] = Family.HYPERGEOMETRIC

    def __post_init__(self):
        population = _as_count(self.population, "population")
        successes = _as_count(self.successes, "successes")
        sample = _as_count(self.sample, "sample")
        _chk(successes <= population, f"successes must be <= population, got {successes} > {population}")
        _chk(sample <= population, f"sample must be <= population, got {sample} > {population}")
        object.__setattr__(self, "population", population)
        object.__setattr__(self, "successes", successes)
        object.__setattr__(self, "sample", sample)

    @property
    def support(self) -> Support:
        failures = self.population - self.successes
        return Support(max(0, self.sample - failures), min(self.sample, self.successes))

    @property
    def mean(self) -> float:
        if self.population == 0:
            return 0.0
        return self.sample * self.successes / self.population

    @property
    def variance(self) -> float:
        N, K, n = self.population, self.successes, self.sample
        if N <= 1:
            return 0.0
        return n * (K / N) * ((N - K) / N) * ((N - n) / (N - 1))

    @property
    def mode(self) -> int:
        return (self.sample + 1) * (self.successes + 1) // (self.population + 2)

    def _pmf(self, k: int) -> float:
        return math.exp(hypergeom_log_pmf_numba(self.population, self.successes, self.sample, k))

    def _cdf(self, k: int) -> float:
        support = self.support
        # Sum whichever tail lies away from the mode.
        if k < self.mode:
            return hypergeom_lower_tail_numba(self.population, self.successes, self.sample, support.lower, k)
        return 1.0 - hypergeom_upper_tail_numba(self.population, self.successes, self.sample, k + 1, support.upper)

    def initial_domain(self, p: float) -> Optional[int]:
        return math.floor(self.mean)
