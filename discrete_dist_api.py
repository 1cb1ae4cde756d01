from typing import Union

from discrete_dist import search as _impl_search
from discrete_dist import tables as _impl_tables
from discrete_dist.types import Family, DistKind, Support, SearchConfig, DEFAULT_SEARCH_CONFIG, DiscreteDist
from discrete_dist.errors import InvalidArgumentError, ConvergenceError
from discrete_dist.base import DiscreteDistribution
from discrete_dist.families import Binomial, Poisson, Geometric, Pascal, Hypergeometric
from discrete_dist.tables import TabulatedDistribution, step_cdf_left, step_cdf_right, step_ccdf_right
from discrete_dist.conformance import (
    ConformanceCase, verify_densities, verify_cumulative_probabilities,
    verify_inverse_cumulative_probabilities, verify_illegal_arguments, verify_all,
)

_FAMILIES = {
    Family.BINOMIAL: Binomial,
    Family.POISSON: Poisson,
    Family.GEOMETRIC: Geometric,
    Family.PASCAL: Pascal,
    Family.HYPERGEOMETRIC: Hypergeometric,
}

def make_distribution(family: Union[Family, str], **params) -> DiscreteDistribution:
    """
    Construct a reference distribution from its family and parameters.

    Parameters:
    -----------
    family : Family or str
        Family enum member or its value (e.g. 'binomial')
    **params
        Constructor parameters of the family:
        binomial(n, p), poisson(lam), geometric(p), pascal(r, p),
        hypergeometric(population, successes, sample)

    Returns:
    --------
    DiscreteDistribution

    Usage:
    ------
    dist = make_distribution('binomial', n=10, p=0.5)
    dist.inverse_cumulative_probability(0.623)  # -> 5
    """
    if isinstance(family, str):
        try:
            family = Family(family.strip().lower())
        except ValueError:
            raise InvalidArgumentError(f"Unknown distribution family: {family!r}") from None
    cls = _FAMILIES.get(family)
    if cls is None:
        raise InvalidArgumentError(f"Family {family.value!r} cannot be built from parameters")
    try:
        return cls(**params)
    except TypeError as e:
        raise InvalidArgumentError(f"Bad parameters for {family.value}: {e}") from None

def inverse_cumulative_probability(dist: DiscreteDistribution, p: float,
                                   config: SearchConfig = DEFAULT_SEARCH_CONFIG) -> int:
    """
    Quantile of dist at p with an explicit search configuration.

    Same result as dist.inverse_cumulative_probability(p) when config is the
    default; a looser or tighter tolerance or doubling cap can be supplied.
    """
    p = _impl_search.check_probability(p)
    return _impl_search.inverse_cdf_search(dist.cumulative_probability, p, dist.support,
                                           guess=dist.initial_domain(p), config=config)

def tabulate(dist: DiscreteDistribution, kind: DistKind = DistKind.PMF, beta: float = 1e-12) -> DiscreteDist:
    """
    Tabulate dist on its integer support trimmed to mass 1 - beta.

    Usage:
    ------
    table = tabulate(make_distribution('poisson', lam=4.0), kind=DistKind.CDF)
    step_cdf_right(table, 6)  # == P(X <= 6) up to beta
    """
    result = _impl_tables.tabulate(dist, kind, beta)
    result.name = f'{dist!r}:{kind.value}'
    return result
