"""
Discrete distribution evaluation and quantile search.

This package contains the DiscreteDistribution contract, the inverse-CDF
search engine, reference families, tables and conformance checks.
"""

from .types import Family, DistKind, Support, SearchConfig, DEFAULT_SEARCH_CONFIG, DiscreteDist
from .errors import InvalidArgumentError, ConvergenceError
from .base import DiscreteDistribution
from .search import inverse_cdf_search, bracket_quantile, bisect_quantile, check_probability
from .families import Binomial, Poisson, Geometric, Pascal, Hypergeometric
from .tables import TabulatedDistribution, tabulate, step_cdf_left, step_cdf_right, step_ccdf_right

__all__ = [
    # Types
    'Family', 'DistKind', 'Support', 'SearchConfig', 'DEFAULT_SEARCH_CONFIG', 'DiscreteDist',

    # Errors
    'InvalidArgumentError', 'ConvergenceError',

    # Contract and search engine
    'DiscreteDistribution',
    'inverse_cdf_search', 'bracket_quantile', 'bisect_quantile', 'check_probability',

    # Families
    'Binomial', 'Poisson', 'Geometric', 'Pascal', 'Hypergeometric', 'TabulatedDistribution',

    # Tables
    'tabulate', 'step_cdf_left', 'step_cdf_right', 'step_ccdf_right',
]
