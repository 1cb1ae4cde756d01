import numpy as np
import pytest
from scipy import stats
from discrete_dist import tables as T
from discrete_dist.kernels import check_mass_conservation, pmf_to_cdf_numba
from discrete_dist_api import (
    DiscreteDist, DistKind, Binomial, Poisson, Hypergeometric, TabulatedDistribution,
    InvalidArgumentError, tabulate,
)
from tests.conftest import assert_monotone_nondecreasing, assert_monotone_nonincreasing, assert_budget_close

def test_cdf_steps_boundaries_and_interior():
    x = np.array([0.0, 1.0, 2.0], dtype=np.float64)
    F = np.array([0.1, 0.5, 0.8], dtype=np.float64)
    pneg, ppos = 0.1, 0.2

    dist = DiscreteDist(x=x, kind=DistKind.CDF, vals=F, p_neg_inf=pneg, p_pos_inf=ppos)

    # Below grid
    assert T.step_cdf_left(dist, -5.0) == pneg
    assert T.step_cdf_right(dist, -5.0) == pneg
    # Above grid
    assert T.step_cdf_left(dist, 5.0) == 1.0 - ppos
    assert T.step_cdf_right(dist, 5.0) == 1.0 - ppos
    # Interior, exact hits
    assert T.step_cdf_left(dist, 1.0) == F[0]  # left of 1.0 is index 0
    assert T.step_cdf_right(dist, 1.0) == F[1] # right at 1.0 is index 1
    # Between grid points
    assert T.step_cdf_left(dist, 1.5) == F[1]
    assert T.step_cdf_right(dist, 1.5) == F[1]

def test_ccdf_steps_boundaries_and_interior():
    x = np.array([0.0, 1.0, 2.0], dtype=np.float64)
    Scc = np.array([0.9, 0.6, 0.2], dtype=np.float64)  # last equals ppos
    pneg, ppos = 0.1, 0.2

    dist = DiscreteDist(x=x, kind=DistKind.CCDF, vals=Scc, p_neg_inf=pneg, p_pos_inf=ppos)

    assert T.step_ccdf_right(dist, -5.0) == 1.0 - pneg
    assert T.step_ccdf_right(dist, 5.0) == ppos
    assert T.step_ccdf_right(dist, 1.0) == Scc[1]

def test_step_evaluators_check_kind():
    pmf = DiscreteDist(x=np.array([0.0, 1.0]), kind=DistKind.PMF, vals=np.array([0.5, 0.5]))
    with pytest.raises(ValueError):
        T.step_cdf_right(pmf, 0.0)
    with pytest.raises(ValueError):
        T.step_ccdf_right(pmf, 0.0)

def test_discrete_dist_validation():
    with pytest.raises(ValueError):
        DiscreteDist(x=np.array([0.0, 0.0]), kind=DistKind.PMF, vals=np.array([0.5, 0.5]))
    with pytest.raises(ValueError):
        DiscreteDist(x=np.array([0.0, 1.0]), kind=DistKind.PMF, vals=np.array([0.5]))
    with pytest.raises(ValueError):
        DiscreteDist(x=np.array([0.0, 1.0]), kind=DistKind.CDF, vals=np.array([0.6, 0.5]), debug_check=True)

def test_budget_correction_last_bin():
    pmf = np.array([0.2, 0.3, 0.4], dtype=np.float64)
    pneg, ppos = 0.0, 0.11
    x = np.array([0.0, 1.0, 2.0], dtype=np.float64)

    dist = DiscreteDist(x=x, kind=DistKind.PMF, vals=pmf, p_neg_inf=pneg, p_pos_inf=ppos)
    # Sum = 1.01 -> eps = 0.01, within tol=0.02 -> last bin -0.01
    T.budget_correction_last_bin(dist, expected_total=1.0, tol=0.02)
    assert abs(dist.p_neg_inf + dist.vals.sum() + dist.p_pos_inf - 1.0) < 1e-15
    assert np.isclose(dist.vals[-1], 0.39)

def test_mass_conservation_check():
    ok = DiscreteDist(x=np.array([0.0, 1.0]), kind=DistKind.PMF, vals=np.array([0.25, 0.5]), p_pos_inf=0.25)
    check_mass_conservation(ok)
    short = DiscreteDist(x=np.array([0.0, 1.0]), kind=DistKind.PMF, vals=np.array([0.25, 0.5]))
    with pytest.raises(ValueError, match="MASS CONSERVATION ERROR"):
        check_mass_conservation(short)

def test_pmf_to_cdf_kernel_caps_at_top():
    F = pmf_to_cdf_numba(np.array([0.3, 0.3, 0.3]), 0.05, 0.1)
    assert np.allclose(F, [0.35, 0.65, 0.9])


class TestTabulate:

    def test_bounded_family_has_no_tails(self):
        table = tabulate(Binomial(10, 0.5))
        assert table.kind == DistKind.PMF
        assert np.array_equal(table.x, np.arange(0, 11, dtype=np.float64))
        assert table.p_neg_inf == 0.0 and table.p_pos_inf == 0.0
        assert np.allclose(table.vals, stats.binom(10, 0.5).pmf(np.arange(11)), atol=1e-14)
        assert_budget_close(table.p_neg_inf, table.vals, table.p_pos_inf)

    def test_semi_infinite_family_trims_upper_tail(self):
        beta = 1e-8
        table = tabulate(Poisson(4.0), beta=beta)
        assert table.x[0] == 0.0
        assert 0.0 < table.p_pos_inf <= beta / 2
        assert table.p_neg_inf == 0.0
        assert table.x[-1] == float(stats.poisson(4.0).ppf(1 - beta / 2))
        assert_budget_close(table.p_neg_inf, table.vals, table.p_pos_inf, tol=1e-11)

    def test_cdf_and_ccdf_kinds(self):
        dist = Hypergeometric(50, 20, 10)
        F = tabulate(dist, kind=DistKind.CDF)
        S = tabulate(dist, kind=DistKind.CCDF)
        assert_monotone_nondecreasing(F.vals, tol=1e-15)
        assert_monotone_nonincreasing(S.vals, tol=1e-15)
        for k in range(-2, 13):
            assert T.step_cdf_right(F, k) == pytest.approx(dist.cumulative_probability(k), abs=1e-12)
            assert T.step_ccdf_right(S, k) == pytest.approx(1.0 - dist.cumulative_probability(k), abs=1e-12)

    def test_table_name_records_source(self):
        table = tabulate(Binomial(3, 0.5), kind=DistKind.CDF)
        assert table.name == "Binomial(n=3, p=0.5):cdf"

    @pytest.mark.parametrize("beta", [0.0, 1.0, -0.5])
    def test_bad_beta(self, beta):
        with pytest.raises(InvalidArgumentError):
            tabulate(Poisson(1.0), beta=beta)


class TestTabulatedDistribution:

    def test_gapped_grid(self):
        dist = TabulatedDistribution.from_pmf([0, 2, 5], [0.2, 0.5, 0.3])
        assert dist.probability(1) == 0.0
        assert dist.probability(2) == 0.5
        assert dist.cumulative_probability(1) == pytest.approx(0.2)
        assert dist.cumulative_probability(4) == pytest.approx(0.7)
        assert dist.cumulative_probability(5) == 1.0
        assert dist.inverse_cumulative_probability(0.2) == 0
        assert dist.inverse_cumulative_probability(0.21) == 2
        assert dist.inverse_cumulative_probability(0.7) == 2
        assert dist.inverse_cumulative_probability(0.71) == 5
        assert dist.mean == pytest.approx(0.2 * 0 + 0.5 * 2 + 0.3 * 5)

    def test_tail_masses_sit_outside_grid(self):
        table = DiscreteDist(x=np.array([3.0, 4.0]), kind=DistKind.PMF, vals=np.array([0.4, 0.4]),
                             p_neg_inf=0.1, p_pos_inf=0.1)
        dist = TabulatedDistribution(table)
        assert dist.support.lower == 2 and dist.support.upper == 5
        assert dist.probability(2) == pytest.approx(0.1)
        assert dist.probability(5) == pytest.approx(0.1)
        assert dist.cumulative_probability(2) == pytest.approx(0.1)
        assert dist.cumulative_probability(4) == pytest.approx(0.9)
        assert dist.inverse_cumulative_probability(0.05) == 2
        assert dist.inverse_cumulative_probability(0.95) == 5

    def test_round_trip_through_table(self):
        source = Poisson(7.5)
        dist = TabulatedDistribution(tabulate(source, beta=1e-12))
        for q in (0.01, 0.2, 0.5, 0.8, 0.99):
            assert dist.inverse_cumulative_probability(q) == source.inverse_cumulative_probability(q)

    def test_table_is_snapshotted(self):
        vals = np.array([0.5, 0.5])
        dist = TabulatedDistribution(DiscreteDist(x=np.array([0.0, 1.0]), kind=DistKind.PMF, vals=vals))
        dist.table.vals[0] = 0.9
        assert dist.probability(0) == 0.5

    def test_tail_masses_are_snapshotted(self):
        table = DiscreteDist(x=np.array([3.0, 4.0]), kind=DistKind.PMF, vals=np.array([0.4, 0.4]),
                             p_neg_inf=0.1, p_pos_inf=0.1)
        dist = TabulatedDistribution(table)
        mean = dist.mean
        table.p_neg_inf = 0.3
        table.p_pos_inf = 0.0
        assert dist.probability(2) == pytest.approx(0.1)
        assert dist.probability(5) == pytest.approx(0.1)
        assert dist.probability(2) == pytest.approx(dist.cumulative_probability(2))
        assert dist.probability(5) == pytest.approx(1.0 - dist.cumulative_probability(4))
        assert dist.mean == mean

    @pytest.mark.parametrize("x, vals", [
        ([0.0, 0.5], [0.5, 0.5]),
        ([0.0, 1.0], [1.5, -0.5]),
    ])
    def test_rejects_bad_tables(self, x, vals):
        with pytest.raises(InvalidArgumentError):
            TabulatedDistribution.from_pmf(x, vals)

    def test_rejects_non_pmf_and_unnormalized(self):
        cdf = DiscreteDist(x=np.array([0.0, 1.0]), kind=DistKind.CDF, vals=np.array([0.5, 1.0]))
        with pytest.raises(InvalidArgumentError):
            TabulatedDistribution(cdf)
        with pytest.raises(ValueError, match="MASS CONSERVATION"):
            TabulatedDistribution.from_pmf([0, 1], [0.5, 0.4])
