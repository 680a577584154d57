from decimal import Decimal
from types import SimpleNamespace

import pytest

from src.engine import apr as apr_module
from src.engine.apr import solve_apr
from src.engine.errors import InvalidParameterError, NonConvergenceError
from src.engine.payment import annuity_payment, present_value
from src.models.results import APRStatus


class TestNoFees:
    def test_equals_nominal_exactly(self):
        result = solve_apr(Decimal("300000"), Decimal("6.5"), 360, Decimal("0"))
        assert result.apr == Decimal("6.5")
        assert result.status is APRStatus.NO_FEES
        assert result.converged
        assert result.iterations == 0
        assert result.spread == Decimal("0")

    def test_default_fees(self):
        result = solve_apr(Decimal("300000"), Decimal("4.375"), 360)
        assert result.apr == Decimal("4.375")


class TestWithFees:
    def test_apr_above_nominal(self):
        """$300K at 6.5% with $5K fees: roughly 6.67%."""
        result = solve_apr(Decimal("300000"), Decimal("6.5"), 360, Decimal("5000"))
        assert result.status is APRStatus.CONVERGED
        assert result.converged
        assert Decimal("6.6") < result.apr < Decimal("6.8")
        assert result.apr > result.nominal_rate
        assert 0 < result.iterations <= 100

    def test_present_value_matches_net_proceeds(self):
        result = solve_apr(Decimal("300000"), Decimal("6.5"), 360, Decimal("5000"))
        pmt = float(annuity_payment(Decimal("300000"), Decimal("6.5"), 360))
        pv = present_value(pmt, float(result.apr) / 1200, 360)
        # APR is rounded up to 4 places, so allow a few dollars
        assert abs(pv - 295000) < 5

    def test_more_fees_higher_apr(self):
        low = solve_apr(Decimal("300000"), Decimal("6.5"), 360, Decimal("2000"))
        high = solve_apr(Decimal("300000"), Decimal("6.5"), 360, Decimal("8000"))
        assert Decimal("6.5") < low.apr < high.apr

    def test_shorter_term_higher_apr(self):
        """Same fees amortized over fewer payments cost more per year."""
        long_term = solve_apr(Decimal("200000"), Decimal("6"), 360, Decimal("4000"))
        short_term = solve_apr(Decimal("200000"), Decimal("6"), 120, Decimal("4000"))
        assert short_term.apr > long_term.apr

    def test_zero_nominal_rate(self):
        result = solve_apr(Decimal("100000"), Decimal("0"), 120, Decimal("1000"))
        assert result.converged
        assert result.apr > Decimal("0")

    def test_single_period(self):
        result = solve_apr(Decimal("1000"), Decimal("50"), 1, Decimal("10"))
        assert result.converged
        assert result.apr > Decimal("50")

    def test_deterministic(self):
        first = solve_apr(Decimal("300000"), Decimal("6.5"), 360, Decimal("5000"))
        second = solve_apr(Decimal("300000"), Decimal("6.5"), 360, Decimal("5000"))
        assert first == second

    def test_require_returns_rate(self):
        result = solve_apr(Decimal("300000"), Decimal("6.5"), 360, Decimal("5000"))
        assert result.require() == result.apr


class TestSmallFees:
    @pytest.mark.parametrize("fees", [Decimal("0.01"), Decimal("1")])
    def test_any_fee_raises_apr_above_nominal(self, fees):
        result = solve_apr(Decimal("300000"), Decimal("6.5"), 360, fees)
        assert result.converged
        assert result.apr > Decimal("6.5")
        assert result.apr > result.nominal_rate

    def test_one_cent_fee_rounds_up_one_step(self):
        result = solve_apr(Decimal("300000"), Decimal("6.5"), 360, Decimal("0.01"))
        assert result.apr == Decimal("6.5001")


class TestNonConvergence:
    def test_iteration_budget_exhausted(self):
        result = solve_apr(
            Decimal("300000"), Decimal("6.5"), 360, Decimal("5000"), max_iterations=1
        )
        assert result.status is APRStatus.DID_NOT_CONVERGE
        assert not result.converged
        # Best estimate is still reported
        assert result.apr > Decimal("6.5")

    def test_require_raises_with_estimate(self):
        result = solve_apr(
            Decimal("300000"), Decimal("6.5"), 360, Decimal("5000"), max_iterations=1
        )
        with pytest.raises(NonConvergenceError) as exc_info:
            result.require()
        assert exc_info.value.best_estimate == result.apr

    def test_non_finite_estimate_raises(self, monkeypatch):
        def diverging(*args, **kwargs):
            return float("nan"), SimpleNamespace(iterations=7, converged=False)

        monkeypatch.setattr(apr_module, "newton", diverging)
        with pytest.raises(NonConvergenceError) as exc_info:
            solve_apr(Decimal("300000"), Decimal("6.5"), 360, Decimal("5000"))
        assert exc_info.value.iterations == 7

    def test_overflow_raises(self, monkeypatch):
        def overflowing(*args, **kwargs):
            raise OverflowError("Numerical result out of range")

        monkeypatch.setattr(apr_module, "newton", overflowing)
        with pytest.raises(NonConvergenceError):
            solve_apr(Decimal("300000"), Decimal("6.5"), 360, Decimal("5000"))

    def test_rate_below_minus_one_raises(self, monkeypatch):
        def wild(*args, **kwargs):
            return -3.0, SimpleNamespace(iterations=2, converged=False)

        monkeypatch.setattr(apr_module, "newton", wild)
        with pytest.raises(NonConvergenceError):
            solve_apr(Decimal("300000"), Decimal("6.5"), 360, Decimal("5000"))


class TestInvalidParameters:
    def test_fees_exceed_principal(self):
        with pytest.raises(InvalidParameterError):
            solve_apr(Decimal("5000"), Decimal("6.5"), 360, Decimal("5000"))

    def test_negative_fees(self):
        with pytest.raises(InvalidParameterError):
            solve_apr(Decimal("300000"), Decimal("6.5"), 360, Decimal("-1"))

    def test_bad_term(self):
        with pytest.raises(InvalidParameterError):
            solve_apr(Decimal("300000"), Decimal("6.5"), 0, Decimal("5000"))
