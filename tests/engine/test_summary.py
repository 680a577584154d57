from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from src.engine.amortization import amortization_schedule
from src.engine.errors import InsufficientScenariosError, NegativeAmortizationError
from src.engine.summary import add_months, compare_loans, find_best_loan, summarize
from src.models.loan import LoanParameters, RecurringCosts
from src.models.results import APRStatus


class TestAddMonths:
    def test_whole_years(self):
        assert add_months(date(2024, 1, 15), 360) == date(2054, 1, 15)

    def test_clamps_to_month_end(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)

    def test_crosses_year(self):
        assert add_months(date(2024, 11, 30), 3) == date(2025, 2, 28)

    def test_zero(self):
        assert add_months(date(2024, 5, 5), 0) == date(2024, 5, 5)


class TestSummarize:
    def test_totals_from_schedule(self, standard_loan):
        summary = summarize(standard_loan)
        schedule = amortization_schedule(Decimal("300000"), Decimal("4.5"), 360)
        assert summary.totals.total_interest == schedule.total_interest
        assert summary.totals.total_payments == sum(p.payment for p in schedule.payments)

    def test_total_payments_is_principal_plus_interest(self, standard_loan):
        t = summarize(standard_loan).totals
        assert t.total_payments == t.total_principal + t.total_interest
        assert t.total_principal == Decimal("300000")

    def test_total_cost_includes_fees(self, fee_loan):
        t = summarize(fee_loan).totals
        assert t.total_fees == Decimal("5000")
        assert t.total_cost == Decimal("300000") + t.total_interest + Decimal("5000")

    def test_apr_included(self, fee_loan, standard_loan):
        assert summarize(fee_loan).apr.status is APRStatus.CONVERGED
        assert summarize(fee_loan).apr.apr > Decimal("6.5")
        assert summarize(standard_loan).apr.apr == Decimal("4.5")

    def test_interest_percentage(self, standard_loan):
        summary = summarize(standard_loan)
        expected = (summary.totals.total_interest / Decimal("300000") * 100).quantize(Decimal("0.01"))
        assert summary.interest_percentage == expected
        assert Decimal("80") < summary.interest_percentage < Decimal("85")

    def test_payoff_date_from_origination(self, standard_loan):
        summary = summarize(standard_loan, today=date(2030, 6, 1))
        assert summary.payoff_date == date(2054, 1, 15)
        assert summary.final_payment_date == date(2054, 1, 15)

    def test_payoff_date_defaults_to_today(self, standard_loan):
        params = replace(standard_loan, origination_date=None)
        summary = summarize(params, today=date(2026, 10, 18))
        assert summary.payoff_date == date(2056, 10, 18)

    def test_first_payment(self, standard_loan):
        first = summarize(standard_loan).first_payment
        assert first.period == 1
        assert first.interest == Decimal("1125.00")
        assert first.payment == Decimal("1520.06")

    def test_schedule_length(self, zero_rate_loan):
        summary = summarize(zero_rate_loan)
        assert summary.schedule_length == 120
        assert summary.totals.total_interest == Decimal("0")
        assert summary.interest_percentage == Decimal("0.00")

    def test_recurring_costs(self, piti_loan):
        summary = summarize(piti_loan)
        assert summary.monthly_payment.recurring_total == Decimal("575.00")
        assert summary.totals.total_recurring == Decimal("575.00") * 360
        # Recurring costs never touch the amortized totals
        assert summary.totals.total_cost == Decimal("300000") + summary.totals.total_interest

    def test_errors_propagate(self):
        params = LoanParameters(
            principal=Decimal("0.01"), annual_rate_percent=Decimal("12"), term_months=360
        )
        with pytest.raises(NegativeAmortizationError):
            summarize(params)

    def test_from_years(self):
        params = LoanParameters.from_years(Decimal("300000"), Decimal("4.5"), 30)
        assert params.term_months == 360
        assert params.term_years == 30


class TestCompareLoans:
    def test_requires_two_scenarios(self, standard_loan):
        with pytest.raises(InsufficientScenariosError):
            compare_loans([standard_loan])

    def test_empty(self):
        with pytest.raises(InsufficientScenariosError):
            compare_loans([])

    def test_picks_lowest_total_cost(self, standard_loan):
        fifteen_year = replace(standard_loan, term_months=180)
        comparison = compare_loans([standard_loan, fifteen_year])
        assert comparison.recommended.scenario == 2
        assert comparison.savings_vs_costliest > 0

    def test_scenarios_keep_input_order(self, standard_loan, fee_loan, zero_rate_loan):
        comparison = compare_loans([fee_loan, standard_loan, zero_rate_loan])
        assert [s.scenario for s in comparison.scenarios] == [1, 2, 3]
        assert comparison.scenarios[0].summary.parameters == fee_loan
        assert comparison.recommended.scenario == 3

    def test_fees_break_otherwise_equal_loans(self, standard_loan):
        with_fees = replace(standard_loan, finance_fees=Decimal("2500"))
        comparison = compare_loans([with_fees, standard_loan])
        assert comparison.recommended.scenario == 2
        assert comparison.savings_vs_costliest == Decimal("2500")

    def test_tie_keeps_first(self, standard_loan):
        """Equal total cost: the earlier scenario wins regardless of other fields."""
        with_hoa = replace(standard_loan, recurring_costs=RecurringCosts(hoa_fees=Decimal("300")))
        comparison = compare_loans([with_hoa, standard_loan])
        costs = [s.summary.totals.total_cost for s in comparison.scenarios]
        assert costs[0] == costs[1]
        assert comparison.recommended.scenario == 1
        assert comparison.savings_vs_costliest == Decimal("0")

        reversed_comparison = compare_loans([standard_loan, with_hoa])
        assert reversed_comparison.recommended.scenario == 1
        assert reversed_comparison.recommended.summary.parameters == standard_loan

    def test_tie_across_many(self, standard_loan):
        comparison = compare_loans([standard_loan] * 4)
        assert comparison.recommended.scenario == 1

    def test_find_best_loan_strictly_lower(self, standard_loan):
        cheaper = replace(standard_loan, annual_rate_percent=Decimal("4.25"))
        results = compare_loans([standard_loan, cheaper, cheaper]).scenarios
        assert find_best_loan(results).scenario == 2

    def test_find_best_loan_empty(self):
        with pytest.raises(InsufficientScenariosError):
            find_best_loan([])
