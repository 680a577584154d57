"""Loan summary orchestrator: composes payment, amortization and APR into one report.

Pure computation. No I/O. LoanParameters in, LoanSummary out.
"""

import calendar
from collections.abc import Sequence
from datetime import date

from src.engine.amortization import amortization_schedule
from src.engine.apr import solve_apr
from src.engine.errors import InsufficientScenariosError
from src.engine.payment import monthly_payment_breakdown, require_non_negative, round_cents
from src.models.loan import LoanParameters
from src.models.results import LoanComparison, LoanSummary, LoanTotals, ScenarioResult


def add_months(start: date, months: int) -> date:
    """Calendar month arithmetic; the day clamps to the target month's length."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def summarize(params: LoanParameters, today: date | None = None) -> LoanSummary:
    """Run payment, schedule and APR calculations for one loan.

    Totals come from the schedule itself, so final-period corrections are
    reflected. The payoff date counts the full term from origination (or
    today when no origination date is given); final_payment_date counts the
    payments actually scheduled.
    """
    breakdown = monthly_payment_breakdown(params)
    schedule = amortization_schedule(
        params.principal, params.annual_rate_percent, params.term_months
    )
    apr = solve_apr(
        params.principal, params.annual_rate_percent, params.term_months, params.finance_fees
    )

    fees = require_non_negative(params.finance_fees, "Fees")
    principal = schedule.total_principal
    schedule_length = len(schedule.payments)

    totals = LoanTotals(
        total_payments=schedule.total_paid,
        total_interest=schedule.total_interest,
        total_principal=principal,
        total_fees=fees,
        total_cost=principal + schedule.total_interest + fees,
        total_recurring=breakdown.recurring_total * schedule_length,
    )

    start = params.origination_date or today or date.today()

    return LoanSummary(
        parameters=params,
        monthly_payment=breakdown,
        apr=apr,
        totals=totals,
        interest_percentage=round_cents(schedule.total_interest / principal * 100),
        payoff_date=add_months(start, params.term_months),
        final_payment_date=add_months(start, schedule_length),
        schedule_length=schedule_length,
        first_payment=schedule.payments[0] if schedule.payments else None,
    )


def find_best_loan(results: Sequence[ScenarioResult]) -> ScenarioResult:
    """Lowest total cost wins; on a tie the earlier scenario is kept."""
    if not results:
        raise InsufficientScenariosError("No loan scenarios to choose from")
    best = results[0]
    for current in results[1:]:
        if current.summary.totals.total_cost < best.summary.totals.total_cost:
            best = current
    return best


def compare_loans(
    scenarios: Sequence[LoanParameters],
    today: date | None = None,
) -> LoanComparison:
    """Summarize each scenario in input order and pick the cheapest."""
    if len(scenarios) < 2:
        raise InsufficientScenariosError("At least 2 loan scenarios required for comparison")

    results = [
        ScenarioResult(scenario=index, summary=summarize(params, today=today))
        for index, params in enumerate(scenarios, start=1)
    ]
    best = find_best_loan(results)
    costliest = max(r.summary.totals.total_cost for r in results)

    return LoanComparison(
        scenarios=results,
        recommended=best,
        savings_vs_costliest=costliest - best.summary.totals.total_cost,
    )
