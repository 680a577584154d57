"""Terminal mortgage report: payment breakdown, APR, totals and amortization.

Usage:
    python -m src.cli --amount 300000 --rate 6.5 --years 30 --fees 5000
    python -m src.cli --amount 300000 --rate 6.5 --years 30 --tax 4800 --insurance 1200 --schedule
    python -m src.cli --amount 300000 --rate 6.5 --years 30 --extra 200
    python -m src.cli --amount 375000 --down 75000 --rate 6.5 --target-balance 150000
"""

import argparse
import logging
import sys
from decimal import Decimal, InvalidOperation

from src.config import settings
from src.engine.amortization import (
    amortization_schedule,
    extra_payment_impact,
    payments_to_reach_balance,
    yearly_summary,
)
from src.engine.errors import MortgageCalculationError
from src.engine.summary import summarize
from src.engine.validation import financed_principal
from src.models.loan import LoanParameters, RecurringCosts
from src.models.results import ExtraPaymentImpact, LoanSummary


# ── Helpers ──────────────────────────────────────────────────────────────────

def _pct(v) -> str:
    """Format a percent value (6.5 -> 6.500%)."""
    return f"{float(v):.3f}%"


def _dollar(v) -> str:
    return f"${float(v):,.2f}"


def _decimal(text: str) -> Decimal:
    try:
        return Decimal(text)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}")


def _header(title: str) -> None:
    print(f"\n{'=' * 64}")
    print(f"  {title}")
    print(f"{'=' * 64}")


# ── Report sections ──────────────────────────────────────────────────────────

def print_payment_breakdown(summary: LoanSummary) -> None:
    b = summary.monthly_payment
    _header("Monthly Payment")
    print(f"  Principal & Interest:  {_dollar(b.principal_and_interest)}")
    if b.recurring_total:
        print(f"  Property Tax:          {_dollar(b.property_tax)}")
        print(f"  Insurance:             {_dollar(b.insurance)}")
        print(f"  PMI:                   {_dollar(b.pmi)}")
        print(f"  HOA:                   {_dollar(b.hoa_fees)}")
    print(f"  Total Monthly:         {_dollar(b.total_monthly_payment)}")


def print_rates(summary: LoanSummary) -> None:
    apr = summary.apr
    _header("Rates")
    print(f"  Interest Rate:   {_pct(apr.nominal_rate)}")
    print(f"  APR:             {_pct(apr.apr)}")
    if not apr.converged:
        print(f"  WARNING: APR did not converge after {apr.iterations} iterations (best estimate shown)")


def print_totals(summary: LoanSummary) -> None:
    t = summary.totals
    _header("Loan Totals")
    print(f"  Total P&I Paid:      {_dollar(t.total_payments)}")
    print(f"  Total Interest:      {_dollar(t.total_interest)} ({summary.interest_percentage}% of principal)")
    print(f"  Fees:                {_dollar(t.total_fees)}")
    print(f"  Total Cost:          {_dollar(t.total_cost)}")
    if t.total_recurring:
        print(f"  Recurring Costs:     {_dollar(t.total_recurring)}")
    print(f"  Payments:            {summary.schedule_length}")
    print(f"  Payoff Date:         {summary.payoff_date:%B %d, %Y}")


def print_yearly_schedule(params: LoanParameters) -> None:
    schedule = amortization_schedule(
        params.principal, params.annual_rate_percent, params.term_months
    )
    _header("Amortization by Year")
    print(f"  {'Year':>4}  {'Principal':>14}  {'Interest':>14}  {'Balance':>14}")
    for y in yearly_summary(schedule):
        print(
            f"  {y.year:>4}  {_dollar(y.principal):>14}  {_dollar(y.interest):>14}"
            f"  {_dollar(y.ending_balance):>14}"
        )


def print_payments_to_balance(summary: LoanSummary, target: Decimal) -> None:
    params = summary.parameters
    count = payments_to_reach_balance(
        params.principal,
        params.annual_rate_percent,
        summary.monthly_payment.principal_and_interest,
        target,
    )
    _header(f"Paying Down to {_dollar(target)}")
    print(f"  Payments Needed:  {count} ({count / 12:.1f} years)")


def print_extra_payment(impact: ExtraPaymentImpact) -> None:
    _header(f"Extra {_dollar(impact.extra_monthly_payment)}/mo Toward Principal")
    print(f"  Interest Saved:   {_dollar(impact.interest_saved)}")
    print(f"  Payments Saved:   {impact.payments_saved} ({impact.payments_saved / 12:.1f} years)")
    print(f"  New Payoff:       {impact.payments_with_extra} payments")


# ── Main ─────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Mortgage payment and amortization report")
    parser.add_argument("--amount", type=_decimal, required=True, help="Loan amount before down payment")
    parser.add_argument("--down", type=_decimal, default=Decimal("0"), help="Down payment")
    parser.add_argument("--rate", type=_decimal, required=True, help="Annual interest rate in percent")
    parser.add_argument("--years", type=int, default=30, help="Loan term in years (default: 30)")
    parser.add_argument("--fees", type=_decimal, default=Decimal("0"), help="Upfront finance fees")
    parser.add_argument("--tax", type=_decimal, default=Decimal("0"), help="Annual property tax")
    parser.add_argument("--insurance", type=_decimal, default=Decimal("0"), help="Annual insurance")
    parser.add_argument("--pmi", type=_decimal, default=Decimal("0"), help="Monthly PMI")
    parser.add_argument("--hoa", type=_decimal, default=Decimal("0"), help="Monthly HOA fees")
    parser.add_argument("--extra", type=_decimal, default=None, help="Extra monthly principal payment")
    parser.add_argument(
        "--target-balance", type=_decimal, default=None,
        help="Report how many payments bring the balance down to this amount",
    )
    parser.add_argument("--schedule", action="store_true", help="Print yearly amortization table")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level)

    try:
        params = LoanParameters.from_years(
            principal=financed_principal(args.amount, args.down),
            annual_rate_percent=args.rate,
            term_years=args.years,
            finance_fees=args.fees,
            recurring_costs=RecurringCosts(
                property_tax=args.tax,
                insurance=args.insurance,
                pmi=args.pmi,
                hoa_fees=args.hoa,
            ),
        )
        summary = summarize(params)
        print_payment_breakdown(summary)
        print_rates(summary)
        print_totals(summary)
        if args.schedule:
            print_yearly_schedule(params)
        if args.extra:
            print_extra_payment(extra_payment_impact(
                params.principal, params.annual_rate_percent, params.term_months, args.extra
            ))
        if args.target_balance is not None:
            print_payments_to_balance(summary, args.target_balance)
    except MortgageCalculationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
