"""Amortization schedule computation.

Pure functions: Decimal in, dataclass out. No I/O.

Every per-period figure is rounded to cents before it feeds the next
period, so the schedule is exactly reproducible; the final-period guard
absorbs the accumulated rounding drift.
"""

import math
from decimal import Decimal

from src.engine.errors import InvalidParameterError, NegativeAmortizationError
from src.engine.payment import (
    monthly_payment,
    periodic_rate,
    require_non_negative,
    require_positive,
    require_term,
    round_cents,
)
from src.models.results import (
    AmortizationEntry,
    AmortizationSchedule,
    ExtraPaymentImpact,
    YearlyAmortization,
)


def amortization_schedule(
    principal,
    annual_rate_percent,
    term_months: int,
    extra_monthly_payment=Decimal("0"),
) -> AmortizationSchedule:
    """Generate the full amortization schedule.

    Args:
        principal: Loan amount
        annual_rate_percent: Nominal annual rate in percent (e.g. 6.5)
        term_months: Number of scheduled monthly payments
        extra_monthly_payment: Additional principal paid every month

    Raises:
        InvalidParameterError: degenerate inputs
        NegativeAmortizationError: payment does not cover first-period interest
    """
    principal = require_positive(principal, "Loan amount")
    annual_rate_percent = require_non_negative(annual_rate_percent, "Interest rate")
    term_months = require_term(term_months)
    extra = require_non_negative(extra_monthly_payment, "Extra payment")

    pmt = monthly_payment(principal, annual_rate_percent, term_months)
    r = periodic_rate(annual_rate_percent)
    scheduled = pmt + extra

    # Interest-free loans cannot grow; a payment that rounds to $0.00 is
    # settled by the final-period adjustment.
    first_interest = round_cents(principal * r)
    if r > 0 and scheduled <= first_interest:
        raise NegativeAmortizationError(scheduled, first_interest)

    payments: list[AmortizationEntry] = []
    balance = principal
    total_interest = Decimal("0")
    total_principal = Decimal("0")
    total_paid = Decimal("0")

    for period in range(1, term_months + 1):
        interest = round_cents(balance * r)
        principal_paid = round_cents(scheduled - interest)

        # Final payment adjustment: last period, or rounding drift would overshoot
        if period == term_months or principal_paid > balance:
            principal_paid = balance

        balance = round_cents(balance - principal_paid)
        payment = principal_paid + interest

        total_interest += interest
        total_principal += principal_paid
        total_paid += payment

        payments.append(AmortizationEntry(
            period=period,
            payment=payment,
            principal=principal_paid,
            interest=interest,
            balance=balance,
            cumulative_principal=total_principal,
            cumulative_interest=total_interest,
        ))

        if balance <= 0:
            break

    return AmortizationSchedule(
        payments=payments,
        monthly_payment=pmt,
        total_interest=total_interest,
        total_principal=total_principal,
        total_paid=total_paid,
    )


def yearly_summary(schedule: AmortizationSchedule) -> list[YearlyAmortization]:
    """Aggregate an amortization schedule by loan year (12 periods each)."""
    yearly: list[YearlyAmortization] = []
    year_principal = Decimal("0")
    year_interest = Decimal("0")
    year_payments = Decimal("0")

    for p in schedule.payments:
        year_principal += p.principal
        year_interest += p.interest
        year_payments += p.payment

        if p.period % 12 == 0 or p.period == len(schedule.payments):
            yearly.append(YearlyAmortization(
                year=(p.period - 1) // 12 + 1,
                principal=year_principal,
                interest=year_interest,
                payments=year_payments,
                ending_balance=p.balance,
            ))
            year_principal = Decimal("0")
            year_interest = Decimal("0")
            year_payments = Decimal("0")

    return yearly


def extra_payment_impact(
    principal,
    annual_rate_percent,
    term_months: int,
    extra_monthly_payment,
) -> ExtraPaymentImpact:
    """Interest saved and payments avoided by paying extra principal monthly."""
    standard = amortization_schedule(principal, annual_rate_percent, term_months)
    accelerated = amortization_schedule(
        principal, annual_rate_percent, term_months, extra_monthly_payment
    )

    return ExtraPaymentImpact(
        extra_monthly_payment=require_non_negative(extra_monthly_payment, "Extra payment"),
        standard_total_interest=standard.total_interest,
        total_interest_with_extra=accelerated.total_interest,
        interest_saved=standard.total_interest - accelerated.total_interest,
        standard_payments=len(standard.payments),
        payments_with_extra=len(accelerated.payments),
    )


def payments_to_reach_balance(
    principal,
    annual_rate_percent,
    payment,
    target_balance=Decimal("0"),
) -> int:
    """Number of level payments until the balance first falls to target_balance.

    Closed form n = -ln(1 - (P - B)r / (M - Br)) / ln(1 + r); zero rate is
    straight-line.
    """
    principal = require_positive(principal, "Loan amount")
    rate = require_non_negative(annual_rate_percent, "Interest rate")
    payment = require_positive(payment, "Monthly payment")
    target = require_non_negative(target_balance, "Target balance")
    if target >= principal:
        return 0

    if rate == 0:
        return math.ceil((principal - target) / payment)

    interest = round_cents(principal * periodic_rate(rate))
    if payment <= interest:
        raise NegativeAmortizationError(payment, interest)

    r = float(periodic_rate(rate))
    p, m, b = float(principal), float(payment), float(target)
    ratio = 1 - (p - b) * r / (m - b * r)
    if ratio <= 0:
        raise InvalidParameterError("Target balance is unreachable with this payment")
    # Guard against float noise at exact period boundaries
    return math.ceil(-math.log(ratio) / math.log(1 + r) - 1e-9)
