"""Fixed-payment calculation and annuity present value.

Pure functions: Decimal in, Decimal out. No I/O.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation, Overflow

from src.engine.errors import InvalidParameterError
from src.models.loan import LoanParameters
from src.models.results import MonthlyPaymentBreakdown

TWO_PLACES = Decimal("0.01")
MONTHS_PER_YEAR = 12


def round_cents(value: Decimal) -> Decimal:
    """Quantize to cents, half-up (0.005 -> 0.01)."""
    return value.quantize(TWO_PLACES, ROUND_HALF_UP)


def to_decimal(value, field_name: str) -> Decimal:
    """Coerce a numeric input to a finite Decimal."""
    if isinstance(value, bool):
        raise InvalidParameterError(f"{field_name} must be a valid number")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidParameterError(f"{field_name} must be a valid number")
    if not result.is_finite():
        raise InvalidParameterError(f"{field_name} must be a finite number")
    return result


def require_positive(value, field_name: str) -> Decimal:
    result = to_decimal(value, field_name)
    if result <= 0:
        raise InvalidParameterError(f"{field_name} must be greater than 0")
    return result


def require_non_negative(value, field_name: str) -> Decimal:
    result = to_decimal(value, field_name)
    if result < 0:
        raise InvalidParameterError(f"{field_name} cannot be negative")
    return result


def require_term(term_months) -> int:
    if isinstance(term_months, bool) or not isinstance(term_months, int):
        raise InvalidParameterError("Loan term must be a whole number of months")
    if term_months <= 0:
        raise InvalidParameterError("Loan term must be at least 1 month")
    return term_months


def periodic_rate(annual_rate_percent: Decimal) -> Decimal:
    """Nominal annual percent -> monthly decimal rate (6 -> 0.005)."""
    return annual_rate_percent / 100 / MONTHS_PER_YEAR


def annuity_payment(principal, annual_rate_percent, term_months: int) -> Decimal:
    """Level payment that exactly amortizes principal, before cent rounding.

    Raises InvalidParameterError for degenerate inputs, including a rate/term
    combination whose compounding factor overflows.
    """
    principal = require_positive(principal, "Loan amount")
    annual_rate_percent = require_non_negative(annual_rate_percent, "Interest rate")
    n = require_term(term_months)

    r = periodic_rate(annual_rate_percent)
    if r == 0:
        return principal / n

    # M = P * [r(1+r)^n] / [(1+r)^n - 1]
    try:
        factor = (1 + r) ** n
    except Overflow:
        raise InvalidParameterError("Interest rate and term overflow the payment formula")
    if not factor.is_finite():
        raise InvalidParameterError("Interest rate and term overflow the payment formula")
    if factor == 1:
        # Rate below working precision: indistinguishable from interest-free
        return principal / n

    return principal * (r * factor) / (factor - 1)


def monthly_payment(principal, annual_rate_percent, term_months: int) -> Decimal:
    """Calculate the fixed monthly principal-and-interest payment, in cents."""
    return round_cents(annuity_payment(principal, annual_rate_percent, term_months))


def present_value(payment: float, rate: float, periods: int) -> float:
    """Present value of a level payment stream at a periodic rate."""
    if rate == 0:
        return payment * periods
    return payment * (1 - (1 + rate) ** -periods) / rate


def present_value_derivative(payment: float, rate: float, periods: int) -> float:
    """d(present_value)/d(rate), closed form."""
    if rate == 0:
        # Limit as rate -> 0
        return -payment * periods * (periods + 1) / 2
    discount = (1 + rate) ** -periods
    return payment * (
        periods * (1 + rate) ** (-periods - 1) / rate
        - (1 - discount) / rate ** 2
    )


def monthly_payment_breakdown(params: LoanParameters) -> MonthlyPaymentBreakdown:
    """P&I plus the monthly share of taxes, insurance, PMI and HOA."""
    pi = monthly_payment(params.principal, params.annual_rate_percent, params.term_months)
    costs = params.recurring_costs

    return MonthlyPaymentBreakdown(
        principal_and_interest=pi,
        property_tax=round_cents(require_non_negative(costs.property_tax, "Property tax") / MONTHS_PER_YEAR),
        insurance=round_cents(require_non_negative(costs.insurance, "Insurance") / MONTHS_PER_YEAR),
        pmi=round_cents(require_non_negative(costs.pmi, "PMI")),
        hoa_fees=round_cents(require_non_negative(costs.hoa_fees, "HOA fees")),
    )
