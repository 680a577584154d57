from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from src.engine.errors import NonConvergenceError
from src.models.loan import LoanParameters


@dataclass(frozen=True)
class AmortizationEntry:
    period: int  # 1-based
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal  # Ending balance after this payment
    cumulative_principal: Decimal
    cumulative_interest: Decimal


@dataclass(frozen=True)
class AmortizationSchedule:
    payments: list[AmortizationEntry]
    monthly_payment: Decimal
    total_interest: Decimal
    total_principal: Decimal
    total_paid: Decimal


@dataclass(frozen=True)
class YearlyAmortization:
    year: int
    principal: Decimal
    interest: Decimal
    payments: Decimal
    ending_balance: Decimal


@dataclass(frozen=True)
class ExtraPaymentImpact:
    extra_monthly_payment: Decimal
    standard_total_interest: Decimal
    total_interest_with_extra: Decimal
    interest_saved: Decimal
    standard_payments: int
    payments_with_extra: int

    @property
    def payments_saved(self) -> int:
        return self.standard_payments - self.payments_with_extra


@dataclass(frozen=True)
class MonthlyPaymentBreakdown:
    principal_and_interest: Decimal
    property_tax: Decimal = Decimal("0")
    insurance: Decimal = Decimal("0")
    pmi: Decimal = Decimal("0")
    hoa_fees: Decimal = Decimal("0")

    @property
    def recurring_total(self) -> Decimal:
        return self.property_tax + self.insurance + self.pmi + self.hoa_fees

    @property
    def total_monthly_payment(self) -> Decimal:
        return self.principal_and_interest + self.recurring_total


class APRStatus(Enum):
    NO_FEES = "no_fees"
    CONVERGED = "converged"
    DID_NOT_CONVERGE = "did_not_converge"


@dataclass(frozen=True)
class APRResult:
    """Outcome of the APR solve.

    DID_NOT_CONVERGE still carries the best estimate; use require() when an
    unconverged value is not acceptable.
    """
    apr: Decimal  # Percent
    nominal_rate: Decimal  # Percent
    status: APRStatus
    iterations: int = 0

    @property
    def converged(self) -> bool:
        return self.status is not APRStatus.DID_NOT_CONVERGE

    @property
    def spread(self) -> Decimal:
        return self.apr - self.nominal_rate

    def require(self) -> Decimal:
        if not self.converged:
            raise NonConvergenceError(
                f"APR did not converge after {self.iterations} iterations",
                best_estimate=self.apr,
                iterations=self.iterations,
            )
        return self.apr


@dataclass(frozen=True)
class LoanTotals:
    total_payments: Decimal  # Sum of scheduled P&I payments
    total_interest: Decimal
    total_principal: Decimal
    total_fees: Decimal
    total_cost: Decimal  # principal + interest + fees
    total_recurring: Decimal


@dataclass(frozen=True)
class LoanSummary:
    parameters: LoanParameters
    monthly_payment: MonthlyPaymentBreakdown
    apr: APRResult
    totals: LoanTotals
    interest_percentage: Decimal
    payoff_date: date  # Origination + full term
    final_payment_date: date  # Origination + scheduled payment count
    schedule_length: int
    first_payment: AmortizationEntry | None = None


@dataclass(frozen=True)
class ScenarioResult:
    scenario: int  # 1-based input position
    summary: LoanSummary


@dataclass(frozen=True)
class LoanComparison:
    scenarios: list[ScenarioResult] = field(default_factory=list)
    recommended: ScenarioResult | None = None
    savings_vs_costliest: Decimal = Decimal("0")


class WarningSeverity(Enum):
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class LoanWarning:
    field: str  # Request field the advice refers to
    message: str
    severity: WarningSeverity


@dataclass(frozen=True)
class LoanValidation:
    """Advisory checks on otherwise valid loan inputs. Never blocks a calculation."""
    loan_amount: Decimal
    down_payment: Decimal
    financed_amount: Decimal
    loan_to_value: Decimal  # Percent, 2 places
    warnings: list[LoanWarning] = field(default_factory=list)
