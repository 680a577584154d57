"""Pydantic schemas for API request/response models."""

from datetime import date
from decimal import Decimal
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from src.config import settings

T = TypeVar("T")


# ---- Request schemas ----

class MortgageRequest(BaseModel):
    loan_amount: Decimal = Field(..., gt=0, le=100_000_000, description="Amount financed")
    interest_rate: Decimal = Field(..., ge=0, le=50, decimal_places=3, description="Annual rate, percent")
    loan_term: int = Field(..., ge=1, le=50, description="Term in years")
    down_payment: Decimal = Field(Decimal("0"), ge=0, le=100_000_000, description="Subtracted from loan_amount")

    # Recurring costs
    property_tax: Decimal = Field(Decimal("0"), ge=0, le=1_000_000, description="Annual")
    insurance: Decimal = Field(Decimal("0"), ge=0, le=100_000, description="Annual")
    pmi: Decimal = Field(Decimal("0"), ge=0, le=10_000, description="Monthly")
    hoa_fees: Decimal = Field(Decimal("0"), ge=0, le=10_000, description="Monthly")

    # APR
    fees: Decimal = Field(Decimal("0"), ge=0, le=100_000, description="Upfront finance fees")

    origination_date: date | None = Field(None, description="Defaults to today")


class ExtraPaymentRequest(MortgageRequest):
    extra_monthly_payment: Decimal = Field(..., gt=0, le=1_000_000)


class ComparisonRequest(BaseModel):
    loans: list[MortgageRequest] = Field(..., max_length=settings.max_comparison_scenarios)


# ---- Response schemas ----

class Envelope(BaseModel, Generic[T]):
    success: bool = True
    data: T
    message: str


class PaymentBreakdownResponse(BaseModel):
    principal_and_interest: Decimal
    property_tax: Decimal
    insurance: Decimal
    pmi: Decimal
    hoa_fees: Decimal
    total_monthly_payment: Decimal


class AmortizationEntryResponse(BaseModel):
    period: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal
    cumulative_principal: Decimal
    cumulative_interest: Decimal


class YearlyAmortizationResponse(BaseModel):
    year: int
    principal: Decimal
    interest: Decimal
    payments: Decimal
    ending_balance: Decimal


class AmortizationResponse(BaseModel):
    monthly_payment: Decimal
    number_of_payments: int
    total_interest: Decimal
    total_principal: Decimal
    total_paid: Decimal
    schedule: list[AmortizationEntryResponse]
    yearly: list[YearlyAmortizationResponse]


class APRResponse(BaseModel):
    apr: Decimal
    interest_rate: Decimal
    difference: Decimal
    status: str
    converged: bool
    iterations: int


class TotalsResponse(BaseModel):
    total_payments: Decimal
    total_interest: Decimal
    total_principal: Decimal
    total_fees: Decimal
    total_cost: Decimal
    total_recurring: Decimal


class LoanSummaryResponse(BaseModel):
    loan_amount: Decimal
    interest_rate: Decimal
    loan_term: int
    fees: Decimal
    monthly_payment: PaymentBreakdownResponse
    apr: APRResponse
    totals: TotalsResponse
    interest_percentage: Decimal
    payoff_date: date
    final_payment_date: date
    number_of_payments: int
    first_payment: AmortizationEntryResponse | None = None


class ScenarioResponse(BaseModel):
    scenario: int
    summary: LoanSummaryResponse


class ComparisonResponse(BaseModel):
    comparisons: list[ScenarioResponse]
    recommended_scenario: int
    recommended_loan: LoanSummaryResponse
    savings_vs_costliest: Decimal


class ExtraPaymentResponse(BaseModel):
    extra_monthly_payment: Decimal
    standard_total_interest: Decimal
    total_interest_with_extra: Decimal
    interest_saved: Decimal
    standard_payments: int
    payments_with_extra: int
    payments_saved: int
    years_saved: Decimal


class LoanWarningResponse(BaseModel):
    field: str
    message: str
    severity: str


class LoanValidationResponse(BaseModel):
    valid: bool = True
    loan_amount: Decimal
    down_payment: Decimal
    financed_amount: Decimal
    loan_to_value: Decimal
    warnings: list[LoanWarningResponse]


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: str
