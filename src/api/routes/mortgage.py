"""Mortgage calculation routes."""

import logging
from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends

from src.api.deps import get_today
from src.api.schemas import (
    AmortizationEntryResponse,
    AmortizationResponse,
    APRResponse,
    ComparisonRequest,
    ComparisonResponse,
    Envelope,
    ExtraPaymentRequest,
    ExtraPaymentResponse,
    LoanSummaryResponse,
    LoanValidationResponse,
    LoanWarningResponse,
    MortgageRequest,
    PaymentBreakdownResponse,
    ScenarioResponse,
    TotalsResponse,
    YearlyAmortizationResponse,
)
from src.engine.amortization import amortization_schedule, extra_payment_impact, yearly_summary
from src.engine.apr import solve_apr
from src.engine.payment import monthly_payment_breakdown
from src.engine.summary import compare_loans, summarize
from src.engine.validation import financed_principal, validate_loan
from src.models.loan import LoanParameters, RecurringCosts
from src.models.results import (
    AmortizationEntry,
    APRResult,
    LoanSummary,
    MonthlyPaymentBreakdown,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/mortgage", tags=["mortgage"])


def _to_params(req: MortgageRequest) -> LoanParameters:
    return LoanParameters.from_years(
        principal=financed_principal(req.loan_amount, req.down_payment),
        annual_rate_percent=req.interest_rate,
        term_years=req.loan_term,
        finance_fees=req.fees,
        recurring_costs=RecurringCosts(
            property_tax=req.property_tax,
            insurance=req.insurance,
            pmi=req.pmi,
            hoa_fees=req.hoa_fees,
        ),
        origination_date=req.origination_date,
    )


def _breakdown_response(b: MonthlyPaymentBreakdown) -> PaymentBreakdownResponse:
    return PaymentBreakdownResponse(
        principal_and_interest=b.principal_and_interest,
        property_tax=b.property_tax,
        insurance=b.insurance,
        pmi=b.pmi,
        hoa_fees=b.hoa_fees,
        total_monthly_payment=b.total_monthly_payment,
    )


def _entry_response(e: AmortizationEntry) -> AmortizationEntryResponse:
    return AmortizationEntryResponse(
        period=e.period,
        payment=e.payment,
        principal=e.principal,
        interest=e.interest,
        balance=e.balance,
        cumulative_principal=e.cumulative_principal,
        cumulative_interest=e.cumulative_interest,
    )


def _apr_response(a: APRResult) -> APRResponse:
    return APRResponse(
        apr=a.apr,
        interest_rate=a.nominal_rate,
        difference=a.spread,
        status=a.status.value,
        converged=a.converged,
        iterations=a.iterations,
    )


def _summary_response(s: LoanSummary) -> LoanSummaryResponse:
    """Convert engine LoanSummary to API response."""
    t = s.totals
    return LoanSummaryResponse(
        loan_amount=s.parameters.principal,
        interest_rate=s.parameters.annual_rate_percent,
        loan_term=s.parameters.term_years,
        fees=t.total_fees,
        monthly_payment=_breakdown_response(s.monthly_payment),
        apr=_apr_response(s.apr),
        totals=TotalsResponse(
            total_payments=t.total_payments,
            total_interest=t.total_interest,
            total_principal=t.total_principal,
            total_fees=t.total_fees,
            total_cost=t.total_cost,
            total_recurring=t.total_recurring,
        ),
        interest_percentage=s.interest_percentage,
        payoff_date=s.payoff_date,
        final_payment_date=s.final_payment_date,
        number_of_payments=s.schedule_length,
        first_payment=_entry_response(s.first_payment) if s.first_payment else None,
    )


@router.post("/calculate", response_model=Envelope[PaymentBreakdownResponse])
def calculate_payment(req: MortgageRequest):
    """Monthly P&I plus taxes, insurance, PMI and HOA."""
    breakdown = monthly_payment_breakdown(_to_params(req))
    return Envelope[PaymentBreakdownResponse](
        data=_breakdown_response(breakdown),
        message="Monthly payment calculated successfully",
    )


@router.post("/amortization", response_model=Envelope[AmortizationResponse])
def generate_amortization(req: MortgageRequest):
    """Full month-by-month schedule with yearly roll-up."""
    params = _to_params(req)
    schedule = amortization_schedule(
        params.principal, params.annual_rate_percent, params.term_months
    )
    return Envelope[AmortizationResponse](
        data=AmortizationResponse(
            monthly_payment=schedule.monthly_payment,
            number_of_payments=len(schedule.payments),
            total_interest=schedule.total_interest,
            total_principal=schedule.total_principal,
            total_paid=schedule.total_paid,
            schedule=[_entry_response(e) for e in schedule.payments],
            yearly=[
                YearlyAmortizationResponse(
                    year=y.year,
                    principal=y.principal,
                    interest=y.interest,
                    payments=y.payments,
                    ending_balance=y.ending_balance,
                )
                for y in yearly_summary(schedule)
            ],
        ),
        message="Amortization schedule generated successfully",
    )


@router.post("/apr", response_model=Envelope[APRResponse])
def calculate_apr(req: MortgageRequest):
    """APR with upfront fees folded in. Unconverged estimates are flagged, not hidden."""
    params = _to_params(req)
    result = solve_apr(
        params.principal, params.annual_rate_percent, params.term_months, params.finance_fees
    )
    if not result.converged:
        logger.warning("Returning unconverged APR estimate %s for %s", result.apr, req)
    return Envelope[APRResponse](
        data=_apr_response(result),
        message="APR calculated successfully",
    )


@router.post("/summary", response_model=Envelope[LoanSummaryResponse])
def get_loan_summary(req: MortgageRequest, today: date = Depends(get_today)):
    """Primary endpoint: payment, totals, APR and payoff dates in one call."""
    summary = summarize(_to_params(req), today=today)
    return Envelope[LoanSummaryResponse](
        data=_summary_response(summary),
        message="Loan summary calculated successfully",
    )


@router.post("/compare", response_model=Envelope[ComparisonResponse])
def compare(req: ComparisonRequest, today: date = Depends(get_today)):
    """Compare loan scenarios and recommend the lowest total cost."""
    comparison = compare_loans([_to_params(loan) for loan in req.loans], today=today)
    best = comparison.recommended
    return Envelope[ComparisonResponse](
        data=ComparisonResponse(
            comparisons=[
                ScenarioResponse(scenario=s.scenario, summary=_summary_response(s.summary))
                for s in comparison.scenarios
            ],
            recommended_scenario=best.scenario,
            recommended_loan=_summary_response(best.summary),
            savings_vs_costliest=comparison.savings_vs_costliest,
        ),
        message="Loan comparison completed successfully",
    )


@router.post("/extra-payment", response_model=Envelope[ExtraPaymentResponse])
def extra_payment(req: ExtraPaymentRequest):
    """Interest and time saved by paying extra principal each month."""
    params = _to_params(req)
    impact = extra_payment_impact(
        params.principal,
        params.annual_rate_percent,
        params.term_months,
        req.extra_monthly_payment,
    )
    return Envelope[ExtraPaymentResponse](
        data=ExtraPaymentResponse(
            extra_monthly_payment=impact.extra_monthly_payment,
            standard_total_interest=impact.standard_total_interest,
            total_interest_with_extra=impact.total_interest_with_extra,
            interest_saved=impact.interest_saved,
            standard_payments=impact.standard_payments,
            payments_with_extra=impact.payments_with_extra,
            payments_saved=impact.payments_saved,
            years_saved=(Decimal(impact.payments_saved) / 12).quantize(Decimal("0.1")),
        ),
        message="Extra payment impact calculated successfully",
    )


@router.post("/validate", response_model=Envelope[LoanValidationResponse])
def validate(req: MortgageRequest):
    """Advisory checks: PMI likelihood, unusual rates and loan-to-value."""
    result = validate_loan(req.loan_amount, req.interest_rate, req.down_payment)
    return Envelope[LoanValidationResponse](
        data=LoanValidationResponse(
            loan_amount=result.loan_amount,
            down_payment=result.down_payment,
            financed_amount=result.financed_amount,
            loan_to_value=result.loan_to_value,
            warnings=[
                LoanWarningResponse(field=w.field, message=w.message, severity=w.severity.value)
                for w in result.warnings
            ],
        ),
        message="Loan parameters validated successfully",
    )
