from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class RecurringCosts:
    """Non-amortized add-ons to the monthly housing payment."""
    property_tax: Decimal = Decimal("0")  # Annual
    insurance: Decimal = Decimal("0")  # Annual
    pmi: Decimal = Decimal("0")  # Monthly
    hoa_fees: Decimal = Decimal("0")  # Monthly


@dataclass(frozen=True)
class LoanParameters:
    principal: Decimal  # Amount financed, down payment already removed
    annual_rate_percent: Decimal  # 6.5 means 6.5%
    term_months: int
    finance_fees: Decimal = Decimal("0")  # Upfront, APR only
    recurring_costs: RecurringCosts = field(default_factory=RecurringCosts)
    origination_date: date | None = None

    @classmethod
    def from_years(
        cls,
        principal: Decimal,
        annual_rate_percent: Decimal,
        term_years: int,
        **kwargs,
    ) -> "LoanParameters":
        return cls(
            principal=principal,
            annual_rate_percent=annual_rate_percent,
            term_months=term_years * 12,
            **kwargs,
        )

    @property
    def term_years(self) -> int:
        return self.term_months // 12
