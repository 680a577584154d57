"""Down payment handling and advisory loan checks.

Pure functions. No I/O.
"""

from decimal import Decimal, ROUND_HALF_UP

from src.engine.errors import InvalidParameterError
from src.engine.payment import require_non_negative, require_positive
from src.models.results import LoanValidation, LoanWarning, WarningSeverity

MIN_DOWN_PAYMENT_FRACTION = Decimal("0.20")  # Below this, lenders typically require PMI
HIGH_RATE_PERCENT = Decimal("10")
HIGH_LTV_PERCENT = Decimal("80")


def financed_principal(loan_amount, down_payment=Decimal("0")) -> Decimal:
    """Amount actually borrowed once the down payment is taken off."""
    loan_amount = require_positive(loan_amount, "Loan amount")
    down_payment = require_non_negative(down_payment, "Down payment")
    if down_payment >= loan_amount:
        raise InvalidParameterError("Down payment must be less than the loan amount")
    return loan_amount - down_payment


def loan_to_value(loan_amount, down_payment=Decimal("0")) -> Decimal:
    """Financed share of the loan amount, in percent to 2 places."""
    loan_amount = require_positive(loan_amount, "Loan amount")
    financed = financed_principal(loan_amount, down_payment)
    return (financed / loan_amount * 100).quantize(Decimal("0.01"), ROUND_HALF_UP)


def validate_loan(loan_amount, annual_rate_percent, down_payment=Decimal("0")) -> LoanValidation:
    """Flag inputs that are valid but likely to surprise the borrower.

    Raises InvalidParameterError only for inputs no calculation would accept.
    """
    loan_amount = require_positive(loan_amount, "Loan amount")
    rate = require_non_negative(annual_rate_percent, "Interest rate")
    down_payment = require_non_negative(down_payment, "Down payment")
    financed = financed_principal(loan_amount, down_payment)
    ltv = loan_to_value(loan_amount, down_payment)

    warnings: list[LoanWarning] = []
    if down_payment < loan_amount * MIN_DOWN_PAYMENT_FRACTION:
        warnings.append(LoanWarning(
            field="down_payment",
            message="Down payment less than 20% may require PMI",
            severity=WarningSeverity.WARNING,
        ))
    if rate > HIGH_RATE_PERCENT:
        warnings.append(LoanWarning(
            field="interest_rate",
            message="Interest rate seems unusually high",
            severity=WarningSeverity.WARNING,
        ))
    if ltv > HIGH_LTV_PERCENT:
        warnings.append(LoanWarning(
            field="loan_to_value",
            message=f"High loan-to-value ratio: {ltv.quantize(Decimal('0.1'), ROUND_HALF_UP)}%",
            severity=WarningSeverity.INFO,
        ))

    return LoanValidation(
        loan_amount=loan_amount,
        down_payment=down_payment,
        financed_amount=financed,
        loan_to_value=ltv,
        warnings=warnings,
    )
