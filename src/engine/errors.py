"""Typed failures raised by the mortgage engine.

All are deterministic and input-derived: callers should not retry.
"""

from decimal import Decimal


class MortgageCalculationError(ValueError):
    """Base class for every engine failure."""

    kind = "calculation_error"


class InvalidParameterError(MortgageCalculationError):
    """Non-finite, non-positive or otherwise degenerate loan parameters."""

    kind = "invalid_parameter"


class NegativeAmortizationError(MortgageCalculationError):
    """Scheduled payment does not cover the first period's interest."""

    kind = "negative_amortization"

    def __init__(self, payment: Decimal, interest: Decimal):
        self.payment = payment
        self.interest = interest
        super().__init__(
            f"Payment insufficient to cover interest: payment {payment} <= first-period interest {interest}"
        )


class NonConvergenceError(MortgageCalculationError):
    """APR root-finding produced no usable estimate."""

    kind = "non_convergence"

    def __init__(self, message: str, best_estimate: Decimal | None = None, iterations: int = 0):
        self.best_estimate = best_estimate
        self.iterations = iterations
        super().__init__(message)


class InsufficientScenariosError(MortgageCalculationError):
    """Fewer than two loans supplied for comparison."""

    kind = "insufficient_scenarios"
