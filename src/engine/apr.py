"""APR computation using scipy's Newton-Raphson solver.

Pure functions. No I/O.
"""

import logging
import math
from decimal import Decimal, ROUND_CEILING

from scipy.optimize import newton

from src.config import settings
from src.engine.errors import InvalidParameterError, NonConvergenceError
from src.engine.payment import (
    MONTHS_PER_YEAR,
    annuity_payment,
    periodic_rate,
    present_value,
    present_value_derivative,
    require_non_negative,
    require_positive,
    require_term,
)
from src.models.results import APRResult, APRStatus

logger = logging.getLogger(__name__)

FOUR_PLACES = Decimal("0.0001")
RATE_STEP_TOLERANCE = 1e-14  # Monthly rate; stops scipy once steps vanish


def solve_apr(
    principal,
    annual_rate_percent,
    term_months: int,
    finance_fees=Decimal("0"),
    tolerance: float | None = None,
    max_iterations: int | None = None,
) -> APRResult:
    """Solve for the APR implied by upfront finance fees.

    Finds the monthly rate x at which the present value of the level P&I
    payment stream equals principal - fees. Convergence means
    |PV(x) - (principal - fees)| < tolerance dollars.

    With no fees the nominal rate is returned unchanged. With fees the
    result is rounded up to 4 places, so it always exceeds the nominal rate.
    """
    principal = require_positive(principal, "Loan amount")
    nominal = require_non_negative(annual_rate_percent, "Interest rate")
    n = require_term(term_months)
    fees = require_non_negative(finance_fees, "Fees")

    if fees == 0:
        return APRResult(apr=nominal, nominal_rate=nominal, status=APRStatus.NO_FEES)
    if fees >= principal:
        raise InvalidParameterError("Fees must be less than the loan amount")

    tolerance = settings.apr_tolerance if tolerance is None else tolerance
    max_iterations = settings.apr_max_iterations if max_iterations is None else max_iterations

    # Unrounded payment: PV at the nominal rate is exactly the principal
    pmt = float(annuity_payment(principal, nominal, n))
    net_proceeds = float(principal - fees)

    def gap(x: float) -> float:
        return present_value(pmt, x, n) - net_proceeds

    def gap_prime(x: float) -> float:
        return present_value_derivative(pmt, x, n)

    x0 = float(periodic_rate(nominal))
    try:
        root, info = newton(
            gap,
            x0,
            fprime=gap_prime,
            tol=RATE_STEP_TOLERANCE,
            maxiter=max_iterations,
            full_output=True,
            disp=False,
        )
    except (OverflowError, ZeroDivisionError) as e:
        raise NonConvergenceError(f"APR iteration diverged: {e}")

    root = float(root)
    if not math.isfinite(root) or root <= -1:
        raise NonConvergenceError(
            f"APR iteration diverged after {info.iterations} iterations",
            iterations=info.iterations,
        )

    residual = abs(gap(root))
    if not math.isfinite(residual):
        raise NonConvergenceError(
            f"APR iteration diverged after {info.iterations} iterations",
            iterations=info.iterations,
        )

    # Round up so any positive fee yields an APR strictly above nominal
    apr = Decimal(str(root * MONTHS_PER_YEAR * 100)).quantize(FOUR_PLACES, ROUND_CEILING)

    if residual < tolerance:
        logger.debug("APR converged to %s%% in %d iterations", apr, info.iterations)
        return APRResult(
            apr=apr, nominal_rate=nominal, status=APRStatus.CONVERGED, iterations=info.iterations
        )

    logger.warning(
        "APR did not converge after %d iterations (estimate %s%%, gap $%.6f)",
        info.iterations, apr, residual,
    )
    return APRResult(
        apr=apr, nominal_rate=nominal, status=APRStatus.DID_NOT_CONVERGE, iterations=info.iterations
    )
