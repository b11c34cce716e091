"""Fixed-payment (Price table) amortization calculator.

Pure Python, Decimal arithmetic. Implements:
- Monthly payment: P * i * (1 + i)^n / ((1 + i)^n - 1), with i = annual rate / 12
- Total payback: rounded monthly payment * n
- Full installment schedule (interest, amortization, remaining balance)

Rounding: ROUND_HALF_UP to cents at every money boundary. The total is
computed from the already rounded payment, so
total == round(monthly_rounded * n, 2) for every input.

Degenerate inputs (principal, rate or term <= 0, or non-numeric) give the
zero result. Nothing here raises.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

from simulador.schemas.financing import AmortizationResult, Installment

_ZERO = Decimal("0")
_PRECISION = 34  # enough digits for (1 + i)^360 without losing cents


def _to_real(value: Decimal) -> Decimal:
    """Round to 2 decimal places, half away from zero."""
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _as_decimal(value: Decimal | float | int | str) -> Decimal | None:
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None
    return d if d.is_finite() else None


def _as_term(value: int | float | str | Decimal) -> int | None:
    d = _as_decimal(value)
    if d is None or d != d.to_integral_value():
        return None
    return int(d)


def _parse_inputs(
    principal: Decimal | float | int | str,
    annual_rate: Decimal | float | int | str,
    term_months: int | float | str | Decimal,
) -> tuple[Decimal, Decimal, int] | None:
    """Return (principal, rate, term) or None when any of them is degenerate."""
    p = _as_decimal(principal)
    rate = _as_decimal(annual_rate)
    n = _as_term(term_months)
    if p is None or rate is None or n is None or p <= 0 or rate <= 0 or n <= 0:
        return None
    return p, rate, n


def _raw_monthly_payment(principal: Decimal, monthly_rate: Decimal, term_months: int) -> Decimal:
    factor = (1 + monthly_rate) ** term_months
    return principal * monthly_rate * factor / (factor - 1)


def compute_amortization(
    principal: Decimal | float | int | str,
    annual_rate: Decimal | float | int | str,
    term_months: int | float | str | Decimal,
) -> AmortizationResult:
    """Compute the fixed monthly payment and the total amount paid.

    Args:
        principal: Financed amount in BRL.
        annual_rate: Nominal annual rate as a fraction (0.12 for 12% a.a.).
        term_months: Number of monthly installments.

    Returns:
        AmortizationResult; both fields are 0.00 for degenerate inputs.
    """
    parsed = _parse_inputs(principal, annual_rate, term_months)
    if parsed is None:
        return AmortizationResult(monthly_payment=_to_real(_ZERO), total_amount=_to_real(_ZERO))
    p, rate, n = parsed

    try:
        with localcontext() as ctx:
            ctx.prec = _PRECISION
            monthly = _to_real(_raw_monthly_payment(p, rate / 12, n))
            total = _to_real(monthly * n)
    except ArithmeticError:
        # Overflow / precision exhaustion on absurd magnitudes
        return AmortizationResult(monthly_payment=_to_real(_ZERO), total_amount=_to_real(_ZERO))

    return AmortizationResult(monthly_payment=monthly, total_amount=total)


def amortization_schedule(
    principal: Decimal | float | int | str,
    annual_rate: Decimal | float | int | str,
    term_months: int | float | str | Decimal,
) -> list[Installment]:
    """Build the Price table month by month.

    Interest of each month is the rounded balance times the monthly rate.
    The last installment settles whatever balance the per-month rounding
    left, so the final balance is exactly 0.00.

    Returns:
        One Installment per month; an empty list for degenerate inputs.
    """
    parsed = _parse_inputs(principal, annual_rate, term_months)
    if parsed is None:
        return []
    p, rate, n = parsed
    result = compute_amortization(p, rate, n)
    if result.monthly_payment <= 0:
        return []

    schedule: list[Installment] = []
    balance = _to_real(p)
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        monthly_rate = rate / 12
        for number in range(1, n + 1):
            interest = _to_real(balance * monthly_rate)
            if number == n:
                amortization = balance
                payment = _to_real(balance + interest)
            else:
                payment = result.monthly_payment
                amortization = _to_real(payment - interest)
            balance = _to_real(balance - amortization)
            schedule.append(Installment(
                number=number,
                payment=payment,
                interest=interest,
                amortization=amortization,
                balance=balance,
            ))
    return schedule
