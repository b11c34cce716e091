"""Financial step validation: down payment rule and term enumeration.

The minimum down payment is a gate on the wizard step, not a precondition of
the amortization calculator, which stays agnostic of it.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from simulador.config import FinancingRules
from simulador.formatters import format_currency, format_percentage
from simulador.schemas.financing import FinancialStepValidation, FinancingRecord

MESSAGES: dict[str, str] = {
    "financed_amount": "Informe o valor a ser financiado",
    "term_months": "Escolha um prazo entre as opções disponíveis",
}


def minimum_down_payment(financed_amount: Decimal, rules: FinancingRules) -> Decimal:
    """Smallest acceptable down payment for a financed amount, in cents."""
    if financed_amount <= 0:
        return Decimal("0.00")
    minimum = financed_amount * rules.min_down_payment_ratio
    return minimum.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def is_valid_down_payment(
    financed_amount: Decimal,
    down_payment: Decimal,
    rules: FinancingRules,
) -> bool:
    """Down payment must be non-negative and, once there is a financed
    amount, at least `min_down_payment_ratio` of it."""
    if down_payment < 0:
        return False
    if financed_amount <= 0:
        return True
    return down_payment >= minimum_down_payment(financed_amount, rules)


def validate_financial_step(record: FinancingRecord, rules: FinancingRules) -> FinancialStepValidation:
    """Flags for the financial step: amount > 0, down payment rule, allowed term."""
    minimum = minimum_down_payment(record.financed_amount, rules)
    flags = {
        "financed_amount": record.financed_amount > 0,
        "down_payment": is_valid_down_payment(record.financed_amount, record.down_payment, rules),
        "term_months": rules.is_allowed_term(record.term_months),
    }

    messages: dict[str, str] = {}
    if not flags["financed_amount"]:
        messages["financed_amount"] = MESSAGES["financed_amount"]
    if not flags["down_payment"]:
        ratio = format_percentage(rules.min_down_payment_ratio)
        messages["down_payment"] = (
            f"A entrada mínima é de {format_currency(minimum)} ({ratio} do valor financiado)"
        )
    if not flags["term_months"]:
        messages["term_months"] = MESSAGES["term_months"]

    return FinancialStepValidation(**flags, minimum_down_payment=minimum, messages=messages)
