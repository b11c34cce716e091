"""Input validators: CPF check digits, contact data, financial step rules."""

from simulador.validators.contact import (
    is_valid_brazilian_phone,
    is_valid_email,
    is_valid_full_name,
    validate_personal_step,
)
from simulador.validators.cpf import is_valid_cpf
from simulador.validators.financial import (
    is_valid_down_payment,
    minimum_down_payment,
    validate_financial_step,
)

__all__ = [
    "is_valid_brazilian_phone",
    "is_valid_cpf",
    "is_valid_down_payment",
    "is_valid_email",
    "is_valid_full_name",
    "minimum_down_payment",
    "validate_financial_step",
    "validate_personal_step",
]
