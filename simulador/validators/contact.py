"""Personal data validators: full name, e-mail and Brazilian phone.

Shape checks used to gate the personal data step, not deliverability or
registry lookups.
"""

from __future__ import annotations

import re

from simulador.formatters import only_digits
from simulador.schemas.financing import FinancingRecord, PersonalStepValidation
from simulador.validators.cpf import is_valid_cpf

_EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_NAME_PART_PATTERN = re.compile(r"[A-Za-zÁÀÂÃÄÉÈÊËÍÌÎÏÓÒÔÕÖÚÙÛÜÇÑáàâãäéèêëíìîïóòôõöúùûüçñ]{2,}")
_WHITESPACE = re.compile(r"\s+")

MIN_AREA_CODE = 11
MAX_AREA_CODE = 99

# Inline messages shown under a filled-in field that fails validation
MESSAGES: dict[str, str] = {
    "full_name": "Digite nome e sobrenome (ex: João Silva)",
    "cpf": "CPF inválido",
    "email": "E-mail inválido",
    "phone": "Telefone inválido. Use formato brasileiro: (11) 99999-9999",
}


def is_valid_email(value: str | None) -> bool:
    """Minimal shape: local@domain.tld, no whitespace, a single @."""
    if not value:
        return False
    return _EMAIL_PATTERN.fullmatch(value) is not None


def normalize_name(value: str | None) -> str:
    """Trim and collapse internal whitespace runs to single spaces."""
    if not value:
        return ""
    return _WHITESPACE.sub(" ", value).strip()


def is_valid_full_name(value: str | None) -> bool:
    """Require first and last name, each at least two letters."""
    name = normalize_name(value)
    if len(name) < 3:
        return False
    parts = name.split(" ")
    if len(parts) < 2:
        return False
    return all(_NAME_PART_PATTERN.fullmatch(part) for part in parts)


def is_valid_brazilian_phone(value: str | None) -> bool:
    """Validate a landline (10 digits) or mobile (11 digits, 9 after the DDD)."""
    digits = only_digits(value)
    if len(digits) not in (10, 11):
        return False
    area_code = int(digits[:2])
    if not MIN_AREA_CODE <= area_code <= MAX_AREA_CODE:
        return False
    if len(digits) == 11 and digits[2] != "9":
        return False
    return True


def validate_personal_step(record: FinancingRecord) -> PersonalStepValidation:
    """Validate every personal field; messages only for non-empty invalid ones."""
    flags = {
        "full_name": is_valid_full_name(record.full_name),
        "cpf": is_valid_cpf(record.cpf),
        "email": is_valid_email(record.email),
        "phone": is_valid_brazilian_phone(record.phone),
    }
    messages = {
        field: MESSAGES[field]
        for field, ok in flags.items()
        if not ok and getattr(record, field)
    }
    return PersonalStepValidation(**flags, messages=messages)
