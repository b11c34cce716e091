"""Brazilian CPF (Cadastro de Pessoas Físicas) validator.

Pure Python. A CPF has 11 digits: NNN.NNN.NNN-DD, where DD are two mod-11
check digits computed over the preceding digits.

Check digit algorithm (Receita Federal):
  - digit 10: sum(d[i] * (10 - i)) for i in 0..8
  - digit 11: sum(d[i] * (11 - i)) for i in 0..9
  - check = 11 - (sum % 11); 10 or 11 become 0
"""

from __future__ import annotations

import re

from simulador.formatters import CPF_DIGITS, only_digits

# Eleven repetitions of one digit pass the checksum but are never issued
_REPEATED = re.compile(r"^(\d)\1{10}$")


def _check_digit(digits: str) -> int:
    """Compute one mod-11 check digit over `digits`, weights len+1 down to 2."""
    weight = len(digits) + 1
    total = sum(int(d) * (weight - i) for i, d in enumerate(digits))
    check = 11 - (total % 11)
    return 0 if check >= 10 else check


def compute_check_digits(first_nine: str) -> str:
    """Return the two check digits for the first nine digits of a CPF.

    Non-digits are ignored; anything but exactly nine digits yields "".
    """
    base = only_digits(first_nine)
    if len(base) != 9:
        return ""
    first = _check_digit(base)
    second = _check_digit(base + str(first))
    return f"{first}{second}"


def is_valid_cpf(value: str | None) -> bool:
    """Validate a CPF, masked or raw.

    Returns False for anything other than 11 digits, for repeated-digit
    placeholders like 000.000.000-00, and when either check digit differs.
    """
    digits = only_digits(value)
    if len(digits) != CPF_DIGITS:
        return False
    if _REPEATED.match(digits):
        return False
    return compute_check_digits(digits[:9]) == digits[9:]
