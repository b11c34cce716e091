"""Brazilian locale formatting and input masks.

All functions are pure and total: malformed input degrades to a partial or
empty mask (or to zero for parsing), never to an exception. Every mask is
idempotent once digits are extracted: mask(mask(s)) == mask(s).
"""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

_NON_DIGITS = re.compile(r"[^0-9]")
_CENTS = Decimal("0.01")

CPF_DIGITS = 11
PHONE_MAX_DIGITS = 11


def only_digits(value: object) -> str:
    """Drop every non-digit character; None becomes an empty string."""
    if value is None:
        return ""
    return _NON_DIGITS.sub("", str(value))


# ── Currency ─────────────────────────────────────────────────────────


def format_currency(value: Decimal | float | int | str | None) -> str:
    """Format as Brazilian currency: 1234.5 -> "R$ 1.234,50"."""
    if value is None:
        return "-"
    try:
        d = Decimal(str(value))
    except InvalidOperation:
        return "-"
    if not d.is_finite():
        return "-"
    # Enough precision for every integer digit plus the cents
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, d.adjusted() + 3)
        try:
            d = d.quantize(_CENTS, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            return "-"
        # Format with US separators, then swap them for pt-BR
        formatted = f"{abs(d):,.2f}"
    formatted = formatted.replace(",", "X").replace(".", ",").replace("X", ".")
    sign = "-" if d < 0 else ""
    return f"{sign}R$ {formatted}"


def mask_currency_input(raw: str | None) -> str:
    """Re-mask a currency field on every keystroke.

    Every digit typed so far is read as an integer amount of cents, so
    typing "1", "12", "123" shows R$ 0,01, R$ 0,12, R$ 1,23. No digits at all
    yields "" rather than R$ 0,00, so the field can be cleared.
    """
    digits = only_digits(raw)
    if not digits:
        return ""
    cents = Decimal(digits)
    return format_currency(cents.scaleb(-2))


def parse_currency_input(masked: str | None) -> Decimal:
    """Convert a masked pt-BR amount ("R$ 1.234,56") back to a Decimal.

    Anything that cannot be read as a number yields Decimal("0").
    """
    if masked is None:
        return Decimal("0")
    text = str(masked).replace("R$", "")
    text = re.sub(r"\s", "", text).replace(".", "").replace(",", ".")
    try:
        value = Decimal(text)
    except InvalidOperation:
        return Decimal("0")
    if not value.is_finite():
        return Decimal("0")
    return value


# ── Document / phone masks ───────────────────────────────────────────


def mask_cpf(raw: str | None) -> str:
    """Progressively mask a CPF as NNN.NNN.NNN-NN, dropping digits past 11."""
    d = only_digits(raw)[:CPF_DIGITS]
    if len(d) <= 3:
        return d
    if len(d) <= 6:
        return f"{d[:3]}.{d[3:]}"
    if len(d) <= 9:
        return f"{d[:3]}.{d[3:6]}.{d[6:]}"
    return f"{d[:3]}.{d[3:6]}.{d[6:9]}-{d[9:]}"


def mask_phone(raw: str | None) -> str:
    """Progressively mask a phone as (NN) NNNN-NNNN or (NN) NNNNN-NNNN.

    The area code is wrapped once a third digit arrives. The local part gets
    its hyphen after four digits while typing, and after five once the
    eleventh (mobile) digit is present.
    """
    d = only_digits(raw)[:PHONE_MAX_DIGITS]
    if len(d) <= 2:
        return d
    area, local = d[:2], d[2:]
    if len(local) <= 4:
        return f"({area}) {local}"
    split = 5 if len(local) == 9 else 4
    return f"({area}) {local[:split]}-{local[split:]}"


# ── Display helpers ──────────────────────────────────────────────────


def format_percentage(value: Decimal | float | None) -> str:
    """Format a rate fraction: 0.12 -> "12%", 0.125 -> "12,5%"."""
    if value is None:
        return "-"
    pct = (Decimal(str(value)) * 100).quantize(_CENTS, rounding=ROUND_HALF_UP).normalize()
    return f"{format(pct, 'f').replace('.', ',')}%"


def format_term(months: int) -> str:
    """Format a term: 360 -> "30 anos (360 meses)"."""
    if months <= 0 or months % 12:
        return f"{months} meses"
    years = months // 12
    unit = "ano" if years == 1 else "anos"
    return f"{years} {unit} ({months} meses)"


def format_date(value: date | datetime | None) -> str:
    """Format as DD/MM/YYYY."""
    if value is None:
        return "-"
    return value.strftime("%d/%m/%Y")


def redact_cpf(cpf: str) -> str:
    """Hide all but the check digits, for logs: ***.***.***-25."""
    d = only_digits(cpf)
    return f"***.***.***-{d[-2:]}" if len(d) >= 2 else "***"
