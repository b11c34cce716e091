"""Request/response bodies for the HTTP API."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from simulador.schemas.financing import Installment


class SimulationRequest(BaseModel):
    """Financial step input."""

    financed_amount: Decimal = Field(ge=0)
    down_payment: Decimal = Field(default=Decimal("0"), ge=0)
    term_months: int = Field(ge=0)


class SimulationResponse(BaseModel):
    """Amortization result plus the financial step flags."""

    monthly_payment: Decimal
    total_amount: Decimal
    interest_rate: Decimal
    property_value: Decimal
    minimum_down_payment: Decimal
    is_valid: bool
    messages: dict[str, str] = Field(default_factory=dict)
    schedule: list[Installment] | None = None


class PersonalDataRequest(BaseModel):
    """Personal step input, raw or masked."""

    full_name: str = ""
    cpf: str = ""
    email: str = ""
    phone: str = ""


class PersonalDataResponse(BaseModel):
    """Masked values and per-field validity."""

    masked_cpf: str
    masked_phone: str
    full_name_valid: bool
    cpf_valid: bool
    email_valid: bool
    phone_valid: bool
    is_valid: bool
    messages: dict[str, str] = Field(default_factory=dict)
