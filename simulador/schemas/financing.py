"""Pydantic schemas for the financing record, calculator output and proposals.

FinancingRecord is the single mutable aggregate threaded through the wizard.
ProposalInsert/ProposalRow mirror the `financing_proposals` table columns.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_ZERO = Decimal("0")


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ProposalStatus(str, Enum):
    """Lifecycle of a persisted proposal."""

    PENDING = "pending"
    SIGNED = "signed"
    APPROVED = "approved"
    REJECTED = "rejected"


# ---------------------------------------------------------------------------
# Calculator output
# ---------------------------------------------------------------------------


class AmortizationResult(BaseModel):
    """Fixed monthly payment and total payback, both rounded to cents."""

    model_config = ConfigDict(frozen=True)

    monthly_payment: Decimal = _ZERO
    total_amount: Decimal = _ZERO


class Installment(BaseModel):
    """One row of the Price amortization table."""

    model_config = ConfigDict(frozen=True)

    number: int
    payment: Decimal
    interest: Decimal
    amortization: Decimal
    balance: Decimal


# ---------------------------------------------------------------------------
# Financing record
# ---------------------------------------------------------------------------


class FinancingRecord(BaseModel):
    """Accumulated wizard input plus derived fields.

    cpf and phone are always stored masked. monthly_payment/total_amount are
    only written by the wizard's recompute step.
    """

    model_config = ConfigDict(validate_assignment=True)

    # Step 1: financial data
    financed_amount: Decimal = Field(default=_ZERO, ge=0)
    down_payment: Decimal = Field(default=_ZERO, ge=0)
    interest_rate: Decimal = Field(default=Decimal("0.12"), gt=0)
    term_months: int = Field(default=0, ge=0)

    # Step 2: personal data
    full_name: str = ""
    cpf: str = ""          # NNN.NNN.NNN-NN
    email: str = ""
    phone: str = ""        # (NN) NNNNN-NNNN or (NN) NNNN-NNNN

    # Derived
    monthly_payment: Decimal = Field(default=_ZERO, ge=0)
    total_amount: Decimal = Field(default=_ZERO, ge=0)

    # Set once the proposal document is stored
    pdf_reference: str | None = None

    @property
    def property_value(self) -> Decimal:
        """Total property value = financed amount + down payment."""
        return self.financed_amount + self.down_payment


# ---------------------------------------------------------------------------
# Step validation results
# ---------------------------------------------------------------------------


class FinancialStepValidation(BaseModel):
    """Flags gating the financial step."""

    financed_amount: bool
    down_payment: bool
    term_months: bool
    minimum_down_payment: Decimal
    messages: dict[str, str] = Field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return self.financed_amount and self.down_payment and self.term_months


class PersonalStepValidation(BaseModel):
    """Flags gating the personal data step."""

    full_name: bool
    cpf: bool
    email: bool
    phone: bool
    messages: dict[str, str] = Field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return self.full_name and self.cpf and self.email and self.phone


class StepProgress(BaseModel):
    """One entry of the wizard progress bar."""

    number: int
    title: str
    is_active: bool
    is_completed: bool


# ---------------------------------------------------------------------------
# Persisted proposal
# ---------------------------------------------------------------------------


class ProposalInsert(BaseModel):
    """Row written to the proposals table once the document is signed."""

    financed_amount: Decimal
    down_payment: Decimal
    interest_rate: Decimal
    term_months: int
    monthly_payment: Decimal
    total_amount: Decimal
    full_name: str
    cpf: str
    email: str
    phone: str
    signed_at: datetime | None = None
    signature_data: str | None = None
    pdf_url: str | None = None
    status: ProposalStatus = ProposalStatus.PENDING

    @classmethod
    def from_record(
        cls,
        record: FinancingRecord,
        *,
        signature_data: str | None,
        pdf_url: str | None,
        signed_at: datetime | None,
    ) -> ProposalInsert:
        """Snapshot a finished record into the table's column layout."""
        return cls(
            financed_amount=record.financed_amount,
            down_payment=record.down_payment,
            interest_rate=record.interest_rate,
            term_months=record.term_months,
            monthly_payment=record.monthly_payment,
            total_amount=record.total_amount,
            full_name=record.full_name,
            cpf=record.cpf,
            email=record.email,
            phone=record.phone,
            signed_at=signed_at,
            signature_data=signature_data,
            pdf_url=pdf_url,
            status=ProposalStatus.SIGNED if signed_at is not None else ProposalStatus.PENDING,
        )

    def to_payload(self) -> dict[str, Any]:
        """JSON body for PostgREST; numeric columns are sent as numbers."""
        payload = self.model_dump(mode="json")
        for key, value in self.model_dump().items():
            if isinstance(value, Decimal):
                payload[key] = float(value)
        return payload


class ProposalRow(ProposalInsert):
    """Proposal as read back from the backend."""

    id: str
    created_at: datetime
    updated_at: datetime | None = None
