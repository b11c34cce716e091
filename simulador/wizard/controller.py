"""Wizard controller. Owns the financing record and drives the steps.

Every mutation goes through `update()`, which masks personal fields, parses
currency input and then calls `recompute_derived()` explicitly, so the
monthly payment and total can never lag behind the inputs they come from.

Finalizing renders the proposal, uploads it, inserts the proposal row and
freezes the record. The first collaborator failure is propagated as is.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Protocol

from simulador.calculators.amortization import compute_amortization
from simulador.config import FinancingRules, settings
from simulador.document.renderer import encode_signature, proposal_filename, storage_object_name
from simulador.exceptions import InvalidTransitionError, RecordFinalizedError, StepValidationError
from simulador.formatters import mask_cpf, mask_phone, only_digits, parse_currency_input, redact_cpf
from simulador.schemas.financing import (
    AmortizationResult,
    FinancialStepValidation,
    FinancingRecord,
    PersonalStepValidation,
    ProposalInsert,
    ProposalRow,
    StepProgress,
)
from simulador.validators.contact import validate_personal_step
from simulador.validators.financial import validate_financial_step
from simulador.wizard.fsm import WizardFSM
from simulador.wizard.states import STEP_TITLES, WizardStep

logger = logging.getLogger(__name__)

SIGNATURE_REQUIRED = "Por favor, assine o documento antes de continuar."

# Fields the user may edit; interest rate and derived values are not among them
_EDITABLE_FIELDS: frozenset[str] = frozenset({
    "financed_amount",
    "down_payment",
    "term_months",
    "full_name",
    "cpf",
    "email",
    "phone",
})
_CURRENCY_FIELDS: frozenset[str] = frozenset({"financed_amount", "down_payment"})


class DocumentRenderer(Protocol):
    """Turns a finished record into document bytes."""

    def render(self, record: FinancingRecord, signature: bytes | str | None = None) -> bytes: ...


class ProposalBackend(Protocol):
    """Stores the document and the proposal row."""

    async def upload_pdf(self, object_name: str, content: bytes) -> str: ...

    async def insert_proposal(self, proposal: ProposalInsert) -> ProposalRow | None: ...


@dataclass
class FinalizedProposal:
    """Outcome of a successful signature + persistence step."""

    document: bytes
    filename: str
    pdf_url: str
    row: ProposalRow | None


class FinancingWizard:
    """Single-session wizard over one FinancingRecord."""

    def __init__(
        self,
        rules: FinancingRules | None = None,
        session_id: uuid.UUID | None = None,
    ) -> None:
        self.rules = rules or settings.rules
        self.session_id = session_id or uuid.uuid4()
        self.fsm = WizardFSM(self.session_id)
        self.record = self._new_record()
        self.finalized = False

    def _new_record(self) -> FinancingRecord:
        return FinancingRecord(interest_rate=self.rules.annual_rate)

    @property
    def current_step(self) -> WizardStep:
        return self.fsm.current_step

    # ── Mutation ─────────────────────────────────────────────────────

    def update(self, **fields: Any) -> FinancingRecord:
        """Merge a partial update into the record and recompute derived fields.

        Currency fields accept numbers or masked strings ("R$ 1.234,56");
        cpf and phone are stored masked whatever form they arrive in.

        Raises:
            RecordFinalizedError: If the proposal was already signed.
            ValueError: For unknown or read-only fields, unparsable or negative
                amounts. Nothing is committed when it raises.
        """
        if self.finalized:
            raise RecordFinalizedError("Proposta já assinada; inicie uma nova simulação")

        unknown = set(fields) - _EDITABLE_FIELDS
        if unknown:
            msg = f"Fields not editable: {sorted(unknown)}"
            raise ValueError(msg)

        # Validate the whole change set before committing any of it
        changes = {name: self._normalize(name, value) for name, value in fields.items()}
        self.record = FinancingRecord.model_validate({**self.record.model_dump(), **changes})

        self.recompute_derived()
        return self.record

    @staticmethod
    def _normalize(name: str, value: Any) -> Any:
        try:
            if name in _CURRENCY_FIELDS:
                if isinstance(value, str):
                    return parse_currency_input(value)
                amount = Decimal(str(value)) if value is not None else Decimal("0")
                if not amount.is_finite():
                    msg = f"Invalid value for {name}: {value!r}"
                    raise ValueError(msg)
                return amount
            if name == "term_months":
                if isinstance(value, str):
                    digits = only_digits(value)
                    return int(digits) if digits else 0
                return int(value or 0)
        except (InvalidOperation, TypeError, OverflowError) as exc:
            msg = f"Invalid value for {name}: {value!r}"
            raise ValueError(msg) from exc
        if name == "cpf":
            return mask_cpf(value)
        if name == "phone":
            return mask_phone(value)
        if name == "email":
            return (value or "").strip()
        return value or ""

    def recompute_derived(self) -> AmortizationResult:
        """Recompute monthly payment and total from the current inputs."""
        result = compute_amortization(
            self.record.financed_amount,
            self.record.interest_rate,
            self.record.term_months,
        )
        self.record.monthly_payment = result.monthly_payment
        self.record.total_amount = result.total_amount
        return result

    # ── Step gates ───────────────────────────────────────────────────

    def validate_financial(self) -> FinancialStepValidation:
        return validate_financial_step(self.record, self.rules)

    def validate_personal(self) -> PersonalStepValidation:
        return validate_personal_step(self.record)

    def can_advance(self) -> bool:
        """Whether the current step's inputs allow moving forward."""
        step = self.current_step
        if step == WizardStep.FINANCIAL:
            return self.validate_financial().is_valid
        if step == WizardStep.PERSONAL:
            return self.validate_personal().is_valid
        return step == WizardStep.CONFIRMATION

    def next_step(self) -> WizardStep:
        """Advance one step if the current step is valid.

        Raises:
            InvalidTransitionError: If there is no "next" from this step
                (the signature step is left through `finalize`).
            StepValidationError: If the current step's inputs are invalid.
        """
        if not self.fsm.can_transition("next"):
            msg = f"No next step from {self.current_step.value}"
            raise InvalidTransitionError(msg)
        if not self.can_advance():
            raise StepValidationError(self._step_messages())
        return self.fsm.transition("next")

    def _step_messages(self) -> str:
        if self.current_step == WizardStep.FINANCIAL:
            messages = self.validate_financial().messages
        else:
            messages = self.validate_personal().messages
        return "; ".join(messages.values()) or "Preencha todos os campos obrigatórios"

    def progress(self) -> list[StepProgress]:
        """Progress bar entries: earlier steps completed, the current one active."""
        current = self.fsm.step_number
        return [
            StepProgress(
                number=number,
                title=title,
                is_active=number == current,
                is_completed=number < current,
            )
            for number, title in enumerate(STEP_TITLES.values(), start=1)
        ]

    def previous_step(self) -> WizardStep:
        return self.fsm.transition("previous")

    def restart(self) -> WizardStep:
        """Discard the record and start a new simulation."""
        self.record = self._new_record()
        self.finalized = False
        logger.info("Wizard restarted (session=%s)", self.session_id)
        return self.fsm.transition("restart")

    # ── Finalization ─────────────────────────────────────────────────

    async def finalize(
        self,
        signature: bytes | str,
        renderer: DocumentRenderer,
        backend: ProposalBackend,
        *,
        now: datetime | None = None,
    ) -> FinalizedProposal:
        """Render, upload and persist the signed proposal, then freeze the record.

        Raises:
            RecordFinalizedError: If already finalized.
            InvalidTransitionError: If not on the signature step.
            StepValidationError: If the signature is empty.
            RenderError / PersistenceError: From the collaborators, unchanged.
        """
        if self.finalized:
            raise RecordFinalizedError("Proposta já assinada; inicie uma nova simulação")
        if not self.fsm.can_transition("signed"):
            msg = f"Cannot sign from step {self.current_step.value}"
            raise InvalidTransitionError(msg)
        if not signature:
            raise StepValidationError(SIGNATURE_REQUIRED)

        now = now or datetime.now(UTC)
        self.recompute_derived()

        document = renderer.render(self.record, signature)
        pdf_url = await backend.upload_pdf(storage_object_name(now), document)

        proposal = ProposalInsert.from_record(
            self.record,
            signature_data=encode_signature(signature),
            pdf_url=pdf_url,
            signed_at=now,
        )
        row = await backend.insert_proposal(proposal)

        self.record.pdf_reference = pdf_url
        self.fsm.transition("signed")
        self.finalized = True
        logger.info(
            "Proposal finalized (session=%s, cpf=%s, term=%d)",
            self.session_id,
            redact_cpf(self.record.cpf),
            self.record.term_months,
        )

        return FinalizedProposal(
            document=document,
            filename=proposal_filename(self.record),
            pdf_url=pdf_url,
            row=row,
        )
