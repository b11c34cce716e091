"""Simulation, validation and admin routes."""
# ruff: noqa: B008

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import RedirectResponse

from simulador.api.auth import verify_admin
from simulador.calculators.amortization import amortization_schedule, compute_amortization
from simulador.config import settings
from simulador.exceptions import ConfigurationError, PersistenceError
from simulador.formatters import mask_cpf, mask_phone
from simulador.integrations.supabase import supabase_client
from simulador.schemas.api import (
    PersonalDataRequest,
    PersonalDataResponse,
    SimulationRequest,
    SimulationResponse,
)
from simulador.schemas.financing import FinancingRecord, ProposalRow
from simulador.validators.contact import validate_personal_step
from simulador.validators.financial import validate_financial_step

logger = logging.getLogger(__name__)

router = APIRouter(tags=["simulador"])
admin_router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/simulacao", response_model=SimulationResponse)
async def simulate(
    body: SimulationRequest,
    include_schedule: bool = Query(default=False, alias="cronograma"),
) -> SimulationResponse:
    """Amortization for the financial step, with the down payment gate."""
    rules = settings.rules
    record = FinancingRecord(
        financed_amount=body.financed_amount,
        down_payment=body.down_payment,
        interest_rate=rules.annual_rate,
        term_months=body.term_months,
    )
    result = compute_amortization(record.financed_amount, record.interest_rate, record.term_months)
    validation = validate_financial_step(record, rules)

    schedule = None
    if include_schedule:
        schedule = amortization_schedule(record.financed_amount, record.interest_rate, record.term_months)

    return SimulationResponse(
        monthly_payment=result.monthly_payment,
        total_amount=result.total_amount,
        interest_rate=record.interest_rate,
        property_value=record.property_value,
        minimum_down_payment=validation.minimum_down_payment,
        is_valid=validation.is_valid,
        messages=validation.messages,
        schedule=schedule,
    )


@router.post("/validacao/dados-pessoais", response_model=PersonalDataResponse)
async def validate_personal_data(body: PersonalDataRequest) -> PersonalDataResponse:
    """Mask and validate the personal step fields."""
    record = FinancingRecord(
        full_name=body.full_name,
        cpf=mask_cpf(body.cpf),
        email=body.email.strip(),
        phone=mask_phone(body.phone),
    )
    validation = validate_personal_step(record)
    return PersonalDataResponse(
        masked_cpf=record.cpf,
        masked_phone=record.phone,
        full_name_valid=validation.full_name,
        cpf_valid=validation.cpf,
        email_valid=validation.email,
        phone_valid=validation.phone,
        is_valid=validation.is_valid,
        messages=validation.messages,
    )


@admin_router.get("/propostas", response_model=list[ProposalRow])
async def list_proposals(admin: str = Depends(verify_admin)) -> list[ProposalRow]:
    """All signed proposals, newest first."""
    logger.info("Admin %s listed proposals", admin)
    try:
        return await supabase_client.list_proposals()
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc


@admin_router.get("/propostas/{proposal_id}/pdf")
async def download_proposal_pdf(proposal_id: str, admin: str = Depends(verify_admin)) -> RedirectResponse:
    """Redirect to the proposal's PDF.

    PDFs in the project's bucket get a short-lived signed link; any other
    stored URL is followed as is.
    """
    try:
        proposal = await supabase_client.get_proposal(proposal_id)
        if proposal is None or not proposal.pdf_url:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="PDF não encontrado")

        target = proposal.pdf_url
        if supabase_client.is_stored_here(target):
            object_name = target.rsplit("/", 1)[-1]
            target = await supabase_client.create_signed_url(object_name, settings.supabase.signed_url_ttl)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    logger.info("Admin %s opened the PDF of proposal %s", admin, proposal_id)
    return RedirectResponse(target, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
