"""Async httpx client for the Supabase project backing the simulator.

Two Supabase APIs are used:
- Storage: POST {url}/storage/v1/object/{bucket}/{name} uploads the signed PDF
  and POST {url}/storage/v1/object/sign/{bucket}/{name} issues download links
- PostgREST: POST/GET {url}/rest/v1/{table} inserts and lists proposals

Errors surface on the first failure; there is no retry.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from simulador.config import SupabaseSettings, settings
from simulador.exceptions import ConfigurationError, PersistenceError
from simulador.formatters import redact_cpf
from simulador.schemas.financing import ProposalInsert, ProposalRow

logger = logging.getLogger(__name__)


class SupabaseClient:
    """Thin async wrapper around Supabase storage and the proposals table.

    Auth: `apikey` and `Authorization: Bearer` headers with the anon key.
    """

    def __init__(self, config: SupabaseSettings | None = None) -> None:
        config = config or settings.supabase
        self._base_url = config.supabase_url.rstrip("/")
        self._api_key = config.supabase_anon_key
        self._bucket = config.supabase_bucket
        self._table = config.supabase_table
        self._timeout = httpx.Timeout(config.request_timeout, connect=5.0)

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
        }

    def _require_config(self) -> None:
        if not self._base_url or not self._api_key:
            raise ConfigurationError("SUPABASE_URL / SUPABASE_ANON_KEY not configured")

    def public_url(self, object_name: str) -> str:
        """Public URL of an object in the proposals bucket."""
        return f"{self._base_url}/storage/v1/object/public/{self._bucket}/{object_name}"

    # ── Storage ──────────────────────────────────────────────────────

    async def upload_pdf(self, object_name: str, content: bytes) -> str:
        """Upload a PDF and return its public URL.

        Raises:
            PersistenceError: On timeout, network or HTTP error.
        """
        self._require_config()
        url = f"{self._base_url}/storage/v1/object/{self._bucket}/{object_name}"
        headers = {**self._headers, "Content-Type": "application/pdf", "x-upsert": "false"}

        await self._request("POST", url, "Erro ao fazer upload do PDF", headers=headers, content=content)

        logger.info("Uploaded %s (%d bytes) to bucket %s", object_name, len(content), self._bucket)
        return self.public_url(object_name)

    def is_stored_here(self, url: str) -> bool:
        """Whether a URL points into this project's proposals bucket."""
        if not self._base_url:
            return False
        return url.startswith(f"{self._base_url}/storage/v1/object/") and f"/{self._bucket}/" in url

    async def create_signed_url(self, object_name: str, expires_in: int = 60) -> str:
        """Short-lived download URL for a stored PDF.

        Raises:
            PersistenceError: On timeout, network or HTTP error, or when the
                backend answers without a signed path.
        """
        self._require_config()
        url = f"{self._base_url}/storage/v1/object/sign/{self._bucket}/{object_name}"

        payload = await self._request(
            "POST", url, "Erro ao abrir o PDF", headers=self._headers, json={"expiresIn": expires_in},
        )

        signed = (payload or {}).get("signedURL") or (payload or {}).get("signedUrl")
        if not signed:
            raise PersistenceError("Erro ao abrir o PDF: resposta sem URL assinada")
        logger.info("Signed %s for %ds", object_name, expires_in)
        return f"{self._base_url}/storage/v1/{signed.lstrip('/')}"

    # ── Proposals table ──────────────────────────────────────────────

    async def insert_proposal(self, proposal: ProposalInsert) -> ProposalRow | None:
        """Insert a proposal row and return it as stored.

        Returns None when the backend accepts the insert without echoing it.

        Raises:
            PersistenceError: On timeout, network or HTTP error.
        """
        self._require_config()
        url = f"{self._base_url}/rest/v1/{self._table}"
        headers = {**self._headers, "Prefer": "return=representation"}

        payload = await self._request(
            "POST", url, "Erro ao salvar proposta", headers=headers, json=proposal.to_payload(),
        )

        logger.info("Proposal saved for cpf=%s status=%s", redact_cpf(proposal.cpf), proposal.status.value)
        rows = payload if isinstance(payload, list) else [payload] if payload else []
        return ProposalRow.model_validate(rows[0]) if rows else None

    async def list_proposals(self) -> list[ProposalRow]:
        """Return every proposal, newest first."""
        self._require_config()
        url = f"{self._base_url}/rest/v1/{self._table}"
        params = {"select": "*", "order": "created_at.desc"}

        payload = await self._request(
            "GET", url, "Erro ao carregar propostas", headers=self._headers, params=params,
        )
        return [ProposalRow.model_validate(row) for row in payload or []]

    async def get_proposal(self, proposal_id: str) -> ProposalRow | None:
        """One proposal by id, or None if there is no such row."""
        self._require_config()
        url = f"{self._base_url}/rest/v1/{self._table}"
        params = {"select": "*", "id": f"eq.{proposal_id}"}

        payload = await self._request(
            "GET", url, "Erro ao carregar proposta", headers=self._headers, params=params,
        )
        rows = payload or []
        return ProposalRow.model_validate(rows[0]) if rows else None

    # ── Transport ────────────────────────────────────────────────────

    async def _request(self, method: str, url: str, error_prefix: str, **kwargs: Any) -> Any:
        """Send one request; translate every failure into PersistenceError."""
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning("Supabase timeout: %s %s", method, url)
            raise PersistenceError(f"{error_prefix}: tempo de resposta esgotado") from exc
        except httpx.HTTPStatusError as exc:
            detail = _error_detail(exc.response)
            logger.warning("Supabase HTTP %s on %s %s: %s", exc.response.status_code, method, url, detail)
            raise PersistenceError(f"{error_prefix}: {detail}") from exc
        except httpx.RequestError as exc:
            logger.warning("Supabase request failed: %s %s (%s)", method, url, exc)
            raise PersistenceError(f"{error_prefix}: {exc}") from exc

        if response.status_code == 204 or not response.content:
            return None
        return response.json()


def _error_detail(response: httpx.Response) -> str:
    """Pick the human-readable message out of a Supabase error body."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("message", "error_description", "error", "msg"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"


# Module-level singleton
supabase_client = SupabaseClient()
