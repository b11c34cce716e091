"""Proposal PDF renderer.

Draws the signed financing proposal with reportlab: proponent data,
financial conditions, terms and the handwritten signature captured by the
wizard (PNG bytes or a data:image/png;base64 URL, decoded with Pillow).
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
import re
from datetime import date, datetime

from PIL import Image, UnidentifiedImageError
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from simulador.exceptions import RenderError
from simulador.formatters import format_currency, format_date, format_percentage, format_term
from simulador.schemas.financing import FinancingRecord

logger = logging.getLogger(__name__)

TITLE = "PROPOSTA DE FINANCIAMENTO IMOBILIÁRIO"
SUBTITLE = "Simulador de Financiamento Imobiliário"
FOOTER = "Documento gerado automaticamente pelo Simulador de Financiamento Imobiliário"

TERMS: tuple[str, ...] = (
    "Esta proposta de financiamento está sujeita à análise de crédito e aprovação pela instituição financeira.",
    "As condições apresentadas podem sofrer alterações mediante análise documental.",
    "O proponente declara estar ciente das condições apresentadas e concorda com os termos desta proposta.",
    "A assinatura digital equivale à assinatura física para todos os efeitos legais.",
)

_DATA_URL_PREFIX = re.compile(r"^data:image/[a-z+]+;base64,", re.IGNORECASE)
_PAGE_WIDTH, _PAGE_HEIGHT = A4
_LEFT = 20 * mm
_TEXT_WIDTH = 170 * mm


# ── Signature helpers ────────────────────────────────────────────────


def decode_signature(signature: bytes | str | None) -> bytes:
    """Return raw image bytes from PNG bytes, a data URL or bare base64.

    Undecodable input yields b"".
    """
    if not signature:
        return b""
    if isinstance(signature, bytes):
        return signature
    payload = _DATA_URL_PREFIX.sub("", signature.strip())
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        return b""


def encode_signature(signature: bytes | str) -> str:
    """Return the signature as a data:image/png;base64 URL for storage."""
    if isinstance(signature, str):
        if _DATA_URL_PREFIX.match(signature.strip()):
            return signature.strip()
        return f"data:image/png;base64,{signature.strip()}"
    return "data:image/png;base64," + base64.b64encode(signature).decode("ascii")


def proposal_filename(record: FinancingRecord) -> str:
    """Download name: Proposta_Financiamento_Joao_Silva.pdf."""
    name = re.sub(r"\s+", "_", record.full_name.strip()) or "Proponente"
    return f"Proposta_Financiamento_{name}.pdf"


def storage_object_name(now: datetime) -> str:
    """Object key in the storage bucket: financing_proposal_<epoch ms>.pdf."""
    return f"financing_proposal_{int(now.timestamp() * 1000)}.pdf"


# ── Renderer ─────────────────────────────────────────────────────────


class ProposalPdfRenderer:
    """Render a FinancingRecord into PDF bytes."""

    def render(
        self,
        record: FinancingRecord,
        signature: bytes | str | None = None,
        *,
        issued_on: date | None = None,
    ) -> bytes:
        """Draw the proposal.

        Args:
            record: Finished financing record (derived fields already computed).
            signature: Handwritten signature image, optional.
            issued_on: Date printed above the signature (defaults to today).

        Returns:
            The PDF document as bytes.

        Raises:
            RenderError: If reportlab fails to produce the document.
        """
        buffer = io.BytesIO()
        try:
            c = canvas.Canvas(buffer, pagesize=A4)
            c.setTitle(TITLE)
            self._draw(c, record, signature, issued_on or date.today())
            c.showPage()
            c.save()
        except (OSError, ValueError, TypeError) as exc:
            raise RenderError(f"Erro ao gerar PDF: {exc}") from exc
        return buffer.getvalue()

    # ── Drawing ──────────────────────────────────────────────────────

    def _draw(
        self,
        c: canvas.Canvas,
        record: FinancingRecord,
        signature: bytes | str | None,
        issued_on: date,
    ) -> None:
        # Header
        c.setFont("Helvetica-Bold", 20)
        c.drawCentredString(_PAGE_WIDTH / 2, _y(30), TITLE)
        c.setFont("Helvetica", 12)
        c.drawCentredString(_PAGE_WIDTH / 2, _y(40), SUBTITLE)
        c.line(_LEFT, _y(50), _PAGE_WIDTH - _LEFT, _y(50))

        # Proponent
        c.setFont("Helvetica-Bold", 14)
        c.drawString(_LEFT, _y(65), "DADOS DO PROPONENTE")
        c.setFont("Helvetica", 10)
        c.drawString(_LEFT, _y(75), f"Nome: {record.full_name}")
        c.drawString(_LEFT, _y(85), f"CPF: {record.cpf}")
        c.drawString(_LEFT, _y(95), f"E-mail: {record.email}")
        c.drawString(_LEFT, _y(105), f"Telefone: {record.phone}")

        # Financial data
        c.setFont("Helvetica-Bold", 14)
        c.drawString(_LEFT, _y(125), "DADOS FINANCEIROS")
        c.setFont("Helvetica", 10)
        lines = [
            f"Valor Total do Imóvel: {format_currency(record.property_value)}",
            f"Valor de Entrada: {format_currency(record.down_payment)}",
            f"Valor Financiado: {format_currency(record.financed_amount)}",
            f"Taxa de Juros: {format_percentage(record.interest_rate)} ao ano",
            f"Prazo: {format_term(record.term_months)}",
            f"Valor da Parcela: {format_currency(record.monthly_payment)}",
        ]
        for offset, line in enumerate(lines):
            c.drawString(_LEFT, _y(135 + offset * 10), line)
        c.setFont("Helvetica-Bold", 12)
        c.drawString(_LEFT, _y(200), f"VALOR TOTAL A PAGAR: {format_currency(record.total_amount)}")

        # Terms
        c.setFont("Helvetica-Bold", 14)
        c.drawString(_LEFT, _y(220), "TERMOS E CONDIÇÕES")
        c.setFont("Helvetica", 8)
        y_pos = 230.0
        for term in TERMS:
            for wrapped in simpleSplit(term, "Helvetica", 8, _TEXT_WIDTH):
                c.drawString(_LEFT, _y(y_pos), wrapped)
                y_pos += 4

        # Date and signature
        c.drawString(_LEFT, _y(y_pos + 10), f"Data: {format_date(issued_on)}")
        if signature:
            c.drawString(_LEFT, _y(y_pos + 25), "Assinatura:")
            image = _load_signature(signature)
            if image is not None:
                c.drawImage(image, _LEFT, _y(y_pos + 50), width=60 * mm, height=20 * mm, mask="auto")
            else:
                c.drawString(_LEFT, _y(y_pos + 35), "(Assinatura digital aplicada)")

        # Footer
        c.setFont("Helvetica", 8)
        c.drawCentredString(_PAGE_WIDTH / 2, _y(280), FOOTER)


def _y(top_mm: float) -> float:
    """Convert a distance from the top edge (mm) into reportlab's bottom-up points."""
    return _PAGE_HEIGHT - top_mm * mm


def _load_signature(signature: bytes | str) -> ImageReader | None:
    raw = decode_signature(signature)
    if not raw:
        logger.warning("Signature could not be decoded, drawing placeholder text")
        return None
    try:
        image = Image.open(io.BytesIO(raw))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        logger.warning("Signature image unreadable (%s), drawing placeholder text", exc)
        return None
    return ImageReader(image)
