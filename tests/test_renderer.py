"""Tests for the proposal PDF renderer and its helpers.

Covers:
- Signature decoding (bytes, data URL, bare base64, garbage)
- Download filename and storage object name
- PDF output with and without a signature image
- Unreadable signatures fall back to placeholder text
- reportlab failures surface as RenderError
"""

from __future__ import annotations

import base64
import io
import logging
from datetime import UTC, date, datetime
from decimal import Decimal
from unittest.mock import patch

import pytest
from PIL import Image

from simulador.document.renderer import (
    ProposalPdfRenderer,
    decode_signature,
    encode_signature,
    proposal_filename,
    storage_object_name,
)
from simulador.exceptions import RenderError
from simulador.formatters import format_term
from simulador.schemas.financing import FinancingRecord

# ── Helpers ──────────────────────────────────────────────────────────


def _png_bytes() -> bytes:
    """A small white PNG standing in for a drawn signature."""
    buffer = io.BytesIO()
    Image.new("RGB", (120, 40), "white").save(buffer, format="PNG")
    return buffer.getvalue()


def _record(**overrides) -> FinancingRecord:
    data = {
        "financed_amount": Decimal("300000"),
        "down_payment": Decimal("60000"),
        "term_months": 360,
        "full_name": "João Silva",
        "cpf": "529.982.247-25",
        "email": "joao@example.com",
        "phone": "(11) 98888-7777",
        "monthly_payment": Decimal("3085.84"),
        "total_amount": Decimal("1110902.40"),
    }
    data.update(overrides)
    return FinancingRecord(**data)


# ── Signature helpers ────────────────────────────────────────────────


class TestDecodeSignature:
    def test_bytes_passthrough(self):
        png = _png_bytes()
        assert decode_signature(png) == png

    def test_data_url(self):
        png = _png_bytes()
        url = "data:image/png;base64," + base64.b64encode(png).decode()
        assert decode_signature(url) == png

    def test_bare_base64(self):
        png = _png_bytes()
        assert decode_signature(base64.b64encode(png).decode()) == png

    def test_garbage(self):
        assert decode_signature("data:image/png;base64,!!!") == b""

    def test_empty(self):
        assert decode_signature("") == b""
        assert decode_signature(None) == b""


class TestEncodeSignature:
    def test_bytes(self):
        assert encode_signature(b"\x89PNG") == "data:image/png;base64,iVBORw=="

    def test_data_url_unchanged(self):
        url = "data:image/png;base64,iVBORw=="
        assert encode_signature(url) == url

    def test_bare_base64_prefixed(self):
        assert encode_signature("iVBORw==") == "data:image/png;base64,iVBORw=="


class TestNames:
    def test_filename(self):
        assert proposal_filename(_record()) == "Proposta_Financiamento_João_Silva.pdf"

    def test_filename_collapses_whitespace(self):
        record = _record(full_name="  Maria   da Silva ")
        assert proposal_filename(record) == "Proposta_Financiamento_Maria_da_Silva.pdf"

    def test_filename_without_name(self):
        assert proposal_filename(FinancingRecord()) == "Proposta_Financiamento_Proponente.pdf"

    def test_storage_object_name(self):
        now = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
        assert storage_object_name(now) == "financing_proposal_1792411200000.pdf"


# ── Rendering ────────────────────────────────────────────────────────


class TestRender:
    def test_produces_pdf(self):
        document = ProposalPdfRenderer().render(_record(), issued_on=date(2026, 10, 19))
        assert document.startswith(b"%PDF")
        assert document.rstrip().endswith(b"%%EOF")

    def test_with_png_signature(self):
        document = ProposalPdfRenderer().render(_record(), _png_bytes())
        assert document.startswith(b"%PDF")

    def test_with_data_url_signature(self):
        url = "data:image/png;base64," + base64.b64encode(_png_bytes()).decode()
        document = ProposalPdfRenderer().render(_record(), url)
        assert document.startswith(b"%PDF")

    def test_garbage_signature_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING, logger="simulador.document.renderer"):
            document = ProposalPdfRenderer().render(_record(), "not-a-signature")
        assert document.startswith(b"%PDF")
        assert "drawing placeholder text" in caplog.text

    def test_non_image_bytes_fall_back(self, caplog):
        with caplog.at_level(logging.WARNING, logger="simulador.document.renderer"):
            document = ProposalPdfRenderer().render(_record(), b"plain text, not an image")
        assert document.startswith(b"%PDF")
        assert "unreadable" in caplog.text

    def test_empty_record_still_renders(self):
        document = ProposalPdfRenderer().render(FinancingRecord())
        assert document.startswith(b"%PDF")

    def test_canvas_failure_raises_render_error(self):
        with (
            patch("simulador.document.renderer.canvas.Canvas", side_effect=OSError("disk full")),
            pytest.raises(RenderError, match="disk full"),
        ):
            ProposalPdfRenderer().render(_record())

    def test_term_written_in_years_and_months(self):
        with patch("simulador.document.renderer.format_term", wraps=format_term) as mock_term:
            ProposalPdfRenderer().render(_record())
        mock_term.assert_called_once_with(360)
