"""Proposal document rendering."""

from simulador.document.renderer import ProposalPdfRenderer, proposal_filename

__all__ = ["ProposalPdfRenderer", "proposal_filename"]
