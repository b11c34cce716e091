"""Financing wizard: step FSM and the controller owning the record."""

from simulador.wizard.controller import FinalizedProposal, FinancingWizard
from simulador.wizard.fsm import WizardFSM
from simulador.wizard.states import WizardStep

__all__ = ["FinalizedProposal", "FinancingWizard", "WizardFSM", "WizardStep"]
