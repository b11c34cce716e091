"""Wizard step definitions and transition map.

The controller asks the FSM which moves are legal; step gates (validation)
are checked by the controller before a "next" trigger is fired.
"""

from __future__ import annotations

from enum import Enum


class WizardStep(str, Enum):
    """Screens of the financing wizard, in order."""

    FINANCIAL = "financial"
    PERSONAL = "personal"
    CONFIRMATION = "confirmation"
    SIGNATURE = "signature"
    COMPLETED = "completed"


# Transition map: {current_step: {trigger_name: next_step}}
TRANSITIONS: dict[WizardStep, dict[str, WizardStep]] = {
    WizardStep.FINANCIAL: {
        "next": WizardStep.PERSONAL,
    },
    WizardStep.PERSONAL: {
        "next": WizardStep.CONFIRMATION,
        "previous": WizardStep.FINANCIAL,
    },
    WizardStep.CONFIRMATION: {
        "next": WizardStep.SIGNATURE,
        "previous": WizardStep.PERSONAL,
    },
    WizardStep.SIGNATURE: {
        "signed": WizardStep.COMPLETED,
        "previous": WizardStep.CONFIRMATION,
    },
    WizardStep.COMPLETED: {},
}

# A new simulation can be started from anywhere
UNIVERSAL_TRANSITIONS: dict[str, WizardStep] = {
    "restart": WizardStep.FINANCIAL,
}

STEP_TITLES: dict[WizardStep, str] = {
    WizardStep.FINANCIAL: "Dados Financeiros",
    WizardStep.PERSONAL: "Dados Pessoais",
    WizardStep.CONFIRMATION: "Confirmação",
    WizardStep.SIGNATURE: "Assinatura",
}
