"""Tests for wizard step transitions.

Covers: forward path, going back, restart from anywhere, invalid triggers,
terminal step.
"""

from __future__ import annotations

import logging
import uuid

import pytest

from simulador.exceptions import InvalidTransitionError
from simulador.wizard.fsm import WizardFSM
from simulador.wizard.states import STEP_TITLES, TRANSITIONS, UNIVERSAL_TRANSITIONS, WizardStep


@pytest.fixture()
def make_fsm():
    """Factory to create an FSM at a given step."""
    def _make(step: WizardStep = WizardStep.FINANCIAL) -> WizardFSM:
        return WizardFSM(session_id=uuid.uuid4(), initial_step=step)
    return _make


class TestForwardPath:
    def test_full_path(self, make_fsm):
        fsm = make_fsm()

        assert fsm.transition("next") == WizardStep.PERSONAL
        assert fsm.transition("next") == WizardStep.CONFIRMATION
        assert fsm.transition("next") == WizardStep.SIGNATURE
        assert fsm.transition("signed") == WizardStep.COMPLETED
        assert fsm.is_terminal is True

    def test_step_number(self, make_fsm):
        fsm = make_fsm(WizardStep.CONFIRMATION)
        assert fsm.step_number == 3


class TestBackward:
    def test_previous(self, make_fsm):
        fsm = make_fsm(WizardStep.SIGNATURE)
        fsm.transition("previous")
        assert fsm.current_step == WizardStep.CONFIRMATION

    def test_no_previous_from_first_step(self, make_fsm):
        fsm = make_fsm()
        with pytest.raises(InvalidTransitionError):
            fsm.transition("previous")
        assert fsm.current_step == WizardStep.FINANCIAL


class TestRestart:
    @pytest.mark.parametrize("step", list(WizardStep))
    def test_restart_from_any_step(self, make_fsm, step):
        fsm = make_fsm(step)
        assert fsm.can_transition("restart") is True
        assert fsm.transition("restart") == WizardStep.FINANCIAL


class TestInvalidTriggers:
    def test_unknown_trigger(self, make_fsm):
        fsm = make_fsm()
        with pytest.raises(InvalidTransitionError, match="Invalid transition"):
            fsm.transition("jump")

    def test_invalid_transition_is_value_error(self, make_fsm):
        fsm = make_fsm()
        with pytest.raises(ValueError):
            fsm.transition("signed")

    def test_completed_is_terminal(self, make_fsm):
        fsm = make_fsm(WizardStep.COMPLETED)
        assert fsm.can_transition("next") is False
        assert fsm.get_valid_triggers() == list(UNIVERSAL_TRANSITIONS)


class TestTransitionMap:
    def test_every_step_has_an_entry(self):
        assert set(TRANSITIONS) == set(WizardStep)

    def test_titles_for_visible_steps(self):
        assert STEP_TITLES[WizardStep.FINANCIAL] == "Dados Financeiros"
        assert WizardStep.COMPLETED not in STEP_TITLES


class TestStepInfo:
    def test_title_follows_current_step(self, make_fsm):
        fsm = make_fsm()
        assert fsm.step_title == "Dados Financeiros"
        fsm.transition("next")
        assert fsm.step_title == "Dados Pessoais"

    def test_completed_title(self, make_fsm):
        assert make_fsm(WizardStep.COMPLETED).step_title == "Concluído"

    def test_transition_logs_position(self, make_fsm, caplog):
        fsm = make_fsm(WizardStep.PERSONAL)
        with caplog.at_level(logging.INFO, logger="simulador.wizard.fsm"):
            fsm.transition("next")
        assert "[3/4 Confirmação]" in caplog.text
