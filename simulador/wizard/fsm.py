"""Step navigation for the financing wizard.

Only legality of moves lives here. Whether the current step's inputs allow
leaving it is the controller's call.
"""

from __future__ import annotations

import logging
import uuid

from simulador.exceptions import InvalidTransitionError
from simulador.wizard.states import STEP_TITLES, TRANSITIONS, UNIVERSAL_TRANSITIONS, WizardStep

logger = logging.getLogger(__name__)

_STEP_ORDER: tuple[WizardStep, ...] = tuple(WizardStep)


class WizardFSM:
    """Tracks the current step of one wizard session."""

    def __init__(
        self,
        session_id: uuid.UUID,
        initial_step: WizardStep = WizardStep.FINANCIAL,
    ) -> None:
        self.session_id = session_id
        self.current_step = initial_step

    def _target(self, trigger: str) -> WizardStep | None:
        if trigger in UNIVERSAL_TRANSITIONS:
            return UNIVERSAL_TRANSITIONS[trigger]
        return TRANSITIONS[self.current_step].get(trigger)

    def can_transition(self, trigger: str) -> bool:
        return self._target(trigger) is not None

    def get_valid_triggers(self) -> list[str]:
        """Triggers accepted from the current step, step-specific ones first."""
        return [*TRANSITIONS[self.current_step], *UNIVERSAL_TRANSITIONS]

    def transition(self, trigger: str) -> WizardStep:
        """Move to the step the trigger leads to.

        Raises:
            InvalidTransitionError: If the trigger is not accepted here.
        """
        target = self._target(trigger)
        if target is None:
            msg = (
                f"Invalid transition: {self.current_step.value} --{trigger}--> ??? "
                f"(valid: {self.get_valid_triggers()})"
            )
            raise InvalidTransitionError(msg)

        old_step = self.current_step
        self.current_step = target
        logger.info(
            "Wizard step %s --%s--> %s [%d/%d %s] (session=%s)",
            old_step.value,
            trigger,
            target.value,
            self.step_number,
            len(STEP_TITLES),
            self.step_title,
            self.session_id,
        )
        return target

    @property
    def step_title(self) -> str:
        return STEP_TITLES.get(self.current_step, "Concluído")

    @property
    def step_number(self) -> int:
        """1-based position of the current step, for progress display."""
        return _STEP_ORDER.index(self.current_step) + 1

    @property
    def is_terminal(self) -> bool:
        return not TRANSITIONS[self.current_step]
