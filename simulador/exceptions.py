"""Exceptions raised by the stateful layers (wizard, renderer, backend).

The calculator, formatters and validators never raise: degenerate input maps
to a zero result or to False.
"""

from __future__ import annotations


class SimuladorError(Exception):
    """Base class for simulator errors."""


class InvalidTransitionError(SimuladorError, ValueError):
    """A wizard trigger is not valid from the current step."""


class StepValidationError(SimuladorError):
    """The current step's inputs do not allow advancing."""


class RecordFinalizedError(SimuladorError):
    """The financing record was already signed and persisted."""


class RenderError(SimuladorError):
    """The proposal document could not be rendered."""


class PersistenceError(SimuladorError):
    """Upload or insert against the hosted backend failed."""


class ConfigurationError(SimuladorError):
    """A required setting is missing."""
