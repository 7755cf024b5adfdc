from __future__ import annotations


class SimulationError(Exception):
    """Base class for errors surfaced to the operator of a simulation."""


class InvalidOperation(SimulationError):
    """Raised when an operation needs a process set and none is loaded."""


class ConfigurationConflict(UserWarning):
    """Warned when a setting contradicts the chosen algorithm and is overridden."""
