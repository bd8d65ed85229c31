"""Simulation error taxonomy. All errors are local and recoverable."""

from typing import Optional


class SimulationError(Exception):
    """Base class for simulation errors."""


class InsufficientResource(SimulationError):
    def __init__(self, resource: str, required: float, available: float):
        self.resource = resource
        self.required = required
        self.available = available
        super().__init__(f"Insufficient {resource}: need {required:g}, have {available:g}")


class UnknownZone(SimulationError, KeyError):
    def __init__(self, zone_id):
        self.zone_id = zone_id
        super().__init__(f"Unknown zone: {zone_id}")

    def __str__(self) -> str:
        return self.args[0]


class InvalidSeasonLength(SimulationError, ValueError):
    def __init__(self, weeks: int):
        self.weeks = weeks
        super().__init__(f"Season length must be positive, got {weeks}")


class AlreadyEnded(SimulationError):
    def __init__(self, outcome: Optional[str] = None):
        self.outcome = outcome
        super().__init__(f"Season already ended ({outcome or 'unknown'})")


class InvalidTransition(SimulationError):
    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move from {current} to {target}")
