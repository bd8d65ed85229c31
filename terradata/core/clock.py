"""Simulation clock: week counter and game phase state machine."""

from typing import Optional

from loguru import logger

from terradata.core.errors import AlreadyEnded, InvalidTransition
from terradata.core.models import GameOutcome
from terradata.utils.constants import GameMode, Phase


class SimulationClock:
    """
    Tracks the current week and the game phase.

    Phases: TUTORIAL -> NORMAL (onboarding done), NORMAL <-> PAUSED,
    TUTORIAL/NORMAL -> ENDED once the season runs out.
    """

    def __init__(self, max_weeks: int, start_in_tutorial: bool = True):
        self.max_weeks = max_weeks
        self.current_week = 0
        self.phase = Phase.TUTORIAL if start_in_tutorial else Phase.NORMAL
        self.game_mode = GameMode.TUTORIAL if start_in_tutorial else GameMode.NORMAL
        self.outcome: Optional[GameOutcome] = None
        self._resume_phase: Optional[Phase] = None

    @property
    def is_paused(self) -> bool:
        return self.phase == Phase.PAUSED

    @property
    def is_ended(self) -> bool:
        return self.phase == Phase.ENDED

    @property
    def can_advance(self) -> bool:
        return self.phase in (Phase.TUTORIAL, Phase.NORMAL)

    @property
    def season_over(self) -> bool:
        return self.current_week >= self.max_weeks

    def complete_tutorial(self) -> None:
        if self.is_ended:
            raise InvalidTransition(self.phase.value, Phase.NORMAL.value)
        if self.game_mode == GameMode.NORMAL:
            return

        self.game_mode = GameMode.NORMAL
        if self.phase == Phase.TUTORIAL:
            self.phase = Phase.NORMAL
        else:
            self._resume_phase = Phase.NORMAL
        logger.info("Tutorial complete")

    def toggle_pause(self) -> bool:
        """Flip between paused and running. Returns the new paused state."""
        if self.is_ended:
            raise AlreadyEnded(self.outcome.outcome.value if self.outcome else None)

        if self.is_paused:
            self.phase = self._resume_phase or Phase.NORMAL
            self._resume_phase = None
        else:
            self._resume_phase = self.phase
            self.phase = Phase.PAUSED
        logger.info(f"Simulation {'paused' if self.is_paused else 'resumed'} at week {self.current_week}")
        return self.is_paused

    def tick(self) -> int:
        if not self.can_advance:
            raise InvalidTransition(self.phase.value, "advance")
        self.current_week += 1
        return self.current_week

    def end(self, outcome: GameOutcome) -> None:
        if self.is_ended:
            raise AlreadyEnded(self.outcome.outcome.value if self.outcome else None)
        self.outcome = outcome
        self.phase = Phase.ENDED
        logger.info(f"Season ended at week {self.current_week}: {outcome.outcome.value}")
