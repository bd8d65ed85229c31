"""Sustainability scoring and end-of-season outcome."""

from terradata.core.grid import ZoneGrid
from terradata.core.ledger import ResourceLedger
from terradata.core.models import GameOutcome, clamp
from terradata.utils.config import ScoringConfig, settings
from terradata.utils.constants import FailureReason, Outcome


class SustainabilityScorer:
    """
    Score = 50 x healthy fraction + 30 x unused water fraction + time bonus,
    plus the running fertilizer adjustment, clamped to [0, 100].

    Always computed from current state; calling it twice on the same state
    gives the same number.
    """

    def __init__(self, config: ScoringConfig = settings.scoring):
        self.config = config

    def components(self, grid: ZoneGrid, ledger: ResourceLedger, week: int) -> dict:
        healthy = grid.healthy_fraction(self.config.healthy_threshold)
        return {
            "crop_health": self.config.health_weight * healthy,
            "water_conservation": self.config.water_weight * (1 - ledger.water_used_fraction),
            "time": min(self.config.time_cap, week * self.config.time_weight_per_week),
        }

    def score(self, grid: ZoneGrid, ledger: ResourceLedger, week: int, adjustment: float = 0.0) -> float:
        return clamp(sum(self.components(grid, ledger, week).values()) + adjustment, 0.0, 100.0)

    def evaluate_outcome(self, grid: ZoneGrid, ledger: ResourceLedger, week: int, score: float) -> GameOutcome:
        """Success needs healthy crops, water within budget and a passing score."""
        healthy = grid.healthy_fraction(self.config.healthy_threshold)
        failures = []
        if healthy < self.config.win_healthy_fraction:
            failures.append(FailureReason.LOW_CROP_HEALTH)
        if ledger.water_used > ledger.initial_water_budget:
            failures.append(FailureReason.WATER_OVERSPENT)
        if score < self.config.win_min_score:
            failures.append(FailureReason.LOW_SUSTAINABILITY)

        return GameOutcome(
            outcome=Outcome.FAILURE if failures else Outcome.SUCCESS,
            week=week,
            healthy_fraction=healthy,
            water_used=ledger.water_used,
            sustainability_score=score,
            failures=tuple(failures),
        )
