"""Scenario objectives: one-shot predicates evaluated after every tick."""

from dataclasses import dataclass
from typing import Callable

from loguru import logger

from terradata.core.models import Notification
from terradata.utils.config import ObjectivesConfig, settings
from terradata.utils.constants import GameMode


@dataclass(frozen=True)
class ObjectiveContext:
    """What objectives can see of the engine after a tick."""
    week: int
    sustainability_score: float
    score_streak: int
    stressed_zones: int
    water_budget: float
    irrigations: int
    game_mode: GameMode


@dataclass(frozen=True)
class Objective:
    key: str
    predicate: Callable[[ObjectiveContext], bool]
    action: Callable[[ObjectiveContext], Notification]


class ScenarioEvaluator:
    """Fires each objective at most once per season."""

    def __init__(self, objectives: list[Objective], milestone_score: float = 50.0):
        self.objectives = list(objectives)
        self.milestone_score = milestone_score
        self.fired: set[str] = set()
        self.score_streak = 0

    def track_score(self, score: float) -> int:
        """Count consecutive evaluations with the score above the milestone."""
        self.score_streak = self.score_streak + 1 if score > self.milestone_score else 0
        return self.score_streak

    def evaluate(self, context: ObjectiveContext) -> list[Notification]:
        notifications = []
        for objective in self.objectives:
            if objective.key in self.fired:
                continue
            if objective.predicate(context):
                self.fired.add(objective.key)
                notification = objective.action(context)
                logger.info(f"Objective '{objective.key}' reached at week {context.week}")
                notifications.append(notification)
        return notifications

    def reset(self) -> None:
        self.fired.clear()
        self.score_streak = 0


def default_objectives(config: ObjectivesConfig = settings.objectives) -> list[Objective]:
    return [
        Objective(
            key="first_irrigation",
            predicate=lambda ctx: ctx.irrigations > 0,
            action=lambda ctx: Notification(
                "first_irrigation", ctx.week,
                "Excellent! You've applied precision irrigation. Next stage unlocked: watch how water use affects crop health.",
            ),
        ),
        Objective(
            key="sustainability_milestone",
            predicate=lambda ctx: ctx.score_streak >= config.milestone_sustain_weeks,
            action=lambda ctx: Notification(
                "sustainability_milestone", ctx.week,
                f"Sustainability above {config.milestone_score:g} - you've learned the basics of data-driven farming!",
            ),
        ),
        Objective(
            key="mid_season_check",
            predicate=lambda ctx: ctx.week == config.mid_season_week and ctx.stressed_zones > config.mid_season_stressed_zones,
            action=lambda ctx: Notification(
                "mid_season_check", ctx.week,
                f"Mid-season check: {ctx.stressed_zones} zones are stressed. Use the satellite data to find the root causes.",
            ),
        ),
        Objective(
            key="late_season_water",
            predicate=lambda ctx: ctx.week == config.late_season_week and ctx.water_budget < config.late_season_water,
            action=lambda ctx: Notification(
                "late_season_water", ctx.week,
                "Water is running low for the late season. Focus on the most productive zones.",
            ),
        ),
    ]
