"""Season summaries, yield projection and end-of-season advice."""

from dataclasses import dataclass, field
from typing import Optional

from terradata.core.grid import ZoneGrid
from terradata.core.models import GameOutcome
from terradata.core.profiles import CropProfile
from terradata.utils.constants import RECOMMENDATION_RULES


@dataclass
class YieldProjection:
    current_projection: float
    potential_max: float
    efficiency_rating: float


@dataclass
class SeasonSummary:
    week: int
    max_weeks: int
    crop: str
    crop_health_pct: float
    water_efficiency_pct: float
    water_used: float
    fertilizer_used: float
    sustainability_score: float
    soil_health: float
    yield_projection: YieldProjection
    stressed_zones: int
    extreme_events: list = field(default_factory=list)
    recommendations: list = field(default_factory=list)
    outcome: Optional[GameOutcome] = None


def predict_yield(grid: ZoneGrid, crop: CropProfile, field_size: float) -> YieldProjection:
    mean_productivity = grid.mean_productivity()
    potential_per_acre = crop.optimal_vegetation_index * 100
    return YieldProjection(
        current_projection=round(mean_productivity * field_size, 1),
        potential_max=round(potential_per_acre * field_size, 1),
        efficiency_rating=round(mean_productivity / potential_per_acre, 3) if potential_per_acre else 0.0,
    )


def recommendations(stressed_zones: int, water_budget: float, soil_health: float) -> list[str]:
    advice = []
    if stressed_zones > RECOMMENDATION_RULES["stressed_zones"]:
        advice.append("Consider more frequent monitoring of NDVI data to catch stress early")
    if water_budget < RECOMMENDATION_RULES["water_budget"]:
        advice.append("Implement more precise irrigation targeting to conserve water")
    if soil_health < RECOMMENDATION_RULES["soil_health"]:
        advice.append("Consider crop rotation and soil amendment strategies for next season")
    return advice


def season_summary(simulation) -> SeasonSummary:
    """Summarize a Simulation at its current week."""
    grid = simulation.grid
    ledger = simulation.ledger
    stressed = len(grid.stressed_zones())
    healthy = grid.healthy_fraction(simulation.config.scoring.healthy_threshold)
    played = simulation.weather[:simulation.current_week]

    return SeasonSummary(
        week=simulation.current_week,
        max_weeks=simulation.max_weeks,
        crop=simulation.crop.name,
        crop_health_pct=round(healthy * 100, 1),
        water_efficiency_pct=round((1 - ledger.water_used_fraction) * 100, 1),
        water_used=ledger.water_used,
        fertilizer_used=ledger.fertilizer_used,
        sustainability_score=round(simulation.sustainability_score, 1),
        soil_health=round(simulation.field.soil_health, 3),
        yield_projection=predict_yield(grid, simulation.crop, simulation.config.simulation.field_size_acres),
        stressed_zones=stressed,
        extreme_events=[
            f"Week {s.week}: {s.extreme_event.kind.value} ({s.extreme_event.intensity:.2f})"
            for s in played if s.extreme_event
        ],
        recommendations=recommendations(stressed, ledger.water_budget, simulation.field.soil_health),
        outcome=simulation.outcome,
    )
