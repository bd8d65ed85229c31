"""Data models for the farm simulation."""

from dataclasses import dataclass, field
from typing import Optional

from terradata.utils.constants import (
    MOISTURE_BOUNDS,
    VEGETATION_BOUNDS,
    ExtremeEventKind,
    FailureReason,
    GameMode,
    Outcome,
    Phase,
    StressLevel,
    ToolKind,
)

ZoneId = tuple[int, int]


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def zone_key(zone_id: ZoneId) -> str:
    return f"zone_{zone_id[0]}_{zone_id[1]}"


@dataclass
class Zone:
    """One land parcel. Vegetation and moisture are clamped on every assignment."""
    zone_id: ZoneId
    x: float = 0.0
    y: float = 0.0
    width: float = 80.0
    height: float = 60.0
    vegetation_index: float = 0.5
    soil_moisture: float = 0.4
    stress_level: StressLevel = StressLevel.NONE
    has_irrigation: bool = False
    has_fertilizer: bool = False
    fertilizer_applied_week: Optional[int] = None
    productivity: float = 0.0
    stress_floor: Optional[StressLevel] = None

    def __setattr__(self, name, value):
        if name == "vegetation_index":
            value = clamp(float(value), *VEGETATION_BOUNDS)
        elif name == "soil_moisture":
            value = clamp(float(value), *MOISTURE_BOUNDS)
        object.__setattr__(self, name, value)

    @property
    def is_stressed(self) -> bool:
        return self.stress_level != StressLevel.NONE

    def to_dict(self) -> dict:
        return {
            "id": zone_key(self.zone_id),
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "ndvi": round(self.vegetation_index, 4),
            "soil_moisture": round(self.soil_moisture, 4),
            "stress_level": self.stress_level.value,
            "has_irrigation": self.has_irrigation,
            "has_fertilizer": self.has_fertilizer,
            "fertilizer_applied_week": self.fertilizer_applied_week,
            "productivity": round(self.productivity, 2),
        }


@dataclass(frozen=True)
class ExtremeEvent:
    kind: ExtremeEventKind
    intensity: float
    duration: int

    def to_dict(self) -> dict:
        return {"type": self.kind.value, "intensity": round(self.intensity, 3), "duration": self.duration}


@dataclass(frozen=True)
class WeatherSample:
    """One week's climate draw (Fahrenheit, inches, percent, mph)."""
    week: int
    temperature: float
    precipitation: float
    humidity: float
    wind_speed: float
    extreme_event: Optional[ExtremeEvent] = None

    def to_dict(self) -> dict:
        return {
            "week": self.week,
            "temperature": round(self.temperature, 1),
            "precipitation": round(self.precipitation, 2),
            "humidity": round(self.humidity, 1),
            "wind_speed": round(self.wind_speed, 1),
            "extreme_event": self.extreme_event.to_dict() if self.extreme_event else None,
        }


@dataclass
class FieldConditions:
    """Field-wide state shared by every zone."""
    soil_health: float = 0.7
    pest_pressure: float = 0.2
    weather_stress: float = 0.0
    season_progress: float = 0.0

    def to_dict(self) -> dict:
        return {
            "soil_health": round(self.soil_health, 4),
            "pest_pressure": round(self.pest_pressure, 4),
            "weather_stress": round(self.weather_stress, 4),
            "season_progress": round(self.season_progress, 4),
        }


@dataclass(frozen=True)
class DeferredEffect:
    """Plant response realized at the next tick boundary."""
    zone_id: ZoneId
    vegetation_bonus: float
    scheduled_week: int


@dataclass(frozen=True)
class LedgerSnapshot:
    water_budget: float
    fertilizer_budget: float
    initial_water_budget: float
    initial_fertilizer_budget: float

    @property
    def water_used(self) -> float:
        return self.initial_water_budget - self.water_budget

    def to_dict(self) -> dict:
        return {
            "water_budget": self.water_budget,
            "fertilizer_budget": self.fertilizer_budget,
            "initial_water_budget": self.initial_water_budget,
            "initial_fertilizer_budget": self.initial_fertilizer_budget,
            "water_used": self.water_used,
        }


@dataclass(frozen=True)
class Notification:
    """One-shot message emitted by an objective."""
    key: str
    week: int
    message: str


@dataclass(frozen=True)
class GameOutcome:
    outcome: Outcome
    week: int
    healthy_fraction: float
    water_used: float
    sustainability_score: float
    failures: tuple[FailureReason, ...] = ()

    @property
    def succeeded(self) -> bool:
        return self.outcome == Outcome.SUCCESS

    def to_dict(self) -> dict:
        return {
            "outcome": self.outcome.value,
            "week": self.week,
            "healthy_fraction": round(self.healthy_fraction, 4),
            "water_used": self.water_used,
            "sustainability_score": round(self.sustainability_score, 2),
            "failures": [f.value for f in self.failures],
        }


@dataclass(frozen=True)
class InterventionResult:
    success: bool
    tool: ToolKind
    zone_ids: tuple[ZoneId, ...]
    cost: float
    ledger: LedgerSnapshot
    sustainability_delta: float = 0.0
    error: Optional[Exception] = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "tool": self.tool.value,
            "zones": [zone_key(z) for z in self.zone_ids],
            "cost": self.cost,
            "sustainability_delta": self.sustainability_delta,
            "ledger": self.ledger.to_dict(),
            "error": str(self.error) if self.error else None,
        }


@dataclass(frozen=True)
class TickSummary:
    week: int
    sustainability_score: float
    weather: WeatherSample
    newly_stressed: tuple[ZoneId, ...] = ()
    extreme_event: Optional[ExtremeEvent] = None
    notifications: tuple[Notification, ...] = ()
    outcome: Optional[GameOutcome] = None

    def to_dict(self) -> dict:
        return {
            "week": self.week,
            "sustainability_score": round(self.sustainability_score, 2),
            "weather": self.weather.to_dict(),
            "newly_stressed": [zone_key(z) for z in self.newly_stressed],
            "extreme_event": self.extreme_event.to_dict() if self.extreme_event else None,
            "notifications": [n.message for n in self.notifications],
            "outcome": self.outcome.to_dict() if self.outcome else None,
        }


@dataclass(frozen=True)
class SimulationState:
    """Read-only view of the engine for renderers."""
    current_week: int
    max_weeks: int
    sustainability_score: float
    game_mode: GameMode
    phase: Phase
    is_paused: bool
    crop_type: str
    zones: tuple[Zone, ...]
    ledger: LedgerSnapshot
    field: FieldConditions
    outcome: Optional[GameOutcome] = None
    metadata: dict = field(default_factory=dict)
