"""Project-wide constants."""

from enum import Enum


class StressLevel(str, Enum):
    NONE = "none"
    MODERATE = "moderate"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return STRESS_RANK[self]


STRESS_RANK = {StressLevel.NONE: 0, StressLevel.MODERATE: 1, StressLevel.HIGH: 2}


class ExtremeEventKind(str, Enum):
    HEATWAVE = "heatwave"
    DROUGHT = "drought"
    FLOODING = "flooding"
    HAIL = "hail"
    WINDSTORM = "windstorm"


class ToolKind(str, Enum):
    INSPECT = "inspect"
    IRRIGATE = "irrigate"
    FERTILIZE = "fertilize"


class Resource(str, Enum):
    WATER = "water"
    FERTILIZER = "fertilizer"


class GameMode(str, Enum):
    TUTORIAL = "tutorial"
    NORMAL = "normal"


class Phase(str, Enum):
    TUTORIAL = "tutorial"
    NORMAL = "normal"
    PAUSED = "paused"
    ENDED = "ended"


class Outcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class FailureReason(str, Enum):
    LOW_CROP_HEALTH = "low_crop_health"
    WATER_OVERSPENT = "water_overspent"
    LOW_SUSTAINABILITY = "low_sustainability"


VEGETATION_BOUNDS = (0.1, 1.0)
MOISTURE_BOUNDS = (0.05, 1.0)

# Stress classification
WATER_STRESS_MOISTURE = 0.3
HEALTH_STRESS_VEGETATION = 0.4
HIGH_STRESS_CUTOFF = 0.6
MODERATE_STRESS_CUTOFF = 0.3

PRODUCTIVITY_STRESS_FACTOR = {
    StressLevel.NONE: 1.0,
    StressLevel.MODERATE: 0.8,
    StressLevel.HIGH: 0.6,
}

GROWTH_STRESS_FACTOR = {
    StressLevel.NONE: 1.0,
    StressLevel.MODERATE: 0.7,
    StressLevel.HIGH: 0.3,
}

# Weather effect thresholds (Fahrenheit, inches, mph)
HEAT_THRESHOLD_F = 95.0
COLD_THRESHOLD_F = 60.0
WIND_THRESHOLD_MPH = 15.0
WET_SOIL_BONUS_MOISTURE = 0.4

WEATHER_EFFECTS = {
    "heat": {"span": 20.0, "max_intensity": 0.3, "vegetation": 0.1, "moisture": 0.15},
    "cold": {"span": 20.0, "max_intensity": 0.2, "vegetation": 0.05},
    "rain": {"divisor": 2.0, "max_moisture": 0.3, "vegetation": 0.02},
    "wind": {"span": 50.0, "max_loss": 0.1},
}

GROWTH_MOISTURE_FACTOR = {"dry_below": 0.3, "dry": 0.5, "wet_above": 0.7, "wet": 0.8}

NATURAL_STRESSORS = {
    "soil_health_decay": 0.01,
    "pest_pressure_growth": 0.005,
    "base_moisture_loss": 0.05,
    "canopy_moisture_loss": 0.03,
    "pest_damage": 0.02,
    "wilting_moisture": 0.3,
    "wilting_loss": 0.05,
}

# Fertilizer growth bonus by weeks since application: (max_weeks, bonus)
FERTILIZER_DECAY = [(2, 0.02), (4, 0.01)]

EXTREME_EVENT_EFFECTS = {
    ExtremeEventKind.HEATWAVE: {"vegetation": 0.2, "moisture": 0.3},
    ExtremeEventKind.DROUGHT: {"moisture": 0.3, "critical_moisture": 0.2, "vegetation_loss": 0.1},
    ExtremeEventKind.FLOODING: {"saturated_moisture": 0.8, "vegetation_loss": 0.05},
    ExtremeEventKind.HAIL: {"vegetation": 0.15},
    ExtremeEventKind.WINDSTORM: {"moisture": 0.1},
}

INITIAL_FIELD_CONDITIONS = {
    "soil_health": 0.7,
    "pest_pressure": 0.2,
    "weather_stress": 0.0,
    "season_progress": 0.0,
}

ZONE_CELL = {"width": 80, "height": 60}
DEFAULT_ZONE_RANGES = {"vegetation": (0.3, 0.7), "moisture": (0.2, 0.5)}

CROP_PROFILES = {
    "corn": {
        "water_requirement": 0.4,
        "nitrogen_requirement": 0.3,
        "heat_tolerance": 0.6,
        "growth_rate": 0.05,
        "maturity_weeks": 16,
        "optimal_vegetation_index": 0.75,
    },
}

RECOMMENDATION_RULES = {
    "stressed_zones": 10,
    "water_budget": 200.0,
    "soil_health": 0.6,
}
