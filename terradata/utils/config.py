"""Configuration loader for the TerraData simulation core."""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
    log_to_file: bool = False
    rotation: str = "10 MB"
    retention: str = "7 days"


class AppConfig(BaseModel):
    name: str = "terradata"
    version: str = "0.1.0"
    environment: str = "development"
    debug: bool = False


class SimulationConfig(BaseModel):
    max_weeks: int = 20
    grid_size: int = 10
    field_size_acres: float = 100.0
    crop_type: str = "corn"
    water_budget: float = 1000.0
    fertilizer_budget: float = 500.0
    seed: Optional[int] = None
    start_in_tutorial: bool = True


class WeatherConfig(BaseModel):
    wet_window: tuple[int, int] = (8, 12)
    wet_probability: float = 0.4
    wet_max_amount: float = 2.0
    dry_probability: float = 0.1
    dry_max_amount: float = 0.5
    extreme_event_probability: float = 0.15
    extreme_intensity_range: tuple[float, float] = (0.5, 1.0)
    extreme_duration_range: tuple[int, int] = (1, 3)


class InterventionConfig(BaseModel):
    irrigation_cost: float = 25.0
    irrigation_moisture_boost: float = 0.4
    irrigation_vegetation_bonus: float = 0.05
    fertilizer_cost: float = 10.0
    fertilizer_vegetation_boost: float = 0.15
    fertilizer_soil_health_boost: float = 0.02
    fertilizer_stressed_threshold: float = 0.4
    fertilizer_reward: float = 3.0
    fertilizer_penalty: float = -1.0
    fertilizer_horizon_weeks: int = 6


class ScoringConfig(BaseModel):
    healthy_threshold: float = 0.6
    health_weight: float = 50.0
    water_weight: float = 30.0
    time_weight_per_week: float = 2.0
    time_cap: float = 20.0
    win_healthy_fraction: float = 0.6
    win_min_score: float = 50.0


class ObjectivesConfig(BaseModel):
    milestone_score: float = 50.0
    milestone_sustain_weeks: int = 2
    mid_season_week: int = 8
    mid_season_stressed_zones: int = 15
    late_season_week: int = 15
    late_season_water: float = 300.0


class LocationConfig(BaseModel):
    name: str = "Phoenix, AZ"
    lat: float = 33.4484
    lon: float = -112.0740
    base_temperature: float = 75.0
    seasonal_amplitude: float = 20.0
    seasonal_period_weeks: int = 20
    temperature_jitter: float = 10.0
    humidity_range: tuple[float, float] = (30.0, 70.0)
    wind_range: tuple[float, float] = (5.0, 20.0)


class Settings(BaseModel):
    app: AppConfig = AppConfig()
    logging: LoggingConfig = LoggingConfig()
    simulation: SimulationConfig = SimulationConfig()
    weather: WeatherConfig = WeatherConfig()
    interventions: InterventionConfig = InterventionConfig()
    scoring: ScoringConfig = ScoringConfig()
    objectives: ObjectivesConfig = ObjectivesConfig()
    location: LocationConfig = LocationConfig()


def get_project_root() -> Path:
    return Path(__file__).parent.parent.parent


def load_yaml_config(env: str = "development") -> dict[str, Any]:
    config_path = get_project_root() / "config" / "environments" / f"{env}.yaml"
    if not config_path.exists():
        return {}
    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def get_settings(env: Optional[str] = None) -> Settings:
    env = env or os.getenv("APP_ENV", "development")
    yaml_config = load_yaml_config(env)

    # Override with env vars
    if os.getenv("TERRADATA_SEED"):
        yaml_config.setdefault("simulation", {})["seed"] = int(os.getenv("TERRADATA_SEED"))
    if os.getenv("TERRADATA_MAX_WEEKS"):
        yaml_config.setdefault("simulation", {})["max_weeks"] = int(os.getenv("TERRADATA_MAX_WEEKS"))
    if os.getenv("TERRADATA_LOG_LEVEL"):
        yaml_config.setdefault("logging", {})["level"] = os.getenv("TERRADATA_LOG_LEVEL")

    return Settings(**yaml_config) if yaml_config else Settings()


settings = get_settings()
