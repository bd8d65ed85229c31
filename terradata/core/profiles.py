"""Crop and location profiles, with extra crops loaded from YAML."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from loguru import logger

from terradata.utils.config import LocationConfig, get_project_root, settings
from terradata.utils.constants import CROP_PROFILES


@dataclass(frozen=True)
class CropProfile:
    """Static per-crop constants."""
    name: str
    water_requirement: float
    nitrogen_requirement: float
    heat_tolerance: float
    growth_rate: float
    maturity_weeks: int
    optimal_vegetation_index: float


@dataclass(frozen=True)
class LocationProfile:
    name: str
    lat: float
    lon: float
    base_temperature: float = 75.0
    seasonal_amplitude: float = 20.0
    seasonal_period_weeks: int = 20
    temperature_jitter: float = 10.0
    humidity_range: tuple[float, float] = (30.0, 70.0)
    wind_range: tuple[float, float] = (5.0, 20.0)

    @classmethod
    def from_config(cls, config: LocationConfig) -> "LocationProfile":
        return cls(**config.model_dump())


def load_yaml(path: Path) -> dict:
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_crop_profiles(path: Optional[Path] = None) -> dict[str, CropProfile]:
    """Built-in crops merged with any defined in config/crops.yaml."""
    raw = {name: dict(params) for name, params in CROP_PROFILES.items()}

    path = path or get_project_root() / "config" / "crops.yaml"
    if path.exists():
        extra = load_yaml(path).get("crops", {})
        raw.update(extra)
        logger.debug(f"Loaded {len(extra)} crop profiles from {path}")

    return {name: CropProfile(name=name, **params) for name, params in raw.items()}


CROPS = load_crop_profiles()


def get_crop(crop_type: str) -> CropProfile:
    """Unknown crop types fall back to corn, as the field defaults to corn."""
    crop = CROPS.get(crop_type)
    if crop is None:
        logger.warning(f"Unknown crop '{crop_type}', using corn")
        return CROPS["corn"]
    return crop


def default_location(config: LocationConfig = settings.location) -> LocationProfile:
    return LocationProfile.from_config(config)
