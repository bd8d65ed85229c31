"""Satellite readings used to seed zone values at season start."""

from dataclasses import dataclass
from typing import Optional, Protocol

import numpy as np

from terradata.utils.constants import DEFAULT_ZONE_RANGES


@dataclass(frozen=True)
class SatelliteReading:
    """Satellite-derived observation for one zone."""
    ndvi: float
    soil_moisture: float
    source: str = "synthetic"


class SatelliteProvider(Protocol):
    def reading(self, zone_id: tuple[int, int]) -> SatelliteReading:
        ...


class SyntheticSatelliteProvider:
    """Uniform draws in the ranges a fresh corn field shows early season."""

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        ndvi_range: tuple[float, float] = DEFAULT_ZONE_RANGES["vegetation"],
        moisture_range: tuple[float, float] = DEFAULT_ZONE_RANGES["moisture"],
    ):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.ndvi_range = ndvi_range
        self.moisture_range = moisture_range

    def reading(self, zone_id: tuple[int, int]) -> SatelliteReading:
        return SatelliteReading(
            ndvi=round(float(self.rng.uniform(*self.ndvi_range)), 3),
            soil_moisture=round(float(self.rng.uniform(*self.moisture_range)), 3),
            source=str(self.rng.choice(["Sentinel-2", "MODIS", "Landsat-8"])),
        )


class UniformSatelliteProvider:
    """Same reading everywhere; used for controlled scenarios."""

    def __init__(self, ndvi: float, soil_moisture: float):
        self._reading = SatelliteReading(ndvi=ndvi, soil_moisture=soil_moisture, source="uniform")

    def reading(self, zone_id: tuple[int, int]) -> SatelliteReading:
        return self._reading
