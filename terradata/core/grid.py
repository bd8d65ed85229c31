"""Zone grid: owns the field's zones and their derived values."""

from typing import Callable, Iterable, Iterator, Optional

import numpy as np
import pandas as pd
from loguru import logger

from terradata.core.errors import UnknownZone
from terradata.core.models import Zone, ZoneId, zone_key
from terradata.data_sources.satellite import SatelliteProvider, SyntheticSatelliteProvider
from terradata.utils.constants import (
    HEALTH_STRESS_VEGETATION,
    HIGH_STRESS_CUTOFF,
    MODERATE_STRESS_CUTOFF,
    PRODUCTIVITY_STRESS_FACTOR,
    WATER_STRESS_MOISTURE,
    ZONE_CELL,
    StressLevel,
)


def classify_stress(soil_moisture: float, vegetation_index: float) -> StressLevel:
    """Stress from whichever of water or canopy health is worse."""
    water = (WATER_STRESS_MOISTURE - soil_moisture) / WATER_STRESS_MOISTURE if soil_moisture < WATER_STRESS_MOISTURE else 0.0
    health = (HEALTH_STRESS_VEGETATION - vegetation_index) / HEALTH_STRESS_VEGETATION if vegetation_index < HEALTH_STRESS_VEGETATION else 0.0
    overall = max(water, health)

    if overall > HIGH_STRESS_CUTOFF:
        return StressLevel.HIGH
    if overall > MODERATE_STRESS_CUTOFF:
        return StressLevel.MODERATE
    return StressLevel.NONE


def recompute_derived(zone: Zone, soil_health: float) -> None:
    """Refresh stress level and productivity from the zone's current values."""
    level = classify_stress(zone.soil_moisture, zone.vegetation_index)
    if zone.stress_floor is not None and zone.stress_floor.rank > level.rank:
        level = zone.stress_floor
    zone.stress_level = level
    zone.productivity = zone.vegetation_index * 100 * PRODUCTIVITY_STRESS_FACTOR[level] * soil_health


class ZoneGrid:
    """Fixed-size collection of zones keyed by grid coordinate."""

    def __init__(self, zones: Iterable[Zone]):
        self._zones: dict[ZoneId, Zone] = {}
        for zone in zones:
            self._zones[zone.zone_id] = zone

    @classmethod
    def generate(
        cls,
        size: int,
        rng: Optional[np.random.Generator] = None,
        provider: Optional[SatelliteProvider] = None,
    ) -> "ZoneGrid":
        """Build a size x size grid seeded from one-shot satellite readings."""
        provider = provider or SyntheticSatelliteProvider(rng)
        zones = []
        for x in range(size):
            for y in range(size):
                reading = provider.reading((x, y))
                zones.append(Zone(
                    zone_id=(x, y),
                    x=x * ZONE_CELL["width"],
                    y=y * ZONE_CELL["height"],
                    width=ZONE_CELL["width"],
                    height=ZONE_CELL["height"],
                    vegetation_index=reading.ndvi,
                    soil_moisture=reading.soil_moisture,
                ))
        logger.debug(f"Generated {len(zones)} zones ({size}x{size})")
        return cls(zones)

    def __len__(self) -> int:
        return len(self._zones)

    def __iter__(self) -> Iterator[Zone]:
        return iter(self._zones.values())

    def __contains__(self, zone_id) -> bool:
        return zone_id in self._zones

    @property
    def zone_ids(self) -> list[ZoneId]:
        return list(self._zones)

    def get(self, zone_id: ZoneId) -> Zone:
        try:
            return self._zones[zone_id]
        except KeyError:
            raise UnknownZone(zone_id) from None

    def resolve(self, zone_ids: Iterable[ZoneId]) -> list[Zone]:
        """Known zones for the given ids, de-duplicated, unknown ids dropped."""
        seen = set()
        resolved = []
        for zone_id in zone_ids:
            if zone_id in seen:
                continue
            seen.add(zone_id)
            zone = self._zones.get(zone_id)
            if zone is None:
                logger.debug(f"Ignoring unknown zone {zone_id}")
                continue
            resolved.append(zone)
        return resolved

    def zones_matching(self, predicate: Callable[[Zone], bool]) -> Iterator[Zone]:
        return (zone for zone in self._zones.values() if predicate(zone))

    def apply_to(self, zone_ids: Iterable[ZoneId], fn: Callable[[Zone], None]) -> list[Zone]:
        zones = self.resolve(zone_ids)
        for zone in zones:
            fn(zone)
        return zones

    def recompute_all(self, soil_health: float) -> None:
        for zone in self._zones.values():
            recompute_derived(zone, soil_health)

    def stressed_zones(self) -> list[Zone]:
        return list(self.zones_matching(lambda z: z.is_stressed))

    def healthy_fraction(self, threshold: float = 0.6) -> float:
        if not self._zones:
            return 0.0
        healthy = sum(1 for _ in self.zones_matching(lambda z: z.vegetation_index > threshold))
        return healthy / len(self._zones)

    def mean_productivity(self) -> float:
        if not self._zones:
            return 0.0
        return float(np.mean([z.productivity for z in self._zones.values()]))

    def to_frame(self) -> pd.DataFrame:
        df = pd.DataFrame([z.to_dict() for z in self._zones.values()])
        return df.set_index("id") if not df.empty else df

    def summary(self) -> dict:
        levels = [z.stress_level for z in self._zones.values()]
        return {
            "zones": len(self._zones),
            "stressed": sum(1 for s in levels if s != StressLevel.NONE),
            "high_stress": sum(1 for s in levels if s == StressLevel.HIGH),
            "healthy_fraction": round(self.healthy_fraction(), 3),
            "mean_ndvi": round(float(np.mean([z.vegetation_index for z in self._zones.values()])), 3) if self._zones else 0.0,
        }

    def describe(self, zone_id: ZoneId) -> str:
        zone = self.get(zone_id)
        return f"{zone_key(zone_id)}: NDVI {zone.vegetation_index:.2f}, moisture {zone.soil_moisture:.2f}, {zone.stress_level.value}"
