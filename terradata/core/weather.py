"""Season weather generator: weekly samples plus occasional extreme events."""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import pandas as pd
from loguru import logger

from terradata.core.errors import InvalidSeasonLength
from terradata.core.models import ExtremeEvent, WeatherSample
from terradata.core.profiles import LocationProfile
from terradata.utils.config import WeatherConfig, settings
from terradata.utils.constants import ExtremeEventKind


@dataclass(frozen=True)
class PrecipitationRegime:
    """Chance of rain in a week and the upper bound of the amount (inches)."""
    probability: float
    max_amount: float


class WeatherGenerator:
    """
    Precomputes a full season of weekly weather.

    Rain follows two regimes: a monsoon wet window with frequent, heavier
    rain and a dry regime elsewhere. Each week independently may carry an
    extreme event.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None, config: WeatherConfig = settings.weather):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.config = config
        self.wet_window = tuple(config.wet_window)
        self.wet = PrecipitationRegime(config.wet_probability, config.wet_max_amount)
        self.dry = PrecipitationRegime(config.dry_probability, config.dry_max_amount)

    def generate_season(self, weeks: int, location: LocationProfile) -> tuple[WeatherSample, ...]:
        if weeks <= 0:
            raise InvalidSeasonLength(weeks)

        season = tuple(self._sample(week, location) for week in range(1, weeks + 1))
        extremes = sum(1 for s in season if s.extreme_event)
        logger.info(f"Generated {weeks}-week season for {location.name}: {extremes} extreme events")
        return season

    def _sample(self, week: int, location: LocationProfile) -> WeatherSample:
        return WeatherSample(
            week=week,
            temperature=self._temperature(week, location),
            precipitation=self._precipitation(week),
            humidity=float(self.rng.uniform(*location.humidity_range)),
            wind_speed=float(self.rng.uniform(*location.wind_range)),
            extreme_event=self._extreme_event(),
        )

    def _temperature(self, week: int, location: LocationProfile) -> float:
        seasonal = location.seasonal_amplitude * math.sin((week - 1) * 2 * math.pi / location.seasonal_period_weeks)
        jitter = (self.rng.random() - 0.5) * location.temperature_jitter
        return location.base_temperature + seasonal + float(jitter)

    def regime_for(self, week: int) -> PrecipitationRegime:
        start, end = self.wet_window
        return self.wet if start <= week <= end else self.dry

    def _precipitation(self, week: int) -> float:
        regime = self.regime_for(week)
        if self.rng.random() < regime.probability:
            return float(self.rng.random() * regime.max_amount)
        return 0.0

    def _extreme_event(self) -> Optional[ExtremeEvent]:
        if self.rng.random() >= self.config.extreme_event_probability:
            return None

        kinds = list(ExtremeEventKind)
        low, high = self.config.extreme_intensity_range
        min_weeks, max_weeks = self.config.extreme_duration_range
        return ExtremeEvent(
            kind=kinds[int(self.rng.integers(len(kinds)))],
            intensity=float(self.rng.uniform(low, high)),
            duration=int(self.rng.integers(min_weeks, max_weeks + 1)),
        )


def neutral_season(
    weeks: int,
    temperature: float = 75.0,
    precipitation: float = 0.1,
    humidity: float = 50.0,
    wind_speed: float = 10.0,
) -> tuple[WeatherSample, ...]:
    """Calm, event-free season used for tutorials and controlled runs."""
    if weeks <= 0:
        raise InvalidSeasonLength(weeks)
    return tuple(
        WeatherSample(week=w, temperature=temperature, precipitation=precipitation, humidity=humidity, wind_speed=wind_speed)
        for w in range(1, weeks + 1)
    )


def season_frame(samples: Sequence[WeatherSample]) -> pd.DataFrame:
    """Season as a table, one row per week."""
    rows = []
    for s in samples:
        event = s.extreme_event
        rows.append({
            "week": s.week,
            "temperature_f": round(s.temperature, 1),
            "precipitation_in": round(s.precipitation, 2),
            "humidity_pct": round(s.humidity, 1),
            "wind_mph": round(s.wind_speed, 1),
            "extreme_event": event.kind.value if event else None,
            "intensity": round(event.intensity, 2) if event else None,
            "duration_weeks": event.duration if event else None,
        })
    return pd.DataFrame(rows, columns=[
        "week", "temperature_f", "precipitation_in", "humidity_pct",
        "wind_mph", "extreme_event", "intensity", "duration_weeks",
    ]).set_index("week")


def forecast(samples: Sequence[WeatherSample], week: int, horizon: int = 6) -> list[WeatherSample]:
    """Samples for the given week (1-based) and up to `horizon` weeks ahead."""
    start = max(0, week - 1)
    return list(samples[start:start + horizon + 1])
