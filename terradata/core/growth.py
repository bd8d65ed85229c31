"""
Growth & stress model: the per-zone transition for one weekly tick.

Effects are not commutative, so `tick_zone` applies them in a fixed order:
weather, growth, natural stressors, derived recompute, then the extreme
event handler for the week (if any).
"""

from typing import Optional

from terradata.core.grid import recompute_derived
from terradata.core.models import ExtremeEvent, FieldConditions, WeatherSample, Zone, clamp
from terradata.core.profiles import CropProfile
from terradata.utils.constants import (
    COLD_THRESHOLD_F,
    EXTREME_EVENT_EFFECTS,
    FERTILIZER_DECAY,
    GROWTH_MOISTURE_FACTOR,
    GROWTH_STRESS_FACTOR,
    HEAT_THRESHOLD_F,
    NATURAL_STRESSORS,
    WEATHER_EFFECTS,
    WET_SOIL_BONUS_MOISTURE,
    WIND_THRESHOLD_MPH,
    ExtremeEventKind,
    StressLevel,
)


# ============ FIELD-LEVEL STRESSORS ============

def advance_field(field: FieldConditions, weather: WeatherSample, crop: CropProfile, week: Optional[int] = None) -> None:
    """Once-per-tick field updates: soil depletion, pests, weather stress, progress."""
    week = weather.week if week is None else week
    field.soil_health = clamp(field.soil_health - NATURAL_STRESSORS["soil_health_decay"], 0.0, 1.0)
    field.pest_pressure += NATURAL_STRESSORS["pest_pressure_growth"]

    if weather.temperature > HEAT_THRESHOLD_F:
        field.weather_stress += 0.1
    elif weather.temperature < COLD_THRESHOLD_F:
        field.weather_stress += 0.05

    field.season_progress = min(1.0, week / crop.maturity_weeks)


# ============ STEP 1: WEATHER ============

def heat_intensity(temperature: float) -> float:
    heat = WEATHER_EFFECTS["heat"]
    return min(heat["max_intensity"], (temperature - HEAT_THRESHOLD_F) / heat["span"])


def cold_intensity(temperature: float) -> float:
    cold = WEATHER_EFFECTS["cold"]
    return min(cold["max_intensity"], (COLD_THRESHOLD_F - temperature) / cold["span"])


def apply_weather_effects(zone: Zone, weather: WeatherSample) -> None:
    if weather.temperature > HEAT_THRESHOLD_F:
        intensity = heat_intensity(weather.temperature)
        zone.vegetation_index -= intensity * WEATHER_EFFECTS["heat"]["vegetation"]
        zone.soil_moisture -= intensity * WEATHER_EFFECTS["heat"]["moisture"]
    elif weather.temperature < COLD_THRESHOLD_F:
        # Cold slows the canopy but barely touches the soil
        intensity = cold_intensity(weather.temperature)
        zone.vegetation_index -= intensity * WEATHER_EFFECTS["cold"]["vegetation"]

    if weather.precipitation > 0:
        rain = WEATHER_EFFECTS["rain"]
        zone.soil_moisture += min(rain["max_moisture"], weather.precipitation / rain["divisor"])
        if zone.soil_moisture > WET_SOIL_BONUS_MOISTURE:
            zone.vegetation_index += rain["vegetation"]

    if weather.wind_speed > WIND_THRESHOLD_MPH:
        wind = WEATHER_EFFECTS["wind"]
        zone.soil_moisture -= min(wind["max_loss"], (weather.wind_speed - WIND_THRESHOLD_MPH) / wind["span"])


# ============ STEP 2: GROWTH ============

def growth_rate(zone: Zone, crop: CropProfile) -> float:
    """Crop growth rate discounted by soil water and current stress."""
    rate = crop.growth_rate

    if zone.soil_moisture < GROWTH_MOISTURE_FACTOR["dry_below"]:
        rate *= GROWTH_MOISTURE_FACTOR["dry"]
    elif zone.soil_moisture > GROWTH_MOISTURE_FACTOR["wet_above"]:
        rate *= GROWTH_MOISTURE_FACTOR["wet"]

    return rate * GROWTH_STRESS_FACTOR[zone.stress_level]


def weeks_since_fertilizer(zone: Zone, week: int) -> Optional[int]:
    if not zone.has_fertilizer or zone.fertilizer_applied_week is None:
        return None
    return week - zone.fertilizer_applied_week


def fertilizer_bonus(zone: Zone, week: int) -> float:
    """Strong for weeks 1-2 after application, moderate for weeks 3-4, then nothing."""
    elapsed = weeks_since_fertilizer(zone, week)
    if elapsed is None:
        return 0.0
    for max_weeks, bonus in FERTILIZER_DECAY:
        if elapsed <= max_weeks:
            return bonus
    return 0.0


def apply_growth(zone: Zone, crop: CropProfile, week: int) -> None:
    target = crop.optimal_vegetation_index
    if zone.vegetation_index >= target:
        return
    step = growth_rate(zone, crop) + fertilizer_bonus(zone, week)
    zone.vegetation_index = min(target, zone.vegetation_index + step)


# ============ STEP 3: NATURAL STRESSORS ============

def apply_natural_stressors(zone: Zone, field: FieldConditions) -> None:
    # Healthier canopy transpires more water
    zone.soil_moisture -= NATURAL_STRESSORS["base_moisture_loss"] + zone.vegetation_index * NATURAL_STRESSORS["canopy_moisture_loss"]
    zone.vegetation_index -= field.pest_pressure * NATURAL_STRESSORS["pest_damage"]

    if zone.soil_moisture < NATURAL_STRESSORS["wilting_moisture"] and not zone.has_irrigation:
        zone.vegetation_index -= NATURAL_STRESSORS["wilting_loss"]


# ============ STEP 5: EXTREME EVENTS ============

def _force_stress(zone: Zone, level: StressLevel) -> None:
    if zone.stress_floor is None or level.rank > zone.stress_floor.rank:
        zone.stress_floor = level


def handle_heatwave(zone: Zone, event: ExtremeEvent) -> None:
    effect = EXTREME_EVENT_EFFECTS[ExtremeEventKind.HEATWAVE]
    zone.vegetation_index -= event.intensity * effect["vegetation"]
    zone.soil_moisture -= event.intensity * effect["moisture"]
    _force_stress(zone, StressLevel.HIGH)


def handle_drought(zone: Zone, event: ExtremeEvent) -> None:
    effect = EXTREME_EVENT_EFFECTS[ExtremeEventKind.DROUGHT]
    zone.soil_moisture -= event.intensity * effect["moisture"]
    if zone.soil_moisture < effect["critical_moisture"]:
        zone.vegetation_index -= effect["vegetation_loss"]
        _force_stress(zone, StressLevel.HIGH)


def handle_flooding(zone: Zone, event: ExtremeEvent) -> None:
    effect = EXTREME_EVENT_EFFECTS[ExtremeEventKind.FLOODING]
    zone.soil_moisture += event.intensity
    # Waterlogged roots
    if zone.soil_moisture > effect["saturated_moisture"]:
        zone.vegetation_index -= effect["vegetation_loss"]
        _force_stress(zone, StressLevel.MODERATE)


def handle_hail(zone: Zone, event: ExtremeEvent) -> None:
    zone.vegetation_index -= event.intensity * EXTREME_EVENT_EFFECTS[ExtremeEventKind.HAIL]["vegetation"]


def handle_windstorm(zone: Zone, event: ExtremeEvent) -> None:
    zone.soil_moisture -= event.intensity * EXTREME_EVENT_EFFECTS[ExtremeEventKind.WINDSTORM]["moisture"]


EVENT_HANDLERS = {
    ExtremeEventKind.HEATWAVE: handle_heatwave,
    ExtremeEventKind.DROUGHT: handle_drought,
    ExtremeEventKind.FLOODING: handle_flooding,
    ExtremeEventKind.HAIL: handle_hail,
    ExtremeEventKind.WINDSTORM: handle_windstorm,
}


def apply_extreme_event(zone: Zone, event: ExtremeEvent, soil_health: float) -> None:
    EVENT_HANDLERS[event.kind](zone, event)
    recompute_derived(zone, soil_health)


# ============ TICK ============

def expire_interventions(zone: Zone, week: int, horizon_weeks: int) -> None:
    """Irrigation lasts one tick; fertilizer wears off after the horizon."""
    zone.has_irrigation = False
    elapsed = weeks_since_fertilizer(zone, week)
    if elapsed is not None and elapsed >= horizon_weeks:
        zone.has_fertilizer = False
        zone.fertilizer_applied_week = None


def tick_zone(
    zone: Zone,
    weather: WeatherSample,
    crop: CropProfile,
    field: FieldConditions,
    fertilizer_horizon_weeks: int = 6,
    week: Optional[int] = None,
) -> None:
    """
    One week for one zone. `week` is the clock week being played; fertilizer
    age is measured against it. Defaults to the sample's own week label.
    """
    week = weather.week if week is None else week
    apply_weather_effects(zone, weather)
    apply_growth(zone, crop, week)
    apply_natural_stressors(zone, field)
    recompute_derived(zone, field.soil_health)

    if weather.extreme_event is not None:
        apply_extreme_event(zone, weather.extreme_event, field.soil_health)

    expire_interventions(zone, week, fertilizer_horizon_weeks)
