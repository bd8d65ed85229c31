"""Per-zone tick transitions and extreme event handlers."""

import pytest

from terradata.core.growth import (
    advance_field,
    apply_extreme_event,
    apply_growth,
    apply_natural_stressors,
    apply_weather_effects,
    expire_interventions,
    fertilizer_bonus,
    growth_rate,
    tick_zone,
)
from terradata.core.grid import classify_stress
from terradata.core.models import ExtremeEvent, WeatherSample, Zone
from terradata.utils.constants import ExtremeEventKind, StressLevel


def weather(week=1, temperature=75.0, precipitation=0.0, wind_speed=10.0, event=None):
    return WeatherSample(
        week=week, temperature=temperature, precipitation=precipitation,
        humidity=50.0, wind_speed=wind_speed, extreme_event=event,
    )


def test_heatwave_full_intensity():
    zone = Zone(zone_id=(0, 0), vegetation_index=0.6, soil_moisture=0.5)
    apply_extreme_event(zone, ExtremeEvent(ExtremeEventKind.HEATWAVE, 1.0, 1), soil_health=0.7)
    assert zone.vegetation_index == pytest.approx(0.4)
    assert zone.soil_moisture == pytest.approx(0.2)
    assert zone.stress_level == StressLevel.HIGH


def test_drought_below_critical_moisture():
    zone = Zone(zone_id=(0, 0), vegetation_index=0.5, soil_moisture=0.4)
    apply_extreme_event(zone, ExtremeEvent(ExtremeEventKind.DROUGHT, 1.0, 2), soil_health=0.7)
    assert zone.soil_moisture == pytest.approx(0.1)
    assert zone.vegetation_index == pytest.approx(0.4)
    assert zone.stress_level == StressLevel.HIGH


def test_drought_above_critical_moisture():
    zone = Zone(zone_id=(0, 0), vegetation_index=0.5, soil_moisture=0.45)
    apply_extreme_event(zone, ExtremeEvent(ExtremeEventKind.DROUGHT, 0.5, 1), soil_health=0.7)
    assert zone.soil_moisture == pytest.approx(0.3)
    assert zone.vegetation_index == pytest.approx(0.5)
    assert zone.stress_floor is None
    assert zone.stress_level == StressLevel.NONE


def test_flooding_waterlogs():
    zone = Zone(zone_id=(0, 0), vegetation_index=0.5, soil_moisture=0.5)
    apply_extreme_event(zone, ExtremeEvent(ExtremeEventKind.FLOODING, 1.0, 1), soil_health=0.7)
    assert zone.soil_moisture == 1.0
    assert zone.vegetation_index == pytest.approx(0.45)
    assert zone.stress_level == StressLevel.MODERATE


def test_hail_is_physical_damage_only():
    zone = Zone(zone_id=(0, 0), vegetation_index=0.6, soil_moisture=0.5)
    apply_extreme_event(zone, ExtremeEvent(ExtremeEventKind.HAIL, 1.0, 1), soil_health=0.7)
    assert zone.vegetation_index == pytest.approx(0.45)
    assert zone.soil_moisture == pytest.approx(0.5)


def test_windstorm_only_dries():
    zone = Zone(zone_id=(0, 0), vegetation_index=0.6, soil_moisture=0.5)
    apply_extreme_event(zone, ExtremeEvent(ExtremeEventKind.WINDSTORM, 0.5, 1), soil_health=0.7)
    assert zone.soil_moisture == pytest.approx(0.45)
    assert zone.vegetation_index == pytest.approx(0.6)


def test_heat_stress(zone):
    apply_weather_effects(zone, weather(temperature=105.0))
    assert zone.vegetation_index == pytest.approx(0.47)
    assert zone.soil_moisture == pytest.approx(0.455)


def test_cold_stress_spares_moisture(zone):
    apply_weather_effects(zone, weather(temperature=50.0))
    assert zone.vegetation_index == pytest.approx(0.49)
    assert zone.soil_moisture == pytest.approx(0.5)


def test_rain_is_capped_and_greens_wet_soil(zone):
    apply_weather_effects(zone, weather(precipitation=1.0))
    assert zone.soil_moisture == pytest.approx(0.8)
    assert zone.vegetation_index == pytest.approx(0.52)


def test_light_rain_on_dry_soil_gives_no_bonus():
    zone = Zone(zone_id=(0, 0), vegetation_index=0.5, soil_moisture=0.1)
    apply_weather_effects(zone, weather(precipitation=0.2))
    assert zone.soil_moisture == pytest.approx(0.2)
    assert zone.vegetation_index == pytest.approx(0.5)


def test_wind_evapotranspiration(zone):
    apply_weather_effects(zone, weather(wind_speed=25.0))
    assert zone.soil_moisture == pytest.approx(0.4)


@pytest.mark.parametrize("moisture,stress,expected", [
    (0.5, StressLevel.NONE, 0.05),
    (0.2, StressLevel.NONE, 0.025),
    (0.8, StressLevel.NONE, 0.04),
    (0.5, StressLevel.MODERATE, 0.035),
    (0.5, StressLevel.HIGH, 0.015),
    (0.2, StressLevel.HIGH, 0.0075),
])
def test_growth_rate_discounts(corn, moisture, stress, expected):
    zone = Zone(zone_id=(0, 0), vegetation_index=0.5, soil_moisture=moisture, stress_level=stress)
    assert growth_rate(zone, corn) == pytest.approx(expected)


def test_growth_stops_at_optimal(corn):
    zone = Zone(zone_id=(0, 0), vegetation_index=0.74, soil_moisture=0.5)
    apply_growth(zone, corn, week=1)
    assert zone.vegetation_index == pytest.approx(corn.optimal_vegetation_index)

    above = Zone(zone_id=(0, 1), vegetation_index=0.9, soil_moisture=0.5)
    apply_growth(above, corn, week=1)
    assert above.vegetation_index == pytest.approx(0.9)


def test_fertilizer_bonus_decays():
    zone = Zone(zone_id=(0, 0), has_fertilizer=True, fertilizer_applied_week=0)
    assert [fertilizer_bonus(zone, w) for w in range(1, 7)] == [0.02, 0.02, 0.01, 0.01, 0.0, 0.0]
    assert fertilizer_bonus(Zone(zone_id=(0, 1)), 1) == 0.0


def test_fertilizer_flag_expires_after_horizon():
    zone = Zone(zone_id=(0, 0), has_fertilizer=True, fertilizer_applied_week=0)
    expire_interventions(zone, week=5, horizon_weeks=6)
    assert zone.has_fertilizer
    expire_interventions(zone, week=6, horizon_weeks=6)
    assert not zone.has_fertilizer
    assert zone.fertilizer_applied_week is None


def test_natural_stressors_wilt_unless_irrigated(field):
    dry = Zone(zone_id=(0, 0), vegetation_index=0.5, soil_moisture=0.3)
    irrigated = Zone(zone_id=(0, 1), vegetation_index=0.5, soil_moisture=0.3, has_irrigation=True)
    apply_natural_stressors(dry, field)
    apply_natural_stressors(irrigated, field)

    expected_moisture = 0.3 - (0.05 + 0.5 * 0.03)
    assert dry.soil_moisture == pytest.approx(expected_moisture)
    assert irrigated.soil_moisture == pytest.approx(expected_moisture)
    assert irrigated.vegetation_index - dry.vegetation_index == pytest.approx(0.05)


def test_advance_field(field, corn):
    advance_field(field, weather(week=4, temperature=100.0), corn)
    assert field.soil_health == pytest.approx(0.69)
    assert field.pest_pressure == pytest.approx(0.205)
    assert field.weather_stress == pytest.approx(0.1)
    assert field.season_progress == pytest.approx(4 / 16)


def test_tick_zone_clears_irrigation_and_keeps_bounds(field, corn):
    zone = Zone(zone_id=(0, 0), vegetation_index=0.11, soil_moisture=0.06, has_irrigation=True)
    event = ExtremeEvent(ExtremeEventKind.HEATWAVE, 1.0, 1)
    tick_zone(zone, weather(temperature=115.0, wind_speed=20.0, event=event), corn, field)

    assert not zone.has_irrigation
    assert zone.vegetation_index == 0.1
    assert zone.soil_moisture == 0.05
    assert zone.stress_level == StressLevel.HIGH


def test_tick_zone_recomputes_stress(field, corn):
    zone = Zone(zone_id=(0, 0), vegetation_index=0.6, soil_moisture=0.5, stress_level=StressLevel.HIGH)
    tick_zone(zone, weather(precipitation=0.2), corn, field)
    assert zone.stress_level == classify_stress(zone.soil_moisture, zone.vegetation_index)
    assert zone.productivity > 0


def test_tick_zone_uses_clock_week_for_fertilizer(field, corn):
    zone = Zone(zone_id=(0, 0), vegetation_index=0.3, soil_moisture=0.5, has_fertilizer=True, fertilizer_applied_week=0)
    tick_zone(zone, weather(week=5), corn, field, fertilizer_horizon_weeks=6, week=6)
    assert not zone.has_fertilizer
