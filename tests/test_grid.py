"""Zone grid and zone invariants."""

import types

import pytest

from terradata.core.errors import UnknownZone
from terradata.core.grid import ZoneGrid, classify_stress, recompute_derived
from terradata.core.models import Zone
from terradata.data_sources.satellite import SyntheticSatelliteProvider, UniformSatelliteProvider
from terradata.utils.constants import StressLevel


def test_zone_values_are_clamped_on_assignment():
    zone = Zone(zone_id=(0, 0), vegetation_index=1.7, soil_moisture=-0.3)
    assert zone.vegetation_index == 1.0
    assert zone.soil_moisture == 0.05

    zone.vegetation_index -= 5
    zone.soil_moisture += 5
    assert zone.vegetation_index == 0.1
    assert zone.soil_moisture == 1.0


@pytest.mark.parametrize("moisture,ndvi,expected", [
    (0.5, 0.6, StressLevel.NONE),
    (0.3, 0.4, StressLevel.NONE),
    (0.2, 0.6, StressLevel.MODERATE),
    (0.05, 0.6, StressLevel.HIGH),
    (0.5, 0.25, StressLevel.MODERATE),
    (0.5, 0.1, StressLevel.HIGH),
    (0.2, 0.4, StressLevel.MODERATE),
])
def test_classify_stress(moisture, ndvi, expected):
    assert classify_stress(moisture, ndvi) == expected


def test_recompute_derived_productivity():
    zone = Zone(zone_id=(0, 0), vegetation_index=0.5, soil_moisture=0.5)
    recompute_derived(zone, soil_health=0.7)
    assert zone.stress_level == StressLevel.NONE
    assert zone.productivity == pytest.approx(0.5 * 100 * 0.7)

    zone.soil_moisture = 0.05
    recompute_derived(zone, soil_health=0.7)
    assert zone.stress_level == StressLevel.HIGH
    assert zone.productivity == pytest.approx(0.5 * 100 * 0.6 * 0.7)


def test_stress_floor_raises_but_never_lowers():
    zone = Zone(zone_id=(0, 0), vegetation_index=0.5, soil_moisture=0.5, stress_floor=StressLevel.MODERATE)
    recompute_derived(zone, 1.0)
    assert zone.stress_level == StressLevel.MODERATE

    zone.soil_moisture = 0.05
    recompute_derived(zone, 1.0)
    assert zone.stress_level == StressLevel.HIGH


def test_generate_builds_square_grid(rng):
    grid = ZoneGrid.generate(4, rng)
    assert len(grid) == 16
    zone = grid.get((3, 2))
    assert (zone.x, zone.y, zone.width, zone.height) == (240, 120, 80, 60)
    for z in grid:
        assert 0.3 <= z.vegetation_index <= 0.7
        assert 0.2 <= z.soil_moisture <= 0.5


def test_generate_uses_provider_readings():
    grid = ZoneGrid.generate(2, provider=UniformSatelliteProvider(ndvi=0.55, soil_moisture=0.35))
    assert {z.vegetation_index for z in grid} == {0.55}
    assert {z.soil_moisture for z in grid} == {0.35}


def test_seeded_provider_is_reproducible():
    import numpy as np

    a = ZoneGrid.generate(3, provider=SyntheticSatelliteProvider(np.random.default_rng(9)))
    b = ZoneGrid.generate(3, provider=SyntheticSatelliteProvider(np.random.default_rng(9)))
    assert [z.vegetation_index for z in a] == [z.vegetation_index for z in b]


def test_get_unknown_zone_raises(small_grid):
    with pytest.raises(UnknownZone):
        small_grid.get((9, 9))


def test_apply_to_skips_unknown_ids(small_grid):
    touched = small_grid.apply_to([(0, 0), (9, 9), (0, 0)], lambda z: setattr(z, "has_irrigation", True))
    assert [z.zone_id for z in touched] == [(0, 0)]
    assert small_grid.get((0, 0)).has_irrigation
    assert not small_grid.get((1, 0)).has_irrigation


def test_zones_matching_is_lazy(small_grid):
    matches = small_grid.zones_matching(lambda z: z.vegetation_index > 0.6)
    assert isinstance(matches, types.GeneratorType)
    assert sorted(z.zone_id for z in matches) == [(1, 0), (1, 1)]


def test_healthy_fraction_and_stressed(small_grid):
    small_grid.recompute_all(0.7)
    assert small_grid.healthy_fraction() == 0.5
    stressed = {z.zone_id for z in small_grid.stressed_zones()}
    assert stressed == {(0, 1), (1, 1)}


def test_to_frame_indexed_by_zone_key(small_grid):
    df = small_grid.to_frame()
    assert list(df.index) == ["zone_0_0", "zone_0_1", "zone_1_0", "zone_1_1"]
    assert df.loc["zone_1_0", "ndvi"] == pytest.approx(0.7)


def test_summary_counts(small_grid):
    small_grid.recompute_all(0.7)
    summary = small_grid.summary()
    assert summary["zones"] == 4
    assert summary["stressed"] == 2
    assert summary["high_stress"] == 1
    assert summary["mean_ndvi"] == pytest.approx(0.575)
