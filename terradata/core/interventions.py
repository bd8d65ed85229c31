"""Irrigation and fertilizer application, gated by the resource ledger."""

from typing import Iterable

from loguru import logger

from terradata.core.errors import InsufficientResource
from terradata.core.grid import ZoneGrid, recompute_derived
from terradata.core.ledger import ResourceLedger
from terradata.core.models import DeferredEffect, FieldConditions, InterventionResult, Zone, ZoneId, clamp
from terradata.core.profiles import CropProfile
from terradata.utils.config import InterventionConfig, settings
from terradata.utils.constants import Resource, ToolKind


def raise_toward(zone: Zone, amount: float, ceiling: float) -> None:
    """Add vegetation up to `ceiling`, never lowering a zone already above it."""
    if zone.vegetation_index < ceiling:
        zone.vegetation_index = min(ceiling, zone.vegetation_index + amount)


class DeferredEffects:
    """Plant responses queued by interventions and realized at the next tick boundary."""

    def __init__(self):
        self._queue: list[DeferredEffect] = []

    def __len__(self) -> int:
        return len(self._queue)

    def __iter__(self):
        return iter(self._queue)

    def schedule(self, effect: DeferredEffect) -> None:
        self._queue.append(effect)

    def realize(self, grid: ZoneGrid, crop: CropProfile, soil_health: float) -> int:
        """Apply and drop every queued effect. Returns how many were applied."""
        pending, self._queue = self._queue, []
        applied = 0
        for effect in pending:
            if effect.zone_id not in grid:
                continue
            zone = grid.get(effect.zone_id)
            raise_toward(zone, effect.vegetation_bonus, crop.optimal_vegetation_index)
            recompute_derived(zone, soil_health)
            applied += 1
        if applied:
            logger.debug(f"Realized {applied} deferred plant responses")
        return applied

    def clear(self) -> None:
        self._queue.clear()


def _rejected(tool: ToolKind, zones: list[Zone], ledger: ResourceLedger, error: Exception) -> InterventionResult:
    logger.warning(f"{tool.value} rejected: {error}")
    return InterventionResult(
        success=False,
        tool=tool,
        zone_ids=tuple(z.zone_id for z in zones),
        cost=0.0,
        ledger=ledger.snapshot(),
        error=error,
    )


def apply_irrigation(
    grid: ZoneGrid,
    ledger: ResourceLedger,
    deferred: DeferredEffects,
    field: FieldConditions,
    zone_ids: Iterable[ZoneId],
    week: int,
    config: InterventionConfig = settings.interventions,
) -> InterventionResult:
    """Irrigate a batch of zones. Either every zone is irrigated and paid for or none is."""
    zones = grid.resolve(zone_ids)
    cost = config.irrigation_cost * len(zones)

    try:
        ledger.require(Resource.WATER, cost)
    except InsufficientResource as e:
        return _rejected(ToolKind.IRRIGATE, zones, ledger, e)

    if zones:
        ledger.charge(Resource.WATER, cost, week=week, reason=f"irrigate {len(zones)} zones")

    for zone in zones:
        zone.has_irrigation = True
        zone.soil_moisture = min(1.0, zone.soil_moisture + config.irrigation_moisture_boost)
        deferred.schedule(DeferredEffect(
            zone_id=zone.zone_id,
            vegetation_bonus=config.irrigation_vegetation_bonus,
            scheduled_week=week,
        ))
        recompute_derived(zone, field.soil_health)

    logger.info(f"Irrigated {len(zones)} zones for {cost:g} water ({ledger.water_budget:g} left)")
    return InterventionResult(
        success=True,
        tool=ToolKind.IRRIGATE,
        zone_ids=tuple(z.zone_id for z in zones),
        cost=cost,
        ledger=ledger.snapshot(),
    )


def fertilizer_delta(zone: Zone, config: InterventionConfig = settings.interventions) -> float:
    """Reward feeding a struggling zone, penalize feeding a healthy one."""
    if zone.vegetation_index < config.fertilizer_stressed_threshold:
        return config.fertilizer_reward
    return config.fertilizer_penalty


def apply_fertilizer(
    grid: ZoneGrid,
    ledger: ResourceLedger,
    field: FieldConditions,
    crop: CropProfile,
    zone_ids: Iterable[ZoneId],
    week: int,
    config: InterventionConfig = settings.interventions,
) -> InterventionResult:
    """Fertilize a batch of zones atomically; the result carries the sustainability delta."""
    zones = grid.resolve(zone_ids)
    cost = config.fertilizer_cost * len(zones)

    try:
        ledger.require(Resource.FERTILIZER, cost)
    except InsufficientResource as e:
        return _rejected(ToolKind.FERTILIZE, zones, ledger, e)

    delta = 0.0
    if zones:
        ledger.charge(Resource.FERTILIZER, cost, week=week, reason=f"fertilize {len(zones)} zones")
        field.soil_health = clamp(field.soil_health + config.fertilizer_soil_health_boost, 0.0, 1.0)

    for zone in zones:
        # Judged on the zone's health before the boost
        delta += fertilizer_delta(zone, config)
        zone.has_fertilizer = True
        zone.fertilizer_applied_week = week
        raise_toward(zone, config.fertilizer_vegetation_boost, crop.optimal_vegetation_index)

    if zones:
        # Soil health feeds every zone's productivity
        grid.recompute_all(field.soil_health)

    logger.info(f"Fertilized {len(zones)} zones for {cost:g} kg (sustainability {delta:+g})")
    return InterventionResult(
        success=True,
        tool=ToolKind.FERTILIZE,
        zone_ids=tuple(z.zone_id for z in zones),
        cost=cost,
        ledger=ledger.snapshot(),
        sustainability_delta=delta,
    )
