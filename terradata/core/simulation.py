"""Simulation aggregate: owns the grid, ledger, clock and season weather."""

import copy
from typing import Callable, Iterable, Optional, Sequence, Union

import numpy as np
import pandas as pd
from loguru import logger

from terradata.core.clock import SimulationClock
from terradata.core.errors import AlreadyEnded, InvalidSeasonLength
from terradata.core.grid import ZoneGrid
from terradata.core.growth import advance_field, tick_zone
from terradata.core.interventions import DeferredEffects, apply_fertilizer, apply_irrigation
from terradata.core.ledger import ResourceLedger
from terradata.core.models import (
    FieldConditions,
    GameOutcome,
    InterventionResult,
    Notification,
    SimulationState,
    TickSummary,
    WeatherSample,
    Zone,
    ZoneId,
)
from terradata.core.objectives import Objective, ObjectiveContext, ScenarioEvaluator, default_objectives
from terradata.core.profiles import CropProfile, LocationProfile, default_location, get_crop
from terradata.core.scoring import SustainabilityScorer
from terradata.core.weather import WeatherGenerator, forecast, season_frame
from terradata.data_sources.satellite import SatelliteProvider
from terradata.utils.config import Settings, settings
from terradata.utils.constants import INITIAL_FIELD_CONDITIONS, GameMode, Phase, ToolKind

SimulationEvent = Union[TickSummary, InterventionResult, Notification, GameOutcome]
Subscriber = Callable[[SimulationEvent], None]


class Simulation:
    """
    One farm season.

    `advance_week()` is the single tick entry point; interventions are applied
    through `apply_irrigation` / `apply_fertilizer` / `apply_tool`. Every call
    validates before it mutates, so a rejected call leaves state untouched.
    """

    def __init__(
        self,
        config: Settings = settings,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        crop_type: Optional[str] = None,
        location: Optional[LocationProfile] = None,
        weather: Optional[Sequence[WeatherSample]] = None,
        grid: Optional[ZoneGrid] = None,
        provider: Optional[SatelliteProvider] = None,
        objectives: Optional[list[Objective]] = None,
    ):
        self.config = config
        if rng is None:
            rng = np.random.default_rng(seed if seed is not None else config.simulation.seed)
        self.rng = rng
        self.location = location or default_location(config.location)
        self.scorer = SustainabilityScorer(config.scoring)
        self.weather_generator = WeatherGenerator(self.rng, config.weather)
        self._objectives = objectives
        self._subscribers: list[Subscriber] = []

        self._start_season(crop_type or config.simulation.crop_type, weather, grid, provider)

    # ============ SEASON SETUP ============

    def _start_season(
        self,
        crop_type: str,
        weather: Optional[Sequence[WeatherSample]],
        grid: Optional[ZoneGrid],
        provider: Optional[SatelliteProvider],
    ) -> None:
        sim = self.config.simulation
        self.crop: CropProfile = get_crop(crop_type)
        self.clock = SimulationClock(sim.max_weeks, sim.start_in_tutorial)
        self.weather: tuple[WeatherSample, ...] = self._season_weather(weather)
        self.grid = grid if grid is not None else ZoneGrid.generate(sim.grid_size, self.rng, provider)
        self.ledger = ResourceLedger(water_budget=sim.water_budget, fertilizer_budget=sim.fertilizer_budget)
        self.field = FieldConditions(**INITIAL_FIELD_CONDITIONS)
        self.deferred = DeferredEffects()
        objectives = self._objectives if self._objectives is not None else default_objectives(self.config.objectives)
        self.evaluator = ScenarioEvaluator(objectives, self.config.objectives.milestone_score)
        self.intervention_adjustment = 0.0
        self.irrigations = 0

        self.grid.recompute_all(self.field.soil_health)
        self.recompute_score()
        logger.info(
            f"Season start: {self.crop.name} at {self.location.name}, "
            f"{len(self.grid)} zones, {self.max_weeks} weeks"
        )

    def _season_weather(self, weather: Optional[Sequence[WeatherSample]]) -> tuple[WeatherSample, ...]:
        max_weeks = self.clock.max_weeks
        if weather is None:
            return self.weather_generator.generate_season(max_weeks, self.location)
        if max_weeks <= 0:
            raise InvalidSeasonLength(max_weeks)
        if len(weather) < max_weeks:
            raise ValueError(f"Weather covers {len(weather)} weeks, season needs {max_weeks}")
        return tuple(weather)

    def new_season(
        self,
        crop_type: Optional[str] = None,
        weather: Optional[Sequence[WeatherSample]] = None,
        provider: Optional[SatelliteProvider] = None,
    ) -> None:
        """Start over: fresh zones, budgets and a newly generated season of weather."""
        self._start_season(crop_type or self.crop.name, weather, None, provider)

    # ============ STATE ============

    @property
    def current_week(self) -> int:
        return self.clock.current_week

    @property
    def max_weeks(self) -> int:
        return self.clock.max_weeks

    @property
    def phase(self) -> Phase:
        return self.clock.phase

    @property
    def game_mode(self) -> GameMode:
        return self.clock.game_mode

    @property
    def is_paused(self) -> bool:
        return self.clock.is_paused

    @property
    def outcome(self) -> Optional[GameOutcome]:
        return self.clock.outcome

    def recompute_score(self) -> float:
        self.sustainability_score = self.scorer.score(
            self.grid, self.ledger, self.current_week, self.intervention_adjustment
        )
        return self.sustainability_score

    def snapshot(self) -> SimulationState:
        return SimulationState(
            current_week=self.current_week,
            max_weeks=self.max_weeks,
            sustainability_score=self.sustainability_score,
            game_mode=self.game_mode,
            phase=self.phase,
            is_paused=self.is_paused,
            crop_type=self.crop.name,
            zones=tuple(copy.deepcopy(z) for z in self.grid),
            ledger=self.ledger.snapshot(),
            field=copy.deepcopy(self.field),
            outcome=self.outcome,
            metadata={"location": self.location.name, "pending_effects": len(self.deferred)},
        )

    def inspect(self, zone_id: ZoneId) -> Zone:
        """Copy of a single zone. Raises UnknownZone for ids outside the grid."""
        return copy.deepcopy(self.grid.get(zone_id))

    def weather_forecast(self, horizon: int = 6) -> list[WeatherSample]:
        return forecast(self.weather, self.current_week + 1, horizon)

    def weather_frame(self) -> pd.DataFrame:
        return season_frame(self.weather)

    # ============ SUBSCRIPTIONS ============

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a push listener. Returns a function that removes it."""
        if callback not in self._subscribers:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self, event: SimulationEvent) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as e:
                logger.warning(f"Subscriber {callback!r} failed on {type(event).__name__}: {e}")

    # ============ PHASE CONTROL ============

    def complete_tutorial(self) -> None:
        self.clock.complete_tutorial()

    def toggle_pause(self) -> bool:
        return self.clock.toggle_pause()

    # ============ INTERVENTIONS ============

    def _ensure_running(self) -> None:
        if self.clock.is_ended:
            raise AlreadyEnded(self.outcome.outcome.value if self.outcome else None)

    def apply_irrigation(self, zone_ids: Iterable[ZoneId]) -> InterventionResult:
        self._ensure_running()
        result = apply_irrigation(
            self.grid, self.ledger, self.deferred, self.field, zone_ids,
            week=self.current_week, config=self.config.interventions,
        )
        if result.success and result.zone_ids:
            self.irrigations += 1
        return self._after_intervention(result)

    def apply_fertilizer(self, zone_ids: Iterable[ZoneId]) -> InterventionResult:
        self._ensure_running()
        result = apply_fertilizer(
            self.grid, self.ledger, self.field, self.crop, zone_ids,
            week=self.current_week, config=self.config.interventions,
        )
        if result.success:
            self.intervention_adjustment += result.sustainability_delta
        return self._after_intervention(result)

    def apply_tool(self, tool: Union[ToolKind, str], zone_ids: Iterable[ZoneId]) -> InterventionResult:
        """Entry point for UI tools: (tool kind, zone id set) -> result with updated ledger."""
        tool = ToolKind(tool)
        self._ensure_running()
        if tool == ToolKind.IRRIGATE:
            return self.apply_irrigation(zone_ids)
        if tool == ToolKind.FERTILIZE:
            return self.apply_fertilizer(zone_ids)

        zones = self.grid.resolve(zone_ids)
        for zone in zones:
            logger.debug(self.grid.describe(zone.zone_id))
        return self._after_intervention(InterventionResult(
            success=True,
            tool=tool,
            zone_ids=tuple(z.zone_id for z in zones),
            cost=0.0,
            ledger=self.ledger.snapshot(),
        ))

    def _after_intervention(self, result: InterventionResult) -> InterventionResult:
        if result.success:
            self.recompute_score()
        self._publish(result)
        return result

    # ============ TICK ============

    def advance_week(self) -> Optional[TickSummary]:
        """
        Advance one week. Returns None while paused; raises AlreadyEnded once
        the season is over.
        """
        self._ensure_running()
        if self.clock.is_paused:
            logger.debug("advance_week ignored while paused")
            return None

        sample = self.weather[self.current_week]
        previously_stressed = {z.zone_id for z in self.grid.stressed_zones()}

        # Tick boundary: forced event stress expires, deferred responses land
        for zone in self.grid:
            zone.stress_floor = None
        self.deferred.realize(self.grid, self.crop, self.field.soil_health)

        # Fertilizer age is measured on the clock, not on the sample's week label
        playing = self.current_week + 1
        advance_field(self.field, sample, self.crop, playing)
        horizon = self.config.interventions.fertilizer_horizon_weeks
        for zone in self.grid:
            tick_zone(zone, sample, self.crop, self.field, horizon, week=playing)

        week = self.clock.tick()
        score = self.recompute_score()

        context = ObjectiveContext(
            week=week,
            sustainability_score=score,
            score_streak=self.evaluator.track_score(score),
            stressed_zones=len(self.grid.stressed_zones()),
            water_budget=self.ledger.water_budget,
            irrigations=self.irrigations,
            game_mode=self.game_mode,
        )
        notifications = self.evaluator.evaluate(context)

        newly_stressed = tuple(
            z.zone_id for z in self.grid.stressed_zones() if z.zone_id not in previously_stressed
        )

        outcome = None
        if self.clock.season_over:
            outcome = self.scorer.evaluate_outcome(self.grid, self.ledger, week, score)
            self.clock.end(outcome)

        if sample.extreme_event:
            logger.warning(
                f"Week {week}: {sample.extreme_event.kind.value} "
                f"(intensity {sample.extreme_event.intensity:.2f})"
            )
        logger.info(f"Week {week}: score {score:.1f}, {len(newly_stressed)} newly stressed zones")

        summary = TickSummary(
            week=week,
            sustainability_score=score,
            weather=sample,
            newly_stressed=newly_stressed,
            extreme_event=sample.extreme_event,
            notifications=tuple(notifications),
            outcome=outcome,
        )

        self._publish(summary)
        for notification in notifications:
            self._publish(notification)
        if outcome:
            self._publish(outcome)
        return summary

    def run_to_end(self) -> GameOutcome:
        """Advance until the season ends. Resumes if paused."""
        if self.is_paused:
            self.toggle_pause()
        while not self.clock.is_ended:
            self.advance_week()
        return self.outcome
