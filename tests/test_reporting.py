"""Season summaries and report formatting."""

import dataclasses
import json

import pytest

from terradata.core.formatter import format_summary
from terradata.core.ledger import ResourceLedger
from terradata.core.models import ExtremeEvent
from terradata.core.reporting import predict_yield, recommendations, season_summary
from terradata.core.scoring import SustainabilityScorer
from terradata.core.weather import neutral_season
from terradata.utils.config import ScoringConfig
from terradata.utils.constants import ExtremeEventKind, FailureReason, Resource


def test_predict_yield(small_grid, corn):
    small_grid.recompute_all(1.0)
    projection = predict_yield(small_grid, corn, field_size=100)
    assert projection.potential_max == pytest.approx(7500.0)
    assert 0 < projection.current_projection < projection.potential_max
    assert 0 < projection.efficiency_rating < 1


def test_recommendations_thresholds():
    assert recommendations(0, 1000, 0.7) == []
    advice = recommendations(11, 150, 0.5)
    assert len(advice) == 3
    assert "irrigation" in advice[1]


def test_score_components(small_grid):
    small_grid.recompute_all(0.7)
    ledger = ResourceLedger(water_budget=1000, fertilizer_budget=0)
    ledger.charge(Resource.WATER, 500)
    scorer = SustainabilityScorer(ScoringConfig())

    parts = scorer.components(small_grid, ledger, week=12)
    assert parts == {"crop_health": 25.0, "water_conservation": 15.0, "time": 20.0}
    assert scorer.score(small_grid, ledger, 12, adjustment=50) == 100.0
    assert scorer.score(small_grid, ledger, 12, adjustment=-200) == 0.0


def test_outcome_lists_every_failure(small_grid):
    small_grid.recompute_all(0.7)
    ledger = ResourceLedger(water_budget=0, fertilizer_budget=0, initial_water_budget=0)
    outcome = SustainabilityScorer(ScoringConfig()).evaluate_outcome(small_grid, ledger, week=20, score=40.0)
    assert not outcome.succeeded
    assert outcome.failures == (FailureReason.LOW_CROP_HEALTH, FailureReason.LOW_SUSTAINABILITY)


def test_season_summary_in_progress(sim_factory):
    weather = list(neutral_season(20))
    weather[1] = dataclasses.replace(weather[1], extreme_event=ExtremeEvent(ExtremeEventKind.HAIL, 0.75, 1))
    sim = sim_factory(weather=weather, grid_size=3)
    sim.apply_irrigation([(0, 0)])
    sim.advance_week()
    sim.advance_week()

    summary = season_summary(sim)
    assert summary.week == 2
    assert summary.water_used == 25
    assert summary.extreme_events == ["Week 2: hail (0.75)"]
    assert summary.outcome is None

    report = format_summary(summary)
    assert report.startswith("**Season Report: In progress**")
    assert "**EXTREME WEATHER:**" in report
    assert "- Water used: 25L" in report


def test_final_report_formats(neutral_sim):
    neutral_sim.run_to_end()
    summary = season_summary(neutral_sim)

    report = format_summary(summary, "markdown")
    assert report.startswith("**Season Report: FAILED**")
    assert "- low crop health" in report

    data = json.loads(format_summary(summary, "json"))
    assert data["week"] == 20
    assert data["outcome"]["outcome"] == "failure"
    assert "low_crop_health" in data["outcome"]["failures"]
    assert data["yield_projection"]["potential_max"] == pytest.approx(7500.0)
