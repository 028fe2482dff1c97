"""
Evaporator health model tests.

Covers capacity conversion, feed recommendation, the sequential
throughput chain, health classification and configuration errors.
"""

import pytest

from conc_table import estimate_concentration
from errors import EvaporatorError, InvalidConfigurationError
from evap_model import (
    HealthStatus,
    StageInput,
    classify_health,
    evaluate_plant,
    evaluate_stage,
    feed_recommendation,
    health_ratio,
    heat_load_to_evaporation,
    stage_capacity,
    stage_throughput,
)


# ==================== FIXTURES ====================

@pytest.fixture
def default_stages():
    return [
        StageInput(1200, 25, 24, 92, 1.190),
        StageInput(1000, 22, 20, 78, 1.290),
        StageInput(800, 18, 16, 62, 1.550),
    ]


@pytest.fixture
def default_eval(default_stages):
    return evaluate_plant(default_stages, 18.0, 52.5, 55.0)


# ==================== CAPACITY ====================

def test_heat_load_conversion():
    assert heat_load_to_evaporation(2257) == pytest.approx(3.6)


def test_stage_one_capacity():
    qset = stage_capacity(StageInput(1200, 25, 24, 92, 1.190))
    assert qset == pytest.approx(1200 * 3600 / 2257000 * (24 / 25))
    assert qset == pytest.approx(1.838, abs=1e-3)


@pytest.mark.parametrize("dt_design", [0.0, -5.0, float("nan"), float("inf")])
def test_bad_design_dt_rejected(dt_design):
    with pytest.raises(InvalidConfigurationError):
        stage_capacity(StageInput(1200, dt_design, 24, 92, 1.190))


def test_zero_design_dt_rejected_by_plant(default_stages):
    default_stages[1] = StageInput(1000, 0, 20, 78, 1.290)
    with pytest.raises(InvalidConfigurationError):
        evaluate_plant(default_stages, 18.0, 52.5, 55.0)


@pytest.mark.parametrize("n", [0, 2, 4])
def test_wrong_stage_count_rejected(default_stages, n):
    stages = (default_stages * 2)[:n]
    with pytest.raises(InvalidConfigurationError):
        evaluate_plant(stages, 18.0, 52.5, 55.0)


def test_configuration_error_hierarchy():
    assert issubclass(InvalidConfigurationError, EvaporatorError)
    assert issubclass(InvalidConfigurationError, ValueError)


# ==================== FEED RECOMMENDATION ====================

def test_feed_recommendation_margins():
    tmax, low, high, sug = feed_recommendation(10.0, 18.0, 52.5)
    assert tmax == pytest.approx(10.0 * 52.5 / 34.5)
    assert low == pytest.approx(0.75 * tmax)
    assert high == pytest.approx(0.95 * tmax)
    assert sug == pytest.approx(0.90 * tmax)


@pytest.mark.parametrize("feed", [52.5, 60.0])
def test_feed_at_or_above_target_gives_zero(feed):
    assert feed_recommendation(10.0, feed, 52.5) == (0.0, 0.0, 0.0, 0.0)


def test_plant_target_not_above_feed(default_stages):
    ev = evaluate_plant(default_stages, 55.0, 52.5, 55.0)
    s = ev.summary
    assert (s.theoretical_max, s.recommended_low, s.recommended_high, s.suggested_flow) == (0.0, 0.0, 0.0, 0.0)
    assert s.total_capacity > 0
    assert any("Target concentration" in d for d in ev.diagnostics)


# ==================== DEFAULT SCENARIO ====================

def test_default_scenario_summary(default_eval):
    s = default_eval.summary
    q1 = 1200 * 3600 / 2257000 * (24 / 25)
    q2 = 1000 * 3600 / 2257000 * (20 / 22)
    q3 = 800 * 3600 / 2257000 * (16 / 18)
    total = q1 + q2 + q3
    assert s.total_capacity == pytest.approx(total)
    assert s.theoretical_max == pytest.approx(total * 52.5 / (52.5 - 18.0))
    assert s.recommended_low == pytest.approx(0.75 * s.theoretical_max)
    assert s.recommended_high == pytest.approx(0.95 * s.theoretical_max)
    assert s.suggested_flow == pytest.approx(0.90 * s.theoretical_max)
    assert [r.capacity for r in default_eval.stages] == pytest.approx([q1, q2, q3])


def test_default_scenario_chain(default_eval):
    r1, r2, r3 = default_eval.stages
    c1 = estimate_concentration(92, 1.190)
    c2 = estimate_concentration(78, 1.290)
    c3 = estimate_concentration(62, 1.550)
    assert (r1.concentration, r2.concentration, r3.concentration) == (c1, c2, c3)

    q1 = 55.0 * (c1 - 18.0) / c1
    q2 = (55.0 - q1) * (c2 - c1) / c2
    q3 = (55.0 - q1 - q2) * (c3 - c2) / c3
    assert r1.throughput == pytest.approx(q1)
    assert r2.throughput == pytest.approx(q2)
    assert r3.throughput == pytest.approx(q3)
    assert r2.inlet_concentration == c1 and r3.inlet_concentration == c2
    assert r2.inlet_flow == pytest.approx(55.0 - q1)

    for r in default_eval.stages:
        assert r.health == pytest.approx(r.throughput / r.capacity)
        assert r.status is HealthStatus.OVERLOADED
    assert default_eval.diagnostics == ()


@pytest.mark.parametrize("feed,flow", [
    (18.0, 55.0),
    (18.0, 30.0),
    (18.0, 120.0),
    (10.0, 55.0),
    (22.0, 55.0),
    (5.0, 200.0),
])
def test_throughput_conservation(default_stages, feed, flow):
    ev = evaluate_plant(default_stages, feed, 52.5, flow)
    assert all(r.throughput > 0 for r in ev.stages)
    total = sum(r.throughput for r in ev.stages)
    assert total <= flow
    # concentrating chain leaves flow * feed / ConcOut₃ as product
    assert total == pytest.approx(flow * (1 - feed / ev.stages[-1].concentration))


# ==================== NON-CONCENTRATING / DEGENERATE ====================

def test_non_concentrating_stage_gets_zero(default_stages):
    default_stages[1] = StageInput(1000, 22, 20, 78, 1.000)   # outlet below stage-1 concentration
    ev = evaluate_plant(default_stages, 18.0, 52.5, 55.0)
    r1, r2, r3 = ev.stages
    assert r2.throughput == 0.0
    assert r2.status is HealthStatus.SEVERE_FOULING
    assert r3.inlet_concentration == r2.concentration
    assert r3.inlet_flow == pytest.approx(55.0 - r1.throughput)
    assert any(d.startswith("Stage 2") for d in ev.diagnostics)


def test_stage_throughput_rules():
    assert stage_throughput(10.0, 20.0, 40.0) == pytest.approx(5.0)
    assert stage_throughput(10.0, 40.0, 40.0) == 0.0
    assert stage_throughput(10.0, -5.0, 0.0) == 0.0


def test_zero_capacity_gives_zero_health(default_stages):
    default_stages[0] = StageInput(0, 25, 24, 92, 1.190)
    ev = evaluate_plant(default_stages, 18.0, 52.5, 55.0)
    assert ev.stages[0].capacity == 0.0
    assert ev.stages[0].health == 0.0
    assert ev.stages[0].status is HealthStatus.SEVERE_FOULING


def test_health_ratio_guard():
    assert health_ratio(5.0, 0.0) == 0.0
    assert health_ratio(5.0, -1.0) == 0.0
    assert health_ratio(5.0, 2.5) == 2.0


def test_negative_remaining_flow_is_diagnosed(default_stages):
    # a negative feed concentration makes stage 1 remove more than the feed
    ev = evaluate_plant(default_stages, -10.0, 52.5, 55.0)
    assert ev.stages[0].throughput > 55.0
    assert ev.stages[1].inlet_flow < 0
    assert any("negative" in d for d in ev.diagnostics)


def test_evaluate_stage_reports_negative_inlet():
    notes = []
    result, left = evaluate_stage(2, StageInput(1000, 22, 20, 78, 1.290), 1.45, 20.0, -5.0, notes)
    assert result.inlet_flow == -5.0
    assert left == pytest.approx(-5.0 - result.throughput)
    assert len(notes) == 1


# ==================== CLASSIFICATION ====================

@pytest.mark.parametrize("health,status", [
    (2.0, HealthStatus.OVERLOADED),
    (1.1000001, HealthStatus.OVERLOADED),
    (1.1, HealthStatus.GOOD),
    (0.95, HealthStatus.GOOD),
    (0.9, HealthStatus.LIGHT_FOULING),
    (0.7, HealthStatus.MODERATE_FOULING),
    (0.6, HealthStatus.MODERATE_FOULING),
    (0.5, HealthStatus.SEVERE_FOULING),
    (0.0, HealthStatus.SEVERE_FOULING),
])
def test_status_ladder(health, status):
    assert classify_health(health) is status


def test_status_badges():
    assert HealthStatus.OVERLOADED.badge == "good"
    assert HealthStatus.GOOD.badge == "good"
    assert HealthStatus.LIGHT_FOULING.badge == "warn"
    assert HealthStatus.MODERATE_FOULING.badge == "bad"
    assert HealthStatus.SEVERE_FOULING.badge == "bad"
    assert HealthStatus.LIGHT_FOULING.label == "Light fouling"
