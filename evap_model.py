# evap_model.py  — triple-effect heating-chamber health (Qset / Qrun / Health)
"""
Mass/energy balance of a three-effect evaporator.

Each heating chamber's theoretical evaporation capacity (Qset) comes from its
nominal heat-exchange rating scaled by operating/design Δt. Its actual
evaporation (Qrun) comes from the concentration rise across the effect,
applied to the flow still left after the upstream effects. Health is
Qrun / Qset, and a fixed ladder turns it into a fouling status.
"""
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from conc_table import estimate_concentration
from errors import InvalidConfigurationError
from settings import FEED_MARGINS, HEALTH_LADDER, LATENT_HEAT_KJ_PER_KG, STAGE_COUNT

logger = logging.getLogger(__name__)


class HealthStatus(str, Enum):
    """Heating-chamber condition inferred from the health ratio."""

    OVERLOADED = "overloaded"
    GOOD = "good"
    LIGHT_FOULING = "light_fouling"
    MODERATE_FOULING = "moderate_fouling"
    SEVERE_FOULING = "severe_fouling"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").capitalize()

    @property
    def badge(self) -> str:
        """CSS class for the health cell: good / warn / bad."""
        if self in (HealthStatus.OVERLOADED, HealthStatus.GOOD):
            return "good"
        if self is HealthStatus.LIGHT_FOULING:
            return "warn"
        return "bad"


@dataclass(frozen=True)
class StageInput:
    rating_kw: float        # manufacturer heat-exchange rating
    dt_design: float        # design Δt (°C)
    dt_operating: float     # planned / operating Δt (°C)
    outlet_temp: float      # °C
    outlet_density: float   # g/cm³


@dataclass(frozen=True)
class StageResult:
    stage: int
    capacity: float             # Qset, t/h
    concentration: float        # ConcOut, %
    throughput: float           # Qrun, t/h
    health: float
    status: HealthStatus
    inlet_concentration: float  # %
    inlet_flow: float           # t/h still in the liquor when it enters this effect


@dataclass(frozen=True)
class PlantSummary:
    feed_concentration: float
    target_concentration: float
    actual_flow: float
    total_capacity: float
    theoretical_max: float
    recommended_low: float
    recommended_high: float
    suggested_flow: float


@dataclass(frozen=True)
class PlantEvaluation:
    summary: PlantSummary
    stages: Tuple[StageResult, ...]
    diagnostics: Tuple[str, ...] = ()
    evaluated_at: datetime = field(default_factory=datetime.now)


def heat_load_to_evaporation(q_kw: float) -> float:
    """kW of heat → t/h of water evaporated."""
    return q_kw * 3600.0 / (LATENT_HEAT_KJ_PER_KG * 1000.0)


def stage_capacity(stage: StageInput) -> float:
    """Qset: nominal evaporation scaled linearly by operating/design Δt."""
    if not (math.isfinite(stage.dt_design) and stage.dt_design > 0):
        raise InvalidConfigurationError(f"design Δt must be a positive number, got {stage.dt_design!r}")
    qset = heat_load_to_evaporation(stage.rating_kw) * (stage.dt_operating / stage.dt_design)
    if not math.isfinite(qset):
        raise InvalidConfigurationError(f"theoretical capacity is not finite for {stage!r}")
    return qset


def feed_recommendation(total_capacity: float, feed_conc: float, target_conc: float) -> Tuple[float, float, float, float]:
    """(theoretical max, low, high, suggested) feed rate in t/h; all zero when target ≤ feed."""
    if target_conc <= feed_conc:
        return 0.0, 0.0, 0.0, 0.0
    theoretical_max = total_capacity * target_conc / (target_conc - feed_conc)
    return (theoretical_max,
            theoretical_max * FEED_MARGINS["low"],
            theoretical_max * FEED_MARGINS["high"],
            theoretical_max * FEED_MARGINS["suggested"])


def classify_health(health: float) -> HealthStatus:
    for threshold, status in HEALTH_LADDER:
        if health > threshold:
            return HealthStatus(status)
    return HealthStatus.SEVERE_FOULING


def health_ratio(throughput: float, capacity: float) -> float:
    return throughput / capacity if capacity > 0 else 0.0


def stage_throughput(remaining_flow: float, inlet_conc: float, outlet_conc: float) -> float:
    # an effect that does not concentrate its liquor is credited with nothing
    if outlet_conc > inlet_conc and outlet_conc > 0:
        return remaining_flow * (outlet_conc - inlet_conc) / outlet_conc
    return 0.0


def evaluate_stage(number: int, stage: StageInput, capacity: float, inlet_conc: float,
                   remaining_flow: float, diagnostics: Optional[List[str]] = None) -> Tuple[StageResult, float]:
    """Evaluate one effect; returns its result and the flow left for the next effect."""
    if diagnostics is None:
        diagnostics = []
    if remaining_flow < 0:
        msg = (f"Stage {number}: remaining flow entering the effect is negative "
               f"({remaining_flow:.2f} t/h); upstream evaporation exceeds the feed.")
        logger.warning(msg)
        diagnostics.append(msg)

    conc_out = estimate_concentration(stage.outlet_temp, stage.outlet_density)
    qrun = stage_throughput(remaining_flow, inlet_conc, conc_out)
    if not (conc_out > inlet_conc and conc_out > 0):
        msg = (f"Stage {number}: outlet concentration {conc_out:.2f}% does not exceed "
               f"inlet {inlet_conc:.2f}%; no evaporation credited.")
        logger.warning(msg)
        diagnostics.append(msg)

    health = health_ratio(qrun, capacity)
    result = StageResult(
        stage=number, capacity=capacity, concentration=conc_out, throughput=qrun,
        health=health, status=classify_health(health),
        inlet_concentration=inlet_conc, inlet_flow=remaining_flow,
    )
    return result, remaining_flow - qrun


def evaluate_plant(stage_inputs: Sequence[StageInput], feed_concentration: float,
                   target_concentration: float, actual_flow: float) -> PlantEvaluation:
    """
    Full evaluation of the three effects plus the start-up feed recommendation.

    Raises InvalidConfigurationError when the stage list is not exactly three
    effects or a design Δt is zero / negative / non-finite.
    """
    stage_inputs = list(stage_inputs)
    if len(stage_inputs) != STAGE_COUNT:
        raise InvalidConfigurationError(f"expected {STAGE_COUNT} stages, got {len(stage_inputs)}")

    capacities = [stage_capacity(s) for s in stage_inputs]
    total = sum(capacities)
    diagnostics: List[str] = []

    theoretical_max, low, high, suggested = feed_recommendation(total, feed_concentration, target_concentration)
    if target_concentration <= feed_concentration:
        msg = (f"Target concentration {target_concentration:.2f}% is not above feed "
               f"{feed_concentration:.2f}%; no feed recommendation.")
        logger.warning(msg)
        diagnostics.append(msg)

    results = []
    inlet_conc, remaining = feed_concentration, actual_flow
    for number, (stage, capacity) in enumerate(zip(stage_inputs, capacities), start=1):
        result, remaining = evaluate_stage(number, stage, capacity, inlet_conc, remaining, diagnostics)
        results.append(result)
        inlet_conc = result.concentration

    summary = PlantSummary(
        feed_concentration=feed_concentration, target_concentration=target_concentration,
        actual_flow=actual_flow, total_capacity=total, theoretical_max=theoretical_max,
        recommended_low=low, recommended_high=high, suggested_flow=suggested,
    )
    logger.debug("evaluated plant: ΣQset=%.3f t/h, health=%s", total,
                 ", ".join(f"{r.health:.2f}" for r in results))
    return PlantEvaluation(summary=summary, stages=tuple(results), diagnostics=tuple(diagnostics))
