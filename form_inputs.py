# form_inputs.py  — lenient form parsing: anything not a finite positive number falls back to its default
import logging
import math

from evap_model import StageInput
from settings import PLANT_DEFAULTS, STAGE_COUNT, STAGE_DEFAULTS

logger = logging.getLogger(__name__)

STAGE_FIELDS = ("qnom", "dt_design", "dt_set", "temp", "dens")


def default_form():
    """Flat field-name → default value mapping (qnom_1 … dens_3 plus plant-wide fields)."""
    out = dict(PLANT_DEFAULTS)
    for i, d in enumerate(STAGE_DEFAULTS, start=1):
        for f in STAGE_FIELDS:
            out[f"{f}_{i}"] = d[f]
    return out


def positive_or_default(raw, default):
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(value) or value <= 0:
        return default
    return value


def read_form(mapping):
    """Parse every known field from a str→str mapping (query params, POST form, CLI dict)."""
    values = {}
    for name, default in default_form().items():
        raw = mapping.get(name) if mapping is not None else None
        parsed = positive_or_default(raw, None)
        if parsed is None:
            if raw not in (None, ""):
                logger.debug("field %s=%r rejected, using default %s", name, raw, default)
            parsed = default
        values[name] = parsed
    return values


def stage_inputs_from(values):
    return [
        StageInput(
            rating_kw=values[f"qnom_{i}"], dt_design=values[f"dt_design_{i}"],
            dt_operating=values[f"dt_set_{i}"], outlet_temp=values[f"temp_{i}"],
            outlet_density=values[f"dens_{i}"],
        )
        for i in range(1, STAGE_COUNT + 1)
    ]
