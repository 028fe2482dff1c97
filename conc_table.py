# conc_table.py  — CoSO4·7H2O density table + temperature/density → concentration
"""
Reference densities of cobalt sulfate heptahydrate solution and the bilinear
lookup that turns an outlet (temperature, density) reading into a mass
fraction.

Rows are keyed by temperature (°C); each row lists (mass fraction %, density
g/cm³) pairs in ascending order. Outside a row's density range the lookup
returns the row's end value, and outside the temperature range it uses the
nearest row, so results never leave the measured envelope.
"""
import logging
from types import MappingProxyType

import numpy as np
import pandas as pd

from errors import ReferenceTableError

logger = logging.getLogger(__name__)

_RAW_TABLE = {
    20:  ((0, 1.000), (10, 1.092), (15, 1.142), (20, 1.195), (25, 1.250), (30, 1.308), (35, 1.368),
          (40, 1.431), (45, 1.497), (48, 1.540), (50, 1.569), (51, 1.584), (52, 1.599)),
    40:  ((0, 1.000), (15, 1.126), (20, 1.175), (25, 1.227), (30, 1.282), (35, 1.340), (40, 1.401),
          (45, 1.465), (48, 1.505), (50, 1.533), (51, 1.547), (52, 1.561)),
    50:  ((0, 1.000), (20, 1.160), (25, 1.210), (30, 1.263), (35, 1.319), (40, 1.378), (45, 1.440),
          (48, 1.478), (50, 1.505), (51, 1.519), (52, 1.533)),
    55:  ((0, 1.000), (30, 1.247), (34, 1.293), (38, 1.345), (42, 1.400), (46, 1.458), (49, 1.500),
          (50, 1.515), (51, 1.530), (51.8, 1.540)),
    60:  ((0, 1.000), (32, 1.268), (36, 1.316), (40, 1.368), (44, 1.423), (48, 1.482), (50, 1.512),
          (51, 1.527), (52, 1.542), (53, 1.557)),
    80:  ((0, 0.992), (40, 1.315), (45, 1.367), (48, 1.405), (50, 1.433), (51, 1.447), (52, 1.461)),
    100: ((0, 0.980), (45, 1.330), (48, 1.365), (50, 1.392), (51, 1.405), (52, 1.418)),
}


def validate_table(table):
    """Raise ReferenceTableError unless every row is non-empty and strictly increasing."""
    if not table:
        raise ReferenceTableError("density table is empty")
    for temp, row in table.items():
        if len(row) == 0:
            raise ReferenceTableError(f"row {temp}°C is empty")
        conc = np.array([c for c, _ in row], float)
        dens = np.array([d for _, d in row], float)
        if not (np.all(np.isfinite(conc)) and np.all(np.isfinite(dens))):
            raise ReferenceTableError(f"row {temp}°C has non-finite values")
        if np.any(np.diff(dens) <= 0) or np.any(np.diff(conc) <= 0):
            raise ReferenceTableError(f"row {temp}°C is not strictly increasing")
    return table


def _freeze(table):
    rows = {float(t): tuple((float(c), float(d)) for c, d in row) for t, row in table.items()}
    return MappingProxyType(dict(sorted(rows.items())))


DENSITY_TABLE = _freeze(validate_table(_RAW_TABLE))
TEMPERATURES = tuple(DENSITY_TABLE.keys())   # ascending


def bracket_rows(temperature, temperatures=TEMPERATURES):
    """Return (t1, t2): nearest table rows at or below / at or above the temperature, clamped."""
    below = [t for t in temperatures if t <= temperature]
    above = [t for t in temperatures if t >= temperature]
    t1 = below[-1] if below else temperatures[0]
    t2 = above[0] if above else t1
    return t1, t2


def row_concentration(row, density):
    """Linear density → concentration within one row; flat beyond either end."""
    conc = [c for c, _ in row]
    dens = [d for _, d in row]
    return float(np.interp(density, dens, conc, left=conc[0], right=conc[-1]))


def estimate_concentration(temperature, density, table=DENSITY_TABLE):
    """
    Mass fraction (%) of CoSO4·7H2O for an outlet temperature (°C) and density (g/cm³).

    Interpolates within the two bracketing temperature rows, then linearly
    across temperature. Never raises for finite inputs.
    """
    temperatures = TEMPERATURES if table is DENSITY_TABLE else tuple(sorted(table))
    t1, t2 = bracket_rows(temperature, temperatures)
    logger.debug("conc lookup %.2f°C / %.4f g/cm³ → rows %s/%s", temperature, density, t1, t2)
    c1 = row_concentration(table[t1], density)
    if t1 == t2:
        return c1
    c2 = row_concentration(table[t2], density)
    return c1 + (c2 - c1) / (t2 - t1) * (temperature - t1)


def concentration_bounds(table=DENSITY_TABLE):
    concs = [c for row in table.values() for c, _ in row]
    return min(concs), max(concs)


def table_frame(table=DENSITY_TABLE):
    """Long-format DataFrame: one line per (temperature, concentration, density) sample."""
    rows = [{"Temperature (°C)": t, "Concentration (%)": c, "Density (g/cm³)": d}
            for t, row in table.items() for c, d in row]
    return pd.DataFrame(rows)
