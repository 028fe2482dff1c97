# settings.py  — process defaults, policy constants and env-driven knobs
import os
import logging

BRAND        = os.environ.get("EVAP_BRAND", "CoSO4 Evaporator")
PRIMARY_HEX  = "#2E7D32"   # green
ACCENT_HEX   = "#E8F5E9"   # light green bg
LOG_LEVEL    = os.environ.get("EVAP_LOG_LEVEL", "INFO").upper()
DEFAULT_LANG = os.environ.get("EVAP_DEFAULT_LANG", "English")

# -------------------- physics & policy --------------------
LATENT_HEAT_KJ_PER_KG = 2257.0          # water, used for kW → t/h
FEED_MARGINS = {"low": 0.75, "high": 0.95, "suggested": 0.90}
# (threshold, status), first strict ">" match wins; below the last threshold is severe fouling
HEALTH_LADDER = [(1.1, "overloaded"), (0.9, "good"), (0.7, "light_fouling"), (0.5, "moderate_fouling")]

STAGE_COUNT = 3

# -------------------- form defaults --------------------
PLANT_DEFAULTS = {"target_conc": 52.5, "feed_conc": 18.0, "actual_flow": 55.0}

STAGE_DEFAULTS = [
    {"qnom": 1200.0, "dt_design": 25.0, "dt_set": 24.0, "temp": 92.0, "dens": 1.190},
    {"qnom": 1000.0, "dt_design": 22.0, "dt_set": 20.0, "temp": 78.0, "dens": 1.290},
    {"qnom":  800.0, "dt_design": 18.0, "dt_set": 16.0, "temp": 62.0, "dens": 1.550},
]

_configured = False

def configure_logging(level=None):
    """Install a root handler once; Streamlit re-runs the script on every widget change."""
    global _configured
    if _configured:
        return
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _configured = True
