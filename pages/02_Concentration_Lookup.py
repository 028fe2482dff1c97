# --- Concentration_Lookup.py (temperature + density → CoSO4·7H2O %) ---
import io

import streamlit as st

from conc_table import DENSITY_TABLE, bracket_rows, concentration_bounds, estimate_concentration, row_concentration, table_frame
from settings import BRAND, STAGE_DEFAULTS, configure_logging

configure_logging()
st.set_page_config(page_title=f"{BRAND} • Concentration Lookup", page_icon="🧪", layout="wide")

st.title(f"{BRAND} • Concentration Lookup")
lo, hi = concentration_bounds()
st.caption(f"Bilinear lookup over the density table; results are held inside {lo:.0f}–{hi:.0f} %.")

col1,col2 = st.columns(2)
with col1: temp_c  = st.number_input("Temperature (°C)", 0.0, 150.0, STAGE_DEFAULTS[0]["temp"], 0.5)
with col2: density = st.number_input("Density (g/cm³)", 0.5, 2.5, STAGE_DEFAULTS[0]["dens"], 0.001, format="%.3f")

conc = estimate_concentration(temp_c, density)
t1, t2 = bracket_rows(temp_c)

c1,c2,c3 = st.columns(3)
c1.metric("Concentration", f"{conc:.2f} %")
c2.metric(f"Row {t1:.0f} °C", f"{row_concentration(DENSITY_TABLE[t1], density):.2f} %")
c3.metric(f"Row {t2:.0f} °C", f"{row_concentration(DENSITY_TABLE[t2], density):.2f} %")
if t1 == t2:
    st.info("Temperature on or outside a table row — no temperature interpolation applied.")

st.markdown("#### Reference table")
df = table_frame()
st.dataframe(df.pivot(index="Concentration (%)", columns="Temperature (°C)", values="Density (g/cm³)"),
             use_container_width=True)

csv_buf = io.StringIO(); df.to_csv(csv_buf, index=False)
st.download_button("Download table (CSV)", data=csv_buf.getvalue(), file_name="density_table.csv", mime="text/csv")
