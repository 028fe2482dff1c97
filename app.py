# app.py  — triple-effect evaporator heating-chamber health (Streamlit)
import logging

import streamlit as st

from errors import EvaporatorError
from evap_model import evaluate_plant
from exports import to_csv_bytes, to_excel_bytes, to_json_bytes, to_pdf_bytes, stage_frame
from form_inputs import read_form, stage_inputs_from
from settings import ACCENT_HEX, BRAND, DEFAULT_LANG, LATENT_HEAT_KJ_PER_KG, PRIMARY_HEX, configure_logging

configure_logging()
logger = logging.getLogger("app")

st.set_page_config(page_title=f"{BRAND} — Evaporator Health", page_icon="♨️", layout="wide")
st.markdown(
    f"""
    <style>
      .block-container{{padding-top:0.7rem}}
      h1,h2,h3,h4{{color:{PRIMARY_HEX}}}
      .evap-badge{{background:{ACCENT_HEX};border:1px solid #b9e4bc;padding:6px 10px;border-radius:10px;display:inline-block}}
      .good{{background:#eaf8ef;border-radius:8px;padding:6px 10px}}
      .warn{{background:#fff8e1;border-radius:8px;padding:6px 10px}}
      .bad{{background:#fdecea;border-radius:8px;padding:6px 10px}}
      .muted{{color:#666}}
    </style>
    """,
    unsafe_allow_html=True
)

# -------------------- Language pack --------------------
T = {
    "English": {},
    "中文": {
        "Language":"语言","Select Language":"选择语言",
        "Heating Chamber Health":"三效蒸发加热室健康度评估系统",
        "Part 1 · Start-up feed recommendation":"第一部分：开机投料推荐",
        "Part 2 · Per-effect health":"第二部分：每效健康度评估",
        "Feed concentration (%)":"手动输入进料浓度 (%)","Target concentration (%)":"目标浓度 (%)",
        "Actual feed flow (t/h)":"用户实际输入流量 (t/h)",
        "ΣQset (t/h)":"系统峰值脱水能力 ΣQset (t/h)","Theoretical max feed":"理论最大投料量",
        "Recommended range":"推荐投料范围（安全+高效）","Suggested setpoint":"建议设定值",
        "90% load, best economic point":"90%负荷，最优经济点","Evaluated at":"当前时间",
        "Effect":"效","Equipment":"设备参数","Operation":"运行参数","Results":"计算结果",
        "Rating Qnom (kW)":"厂家预设换热能力 Qnom (kW)","Design Δt (°C)":"预设温差 (℃)",
        "Operating Δt (°C)":"计划温差 (℃)","Outlet temperature (°C)":"出料温度 (℃)",
        "Outlet density (g/cm³)":"出料密度 (g/cm³)","Recognised concentration":"自动识别浓度",
        "Theoretical capacity Qset":"理论蒸发能力 Qset","Actual evaporation Qrun":"实际蒸发能力 Qrun",
        "Health":"健康度","Status":"状态","Diagnostics":"诊断信息","Exports":"导出",
        "Overloaded":"超负荷运行","Good":"运行良好","Light fouling":"轻微结垢",
        "Moderate fouling":"中度结垢","Severe fouling":"严重结垢",
        "Adjust the operating Δt and ΣQset follows; comparing Qrun with Qset shows heating-chamber fouling.":
            "基于实际运行参数，调整温差Δt_s，ΣQset会实时变化，通过实际蒸发量Qrun与理论能力Qset对比判断加热室健康度",
    },
}
def tr(s, lang): return T.get(lang, {}).get(s, s)

with st.sidebar:
    st.header("🌐 " + tr("Language", "English"))
    langs = list(T.keys())
    lang = st.selectbox(tr("Select Language", "English"), langs, index=langs.index(DEFAULT_LANG) if DEFAULT_LANG in langs else 0)

# query params pre-fill the form (e.g. ?feed_conc=20&dens_1=1.25)
qp = st.query_params
defaults = read_form({k: qp.get(k) for k in qp.keys()})
def w(name, hi): return min(defaults[name], hi)   # keep pre-fill inside the widget range

# -------------------- Header --------------------
st.title(f"{BRAND} • {tr('Heating Chamber Health', lang)}")
st.markdown(f'<span class="evap-badge">Latent heat: {LATENT_HEAT_KJ_PER_KG:.0f} kJ/kg</span>', unsafe_allow_html=True)

# -------------------- Inputs --------------------
st.markdown("### 🧪 " + tr("Part 1 · Start-up feed recommendation", lang))
colA,colB,colC = st.columns(3)
raw = {}
with colA: raw["feed_conc"]   = st.number_input(tr("Feed concentration (%)", lang), 0.0, 100.0, w("feed_conc", 100.0), 0.1)
with colB: raw["target_conc"] = st.number_input(tr("Target concentration (%)", lang), 0.0, 100.0, w("target_conc", 100.0), 0.1)
with colC: raw["actual_flow"] = st.number_input(tr("Actual feed flow (t/h)", lang), 0.0, 10000.0, w("actual_flow", 10000.0), 0.1)

stage_cols = st.columns(3)
for i, col in enumerate(stage_cols, start=1):
    with col:
        st.markdown(f"#### {['I','II','III'][i-1]} {tr('Effect', lang)}")
        st.caption(tr("Equipment", lang))
        raw[f"qnom_{i}"]      = st.number_input(tr("Rating Qnom (kW)", lang), 0.0, 100000.0, w(f"qnom_{i}", 100000.0), 10.0, key=f"qnom_{i}")
        raw[f"dt_design_{i}"] = st.number_input(tr("Design Δt (°C)", lang), 0.0, 200.0, w(f"dt_design_{i}", 200.0), 0.1, key=f"dt_design_{i}")
        st.caption(tr("Operation", lang))
        raw[f"dt_set_{i}"]    = st.number_input(tr("Operating Δt (°C)", lang), 0.0, 200.0, w(f"dt_set_{i}", 200.0), 0.1, key=f"dt_set_{i}")
        raw[f"temp_{i}"]      = st.number_input(tr("Outlet temperature (°C)", lang), 0.0, 200.0, w(f"temp_{i}", 200.0), 0.1, key=f"temp_{i}")
        raw[f"dens_{i}"]      = st.number_input(tr("Outlet density (g/cm³)", lang), 0.0, 3.0, w(f"dens_{i}", 3.0), 0.001,
                                                format="%.3f", key=f"dens_{i}")

# zero / empty widgets fall back to defaults, same as a bad form field
values = read_form(raw)

# -------------------- Evaluate --------------------
try:
    ev = evaluate_plant(stage_inputs_from(values), values["feed_conc"], values["target_conc"], values["actual_flow"])
except EvaporatorError as e:
    logger.error("evaluation rejected: %s", e)
    st.error(f"Configuration rejected: {e}"); st.stop()

s = ev.summary
c1,c2,c3,c4,c5 = st.columns(5)
c1.metric(tr("ΣQset (t/h)", lang), f"{s.total_capacity:.1f}")
c2.metric(tr("Theoretical max feed", lang), f"{s.theoretical_max:.1f} t/h")
c3.metric(tr("Recommended range", lang), f"{s.recommended_low:.1f} ~ {s.recommended_high:.1f} t/h")
c4.metric(tr("Suggested setpoint", lang), f"{s.suggested_flow:.1f} t/h", help=tr("90% load, best economic point", lang))
c5.metric(tr("Evaluated at", lang), f"{ev.evaluated_at:%H:%M:%S}")

st.markdown("### 🔥 " + tr("Part 2 · Per-effect health", lang))
st.caption(tr("Adjust the operating Δt and ΣQset follows; comparing Qrun with Qset shows heating-chamber fouling.", lang))
for col, r in zip(st.columns(3), ev.stages):
    with col:
        st.markdown(f"#### {['I','II','III'][r.stage-1]} {tr('Effect', lang)}")
        st.caption(tr("Results", lang))
        st.write(f"{tr('Recognised concentration', lang)}: *{r.concentration:.2f} %*")
        st.write(f"{tr('Theoretical capacity Qset', lang)}: *{r.capacity:.2f} t/h*")
        st.write(f"{tr('Actual evaporation Qrun', lang)}: *{r.throughput:.2f} t/h*")
        st.markdown(f"<div class='{r.status.badge}'><b>{tr('Health', lang)}: {r.health:.2f}</b> — "
                    f"{tr('Status', lang)}: {tr(r.status.label, lang)}</div>", unsafe_allow_html=True)

if ev.diagnostics:
    st.markdown("#### " + tr("Diagnostics", lang))
    for d in ev.diagnostics: st.warning(d)

st.dataframe(stage_frame(ev).style.format({"ConcOut (%)":"{:.2f}","Qset (t/h)":"{:.2f}","Qrun (t/h)":"{:.2f}","Health":"{:.2f}"}),
             use_container_width=True)

# ---------- Exports ----------
st.markdown("#### " + tr("Exports", lang))
stamp = f"{ev.evaluated_at:%Y%m%d_%H%M%S}"
e1,e2,e3,e4 = st.columns(4)
e1.download_button("Download JSON", to_json_bytes(ev, values), file_name=f"evap_health_{stamp}.json", mime="application/json")
e2.download_button("Download CSV", to_csv_bytes(ev), file_name=f"evap_health_{stamp}.csv", mime="text/csv")
e3.download_button("Download Excel", to_excel_bytes(ev), file_name=f"evap_health_{stamp}.xlsx",
                   mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")
e4.download_button("Download PDF", to_pdf_bytes(ev), file_name=f"evap_health_{stamp}.pdf", mime="application/pdf")

st.caption("Note: first-order estimate (heat transfer linear in Δt, fixed latent heat). Validate against plant balances before acting on it.")
