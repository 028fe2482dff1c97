# exports.py  — evaluation → JSON / CSV / Excel / PDF bytes for download buttons
import io
import json

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from conc_table import table_frame
from settings import BRAND, LATENT_HEAT_KJ_PER_KG

STAGE_NAMES = ["I", "II", "III"]


def evaluation_to_dict(ev, values=None):
    s = ev.summary
    return {
        "time": ev.evaluated_at.isoformat(timespec="seconds"),
        "inputs": dict(values or {}),
        "plant": {
            "feed_conc_pct": s.feed_concentration, "target_conc_pct": s.target_concentration,
            "actual_flow_th": s.actual_flow, "total_qset_th": s.total_capacity,
            "theoretical_max_th": s.theoretical_max, "recommend_low_th": s.recommended_low,
            "recommend_high_th": s.recommended_high, "suggest_flow_th": s.suggested_flow,
        },
        "stages": [
            {"stage": r.stage, "qset_th": r.capacity, "conc_out_pct": r.concentration,
             "qrun_th": r.throughput, "health": r.health, "status": r.status.value,
             "inlet_conc_pct": r.inlet_concentration, "inlet_flow_th": r.inlet_flow}
            for r in ev.stages
        ],
        "diagnostics": list(ev.diagnostics),
    }


def stage_frame(ev):
    return pd.DataFrame([{
        "Effect": STAGE_NAMES[r.stage - 1] if r.stage <= len(STAGE_NAMES) else str(r.stage),
        "ConcOut (%)": r.concentration, "Qset (t/h)": r.capacity, "Qrun (t/h)": r.throughput,
        "Health": r.health, "Status": r.status.label,
    } for r in ev.stages])


def summary_rows(ev):
    s = ev.summary
    return [
        ["Feed concentration (%)", s.feed_concentration],
        ["Target concentration (%)", s.target_concentration],
        ["Actual feed flow (t/h)", s.actual_flow],
        ["System peak evaporation ΣQset (t/h)", s.total_capacity],
        ["Theoretical max feed (t/h)", s.theoretical_max],
        ["Recommended feed low (t/h)", s.recommended_low],
        ["Recommended feed high (t/h)", s.recommended_high],
        ["Suggested setpoint (t/h)", s.suggested_flow],
    ]


def to_json_bytes(ev, values=None):
    return json.dumps(evaluation_to_dict(ev, values), indent=2, ensure_ascii=False).encode("utf-8")


def to_csv_bytes(ev):
    buf = io.StringIO(); stage_frame(ev).to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")


def to_excel_bytes(ev):
    excel_buf = io.BytesIO()
    stages = stage_frame(ev)
    with pd.ExcelWriter(excel_buf, engine="xlsxwriter") as writer:
        wb = writer.book
        title = wb.add_format({"bold": True, "font_size": 14})
        sub = wb.add_format({"italic": True, "font_color": "#666"})
        badfmt = wb.add_format({"bg_color": "#FFEBEE"})

        ws = wb.add_worksheet("Summary")
        ws.write("A1", f"{BRAND} — Heating Chamber Health", title)
        ws.write("A2", f"{ev.evaluated_at:%Y-%m-%d %H:%M:%S} | latent heat {LATENT_HEAT_KJ_PER_KG:.0f} kJ/kg", sub)
        rows = summary_rows(ev)
        ws.add_table(3, 0, 3 + len(rows), 1, {"data": rows, "columns": [{"header": "Field"}, {"header": "Value"}],
                                              "style": "Table Style Light 9"})
        ws.set_column(0, 0, 38); ws.set_column(1, 1, 14)
        if ev.diagnostics:
            ws.write(5 + len(rows), 0, "Diagnostics", title)
            for i, d in enumerate(ev.diagnostics, start=6 + len(rows)):
                ws.write(i, 0, d)

        stages.to_excel(writer, index=False, sheet_name="Stages")
        ws2 = writer.sheets["Stages"]; ws2.set_column(0, len(stages.columns) - 1, 16)
        health_idx = list(stages.columns).index("Health")
        ws2.conditional_format(1, health_idx, len(stages), health_idx,
                               {"type": "cell", "criteria": "<=", "value": 0.7, "format": badfmt})
        ch = wb.add_chart({"type": "column"})
        ch.add_series({"name": "Qset", "categories": ["Stages", 1, 0, len(stages), 0],
                       "values": ["Stages", 1, 2, len(stages), 2]})
        ch.add_series({"name": "Qrun", "categories": ["Stages", 1, 0, len(stages), 0],
                       "values": ["Stages", 1, 3, len(stages), 3]})
        ch.set_title({"name": "Evaporation per effect"}); ch.set_y_axis({"name": "t/h"})
        ws2.insert_chart("H3", ch, {"x_scale": 1.2, "y_scale": 1.0})

        table_frame().to_excel(writer, index=False, sheet_name="Density_Table")
        writer.sheets["Density_Table"].set_column(0, 2, 18)
    return excel_buf.getvalue()


def to_pdf_bytes(ev):
    pdf = io.BytesIO()
    doc = SimpleDocTemplate(pdf, pagesize=A4, leftMargin=24, rightMargin=24, topMargin=28, bottomMargin=28)
    styles = getSampleStyleSheet(); title_s = styles["Title"]; normal = styles["Normal"]
    grid = TableStyle([('BACKGROUND', (0, 0), (-1, 0), colors.HexColor("#EEF4FF")),
                       ('BOX', (0, 0), (-1, -1), 0.6, colors.black), ('INNERGRID', (0, 0), (-1, -1), 0.25, colors.grey),
                       ('ALIGN', (0, 0), (-1, -1), 'CENTER')])
    elements = []
    elements.append(Paragraph(f"<b>{BRAND} — Heating Chamber Health</b>", title_s))
    elements.append(Paragraph(f"Time: {ev.evaluated_at:%Y-%m-%d %H:%M:%S}", normal))
    elements.append(Spacer(1, 8))

    sum_tbl = [["Field", "Value"]] + [[k, f"{v:.2f}"] for k, v in summary_rows(ev)]
    t_sum = Table(sum_tbl, colWidths=[220, 100]); t_sum.setStyle(grid)
    elements.append(Paragraph("<b>Start-up feed recommendation</b>", normal)); elements.append(t_sum); elements.append(Spacer(1, 8))

    st_tbl = [["Effect", "ConcOut %", "Qset t/h", "Qrun t/h", "Health", "Status"]]
    for _, r in stage_frame(ev).iterrows():
        st_tbl.append([r["Effect"], f"{r['ConcOut (%)']:.2f}", f"{r['Qset (t/h)']:.2f}", f"{r['Qrun (t/h)']:.2f}",
                       f"{r['Health']:.2f}", r["Status"]])
    t_st = Table(st_tbl, colWidths=[50, 70, 70, 70, 60, 110]); t_st.setStyle(grid)
    elements.append(Paragraph("<b>Per-effect health</b>", normal)); elements.append(t_st); elements.append(Spacer(1, 8))

    for d in ev.diagnostics:
        elements.append(Paragraph(f"<b>Note:</b> {d}", normal))
    doc.build(elements)
    return pdf.getvalue()
