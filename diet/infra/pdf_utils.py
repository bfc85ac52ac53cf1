import io
from reportlab.lib.pagesizes import A4, landscape
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from diet.utilities.constants import MEAL_SLOTS, SAFETY_BANNER


def _dish_label(row) -> str:
    label = row["dish"] or row["dish_id"]
    if row.get("role"):
        label = f"{row['role']}: {label}"
    return label


def generate_pdf_for_day(report):
    """Generate a PDF for one day report (see summarize_day_plan): one row per slot and scope, gaps, totals."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=landscape(A4),
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )

    styles = getSampleStyleSheet()
    elements = [
        Paragraph(f"Family Diet Plan – {report['date']}", styles["Title"]),
        Spacer(1, 16),
    ]

    data = [["Slot", "For", "Dishes", "Notes"]]
    for slot in MEAL_SLOTS:
        rows = report["slots"].get(slot, [])
        by_scope = {}
        for row in rows:
            by_scope.setdefault(row["scope"], []).append(row)
        for scope, scope_rows in by_scope.items():
            who = "Everyone: " + ", ".join(scope_rows[0]["members"]) if scope_rows[0]["is_unified"] else scope
            notes = "; ".join(dict.fromkeys(n for r in scope_rows for n in r["rationale"][:2]))
            data.append([
                slot.capitalize(),
                Paragraph(who, styles["BodyText"]),
                Paragraph("<br/>".join(_dish_label(r) for r in scope_rows), styles["BodyText"]),
                Paragraph(notes or "-", styles["BodyText"]),
            ])
    for gap in report["gaps"]:
        where = gap["meal_slot"].capitalize() + (f" ({gap['role']})" if gap.get("role") else "")
        data.append([where, gap["scope"], "-", Paragraph(gap["message"], styles["BodyText"])])

    table = Table(data, repeatRows=1, colWidths=[80, 150, 250, 300])
    table.setStyle(TableStyle([
        ("BACKGROUND", (0,0), (-1,0), colors.HexColor("#4CAF50")),
        ("TEXTCOLOR", (0,0), (-1,0), colors.whitesmoke),
        ("ALIGN", (0,0), (0,-1), "CENTER"),
        ("VALIGN", (0,0), (-1,-1), "TOP"),
        ("FONTNAME", (0,0), (-1,0), "Helvetica-Bold"),
        ("FONTSIZE", (0,0), (-1,0), 12),
        ("BOTTOMPADDING", (0,0), (-1,0), 10),
        ("GRID", (0,0), (-1,-1), 0.5, colors.grey),
    ]))
    elements.append(table)
    elements.append(Spacer(1, 12))

    totals = [["Scope", "kcal", "Protein (g)", "Carbs (g)", "Fat (g)", "Sodium (mg)"]]
    for scope, t in report["totals"].items():
        totals.append([scope] + [f"{t[k]:g}" for k in ("calories", "protein", "carbohydrate", "fat", "sodium")])
    totals_table = Table(totals, repeatRows=1)
    totals_table.setStyle(TableStyle([
        ("BACKGROUND", (0,0), (-1,0), colors.HexColor("#E0E0E0")),
        ("FONTNAME", (0,0), (-1,0), "Helvetica-Bold"),
        ("GRID", (0,0), (-1,-1), 0.5, colors.grey),
    ]))
    elements.append(totals_table)
    elements.append(Spacer(1, 12))
    elements.append(Paragraph(SAFETY_BANNER, styles["Italic"]))

    doc.build(elements)
    return buf.getvalue()
