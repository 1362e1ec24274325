import io
from xml.sax.saxutils import escape
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from taxplan.logic.reporting.plan_summary import format_currency


def generate_pdf_for_plan(plan):
    """Generate a PDF for a tax plan: header, description and a Category / Suggestion / Savings table."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=A4,
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )

    styles = getSampleStyleSheet()
    body = styles["BodyText"]
    elements = [
        Paragraph(escape(plan.name or "Tax Plan"), styles["Title"]),
        Paragraph(f"Created {plan.created_at.strftime('%d %b %Y')}", styles["Normal"]),
        Spacer(1, 8),
    ]
    if plan.description:
        elements += [Paragraph(escape(plan.description), body), Spacer(1, 12)]

    data = [["Category", "Suggestion", "Potential Savings", "Done"]]
    for s in plan.suggestions:
        data.append([
            Paragraph(escape(s.category), body),
            Paragraph(escape(s.suggestion_text), body),
            format_currency(s.potential_saving),
            "Yes" if s.is_implemented else "-",
        ])
    data.append(["", "Total", format_currency(plan.potential_savings), ""])

    table = Table(data, repeatRows=1, colWidths=[110, 260, 100, 40])
    table.setStyle(TableStyle([
        ("BACKGROUND", (0,0), (-1,0), colors.HexColor("#1565C0")),
        ("TEXTCOLOR", (0,0), (-1,0), colors.whitesmoke),
        ("VALIGN", (0,0), (-1,-1), "TOP"),
        ("ALIGN", (2,0), (-1,-1), "RIGHT"),
        ("FONTNAME", (0,0), (-1,0), "Helvetica-Bold"),
        ("FONTNAME", (0,-1), (-1,-1), "Helvetica-Bold"),
        ("FONTSIZE", (0,0), (-1,0), 11),
        ("BOTTOMPADDING", (0,0), (-1,0), 8),
        ("GRID", (0,0), (-1,-1), 0.5, colors.grey),
    ]))

    elements.append(table)
    doc.build(elements)
    return buf.getvalue()
