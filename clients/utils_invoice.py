from io import BytesIO
from xml.sax.saxutils import escape

from django.conf import settings
from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle, HRFlowable


def generate_invoice_pdf(bill):
    """Render an invoice for ``bill`` and return the PDF bytes."""
    buffer = BytesIO()
    company = escape(settings.CERTIFICATE_COMPANY)
    client = bill.client

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle("title", parent=styles["Heading1"], alignment=2, fontSize=24,
                                 textColor=colors.HexColor("#1a56db"), spaceAfter=5)
    section_header_style = ParagraphStyle("section_header", parent=styles["Heading2"], fontSize=12,
                                          textColor=colors.black, spaceBefore=12, spaceAfter=8)
    label_style = ParagraphStyle("label", parent=styles["Normal"], fontSize=10, leading=14)
    footer_style = ParagraphStyle("footer", parent=styles["Normal"], alignment=1, fontSize=9,
                                  textColor=colors.grey, spaceBefore=25)

    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=60,
        leftMargin=60,
        topMargin=60,
        bottomMargin=60,
        title=bill.invoice_number,
    )

    elements = []

    header_table = Table(
        [[Paragraph(f"<b>{company}</b>", label_style), Paragraph("<b>INVOICE</b>", title_style)]],
        colWidths=[250, 225],
        hAlign="LEFT",
    )
    header_table.setStyle(TableStyle([
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("LEFTPADDING", (0, 0), (-1, -1), 0),
        ("RIGHTPADDING", (0, 0), (-1, -1), 0),
    ]))
    elements.append(header_table)
    elements.append(Spacer(1, 20))

    billing_address = escape(client.billing_address or client.company_address).replace("\n", "<br/>")
    elements.append(Paragraph("<b>BILL TO</b>", section_header_style))
    elements.append(Paragraph(
        f"{escape(client.client_name)}<br/>{escape(client.contact_person)}<br/>"
        f"{billing_address}<br/>{escape(client.email)}",
        label_style,
    ))
    if client.gst_number:
        elements.append(Paragraph(f"GST: {escape(client.gst_number)}", label_style))
    elements.append(Spacer(1, 12))

    data = [
        ["Invoice Number:", bill.invoice_number],
        ["Bill Date:", bill.bill_date.strftime("%d/%m/%Y")],
        ["Due Date:", bill.due_date.strftime("%d/%m/%Y")],
        ["Description:", Paragraph(escape(bill.description) or "-", label_style)],
        ["Amount:", f"{bill.amount:,.2f}"],
        ["Status:", bill.get_status_display()],
    ]
    if bill.transaction_id:
        data.append(["Transaction ID:", bill.transaction_id])
    if client.payment_terms:
        data.append(["Payment Terms:", client.payment_terms])

    table = Table(data, colWidths=[150, 325], hAlign="CENTER")
    table.setStyle(TableStyle([
        ("TEXTCOLOR", (0, 0), (-1, -1), colors.black),
        ("BOX", (0, 0), (-1, -1), 0.75, colors.HexColor("#AAAAAA")),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#DDDDDD")),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("LEFTPADDING", (0, 0), (-1, -1), 12),
        ("RIGHTPADDING", (0, 0), (-1, -1), 12),
        ("TOPPADDING", (0, 0), (-1, -1), 8),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
    ]))
    elements.append(table)

    elements.append(HRFlowable(width="80%", thickness=0.5, color=colors.lightgrey, spaceBefore=12, spaceAfter=12))
    elements.append(Paragraph(
        f"<b>{company}</b><br/>Generated {timezone.now():%d/%m/%Y %H:%M}",
        footer_style,
    ))

    doc.build(elements)
    return buffer.getvalue()
