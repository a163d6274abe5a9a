from __future__ import annotations

import csv
from io import BytesIO, StringIO

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from stockledger.models.product import Product
from stockledger.models.stock_event import StockEvent


EXPORT_COLUMNS = ["event_id", "created_at", "product_id", "sku", "product_name", "type", "quantity", "reason"]


def event_rows(events: list[StockEvent], products: dict[int, Product]) -> list[list]:
    rows = []
    for row in events:
        product = products.get(row.product_id)
        rows.append(
            [
                row.id,
                row.created_at.isoformat(),
                row.product_id,
                product.sku if product else "",
                product.name if product else "",
                row.event_type,
                row.quantity,
                row.reason,
            ]
        )
    return rows


def events_to_csv(events: list[StockEvent], products: dict[int, Product]) -> str:
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(EXPORT_COLUMNS)
    writer.writerows(event_rows(events, products))
    return output.getvalue()


def events_to_pdf(events: list[StockEvent], products: dict[int, Product], title: str = "Stock ledger") -> bytes:
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    _, height = A4

    def draw_header(y: float) -> float:
        pdf.setFont("Helvetica-Bold", 10)
        pdf.drawString(50, y, "Date")
        pdf.drawString(160, y, "SKU")
        pdf.drawString(280, y, "Type")
        pdf.drawString(330, y, "Qty")
        pdf.drawString(380, y, "Reason")
        y -= 12
        pdf.line(50, y, 540, y)
        pdf.setFont("Helvetica", 9)
        return y - 14

    y = height - 50
    pdf.setFont("Helvetica-Bold", 16)
    pdf.drawString(50, y, title)
    y -= 20
    pdf.setFont("Helvetica", 10)
    pdf.drawString(50, y, f"Events: {len(events)}")
    y -= 24
    y = draw_header(y)

    for _event_id, created_at, _product_id, sku, _name, event_type, quantity, reason in event_rows(events, products):
        if y < 60:
            pdf.showPage()
            y = draw_header(height - 50)
        pdf.drawString(50, y, created_at[:19].replace("T", " "))
        pdf.drawString(160, y, sku[:22])
        pdf.drawString(280, y, event_type)
        pdf.drawRightString(360, y, str(quantity))
        pdf.drawString(380, y, (reason or "")[:32])
        y -= 14

    pdf.save()
    return buffer.getvalue()
