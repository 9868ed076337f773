import io
import logging
from pathlib import Path

from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from storefront.config import settings
from storefront.exceptions import NotFoundError, UnauthorizedError
from storefront.models.order import Order
from storefront.models.user import User

logger = logging.getLogger(__name__)

SEPARATOR = "------------------------"
LEFT_MARGIN = 72
TOP_MARGIN = 72
BOTTOM_MARGIN = 72


def invoice_name(order_id: int) -> str:
    return f"invoice-{order_id}.pdf"


def invoice_path(order_id: int) -> Path:
    return Path(settings.invoice_dir) / invoice_name(order_id)


def format_price(value: float) -> str:
    return f"${value:.2f}"


def invoice_lines(order: Order) -> list:
    """(text, font size, underline) rows in print order."""
    rows = [("Invoice", 26, True), (SEPARATOR, 14, False)]

    for item in order.items:
        rows.append(
            (f"{item.title} - {item.quantity} x {format_price(item.price)}", 14, False)
        )

    rows.append((SEPARATOR, 14, False))
    rows.append((f"Total Price: {format_price(order.total)}", 20, False))
    return rows


def render_invoice_pdf(order: Order) -> bytes:
    buffer = io.BytesIO()
    width, height = letter
    pdf = canvas.Canvas(buffer, pagesize=letter)
    pdf.setTitle(invoice_name(order.id))

    y = height - TOP_MARGIN
    for text, size, underline in invoice_lines(order):
        line_height = size * 1.4
        if y - line_height < BOTTOM_MARGIN:
            pdf.showPage()
            y = height - TOP_MARGIN

        y -= line_height
        pdf.setFont("Helvetica", size)
        pdf.drawString(LEFT_MARGIN, y, text)

        if underline:
            text_width = pdf.stringWidth(text, "Helvetica", size)
            pdf.line(LEFT_MARGIN, y - 3, LEFT_MARGIN + text_width, y - 3)

    pdf.save()
    return buffer.getvalue()


def build_invoice(order: Order, requester: User) -> bytes:
    """
    Render the invoice for ``order`` if ``requester`` bought it.

    The document is written to INVOICE_DIR and the same bytes are returned
    for the response.
    """
    if order is None:
        raise NotFoundError("No order found.")

    if order.user_id != requester.id:
        raise UnauthorizedError("Unauthorized")

    pdf_bytes = render_invoice_pdf(order)

    path = invoice_path(order.id)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(pdf_bytes)

    logger.info(f"Invoice for order {order.id} written to {path}")
    return pdf_bytes
