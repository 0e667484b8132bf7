"""
PDF rendering for invoices using reportlab's canvas API.
"""

import os
from pathlib import Path

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from service_directory_api.app.core.config import settings
from service_directory_api.app.core.db import PROJECT_ROOT

from ..schemas.invoice import InvoiceRead


MARGIN = 50


def get_invoices_dir() -> Path:
    """Directory holding rendered PDFs; relative settings resolve against the project root."""
    if os.path.isabs(settings.invoices_dir):
        return Path(settings.invoices_dir)
    return (PROJECT_ROOT / settings.invoices_dir).resolve()


def invoice_pdf_path(invoice_number: str) -> Path:
    return get_invoices_dir() / f"{invoice_number}.pdf"


def _fmt_date(value) -> str:
    return value.strftime("%Y-%m-%d") if value else "N/A"


class _Writer:
    """Writes lines top‑down, starting a new page when the current one is full."""

    def __init__(self, pdf: canvas.Canvas, height: float):
        self.pdf = pdf
        self.height = height
        self.y = height - MARGIN

    def line(self, text: str, font: str = "Helvetica", size: int = 10, x: float = MARGIN, gap: float = 4) -> None:
        if self.y < MARGIN:
            self.pdf.showPage()
            self.y = self.height - MARGIN
        self.pdf.setFont(font, size)
        self.pdf.drawString(x, self.y, text)
        self.y -= size + gap

    def right(self, text: str, right_x: float, font: str = "Helvetica", size: int = 10) -> None:
        self.pdf.setFont(font, size)
        self.pdf.drawRightString(right_x, self.y, text)
        self.y -= size + 4

    def space(self, amount: float = 10) -> None:
        self.y -= amount


def render_invoice_pdf(invoice: InvoiceRead) -> Path:
    """Render ``invoice`` to ``<invoices dir>/<invoice number>.pdf`` and return the path."""
    path = invoice_pdf_path(invoice.invoice_number)
    path.parent.mkdir(parents=True, exist_ok=True)

    pdf = canvas.Canvas(str(path), pagesize=A4)
    width, height = A4
    pdf.setTitle(f"Invoice {invoice.invoice_number}")
    w = _Writer(pdf, height)

    pdf.setFont("Helvetica-Bold", 20)
    pdf.drawCentredString(width / 2, w.y, "INVOICE")
    w.space(24)
    pdf.setFont("Helvetica", 10)
    pdf.drawCentredString(width / 2, w.y, f"Invoice #: {invoice.invoice_number}")
    w.space(14)
    pdf.drawCentredString(width / 2, w.y, f"Issued: {_fmt_date(invoice.issued_date)}")
    w.space(24)

    w.line("Service Directory Platform", font="Helvetica-Bold", size=12)
    w.line("support@servicedirectory.com")
    w.space()

    customer = invoice.customer_details
    w.line("Bill To:", font="Helvetica-Bold", size=12)
    w.line(customer.name or "N/A")
    w.line(customer.email or "N/A")
    w.line(customer.phone)
    w.space()

    provider = invoice.provider_details
    w.line("Service Provider:", font="Helvetica-Bold", size=12)
    w.line(provider.business_name or provider.name or "N/A")
    w.line(provider.email or "N/A")
    w.line(provider.phone)
    w.space()

    service = invoice.service_details
    w.line("Service Details", font="Helvetica-Bold", size=12)
    w.line(f"Service Name: {service.name or 'N/A'}", size=9)
    w.line(f"Description: {service.description or ''}", size=9)
    w.line(f"Date: {_fmt_date(service.date)}", size=9)
    w.line(f"Location: {service.location or 'N/A'}", size=9)
    w.space()

    right_x = width - MARGIN
    w.line("Amount Details:", font="Helvetica-Bold", size=10)
    w.right(f"Subtotal: ${invoice.subtotal:.2f}", right_x, size=9)
    if invoice.tax > 0 and invoice.subtotal:
        w.right(f"Tax ({invoice.tax / invoice.subtotal * 100:.1f}%): ${invoice.tax:.2f}", right_x, size=9)
    w.right(f"Platform Fee: ${invoice.platform_fee:.2f}", right_x, size=9)
    w.right(f"Total Amount: ${invoice.total_amount:.2f}", right_x, font="Helvetica-Bold", size=10)
    w.space()

    w.line("Payment Status:", font="Helvetica-Bold", size=12)
    w.line(invoice.payment_status.upper())
    if invoice.paid_date:
        w.line(f"Paid on: {_fmt_date(invoice.paid_date)}")
    w.space()

    if invoice.notes:
        w.line("Notes:", font="Helvetica-Bold", size=12)
        w.line(invoice.notes)
        w.space()

    pdf.setFont("Helvetica", 8)
    pdf.drawCentredString(width / 2, MARGIN / 2 + 10, "Thank you for using Service Directory!")
    pdf.drawCentredString(width / 2, MARGIN / 2, "This is an electronically generated invoice.")
    pdf.showPage()
    pdf.save()
    return path
