"""
Invoice endpoints for API v1.
"""

from typing import Literal

from fastapi import APIRouter, Path, Query
from fastapi.responses import FileResponse

from service_directory_api.app.schemas.common import MessageResponse
from service_directory_api.app.schemas.invoice import InvoiceCreate, InvoicePage, InvoiceResult
from service_directory_api.app.services.invoice_service import InvoiceService

from ..errors import http_error


router = APIRouter()


@router.post("/create", response_model=InvoiceResult)
async def create_invoice(data: InvoiceCreate) -> InvoiceResult:
    """Issue an invoice for a payment and render its PDF."""
    try:
        invoice = await InvoiceService.create_invoice(data.payment_id)
    except ValueError as e:
        raise http_error(e)
    return InvoiceResult(message="Invoice created successfully", invoice=invoice)


@router.get("/user/{user_id}", response_model=InvoicePage)
async def list_user_invoices(
    user_id: int = Path(...),
    role: Literal["customer", "provider"] = Query("customer"),
    limit: int = Query(20, ge=1, le=100),
    skip: int = Query(0, ge=0),
) -> InvoicePage:
    return await InvoiceService.list_for_user(user_id, role=role, limit=limit, skip=skip)


@router.get("/{invoice_id}/download")
async def download_invoice(invoice_id: int = Path(...)) -> FileResponse:
    try:
        path = await InvoiceService.get_pdf_path(invoice_id)
    except ValueError as e:
        raise http_error(e)
    return FileResponse(path, media_type="application/pdf", filename=path.name)


@router.patch("/{invoice_id}/mark-paid", response_model=InvoiceResult)
async def mark_invoice_paid(invoice_id: int = Path(...)) -> InvoiceResult:
    try:
        invoice = await InvoiceService.mark_paid(invoice_id)
    except ValueError as e:
        raise http_error(e)
    return InvoiceResult(message="Invoice marked as paid", invoice=invoice)


@router.post("/{invoice_id}/send-email", response_model=InvoiceResult)
async def send_invoice_email(invoice_id: int = Path(...)) -> InvoiceResult:
    try:
        invoice = await InvoiceService.send_email(invoice_id)
    except ValueError as e:
        raise http_error(e)
    return InvoiceResult(message="Invoice sent to customer email", invoice=invoice)


@router.get("/{invoice_id}", response_model=InvoiceResult)
async def get_invoice(invoice_id: int = Path(...)) -> InvoiceResult:
    try:
        invoice = await InvoiceService.get_invoice(invoice_id)
    except ValueError as e:
        raise http_error(e)
    return InvoiceResult(message="Invoice found", invoice=invoice)


@router.delete("/{invoice_id}", response_model=MessageResponse)
async def delete_invoice(invoice_id: int = Path(...)) -> MessageResponse:
    try:
        await InvoiceService.delete_invoice(invoice_id)
    except ValueError as e:
        raise http_error(e)
    return MessageResponse(message="Invoice deleted successfully")
