"""Bill lookup and lifecycle endpoints."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response, status

from application.services.billing_service import BillingService
from domain.models.bill import BillStatus as DomainBillStatus
from infrastructure.container import get_billing_service

from .schemas import (
    BillListResponse,
    BillPayment,
    BillResponse,
    BillStatus,
    ErrorResponse,
    OverdueSweepResponse,
    PaginationMeta,
)

router = APIRouter(prefix="/bills", tags=["Bills"])

BillID = Annotated[uuid.UUID, Path(description="Bill identifier.")]

_NOT_FOUND = {404: {"description": "Bill not found.", "model": ErrorResponse}}
_CONFLICT = {409: {"description": "Transition not allowed.", "model": ErrorResponse}}


@router.get("", response_model=BillListResponse, summary="List bills")
def list_bills(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status_filter: BillStatus | None = Query(None, alias="status"),
    service: BillingService = Depends(get_billing_service),
) -> BillListResponse:
    result = service.list_bills(
        page=page,
        size=page_size,
        status_filter=DomainBillStatus(status_filter.value) if status_filter else None,
    )
    return BillListResponse(
        items=[BillResponse.from_domain(b) for b in result.items],
        pagination=PaginationMeta(
            page=result.page,
            page_size=result.size,
            total_items=result.total,
            total_pages=result.pages,
        ),
    )


@router.post(
    "/overdue-sweep",
    response_model=OverdueSweepResponse,
    summary="Mark issued bills past their due date as overdue",
)
def overdue_sweep(
    as_of: date | None = Query(None, description="Reference date; defaults to today."),
    service: BillingService = Depends(get_billing_service),
) -> OverdueSweepResponse:
    today = as_of or date.today()
    overdue = service.mark_overdue_bills(today)
    return OverdueSweepResponse(
        as_of=today,
        bills_marked=len(overdue),
        bill_ids=[b.id for b in overdue],
    )


@router.get("/{bill_id}", response_model=BillResponse, summary="Get a bill", responses=_NOT_FOUND)
def get_bill(
    bill_id: BillID,
    service: BillingService = Depends(get_billing_service),
) -> BillResponse:
    return BillResponse.from_domain(service.get_bill(bill_id))


@router.post(
    "/{bill_id}/pay",
    response_model=BillResponse,
    summary="Record payment",
    responses={**_NOT_FOUND, **_CONFLICT},
)
def pay_bill(
    bill_id: BillID,
    body: BillPayment | None = None,
    service: BillingService = Depends(get_billing_service),
) -> BillResponse:
    paid_on = body.paid_on if body else None
    return BillResponse.from_domain(service.pay_bill(bill_id, paid_on))


@router.post(
    "/{bill_id}/cancel",
    response_model=BillResponse,
    summary="Cancel a bill",
    responses={**_NOT_FOUND, **_CONFLICT},
)
def cancel_bill(
    bill_id: BillID,
    service: BillingService = Depends(get_billing_service),
) -> BillResponse:
    return BillResponse.from_domain(service.cancel_bill(bill_id))


@router.delete(
    "/{bill_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a bill",
    responses=_NOT_FOUND,
)
def delete_bill(
    bill_id: BillID,
    service: BillingService = Depends(get_billing_service),
) -> Response:
    service.delete_bill(bill_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
