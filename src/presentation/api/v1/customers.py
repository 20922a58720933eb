"""Customer and per-customer billing endpoints."""

from __future__ import annotations

import uuid
from dataclasses import replace
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response, status

from application.services.billing_service import BillingService
from application.services.customer_service import CustomerService
from domain.models.period import BillingPeriod
from infrastructure.container import get_billing_service, get_customer_service

from .schemas import (
    BillCreate,
    BillResponse,
    CustomerCreate,
    CustomerListResponse,
    CustomerResponse,
    CustomerStatementResponse,
    CustomerUpdate,
    ErrorResponse,
    PaginationMeta,
)

router = APIRouter(prefix="/customers", tags=["Customers"])

CustomerID = Annotated[uuid.UUID, Path(description="Customer identifier.")]

_NOT_FOUND = {404: {"description": "Customer not found.", "model": ErrorResponse}}


@router.post(
    "",
    response_model=CustomerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a customer",
    responses={409: {"description": "Meter already assigned.", "model": ErrorResponse}},
)
def create_customer(
    body: CustomerCreate,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerResponse:
    customer = service.add_customer(
        name=body.name,
        meter_number=body.meter_number,
        address=body.address,
        initial_reading=body.initial_reading,
    )
    return CustomerResponse.from_domain(customer)


@router.get("", response_model=CustomerListResponse, summary="List customers")
def list_customers(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    service: CustomerService = Depends(get_customer_service),
) -> CustomerListResponse:
    result = service.list_customers(page=page, size=page_size)
    return CustomerListResponse(
        items=[CustomerResponse.from_domain(c) for c in result.items],
        pagination=PaginationMeta(
            page=result.page,
            page_size=result.size,
            total_items=result.total,
            total_pages=result.pages,
        ),
    )


@router.get(
    "/{customer_id}",
    response_model=CustomerResponse,
    summary="Get a customer",
    responses=_NOT_FOUND,
)
def get_customer(
    customer_id: CustomerID,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerResponse:
    return CustomerResponse.from_domain(service.get_customer(customer_id))


@router.put(
    "/{customer_id}",
    response_model=CustomerResponse,
    summary="Update a customer",
    responses=_NOT_FOUND,
)
def update_customer(
    customer_id: CustomerID,
    body: CustomerUpdate,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerResponse:
    customer = service.update_customer(
        customer_id,
        name=body.name,
        meter_number=body.meter_number,
        address=body.address,
    )
    return CustomerResponse.from_domain(customer)


@router.delete(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a customer",
    responses=_NOT_FOUND,
)
def delete_customer(
    customer_id: CustomerID,
    remove_bills: bool = Query(False, description="Also delete the customer's bills."),
    service: CustomerService = Depends(get_customer_service),
) -> Response:
    service.delete_customer(customer_id, remove_bills=remove_bills)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{customer_id}/bills",
    response_model=BillResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Issue a bill from a meter reading",
    responses={
        **_NOT_FOUND,
        409: {"description": "A bill already exists for this period.", "model": ErrorResponse},
        422: {"description": "Reading or tariff rejected.", "model": ErrorResponse},
    },
)
def issue_bill(
    customer_id: CustomerID,
    body: BillCreate,
    service: BillingService = Depends(get_billing_service),
) -> BillResponse:
    overrides = body.model_dump(
        include={"rate_per_unit", "fixed_charge", "tax_percent"}, exclude_none=True
    )
    tariff = replace(service.default_tariff, **overrides) if overrides else None
    bill = service.issue_bill(
        customer_id,
        BillingPeriod.parse(body.period),
        body.current_reading,
        tariff=tariff,
        issue_date=body.issue_date,
        due_in_days=body.due_in_days,
    )
    return BillResponse.from_domain(bill)


@router.get(
    "/{customer_id}/bills",
    response_model=list[BillResponse],
    summary="Bill history for a customer",
    responses=_NOT_FOUND,
)
def list_customer_bills(
    customer_id: CustomerID,
    service: BillingService = Depends(get_billing_service),
) -> list[BillResponse]:
    return [BillResponse.from_domain(b) for b in service.list_bills_for_customer(customer_id)]


@router.get(
    "/{customer_id}/statement",
    response_model=CustomerStatementResponse,
    summary="Billed, paid and outstanding totals for a customer",
    responses=_NOT_FOUND,
)
def get_statement(
    customer_id: CustomerID,
    service: BillingService = Depends(get_billing_service),
) -> CustomerStatementResponse:
    return CustomerStatementResponse.model_validate(service.customer_statement(customer_id))
