from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain-layer exceptions.

    Carries HTTP-mapping metadata so the presentation layer can produce
    RFC 9457 Problem Details without knowing exception internals.
    """

    def __init__(
        self,
        detail: str = "",
        *,
        title: str = "Domain Error",
        status_code: int = 400,
        error_type: str = "about:blank",
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.title = title
        self.status_code = status_code
        self.error_type = error_type


class InvalidInputError(DomainException):
    def __init__(self, field: str = "", reason: str = "") -> None:
        self.field = field
        self.reason = reason
        super().__init__(
            detail=f"Invalid value for {field}: {reason}" if field else reason,
            title="Invalid Input",
            status_code=422,
            error_type="https://api.ebilling.example/problems/invalid-input",
        )


class CustomerNotFoundError(DomainException):
    def __init__(self, customer_id: str = "") -> None:
        self.customer_id = customer_id
        super().__init__(
            detail=f"Customer not found: {customer_id}",
            title="Customer Not Found",
            status_code=404,
            error_type="https://api.ebilling.example/problems/customer-not-found",
        )


class BillNotFoundError(DomainException):
    def __init__(self, bill_id: str = "") -> None:
        self.bill_id = bill_id
        super().__init__(
            detail=f"Bill not found: {bill_id}",
            title="Bill Not Found",
            status_code=404,
            error_type="https://api.ebilling.example/problems/bill-not-found",
        )


class InvalidStateTransitionError(DomainException):
    def __init__(self, current_state: str = "", new_state: str = "") -> None:
        self.current_state = current_state
        self.new_state = new_state
        super().__init__(
            detail=f"Invalid state transition from {current_state} to {new_state}",
            title="Invalid State Transition",
            status_code=409,
            error_type="https://api.ebilling.example/problems/invalid-transition",
        )


class DuplicateBillError(DomainException):
    def __init__(self, customer_id: str = "", period: str = "") -> None:
        self.customer_id = customer_id
        self.period = period
        super().__init__(
            detail=f"Customer {customer_id} already has a bill for {period}",
            title="Bill Conflict",
            status_code=409,
            error_type="https://api.ebilling.example/problems/bill-conflict",
        )


class MeterAlreadyAssignedError(DomainException):
    def __init__(self, meter_number: str = "") -> None:
        self.meter_number = meter_number
        super().__init__(
            detail=f"Meter already assigned to another customer: {meter_number}",
            title="Meter Conflict",
            status_code=409,
            error_type="https://api.ebilling.example/problems/meter-conflict",
        )
