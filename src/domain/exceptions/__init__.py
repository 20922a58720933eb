from domain.exceptions.billing_exceptions import (
    BillNotFoundError,
    CustomerNotFoundError,
    DomainException,
    DuplicateBillError,
    InvalidInputError,
    InvalidStateTransitionError,
    MeterAlreadyAssignedError,
)

__all__ = [
    "BillNotFoundError",
    "CustomerNotFoundError",
    "DomainException",
    "DuplicateBillError",
    "InvalidInputError",
    "InvalidStateTransitionError",
    "MeterAlreadyAssignedError",
]
