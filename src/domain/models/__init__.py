from domain.models.bill import Bill, BillCharge, BillStatus
from domain.models.customer import Customer
from domain.models.period import BillingPeriod
from domain.models.tariff import Tariff

__all__ = [
    "Bill",
    "BillCharge",
    "BillStatus",
    "BillingPeriod",
    "Customer",
    "Tariff",
]
