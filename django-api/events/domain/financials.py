"""
Sales and fee figures for an event.

Fee model:
- ticket_sales  = sum of confirmed registration prices
- merchant_fees = ticket_sales * 2.9% + $0.30 per paid registration (payment processor)
- platform_fees = ticket_sales * (1 - organization commission)
- net_sales     = ticket_sales - merchant_fees - platform_fees

Every figure is rounded to cents (half up) and is 0.00 for an event with no
registrations.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from events.domain.models import Discount
from events.domain.value_objects import CommissionRate, round_cents

PROCESSOR_RATE = Decimal("0.029")
PROCESSOR_FIXED_FEE = Decimal("0.30")


@dataclass(frozen=True)
class SalesSummary:
    ticket_sales: Decimal
    merchant_fees: Decimal
    platform_fees: Decimal
    net_sales: Decimal


class FinancialCalculator:
    """
    Derives sales figures from an event's registration ledger.

    Args:
        ledger: RegistrationLedger scoped to one event
        commission: the owning organization's commission rate
    """

    def __init__(self, ledger, commission: CommissionRate):
        self.ledger = ledger
        self.commission = commission

    def _gross(self) -> Decimal:
        return Decimal(self.ledger.sum("price") or 0)

    def ticket_sales(self) -> Decimal:
        return round_cents(self._gross())

    def merchant_fees(self) -> Decimal:
        paid = self.ledger.count_where(price__gt=0)
        return round_cents(self._gross() * PROCESSOR_RATE + paid * PROCESSOR_FIXED_FEE)

    def platform_fees(self) -> Decimal:
        return round_cents(self._gross() * (1 - self.commission.value))

    def net_sales(self) -> Decimal:
        return round_cents(
            self.ticket_sales() - self.merchant_fees() - self.platform_fees()
        )

    def summary(self) -> SalesSummary:
        ticket_sales = self.ticket_sales()
        merchant_fees = self.merchant_fees()
        platform_fees = self.platform_fees()
        return SalesSummary(
            ticket_sales=ticket_sales,
            merchant_fees=merchant_fees,
            platform_fees=platform_fees,
            net_sales=round_cents(ticket_sales - merchant_fees - platform_fees),
        )


def discounted_price(base_price, discounts: Iterable[Discount]) -> Decimal:
    """Apply active percentage discounts additively, never compounding."""
    base = Decimal(str(base_price))
    total_discount = sum(
        (Decimal(str(d.value)) * base * Decimal("0.01") for d in discounts if d.active),
        Decimal("0"),
    )
    return base - total_discount
