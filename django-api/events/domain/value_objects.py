"""Domain primitives that enforce validity at creation time."""

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Self
from uuid import UUID

CENTS = Decimal("0.01")

SLUG_RE = re.compile(r"\A[a-z0-9_-]+\Z")
DEFAULT_SLUG = "event"


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    @classmethod
    def of(cls, value) -> Self:
        return cls(amount=Decimal(str(value)))

    def rounded(self) -> Decimal:
        return round_cents(self.amount)

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing capacity."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")


@dataclass(frozen=True)
class CommissionRate:
    """Share of ticket sales the organization keeps, between 0 and 1."""

    value: Decimal

    def __post_init__(self) -> None:
        if not Decimal("0") <= self.value <= Decimal("1"):
            raise ValueError("Commission must be between 0 and 1")

    @classmethod
    def of(cls, value) -> Self:
        return cls(value=Decimal(str(value)))


@dataclass(frozen=True)
class Slug:
    """URL-safe event identifier."""

    value: str

    def __post_init__(self) -> None:
        if not SLUG_RE.match(self.value or ""):
            raise ValueError("Slug must be non-empty and URL-safe")

    def with_suffix(self, n: int) -> Self:
        return type(self)(value=f"{self.value}-{n}")

    def __str__(self) -> str:
        return self.value


def round_cents(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)
