from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class SeatStatus(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    BLOCKED = "blocked"
    MAINTENANCE = "maintenance"


@dataclass(frozen=True)
class Seat:
    seat_id: str  # A1, A2, B1, ...
    seat_number: int
    price: Decimal
    status: SeatStatus = SeatStatus.AVAILABLE
    row_id: str | None = None
    seat_type: str | None = None  # "premium" | "regular"

    @property
    def label(self) -> str:
        return self.seat_id

    @property
    def is_available(self) -> bool:
        return self.status is SeatStatus.AVAILABLE
