from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from cinemaflix.domain.entities.seat import Seat, SeatStatus
from cinemaflix.domain.entities.showtime import ShowtimeDetails, Theater


class SeatPayload(BaseModel):
    seat_id: str
    seat_number: int
    price: Decimal = Field(ge=0)
    status: SeatStatus = SeatStatus.AVAILABLE
    row_id: str | None = None
    seat_type: str | None = None


class TheaterPayload(BaseModel):
    id: str | None = None
    name: str
    address: str | None = None


class ShowtimePayload(BaseModel):
    id: str | None = None
    show_time: datetime | None = None


class SeatLayoutPayload(BaseModel):
    rows: dict[str, list[SeatPayload]] = Field(default_factory=dict)


class ShowtimeDetailsDTO(BaseModel):
    theater: TheaterPayload
    showtime: ShowtimePayload = Field(default_factory=ShowtimePayload)
    seat_layout: SeatLayoutPayload = Field(default_factory=SeatLayoutPayload)

    def to_domain(self, showtime_id: str) -> ShowtimeDetails:
        rows: dict[str, tuple[Seat, ...]] = {}
        for row_label, seats in self.seat_layout.rows.items():
            rows[row_label] = tuple(
                Seat(
                    seat_id=s.seat_id,
                    seat_number=s.seat_number,
                    price=s.price,
                    status=s.status,
                    row_id=s.row_id or row_label,
                    seat_type=s.seat_type,
                )
                for s in seats
            )
        return ShowtimeDetails(
            showtime_id=self.showtime.id or showtime_id,
            theater=Theater(name=self.theater.name, address=self.theater.address, theater_id=self.theater.id),
            show_time=self.showtime.show_time,
            rows=rows,
        )
