from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterable, Iterator

from cinemaflix.domain.entities.seat import Seat, SeatStatus


@dataclass(frozen=True)
class Theater:
    name: str
    address: str | None = None
    theater_id: str | None = None


@dataclass(frozen=True)
class ShowtimeDetails:
    """Seat inventory snapshot for one showtime, as fetched from the catalog."""

    showtime_id: str
    theater: Theater
    show_time: datetime | None
    rows: dict[str, tuple[Seat, ...]]

    def iter_seats(self) -> Iterator[Seat]:
        for seats in self.rows.values():
            yield from seats

    def get_seat(self, seat_id: str) -> Seat | None:
        for seat in self.iter_seats():
            if seat.seat_id == seat_id:
                return seat
        return None

    def with_status(self, seat_ids: Iterable[str], status: SeatStatus) -> ShowtimeDetails:
        """Return a copy of the snapshot with the given seats forced to `status`."""
        targets = set(seat_ids)
        rows = {
            row: tuple(replace(seat, status=status) if seat.seat_id in targets else seat for seat in seats)
            for row, seats in self.rows.items()
        }
        return replace(self, rows=rows)
