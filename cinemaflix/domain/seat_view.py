from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Container

from cinemaflix.domain.entities.seat import Seat, SeatStatus
from cinemaflix.domain.entities.showtime import ShowtimeDetails


class SeatRenderState(str, Enum):
    AVAILABLE = "available"
    SELECTED = "selected"
    BOOKED = "booked"
    BLOCKED = "blocked"
    MAINTENANCE = "maintenance"


SEAT_LEGEND: dict[SeatRenderState, str] = {
    SeatRenderState.AVAILABLE: "Available",
    SeatRenderState.SELECTED: "Selected",
    SeatRenderState.BOOKED: "Booked",
    SeatRenderState.BLOCKED: "Temporarily Blocked",
    SeatRenderState.MAINTENANCE: "Under Maintenance",
}


@dataclass(frozen=True)
class SeatCell:
    seat: Seat
    state: SeatRenderState

    @property
    def selectable(self) -> bool:
        return self.state in (SeatRenderState.AVAILABLE, SeatRenderState.SELECTED)


def seat_render_state(seat: Seat, selected_ids: Container[str]) -> SeatRenderState:
    if seat.seat_id in selected_ids and seat.status is SeatStatus.AVAILABLE:
        return SeatRenderState.SELECTED
    return SeatRenderState(seat.status.value)


def render_seat_map(details: ShowtimeDetails, selected_ids: Container[str]) -> dict[str, list[SeatCell]]:
    """Map each row of the snapshot to per-seat render state, rows and seats in display order."""
    seat_map: dict[str, list[SeatCell]] = {}
    for row_label in sorted(details.rows):
        seats = sorted(details.rows[row_label], key=lambda s: s.seat_number)
        seat_map[row_label] = [SeatCell(seat=seat, state=seat_render_state(seat, selected_ids)) for seat in seats]
    return seat_map
