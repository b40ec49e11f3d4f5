from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

from cinemaflix.domain.entities.seat import Seat

MAX_SELECTED_SEATS = 10


class ToggleOutcome(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    IGNORED = "ignored"  # seat was not available
    CAPACITY_EXCEEDED = "capacity_exceeded"


@dataclass(frozen=True)
class ToggleResult:
    """Outcome of a toggle plus the selection as it stands afterwards."""

    outcome: ToggleOutcome
    seats: tuple[Seat, ...]

    @property
    def ok(self) -> bool:
        return self.outcome in (ToggleOutcome.ADDED, ToggleOutcome.REMOVED)


class SelectionSet:
    """Ordered set of seats picked for the active showtime."""

    def __init__(self, max_size: int = MAX_SELECTED_SEATS) -> None:
        self._seats: list[Seat] = []
        self._max_size = max_size

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def seats(self) -> tuple[Seat, ...]:
        return tuple(self._seats)

    @property
    def seat_ids(self) -> list[str]:
        return [seat.seat_id for seat in self._seats]

    def __len__(self) -> int:
        return len(self._seats)

    def __iter__(self) -> Iterator[Seat]:
        return iter(tuple(self._seats))

    def __contains__(self, seat_id: object) -> bool:
        return any(seat.seat_id == seat_id for seat in self._seats)

    def is_empty(self) -> bool:
        return not self._seats

    def toggle(self, seat: Seat) -> ToggleResult:
        if not seat.is_available:
            return ToggleResult(ToggleOutcome.IGNORED, self.seats)

        if seat.seat_id in self:
            self._seats = [s for s in self._seats if s.seat_id != seat.seat_id]
            return ToggleResult(ToggleOutcome.REMOVED, self.seats)

        if len(self._seats) >= self._max_size:
            return ToggleResult(ToggleOutcome.CAPACITY_EXCEEDED, self.seats)

        self._seats.append(seat)
        return ToggleResult(ToggleOutcome.ADDED, self.seats)

    def discard(self, seat_ids: Iterable[str]) -> list[str]:
        """Drop the given seats if selected. Returns the ids actually removed."""
        targets = set(seat_ids)
        removed = [s.seat_id for s in self._seats if s.seat_id in targets]
        if removed:
            self._seats = [s for s in self._seats if s.seat_id not in targets]
        return removed

    def clear(self) -> None:
        self._seats = []
