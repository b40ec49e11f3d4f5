import logging

from fastapi import FastAPI

from cinemaflix.api.auth import router as auth_router
from cinemaflix.api.v1.seat_selection import router as seat_selection_router
from cinemaflix.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("workflow_id", "showtime_id", "booking_id", "seat_count", "action", "status", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="CinemaFlix Seat Booking", version="1.0.0")

app.include_router(seat_selection_router, prefix="/api/v1", tags=["seat-selection"])
app.include_router(auth_router, tags=["auth"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
