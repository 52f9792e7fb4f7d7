import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from roombook.cache import RoomCache
from roombook.config import get_settings
from roombook.db import init_db
from roombook.errors import RoomBookingError
from roombook.routers import auth, bookings, meetings, reservations, rooms, users

logger = logging.getLogger(__name__)

app = FastAPI(title="Meeting Room Reservations API", version="0.1.0")
app.state.room_cache = RoomCache()

app.include_router(rooms.router, prefix="/rooms", tags=["rooms"])
app.include_router(reservations.router, prefix="/reservations", tags=["reservations"])
app.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
app.include_router(users.router, prefix="/users", tags=["users"])
app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(meetings.router, tags=["meetings"])


@app.exception_handler(RoomBookingError)
def handle_booking_error(request: Request, exc: RoomBookingError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
def handle_request_validation(request: Request, exc: RequestValidationError):
    # malformed or missing input is a 400 across the API
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.on_event("startup")
def on_startup():
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if settings.skip_db_init:
        return
    init_db()


@app.get("/")
def root():
    return {"ok": True, "service": "room-reservations"}
