# localli/main.py

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from .config import HOST, LOG_LEVEL, PORT
from .core import BookingError, EventSink
from .db import init_db, make_engine
from .logging_config import setup_logging
from .routers import appointments_routes, businesses_routes

logger = logging.getLogger(__name__)


def create_app(engine: Optional[Engine] = None, events: Optional[EventSink] = None) -> FastAPI:
    """
    Build the API around one engine for the whole process.

    The engine defaults to the configured database. With no ``events`` sink,
    each request stages events in the outbox table on its own session.
    """
    setup_logging(LOG_LEVEL)

    if engine is None:
        engine = make_engine()
    init_db(engine)

    app = FastAPI(title="Localli Booking")
    app.state.engine = engine
    app.state.events = events

    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())})

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    app.include_router(businesses_routes.router)
    app.include_router(appointments_routes.router)

    logger.info("Localli booking API ready")
    return app


def run() -> None:
    import uvicorn

    uvicorn.run(
        "localli.main:create_app",
        factory=True,
        host=HOST,
        port=PORT,
    )
