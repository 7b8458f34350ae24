# localli/deps.py

from fastapi import Depends, HTTPException, Request
from sqlmodel import Session

from .core import (
    Actor,
    AvailabilityResolver,
    BookingLedger,
    BusinessDirectory,
    OutboxEventSink,
    ReservationService,
)
from .db import get_session


def require_role(user: Actor, role: str):
    if user.role != role:
        raise HTTPException(status_code=403, detail="Forbidden")


def get_directory(session: Session = Depends(get_session)) -> BusinessDirectory:
    return BusinessDirectory(session)


def get_ledger(session: Session = Depends(get_session)) -> BookingLedger:
    return BookingLedger(session)


def get_availability(
    businesses: BusinessDirectory = Depends(get_directory),
    ledger: BookingLedger = Depends(get_ledger),
) -> AvailabilityResolver:
    return AvailabilityResolver(businesses, ledger)


# Dependency: one service per request. Without an app-wide sink, events go to
# the outbox on the request session and commit with the appointment change.
def get_reservations(
    request: Request,
    session: Session = Depends(get_session),
    businesses: BusinessDirectory = Depends(get_directory),
    ledger: BookingLedger = Depends(get_ledger),
) -> ReservationService:
    events = request.app.state.events
    if events is None:
        events = OutboxEventSink(session)
    return ReservationService(ledger=ledger, businesses=businesses, events=events)
