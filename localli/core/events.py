# localli/core/events.py
"""
Booking events.

The reservation path publishes from inside the ledger transaction (see
``BookingLedger``'s ``before_commit``); reminder timing and delivery are owned
by whatever drains the sink.
"""

import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Iterable, List, Optional, Protocol

from sqlmodel import Session, select

from ..models import OutboxEvent, utcnow


@dataclass(frozen=True)
class BookingCreated:
    kind: ClassVar[str] = "booking_created"

    appointment_id: int
    start_datetime: datetime

    def payload(self) -> dict:
        return {"appointment_id": self.appointment_id, "start_datetime": self.start_datetime.isoformat()}


@dataclass(frozen=True)
class BookingRescheduled:
    kind: ClassVar[str] = "booking_rescheduled"

    appointment_id: int
    start_datetime: datetime

    def payload(self) -> dict:
        return {"appointment_id": self.appointment_id, "start_datetime": self.start_datetime.isoformat()}


@dataclass(frozen=True)
class BookingCancelled:
    kind: ClassVar[str] = "booking_cancelled"

    appointment_id: int

    def payload(self) -> dict:
        return {"appointment_id": self.appointment_id}


class EventSink(Protocol):
    def publish(self, event) -> None:
        ...


class InMemoryEventQueue:
    """Thread-safe FIFO, handy for tests and single-process deployments."""

    def __init__(self):
        self._events = deque()
        self._lock = threading.Lock()

    def publish(self, event) -> None:
        with self._lock:
            self._events.append(event)

    def drain(self) -> List:
        with self._lock:
            events = list(self._events)
            self._events.clear()
        return events

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)


class OutboxEventSink:
    """
    Stages events as OutboxEvent rows on the caller's session.

    ``publish`` never commits: the row is written by the same commit as the
    appointment change that produced it, or not at all. A dispatcher opens its
    own session and uses ``pending`` and ``mark_dispatched``.
    """

    def __init__(self, session: Session):
        self.session = session

    def publish(self, event) -> None:
        self.session.add(
            OutboxEvent(kind=event.kind, appointment_id=event.appointment_id, payload=event.payload())
        )

    def pending(self, limit: Optional[int] = 100) -> List[OutboxEvent]:
        stmt = select(OutboxEvent).where(OutboxEvent.dispatched_at == None).order_by(OutboxEvent.id)  # noqa: E711
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.exec(stmt).all())

    def mark_dispatched(self, event_ids: Iterable[int]) -> int:
        ids = list(event_ids)
        if not ids:
            return 0
        now = utcnow()
        rows = self.session.exec(select(OutboxEvent).where(OutboxEvent.id.in_(ids))).all()
        marked = 0
        for row in rows:
            if row.dispatched_at is None:
                row.dispatched_at = now
                self.session.add(row)
                marked += 1
        self.session.commit()
        return marked
