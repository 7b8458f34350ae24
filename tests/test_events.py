"""
Tests for booking event sinks.
"""

import threading
from datetime import datetime

import pytest
from sqlmodel import select

from localli.core import (
    BookingCancelled,
    BookingCreated,
    BookingLedger,
    BusinessDirectory,
    ConflictError,
    InMemoryEventQueue,
    OutboxEventSink,
    ReservationService,
)
from localli.models import Appointment, OutboxEvent

from conftest import DAY


class TestInMemoryEventQueue:
    def test_drain_returns_in_publish_order(self):
        queue = InMemoryEventQueue()
        queue.publish(BookingCreated(appointment_id=1, start_datetime=datetime(2024, 5, 1, 11)))
        queue.publish(BookingCancelled(appointment_id=1))

        drained = queue.drain()

        assert [e.kind for e in drained] == ["booking_created", "booking_cancelled"]
        assert queue.drain() == []

    def test_concurrent_publishers(self):
        queue = InMemoryEventQueue()

        def publish(n):
            for i in range(50):
                queue.publish(BookingCancelled(appointment_id=n * 100 + i))

        threads = [threading.Thread(target=publish, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(queue) == 200
        assert len(queue.drain()) == 200
        assert len(queue) == 0


class TestOutboxEventSink:
    def test_publish_stages_row_until_commit(self, session):
        sink = OutboxEventSink(session)
        sink.publish(BookingCreated(appointment_id=7, start_datetime=datetime(2024, 5, 1, 12, 0)))
        session.commit()

        pending = sink.pending()

        assert len(pending) == 1
        assert pending[0].kind == "booking_created"
        assert pending[0].appointment_id == 7
        assert pending[0].payload == {"appointment_id": 7, "start_datetime": "2024-05-01T12:00:00"}

    def test_rollback_discards_staged_rows(self, session):
        sink = OutboxEventSink(session)
        sink.publish(BookingCancelled(appointment_id=1))
        session.rollback()

        assert sink.pending() == []

    def test_mark_dispatched(self, session):
        sink = OutboxEventSink(session)
        sink.publish(BookingCancelled(appointment_id=1))
        sink.publish(BookingCancelled(appointment_id=2))
        session.commit()
        first = sink.pending()[0]

        assert sink.mark_dispatched([first.id]) == 1
        assert sink.mark_dispatched([first.id]) == 0
        assert [e.appointment_id for e in sink.pending()] == [2]
        assert sink.mark_dispatched([]) == 0

    def test_pending_limit(self, session):
        sink = OutboxEventSink(session)
        for i in range(5):
            sink.publish(BookingCancelled(appointment_id=i))
        session.commit()

        assert [e.appointment_id for e in sink.pending(limit=2)] == [0, 1]


class FailingSink:
    def publish(self, event) -> None:
        raise RuntimeError("event store unavailable")


class TestEventsCommitWithBookings:
    """Outbox rows and the appointment change they describe share one transaction."""

    @pytest.fixture
    def outbox_service(self, session):
        return ReservationService(
            ledger=BookingLedger(session),
            businesses=BusinessDirectory(session),
            events=OutboxEventSink(session),
        )

    def _outbox(self, session):
        session.expire_all()
        return [(row.kind, row.appointment_id) for row in session.exec(select(OutboxEvent).order_by(OutboxEvent.id))]

    def test_booking_and_event_commit_together(self, outbox_service, session, business, customer, other_customer):
        appointment = outbox_service.book(customer, business.id, DAY, "11:00-12:00")

        with pytest.raises(ConflictError):
            outbox_service.book(other_customer, business.id, DAY, "11:00-12:00")

        assert self._outbox(session) == [("booking_created", appointment.id)]

    def test_reschedule_and_cancel_are_recorded(self, outbox_service, session, business, customer):
        appointment = outbox_service.book(customer, business.id, DAY, "11:00-12:00")

        outbox_service.reschedule(customer, appointment.id, DAY, "13:00-14:00")
        outbox_service.cancel(customer, appointment.id)
        outbox_service.cancel(customer, appointment.id)

        assert self._outbox(session) == [
            ("booking_created", appointment.id),
            ("booking_rescheduled", appointment.id),
            ("booking_cancelled", appointment.id),
        ]

    def test_failed_publish_leaves_no_booking(self, session, business, customer):
        service = ReservationService(BookingLedger(session), BusinessDirectory(session), FailingSink())

        with pytest.raises(RuntimeError):
            service.book(customer, business.id, DAY, "11:00-12:00")

        session.expire_all()
        assert session.exec(select(Appointment)).all() == []

    def test_failed_publish_leaves_appointment_in_place(self, session, business, customer, events):
        booked = ReservationService(BookingLedger(session), BusinessDirectory(session), events).book(
            customer, business.id, DAY, "11:00-12:00"
        )
        service = ReservationService(BookingLedger(session), BusinessDirectory(session), FailingSink())

        with pytest.raises(RuntimeError):
            service.reschedule(customer, booked.id, DAY, "13:00-14:00")
        with pytest.raises(RuntimeError):
            service.cancel(customer, booked.id)

        session.expire_all()
        stored = session.get(Appointment, booked.id)
        assert (stored.slot, stored.status) == ("11:00-12:00", "booked")
