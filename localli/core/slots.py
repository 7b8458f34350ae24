# localli/core/slots.py

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import List, Tuple

from .errors import ConfigurationError, ValidationError

LABEL_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)-([01]\d|2[0-3]):([0-5]\d)$")
DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class SlotWindow:
    """
    One bookable window on a given day.

    Invariant: start < end, both on the anchor date.
    """
    start: datetime
    end: datetime

    @property
    def label(self) -> str:
        return format_slot_label(self.start, self.end)


def format_slot_label(start, end) -> str:
    """Canonical ``HH:MM-HH:MM`` label; accepts ``time`` or ``datetime``."""
    return f"{start.strftime('%H:%M')}-{end.strftime('%H:%M')}"


def parse_slot_label(label: str) -> Tuple[time, time]:
    """
    Split a canonical slot label into its start and end times.

    Raises:
        ValidationError: if the label is not zero-padded ``HH:MM-HH:MM`` or is empty/backwards
    """
    match = LABEL_RE.match(label or "")
    if match is None:
        raise ValidationError(f"Slot must be formatted HH:MM-HH:MM, got {label!r}")
    start = time(int(match.group(1)), int(match.group(2)))
    end = time(int(match.group(3)), int(match.group(4)))
    if start >= end:
        raise ValidationError(f"Slot {label!r} ends before it starts")
    return start, end


def derive_slots(open_time: time, close_time: time, slot_minutes: int, on_date: date) -> List[SlotWindow]:
    """
    Cut the business day ``[open_time, close_time)`` into back-to-back windows.

    A window that would run past closing time is dropped, so the result may
    not reach ``close_time``. Times are wall-clock; no timezone is applied.

    Raises:
        ConfigurationError: if ``slot_minutes`` is not a positive integer
    """
    if not isinstance(slot_minutes, int) or isinstance(slot_minutes, bool) or slot_minutes <= 0:
        raise ConfigurationError(f"Slot duration must be a positive number of minutes, got {slot_minutes!r}")

    slots = []
    if open_time >= close_time:
        return slots

    slot_delta = timedelta(minutes=slot_minutes)
    current = datetime.combine(on_date, open_time)
    work_end = datetime.combine(on_date, close_time)

    while current + slot_delta <= work_end:
        slots.append(SlotWindow(start=current, end=current + slot_delta))
        current += slot_delta

    return slots


def parse_day(value) -> date:
    """Accept a ``date`` or a ``YYYY-MM-DD`` string; anything else is a ValidationError."""
    if isinstance(value, datetime):
        raise ValidationError("Date must be a calendar day, not a timestamp")
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DAY_RE.match(value):
        raise ValidationError(f"Date must be formatted YYYY-MM-DD, got {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Date {value!r} is not a real calendar day")


def slot_start(day, label: str) -> datetime:
    """Naive local datetime at which the slot ``label`` begins on ``day``."""
    start, _ = parse_slot_label(label)
    return datetime.combine(parse_day(day), start)
