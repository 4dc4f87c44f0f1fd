"""
Clock arithmetic for meal slots.

Slot boundaries are stored as ``HH:MM`` strings. They are always parsed
into ``ClockTime`` before being compared so that ordering is numeric:
``"9:00"`` is rejected outright and ``"23:30"`` is never mistaken for a
time before ``"09:00"``.
"""

import datetime
import re
from typing import NamedTuple

from apps.core.exceptions import InvalidSlotConfiguration, InvalidTimeFormat

CLOCK_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
LAST_MINUTE_OF_DAY = 23 * 60 + 59


class ClockTime(NamedTuple):
    hour: int
    minute: int

    @classmethod
    def from_minutes(cls, minutes):
        return cls(minutes // 60, minutes % 60)

    @property
    def minutes(self):
        return self.hour * 60 + self.minute

    def __str__(self):
        return f"{self.hour:02d}:{self.minute:02d}"


class DeliveryWindow(NamedTuple):
    start: ClockTime
    end: ClockTime

    def to_dict(self):
        return {"start": str(self.start), "end": str(self.end)}


def parse_clock(value) -> ClockTime:
    if isinstance(value, ClockTime):
        return value
    if isinstance(value, (datetime.time, datetime.datetime)):
        return ClockTime(value.hour, value.minute)
    if not isinstance(value, str) or not CLOCK_RE.match(value):
        raise InvalidTimeFormat(f"Invalid time format: {value!r} (expected HH:MM)")
    hour, minute = value.split(":")
    return ClockTime(int(hour), int(minute))


def is_within_cutoff(now, cutoff) -> bool:
    """True while ``now`` is strictly before ``cutoff`` on the same day."""
    return parse_clock(now) < parse_clock(cutoff)


def is_within_slot(value, slot) -> bool:
    return parse_clock(slot.start_time) <= parse_clock(value) < parse_clock(slot.end_time)


def validate_delivery_window(slot, window_start, window_end) -> bool:
    start = parse_clock(window_start)
    end = parse_clock(window_end)
    if start >= parse_clock(slot.start_time) and end <= parse_clock(slot.end_time) and start < end:
        return True
    # A window clamped to the end of the day may reach past the slot end.
    return DeliveryWindow(start, end) in enumerate_windows(slot)


def enumerate_windows(slot):
    """
    Split a slot into consecutive delivery windows of ``time_window_duration``.

    Windows tile the slot: the last one is cut short at the slot end, unless
    it would run past midnight, in which case it is clamped to 23:59.
    """
    duration = int(slot.time_window_duration)
    if duration < 1:
        raise InvalidSlotConfiguration("Time window duration must be at least 1 minute")

    current = parse_clock(slot.start_time).minutes
    end = parse_clock(slot.end_time).minutes

    windows = []
    while current < end:
        window_end = current + duration
        if window_end > LAST_MINUTE_OF_DAY:
            window_end = LAST_MINUTE_OF_DAY
        else:
            window_end = min(window_end, end)
        windows.append(DeliveryWindow(ClockTime.from_minutes(current), ClockTime.from_minutes(window_end)))
        current += duration
    return windows


def validate_slot_configuration(start_time, end_time, cutoff_time, duration=60):
    start = parse_clock(start_time)
    end = parse_clock(end_time)
    cutoff = parse_clock(cutoff_time)

    if not cutoff < start:
        raise InvalidSlotConfiguration("Cutoff time must be before start time")
    if not start < end:
        raise InvalidSlotConfiguration("Start time must be before end time")
    if duration is None or int(duration) < 1:
        raise InvalidSlotConfiguration("Time window duration must be at least 1 minute")
