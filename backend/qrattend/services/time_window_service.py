"""Classification of a scan time against a period's schedule."""
from enum import Enum

GRACE_BEFORE_MINUTES = 5
GRACE_AFTER_MINUTES = 10

class TimeWindowResult(Enum):
    ON_TIME = 'on_time'
    LATE = 'late'
    TOO_EARLY = 'too_early'
    TOO_LATE = 'too_late'

    @property
    def is_out_of_window(self) -> bool:
        return self in (TimeWindowResult.TOO_EARLY, TimeWindowResult.TOO_LATE)

def minute_of_day(hhmm: str) -> int:
    """Convert ``HH:MM`` to minutes since midnight."""
    hours, minutes = hhmm.split(':')
    return int(hours) * 60 + int(minutes)

class TimeWindowClassifier:
    """Compares wall-clock minutes, all in the institution timezone.

    The grace window opens ``grace_before`` minutes before the scheduled start
    and closes ``grace_after`` minutes after the scheduled end. Arriving in the
    early grace counts as on time, arriving in the late grace counts as late,
    and anything outside the window is out of window.
    """

    def __init__(self, grace_before: int = GRACE_BEFORE_MINUTES,
                 grace_after: int = GRACE_AFTER_MINUTES):
        self.grace_before = grace_before
        self.grace_after = grace_after

    def classify(self, start: str, end: str, late_threshold: int, now: str) -> TimeWindowResult:
        start_minutes = minute_of_day(start)
        end_minutes = minute_of_day(end)
        now_minutes = minute_of_day(now)

        grace_start = start_minutes - self.grace_before
        grace_end = end_minutes + self.grace_after
        late_after = start_minutes + late_threshold

        if now_minutes < grace_start:
            return TimeWindowResult.TOO_EARLY
        if now_minutes > grace_end:
            return TimeWindowResult.TOO_LATE
        if now_minutes < start_minutes:
            return TimeWindowResult.ON_TIME
        if now_minutes > end_minutes:
            return TimeWindowResult.LATE
        if now_minutes > late_after:
            return TimeWindowResult.LATE
        return TimeWindowResult.ON_TIME
