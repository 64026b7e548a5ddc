"""Attendance decision engine."""
from dataclasses import dataclass
from typing import Optional

from qrattend.models.attendance import AttendanceStatus, LocationStatus
from qrattend.services.geofence_service import GeofenceChecker
from qrattend.services.time_window_service import TimeWindowClassifier, TimeWindowResult

ACCURACY_THRESHOLD_METERS = 100

@dataclass(frozen=True)
class ReportedLocation:
    """Geolocation reading sent by the scanning device."""
    latitude: float
    longitude: float
    accuracy_meters: float

@dataclass(frozen=True)
class Decision:
    status: AttendanceStatus
    location_status: LocationStatus
    time_window: Optional[TimeWindowResult] = None

_IN_WINDOW_STATUS = {
    TimeWindowResult.ON_TIME: AttendanceStatus.ON_TIME,
    TimeWindowResult.LATE: AttendanceStatus.LATE,
}

class AttendanceDecisionEngine:
    """Turns a period, a location reading and a wall-clock time into a status.

    Order matters: a missing or imprecise location and a position outside the
    geofence both end in pending review before the schedule is looked at, so
    a scan that fails location checks is never marked late or absent.
    """

    def __init__(self, geofence: GeofenceChecker,
                 classifier: Optional[TimeWindowClassifier] = None,
                 accuracy_threshold: float = ACCURACY_THRESHOLD_METERS):
        self.geofence = geofence
        self.classifier = classifier or TimeWindowClassifier()
        self.accuracy_threshold = accuracy_threshold

    def decide(self, period, location: Optional[ReportedLocation], local_hhmm: str) -> Decision:
        """Decide a scan against ``period`` (the one its scan token is bound to)."""
        if location is None or location.accuracy_meters > self.accuracy_threshold:
            return Decision(AttendanceStatus.PENDING_REVIEW, LocationStatus.PENDING_REVIEW)

        if self.geofence.is_geofencing_enabled() and \
                not self.geofence.is_within_geofence(location.latitude, location.longitude):
            return Decision(AttendanceStatus.PENDING_REVIEW, LocationStatus.PENDING_REVIEW)

        window = self.classifier.classify(
            period.start_time, period.end_time, period.late_threshold, local_hhmm
        )
        if window.is_out_of_window:
            return Decision(AttendanceStatus.ABSENT, LocationStatus.VERIFIED, window)
        return Decision(_IN_WINDOW_STATUS[window], LocationStatus.VERIFIED, window)
