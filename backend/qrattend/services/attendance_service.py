"""Attendance recording, scan submission and manual review."""
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from qrattend import db
from qrattend.models.attendance import (
    AttendanceRecord, AttendanceStatus, LocationStatus, to_microdegrees
)
from qrattend.models.period import Period
from qrattend.services.decision_service import (
    AttendanceDecisionEngine, Decision, ReportedLocation
)
from qrattend.services.qr_service import QRService
from qrattend.services.time_window_service import TimeWindowClassifier
from qrattend.utils.errors import (
    AlreadyRecordedError, ExpiredCodeError, InvalidInputError, NotFoundError
)
from qrattend.utils.helpers import to_institution_time, utcnow
from qrattend.utils.validators import Validator

LATITUDE_BOUNDS = (-90.0, 90.0)
LONGITUDE_BOUNDS = (-180.0, 180.0)
ACCURACY_BOUNDS = (0.0, 40_075_000.0)  # up to the equator's length in meters

def build_decision_engine() -> AttendanceDecisionEngine:
    """Decision engine wired to the app's geofence and thresholds."""
    config = current_app.config
    classifier = TimeWindowClassifier(
        grace_before=config.get('ATTENDANCE_GRACE_BEFORE_MINUTES', 5),
        grace_after=config.get('ATTENDANCE_GRACE_AFTER_MINUTES', 10)
    )
    return AttendanceDecisionEngine(
        current_app.extensions['geofence'],
        classifier,
        accuracy_threshold=config.get('LOCATION_ACCURACY_THRESHOLD_METERS', 100)
    )

@dataclass(frozen=True)
class LocationReading:
    """Raw device readings; any of them may be missing."""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    accuracy_meters: Optional[float] = None

    def to_reported(self) -> Optional[ReportedLocation]:
        """A location is only usable for the decision when all three readings are present."""
        if self.latitude is None or self.longitude is None or self.accuracy_meters is None:
            return None
        return ReportedLocation(self.latitude, self.longitude, self.accuracy_meters)

def parse_location(latitude, longitude, accuracy) -> LocationReading:
    return LocationReading(
        Validator.parse_optional_float(latitude, 'latitude', LATITUDE_BOUNDS),
        Validator.parse_optional_float(longitude, 'longitude', LONGITUDE_BOUNDS),
        Validator.parse_optional_float(accuracy, 'accuracy', ACCURACY_BOUNDS)
    )

class AttendanceService:
    """Service for attendance records."""

    @staticmethod
    def find_existing(student_id: int, period_id: int, record_date: date) -> Optional[AttendanceRecord]:
        return AttendanceRecord.query.filter_by(
            student_id=student_id,
            period_id=period_id,
            date=record_date
        ).first()

    @staticmethod
    def try_create(student_id: int, period_id: int, record_date: date, decision: Decision,
                   location: Optional[LocationReading] = None, scan_token_id: Optional[int] = None,
                   scanned_at: Optional[datetime] = None) -> AttendanceRecord:
        """Insert the single record for (student, period, date).

        Raises AlreadyRecordedError carrying the existing row when one is
        present, including when a concurrent insert wins the unique constraint.
        """
        existing = AttendanceService.find_existing(student_id, period_id, record_date)
        if existing:
            raise AlreadyRecordedError(existing)

        scanned_at = scanned_at or utcnow()
        location = location or LocationReading()
        record = AttendanceRecord(
            student_id=student_id,
            period_id=period_id,
            scan_token_id=scan_token_id,
            date=record_date,
            scanned_at=scanned_at,
            created_at=scanned_at,
            status=decision.status,
            location_status=decision.location_status,
            latitude=to_microdegrees(location.latitude),
            longitude=to_microdegrees(location.longitude),
            accuracy=None if location.accuracy_meters is None else int(round(location.accuracy_meters))
        )

        try:
            db.session.add(record)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            winner = AttendanceService.find_existing(student_id, period_id, record_date)
            if winner is None:
                raise
            current_app.logger.info(
                "Concurrent scan lost for student %s period %s on %s",
                student_id, period_id, record_date.isoformat()
            )
            raise AlreadyRecordedError(winner)

        return record

    @staticmethod
    def submit_scan(student_id: int, code: Optional[str], latitude=None, longitude=None,
                    accuracy=None, now: Optional[datetime] = None) -> dict:
        """Full scan flow: resolve the code, decide, record."""
        if not code or not str(code).strip():
            raise InvalidInputError("QR code is required")

        reading = parse_location(latitude, longitude, accuracy)

        now = now or utcnow()
        token = QRService.resolve(str(code).strip())
        if QRService.is_expired(token, now):
            raise ExpiredCodeError()

        period = db.session.get(Period, token.period_id)
        if not period:
            raise NotFoundError("Period not found")

        local_now = to_institution_time(now)
        # Recorded against the scan's local date, not the token's date
        record_date = local_now.date()

        decision = build_decision_engine().decide(period, reading.to_reported(), local_now.strftime('%H:%M'))

        record = AttendanceService.try_create(
            student_id, period.id, record_date, decision,
            location=reading, scan_token_id=token.id, scanned_at=now
        )

        current_app.logger.info(
            "Scan recorded: student=%s period=%s date=%s status=%s location=%s",
            student_id, period.id, record_date.isoformat(),
            decision.status.value, decision.location_status.value
        )

        return {
            'status': decision.status.value,
            'location_status': decision.location_status.value,
            'attendance': record.to_dict(),
            'period': period.to_dict(),
            'scanned_at_local': local_now.strftime('%H:%M')
        }

    @staticmethod
    def resolve(record_id: int, new_status, reviewer_id: Optional[int] = None,
                now: Optional[datetime] = None) -> AttendanceRecord:
        """Overwrite a record's status from manual review.

        Any status may replace any other. The location tag follows: pending
        review stays pending, every other status marks the location verified.
        """
        try:
            status = AttendanceStatus(new_status)
        except ValueError:
            raise InvalidInputError("Invalid status")

        record = db.session.get(AttendanceRecord, record_id)
        if not record:
            raise NotFoundError("Attendance record not found")

        previous = record.status
        record.status = status
        record.location_status = (
            LocationStatus.PENDING_REVIEW if status == AttendanceStatus.PENDING_REVIEW
            else LocationStatus.VERIFIED
        )
        record.reviewed_by = reviewer_id
        record.reviewed_at = now or utcnow()
        db.session.commit()

        current_app.logger.info(
            "Attendance %s reviewed by %s: %s -> %s",
            record.id, reviewer_id, previous.value, status.value
        )
        return record

    @staticmethod
    def list_records(record_date: Optional[date] = None, period_id: Optional[int] = None,
                     status: Optional[str] = None, student_id: Optional[int] = None,
                     limit: Optional[int] = None) -> List[AttendanceRecord]:
        """Records newest first, optionally filtered."""
        query = AttendanceRecord.query

        if record_date:
            query = query.filter(AttendanceRecord.date == record_date)
        if period_id:
            query = query.filter(AttendanceRecord.period_id == period_id)
        if student_id:
            query = query.filter(AttendanceRecord.student_id == student_id)
        if status:
            try:
                query = query.filter(AttendanceRecord.status == AttendanceStatus(status))
            except ValueError:
                raise InvalidInputError("Invalid status")

        query = query.order_by(AttendanceRecord.scanned_at.desc(), AttendanceRecord.id.desc())
        if limit:
            query = query.limit(limit)
        return query.all()
