"""Period management service."""
from typing import Dict, List, Optional

from flask import current_app

from qrattend import db
from qrattend.models.attendance import AttendanceRecord
from qrattend.models.period import Period
from qrattend.models.scan_token import ScanToken
from qrattend.models.user import Capability, User
from qrattend.utils.errors import ConflictError, InvalidInputError, NotFoundError
from qrattend.utils.validators import Validator

EDITABLE_TEXT_FIELDS = ('name', 'strand', 'section', 'subject')

class PeriodService:
    """Service for managing class periods."""

    @staticmethod
    def list_periods(teacher_id: Optional[int] = None) -> List[Period]:
        query = Period.query
        if teacher_id is not None:
            query = query.filter_by(teacher_id=teacher_id)
        return query.order_by(Period.start_time, Period.id).all()

    @staticmethod
    def get_period(period_id: int) -> Period:
        period = db.session.get(Period, period_id)
        if not period:
            raise NotFoundError("Period not found")
        return period

    @staticmethod
    def create_period(data: Dict, actor: User) -> Period:
        """Create a period; teachers become its owner."""
        Validator.require_fields(data, ['name', 'start_time', 'end_time'])

        late_threshold = data.get('late_threshold')
        if late_threshold is None:
            late_threshold = current_app.config.get('DEFAULT_LATE_THRESHOLD_MINUTES', 15)

        if actor.has_capability(Capability.MANAGE_ALL_PERIODS):
            teacher_id = data.get('teacher_id')
            if teacher_id is not None:
                teacher_id = Validator.parse_non_negative_int(teacher_id, 'teacher_id')
        else:
            teacher_id = actor.id

        period = Period(
            name=str(data['name']).strip(),
            strand=data.get('strand'),
            section=data.get('section'),
            subject=data.get('subject'),
            teacher_id=teacher_id,
            start_time=Validator.parse_time_of_day(data['start_time'], 'start_time'),
            end_time=Validator.parse_time_of_day(data['end_time'], 'end_time'),
            late_threshold=Validator.parse_non_negative_int(late_threshold, 'late_threshold')
        )
        PeriodService._check_bounds(period)
        period.save()

        current_app.logger.info("Period %s created by user %s", period.id, actor.id)
        return period

    @staticmethod
    def update_period(period_id: int, data: Dict, actor: User) -> Period:
        """Partial update; omitted fields keep their values."""
        period = PeriodService._get_editable(period_id, actor)
        if not isinstance(data, dict):
            raise InvalidInputError("Request body must be JSON")

        for field in EDITABLE_TEXT_FIELDS:
            if data.get(field) is not None:
                setattr(period, field, str(data[field]).strip())
        if not period.name:
            raise InvalidInputError("name must not be empty")

        if data.get('start_time') is not None:
            period.start_time = Validator.parse_time_of_day(data['start_time'], 'start_time')
        if data.get('end_time') is not None:
            period.end_time = Validator.parse_time_of_day(data['end_time'], 'end_time')
        if data.get('late_threshold') is not None:
            period.late_threshold = Validator.parse_non_negative_int(data['late_threshold'], 'late_threshold')

        PeriodService._check_bounds(period)
        db.session.commit()
        return period

    @staticmethod
    def delete_period(period_id: int, actor: User) -> None:
        """Delete a period.

        Owners (teachers) delete the period together with its attendance and
        scan tokens. Administrators may only delete unreferenced periods.
        """
        period = PeriodService._get_editable(period_id, actor)

        if actor.has_capability(Capability.MANAGE_ALL_PERIODS):
            has_records = AttendanceRecord.query.filter_by(period_id=period.id).first() is not None
            has_tokens = ScanToken.query.filter_by(period_id=period.id).first() is not None
            if has_records or has_tokens:
                raise ConflictError("Cannot delete a period with attendance records or QR codes")
        else:
            AttendanceRecord.query.filter_by(period_id=period.id).delete()
            ScanToken.query.filter_by(period_id=period.id).delete()

        db.session.delete(period)
        db.session.commit()
        current_app.logger.info("Period %s deleted by user %s", period_id, actor.id)

    @staticmethod
    def _get_editable(period_id: int, actor: User) -> Period:
        period = PeriodService.get_period(period_id)
        if actor.has_capability(Capability.MANAGE_ALL_PERIODS):
            return period
        if actor.has_capability(Capability.MANAGE_OWN_PERIODS) and period.is_owned_by(actor.id):
            return period
        raise NotFoundError("Period not found or unauthorized")

    @staticmethod
    def _check_bounds(period: Period) -> None:
        if period.end_time <= period.start_time:
            raise InvalidInputError("end_time must be after start_time")
