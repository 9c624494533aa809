"""Capacity-bounded enrollment of clients into slot occurrences"""
from datetime import datetime
from flask import current_app
from agenda import db
from agenda.models.slot import Slot, Enrollment, ENROLLMENT_CONFIRMED, ENROLLMENT_CANCELLED


class EnrollmentError(Exception):
    """An enrollment request that cannot be honoured, with its API error code"""

    def __init__(self, code, message, status=400):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status = status


def parse_slot_date(value):
    if not value:
        raise EnrollmentError('DATE_MISSING', 'Date parameter is required')
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except (TypeError, ValueError):
        raise EnrollmentError('INVALID_DATE', 'Date must be YYYY-MM-DD')


def find_enrollment(slot, client_id, day):
    return Enrollment.query.filter_by(slot_id=slot.id, client_id=client_id, date=day).first()


def enroll_client(slot, client, day):
    """
    Enroll a client in the slot's occurrence on ``day``.

    The capacity check and the insert run in one transaction holding a row
    lock on the slot, so concurrent enrollments cannot overfill it. A
    previously cancelled enrollment for the same occurrence is reactivated.
    """
    if not client.is_eligible:
        raise EnrollmentError('CLIENT_NOT_ELIGIBLE', 'Client is not eligible for bookings')
    if not slot.occurs_on(day):
        raise EnrollmentError('INVALID_DATE', 'The slot does not take place on this date')

    db.session.query(Slot).filter(Slot.id == slot.id).with_for_update().first()

    existing = find_enrollment(slot, client.id, day)
    if existing is not None and existing.is_active():
        db.session.rollback()
        raise EnrollmentError('ALREADY_ENROLLED', 'Client is already enrolled in this slot', 409)

    enrolled = slot.active_enrollments(day).count()
    if enrolled >= slot.capacity:
        db.session.rollback()
        raise EnrollmentError('SLOT_FULL', f'Slot is full ({enrolled}/{slot.capacity})', 409)

    if existing is not None:
        existing.status = ENROLLMENT_CONFIRMED
        existing.attendance = False
        existing.enrolled_at = datetime.utcnow()
        enrollment = existing
    else:
        enrollment = Enrollment(slot_id=slot.id, client_id=client.id, date=day)
        db.session.add(enrollment)
    db.session.commit()

    current_app.logger.info(f"Client {client.id} enrolled in slot {slot.id} on {day} ({enrolled + 1}/{slot.capacity})")
    return enrollment


def cancel_enrollment(enrollment):
    enrollment.status = ENROLLMENT_CANCELLED
    enrollment.attendance = False
    db.session.commit()
    return enrollment


def set_attendance(enrollment, attendance=None):
    """Set the attendance flag, or flip it when no value is given"""
    if attendance is None:
        attendance = not enrollment.attendance
    enrollment.attendance = bool(attendance)
    db.session.commit()
    return enrollment
