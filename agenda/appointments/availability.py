from datetime import timedelta
from agenda import db
from agenda.models.appointment import Appointment, INACTIVE_STATUSES
from agenda.models.user import User

# Longest booking accepted; conflict lookups reach back this far
MAX_DURATION_MINUTES = 24 * 60

def intervals_overlap(a_start, a_end, b_start, b_end):
    """Half-open [start, end) overlap: touching intervals do not overlap"""
    return a_start < b_end and b_start < a_end

def appointments_around(staff_id, start, end):
    """
    Calendar-occupying appointments of a staff member that may overlap [start, end)

    Bounded by the interval rather than the calendar day, so a booking that
    starts the evening before and runs past midnight is still returned.
    """
    return Appointment.query.filter(
        Appointment.staff_id == staff_id,
        Appointment.start_time >= start - timedelta(minutes=MAX_DURATION_MINUTES),
        Appointment.start_time < end,
        Appointment.status.notin_(INACTIVE_STATUSES)
    ).order_by(Appointment.start_time).all()

def find_conflicts(staff_id, start, duration, exclude_id=None):
    """Return the appointments that overlap [start, start + duration)"""
    end = start + timedelta(minutes=duration)
    conflicts = []
    for appointment in appointments_around(staff_id, start, end):
        if exclude_id is not None and appointment.id == exclude_id:
            continue
        if intervals_overlap(appointment.start_time, appointment.end_time, start, end):
            conflicts.append(appointment)
    return conflicts

def is_staff_available(staff_id, start, duration, exclude_id=None):
    return not find_conflicts(staff_id, start, duration, exclude_id=exclude_id)

def lock_staff(staff_id):
    """
    Take a row lock on the staff member for the rest of the transaction

    Booking callers hold this lock across the overlap check and the insert
    so two concurrent requests for the same staff member are serialized.
    Databases without row locks (SQLite) ignore FOR UPDATE.
    """
    return db.session.query(User).filter(User.id == staff_id).with_for_update().first()
