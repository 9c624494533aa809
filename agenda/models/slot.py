from agenda import db
from datetime import datetime

# Enrollment status constants
ENROLLMENT_CONFIRMED = 'CONFIRMED'
ENROLLMENT_PENDING = 'PENDING'
ENROLLMENT_CANCELLED = 'CANCELLED'

class Slot(db.Model):
    """A recurring, capacity-bounded class occurrence (weekday + clock times)"""
    __tablename__ = 'slots'

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(db.Integer, db.ForeignKey('businesses.id'), nullable=False)
    service_id = db.Column(db.Integer, db.ForeignKey('services.id'), nullable=False)
    staff_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    day_of_week = db.Column(db.Integer, nullable=False)  # 0-6 (Monday-Sunday)
    start_time = db.Column(db.Time, nullable=False)
    end_time = db.Column(db.Time, nullable=False)
    capacity = db.Column(db.Integer, nullable=False, default=1)
    description = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    staff = db.relationship('User', foreign_keys=[staff_id])
    enrollments = db.relationship('Enrollment', backref='slot', lazy='dynamic')
    descriptions = db.relationship('SlotDescription', backref='slot', lazy='dynamic')

    def __init__(self, business_id, service_id, day_of_week, start_time, end_time, capacity,
                 staff_id=None, description=None):
        self.business_id = business_id
        self.service_id = service_id
        self.day_of_week = day_of_week
        self.start_time = start_time
        self.end_time = end_time
        self.capacity = capacity
        self.staff_id = staff_id
        self.description = description
        self.is_active = True

    def occurs_on(self, day):
        return day.weekday() == self.day_of_week

    def active_enrollments(self, day):
        return self.enrollments.filter(
            Enrollment.date == day,
            Enrollment.status != ENROLLMENT_CANCELLED
        )

    def description_for(self, day):
        """Per-day override, then the slot's own text, then the service's"""
        if day is not None:
            override = self.descriptions.filter_by(date=day).first()
            if override:
                return override.description
        return self.description or self.service.description

    def to_dict(self):
        return {
            'id': self.id,
            'serviceId': self.service_id,
            'serviceName': self.service.name,
            'staffId': self.staff_id,
            'dayOfWeek': self.day_of_week,
            'startTime': self.start_time.strftime('%H:%M'),
            'endTime': self.end_time.strftime('%H:%M'),
            'capacity': self.capacity,
        }

    def __repr__(self):
        return f'<Slot {self.id}: day {self.day_of_week} {self.start_time}-{self.end_time} cap {self.capacity}>'


class SlotDescription(db.Model):
    __tablename__ = 'slot_descriptions'
    __table_args__ = (db.UniqueConstraint('slot_id', 'date', name='uq_slot_description_date'),)

    id = db.Column(db.Integer, primary_key=True)
    slot_id = db.Column(db.Integer, db.ForeignKey('slots.id'), nullable=False)
    date = db.Column(db.Date, nullable=False)
    description = db.Column(db.Text, nullable=False)

    def __init__(self, slot_id, date, description):
        self.slot_id = slot_id
        self.date = date
        self.description = description


class Enrollment(db.Model):
    __tablename__ = 'enrollments'
    __table_args__ = (db.UniqueConstraint('slot_id', 'client_id', 'date', name='uq_enrollment_slot_client_date'),)

    id = db.Column(db.Integer, primary_key=True)
    slot_id = db.Column(db.Integer, db.ForeignKey('slots.id'), nullable=False)
    client_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    date = db.Column(db.Date, nullable=False)
    status = db.Column(db.String(20), default=ENROLLMENT_CONFIRMED, nullable=False)
    attendance = db.Column(db.Boolean, default=False)
    enrolled_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __init__(self, slot_id, client_id, date, status=ENROLLMENT_CONFIRMED):
        self.slot_id = slot_id
        self.client_id = client_id
        self.date = date
        self.status = status
        self.attendance = False

    def is_active(self):
        return self.status != ENROLLMENT_CANCELLED

    def to_dict(self):
        return {
            'id': self.id,
            'slotId': self.slot_id,
            'clientId': self.client_id,
            'client': {
                'id': self.client.id,
                'name': self.client.name,
                'email': self.client.email,
                'phone': self.client.phone,
                'isEligible': bool(self.client.is_eligible),
            },
            'date': self.date.isoformat(),
            'status': self.status,
            'attendance': bool(self.attendance),
            'enrolledAt': self.enrolled_at.isoformat() if self.enrolled_at else None,
        }

    def __repr__(self):
        return f'<Enrollment {self.id}: slot {self.slot_id} client {self.client_id} {self.date}>'
