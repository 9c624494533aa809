from agenda import db
from datetime import datetime, timedelta

# Appointment status constants
STATUS_PENDING = 'PENDING'
STATUS_ACCEPTED = 'ACCEPTED'
STATUS_CONFIRMED = 'CONFIRMED'
STATUS_COMPLETED = 'COMPLETED'
STATUS_CANCELLED = 'CANCELLED'
STATUS_REJECTED = 'REJECTED'

ALLOWED_STATUSES = (
    STATUS_PENDING,
    STATUS_ACCEPTED,
    STATUS_CONFIRMED,
    STATUS_COMPLETED,
    STATUS_CANCELLED,
    STATUS_REJECTED,
)

# Statuses that no longer occupy the staff member's calendar
INACTIVE_STATUSES = (STATUS_CANCELLED, STATUS_REJECTED)

class Appointment(db.Model):
    __tablename__ = 'appointments'

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(db.Integer, db.ForeignKey('businesses.id'), nullable=False)
    client_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    staff_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    service_id = db.Column(db.Integer, db.ForeignKey('services.id'), nullable=False)
    start_time = db.Column(db.DateTime, nullable=False, index=True)
    duration = db.Column(db.Integer, nullable=False)  # minutes
    status = db.Column(db.String(20), default=STATUS_PENDING, nullable=False)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    business = db.relationship('Business')
    appointment_notes = db.relationship('Note', backref='appointment', lazy='dynamic')

    def __init__(self, business_id, client_id, staff_id, service_id, start_time, duration,
                 notes=None, status=STATUS_PENDING):
        self.business_id = business_id
        self.client_id = client_id
        self.staff_id = staff_id
        self.service_id = service_id
        self.start_time = start_time
        self.duration = duration
        self.notes = notes
        self.status = status

    @property
    def end_time(self):
        return self.start_time + timedelta(minutes=self.duration)

    def cancel(self):
        self.status = STATUS_CANCELLED

    def append_log(self, message, when=None):
        """Append a timestamped line to the notes field"""
        when = when or datetime.utcnow()
        line = f"[{when.strftime('%Y-%m-%d %H:%M')}] {message}"
        self.notes = f"{self.notes}\n{line}" if self.notes else line

    def to_dict(self):
        return {
            'id': self.id,
            'businessId': self.business_id,
            'client': {
                'id': self.client.id,
                'name': self.client.name,
                'email': self.client.email,
            },
            'staff': {
                'id': self.staff.id,
                'name': self.staff.name,
            },
            'service': {
                'id': self.service.id,
                'name': self.service.name,
                'price': float(self.service.price) if self.service.price is not None else None,
            },
            'scheduledFor': self.start_time.isoformat(),
            'endsAt': self.end_time.isoformat(),
            'duration': self.duration,
            'status': self.status,
            'notes': self.notes,
        }

    def __repr__(self):
        return f'<Appointment {self.id}: {self.start_time} ({self.duration} min) {self.status}>'
