from agenda import db
from datetime import datetime

NOTE_GENERAL = 'GENERAL'
NOTE_PREFERENCE = 'PREFERENCE'
NOTE_INCIDENT = 'INCIDENT'
NOTE_FEEDBACK = 'FEEDBACK'
NOTE_FOLLOW_UP = 'FOLLOW_UP'
NOTE_SPECIAL_REQUEST = 'SPECIAL_REQUEST'

NOTE_TYPES = (
    NOTE_GENERAL,
    NOTE_PREFERENCE,
    NOTE_INCIDENT,
    NOTE_FEEDBACK,
    NOTE_FOLLOW_UP,
    NOTE_SPECIAL_REQUEST,
)

class Note(db.Model):
    __tablename__ = 'notes'

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(db.Integer, db.ForeignKey('businesses.id'), nullable=False)
    client_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    appointment_id = db.Column(db.Integer, db.ForeignKey('appointments.id'), nullable=True)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    note_type = db.Column(db.String(30), nullable=False, default=NOTE_GENERAL)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationship to client
    client = db.relationship('User', foreign_keys=[client_id], backref=db.backref('notes_about_me', lazy='dynamic'))

    def __init__(self, business_id, client_id, created_by_id, content, note_type=NOTE_GENERAL, appointment_id=None):
        self.business_id = business_id
        self.client_id = client_id
        self.created_by_id = created_by_id
        self.content = content
        self.note_type = note_type
        self.appointment_id = appointment_id

    def to_dict(self, viewer=None):
        return {
            'id': self.id,
            'clientId': self.client_id,
            'appointmentId': self.appointment_id,
            'noteType': self.note_type,
            'content': self.content,
            'createdById': self.created_by_id,
            'createdBy': {'id': self.created_by.id, 'name': self.created_by.name},
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
            'canEdit': viewer is not None and viewer.id == self.created_by_id,
        }

    def __repr__(self):
        return f'<Note {self.id} {self.note_type}>'
