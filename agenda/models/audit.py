from agenda import db
from datetime import datetime
import json
from agenda.utils.json_utils import AgendaJSONEncoder

class AuditLog(db.Model):
    """One state change in a business: who did what to which record"""
    __tablename__ = 'audit_logs'

    id = db.Column(db.Integer, primary_key=True)
    # Null for events outside any tenant, e.g. a login with an unknown email
    business_id = db.Column(db.Integer, db.ForeignKey('businesses.id'), nullable=True, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow)
    action = db.Column(db.String(50), nullable=False)  # create, update, cancel, delete, attempt, perform
    entity_type = db.Column(db.String(50), nullable=False)  # appointment, enrollment, note, staff, ...
    entity_id = db.Column(db.Integer, nullable=True)
    details = db.Column(db.Text, nullable=True)
    ip_address = db.Column(db.String(50), nullable=True)

    user = db.relationship('User', backref=db.backref('audit_logs', lazy='dynamic'))

    def __init__(self, action, entity_type, business_id=None, user_id=None, entity_id=None,
                 details=None, ip_address=None):
        self.business_id = business_id
        self.user_id = user_id
        self.action = action
        self.entity_type = entity_type
        self.entity_id = entity_id
        if isinstance(details, (dict, list)):
            details = json.dumps(details, cls=AgendaJSONEncoder)
        self.details = details
        self.ip_address = ip_address

    def get_details_dict(self):
        if not self.details:
            return {}
        try:
            return json.loads(self.details)
        except ValueError:
            return {'raw': self.details}

    def to_dict(self):
        return {
            'id': self.id,
            'businessId': self.business_id,
            'userId': self.user_id,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
            'action': self.action,
            'entityType': self.entity_type,
            'entityId': self.entity_id,
            'details': self.get_details_dict(),
        }

    def __repr__(self):
        return f'<AuditLog {self.business_id}/{self.entity_type}:{self.entity_id} {self.action}>'
