from agenda import db
from datetime import datetime

class Service(db.Model):
    __tablename__ = 'services'

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(db.Integer, db.ForeignKey('businesses.id'), nullable=False)
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id'), nullable=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=True)
    duration_minutes = db.Column(db.Integer, nullable=False, default=60)  # Duration in minutes
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    appointments = db.relationship('Appointment', backref='service', lazy='dynamic')
    slots = db.relationship('Slot', backref='service', lazy='dynamic')

    def __init__(self, business_id, name, duration_minutes=60, price=None, description=None,
                 category_id=None, is_active=True):
        self.business_id = business_id
        self.name = name
        self.duration_minutes = duration_minutes
        self.price = price
        self.description = description
        self.category_id = category_id
        self.is_active = is_active

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'price': float(self.price) if self.price is not None else None,
            'duration': self.duration_minutes,
            'categoryId': self.category_id,
            'isActive': bool(self.is_active),
        }

    def __repr__(self):
        return f'<Service {self.name}>'
