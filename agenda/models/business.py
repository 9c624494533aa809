from agenda import db
from datetime import datetime
import re

class Business(db.Model):
    """A tenant of the system, addressed publicly by its slug"""
    __tablename__ = 'businesses'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    slug = db.Column(db.String(120), unique=True, nullable=False)
    email = db.Column(db.String(120), nullable=True)
    phone = db.Column(db.String(30), nullable=True)
    address = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    users = db.relationship('User', backref='business', lazy='dynamic')
    services = db.relationship('Service', backref='business', lazy='dynamic')
    categories = db.relationship('Category', backref='business', lazy='dynamic')

    def __init__(self, name, slug=None, email=None, phone=None, address=None):
        self.name = name
        self.slug = slug or self.slugify(name)
        self.email = email
        self.phone = phone
        self.address = address

    @staticmethod
    def slugify(name):
        slug = re.sub(r'[^a-z0-9]+', '-', name.lower()).strip('-')
        return slug or 'business'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'email': self.email,
            'phone': self.phone,
            'address': self.address,
        }

    def __repr__(self):
        return f'<Business {self.slug}>'


class Category(db.Model):
    __tablename__ = 'categories'

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(db.Integer, db.ForeignKey('businesses.id'), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    color = db.Column(db.String(20), nullable=True)
    is_deleted = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    services = db.relationship('Service', backref='category', lazy='dynamic')

    def __init__(self, business_id, name, description=None, color=None):
        self.business_id = business_id
        self.name = name
        self.description = description
        self.color = color
        self.is_deleted = False

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'color': self.color,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'services': [s.to_dict() for s in self.services],
        }

    def __repr__(self):
        return f'<Category {self.name}>'
