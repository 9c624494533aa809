from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime
from agenda import db, login_manager

# User roles
ROLE_CLIENT = 'client'
ROLE_STAFF = 'staff'
ROLE_OWNER = 'owner'
ROLE_ADMIN = 'admin'

# Staff permission levels inside a business
STAFF_ADMIN = 'ADMIN'
STAFF_MANAGER = 'MANAGER'
STAFF_STANDARD = 'STANDARD'
STAFF_ROLES = (STAFF_ADMIN, STAFF_MANAGER, STAFF_STANDARD)

class User(UserMixin, db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(db.Integer, db.ForeignKey('businesses.id'), nullable=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=True)
    name = db.Column(db.String(100), nullable=False)
    phone = db.Column(db.String(20), nullable=True)
    role = db.Column(db.String(20), default=ROLE_CLIENT)
    staff_role = db.Column(db.String(20), nullable=True)
    is_active = db.Column(db.Boolean, default=True)
    # Clients only: whether the business lets them book or enroll
    is_eligible = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    appointments_as_client = db.relationship('Appointment', foreign_keys='Appointment.client_id', backref='client', lazy='dynamic')
    appointments_as_staff = db.relationship('Appointment', foreign_keys='Appointment.staff_id', backref='staff', lazy='dynamic')
    enrollments = db.relationship('Enrollment', backref='client', lazy='dynamic')
    authored_notes = db.relationship('Note', foreign_keys='Note.created_by_id', backref='created_by', lazy='dynamic')

    def __init__(self, email, name, password=None, role=ROLE_CLIENT, business_id=None,
                 phone=None, staff_role=None, is_eligible=True):
        self.email = email
        self.name = name
        if password:
            self.set_password(password)
        self.role = role
        self.business_id = business_id
        self.phone = phone
        self.staff_role = staff_role
        self.is_active = True
        self.is_eligible = is_eligible

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def is_admin(self):
        return self.role == ROLE_ADMIN

    def is_owner(self):
        return self.role == ROLE_OWNER

    def is_staff(self):
        """Anyone working for a business: staff members, owners and system admins"""
        return self.role in (ROLE_STAFF, ROLE_OWNER, ROLE_ADMIN)

    def is_client(self):
        return self.role == ROLE_CLIENT

    def can_manage_staff(self):
        return self.is_owner() or self.is_admin() or (
            self.role == ROLE_STAFF and self.staff_role == STAFF_ADMIN
        )

    def to_dict(self):
        data = {
            'id': self.id,
            'businessId': self.business_id,
            'email': self.email,
            'name': self.name,
            'phone': self.phone,
            'role': self.role,
        }
        if self.role == ROLE_STAFF:
            data['staffRole'] = self.staff_role
        if self.is_client():
            data['isEligible'] = bool(self.is_eligible)
        return data

    def __repr__(self):
        return f'<User {self.email}>'

@login_manager.user_loader
def load_user(id):
    return db.session.get(User, int(id))
