# Import all models here for easier imports elsewhere
from .business import Business, Category
from .user import User
from .service import Service
from .appointment import Appointment
from .slot import Slot, SlotDescription, Enrollment
from .note import Note
from .audit import AuditLog
