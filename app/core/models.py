# Import all models here so the metadata knows every table
from app.api.attendees.models import Attendee
from app.api.check_in.models import AttendanceLog
from app.api.users.models import User

__all__ = [
    'AttendanceLog',
    'Attendee',
    'User',
]
