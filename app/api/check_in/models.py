from sqlalchemy import Column, DateTime, String

from app.core.database import Base
from app.core.utils import current_time, new_id


class AttendanceLog(Base):
    __tablename__ = 'attendance_logs'

    id = Column(String, primary_key=True, default=new_id, index=True)
    # No foreign key: history outlives permanently deleted attendees
    attendee_id = Column(String, nullable=False, index=True)
    recorded_by = Column(String, nullable=False)
    action = Column(String, nullable=False)

    created_at = Column(DateTime, default=current_time)
