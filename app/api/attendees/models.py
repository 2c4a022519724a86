from sqlalchemy import Boolean, Column, DateTime, Float, String

from app.core.database import Base
from app.core.utils import current_time, new_id


class Attendee(Base):
    __tablename__ = 'attendees'

    id = Column(String, primary_key=True, default=new_id, index=True)
    full_name = Column(String, nullable=False)
    phone_primary = Column(String, nullable=False, index=True)
    phone_secondary = Column(String)
    email_primary = Column(String)
    email_secondary = Column(String)
    facebook_link = Column(String)

    governorate = Column(String, nullable=False)
    seat_class = Column(String, nullable=False)
    status = Column(String, nullable=False)

    payment_type = Column(String, nullable=False)
    payment_amount = Column(Float, nullable=False, default=0)
    remaining_amount = Column(Float, nullable=False, default=0)

    attendance_status = Column(Boolean, nullable=False, default=False)
    checked_in_at = Column(DateTime, nullable=True)
    checked_in_by = Column(String, nullable=True)

    qr_code = Column(String, index=True)
    barcode = Column(String, index=True)

    is_deleted = Column(Boolean, nullable=False, default=False, index=True)

    created_by = Column(String)
    created_at = Column(DateTime, default=current_time, index=True)
    # Maintained explicitly: moving to and from the trash leaves it untouched
    updated_at = Column(DateTime, default=current_time)
