from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Governorate(str, Enum):
    MINYA = 'Minya'
    ASYUT = 'Asyut'
    SOHAG = 'Sohag'
    QENA = 'Qena'


class SeatClass(str, Enum):
    A = 'A'
    B = 'B'
    C = 'C'

    @property
    def price(self) -> int:
        return SEAT_PRICES[self]


SEAT_PRICES = {
    SeatClass.A: 2000,
    SeatClass.B: 1700,
    SeatClass.C: 1500,
}


class PaymentType(str, Enum):
    DEPOSIT = 'deposit'
    FULL = 'full'


class AttendeeStatus(str, Enum):
    INTERESTED = 'interested'
    REGISTERED = 'registered'


class AttendeeScope(str, Enum):
    ACTIVE = 'active'
    TRASH = 'trash'


class AttendanceFilter(str, Enum):
    PRESENT = 'present'
    ABSENT = 'absent'


def remaining_amount_for(
    seat_class: str, payment_type: str, payment_amount: float
) -> float:
    """Balance still owed for a seat given what was paid so far."""
    if payment_type == PaymentType.FULL:
        return 0
    price = SeatClass(seat_class).price
    return max(0, price - (payment_amount or 0))


def _empty_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class AttendeeCreate(BaseModel):
    id: Optional[str] = None
    full_name: str
    phone_primary: str
    phone_secondary: Optional[str] = None
    email_primary: Optional[str] = None
    email_secondary: Optional[str] = None
    facebook_link: Optional[str] = None
    governorate: Governorate = Governorate.MINYA
    seat_class: SeatClass = SeatClass.B
    status: AttendeeStatus = AttendeeStatus.REGISTERED
    payment_type: PaymentType = PaymentType.DEPOSIT
    payment_amount: float = Field(default=0, ge=0)
    qr_code: Optional[str] = None
    barcode: Optional[str] = None

    @field_validator('full_name', 'phone_primary')
    @classmethod
    def validate_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('Field cannot be empty')
        return value

    @field_validator(
        'phone_secondary',
        'email_primary',
        'email_secondary',
        'facebook_link',
        'qr_code',
        'barcode',
    )
    @classmethod
    def validate_optional(cls, value: Optional[str]) -> Optional[str]:
        return _empty_to_none(value)

    @field_validator('email_primary', 'email_secondary')
    @classmethod
    def validate_email(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else None


class InternalAttendeeCreate(AttendeeCreate):
    created_by: Optional[str] = None


class AttendeeUpdate(BaseModel):
    full_name: Optional[str] = None
    phone_primary: Optional[str] = None
    phone_secondary: Optional[str] = None
    email_primary: Optional[str] = None
    email_secondary: Optional[str] = None
    facebook_link: Optional[str] = None
    governorate: Optional[Governorate] = None
    seat_class: Optional[SeatClass] = None
    status: Optional[AttendeeStatus] = None
    payment_type: Optional[PaymentType] = None
    payment_amount: Optional[float] = Field(default=None, ge=0)
    qr_code: Optional[str] = None
    barcode: Optional[str] = None

    @field_validator('full_name', 'phone_primary')
    @classmethod
    def validate_required(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError('Field cannot be empty')
        return value

    @field_validator('phone_secondary', 'facebook_link', 'qr_code', 'barcode')
    @classmethod
    def validate_optional(cls, value: Optional[str]) -> Optional[str]:
        return _empty_to_none(value)

    @field_validator('email_primary', 'email_secondary')
    @classmethod
    def validate_email(cls, value: Optional[str]) -> Optional[str]:
        value = _empty_to_none(value)
        return value.lower() if value else None


class Attendee(BaseModel):
    id: str
    full_name: str
    phone_primary: str
    phone_secondary: Optional[str] = None
    email_primary: Optional[str] = None
    email_secondary: Optional[str] = None
    facebook_link: Optional[str] = None
    governorate: Governorate
    seat_class: SeatClass
    status: AttendeeStatus
    payment_type: PaymentType
    payment_amount: float
    remaining_amount: float
    attendance_status: bool
    checked_in_at: Optional[datetime] = None
    checked_in_by: Optional[str] = None
    qr_code: Optional[str] = None
    barcode: Optional[str] = None
    is_deleted: bool
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AttendeeFilter(BaseModel):
    governorate: Optional[Governorate] = None
    seat_class: Optional[SeatClass] = None
    status: Optional[AttendeeStatus] = None
    payment_type: Optional[PaymentType] = None
    attendance: Optional[AttendanceFilter] = None
    search: Optional[str] = None
