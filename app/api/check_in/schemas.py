from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from app.api.attendees.schemas import Attendee


class CheckInAction(str, Enum):
    CHECK_IN = 'check_in'


class CheckInStatus(str, Enum):
    SUCCESS = 'success'
    ALREADY_CHECKED_IN = 'already_checked_in'


class NewCheckIn(BaseModel):
    code: str
    operator_id: Optional[str] = None

    @field_validator('code')
    def validate_code(cls, v):
        v = v.strip() if v else v
        if not v:
            raise ValueError('Code is required')
        return v


class InternalAttendanceLogCreate(BaseModel):
    attendee_id: str
    recorded_by: str
    action: str = CheckInAction.CHECK_IN.value


class AttendanceLog(BaseModel):
    id: str
    attendee_id: str
    recorded_by: str
    action: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AttendanceLogFilter(BaseModel):
    attendee_id: Optional[str] = None
    recorded_by: Optional[str] = None


class CheckInResponse(BaseModel):
    status: CheckInStatus
    attendee: Attendee
    checked_in_at: Optional[datetime] = None
