from typing import List, Optional

from sqlalchemy.orm import Session

from app.api.attendees import models as attendee_models
from app.api.attendees.crud import attendee as attendee_crud
from app.api.attendees.schemas import Attendee
from app.api.base_crud import CRUDBase
from app.core.exceptions.api_exceptions import AttendeeNotFound
from app.core.logger import logger
from app.core.utils import current_time

from . import models, schemas

MANUAL_CHECK_IN = 'manual'


class CRUDCheckIn(
    CRUDBase[
        models.AttendanceLog,
        schemas.InternalAttendanceLogCreate,
        schemas.InternalAttendanceLogCreate,
    ]
):
    def resolve(self, db: Session, code: str) -> Optional[attendee_models.Attendee]:
        """Find the attendee a scanned code refers to.

        Exact matches on qr code, barcode or id win. Otherwise the first
        attendee whose qr code or barcode contains the code is taken, which
        absorbs partial scanner reads. When several codes overlap the pick
        depends on store order.
        """
        code = code.strip()
        if not code:
            return None

        attendee = attendee_crud.get_by_code(db, code)
        if attendee:
            return attendee

        attendee = attendee_crud.find_by_partial_code(db, code)
        if attendee:
            logger.info('Code %s matched attendee %s partially', code, attendee.id)
        return attendee

    def check_in(
        self,
        db: Session,
        code: str,
        operator_id: str,
    ) -> schemas.CheckInResponse:
        attendee = self.resolve(db, code)
        logger.info('Attendee with code %s found: %s', code, attendee is not None)
        if not attendee:
            logger.error('Attendee with code %s not found', code)
            raise AttendeeNotFound(code)

        if attendee.attendance_status:
            logger.info(
                'Attendee %s already checked in at %s',
                attendee.id,
                attendee.checked_in_at,
            )
            return schemas.CheckInResponse(
                status=schemas.CheckInStatus.ALREADY_CHECKED_IN,
                attendee=Attendee.model_validate(attendee),
                checked_in_at=attendee.checked_in_at,
            )

        now = current_time()
        attendee.attendance_status = True
        attendee.checked_in_at = now
        attendee.checked_in_by = operator_id
        attendee.updated_at = now
        db.commit()

        super().create(
            db,
            schemas.InternalAttendanceLogCreate(
                attendee_id=attendee.id,
                recorded_by=operator_id,
            ),
        )
        db.refresh(attendee)
        logger.info('Attendee %s checked in by %s', attendee.id, operator_id)
        return schemas.CheckInResponse(
            status=schemas.CheckInStatus.SUCCESS,
            attendee=Attendee.model_validate(attendee),
            checked_in_at=attendee.checked_in_at,
        )

    def toggle_attendance(
        self, db: Session, attendee_id: str
    ) -> attendee_models.Attendee:
        """Flip attendance from the attendee list. Leaves no attendance log."""
        attendee = attendee_crud.get(db, attendee_id)
        now = current_time()

        if attendee.attendance_status:
            attendee.attendance_status = False
            attendee.checked_in_at = None
            attendee.checked_in_by = None
        else:
            attendee.attendance_status = True
            attendee.checked_in_at = now
            attendee.checked_in_by = MANUAL_CHECK_IN
        attendee.updated_at = now

        db.commit()
        db.refresh(attendee)
        logger.info(
            'Attendance of %s toggled to %s', attendee.id, attendee.attendance_status
        )
        return attendee

    def find_logs(
        self,
        db: Session,
        filters: Optional[schemas.AttendanceLogFilter] = None,
    ) -> List[models.AttendanceLog]:
        return super().find(db, filters=filters, sort_by='created_at')


check_in = CRUDCheckIn(models.AttendanceLog)
