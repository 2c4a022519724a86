from enum import Enum
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from app.api.base_crud import CRUDBase
from app.core.exceptions.api_exceptions import DuplicateConflict
from app.core.logger import logger
from app.core.utils import current_time, new_id

from . import models, schemas

# Columns that cannot be cleared through an update
REQUIRED_FIELDS = {
    'full_name',
    'phone_primary',
    'governorate',
    'seat_class',
    'status',
    'payment_type',
    'payment_amount',
}


def apply_payment_rules(db_obj: models.Attendee) -> None:
    """Normalise payment fields and recompute the remaining balance."""
    if db_obj.status == schemas.AttendeeStatus.INTERESTED:
        db_obj.payment_type = schemas.PaymentType.DEPOSIT.value
        db_obj.payment_amount = 0
    db_obj.remaining_amount = schemas.remaining_amount_for(
        db_obj.seat_class, db_obj.payment_type, db_obj.payment_amount
    )


class CRUDAttendees(
    CRUDBase[models.Attendee, schemas.InternalAttendeeCreate, schemas.AttendeeUpdate]
):
    def active(self, db: Session) -> Query:
        return db.query(self.model).filter(self.model.is_deleted.is_(False))

    def _apply_filters(
        self, query: Query, filters: Optional[schemas.AttendeeFilter] = None
    ) -> Query:
        if not filters:
            return query

        for field in ('governorate', 'seat_class', 'status', 'payment_type'):
            value = getattr(filters, field)
            if value is not None:
                query = query.filter(getattr(self.model, field) == value.value)

        if filters.attendance == schemas.AttendanceFilter.PRESENT:
            query = query.filter(self.model.attendance_status.is_(True))
        elif filters.attendance == schemas.AttendanceFilter.ABSENT:
            query = query.filter(self.model.attendance_status.is_(False))

        term = (filters.search or '').strip()
        if term:
            query = query.filter(
                or_(
                    func.lower(self.model.full_name).contains(
                        term.lower(), autoescape=True
                    ),
                    self.model.phone_primary.contains(term, autoescape=True),
                    self.model.qr_code.contains(term, autoescape=True),
                    self.model.barcode.contains(term, autoescape=True),
                )
            )
        return query

    def list(
        self,
        db: Session,
        scope: schemas.AttendeeScope = schemas.AttendeeScope.ACTIVE,
        filters: Optional[schemas.AttendeeFilter] = None,
    ) -> List[models.Attendee]:
        is_deleted = scope == schemas.AttendeeScope.TRASH
        query = db.query(self.model).filter(self.model.is_deleted.is_(is_deleted))
        query = self._apply_filters(query, filters)
        return query.order_by(self.model.created_at.desc()).all()

    def check_duplicates(self, db: Session, full_name: str, phone_primary: str) -> None:
        """Reject a registration colliding with an active attendee.

        Runs as a plain read before the insert, so two stations registering
        the same person at the same moment can both get through.
        """
        name_key = full_name.strip().lower()
        name_taken = (
            self.active(db)
            .filter(func.lower(func.trim(self.model.full_name)) == name_key)
            .first()
        )
        if name_taken:
            logger.error('Duplicate attendee name: %s', full_name)
            raise DuplicateConflict('full_name')

        phone_taken = (
            self.active(db).filter(self.model.phone_primary == phone_primary).first()
        )
        if phone_taken:
            logger.error('Duplicate attendee phone: %s', phone_primary)
            raise DuplicateConflict('phone_primary')

    def create(
        self, db: Session, obj: schemas.InternalAttendeeCreate
    ) -> models.Attendee:
        self.check_duplicates(db, obj.full_name, obj.phone_primary)

        data = obj.model_dump()
        data['id'] = data['id'] or new_id()
        for field in ('governorate', 'seat_class', 'status', 'payment_type'):
            data[field] = data[field].value
        if not data['qr_code']:
            data['qr_code'] = data['id']
        if not data['barcode']:
            data['barcode'] = data['id'][:8]

        now = current_time()
        db_obj = self.model(
            **data,
            attendance_status=False,
            is_deleted=False,
            created_at=now,
            updated_at=now,
        )
        apply_payment_rules(db_obj)
        db.add(db_obj)
        db_obj = self._commit(db, db_obj)
        logger.info('Attendee %s registered by %s', db_obj.id, db_obj.created_by)
        return db_obj

    def update(
        self, db: Session, id: str, obj: schemas.AttendeeUpdate
    ) -> models.Attendee:
        db_obj = self.get(db, id)
        data = obj.model_dump(exclude_unset=True)

        for field, value in data.items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            if isinstance(value, Enum):
                value = value.value
            setattr(db_obj, field, value)

        apply_payment_rules(db_obj)
        db_obj.updated_at = current_time()
        return self._commit(db, db_obj)

    def _set_deleted(self, db: Session, id: str, is_deleted: bool) -> models.Attendee:
        db_obj = self.get(db, id)
        db_obj.is_deleted = is_deleted
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def soft_delete(self, db: Session, id: str) -> models.Attendee:
        logger.info('Moving attendee %s to trash', id)
        return self._set_deleted(db, id, True)

    def restore(self, db: Session, id: str) -> models.Attendee:
        logger.info('Restoring attendee %s from trash', id)
        return self._set_deleted(db, id, False)

    def permanently_delete(self, db: Session, id: str) -> models.Attendee:
        logger.info('Permanently deleting attendee %s', id)
        return super().delete(db, id)

    def get_by_code(self, db: Session, code: str) -> Optional[models.Attendee]:
        """Exact match of a scanned code against qr code, barcode or id."""
        return (
            self.active(db)
            .filter(
                or_(
                    self.model.qr_code == code,
                    self.model.barcode == code,
                    self.model.id == code,
                )
            )
            .first()
        )

    def find_by_partial_code(
        self, db: Session, code: str
    ) -> Optional[models.Attendee]:
        """First active attendee whose qr code or barcode contains the code."""
        needle = code.lower()
        return (
            self.active(db)
            .filter(
                or_(
                    func.lower(self.model.qr_code).contains(needle, autoescape=True),
                    func.lower(self.model.barcode).contains(needle, autoescape=True),
                )
            )
            .first()
        )


attendee = CRUDAttendees(models.Attendee)
