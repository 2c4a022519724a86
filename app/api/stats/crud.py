from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.api.attendees.crud import attendee as attendee_crud
from app.api.attendees.models import Attendee
from app.core.utils import percentage

from . import schemas


def _count_by(db: Session, column) -> List[schemas.CountItem]:
    rows = (
        attendee_crud.active(db)
        .with_entities(column, func.count(Attendee.id))
        .group_by(column)
        .order_by(column)
        .all()
    )
    return [schemas.CountItem(name=name, value=count) for name, count in rows]


def get_live_counter(db: Session) -> schemas.LiveCounter:
    total = attendee_crud.active(db).count()
    checked_in = (
        attendee_crud.active(db).filter(Attendee.attendance_status.is_(True)).count()
    )
    return schemas.LiveCounter(
        total=total,
        checked_in=checked_in,
        percentage=percentage(checked_in, total),
    )


def get_dashboard(db: Session) -> schemas.DashboardStats:
    counter = get_live_counter(db)
    collected, remaining = (
        attendee_crud.active(db)
        .with_entities(
            func.coalesce(func.sum(Attendee.payment_amount), 0),
            func.coalesce(func.sum(Attendee.remaining_amount), 0),
        )
        .one()
    )
    collection_rate = percentage(collected, collected + remaining) if collected else 0

    return schemas.DashboardStats(
        total_attendees=counter.total,
        checked_in=counter.checked_in,
        check_in_rate=counter.percentage,
        total_revenue=collected,
        remaining_revenue=remaining,
        collection_rate=collection_rate,
        by_seat_class=_count_by(db, Attendee.seat_class),
        by_governorate=_count_by(db, Attendee.governorate),
    )
