from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.api.attendees import schemas
from app.api.attendees.crud import attendee as attendee_crud
from app.api.attendees.qr import generate_qr_png
from app.api.check_in.crud import check_in as check_in_crud
from app.api.users.schemas import UserRole
from app.core.database import get_db
from app.core.logger import logger
from app.core.security import TokenData, get_current_active_user, require_roles

router = APIRouter()

editors = require_roles(UserRole.OWNER, UserRole.DATA_ENTRY)
owner_only = require_roles(UserRole.OWNER)


@router.get('/', response_model=list[schemas.Attendee])
def get_attendees(
    scope: schemas.AttendeeScope = Query(default=schemas.AttendeeScope.ACTIVE),
    filters: schemas.AttendeeFilter = Depends(),
    current_user: TokenData = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return attendee_crud.list(db=db, scope=scope, filters=filters)


# Deleted attendees stay reachable here for ID cards and scanner lookups
@router.get('/{attendee_id}', response_model=schemas.Attendee)
def get_attendee(
    attendee_id: str,
    current_user: TokenData = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return attendee_crud.get(db=db, id=attendee_id)


@router.get('/{attendee_id}/qr')
def get_attendee_qr(
    attendee_id: str,
    current_user: TokenData = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    attendee = attendee_crud.get(db=db, id=attendee_id)
    png = generate_qr_png(attendee.qr_code or attendee.id)
    return Response(content=png, media_type='image/png')


@router.post('/', response_model=schemas.Attendee)
def create_attendee(
    attendee: schemas.AttendeeCreate,
    current_user: TokenData = Depends(editors),
    db: Session = Depends(get_db),
):
    logger.info('Registering attendee %s', attendee.full_name)
    obj = schemas.InternalAttendeeCreate(
        **attendee.model_dump(), created_by=current_user.user_id
    )
    return attendee_crud.create(db=db, obj=obj)


@router.put('/{attendee_id}', response_model=schemas.Attendee)
def update_attendee(
    attendee_id: str,
    attendee: schemas.AttendeeUpdate,
    current_user: TokenData = Depends(editors),
    db: Session = Depends(get_db),
):
    return attendee_crud.update(db=db, id=attendee_id, obj=attendee)


@router.delete('/{attendee_id}')
def soft_delete_attendee(
    attendee_id: str,
    current_user: TokenData = Depends(editors),
    db: Session = Depends(get_db),
):
    attendee_crud.soft_delete(db=db, id=attendee_id)
    return {'success': True}


@router.patch('/{attendee_id}/restore')
def restore_attendee(
    attendee_id: str,
    current_user: TokenData = Depends(editors),
    db: Session = Depends(get_db),
):
    attendee_crud.restore(db=db, id=attendee_id)
    return {'success': True}


@router.delete('/{attendee_id}/permanent')
def permanently_delete_attendee(
    attendee_id: str,
    current_user: TokenData = Depends(owner_only),
    db: Session = Depends(get_db),
):
    attendee_crud.permanently_delete(db=db, id=attendee_id)
    return {'success': True}


@router.patch('/{attendee_id}/toggle-attendance', response_model=schemas.Attendee)
def toggle_attendance(
    attendee_id: str,
    current_user: TokenData = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return check_in_crud.toggle_attendance(db=db, attendee_id=attendee_id)
