from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.check_in import schemas
from app.api.check_in.crud import check_in as check_in_crud
from app.api.users.schemas import UserRole
from app.core.database import get_db
from app.core.security import TokenData, require_roles

router = APIRouter()

scanners = require_roles(UserRole.OWNER, UserRole.ORGANIZER)


@router.post('/', response_model=schemas.CheckInResponse)
def new_check_in(
    check_in: schemas.NewCheckIn,
    current_user: TokenData = Depends(scanners),
    db: Session = Depends(get_db),
):
    return check_in_crud.check_in(
        db=db,
        code=check_in.code,
        operator_id=check_in.operator_id or current_user.user_id,
    )


@router.get('/logs', response_model=list[schemas.AttendanceLog])
def get_logs(
    filters: schemas.AttendanceLogFilter = Depends(),
    current_user: TokenData = Depends(scanners),
    db: Session = Depends(get_db),
):
    return check_in_crud.find_logs(db=db, filters=filters)
