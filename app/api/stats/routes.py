from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.stats import crud, schemas
from app.api.users.schemas import UserRole
from app.core.database import get_db
from app.core.security import TokenData, get_current_active_user, require_roles

router = APIRouter()


@router.get('/dashboard', response_model=schemas.DashboardStats)
def get_dashboard(
    current_user: TokenData = Depends(require_roles(UserRole.OWNER)),
    db: Session = Depends(get_db),
):
    return crud.get_dashboard(db=db)


# Polled by the public attendance screen
@router.get('/live', response_model=schemas.LiveCounter)
def get_live_counter(
    current_user: TokenData = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return crud.get_live_counter(db=db)
