from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.users import schemas
from app.api.users.crud import user as user_crud
from app.core.database import get_db
from app.core.logger import logger
from app.core.security import TokenData, get_current_active_user, require_roles

router = APIRouter()

owner_only = require_roles(schemas.UserRole.OWNER)


@router.post('/login', response_model=schemas.LoginResponse)
def login(
    data: schemas.LoginRequest,
    db: Session = Depends(get_db),
):
    logger.info('Login attempt: %s', data.email)
    user = user_crud.login(db=db, email=data.email, password=data.password)
    token = user.get_authorization()
    return schemas.LoginResponse(
        user=schemas.User.model_validate(user),
        access_token=token.access_token,
        token_type=token.token_type,
    )


@router.get('/me', response_model=schemas.User)
def get_me(
    current_user: TokenData = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return user_crud.get(db=db, id=current_user.user_id)


@router.get('/', response_model=list[schemas.User])
def get_users(
    current_user: TokenData = Depends(owner_only),
    db: Session = Depends(get_db),
):
    return user_crud.find(db=db, sort_by='created_at', sort_order='asc')


@router.post('/', response_model=schemas.User)
def create_user(
    user: schemas.UserCreate,
    current_user: TokenData = Depends(owner_only),
    db: Session = Depends(get_db),
):
    return user_crud.create(db=db, obj=user)


@router.put('/{user_id}', response_model=schemas.User)
def update_user(
    user_id: str,
    user: schemas.UserUpdate,
    current_user: TokenData = Depends(owner_only),
    db: Session = Depends(get_db),
):
    return user_crud.update(db=db, id=user_id, obj=user)


@router.delete('/{user_id}')
def delete_user(
    user_id: str,
    current_user: TokenData = Depends(owner_only),
    db: Session = Depends(get_db),
):
    user_crud.delete(db=db, id=user_id)
    return {'success': True}
