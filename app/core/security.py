from datetime import timedelta
from typing import Callable, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.users.schemas import UserRole
from app.core.config import settings
from app.core.database import get_db
from app.core.logger import logger
from app.core.utils import current_time


class Token(BaseModel):
    access_token: str
    token_type: str


class TokenData(BaseModel):
    user_id: str
    email: str
    role: UserRole


ALGORITHM = 'HS256'

oauth2_scheme = OAuth2PasswordBearer(tokenUrl='users/login')

pwd_context = CryptContext(schemes=['pbkdf2_sha256'], deprecated='auto')


def hash_password(password: str) -> str:
    return pwd_context.hash(password.strip())


def verify_password(password: str, hashed_password: str) -> bool:
    if not password or not hashed_password:
        return False
    return pwd_context.verify(password.strip(), hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({'exp': current_time() + expires_delta})

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


async def get_current_user(token: str = Depends(oauth2_scheme)) -> TokenData:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail='Could not validate credentials',
        headers={'WWW-Authenticate': 'Bearer'},
    )

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.error('Token has expired')
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail='Token has expired',
            headers={'WWW-Authenticate': 'Bearer'},
        )
    except JWTError as e:
        logger.error('Error decoding token: %s', str(e))
        raise credentials_exception

    user_id = payload.get('user_id')
    email = payload.get('email')
    role = payload.get('role')
    if user_id is None or email is None or role not in UserRole.values():
        logger.error('Invalid token payload: %s', payload)
        raise credentials_exception

    return TokenData(user_id=user_id, email=email, role=role)


def require_roles(*roles: UserRole) -> Callable:
    """Dependency factory restricting an endpoint to the given roles.

    The account is looked up again on every request, so a deleted or
    demoted user loses access before the token expires. Without roles any
    existing account is let through.
    """
    allowed = roles or tuple(UserRole)

    async def _check(
        current_user: TokenData = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> TokenData:
        from app.api.users.models import User

        user = db.query(User).filter(User.id == current_user.user_id).first()
        if not user:
            logger.error('User %s from token no longer exists', current_user.user_id)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail='Could not validate credentials',
                headers={'WWW-Authenticate': 'Bearer'},
            )

        current_user = TokenData(user_id=user.id, email=user.email, role=user.role)
        if current_user.role not in allowed:
            logger.error(
                'User %s with role %s is not allowed here',
                current_user.user_id,
                current_user.role.value,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail='Not enough permissions',
            )
        return current_user

    return _check


get_current_active_user = require_roles()
