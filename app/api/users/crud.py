from typing import Optional

from sqlalchemy.orm import Session

from app.api.base_crud import CRUDBase
from app.api.users import models, schemas
from app.core.config import settings
from app.core.exceptions.api_exceptions import (
    AlreadyExists,
    InvalidCredentials,
    LastOwner,
)
from app.core.logger import logger
from app.core.security import hash_password, verify_password
from app.core.utils import new_id, normalize_email


class CRUDUser(CRUDBase[models.User, schemas.UserCreate, schemas.UserUpdate]):
    def get_by_email(self, db: Session, email: str) -> Optional[models.User]:
        return (
            db.query(self.model)
            .filter(self.model.email == normalize_email(email))
            .first()
        )

    def count_owners(self, db: Session) -> int:
        return (
            db.query(self.model)
            .filter(self.model.role == schemas.UserRole.OWNER.value)
            .count()
        )

    def _is_last_owner(self, db: Session, user: models.User) -> bool:
        return user.role == schemas.UserRole.OWNER and self.count_owners(db) <= 1

    def create(self, db: Session, obj: schemas.UserCreate) -> models.User:
        if self.get_by_email(db, obj.email):
            logger.error('User with email %s already exists', obj.email)
            raise AlreadyExists('User', 'email')

        password = obj.password if obj.password else settings.DEFAULT_USER_PASSWORD
        user = models.User(
            id=obj.id or new_id(),
            email=obj.email,
            full_name=obj.full_name,
            role=obj.role.value,
            password=hash_password(password),
        )
        db.add(user)
        user = self._commit(db, user)
        logger.info('User %s created with role %s', user.email, user.role)
        return user

    def update(
        self, db: Session, id: str, obj: schemas.UserUpdate
    ) -> models.User:
        user = self.get(db, id)
        data = obj.model_dump(exclude_unset=True)

        new_email = data.get('email')
        if new_email and new_email != user.email:
            if self.get_by_email(db, new_email):
                raise AlreadyExists('User', 'email')

        new_role = data.get('role')
        if new_role and new_role != schemas.UserRole.OWNER:
            if self._is_last_owner(db, user):
                logger.error('Refusing to demote the last owner %s', user.id)
                raise LastOwner()

        for field, value in data.items():
            if value is None:
                continue
            if field == 'password':
                value = hash_password(value)
            elif field == 'role':
                value = value.value
            setattr(user, field, value)

        return self._commit(db, user)

    def delete(self, db: Session, id: str) -> models.User:
        user = self.get(db, id)
        if self._is_last_owner(db, user):
            logger.error('Refusing to delete the last owner %s', user.id)
            raise LastOwner()
        return super().delete(db, id)

    def login(self, db: Session, *, email: str, password: str) -> models.User:
        user = self.get_by_email(db, email)
        if not user or not verify_password(password, user.password):
            logger.error('Login failed for: %s', email)
            raise InvalidCredentials()
        return user

    def ensure_owner(self, db: Session) -> Optional[models.User]:
        """Seed the bootstrap owner account when no owner exists yet."""
        if self.count_owners(db) > 0:
            return None
        logger.info('No owner found, creating %s', settings.OWNER_EMAIL)
        return self.create(
            db,
            schemas.UserCreate(
                email=settings.OWNER_EMAIL,
                full_name=settings.OWNER_FULL_NAME,
                role=schemas.UserRole.OWNER,
                password=settings.OWNER_PASSWORD,
            ),
        )


user = CRUDUser(models.User)
