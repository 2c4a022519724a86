from sqlalchemy import Column, DateTime, String, event

from app.core.database import Base
from app.core.security import Token, create_access_token
from app.core.utils import current_time, new_id, normalize_email


class User(Base):
    __tablename__ = 'users'

    id = Column(String, primary_key=True, default=new_id, index=True)
    email = Column(String, nullable=False, unique=True, index=True)
    full_name = Column(String)
    role = Column(String, nullable=False)
    password = Column(String, nullable=False)

    created_at = Column(DateTime, default=current_time)
    updated_at = Column(DateTime, default=current_time, onupdate=current_time)

    def get_authorization(self) -> Token:
        data = {'user_id': self.id, 'email': self.email, 'role': self.role}
        return Token(
            access_token=create_access_token(data=data),
            token_type='Bearer',
        )


@event.listens_for(User, 'before_insert')
@event.listens_for(User, 'before_update')
def clean_email(mapper, connection, target):
    if target.email:
        target.email = normalize_email(target.email)
