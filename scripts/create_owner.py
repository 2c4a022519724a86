from app.api.users.crud import user as user_crud
from app.core.config import settings
from app.core.database import SessionLocal, create_db


def main():
    create_db()
    with SessionLocal() as db:
        owner = user_crud.ensure_owner(db)
        if owner:
            print(f'Owner created: {owner.email}')
        else:
            print(f'An owner already exists. Sign in as {settings.OWNER_EMAIL} or another owner.')


if __name__ == '__main__':
    main()
