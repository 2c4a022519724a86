import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.attendees import schemas as attendee_schemas
from app.api.attendees.crud import attendee as attendee_crud
from app.api.users import schemas as user_schemas
from app.api.users.crud import user as user_crud
from app.core.config import Environment, settings
from app.core.database import Base, get_db
from main import app

TEST_PASSWORD = 'secret123'


@pytest.fixture(scope='session', autouse=True)
def check_test_environment():
    if settings.ENVIRONMENT != Environment.TEST:
        raise RuntimeError(
            f'Tests can only be executed in test environment. Current environment: {settings.ENVIRONMENT}'
        )


@pytest.fixture(scope='session')
def test_db_engine():
    engine = create_engine(
        settings.SQLALCHEMY_TEST_DATABASE_URL,
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope='function')
def db_session(test_db_engine):
    """Create a fresh database session for each test"""
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_db_engine
    )

    # Drop and recreate all tables before each test
    Base.metadata.drop_all(bind=test_db_engine)
    Base.metadata.create_all(bind=test_db_engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope='function')
def client(db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def get_auth_headers_for_user(user) -> dict:
    """Generate auth headers for a stored user"""
    token = user.get_authorization()
    return {'Authorization': f'Bearer {token.access_token}'}


@pytest.fixture(scope='function')
def create_test_user(db_session):
    """Factory fixture to create test users"""

    def _create_user(role: str, email: str = None, password: str = TEST_PASSWORD):
        return user_crud.create(
            db_session,
            user_schemas.UserCreate(
                email=email or f'{role}@example.com',
                full_name=f'Test {role}',
                role=role,
                password=password,
            ),
        )

    yield _create_user


@pytest.fixture(scope='function')
def test_owner(create_test_user):
    return create_test_user('owner')


@pytest.fixture(scope='function')
def test_data_entry(create_test_user):
    return create_test_user('data_entry')


@pytest.fixture(scope='function')
def test_organizer(create_test_user):
    return create_test_user('organizer')


@pytest.fixture(scope='function')
def owner_headers(test_owner):
    return get_auth_headers_for_user(test_owner)


@pytest.fixture(scope='function')
def data_entry_headers(test_data_entry):
    return get_auth_headers_for_user(test_data_entry)


@pytest.fixture(scope='function')
def organizer_headers(test_organizer):
    return get_auth_headers_for_user(test_organizer)


@pytest.fixture(scope='function')
def create_test_attendee(db_session, test_owner):
    """Factory fixture to register attendees straight through the store"""
    counter = {'n': 0}

    def _create_attendee(**overrides):
        counter['n'] += 1
        data = {
            'full_name': f'Attendee Number {counter["n"]}',
            'phone_primary': f'0100000{counter["n"]:04d}',
            'seat_class': 'B',
            'status': 'registered',
            'payment_type': 'deposit',
            'payment_amount': 0,
            'created_by': test_owner.id,
        }
        data.update(overrides)
        return attendee_crud.create(
            db_session, attendee_schemas.InternalAttendeeCreate(**data)
        )

    yield _create_attendee


@pytest.fixture
def test_attendee(create_test_attendee):
    return create_test_attendee(
        full_name='Test Attendee',
        phone_primary='01012345678',
        qr_code='QR-TEST-123',
        barcode='BC123456',
    )
