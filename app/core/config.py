import os
from enum import Enum

from dotenv import load_dotenv

load_dotenv()


class Environment(str, Enum):
    TEST = 'test'
    PRODUCTION = 'production'
    DEVELOP = 'develop'


class Settings:
    ENVIRONMENT: Environment = Environment(os.getenv('ENVIRONMENT') or Environment.TEST)
    DB_USERNAME: str = os.getenv('DB_USERNAME')
    DB_PASSWORD: str = os.getenv('DB_PASSWORD')
    DB_HOST: str = os.getenv('DB_HOST')
    DB_PORT: str = os.getenv('DB_PORT')
    DB_NAME: str = os.getenv('DB_NAME')

    SQLALCHEMY_TEST_DATABASE_URL = 'sqlite:///:memory:'
    DATABASE_URL: str = (
        f'postgresql://{DB_USERNAME}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}'
        if ENVIRONMENT != Environment.TEST
        else SQLALCHEMY_TEST_DATABASE_URL
    )

    SECRET_KEY: str = os.getenv('SECRET_KEY', 'test-secret-key')
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
        os.getenv('ACCESS_TOKEN_EXPIRE_MINUTES') or 12 * 60
    )

    # Used when a user is created without a password
    DEFAULT_USER_PASSWORD: str = os.getenv('DEFAULT_USER_PASSWORD', '123456')

    OWNER_EMAIL: str = os.getenv('OWNER_EMAIL', 'admin@event.com')
    OWNER_PASSWORD: str = os.getenv('OWNER_PASSWORD', 'admin123')
    OWNER_FULL_NAME: str = os.getenv('OWNER_FULL_NAME', 'System Owner')

    API_URL: str = os.getenv('API_URL', 'http://localhost:8000')
    CLIENT_STATE_PATH: str = os.getenv('CLIENT_STATE_PATH', '.event_client_state.json')
    CLIENT_TIMEOUT_SECONDS: float = float(os.getenv('CLIENT_TIMEOUT_SECONDS') or 10)


settings = Settings()
