from typing import Optional

from fastapi import HTTPException, status


class NotFound(HTTPException):
    def __init__(self, resource: str = 'Record'):
        super().__init__(status.HTTP_404_NOT_FOUND, f'{resource} not found', None)


class AttendeeNotFound(HTTPException):
    def __init__(self, code: Optional[str] = None):
        msg = 'Attendee not found'
        if code:
            msg = f'{msg} for code {code}'
        super().__init__(status.HTTP_404_NOT_FOUND, msg, None)


class DuplicateConflict(HTTPException):
    MESSAGES = {
        'full_name': 'An attendee with this name is already registered',
        'phone_primary': 'An attendee with this phone number is already registered',
    }

    def __init__(self, field: str):
        self.field = field
        msg = self.MESSAGES.get(field, f'Duplicate value for {field}')
        super().__init__(status.HTTP_409_CONFLICT, msg, None)


class AlreadyExists(HTTPException):
    def __init__(self, resource: str = 'User', key: str = 'email'):
        super().__init__(
            status.HTTP_409_CONFLICT, f'A {resource} with this {key} already exists', None
        )


class LastOwner(HTTPException):
    def __init__(self):
        super().__init__(
            status.HTTP_400_BAD_REQUEST,
            'Cannot remove the last owner',
            None,
        )


class InvalidCredentials(HTTPException):
    def __init__(self):
        super().__init__(
            status.HTTP_401_UNAUTHORIZED,
            'Invalid email or password',
            {'WWW-Authenticate': 'Bearer'},
        )
