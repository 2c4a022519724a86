"""Typed operations understood by :class:`app.client.transport.EventClient`.

Every API call is a pydantic model tagged by ``kind``. Each one knows how it
maps onto HTTP, so callers never build paths by hand.
"""

from typing import Annotated, Any, Dict, Literal, NamedTuple, Optional, Union

from pydantic import BaseModel, Field

from app.api.attendees.schemas import (
    AttendeeCreate,
    AttendeeFilter,
    AttendeeScope,
    AttendeeUpdate,
)
from app.api.users.schemas import UserCreate, UserUpdate


class HttpRequest(NamedTuple):
    method: str
    path: str
    params: Optional[Dict[str, Any]] = None
    json: Optional[Any] = None


class Login(BaseModel):
    kind: Literal['login'] = 'login'
    email: str
    password: str

    def to_request(self) -> HttpRequest:
        return HttpRequest(
            'POST', '/users/login', json={'email': self.email, 'password': self.password}
        )


class ListUsers(BaseModel):
    kind: Literal['list_users'] = 'list_users'

    def to_request(self) -> HttpRequest:
        return HttpRequest('GET', '/users/')


class CreateUser(BaseModel):
    kind: Literal['create_user'] = 'create_user'
    payload: UserCreate

    def to_request(self) -> HttpRequest:
        return HttpRequest(
            'POST', '/users/', json=self.payload.model_dump(mode='json', exclude_none=True)
        )


class UpdateUser(BaseModel):
    kind: Literal['update_user'] = 'update_user'
    user_id: str
    payload: UserUpdate

    def to_request(self) -> HttpRequest:
        return HttpRequest(
            'PUT',
            f'/users/{self.user_id}',
            json=self.payload.model_dump(mode='json', exclude_unset=True),
        )


class DeleteUser(BaseModel):
    kind: Literal['delete_user'] = 'delete_user'
    user_id: str

    def to_request(self) -> HttpRequest:
        return HttpRequest('DELETE', f'/users/{self.user_id}')


class ListAttendees(BaseModel):
    kind: Literal['list_attendees'] = 'list_attendees'
    scope: AttendeeScope = AttendeeScope.ACTIVE
    filters: Optional[AttendeeFilter] = None

    def to_request(self) -> HttpRequest:
        params = {'scope': self.scope.value}
        if self.filters:
            params.update(self.filters.model_dump(mode='json', exclude_none=True))
        return HttpRequest('GET', '/attendees/', params=params)


class GetAttendee(BaseModel):
    kind: Literal['get_attendee'] = 'get_attendee'
    attendee_id: str

    def to_request(self) -> HttpRequest:
        return HttpRequest('GET', f'/attendees/{self.attendee_id}')


class CreateAttendee(BaseModel):
    kind: Literal['create_attendee'] = 'create_attendee'
    payload: AttendeeCreate

    def to_request(self) -> HttpRequest:
        return HttpRequest(
            'POST',
            '/attendees/',
            json=self.payload.model_dump(mode='json', exclude_none=True),
        )


class UpdateAttendee(BaseModel):
    kind: Literal['update_attendee'] = 'update_attendee'
    attendee_id: str
    payload: AttendeeUpdate

    def to_request(self) -> HttpRequest:
        return HttpRequest(
            'PUT',
            f'/attendees/{self.attendee_id}',
            json=self.payload.model_dump(mode='json', exclude_unset=True),
        )


class SoftDeleteAttendee(BaseModel):
    kind: Literal['soft_delete_attendee'] = 'soft_delete_attendee'
    attendee_id: str

    def to_request(self) -> HttpRequest:
        return HttpRequest('DELETE', f'/attendees/{self.attendee_id}')


class RestoreAttendee(BaseModel):
    kind: Literal['restore_attendee'] = 'restore_attendee'
    attendee_id: str

    def to_request(self) -> HttpRequest:
        return HttpRequest('PATCH', f'/attendees/{self.attendee_id}/restore')


class PermanentlyDeleteAttendee(BaseModel):
    kind: Literal['permanently_delete_attendee'] = 'permanently_delete_attendee'
    attendee_id: str

    def to_request(self) -> HttpRequest:
        return HttpRequest('DELETE', f'/attendees/{self.attendee_id}/permanent')


class CheckIn(BaseModel):
    kind: Literal['check_in'] = 'check_in'
    code: str
    operator_id: Optional[str] = None

    def to_request(self) -> HttpRequest:
        body = {'code': self.code}
        if self.operator_id:
            body['operator_id'] = self.operator_id
        return HttpRequest('POST', '/check-in/', json=body)


class ToggleAttendance(BaseModel):
    kind: Literal['toggle_attendance'] = 'toggle_attendance'
    attendee_id: str

    def to_request(self) -> HttpRequest:
        return HttpRequest('PATCH', f'/attendees/{self.attendee_id}/toggle-attendance')


class GetDashboard(BaseModel):
    kind: Literal['get_dashboard'] = 'get_dashboard'

    def to_request(self) -> HttpRequest:
        return HttpRequest('GET', '/stats/dashboard')


class GetLiveCounter(BaseModel):
    kind: Literal['get_live_counter'] = 'get_live_counter'

    def to_request(self) -> HttpRequest:
        return HttpRequest('GET', '/stats/live')


Operation = Annotated[
    Union[
        Login,
        ListUsers,
        CreateUser,
        UpdateUser,
        DeleteUser,
        ListAttendees,
        GetAttendee,
        CreateAttendee,
        UpdateAttendee,
        SoftDeleteAttendee,
        RestoreAttendee,
        PermanentlyDeleteAttendee,
        CheckIn,
        ToggleAttendance,
        GetDashboard,
        GetLiveCounter,
    ],
    Field(discriminator='kind'),
]
