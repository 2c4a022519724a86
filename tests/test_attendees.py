from datetime import timedelta

import pytest
from fastapi import status

from app.api.attendees.models import Attendee
from app.api.attendees.schemas import remaining_amount_for
from app.core.utils import current_time


def _registration(**overrides):
    data = {
        'full_name': 'Mona Adel Samir',
        'phone_primary': '01055512345',
        'governorate': 'Asyut',
        'seat_class': 'B',
        'status': 'registered',
        'payment_type': 'deposit',
        'payment_amount': 500,
    }
    data.update(overrides)
    return data


def test_register_attendee(client, data_entry_headers, test_data_entry):
    response = client.post(
        '/attendees/', json=_registration(), headers=data_entry_headers
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data['remaining_amount'] == 1200
    assert data['is_deleted'] is False
    assert data['attendance_status'] is False
    assert data['checked_in_at'] is None
    assert data['created_by'] == test_data_entry.id
    assert data['qr_code'] == data['id']
    assert data['barcode'] == data['id'][:8]


def test_register_keeps_given_codes(client, data_entry_headers):
    response = client.post(
        '/attendees/',
        json=_registration(id='fixed-id', qr_code='QR-1', barcode='BC-1'),
        headers=data_entry_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data['id'] == 'fixed-id'
    assert data['qr_code'] == 'QR-1'
    assert data['barcode'] == 'BC-1'


def test_organizer_cannot_register(client, organizer_headers):
    response = client.post(
        '/attendees/', json=_registration(), headers=organizer_headers
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_register_rejects_negative_payment(client, data_entry_headers):
    response = client.post(
        '/attendees/',
        json=_registration(payment_amount=-1),
        headers=data_entry_headers,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_register_rejects_unknown_governorate(client, data_entry_headers):
    response = client.post(
        '/attendees/',
        json=_registration(governorate='Cairo'),
        headers=data_entry_headers,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.parametrize(
    'seat_class,payment_type,payment_amount,expected',
    [
        ('A', 'deposit', 500, 1500),
        ('B', 'deposit', 500, 1200),
        ('C', 'deposit', 2000, 0),
        ('C', 'full', 0, 0),
    ],
)
def test_remaining_amount_for(seat_class, payment_type, payment_amount, expected):
    assert remaining_amount_for(seat_class, payment_type, payment_amount) == expected


def test_interested_attendee_has_paid_nothing(client, data_entry_headers):
    response = client.post(
        '/attendees/',
        json=_registration(status='interested', payment_type='full', payment_amount=900),
        headers=data_entry_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data['payment_amount'] == 0
    assert data['payment_type'] == 'deposit'
    assert data['remaining_amount'] == 1700


def test_update_recomputes_remaining_amount(client, data_entry_headers, test_attendee):
    url = f'/attendees/{test_attendee.id}'

    response = client.put(url, json={'payment_amount': 500}, headers=data_entry_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()['remaining_amount'] == 1200

    response = client.put(url, json={'payment_type': 'full'}, headers=data_entry_headers)
    assert response.json()['remaining_amount'] == 0
    assert response.json()['payment_amount'] == 500

    response = client.put(
        url,
        json={'payment_type': 'deposit', 'seat_class': 'A'},
        headers=data_entry_headers,
    )
    assert response.json()['remaining_amount'] == 1500

    response = client.put(url, json={'status': 'interested'}, headers=data_entry_headers)
    assert response.json()['payment_amount'] == 0
    assert response.json()['remaining_amount'] == 2000


def test_update_ignores_attendance_and_trash_fields(
    client, data_entry_headers, test_attendee
):
    response = client.put(
        f'/attendees/{test_attendee.id}',
        json={'full_name': 'New Name', 'attendance_status': True, 'is_deleted': True},
        headers=data_entry_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data['full_name'] == 'New Name'
    assert data['attendance_status'] is False
    assert data['is_deleted'] is False


def test_update_not_found(client, data_entry_headers):
    response = client.put(
        '/attendees/missing', json={'full_name': 'X'}, headers=data_entry_headers
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_duplicate_name_is_rejected(client, data_entry_headers, test_attendee):
    response = client.post(
        '/attendees/',
        json=_registration(full_name='  test ATTENDEE '),
        headers=data_entry_headers,
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert (
        response.json()['detail'] == 'An attendee with this name is already registered'
    )


def test_duplicate_phone_is_rejected(client, data_entry_headers, test_attendee):
    response = client.post(
        '/attendees/',
        json=_registration(phone_primary=test_attendee.phone_primary),
        headers=data_entry_headers,
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert (
        response.json()['detail']
        == 'An attendee with this phone number is already registered'
    )


def test_trashed_attendee_does_not_block_registration(
    client, data_entry_headers, test_attendee
):
    client.delete(f'/attendees/{test_attendee.id}', headers=data_entry_headers)

    response = client.post(
        '/attendees/',
        json=_registration(
            full_name=test_attendee.full_name,
            phone_primary=test_attendee.phone_primary,
        ),
        headers=data_entry_headers,
    )
    assert response.status_code == status.HTTP_200_OK


def test_edit_skips_duplicate_guard(
    client, data_entry_headers, create_test_attendee
):
    first = create_test_attendee(full_name='First Person')
    second = create_test_attendee(full_name='Second Person')

    response = client.put(
        f'/attendees/{second.id}',
        json={'phone_primary': first.phone_primary},
        headers=data_entry_headers,
    )
    assert response.status_code == status.HTTP_200_OK


def test_soft_delete_and_restore(client, data_entry_headers, test_attendee):
    url = f'/attendees/{test_attendee.id}'
    before = client.get(url, headers=data_entry_headers).json()

    response = client.delete(url, headers=data_entry_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {'success': True}

    trashed = client.get(url, headers=data_entry_headers).json()
    assert trashed['is_deleted'] is True

    response = client.patch(f'{url}/restore', headers=data_entry_headers)
    assert response.status_code == status.HTTP_200_OK

    after = client.get(url, headers=data_entry_headers).json()
    assert after == before


def test_active_and_trash_partition(client, data_entry_headers, create_test_attendee):
    attendees = [create_test_attendee() for _ in range(4)]
    client.delete(f'/attendees/{attendees[1].id}', headers=data_entry_headers)
    client.delete(f'/attendees/{attendees[3].id}', headers=data_entry_headers)

    active = client.get('/attendees/', headers=data_entry_headers).json()
    trash = client.get(
        '/attendees/', params={'scope': 'trash'}, headers=data_entry_headers
    ).json()

    active_ids = {a['id'] for a in active}
    trash_ids = {a['id'] for a in trash}
    assert active_ids == {attendees[0].id, attendees[2].id}
    assert trash_ids == {attendees[1].id, attendees[3].id}
    assert not active_ids & trash_ids


def test_list_is_newest_first(
    client, organizer_headers, create_test_attendee, db_session
):
    first = create_test_attendee()
    second = create_test_attendee()
    third = create_test_attendee()
    base = current_time()
    for offset, attendee in enumerate([first, second, third]):
        attendee.created_at = base + timedelta(minutes=offset)
    db_session.commit()

    response = client.get('/attendees/', headers=organizer_headers)
    assert response.status_code == status.HTTP_200_OK
    assert [a['id'] for a in response.json()] == [third.id, second.id, first.id]


def test_list_filters(client, organizer_headers, create_test_attendee):
    create_test_attendee(full_name='Ahmed Minya', governorate='Minya', seat_class='A')
    create_test_attendee(full_name='Sara Sohag', governorate='Sohag', seat_class='C')
    create_test_attendee(
        full_name='Omar Qena', governorate='Qena', seat_class='C', payment_type='full'
    )

    def names(**params):
        response = client.get('/attendees/', params=params, headers=organizer_headers)
        assert response.status_code == status.HTTP_200_OK
        return sorted(a['full_name'] for a in response.json())

    assert names(governorate='Sohag') == ['Sara Sohag']
    assert names(seat_class='C') == ['Omar Qena', 'Sara Sohag']
    assert names(payment_type='full') == ['Omar Qena']
    assert names(search='ahmed') == ['Ahmed Minya']
    assert names(attendance='present') == []
    assert len(names(attendance='absent')) == 3


def test_search_by_phone(client, organizer_headers, test_attendee):
    response = client.get(
        '/attendees/', params={'search': '2345678'}, headers=organizer_headers
    )
    assert [a['id'] for a in response.json()] == [test_attendee.id]


def test_get_attendee_not_found(client, organizer_headers):
    response = client.get('/attendees/missing', headers=organizer_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()['detail'] == 'Attendee not found'


def test_permanent_delete(client, owner_headers, test_attendee, db_session):
    url = f'/attendees/{test_attendee.id}'
    client.delete(url, headers=owner_headers)

    response = client.delete(f'{url}/permanent', headers=owner_headers)
    assert response.status_code == status.HTTP_200_OK
    assert db_session.query(Attendee).filter_by(id=test_attendee.id).first() is None

    assert client.get(url, headers=owner_headers).status_code == 404
    assert client.patch(f'{url}/restore', headers=owner_headers).status_code == 404
    assert client.delete(f'{url}/permanent', headers=owner_headers).status_code == 404


def test_permanent_delete_requires_owner(client, data_entry_headers, test_attendee):
    response = client.delete(
        f'/attendees/{test_attendee.id}/permanent', headers=data_entry_headers
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_soft_delete_not_found(client, data_entry_headers):
    response = client.delete('/attendees/missing', headers=data_entry_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_attendee_qr_image(client, organizer_headers, test_attendee):
    response = client.get(f'/attendees/{test_attendee.id}/qr', headers=organizer_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.headers['content-type'] == 'image/png'
    assert response.content.startswith(b'\x89PNG')


def test_update_clears_blank_optional_fields(client, data_entry_headers, test_attendee):
    response = client.put(
        f'/attendees/{test_attendee.id}',
        json={
            'phone_secondary': '   ',
            'facebook_link': '',
            'qr_code': ' ',
            'barcode': '',
        },
        headers=data_entry_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data['phone_secondary'] is None
    assert data['facebook_link'] is None
    assert data['qr_code'] is None
    assert data['barcode'] is None


def test_update_trims_codes(client, data_entry_headers, test_attendee):
    response = client.put(
        f'/attendees/{test_attendee.id}',
        json={'qr_code': '  QR-NEW-1 '},
        headers=data_entry_headers,
    )
    assert response.json()['qr_code'] == 'QR-NEW-1'
