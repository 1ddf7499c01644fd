"""
Doctor endpoints: registration, listing, partial update and
deactivation, plus the cached list staying consistent after writes.
"""
import pytest
from django.urls import reverse

from clinic.models import AuditEvent, Doctor
from clinic.services import doctors as doctor_service
from clinic.serializers.doctor import DoctorCreateSerializer
from clinic.tests.conftest import ADDRESS_PAYLOAD

pytestmark = pytest.mark.django_db


def doctor_payload(**overrides):
    data = {
        'name': 'Ana Souza',
        'email': 'ana@voll.med',
        'crm': '123456',
        'telephone': '11999990000',
        'specialty': 'ORTHOPEDICS',
        'address': dict(ADDRESS_PAYLOAD),
    }
    data.update(overrides)
    return data


def test_add_doctor(auth_client, user):
    r = auth_client.post(reverse('doctors'), doctor_payload(), format='json')
    assert r.status_code == 201
    body = r.data['data']
    assert body['id']
    assert body['active'] is True
    assert body['address']['zipCode'] == '01001000'
    assert body['address']['state'] == 'SP'
    assert AuditEvent.objects.filter(action='doctor_create', object_id=body['id'], user=user).exists()


def test_add_doctor_strips_markup(auth_client):
    r = auth_client.post(reverse('doctors'), doctor_payload(name='<b>Ana</b> Souza'), format='json')
    assert r.status_code == 201
    assert r.data['data']['name'] == 'Ana Souza'


@pytest.mark.parametrize('field,value', [
    ('name', '<b></b>'),
    ('name', '<b> </b>'),
    ('telephone', '<i></i>'),
])
def test_add_doctor_rejects_markup_only_text(auth_client, field, value):
    r = auth_client.post(reverse('doctors'), doctor_payload(**{field: value}), format='json')
    assert r.status_code == 400
    assert field in r.data['error']['message']
    assert not Doctor.objects.exists()



@pytest.mark.parametrize('field,value', [
    ('crm', '12'),
    ('crm', '12345a'),
    ('email', 'not-an-email'),
    ('specialty', 'NEUROLOGY'),
    ('name', ''),
])
def test_add_doctor_rejects_invalid_fields(auth_client, field, value):
    r = auth_client.post(reverse('doctors'), doctor_payload(**{field: value}), format='json')
    assert r.status_code == 400
    assert r.data['error']['code'] == 'api_error'
    assert field in r.data['error']['message']


def test_add_doctor_rejects_invalid_address(auth_client):
    address = dict(ADDRESS_PAYLOAD, zipCode='123')
    r = auth_client.post(reverse('doctors'), doctor_payload(address=address), format='json')
    assert r.status_code == 400
    assert 'address' in r.data['error']['message']


def test_add_doctor_rejects_duplicates(auth_client, make_doctor):
    make_doctor(email='ana@voll.med', crm='999999')
    r = auth_client.post(reverse('doctors'), doctor_payload(email='ANA@voll.med'), format='json')
    assert r.status_code == 400
    assert 'email' in r.data['error']['message']

    make_doctor(crm='123456')
    r = auth_client.post(reverse('doctors'), doctor_payload(email='other@voll.med'), format='json')
    assert r.status_code == 400
    assert 'crm' in r.data['error']['message']


def test_add_doctor_duplicate_past_validation_is_400(auth_client, make_doctor, monkeypatch):
    # two requests can both pass the uniqueness checks before either inserts
    monkeypatch.setattr(DoctorCreateSerializer, 'validate_crm', lambda self, v: v)
    make_doctor(crm='123456')
    r = auth_client.post(reverse('doctors'), doctor_payload(), format='json')
    assert r.status_code == 400
    assert r.data['error']['code'] == 'api_error'
    assert 'already exists' in r.data['error']['message'][0]
    assert Doctor.objects.filter(crm='123456').count() == 1



def test_list_doctors_only_active_sorted_by_name(auth_client, make_doctor):
    make_doctor(name='Carla')
    make_doctor(name='Ana')
    make_doctor(name='Bruno', active=False)
    r = auth_client.get(reverse('doctors'))
    assert r.status_code == 200
    assert [d['name'] for d in r.data['data']] == ['Ana', 'Carla']
    assert set(r.data['data'][0]) == {'id', 'name', 'email', 'crm', 'specialty'}
    assert r.data['pagination'] == {'total': 2, 'page': 1, 'pageSize': 10}


def test_list_doctors_paginates_and_caps_page_size(auth_client, make_doctor):
    for i in range(12):
        make_doctor(name=f'Doctor {i:02d}')
    r = auth_client.get(reverse('doctors'), {'page': 2})
    assert [d['name'] for d in r.data['data']] == ['Doctor 10', 'Doctor 11']
    assert r.data['pagination']['total'] == 12

    r = auth_client.get(reverse('doctors'), {'pageSize': 1000})
    assert r.data['pagination']['pageSize'] == 100
    assert len(r.data['data']) == 12


def test_list_doctors_rejects_bad_page(auth_client):
    assert auth_client.get(reverse('doctors'), {'page': 0}).status_code == 400


def test_doctor_list_cache_is_refreshed_after_writes(auth_client, make_doctor):
    doctor = make_doctor(name='Ana')
    assert len(auth_client.get(reverse('doctors')).data['data']) == 1

    auth_client.post(reverse('doctors'), doctor_payload(name='Bruno'), format='json')
    assert len(auth_client.get(reverse('doctors')).data['data']) == 2

    auth_client.patch(reverse('doctor_detail', args=[doctor.id]))
    names = [d['name'] for d in auth_client.get(reverse('doctors')).data['data']]
    assert names == ['Bruno']


def test_find_doctor(auth_client, make_doctor):
    doctor = make_doctor()
    r = auth_client.get(reverse('doctor_detail', args=[doctor.id]))
    assert r.status_code == 200
    assert r.data['data']['crm'] == doctor.crm
    assert r.data['data']['telephone'] == doctor.telephone


def test_find_unknown_doctor_is_404(auth_client):
    r = auth_client.get(reverse('doctor_detail', args=[999]))
    assert r.status_code == 404
    assert r.data['error']['message'] == 'No existing doctor with this id'


def test_update_doctor_is_partial(auth_client, make_doctor):
    doctor = make_doctor(name='Ana', telephone='111')
    r = auth_client.put(reverse('doctors'), {'id': doctor.id, 'telephone': '222'}, format='json')
    assert r.status_code == 200
    doctor.refresh_from_db()
    assert doctor.telephone == '222'
    assert doctor.name == 'Ana'
    assert doctor.city == 'Sao Paulo'


def test_update_doctor_rejects_markup_only_name(auth_client, make_doctor):
    doctor = make_doctor(name='Ana')
    r = auth_client.put(reverse('doctors'), {'id': doctor.id, 'name': '<script></script>'}, format='json')
    assert r.status_code == 400
    assert 'name' in r.data['error']['message']
    doctor.refresh_from_db()
    assert doctor.name == 'Ana'



def test_update_doctor_address(auth_client, make_doctor):
    doctor = make_doctor()
    address = dict(ADDRESS_PAYLOAD, city='Campinas', number='42')
    r = auth_client.put(reverse('doctors'), {'id': doctor.id, 'address': address}, format='json')
    assert r.status_code == 200
    assert r.data['data']['address']['city'] == 'Campinas'
    assert r.data['data']['address']['number'] == '42'


def test_update_doctor_ignores_immutable_fields(auth_client, make_doctor):
    doctor = make_doctor(crm='4321', specialty='CARDIOLOGY')
    auth_client.put(reverse('doctors'), {'id': doctor.id, 'crm': '9999', 'specialty': 'DERMATOLOGY'},
                    format='json')
    doctor.refresh_from_db()
    assert doctor.crm == '4321'
    assert doctor.specialty == 'CARDIOLOGY'


def test_update_unknown_doctor_is_404(auth_client):
    r = auth_client.put(reverse('doctors'), {'id': 999, 'name': 'X'}, format='json')
    assert r.status_code == 404


def test_deactivate_doctor(auth_client, make_doctor):
    doctor = make_doctor()
    r = auth_client.patch(reverse('doctor_detail', args=[doctor.id]))
    assert r.status_code == 200
    assert r.data['data']['active'] is False
    assert Doctor.objects.get(id=doctor.id).active is False


def test_deactivate_unknown_doctor_is_404(auth_client):
    assert auth_client.patch(reverse('doctor_detail', args=[999])).status_code == 404


def test_unexpected_error_uses_envelope(auth_client, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError('boom')

    monkeypatch.setattr('clinic.views.doctors.find_doctor_by_id', boom)
    r = auth_client.get(reverse('doctor_detail', args=[1]))
    assert r.status_code == 500
    assert r.data == {'ok': False, 'error': {'code': 'server_error', 'message': 'boom'}}


def test_service_find_doctors_returns_public_view(make_doctor):
    make_doctor(name='Ana')
    items, total = doctor_service.find_doctors(1, 10)
    assert total == 1
    assert 'telephone' not in items[0]
