from datetime import datetime, time, timedelta

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from clinic.models import Doctor, Patient, Specialty, User

ADDRESS = {
    'street': 'Rua das Flores',
    'neighborhood': 'Centro',
    'zip_code': '01001000',
    'city': 'Sao Paulo',
    'state': 'SP',
    'number': '10',
    'additional_details': '',
}

ADDRESS_PAYLOAD = {
    'street': 'Rua das Flores',
    'neighborhood': 'Centro',
    'zipCode': '01001000',
    'city': 'Sao Paulo',
    'state': 'sp',
}


def next_slot(days: int = 7, hour: int = 10, minute: int = 0) -> datetime:
    """Aware local datetime ``days`` ahead at ``hour:minute``, never on a Sunday."""
    day = timezone.localdate() + timedelta(days=days)
    if day.weekday() == 6:
        day += timedelta(days=1)
    return timezone.make_aware(datetime.combine(day, time(hour=hour, minute=minute)))


@pytest.fixture(autouse=True)
def _clear_cache():
    # doctor list pages and throttle counters live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def user(db):
    return User.objects.create_user(username='api', password='P@ssw0rd1')


@pytest.fixture
def auth_client(user):
    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f'Bearer {RefreshToken.for_user(user).access_token}')
    return c


@pytest.fixture
def anon_client():
    return APIClient()


@pytest.fixture
def make_doctor(db):
    seq = iter(range(1000, 10000))

    def _make(**kwargs):
        n = next(seq)
        data = {
            'name': f'Doctor {n}',
            'email': f'doctor{n}@voll.med',
            'crm': str(n),
            'telephone': '11999990000',
            'specialty': Specialty.CARDIOLOGY,
            **ADDRESS,
        }
        data.update(kwargs)
        return Doctor.objects.create(**data)

    return _make


@pytest.fixture
def make_patient(db):
    seq = iter(range(10000000000, 10000010000))

    def _make(**kwargs):
        n = next(seq)
        data = {
            'name': f'Patient {n}',
            'email': f'patient{n}@example.com',
            'cpf': str(n),
            'telephone': '11988880000',
            **ADDRESS,
        }
        data.update(kwargs)
        return Patient.objects.create(**data)

    return _make
