"""Health, metrics, API docs and the consultation updates socket."""
import pytest
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from clinic.models import User
from clinic.realtime.consumers import ConsultationUpdatesConsumer
from clinic.services.consultations import UPDATES_GROUP
from hospital_api.asgi import application


@pytest.mark.django_db
def test_healthz():
    r = APIClient().get('/healthz')
    assert r.status_code == 200
    assert r.json() == {'ok': True, 'db': True}


@pytest.mark.django_db
def test_metrics_is_public():
    r = APIClient().get('/metrics')
    assert r.status_code == 200
    assert b'django_http_requests' in r.content


@pytest.mark.django_db
def test_openapi_schema_lists_resources():
    r = APIClient().get('/swagger/?format=openapi')
    assert r.status_code == 200
    paths = list(r.json()['paths'])
    assert any(p.endswith('v1.0/doctors') for p in paths)
    assert any(p.endswith('v1.0/consultations/{id}') for p in paths)


def _with_user(app, user):
    async def wrapped(scope, receive, send):
        return await app({**scope, 'user': user}, receive, send)
    return wrapped


def test_anonymous_socket_is_closed():
    async def run():
        communicator = WebsocketCommunicator(
            _with_user(ConsultationUpdatesConsumer.as_asgi(), AnonymousUser()), '/ws/consultations/'
        )
        connected, code = await communicator.connect()
        return connected, code

    connected, code = async_to_sync(run)()
    assert connected is False
    assert code == 4003


@pytest.mark.django_db
def test_authenticated_socket_receives_events():
    async def run():
        communicator = WebsocketCommunicator(
            _with_user(ConsultationUpdatesConsumer.as_asgi(), User(username='ws')), '/ws/consultations/'
        )
        connected, _ = await communicator.connect()
        assert connected
        welcome = await communicator.receive_json_from()
        await get_channel_layer().group_send(UPDATES_GROUP, {
            'type': 'consultation.canceled', 'consultationId': 7, 'canceled': True,
        })
        event = await communicator.receive_json_from()
        await communicator.disconnect()
        return welcome, event

    welcome, event = async_to_sync(run)()
    assert welcome['type'] == 'welcome'
    assert event == {'type': 'consultation.canceled', 'consultationId': 7, 'canceled': True}


def _connect(path, headers=None):
    async def run():
        communicator = WebsocketCommunicator(application, path, headers=headers or [])
        connected, code = await communicator.connect()
        welcome = None
        if connected:
            welcome = await communicator.receive_json_from()
            await communicator.disconnect()
        return connected, code, welcome

    return async_to_sync(run)()


@pytest.mark.django_db(transaction=True)
def test_socket_accepts_bearer_header():
    user = User.objects.create_user(username='ws-header', password='P@ssw0rd1')
    token = str(RefreshToken.for_user(user).access_token)
    connected, _, welcome = _connect('/ws/consultations/', [(b'authorization', f'Bearer {token}'.encode())])
    assert connected is True
    assert welcome == {'type': 'welcome', 'message': 'connected'}


@pytest.mark.django_db(transaction=True)
def test_socket_accepts_token_query_param():
    user = User.objects.create_user(username='ws-query', password='P@ssw0rd1')
    token = str(RefreshToken.for_user(user).access_token)
    connected, _, welcome = _connect(f'/ws/consultations/?token={token}')
    assert connected is True
    assert welcome['type'] == 'welcome'


@pytest.mark.django_db(transaction=True)
@pytest.mark.parametrize('path,headers', [
    ('/ws/consultations/?token=not-a-jwt', None),
    ('/ws/consultations/', [(b'authorization', b'Bearer not-a-jwt')]),
    ('/ws/consultations/', None),
])
def test_socket_rejects_missing_or_invalid_token(path, headers):
    connected, code, _ = _connect(path, headers)
    assert connected is False
    assert code == 4003
