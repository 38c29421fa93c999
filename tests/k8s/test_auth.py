import base64
import dataclasses

import pytest

from kubetype.clients.api import execute
from kubetype.clients.auth import APIContext, connected, context_var, decode_to_pem
from kubetype.clients.errors import InvalidArgumentError
from kubetype.clients.fetching import read_obj
from kubetype.structs.credentials import ConnectionInfo


async def test_context_is_injected(fake_api, settings, pods):
    fake_api.add_json('get', '/api/v1/namespaces/ns1/pods/p1', {'metadata': {'name': 'p1'}})
    async with connected(ConnectionInfo(server=fake_api.url)) as context:
        assert context_var.get() is context
        pod = await read_obj(resource=pods, namespace='ns1', name='p1', settings=settings)
    assert pod.name == 'p1'
    assert context.session.closed
    with pytest.raises(LookupError):
        context_var.get()


async def test_explicit_context_wins(fake_api, context, settings):
    fake_api.add_json('get', '/api/v1/pods', {'kind': 'PodList'})
    async with connected(ConnectionInfo(server='http://localhost:1')):
        result = await execute('get', '/api/v1/pods', settings=settings, context=context)
    assert result == {'kind': 'PodList'}


async def test_context_is_required(settings):
    with pytest.raises(InvalidArgumentError):
        await execute('get', '/api/v1/pods', settings=settings)


async def test_login_is_used_when_no_info_is_given(fake_api, mocker):
    login = mocker.patch('kubetype.clients.login.login',
                         return_value=ConnectionInfo(server=fake_api.url, default_namespace='ns1'))
    async with connected() as context:
        assert context.server == fake_api.url
        assert context.default_namespace == 'ns1'
    assert login.call_count == 1


@pytest.mark.parametrize('info, expected', [
    (ConnectionInfo(server='', token='abc'), 'Bearer abc'),
    (ConnectionInfo(server='', scheme='Digest', token='abc'), 'Digest abc'),
    (ConnectionInfo(server='', scheme='Anonymous'), 'Anonymous'),
    (ConnectionInfo(server='', username='user', password='pass'),
     'Basic ' + base64.b64encode(b'user:pass').decode('ascii')),
])
async def test_authorization_headers(fake_api, settings, info, expected):
    fake_api.add_json('get', '/api/v1/pods', {})
    context = APIContext(dataclasses.replace(info, server=fake_api.url))
    try:
        await execute('get', '/api/v1/pods', settings=settings, context=context)
    finally:
        await context.close()
    assert fake_api.requests[0].headers['Authorization'] == expected


async def test_no_authorization_headers(fake_api, context, settings):
    fake_api.add_json('get', '/api/v1/pods', {})
    await execute('get', '/api/v1/pods', settings=settings, context=context)
    assert 'Authorization' not in fake_api.requests[0].headers


async def test_user_agent(fake_api, context, settings):
    fake_api.add_json('get', '/api/v1/pods', {})
    await execute('get', '/api/v1/pods', settings=settings, context=context)
    assert fake_api.requests[0].headers['User-Agent'].startswith('kubetype/')


PEM = '-----BEGIN CERTIFICATE-----\nMIIB\n-----END CERTIFICATE-----\n'


@pytest.mark.parametrize('data', [
    PEM,
    PEM.encode('ascii'),
    base64.b64encode(PEM.encode('ascii')).decode('ascii'),
    base64.b64encode(PEM.encode('ascii')),
])
def test_decoding_to_pem(data):
    assert decode_to_pem(data) == PEM
