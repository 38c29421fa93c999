import pytest

from kubetype.clients.errors import APIConflictError, InvalidArgumentError
from kubetype.clients.updating import update_obj
from kubetype.structs import objects
from kubetype.structs.references import NamespaceName


async def test_updating_replaces_the_object(fake_api, context, settings, resource, namespace):
    path = resource.get_url(namespace=namespace, name='name1')
    fake_api.add_json('put', path, {
        'metadata': {'name': 'name1', 'namespace': namespace, 'resourceVersion': '124'},
        'spec': {'field': 'new'},
    })

    obj = resource.new('name1', namespace=namespace, spec={'field': 'new'})
    obj.metadata.resource_version = '123'
    updated = await update_obj(resource=resource, obj=obj, settings=settings, context=context)

    assert updated.resource_version == '124'
    assert fake_api.requests[0].method == 'PUT'
    assert fake_api.requests[0].path == path
    assert fake_api.requests[0].data['metadata']['resourceVersion'] == '123'
    assert fake_api.requests[0].data['spec'] == {'field': 'new'}


async def test_updating_stamps_the_kind(fake_api, context, settings, pods):
    fake_api.add_json('put', '/api/v1/namespaces/ns1/pods/p1', {'metadata': {'name': 'p1'}})
    pod = objects.Pod(kind='Wrong', metadata=objects.ObjectMeta(name='p1', namespace='ns1'))
    await update_obj(resource=pods, obj=pod, settings=settings, context=context)
    assert fake_api.requests[0].data['kind'] == 'Pod'
    assert fake_api.requests[0].data['apiVersion'] == 'v1'


async def test_updating_in_another_namespace(fake_api, context, settings, pods):
    fake_api.add_json('put', '/api/v1/namespaces/ns2/pods/p1', {'metadata': {'name': 'p1'}})
    pod = objects.Pod(metadata=objects.ObjectMeta(name='p1', namespace='ns1'))
    await update_obj(resource=pods, namespace=NamespaceName('ns2'), obj=pod,
                     settings=settings, context=context)
    assert fake_api.requests[0].path == '/api/v1/namespaces/ns2/pods/p1'


async def test_updating_without_a_name(fake_api, context, settings, pods):
    pod = objects.Pod(metadata=objects.ObjectMeta(namespace='ns1'))
    with pytest.raises(InvalidArgumentError) as err:
        await update_obj(resource=pods, obj=pod, settings=settings, context=context)
    assert str(err.value) == 'failed to update Pod: A name is required to update Pod.'
    assert fake_api.requests == []


async def test_updating_without_a_namespace(fake_api, context, settings, pods):
    pod = objects.Pod(metadata=objects.ObjectMeta(name='p1'))
    with pytest.raises(InvalidArgumentError):
        await update_obj(resource=pods, obj=pod, settings=settings, context=context)
    assert fake_api.requests == []


async def test_updating_outdated_objects(fake_api, context, settings, pods):
    fake_api.add_json('put', '/api/v1/namespaces/ns1/pods/p1', {
        'kind': 'Status', 'code': 409, 'reason': 'Conflict',
        'message': 'the object has been modified',
    }, status=409)
    pod = pods.new('p1', namespace=NamespaceName('ns1'))
    with pytest.raises(APIConflictError) as err:
        await update_obj(resource=pods, obj=pod, settings=settings, context=context)
    assert err.value.operation == 'update'
    assert err.value.kind == 'Pod'
