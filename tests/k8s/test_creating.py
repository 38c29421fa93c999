import pytest

from kubetype.clients.creating import create_obj
from kubetype.clients.errors import APIConflictError, InvalidArgumentError
from kubetype.structs import objects, resources
from kubetype.structs.references import NamespaceName


async def test_creation_stamps_and_sends_the_object(fake_api, context, settings, resource, namespace):
    path = resource.get_url(namespace=namespace)
    fake_api.add_json('post', path, {
        'kind': 'KopfExample', 'apiVersion': 'kopf.dev/v1',
        'metadata': {'name': 'name1', 'namespace': namespace, 'uid': 'uid1'},
    }, status=201)

    obj = objects.SpecifiedObject(kind='Wrong', api_version='wrong/v0',
                                  metadata=objects.ObjectMeta(name='name1'),
                                  spec={'field': 'value'})
    created = await create_obj(resource=resource, namespace=namespace, obj=obj,
                               settings=settings, context=context)

    assert created.metadata.uid == 'uid1'
    assert obj.kind == 'KopfExample'
    assert obj.api_version == 'kopf.dev/v1'
    assert obj.metadata.namespace == namespace
    assert fake_api.requests[0].method == 'POST'
    assert fake_api.requests[0].path == path
    assert fake_api.requests[0].data['kind'] == 'KopfExample'
    assert fake_api.requests[0].data['apiVersion'] == 'kopf.dev/v1'
    assert fake_api.requests[0].data['spec'] == {'field': 'value'}


async def test_creation_uses_the_objects_namespace(fake_api, context, settings, pods):
    fake_api.add_json('post', '/api/v1/namespaces/ns2/pods', {'metadata': {'name': 'p1'}})
    pod = objects.Pod(metadata=objects.ObjectMeta(name='p1', namespace='ns2'))
    await create_obj(resource=pods, obj=pod, settings=settings, context=context)
    assert fake_api.requests[0].path == '/api/v1/namespaces/ns2/pods'


async def test_creation_overrides_the_objects_namespace(fake_api, context, settings, pods):
    fake_api.add_json('post', '/api/v1/namespaces/ns1/pods', {'metadata': {'name': 'p1'}})
    pod = objects.Pod(metadata=objects.ObjectMeta(name='p1', namespace='ns2'))
    await create_obj(resource=pods, namespace=NamespaceName('ns1'), obj=pod,
                     settings=settings, context=context)
    assert fake_api.requests[0].path == '/api/v1/namespaces/ns1/pods'
    assert fake_api.requests[0].data['metadata']['namespace'] == 'ns1'


async def test_creation_without_namespace(fake_api, context, settings, pods):
    pod = objects.Pod(metadata=objects.ObjectMeta(name='p1'))
    with pytest.raises(InvalidArgumentError) as err:
        await create_obj(resource=pods, obj=pod, settings=settings, context=context)
    assert str(err.value) == 'failed to create Pod: A namespace is required for Pod.'
    assert fake_api.requests == []


async def test_creation_of_cluster_objects_ignores_namespaces(fake_api, context, settings):
    fake_api.add_json('post', '/api/v1/nodes', {'metadata': {'name': 'n1'}})
    node = resources.NODES.new('n1')
    await create_obj(resource=resources.NODES, namespace=NamespaceName('ns1'), obj=node,
                     settings=settings, context=context)
    assert fake_api.requests[0].path == '/api/v1/nodes'
    assert 'namespace' not in fake_api.requests[0].data['metadata']


async def test_creation_conflicts(fake_api, context, settings, pods):
    fake_api.add_json('post', '/api/v1/namespaces/ns1/pods', {
        'kind': 'Status', 'code': 409, 'reason': 'AlreadyExists',
        'message': 'pods "p1" already exists',
    }, status=409)
    pod = pods.new('p1', namespace=NamespaceName('ns1'))
    with pytest.raises(APIConflictError) as err:
        await create_obj(resource=pods, obj=pod, settings=settings, context=context)
    assert err.value.reason == 'AlreadyExists'
    assert str(err.value) == 'failed to create Pod: pods "p1" already exists'


async def test_creation_is_logged_with_references(fake_api, context, settings, pods, caplog):
    fake_api.add_json('post', '/api/v1/namespaces/ns1/pods', {'metadata': {'name': 'p1'}})
    pod = pods.new('p1', namespace=NamespaceName('ns1'))
    await create_obj(resource=pods, obj=pod, settings=settings, context=context)

    records = [record for record in caplog.records if record.getMessage() == 'Creating Pod.']
    assert len(records) == 1
    assert records[0].k8s_ref == {'apiVersion': 'v1', 'kind': 'Pod',
                                  'name': 'p1', 'namespace': 'ns1'}
