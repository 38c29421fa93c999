import datetime

from kubetype.structs import objects


def test_fields_are_accepted_by_the_api_names():
    obj = objects.Pod.model_validate({
        'apiVersion': 'v1',
        'kind': 'Pod',
        'metadata': {'name': 'p1', 'resourceVersion': '123', 'generateName': 'p-'},
    })
    assert obj.api_version == 'v1'
    assert obj.metadata.resource_version == '123'
    assert obj.metadata.generate_name == 'p-'


def test_fields_are_accepted_by_the_python_names():
    obj = objects.Pod(api_version='v1', metadata=objects.ObjectMeta(resource_version='123'))
    assert obj.api_version == 'v1'
    assert obj.resource_version == '123'


def test_rendering_uses_the_api_names_and_skips_the_absent_fields():
    obj = objects.ConfigMap(
        api_version='v1', kind='ConfigMap',
        metadata=objects.ObjectMeta(name='cm1'),
        binary_data={'x': 'eA=='},
    )
    assert obj.to_raw() == {
        'apiVersion': 'v1',
        'kind': 'ConfigMap',
        'metadata': {'name': 'cm1'},
        'binaryData': {'x': 'eA=='},
    }


def test_unknown_fields_are_preserved():
    raw = {
        'apiVersion': 'v1',
        'kind': 'Pod',
        'metadata': {'name': 'p1', 'managedFields': [{'manager': 'kubectl'}]},
        'spec': {'containers': [{'name': 'c1'}]},
        'somethingNew': {'a': 'b'},
    }
    obj = objects.Pod.model_validate(raw)
    assert obj.to_raw() == raw


def test_timestamps_are_kept_as_strings_and_parsed_on_demand():
    meta = objects.ObjectMeta(creation_timestamp='2020-12-31T23:59:59Z')
    assert meta.creation_timestamp == '2020-12-31T23:59:59Z'
    assert meta.created == datetime.datetime(2020, 12, 31, 23, 59, 59, tzinfo=datetime.timezone.utc)
    assert meta.deleted is None


def test_list_metadata_continue_token():
    meta = objects.ListMeta.model_validate({'continue': 'abc', 'remainingItemCount': 5})
    assert meta.continue_ == 'abc'
    assert meta.remaining_item_count == 5
    assert meta.to_raw() == {'continue': 'abc', 'remainingItemCount': 5}


def test_status_fields():
    status = objects.Status.model_validate({
        'kind': 'Status', 'status': 'Failure', 'message': 'msg', 'reason': 'Expired', 'code': 410,
    })
    assert status.message == 'msg'
    assert status.reason == 'Expired'
    assert status.code == 410


def test_event_nested_fields():
    event = objects.Event.model_validate({
        'involvedObject': {'kind': 'Pod', 'name': 'p1', 'apiVersion': 'v1'},
        'source': {'component': 'kubelet'},
        'count': 3,
    })
    assert event.involved_object is not None
    assert event.involved_object.name == 'p1'
    assert event.involved_object.api_version == 'v1'
    assert event.source is not None
    assert event.source.component == 'kubelet'
    assert event.count == 3


def test_object_list_is_typed():
    objs = objects.ObjectList[objects.Secret].model_validate({
        'items': [{'metadata': {'name': 's1'}, 'type': 'Opaque', 'stringData': {'a': 'b'}}],
    })
    assert isinstance(objs.items[0], objects.Secret)
    assert objs.items[0].type == 'Opaque'
    assert objs.items[0].string_data == {'a': 'b'}
