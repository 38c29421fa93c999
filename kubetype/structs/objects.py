"""
Typed resources, as decoded from and encoded to the K8s API.

All resources share the same envelope: ``kind``, ``apiVersion``, ``metadata``.
The kind-specific fields are declared only to the level of the top-level keys:
the nested structures of specs & statuses mirror the API schemas and are kept
as regular mappings. The unknown fields are preserved as they are, so that
an object read from the API can be sent back without losing any fields.

The fields are named pythonically (``api_version``), but are serialized
with the API's names (``apiVersion``); both names are accepted on input.
"""
import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

import iso8601
import pydantic
from pydantic.alias_generators import to_camel


class Model(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='allow',
    )

    def to_raw(self) -> Dict[str, Any]:
        """ Render the object as the API expects it: JSON-compatible, camelCased. """
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)


class ObjectMeta(Model):
    name: Optional[str] = None
    generate_name: Optional[str] = None
    namespace: Optional[str] = None
    uid: Optional[str] = None
    resource_version: Optional[str] = None
    generation: Optional[int] = None
    labels: Optional[Dict[str, str]] = None
    annotations: Optional[Dict[str, str]] = None
    finalizers: Optional[List[str]] = None
    owner_references: Optional[List[Dict[str, Any]]] = None
    creation_timestamp: Optional[str] = None
    deletion_timestamp: Optional[str] = None
    deletion_grace_period_seconds: Optional[int] = None

    # The timestamps are kept as strings to send them back exactly as received.
    @property
    def created(self) -> Optional[datetime.datetime]:
        return iso8601.parse_date(self.creation_timestamp) if self.creation_timestamp else None

    @property
    def deleted(self) -> Optional[datetime.datetime]:
        return iso8601.parse_date(self.deletion_timestamp) if self.deletion_timestamp else None


class ListMeta(Model):
    resource_version: Optional[str] = None
    continue_: Optional[str] = pydantic.Field(default=None, alias='continue')
    remaining_item_count: Optional[int] = None


class Object(Model):
    """ The common envelope of all resources. """
    kind: Optional[str] = None
    api_version: Optional[str] = None
    metadata: ObjectMeta = pydantic.Field(default_factory=ObjectMeta)

    @property
    def name(self) -> Optional[str]:
        return self.metadata.name

    @property
    def namespace(self) -> Optional[str]:
        return self.metadata.namespace

    @property
    def resource_version(self) -> Optional[str]:
        return self.metadata.resource_version


class SpecifiedObject(Object):
    """ A resource with the conventional desired & observed states. """
    spec: Optional[Dict[str, Any]] = None
    status: Optional[Dict[str, Any]] = None


class ObjectReference(Model):
    kind: Optional[str] = None
    namespace: Optional[str] = None
    name: Optional[str] = None
    uid: Optional[str] = None
    api_version: Optional[str] = None
    resource_version: Optional[str] = None
    field_path: Optional[str] = None


class Status(Model):
    """
    The canonical error payload: of the failed requests, or in ``ERROR`` events.
    """
    kind: Optional[str] = None
    api_version: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    status: Optional[str] = None
    message: Optional[str] = None
    reason: Optional[str] = None
    code: Optional[int] = None
    details: Optional[Dict[str, Any]] = None


#
# Core API resources ("v1").
#


class Pod(SpecifiedObject):
    pass


class Node(SpecifiedObject):
    pass


class Namespace(SpecifiedObject):
    pass


class Service(SpecifiedObject):
    pass


class ConfigMap(Object):
    data: Optional[Dict[str, str]] = None
    binary_data: Optional[Dict[str, str]] = None
    immutable: Optional[bool] = None


class Secret(Object):
    type: Optional[str] = None
    data: Optional[Dict[str, str]] = None
    string_data: Optional[Dict[str, str]] = None
    immutable: Optional[bool] = None


class ServiceAccount(Object):
    secrets: Optional[List[Dict[str, Any]]] = None
    image_pull_secrets: Optional[List[Dict[str, Any]]] = None
    automount_service_account_token: Optional[bool] = None


class Endpoints(Object):
    subsets: Optional[List[Dict[str, Any]]] = None


class EventSource(Model):
    component: Optional[str] = None
    host: Optional[str] = None


class Event(Object):
    involved_object: Optional[ObjectReference] = None
    reason: Optional[str] = None
    message: Optional[str] = None
    source: Optional[EventSource] = None
    first_timestamp: Optional[str] = None
    last_timestamp: Optional[str] = None
    count: Optional[int] = None
    type: Optional[str] = None


#
# Grouped API resources.
#


class Deployment(SpecifiedObject):
    pass


class DaemonSet(SpecifiedObject):
    pass


class ReplicaSet(SpecifiedObject):
    pass


class Job(SpecifiedObject):
    pass


class Ingress(SpecifiedObject):
    pass


class HorizontalPodAutoscaler(SpecifiedObject):
    pass


_ObjectT = TypeVar('_ObjectT', bound=Object)


class ObjectList(Model, Generic[_ObjectT]):
    """ A resource-version-stamped sequence of resources, in the server's order. """
    kind: Optional[str] = None
    api_version: Optional[str] = None
    metadata: ListMeta = pydantic.Field(default_factory=ListMeta)
    items: List[_ObjectT] = pydantic.Field(default_factory=list)
