"""
All the raw structures coming from/to the Kubernetes API.

Everything marked "raw" is plain unwrapped unprocessed data as JSON-decoded
from the API, usually as retrieved in the watching or fetching API calls.
They are declared as `TypedDict` for type-checking only: at runtime, they are
regular dicts, and can contain arbitrary fields not declared here.

The typed (validated) counterparts live in :mod:`kubetype.structs.objects`;
the conversion happens only when the caller explicitly asks for a typed object
(e.g. :meth:`kubetype.clients.watching.WatchEvent.decode`).
"""
from typing import Any, Collection, List, Mapping

from typing_extensions import Literal, TypedDict

Labels = Mapping[str, str]
Annotations = Mapping[str, str]


class RawMeta(TypedDict, total=False):
    uid: str
    name: str
    namespace: str
    labels: Labels
    annotations: Annotations
    finalizers: List[str]
    resourceVersion: str
    generation: int
    creationTimestamp: str
    deletionTimestamp: str


class RawBody(TypedDict, total=False):
    apiVersion: str
    kind: str
    metadata: RawMeta
    spec: Mapping[str, Any]
    status: Mapping[str, Any]


class RawListMeta(TypedDict, total=False):
    resourceVersion: str
    remainingItemCount: int


class RawList(TypedDict, total=False):
    apiVersion: str
    kind: str
    metadata: RawListMeta
    items: List[RawBody]


class RawStatusCause(TypedDict, total=False):
    field: str
    reason: str
    message: str


class RawStatusDetails(TypedDict, total=False):
    name: str
    uid: str
    retryAfterSeconds: int
    kind: str
    group: str
    causes: Collection[RawStatusCause]


# https://kubernetes.io/docs/reference/generated/kubernetes-api/v1.28/#status-v1-meta
# Also a special payload for type==ERROR (this is not a connection or client error).
class RawStatus(TypedDict, total=False):
    apiVersion: str     # usually: 'v1'
    kind: str           # usually: 'Status'
    code: int
    status: Literal['Success', 'Failure']
    reason: str
    message: str
    details: RawStatusDetails
