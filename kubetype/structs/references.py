import dataclasses
import urllib.parse
from typing import Any, Generic, Iterator, List, Mapping, NewType, Optional, Type, TypeVar

import pydantic

from kubetype.clients import errors
from kubetype.structs import bodies, objects

# A specific really existing addressable namespace (at least, the one assumed to be so).
# Made as a NewType for stricter type-checking to avoid collisions with other strings.
NamespaceName = NewType('NamespaceName', str)

# A namespace reference usable in the API calls. `None` means cluster-wide API calls.
Namespace = Optional[NamespaceName]

_ObjectT = TypeVar('_ObjectT', bound=objects.Object)


@dataclasses.dataclass(frozen=True, eq=False, repr=False)
class Resource(Generic[_ObjectT]):
    """
    A schema descriptor of a very specific built-in or custom resource kind.

    It is used to form the K8s API URLs, to stamp the outgoing objects,
    and to decode the incoming payloads into the typed objects of this kind.
    All the per-kind operations are the same generic routines parametrized
    with one of these descriptors (see :mod:`kubetype.structs.resources`).
    """

    group: str
    """
    The resource's API group; e.g. ``"apps"``, ``"batch"``.
    For Core v1 API resources, an empty string: ``""``.
    """

    version: str
    """
    The resource's API version; e.g. ``"v1"``, ``"v1beta1"``, etc.
    """

    plural: str
    """
    The resource's plural name; e.g. ``"pods"``, ``"deployments"``.
    It is used as an API endpoint, together with API group & version.
    """

    kind: str
    """
    The resource's kind (as in YAML files); e.g. ``"Pod"``, ``"Deployment"``.
    """

    model: Type[_ObjectT]
    """
    The class of the typed objects to decode the payloads into.
    """

    namespaced: bool = True
    """
    Whether the resource is namespaced (``True``) or cluster-scoped (``False``).
    """

    def __hash__(self) -> int:
        return hash((self.group, self.version, self.plural))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Resource):
            self_tuple = (self.group, self.version, self.plural)
            other_tuple = (other.group, other.version, other.plural)
            return self_tuple == other_tuple
        else:
            return NotImplemented

    def __repr__(self) -> str:
        return f'{self.plural}.{self.version}.{self.group}'.strip('.')

    # Mostly for tests and logging.
    def __iter__(self) -> Iterator[str]:
        return iter((self.group, self.version, self.plural))

    @property
    def api_version(self) -> str:
        # Strip heading/trailing slashes if group is absent (e.g. for pods).
        return f'{self.group}/{self.version}'.strip('/')

    def get_url(
            self,
            *,
            server: Optional[str] = None,
            namespace: Namespace = None,
            name: Optional[str] = None,
            params: Optional[Mapping[str, str]] = None,
    ) -> str:
        """
        Build a URL to be used with K8s API.

        If the namespace is not set, a cluster-wide URL is returned.
        For cluster-scoped resources, the namespace must not be set.

        If the name is not set, the URL for the resource list is returned.
        Otherwise (if set), the URL for the individual resource is returned.

        Params go to the query parameters (``?param1=value1&param2=value2...``).
        """
        if not self.namespaced and namespace:
            raise errors.InvalidArgumentError(
                f"Specific namespaces are not supported for cluster-scoped {self.kind}.")
        if self.namespaced and not namespace and name:
            raise errors.InvalidArgumentError(
                f"Specific namespaces are required for specific namespaced {self.kind}.")

        parts: List[Optional[str]] = [
            '/api' if self.group == '' and self.version == 'v1' else '/apis',
            self.group,
            self.version,
            'namespaces' if self.namespaced and namespace else None,
            namespace if self.namespaced and namespace else None,
            self.plural,
            name,
        ]

        query = urllib.parse.urlencode(params, encoding='utf-8') if params else ''
        path = '/'.join([part for part in parts if part])
        url = path + ('?' if query else '') + query
        return url if server is None else server.rstrip('/') + '/' + url.lstrip('/')

    def new(
            self,
            name: Optional[str] = None,
            namespace: Namespace = None,
            **kwargs: Any,
    ) -> _ObjectT:
        """ Make a new object of this kind, with the envelope already filled. """
        obj = self.model(**kwargs)
        obj.metadata.name = name if name is not None else obj.metadata.name
        self.stamp(obj, namespace=namespace)
        return obj

    def stamp(self, obj: objects.Object, *, namespace: Namespace = None) -> None:
        """
        Enforce the kind & API version of this resource on the outgoing object.

        The caller-provided values are overwritten: they are never trusted.
        The namespace is stamped only for namespaced resources, and only if set.
        """
        obj.kind = self.kind
        obj.api_version = self.api_version
        if self.namespaced and namespace:
            obj.metadata.namespace = namespace

    def parse(self, payload: Any) -> _ObjectT:
        """ Decode the raw payload into the typed object (raises on mismatches). """
        return self.model.model_validate(payload)

    def parse_list(self, payload: bodies.RawList) -> 'objects.ObjectList[_ObjectT]':
        return objects.ObjectList[self.model].model_validate(payload)  # type: ignore[name-defined]

    def decode(self, payload: Any) -> _ObjectT:
        """ Decode the raw payload, or fail with :class:`errors.DecodeError` on mismatches. """
        try:
            return self.parse(payload)
        except pydantic.ValidationError as e:
            raise errors.DecodeError(f"failed to decode {self.kind}", shape=self.kind) from e

    def decode_list(self, payload: Any) -> 'objects.ObjectList[_ObjectT]':
        try:
            return self.parse_list(payload)
        except pydantic.ValidationError as e:
            raise errors.DecodeError(f"failed to decode {self.kind}List", shape=f'{self.kind}List') from e
