import logging
from typing import Optional, TypeVar

from kubetype.clients import api, auth, errors
from kubetype.engines import loggers
from kubetype.helpers import typedefs
from kubetype.structs import configuration, objects, references

logger = logging.getLogger(__name__)

_ObjectT = TypeVar('_ObjectT', bound=objects.Object)


async def create_obj(
        *,
        resource: references.Resource[_ObjectT],
        namespace: references.Namespace = None,
        obj: _ObjectT,
        settings: configuration.ClientSettings,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger = logger,
) -> _ObjectT:
    """
    Create an object and return it as created by the API.

    The kind, the API version, and the namespace (if given) are stamped
    into the object in place before sending, overriding the existing values.
    Without the namespace given, the object's own namespace is used.
    """
    with errors.attributing('create', resource.kind):
        resource.stamp(obj, namespace=namespace)
        namespace = _get_namespace(resource, obj)

        logger.debug(f"Creating {resource.kind}.", extra={'k8s_ref': loggers.make_ref(obj)})
        raw = await api.execute(
            method='post',
            url=resource.get_url(namespace=namespace),
            payload=obj.to_raw(),
            expected=[200, 201, 202],
            settings=settings,
            context=context,
            logger=logger,
        )
        return resource.decode(raw)


def _get_namespace(resource: references.Resource[_ObjectT], obj: _ObjectT) -> references.Namespace:
    if not resource.namespaced:
        return None
    elif not obj.metadata.namespace:
        raise errors.InvalidArgumentError(f"A namespace is required for {resource.kind}.")
    else:
        return references.NamespaceName(obj.metadata.namespace)
