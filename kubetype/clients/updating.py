import logging
from typing import Optional, TypeVar

from kubetype.clients import api, auth, errors
from kubetype.engines import loggers
from kubetype.helpers import typedefs
from kubetype.structs import configuration, objects, references

logger = logging.getLogger(__name__)

_ObjectT = TypeVar('_ObjectT', bound=objects.Object)


async def update_obj(
        *,
        resource: references.Resource[_ObjectT],
        namespace: references.Namespace = None,
        obj: _ObjectT,
        settings: configuration.ClientSettings,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger = logger,
) -> _ObjectT:
    """
    Replace an existing object entirely and return it as updated by the API.

    The object is addressed by its own name (and namespace, unless overridden).
    The kind, the API version, and the namespace are stamped as for creation.

    If the object's resource version is set and is outdated, the API
    rejects the update with :class:`errors.APIConflictError`.
    """
    with errors.attributing('update', resource.kind):
        resource.stamp(obj, namespace=namespace)
        if not obj.metadata.name:
            raise errors.InvalidArgumentError(f"A name is required to update {resource.kind}.")

        namespace = (references.NamespaceName(obj.metadata.namespace)
                     if resource.namespaced and obj.metadata.namespace else None)
        logger.debug(f"Updating {resource.kind}.", extra={'k8s_ref': loggers.make_ref(obj)})
        raw = await api.execute(
            method='put',
            url=resource.get_url(namespace=namespace, name=obj.metadata.name),
            payload=obj.to_raw(),
            expected=[200, 201],
            settings=settings,
            context=context,
            logger=logger,
        )
        return resource.decode(raw)
