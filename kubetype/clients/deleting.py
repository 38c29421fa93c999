import logging
from typing import Optional

from kubetype.clients import api, auth, errors
from kubetype.helpers import typedefs
from kubetype.structs import configuration, references

logger = logging.getLogger(__name__)


async def delete_obj(
        *,
        resource: references.Resource,
        namespace: references.Namespace = None,
        name: str,
        settings: configuration.ClientSettings,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger = logger,
) -> None:
    """
    Delete an object by its name.

    The deletion can be asynchronous on the server side (e.g. with finalizers):
    the object can still exist for some time after this call returns.
    A missing object is reported with :class:`errors.APINotFoundError`.
    """
    with errors.attributing('delete', resource.kind):
        ref = {'apiVersion': resource.api_version, 'kind': resource.kind, 'name': name}
        if namespace:
            ref['namespace'] = namespace
        logger.debug(f"Deleting {resource.kind}.", extra={'k8s_ref': ref})
        await api.execute(
            method='delete',
            url=resource.get_url(namespace=namespace, name=name),
            expected=[200, 202],
            settings=settings,
            context=context,
            logger=logger,
        )
