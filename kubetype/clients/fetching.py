import logging
from typing import Optional, TypeVar

from kubetype.clients import api, auth, errors
from kubetype.helpers import typedefs
from kubetype.structs import configuration, objects, references, selectors

logger = logging.getLogger(__name__)

_ObjectT = TypeVar('_ObjectT', bound=objects.Object)


async def read_obj(
        *,
        resource: references.Resource[_ObjectT],
        namespace: references.Namespace = None,
        name: str,
        settings: configuration.ClientSettings,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger = logger,
) -> _ObjectT:
    """
    Read one object of a specific resource kind.

    A missing object is reported with :class:`errors.APINotFoundError`.
    """
    with errors.attributing('get', resource.kind):
        raw = await api.execute(
            method='get',
            url=resource.get_url(namespace=namespace, name=name),
            expected=[200],
            settings=settings,
            context=context,
            logger=logger,
        )
        return resource.decode(raw)


async def list_objs(
        *,
        resource: references.Resource[_ObjectT],
        namespace: references.Namespace = None,
        options: Optional[selectors.ListOptions] = None,
        settings: configuration.ClientSettings,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger = logger,
) -> 'objects.ObjectList[_ObjectT]':
    """
    List the objects of a specific resource kind.

    The cluster-wide call is used in two cases:

    * The resource itself is cluster-scoped, and namespacing makes not sense.
    * The namespace is not specified for a namespaced resource.

    Otherwise, the namespace-scoped call is used.

    The items of the list come without their kind & API version from the API.
    They are restored from the list's own ones, so that the items are
    complete objects (e.g. for re-sending them back to the API).
    """
    with errors.attributing('list', resource.kind):
        rsp = await api.execute(
            method='get',
            url=resource.get_url(namespace=namespace, params=selectors.list_params(options)),
            expected=[200],
            settings=settings,
            context=context,
            logger=logger,
        )
        if not isinstance(rsp, dict):
            raise errors.DecodeError(f"failed to decode {resource.kind}List",
                                     shape=f'{resource.kind}List')

        for item in rsp.get('items') or []:
            if isinstance(item, dict) and 'kind' in rsp:
                item.setdefault('kind', rsp['kind'][:-4] if rsp['kind'][-4:] == 'List' else rsp['kind'])
            if isinstance(item, dict) and 'apiVersion' in rsp:
                item.setdefault('apiVersion', rsp['apiVersion'])

        return resource.decode_list(rsp)
