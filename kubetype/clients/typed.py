"""
The typed surface of the client: one family of operations per resource kind.

All kinds share the same generic implementation of the operations
(:mod:`fetching`, :mod:`creating`, :mod:`updating`, :mod:`deleting`,
:mod:`watching`), which is bound to a specific resource descriptor
by :class:`ResourceAPI`. E.g., ``client.pods.get('web-1', namespace='default')``
returns a :class:`kubetype.objects.Pod`, ``client.nodes.list()`` returns
a list of :class:`kubetype.objects.Node`, and so on.

Usage::

    async with kubetype.connected() as context:
        client = kubetype.Client(context=context)
        pod = await client.pods.get('web-1', namespace='default')
        async for event in client.pods.stream(namespace='default'):
            print(event.type, event.decode().name)
"""
import logging
from typing import Any, AsyncIterator, Dict, Generic, Optional, TypeVar

from kubetype.clients import auth, creating, deleting, errors, fetching, updating, watching
from kubetype.helpers import typedefs
from kubetype.structs import configuration, objects, references, resources, selectors

logger = logging.getLogger(__name__)

_ObjectT = TypeVar('_ObjectT', bound=objects.Object)


class ResourceAPI(Generic[_ObjectT]):
    """
    The operations of one resource kind, bound to a connection & settings.

    If the context is not specified, the one of :func:`kubetype.connected`
    is used at the time of the calls (not at the time of construction).

    If the namespace is not specified in the calls, the default one
    is used for the namespaced resources (if it is set).
    """

    def __init__(
            self,
            resource: references.Resource[_ObjectT],
            *,
            context: Optional[auth.APIContext] = None,
            settings: Optional[configuration.ClientSettings] = None,
            namespace: references.Namespace = None,
            logger: typedefs.Logger = logger,
    ) -> None:
        super().__init__()
        self.resource = resource
        self.context = context
        self.settings = settings if settings is not None else configuration.ClientSettings()
        self.namespace = namespace
        self.logger = logger

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.resource!r}>'

    def _ns(self, namespace: references.Namespace) -> references.Namespace:
        if not self.resource.namespaced:
            return None
        return namespace if namespace is not None else self.namespace

    def new(self, name: Optional[str] = None, namespace: references.Namespace = None, **kwargs: Any) -> _ObjectT:
        """ Make a new object of this kind (not yet created in the API). """
        return self.resource.new(name=name, namespace=self._ns(namespace), **kwargs)

    async def get(self, name: str, *, namespace: references.Namespace = None) -> _ObjectT:
        return await fetching.read_obj(
            resource=self.resource,
            namespace=self._ns(namespace),
            name=name,
            settings=self.settings,
            context=self.context,
            logger=self.logger,
        )

    async def list(
            self,
            *,
            namespace: references.Namespace = None,
            options: Optional[selectors.ListOptions] = None,
            label_selector: Optional[selectors.LabelSelectorLike] = None,
            field_selector: Optional[selectors.FieldSelectorLike] = None,
    ) -> 'objects.ObjectList[_ObjectT]':
        """
        List the objects, either with the options, or with the selectors (not both).
        """
        return await fetching.list_objs(
            resource=self.resource,
            namespace=self._ns(namespace),
            options=_merge_options(options, label_selector, field_selector),
            settings=self.settings,
            context=self.context,
            logger=self.logger,
        )

    async def create(self, obj: _ObjectT, *, namespace: references.Namespace = None) -> _ObjectT:
        return await creating.create_obj(
            resource=self.resource,
            namespace=self._ns(namespace),
            obj=obj,
            settings=self.settings,
            context=self.context,
            logger=self.logger,
        )

    async def update(self, obj: _ObjectT, *, namespace: references.Namespace = None) -> _ObjectT:
        return await updating.update_obj(
            resource=self.resource,
            namespace=namespace if self.resource.namespaced else None,
            obj=obj,
            settings=self.settings,
            context=self.context,
            logger=self.logger,
        )

    async def delete(self, name: str, *, namespace: references.Namespace = None) -> None:
        await deleting.delete_obj(
            resource=self.resource,
            namespace=self._ns(namespace),
            name=name,
            settings=self.settings,
            context=self.context,
            logger=self.logger,
        )

    async def watch(
            self,
            events: Optional[watching.WatchQueue],
            *,
            namespace: references.Namespace = None,
            options: Optional[selectors.WatchOptions] = None,
            stopper: Optional[typedefs.Future] = None,
    ) -> typedefs.Task:
        """
        Start relaying the typed events into the queue; return the relay task.

        See :func:`kubetype.clients.watching.watch_objs` for the details.
        """
        return await watching.watch_objs(
            resource=self.resource,
            namespace=self._ns(namespace),
            options=options,
            events=events,
            stopper=stopper,
            settings=self.settings,
            context=self.context,
            logger=self.logger,
        )

    def stream(
            self,
            *,
            namespace: references.Namespace = None,
            options: Optional[selectors.WatchOptions] = None,
    ) -> AsyncIterator['watching.WatchEvent[_ObjectT]']:
        """ Iterate over the typed events until the stream ends. """
        return watching.streaming_watch(
            resource=self.resource,
            namespace=self._ns(namespace),
            options=options,
            settings=self.settings,
            context=self.context,
            logger=self.logger,
        )


def _merge_options(
        options: Optional[selectors.ListOptions],
        label_selector: Optional[selectors.LabelSelectorLike],
        field_selector: Optional[selectors.FieldSelectorLike],
) -> Optional[selectors.ListOptions]:
    if options is not None and (label_selector is not None or field_selector is not None):
        raise errors.InvalidArgumentError("Either options or selectors can be passed, not both.")
    elif options is not None:
        return options
    elif label_selector is None and field_selector is None:
        return None
    else:
        return selectors.ListOptions(label_selector=label_selector, field_selector=field_selector)


class Client:
    """
    The typed client: one :class:`ResourceAPI` per known resource kind.

    The kinds are available as attributes named by their plurals,
    e.g. ``client.pods``, ``client.configmaps``, ``client.deployments``.
    Other resources (e.g. custom ones) are available via :meth:`resource`.
    """

    def __init__(
            self,
            *,
            context: Optional[auth.APIContext] = None,
            settings: Optional[configuration.ClientSettings] = None,
            namespace: references.Namespace = None,
    ) -> None:
        super().__init__()
        self.context = context
        self.settings = settings if settings is not None else configuration.ClientSettings()
        if namespace is None and context is not None and context.default_namespace:
            namespace = references.NamespaceName(context.default_namespace)
        self.namespace = namespace
        self._apis: Dict[references.Resource[Any], ResourceAPI[Any]] = {}

    def resource(self, resource: references.Resource[_ObjectT]) -> ResourceAPI[_ObjectT]:
        if resource not in self._apis:
            self._apis[resource] = ResourceAPI(
                resource,
                context=self.context,
                settings=self.settings,
                namespace=self.namespace,
            )
        return self._apis[resource]

    @property
    def configmaps(self) -> ResourceAPI[objects.ConfigMap]:
        return self.resource(resources.CONFIGMAPS)

    @property
    def endpoints(self) -> ResourceAPI[objects.Endpoints]:
        return self.resource(resources.ENDPOINTS)

    @property
    def events(self) -> ResourceAPI[objects.Event]:
        return self.resource(resources.EVENTS)

    @property
    def namespaces(self) -> ResourceAPI[objects.Namespace]:
        return self.resource(resources.NAMESPACES)

    @property
    def nodes(self) -> ResourceAPI[objects.Node]:
        return self.resource(resources.NODES)

    @property
    def pods(self) -> ResourceAPI[objects.Pod]:
        return self.resource(resources.PODS)

    @property
    def secrets(self) -> ResourceAPI[objects.Secret]:
        return self.resource(resources.SECRETS)

    @property
    def serviceaccounts(self) -> ResourceAPI[objects.ServiceAccount]:
        return self.resource(resources.SERVICEACCOUNTS)

    @property
    def services(self) -> ResourceAPI[objects.Service]:
        return self.resource(resources.SERVICES)

    @property
    def daemonsets(self) -> ResourceAPI[objects.DaemonSet]:
        return self.resource(resources.DAEMONSETS)

    @property
    def deployments(self) -> ResourceAPI[objects.Deployment]:
        return self.resource(resources.DEPLOYMENTS)

    @property
    def replicasets(self) -> ResourceAPI[objects.ReplicaSet]:
        return self.resource(resources.REPLICASETS)

    @property
    def jobs(self) -> ResourceAPI[objects.Job]:
        return self.resource(resources.JOBS)

    @property
    def ingresses(self) -> ResourceAPI[objects.Ingress]:
        return self.resource(resources.INGRESSES)

    @property
    def horizontalpodautoscalers(self) -> ResourceAPI[objects.HorizontalPodAutoscaler]:
        return self.resource(resources.HORIZONTALPODAUTOSCALERS)
