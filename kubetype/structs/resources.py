"""
The catalog of the well-known built-in resources.

Every resource kind is only a descriptor: there is no per-kind code anywhere.
Custom resources can be described the same way by the users::

    WIDGETS = Resource('example.com', 'v1', 'widgets', 'Widget',
                       model=objects.SpecifiedObject)
"""
from typing import Mapping

from kubetype.structs import objects
from kubetype.structs.references import Resource

CONFIGMAPS = Resource('', 'v1', 'configmaps', 'ConfigMap', objects.ConfigMap)
ENDPOINTS = Resource('', 'v1', 'endpoints', 'Endpoints', objects.Endpoints)
EVENTS = Resource('', 'v1', 'events', 'Event', objects.Event)
NAMESPACES = Resource('', 'v1', 'namespaces', 'Namespace', objects.Namespace, namespaced=False)
NODES = Resource('', 'v1', 'nodes', 'Node', objects.Node, namespaced=False)
PODS = Resource('', 'v1', 'pods', 'Pod', objects.Pod)
SECRETS = Resource('', 'v1', 'secrets', 'Secret', objects.Secret)
SERVICEACCOUNTS = Resource('', 'v1', 'serviceaccounts', 'ServiceAccount', objects.ServiceAccount)
SERVICES = Resource('', 'v1', 'services', 'Service', objects.Service)

DAEMONSETS = Resource('apps', 'v1', 'daemonsets', 'DaemonSet', objects.DaemonSet)
DEPLOYMENTS = Resource('apps', 'v1', 'deployments', 'Deployment', objects.Deployment)
REPLICASETS = Resource('apps', 'v1', 'replicasets', 'ReplicaSet', objects.ReplicaSet)
JOBS = Resource('batch', 'v1', 'jobs', 'Job', objects.Job)
INGRESSES = Resource('networking.k8s.io', 'v1', 'ingresses', 'Ingress', objects.Ingress)
HORIZONTALPODAUTOSCALERS = Resource('autoscaling', 'v1', 'horizontalpodautoscalers',
                                    'HorizontalPodAutoscaler', objects.HorizontalPodAutoscaler)

# By plural names, as used in the CLI and in `Client` attributes.
BUILTINS: Mapping[str, Resource] = {  # type: ignore[type-arg]
    resource.plural: resource
    for resource in [
        CONFIGMAPS, ENDPOINTS, EVENTS, NAMESPACES, NODES, PODS,
        SECRETS, SERVICEACCOUNTS, SERVICES,
        DAEMONSETS, DEPLOYMENTS, REPLICASETS, JOBS, INGRESSES, HORIZONTALPODAUTOSCALERS,
    ]
}
