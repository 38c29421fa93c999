"""
Minimalistic detection of the API credentials from the environment.

Authentication capabilities are limited to keep the code short & simple:
only the raw data of the kubeconfig files and of the in-cluster service
accounts are used. No sophisticated multi-step token retrieval is performed
(e.g. no exec plugins, no refreshing of the auth-providers' tokens).
"""
import logging
import os
from typing import Any, Dict, Optional

import yaml

from kubetype.structs import credentials

logger = logging.getLogger(__name__)

# As per https://kubernetes.io/docs/tasks/run-application/access-api-from-pod/
SERVICE_ACCOUNT_DIR = '/var/run/secrets/kubernetes.io/serviceaccount'


def login(*, kubeconfig: Optional[str] = None) -> credentials.ConnectionInfo:
    """
    Detect the credentials: from the kubeconfig, or else from the service account.

    An explicitly specified kubeconfig path (or several of them, separated
    as in ``$PATH``) has precedence over everything, and must exist.
    """
    if kubeconfig is not None:
        info = login_with_kubeconfig(kubeconfig=kubeconfig)
    else:
        info = login_with_kubeconfig() or login_with_service_account()
    if info is None:
        raise credentials.LoginError("Cannot authenticate to the API: no credentials are found.")
    logger.debug(f"Logged in to {info.server}.")
    return info


def login_with_service_account(
        *,
        path: str = SERVICE_ACCOUNT_DIR,
) -> Optional[credentials.ConnectionInfo]:
    """
    Get the credentials of the service account when running inside a cluster.
    """
    token_path = os.path.join(path, 'token')
    ns_path = os.path.join(path, 'namespace')
    ca_path = os.path.join(path, 'ca.crt')

    if os.path.exists(token_path):
        with open(token_path, encoding='utf-8') as f:
            token = f.read().strip()

        namespace: Optional[str] = None
        if os.path.exists(ns_path):
            with open(ns_path, encoding='utf-8') as f:
                namespace = f.read().strip()

        host = os.environ.get('KUBERNETES_SERVICE_HOST')
        port = os.environ.get('KUBERNETES_SERVICE_PORT', '443')
        return credentials.ConnectionInfo(
            server=f'https://{host}:{port}' if host else 'https://kubernetes.default.svc',
            ca_path=ca_path if os.path.exists(ca_path) else None,
            token=token or None,
            default_namespace=namespace or None,
        )
    else:
        return None


def login_with_kubeconfig(
        *,
        kubeconfig: Optional[str] = None,
) -> Optional[credentials.ConnectionInfo]:
    """
    Get the credentials of the current context from the kubeconfig files.

    The files are taken from the argument, ``$KUBECONFIG``, or ``~/.kube/config``
    (the first one that is set). Multiple files are merged: the first value wins.
    """

    # As per https://kubernetes.io/docs/concepts/configuration/organize-cluster-access-kubeconfig/
    if not kubeconfig:
        kubeconfig = os.environ.get('KUBECONFIG')
    if not kubeconfig and os.path.exists(os.path.expanduser('~/.kube/config')):
        kubeconfig = '~/.kube/config'
    if not kubeconfig:
        return None

    paths = [path.strip() for path in kubeconfig.split(os.pathsep)]
    paths = [os.path.expanduser(path) for path in paths if path]

    # As prescribed: if the file is absent or non-deserialisable, then fail. The first value wins.
    current_context: Optional[str] = None
    contexts: Dict[Any, Any] = {}
    clusters: Dict[Any, Any] = {}
    users: Dict[Any, Any] = {}
    for path in paths:

        try:
            with open(path, encoding='utf-8') as f:
                config = yaml.safe_load(f.read()) or {}
        except (OSError, yaml.YAMLError) as e:
            raise credentials.LoginError(f"Cannot read the kubeconfig {path!r}: {e}") from e

        if current_context is None:
            current_context = config.get('current-context')
        for item in config.get('contexts') or []:
            if item['name'] not in contexts:
                contexts[item['name']] = item.get('context') or {}
        for item in config.get('clusters') or []:
            if item['name'] not in clusters:
                clusters[item['name']] = item.get('cluster') or {}
        for item in config.get('users') or []:
            if item['name'] not in users:
                users[item['name']] = item.get('user') or {}

    # Once fully parsed, use the current context only.
    if current_context is None:
        raise credentials.LoginError('Current context is not set in kubeconfigs.')
    try:
        context = contexts[current_context]
        cluster = clusters[context['cluster']]
        user = users.get(context.get('user'), {})
    except KeyError as e:
        raise credentials.LoginError(f"Inconsistent kubeconfigs: {e} is not found.") from e

    # Unlike the full-featured clients, we do not make a fake API request to refresh the token.
    provider_token = user.get('auth-provider', {}).get('config', {}).get('access-token')

    # Map the retrieved fields into the credentials object.
    return credentials.ConnectionInfo(
        server=cluster.get('server'),
        ca_path=cluster.get('certificate-authority'),
        ca_data=cluster.get('certificate-authority-data'),
        insecure=cluster.get('insecure-skip-tls-verify'),
        certificate_path=user.get('client-certificate'),
        certificate_data=user.get('client-certificate-data'),
        private_key_path=user.get('client-key'),
        private_key_data=user.get('client-key-data'),
        username=user.get('username'),
        password=user.get('password'),
        token=user.get('token') or provider_token,
        default_namespace=context.get('namespace'),
    )
