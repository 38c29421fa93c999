"""
The main kubetype module for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the client's top-level interface,
# as it is seen by the users. So, we export the individual functions.

from kubetype.structs import (
    objects,  # as a separate name on the public namespace
    resources,  # as a separate name on the public namespace
)
from kubetype.structs.configuration import (
    ClientSettings,
    NetworkingSettings,
    WatchingSettings,
)
from kubetype.structs.credentials import (
    ConnectionInfo,
    LoginError,
)
from kubetype.structs.references import (
    Namespace,
    NamespaceName,
    Resource,
)
from kubetype.structs.selectors import (
    FieldSelector,
    LabelSelector,
    ListOptions,
    WatchOptions,
    encode_query,
)
from kubetype.clients.errors import (
    ClientError,
    InvalidArgumentError,
    APIConnectionError,
    DecodeError,
    MalformedFrame,
    APIError,
    APIUnauthorizedError,
    APIForbiddenError,
    APINotFoundError,
    APIConflictError,
    APIGoneError,
    is_not_found,
)
from kubetype.clients.api import (
    EOS,
)
from kubetype.clients.auth import (
    APIContext,
    connected,
)
from kubetype.clients.login import (
    login,
    login_with_kubeconfig,
    login_with_service_account,
)
from kubetype.clients.watching import (
    WatchEvent,
    iter_events,
    streaming_watch,
    watch_objs,
)
from kubetype.clients.fetching import (
    list_objs,
    read_obj,
)
from kubetype.clients.creating import (
    create_obj,
)
from kubetype.clients.updating import (
    update_obj,
)
from kubetype.clients.deleting import (
    delete_obj,
)
from kubetype.clients.typed import (
    Client,
    ResourceAPI,
)
from kubetype.engines.loggers import (
    LogFormat,
    configure,
)
from kubetype.helpers.typedefs import (
    Logger,
)
from kubetype.helpers.versions import (
    version as __version__,
)

__all__ = [
    'objects', 'resources',
    'ClientSettings', 'NetworkingSettings', 'WatchingSettings',
    'ConnectionInfo', 'LoginError',
    'Namespace', 'NamespaceName', 'Resource',
    'FieldSelector', 'LabelSelector', 'ListOptions', 'WatchOptions', 'encode_query',
    'ClientError', 'InvalidArgumentError', 'APIConnectionError',
    'DecodeError', 'MalformedFrame',
    'APIError', 'APIUnauthorizedError', 'APIForbiddenError',
    'APINotFoundError', 'APIConflictError', 'APIGoneError',
    'is_not_found',
    'EOS',
    'APIContext', 'connected',
    'login', 'login_with_kubeconfig', 'login_with_service_account',
    'WatchEvent', 'iter_events', 'streaming_watch', 'watch_objs',
    'list_objs', 'read_obj', 'create_obj', 'update_obj', 'delete_obj',
    'Client', 'ResourceAPI',
    'LogFormat', 'configure',
    'Logger',
    '__version__',
]
