import asyncio
import functools
import sys
from typing import Any, Callable, Optional

import click
import yaml

from kubetype.clients import auth, errors, login, typed
from kubetype.engines import loggers
from kubetype.structs import credentials, objects, references, resources, selectors


class LogFormatParamType(click.Choice):

    def __init__(self) -> None:
        super().__init__(choices=[v.name.lower() for v in loggers.LogFormat])

    def convert(self, value: Any, param: Any, ctx: Any) -> loggers.LogFormat:
        name: str = super().convert(value, param, ctx)
        return loggers.LogFormat[name.upper()]


class ResourceParamType(click.ParamType):
    name = 'kind'

    def convert(self, value: Any, param: Any, ctx: Any) -> references.Resource:  # type: ignore[type-arg]
        if isinstance(value, references.Resource):
            return value
        key = str(value).lower()
        for resource in resources.BUILTINS.values():
            if key in (resource.plural, resource.kind.lower()):
                return resource
        self.fail(f"Unknown resource kind: {value!r}. "
                  f"Known ones: {', '.join(sorted(resources.BUILTINS))}.", param, ctx)


class SelectorParamType(click.ParamType):
    name = 'selector'

    def __init__(self, cls: Any) -> None:
        super().__init__()
        self.cls = cls

    def convert(self, value: Any, param: Any, ctx: Any) -> Any:
        if isinstance(value, self.cls):
            return value
        try:
            return self.cls.parse(str(value))
        except errors.InvalidArgumentError as e:
            self.fail(str(e), param, ctx)


def logging_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to configure logging in all commands the same way."""
    @click.option('-v', '--verbose', is_flag=True)
    @click.option('-d', '--debug', is_flag=True)
    @click.option('-q', '--quiet', is_flag=True)
    @click.option('--log-format', type=LogFormatParamType(), default='full')
    @click.option('--log-refkey', type=str)
    @click.option('--log-prefix/--no-log-prefix', default=None)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(verbose: bool, quiet: bool, debug: bool,
                log_format: loggers.LogFormat = loggers.LogFormat.FULL,
                log_prefix: Optional[bool] = False,
                log_refkey: Optional[str] = None,
                *args: Any, **kwargs: Any) -> Any:
        loggers.configure(debug=debug, verbose=verbose, quiet=quiet,
                          log_format=log_format, log_refkey=log_refkey, log_prefix=log_prefix)
        return fn(*args, **kwargs)

    return wrapper


def connection_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to login and to handle the API errors in all commands the same way."""
    @click.option('--kubeconfig', type=str, envvar='KUBECONFIG', default=None)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(kubeconfig: Optional[str], *args: Any, **kwargs: Any) -> Any:
        try:
            info = login.login(kubeconfig=kubeconfig)
            return asyncio.run(fn(*args, info=info, **kwargs))
        except (credentials.LoginError, errors.ClientError) as e:
            raise click.ClickException(str(e)) from e

    return wrapper


@click.version_option(prog_name='kubetype')
@click.group(name='kubetype', context_settings=dict(
    auto_envvar_prefix='KUBETYPE',
))
def main() -> None:
    pass


@main.command()
@logging_options
@connection_options
@click.option('-n', '--namespace', type=str, default=None)
@click.argument('kind', type=ResourceParamType())
@click.argument('name', type=str)
async def get(
        info: credentials.ConnectionInfo,
        kind: references.Resource,  # type: ignore[type-arg]
        name: str,
        namespace: Optional[str],
) -> None:
    """ Print one object as YAML. """
    async with auth.connected(info) as context:
        client = typed.Client(context=context)
        obj = await client.resource(kind).get(name, namespace=_ns(namespace))
        click.echo(yaml.safe_dump(obj.to_raw(), sort_keys=False), nl=False)


@main.command(name='list')
@logging_options
@connection_options
@click.option('-n', '--namespace', type=str, default=None)
@click.option('-l', '--selector', 'label_selector', type=SelectorParamType(selectors.LabelSelector))
@click.option('--field-selector', type=SelectorParamType(selectors.FieldSelector))
@click.argument('kind', type=ResourceParamType())
async def list_(
        info: credentials.ConnectionInfo,
        kind: references.Resource,  # type: ignore[type-arg]
        namespace: Optional[str],
        label_selector: Optional[selectors.LabelSelector],
        field_selector: Optional[selectors.FieldSelector],
) -> None:
    """ Print the objects as a YAML list. """
    async with auth.connected(info) as context:
        client = typed.Client(context=context)
        objs = await client.resource(kind).list(
            namespace=_ns(namespace),
            label_selector=label_selector,
            field_selector=field_selector,
        )
        click.echo(yaml.safe_dump(objs.to_raw(), sort_keys=False), nl=False)


@main.command()
@logging_options
@connection_options
@click.option('-n', '--namespace', type=str, default=None)
@click.option('-l', '--selector', 'label_selector', type=SelectorParamType(selectors.LabelSelector))
@click.option('--field-selector', type=SelectorParamType(selectors.FieldSelector))
@click.option('--since', 'resource_version', type=str, default=None)
@click.option('--initial', 'send_initial_events', is_flag=True)
@click.option('--timeout', 'timeout_seconds', type=int, default=None)
@click.argument('kind', type=ResourceParamType())
async def watch(
        info: credentials.ConnectionInfo,
        kind: references.Resource,  # type: ignore[type-arg]
        namespace: Optional[str],
        label_selector: Optional[selectors.LabelSelector],
        field_selector: Optional[selectors.FieldSelector],
        resource_version: Optional[str],
        send_initial_events: bool,
        timeout_seconds: Optional[int],
) -> None:
    """ Print one line per event until the server closes the stream. """
    options = selectors.WatchOptions(
        label_selector=label_selector,
        field_selector=field_selector,
        resource_version=resource_version,
        send_initial_events=send_initial_events,
        timeout_seconds=timeout_seconds,
    )
    async with auth.connected(info) as context:
        client = typed.Client(context=context)
        async for event in client.resource(kind).stream(namespace=_ns(namespace), options=options):
            try:
                obj = event.decode()
            except errors.ClientError as e:
                click.echo(f"{event.type or '?'} {e}", file=sys.stderr)
            else:
                click.echo(_describe(event.type, obj))


def _ns(namespace: Optional[str]) -> references.Namespace:
    return references.NamespaceName(namespace) if namespace else None


def _describe(type: Optional[str], obj: objects.Object) -> str:
    where = f'{obj.namespace}/{obj.name}' if obj.namespace else f'{obj.name}'
    return f"{type} {where} {obj.resource_version or ''}".rstrip()
