"""
Server-side filters of the list & watch requests, and their query encoding.

Both the label selectors and the field selectors are conjunctive equalities
(``key=value``, all ANDed); the API interprets them, not the client.

The encoding is deterministic: the same filters always produce byte-identical
queries (the keys are sorted). The API does not care about the order,
but the stable queries are easier to test and to read in the logs.
"""
import dataclasses
import urllib.parse
from typing import Dict, Mapping, Optional, Union

from kubetype.clients import errors


def _parse_equalities(text: str) -> Dict[str, str]:
    result: Dict[str, str] = {}
    for clause in text.split(','):
        clause = clause.strip()
        if not clause:
            continue
        key, eq, value = clause.partition('=')
        if not eq or not key.strip():
            raise errors.InvalidArgumentError(f"Unsupported selector clause: {clause!r}")
        result[key.strip()] = value.lstrip('=').strip()  # "==" is the same as "="
    return result


def _join_equalities(equalities: Mapping[str, str]) -> str:
    return ','.join(f'{key}={value}' for key, value in sorted(equalities.items()))


@dataclasses.dataclass(frozen=True)
class LabelSelector:
    """
    A label selector: ``{key: value}`` pairs, all of which must match.
    """
    match_labels: Mapping[str, str] = dataclasses.field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.match_labels)

    @classmethod
    def parse(cls, text: str) -> "LabelSelector":
        return cls(match_labels=_parse_equalities(text))

    def encode(self) -> str:
        return _join_equalities(self.match_labels)


@dataclasses.dataclass(frozen=True)
class FieldSelector:
    """
    A field selector: ``{field path: value}`` pairs, e.g. ``{'spec.nodeName': 'n1'}``.
    """
    fields: Mapping[str, str] = dataclasses.field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.fields)

    @classmethod
    def parse(cls, text: str) -> "FieldSelector":
        return cls(fields=_parse_equalities(text))

    def encode(self) -> str:
        return _join_equalities(self.fields)


# Plain mappings are accepted wherever the selectors are, for convenience.
LabelSelectorLike = Union[LabelSelector, Mapping[str, str]]
FieldSelectorLike = Union[FieldSelector, Mapping[str, str]]


@dataclasses.dataclass(frozen=True)
class ListOptions:
    label_selector: Optional[LabelSelectorLike] = None
    field_selector: Optional[FieldSelectorLike] = None


@dataclasses.dataclass(frozen=True)
class WatchOptions(ListOptions):

    resource_version: Optional[str] = None
    """
    Deliver only the changes strictly newer than this resource version.
    """

    send_initial_events: bool = False
    """
    Deliver the current state as synthetic ``ADDED`` events before the changes.
    """

    timeout_seconds: Optional[int] = None
    """
    Ask the server to close the stream after this many seconds.
    """


def _encode_labels(selector: Optional[LabelSelectorLike]) -> str:
    if selector is None:
        return ''
    elif isinstance(selector, LabelSelector):
        return selector.encode()
    else:
        return _join_equalities(selector)


def _encode_fields(selector: Optional[FieldSelectorLike]) -> str:
    if selector is None:
        return ''
    elif isinstance(selector, FieldSelector):
        return selector.encode()
    else:
        return _join_equalities(selector)


def build_params(
        label_selector: Optional[LabelSelectorLike] = None,
        field_selector: Optional[FieldSelectorLike] = None,
        watch_options: Optional[WatchOptions] = None,
) -> Dict[str, str]:
    """
    Build the query params of a list/watch request, in a fixed order.

    The absent or empty filters contribute nothing. The watch options,
    if given, turn the request into a watch request; their own selectors
    are used unless the selectors are passed explicitly.
    """
    if watch_options is not None:
        if label_selector is None:
            label_selector = watch_options.label_selector
        if field_selector is None:
            field_selector = watch_options.field_selector

    params: Dict[str, str] = {}

    labels = _encode_labels(label_selector)
    if labels:
        params['labelSelector'] = labels

    fields = _encode_fields(field_selector)
    if fields:
        params['fieldSelector'] = fields

    if watch_options is not None:
        params['watch'] = 'true'
        if watch_options.resource_version:
            params['resourceVersion'] = watch_options.resource_version
        if watch_options.send_initial_events:
            params['resourceVersionMatch'] = 'NotOlderThan'
            params['sendInitialEvents'] = 'true'
        if watch_options.timeout_seconds is not None:
            params['timeoutSeconds'] = str(int(watch_options.timeout_seconds))

    return params


def encode_query(
        label_selector: Optional[LabelSelectorLike] = None,
        field_selector: Optional[FieldSelectorLike] = None,
        watch_options: Optional[WatchOptions] = None,
) -> str:
    """ The same as `build_params`, but rendered as a URL query (without ``?``). """
    params = build_params(label_selector, field_selector, watch_options)
    return urllib.parse.urlencode(params, encoding='utf-8')


def list_params(options: Optional[ListOptions]) -> Dict[str, str]:
    # NB: even if these are watch options, the watching params are not used in listing.
    if options is None:
        return {}
    return build_params(options.label_selector, options.field_selector)


def watch_params(options: Optional[WatchOptions]) -> Dict[str, str]:
    return build_params(watch_options=options if options is not None else WatchOptions())
