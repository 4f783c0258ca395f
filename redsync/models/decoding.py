"""
Decoding of the raw Redfish documents into the typed resources, and back.

The typed resources are dataclasses, whose fields are declared with `wire`,
i.e. with the name of the JSON key on the wire. The accepted shapes of the
values are derived from the type hints of the fields:

* ``str`` accepts strings only; ``bool`` accepts booleans only;
* ``int`` accepts integers only (but not booleans, not floats);
* ``float`` accepts both integers and floats (but not booleans);
* ``str``-based enums accept strings: the known values become the enum's
  members, the unknown ones are kept as the raw strings (vendors extend
  the enumerations on their own, and it is not an error);
* `Link` accepts ``{"@odata.id": "..."}`` and keeps the URI only;
* ``List[...]`` accepts lists, nested dataclasses accept objects,
  ``Any`` and ``Dict[str, Any]`` accept anything (e.g. for ``Oem``).

JSON ``null`` and the absent keys both leave the field's default value.
The unknown keys are ignored. This is not a schema validator.

Some firmware sends the fields of the same logical type in different shapes.
Specifically, ``MemberId`` comes as a string from some vendors, and as
an integer from others. The classes list such fields in their ``divergent``
set. If the canonical decoding fails exactly at one of those fields,
the decoding of that object is retried once with those fields widened
to accept integers, which are then normalised to strings. If the retry
fails too, the original error is raised: it is the one that makes sense
to a reader of the document.
"""
import collections.abc
import dataclasses
import enum
import functools
import json
from typing import Any, Collection, Dict, FrozenSet, Mapping, \
                   NewType, Optional, Type, TypeVar, Union, get_args, get_origin, get_type_hints

from redsync.structs import bodies, dicts

Link = NewType('Link', str)
""" A URI of another resource, as decoded from ``{"@odata.id": "..."}``. """

WIRE = 'redsync.wire'
IDENTITY = 'redsync.identity'

_T = TypeVar('_T')


class DecodeError(ValueError):
    """ A raw document cannot be decoded into a typed resource. """


class ShapeError(DecodeError):
    """ A value in the document does not have the shape the field expects. """

    def __init__(self, path: dicts.FieldPath, expected: str, got: Any) -> None:
        self.path = tuple(path)
        self.expected = expected
        self.got = got
        super().__init__(f"Expected {expected} at {dicts.format_field(self.path)}, "
                         f"got {_describe(got)}: {got!r}")


def wire(
        name: str,
        *,
        default: Any = dataclasses.MISSING,
        default_factory: Any = dataclasses.MISSING,
        identity: bool = False,
) -> Any:
    """
    Declare a dataclass field with its JSON key on the wire.

    The identity fields are assigned once at decoding, and cannot be
    re-assigned later (see `redsync.models.entities.Entity`).
    """
    if default is dataclasses.MISSING and default_factory is dataclasses.MISSING:
        raise TypeError(f"The field {name!r} must have a default: absent keys are not errors.")
    metadata = {WIRE: name, IDENTITY: identity}
    if default_factory is not dataclasses.MISSING:
        return dataclasses.field(default_factory=default_factory, metadata=metadata)
    return dataclasses.field(default=default, metadata=metadata)


@functools.lru_cache(maxsize=None)
def wire_fields(cls: type) -> Dict[str, "dataclasses.Field[Any]"]:
    """ All the wired fields of a class, keyed by their wire names, in declaration order. """
    return {field.metadata[WIRE]: field
            for field in dataclasses.fields(cls)
            if WIRE in field.metadata}


@functools.lru_cache(maxsize=None)
def field_hints(cls: type) -> Dict[str, Any]:
    return get_type_hints(cls)


def decode(
        cls: Type[_T],
        raw: Union[bytes, str],
        *,
        client: Any = None,
) -> _T:
    """
    Decode a raw JSON document (as received from the API) into a resource.

    The raw document is kept in the resource as its snapshot, as is,
    and the client is bound to the resource and all its nested resources.
    """
    data = raw.encode('utf-8') if isinstance(raw, str) else bytes(raw)
    try:
        value = json.loads(data)
    except ValueError as e:
        raise DecodeError(f"Malformed JSON document for {cls.__name__}: {e}") from e
    return decode_object(cls, value, (), client=client, snapshot=data)


def decode_object(
        cls: Type[_T],
        value: Any,
        path: dicts.FieldPath,
        *,
        client: Any = None,
        snapshot: Optional[bytes] = None,
) -> _T:
    if not isinstance(value, collections.abc.Mapping):
        raise ShapeError(path, 'object', value)
    if snapshot is None:
        snapshot = json.dumps(value, separators=(',', ':')).encode('utf-8')

    try:
        return _build(cls, value, path, client=client, snapshot=snapshot, widened=frozenset())
    except ShapeError as e:
        divergent: Collection[str] = getattr(cls, 'divergent', frozenset())
        if not any(e.path == path + (name,) for name in divergent):
            raise
        try:
            return _build(cls, value, path, client=client, snapshot=snapshot, widened=divergent)
        except ShapeError:
            raise e from None


def _build(
        cls: Type[_T],
        value: Mapping[str, Any],
        path: dicts.FieldPath,
        *,
        client: Any,
        snapshot: bytes,
        widened: Collection[str],
) -> _T:
    hints = field_hints(cls)
    kwargs: Dict[str, Any] = {}
    for name, field in wire_fields(cls).items():
        if not field.init or value.get(name) is None:
            continue
        kwargs[field.name] = decode_value(hints[field.name], value[name], path + (name,),
                                          client=client, lenient=name in widened)
    result = cls(**kwargs)

    adopt = getattr(result, '_adopt', None)
    if adopt is not None:
        adopt(snapshot=snapshot, client=client)
    return result


def decode_value(
        hint: Any,
        value: Any,
        path: dicts.FieldPath,
        *,
        client: Any = None,
        lenient: bool = False,
) -> Any:
    origin = get_origin(hint)
    if hint is Any:
        return value
    elif origin is Union:
        if value is None:
            return None
        hints = [arg for arg in get_args(hint) if arg is not type(None)]
        if len(hints) != 1:
            raise TypeError(f"Only Optional[...] unions are supported, got {hint!r}.")
        return decode_value(hints[0], value, path, client=client, lenient=lenient)
    elif hint is Link:
        if not isinstance(value, collections.abc.Mapping):
            raise ShapeError(path, 'link', value)
        uri = value.get(bodies.ODATA_ID) or ''
        if not isinstance(uri, str):
            raise ShapeError(path + (bodies.ODATA_ID,), 'string', uri)
        return Link(uri)
    elif origin in (list, tuple) or hint in (list, tuple):
        if not isinstance(value, list):
            raise ShapeError(path, 'list', value)
        args = get_args(hint)
        item_hint = args[0] if args else Any
        return [decode_value(item_hint, item, path + (index,), client=client)
                for index, item in enumerate(value)]
    elif origin in (dict, collections.abc.Mapping) or hint in (dict, Mapping):
        if not isinstance(value, collections.abc.Mapping):
            raise ShapeError(path, 'object', value)
        return dict(value)
    elif dataclasses.is_dataclass(hint):
        return decode_object(hint, value, path, client=client)
    elif isinstance(hint, type) and issubclass(hint, enum.Enum):
        if not isinstance(value, str):
            raise ShapeError(path, f'string ({hint.__name__})', value)
        try:
            return hint(value)
        except ValueError:
            return value
    elif hint is bool:
        if not isinstance(value, bool):
            raise ShapeError(path, 'boolean', value)
        return value
    elif hint is int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise ShapeError(path, 'integer', value)
        return value
    elif hint is float:
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise ShapeError(path, 'number', value)
        try:
            return float(value)
        except OverflowError as e:
            raise ShapeError(path, 'number', value) from e
    elif hint is str:
        if isinstance(value, str):
            return value
        elif lenient and isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        raise ShapeError(path, 'string', value)
    else:
        raise TypeError(f"Unsupported type of a wired field: {hint!r}")


def encode(value: Any, hint: Any = Any) -> Any:
    """
    Convert a typed value back to its JSON-compatible wire form.

    The dataclasses become objects keyed by the wire names, the enums become
    their values, the links become ``{"@odata.id": "..."}``.
    It is used for the patches and for printing the resources.
    """
    if value is None:
        return None
    elif hint is Link:
        return {bodies.ODATA_ID: value} if value else {}
    elif isinstance(value, enum.Enum):
        return value.value
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        hints = field_hints(type(value))
        return {name: encode(getattr(value, field.name), hints[field.name])
                for name, field in wire_fields(type(value)).items()}
    elif isinstance(value, (list, tuple)):
        args = get_args(hint)
        return [encode(item, args[0] if args else Any) for item in value]
    elif isinstance(value, collections.abc.Mapping):
        return {key: encode(val) for key, val in value.items()}
    else:
        return value


def encode_field(obj: Any, name: str) -> Any:
    """ Encode one field of a resource by its wire name. """
    field = wire_fields(type(obj))[name]
    return encode(getattr(obj, field.name), field_hints(type(obj))[field.name])


@functools.lru_cache(maxsize=None)
def identity_names(cls: type) -> FrozenSet[str]:
    """ The attribute names of the identity fields (not the wire names). """
    return frozenset(field.name for field in dataclasses.fields(cls)
                     if field.metadata.get(IDENTITY))


def _describe(value: Any) -> str:
    if value is None:
        return 'null'
    elif isinstance(value, bool):
        return 'boolean'
    elif isinstance(value, (int, float)):
        return 'number'
    elif isinstance(value, str):
        return 'string'
    elif isinstance(value, collections.abc.Mapping):
        return 'object'
    elif isinstance(value, list):
        return 'list'
    else:
        return type(value).__name__
