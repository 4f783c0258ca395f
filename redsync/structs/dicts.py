"""
Some basic dicts and field-in-a-dict manipulation helpers.

Redfish field names contain dots on their own (``@odata.id``,
``Members@odata.count``), so the string notation of nested fields
uses slashes, as in JSON pointers and in Redfish URI fragments
(e.g. ``PowerControl/0/PowerLimit``).
"""
from typing import Any, List, MutableMapping, Tuple, Union

FieldKey = Union[str, int]
FieldPath = Tuple[FieldKey, ...]
FieldSpec = Union[None, str, FieldPath, List[FieldKey]]


def parse_field(
        field: FieldSpec,
) -> FieldPath:
    """
    Convert any field into a tuple of nested sub-fields.

    Supported notations:

    * ``None`` (for root of a dict).
    * ``"field/subfield"`` (a leading slash is ignored)
    * ``("field", "subfield")``
    * ``["field", "subfield"]``
    """
    if field is None:
        return tuple()
    elif isinstance(field, str):
        return tuple(key for key in field.lstrip('/').split('/') if key) if field else tuple()
    elif isinstance(field, (list, tuple)):
        return tuple(field)
    else:
        raise ValueError(f"Field must be either a str, or a list/tuple. Got {field!r}")


def format_field(
        field: FieldSpec,
) -> str:
    """ The inverse of `parse_field`: a slash-separated path for messages. """
    return '/' + '/'.join(str(key) for key in parse_field(field))


def ensure(
        d: MutableMapping[Any, Any],
        field: FieldSpec,
        value: Any,
) -> None:
    """
    Force-set a nested sub-field in a dict.

    If some levels of parents are missing, they are created as empty dicts
    (this what makes it "ensuring", not just "setting").
    """
    result = d
    path = parse_field(field)
    if not path:
        raise ValueError("Setting a root of a dict is impossible. Provide the specific fields.")
    for key in path[:-1]:
        try:
            result = result[key]
        except KeyError:
            result = result.setdefault(key, {})
    result[path[-1]] = value
