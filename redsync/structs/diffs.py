"""
All the functions to calculate the diffs of the encoded resource fields.

The diffs are calculated on the JSON-compatible (encoded) values,
i.e. after the typed model values are mapped back to their wire form,
so that the diffs use the same field names as the remote side does.
"""
import collections.abc
import enum
from typing import Any, Iterable, Iterator, NamedTuple, Tuple

from redsync.structs import dicts


class DiffOperation(str, enum.Enum):
    ADD = 'add'
    CHANGE = 'change'
    REMOVE = 'remove'

    def __str__(self) -> str:
        return str(self.value)


class DiffItem(NamedTuple):
    operation: DiffOperation
    field: dicts.FieldPath
    old: Any
    new: Any


class Diff(Tuple[DiffItem, ...]):
    """ An immutable sequence of diff items, comparable to plain tuples. """

    def __new__(cls, items: Iterable[Iterable[Any]] = ()) -> "Diff":
        return super().__new__(cls, (
            DiffItem(DiffOperation(op), dicts.parse_field(field), old, new)
            for op, field, old, new in items
        ))


def diff_iter(
        a: Any,
        b: Any,
        path: dicts.FieldPath = (),
) -> Iterator[DiffItem]:
    """
    Calculate the diff between two encoded values.

    Yields the items of form ``(op, path, old, new)``, with ``None`` as
    the old value for additions and as the new value for removals.
    The added keys go first, then the removed ones (both sorted),
    then the changes of the common keys in the order of the old value.

    Lists are compared as a whole, never item by item: merge-patches
    replace the arrays entirely anyway.
    """
    if a == b:
        return
    elif a is None:
        yield DiffItem(DiffOperation.ADD, path, a, b)
    elif b is None:
        yield DiffItem(DiffOperation.REMOVE, path, a, b)
    elif isinstance(a, collections.abc.Mapping) and isinstance(b, collections.abc.Mapping):
        for key in sorted(set(b) - set(a)):
            yield from diff_iter(None, b[key], path=path + (key,))
        for key in sorted(set(a) - set(b)):
            yield from diff_iter(a[key], None, path=path + (key,))
        for key in a:
            if key in b:
                yield from diff_iter(a[key], b[key], path=path + (key,))
    else:
        yield DiffItem(DiffOperation.CHANGE, path, a, b)
